from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, List, Optional, Set, Tuple

from chromadrop.components.board import Board, Position
from chromadrop.constants import MIN_MATCH_LENGTH, RESPAWN_MAX_ATTEMPTS

MatchSet = FrozenSet[Position]
ColorEntry = Tuple[int, int, int]


@dataclass(slots=True)
class GravityMove:
    source: Position
    target: Position
    color: int


@dataclass(slots=True)
class RefillOutcome:
    """Result of one gravity step: the new board plus what moved and what spawned."""
    board: Board
    cleared: List[ColorEntry]
    moves: List[GravityMove]
    new_tiles: List[Position]


def _rng_or_default(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else random.Random()


def initialize_board(rows: int, cols: int, color_count: int, rng: random.Random | None = None) -> Board:
    """Fill every cell with a uniformly random color index; matches are allowed."""
    rng = _rng_or_default(rng)
    cells = tuple(rng.randrange(color_count) for _ in range(rows * cols))
    return Board(rows=rows, cols=cols, color_count=color_count, cells=cells)


def _line_runs(values: Tuple[int, ...]) -> List[Tuple[int, int]]:
    """Return (start, length) for every run of equal values at least MIN_MATCH_LENGTH long."""
    runs: List[Tuple[int, int]] = []
    if not values:
        return runs
    start = 0
    for idx in range(1, len(values)):
        if values[idx] != values[start]:
            if idx - start >= MIN_MATCH_LENGTH:
                runs.append((start, idx - start))
            start = idx
    # Run that reaches the last cell never hits the color-changed branch above.
    if len(values) - start >= MIN_MATCH_LENGTH:
        runs.append((start, len(values) - start))
    return runs


def _match_runs(board: Board) -> List[List[Position]]:
    runs: List[List[Position]] = []
    # Horizontal runs
    for r in range(board.rows):
        for start, length in _line_runs(board.row_values(r)):
            runs.append([(r, c) for c in range(start, start + length)])
    # Vertical runs
    for c in range(board.cols):
        for start, length in _line_runs(board.column_values(c)):
            runs.append([(r, c) for r in range(start, start + length)])
    return runs


def find_matches(board: Board) -> MatchSet:
    """Detect all cells in horizontal or vertical runs of length >= 3, deduplicated."""
    return frozenset(pos for run in _match_runs(board) for pos in run)


def find_match_groups(board: Board) -> List[List[Position]]:
    """Group matched cells: runs sharing a cell (L, T or cross shapes) merge into one group."""
    runs = _match_runs(board)
    if not runs:
        return []
    groups = [set(run) for run in runs]
    merged: List[Set[Position]] = []
    while groups:
        first = groups.pop()
        changed = True
        while changed:
            changed = False
            for g in groups[:]:
                if first & g:
                    first |= g
                    groups.remove(g)
                    changed = True
        merged.append(first)
    return sorted(sorted(group) for group in merged)


def clear_and_refill_detailed(
    board: Board,
    matches: Iterable[Position],
    rng: random.Random | None = None,
) -> RefillOutcome:
    """Remove matched cells, drop survivors to the bottom of each column and refill the top."""
    marked = set(matches)
    if not marked:
        return RefillOutcome(board=board, cleared=[], moves=[], new_tiles=[])
    for pos in marked:
        if not board.in_bounds(pos):
            raise ValueError(f"Match position {pos} outside {board.rows}x{board.cols} board")
    rng = _rng_or_default(rng)
    cleared = sorted((r, c, board.at((r, c))) for r, c in marked)
    cells: List[Optional[int]] = list(board.cells)
    for r, c in marked:
        cells[board.index(r, c)] = None
    moves: List[GravityMove] = []
    new_tiles: List[Position] = []
    for col in range(board.cols):
        # Surviving rows, top to bottom; None marks a removed cell.
        survivors = [r for r in range(board.rows) if cells[board.index(r, col)] is not None]
        colors = [cells[board.index(r, col)] for r in survivors]
        vacated = board.rows - len(survivors)
        for offset, (source_row, color) in enumerate(zip(survivors, colors)):
            target_row = vacated + offset
            cells[board.index(target_row, col)] = color
            if target_row != source_row:
                moves.append(GravityMove(source=(source_row, col), target=(target_row, col), color=color))
        for row in range(vacated):
            cells[board.index(row, col)] = rng.randrange(board.color_count)
            new_tiles.append((row, col))
    return RefillOutcome(board=board.replace_cells(cells), cleared=cleared, moves=moves, new_tiles=sorted(new_tiles))


def clear_and_refill(board: Board, matches: Iterable[Position], rng: random.Random | None = None) -> Board:
    return clear_and_refill_detailed(board, matches, rng).board


def is_adjacent(a: Position, b: Position) -> bool:
    """Chebyshev neighbours: orthogonal and diagonal cells, never the cell itself."""
    ar, ac = a
    br, bc = b
    return max(abs(ar - br), abs(ac - bc)) == 1


def is_valid_swap(board: Board, src: Position, dst: Position) -> bool:
    return board.in_bounds(src) and board.in_bounds(dst) and is_adjacent(src, dst)


def swap_cells(board: Board, src: Position, dst: Position) -> Board:
    return board.swapped(src, dst)


def respawn_board_without_matches(
    rows: int,
    cols: int,
    color_count: int,
    rng: random.Random | None = None,
    *,
    max_attempts: int = RESPAWN_MAX_ATTEMPTS,
) -> Board:
    """Build a fresh board that contains no horizontal or vertical run of three."""
    rng = _rng_or_default(rng)
    choices = list(range(color_count))
    for _ in range(max_attempts):
        layout: List[List[int]] = []
        valid_layout = True
        for row in range(rows):
            row_values: List[int] = []
            for col in range(cols):
                available = choices
                if col >= 2:
                    left1 = row_values[col - 1]
                    left2 = row_values[col - 2]
                    if left1 == left2:
                        available = [t for t in available if t != left1]
                if row >= 2:
                    up1 = layout[row - 1][col]
                    up2 = layout[row - 2][col]
                    if up1 == up2:
                        available = [t for t in available if t != up1]
                if not available:
                    valid_layout = False
                    break
                row_values.append(rng.choice(available))
            if not valid_layout:
                break
            layout.append(row_values)
        if not valid_layout:
            continue
        board = Board.from_rows(layout, color_count)
        if not find_matches(board):
            return board
    raise RuntimeError("Unable to respawn board without matches")


def resolve_cascade(
    board: Board,
    rng: random.Random | None = None,
    *,
    max_steps: int,
    on_step: Callable[[int, RefillOutcome], None] | None = None,
) -> Board:
    """Detect, clear and refill until the board has no matches; no pacing between steps.

    After ``max_steps`` gravity steps with matches still present, the board is
    replaced by a match-free respawn so the result is always settled.
    """
    rng = _rng_or_default(rng)
    depth = 0
    while True:
        matches = find_matches(board)
        if not matches:
            return board
        if depth >= max_steps:
            return respawn_board_without_matches(board.rows, board.cols, board.color_count, rng)
        depth += 1
        outcome = clear_and_refill_detailed(board, matches, rng)
        board = outcome.board
        if on_step is not None:
            on_step(depth, outcome)
