from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Iterator, Sequence, Tuple

Position = Tuple[int, int]


@dataclass(frozen=True, slots=True)
class Board:
    """Immutable grid of color indices stored row-major in a flat tuple.

    Every transform returns a new Board, so callers never share mutable rows.
    Construction validates dimensions and color range; a malformed board raises
    ValueError instead of existing.
    """
    rows: int
    cols: int
    color_count: int
    cells: Tuple[int, ...]

    def __post_init__(self) -> None:
        if self.rows < 1 or self.cols < 1:
            raise ValueError(f"Board dimensions must be positive, got {self.rows}x{self.cols}")
        if self.color_count < 1:
            raise ValueError(f"color_count must be positive, got {self.color_count}")
        if not isinstance(self.cells, tuple):
            object.__setattr__(self, "cells", tuple(self.cells))
        if len(self.cells) != self.rows * self.cols:
            raise ValueError(
                f"Board expects {self.rows * self.cols} cells, got {len(self.cells)}"
            )
        for idx, value in enumerate(self.cells):
            if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value < self.color_count:
                row, col = divmod(idx, self.cols)
                raise ValueError(f"Invalid color {value!r} at {(row, col)}")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]], color_count: int) -> "Board":
        if not rows:
            raise ValueError("Board needs at least one row")
        width = len(rows[0])
        flat: list[int] = []
        for row in rows:
            if len(row) != width:
                raise ValueError("All board rows must have the same length")
            flat.extend(row)
        return cls(rows=len(rows), cols=width, color_count=color_count, cells=tuple(flat))

    def index(self, row: int, col: int) -> int:
        return row * self.cols + col

    def in_bounds(self, pos: Position) -> bool:
        row, col = pos
        return 0 <= row < self.rows and 0 <= col < self.cols

    def at(self, pos: Position) -> int:
        if not self.in_bounds(pos):
            raise IndexError(f"Position {pos} outside {self.rows}x{self.cols} board")
        return self.cells[self.index(*pos)]

    def positions(self) -> Iterator[Position]:
        for r in range(self.rows):
            for c in range(self.cols):
                yield (r, c)

    def row_values(self, row: int) -> Tuple[int, ...]:
        start = row * self.cols
        return self.cells[start:start + self.cols]

    def column_values(self, col: int) -> Tuple[int, ...]:
        return self.cells[col::self.cols]

    def to_rows(self) -> Tuple[Tuple[int, ...], ...]:
        return tuple(self.row_values(r) for r in range(self.rows))

    def replace_cells(self, cells: Iterable[int]) -> "Board":
        return Board(rows=self.rows, cols=self.cols, color_count=self.color_count, cells=tuple(cells))

    def swapped(self, a: Position, b: Position) -> "Board":
        """Return a copy with the contents of a and b exchanged."""
        if not (self.in_bounds(a) and self.in_bounds(b)):
            raise IndexError(f"Cannot swap {a} and {b} on a {self.rows}x{self.cols} board")
        cells = list(self.cells)
        ia = self.index(*a)
        ib = self.index(*b)
        cells[ia], cells[ib] = cells[ib], cells[ia]
        return self.replace_cells(cells)
