from __future__ import annotations

import random
from typing import Iterable, Sequence

from chromadrop.components.board import Board
from chromadrop.config import GameConfig
from chromadrop.game import PuzzleGame

TILE = 64

# 5x6 layout without any run of three: row r is the palette shifted by 2*r.
BASE_ROWS = [[(2 * r + c) % 6 for c in range(6)] for r in range(5)]


class ScriptedRandom(random.Random):
    """Random whose randrange replays scripted values first, then falls back to the seed."""

    def __init__(self, values: Iterable[int] = (), seed: int = 0):
        super().__init__(seed)
        self.scripted = list(values)

    def randrange(self, *args, **kwargs):
        if self.scripted:
            return self.scripted.pop(0)
        return super().randrange(*args, **kwargs)


def make_game(
    rows: Sequence[Sequence[int]] = BASE_ROWS,
    refill: Iterable[int] = (),
    **options,
) -> PuzzleGame:
    """Game loaded with an explicit layout; refill values are handed out in column order."""
    config = GameConfig.from_options({
        "width": len(rows[0]),
        "height": len(rows),
        "settleInitialBoard": False,
        **options,
    })
    game = PuzzleGame(config, rng=random.Random(7))
    game.load_board(Board.from_rows(rows, config.color_count))
    setattr(game.world, "random", ScriptedRandom(refill))
    return game


def cell_center(row: int, col: int, tile: int = TILE) -> tuple[float, float]:
    return (col + 0.5) * tile, (row + 0.5) * tile


def record(bus, name: str) -> list[dict]:
    received: list[dict] = []
    bus.subscribe(name, lambda sender, **k: received.append(k))
    return received
