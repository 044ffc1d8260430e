"""Entry point for a headless Chromadrop session.

Builds the game, settles the opening board, then plays a few random drags and
prints each settled board using the palette names.
"""
import logging
import random

from chromadrop.constants import color_name
from chromadrop.events.bus import EVENT_CASCADE_STEP
from chromadrop.game import PuzzleGame
from chromadrop.utils.board_geometry import region_for_tiles

TILE_SIZE = 64


def format_board(board) -> str:
    lines = []
    for row in board.to_rows():
        lines.append(" ".join(f"{color_name(value):>7}" for value in row))
    return "\n".join(lines)


def main(drags: int = 3, seed: int | None = None) -> None:
    logging.basicConfig(level=logging.INFO)
    rng = random.Random(seed)
    game = PuzzleGame(rng=rng)
    region = region_for_tiles(game.config.height, game.config.width, TILE_SIZE)
    game.event_bus.subscribe(
        EVENT_CASCADE_STEP,
        lambda sender, **k: print(f"  cascade step {k['depth']}: cleared {len(k['positions'])} blocks"),
    )
    game.start()
    game.settle()
    print(format_board(game.current_board()))
    for _ in range(drags):
        row = rng.randrange(game.config.height)
        col = rng.randrange(game.config.width)
        game.grab(row, col)
        # Walk the pointer through a few random neighbouring cells.
        for _ in range(4):
            drow, dcol = rng.choice([(-1, 0), (1, 0), (0, -1), (0, 1), (1, 1), (-1, -1)])
            current = game.grabbed_position()
            x = (current[1] + dcol + 0.5) * TILE_SIZE
            y = (current[0] + drow + 0.5) * TILE_SIZE
            game.move_to(x, y, region)
        print(f"\ndrag from {(row, col)} to {game.grabbed_position()}")
        game.release()
        game.settle()
        print(format_board(game.current_board()))


if __name__ == "__main__":
    main()
