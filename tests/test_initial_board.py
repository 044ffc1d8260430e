import random

import pytest

from chromadrop.components.board import Board
from chromadrop.config import GameConfig
from chromadrop.events.bus import EVENT_CASCADE_COMPLETE
from chromadrop.game import PuzzleGame
from chromadrop.systems.board_ops import find_matches

from tests.helpers import record


def test_start_settles_initial_matches():
    for seed in range(10):
        game = PuzzleGame(GameConfig(color_count=3), rng=random.Random(seed))
        completed = record(game.event_bus, EVENT_CASCADE_COMPLETE)
        game.start()
        settled = game.settle()
        assert find_matches(settled) == frozenset()
        assert completed and completed[-1]["reason"] == "initial"


def test_start_skipped_when_disabled():
    game = PuzzleGame({"settleInitialBoard": False}, rng=random.Random(0))
    before = game.current_board()
    game.start()
    assert not game.settling
    assert game.current_board() == before


def test_options_mapping_configures_board():
    game = PuzzleGame({"width": 8, "height": 7, "colorCount": 4, "stepDelayMs": 50}, rng=random.Random(1))
    board = game.current_board()
    assert (board.rows, board.cols, board.color_count) == (7, 8, 4)
    assert game.config.step_delay_ms == 50


def test_load_board_rejects_wrong_shape():
    game = PuzzleGame(rng=random.Random(0))
    with pytest.raises(ValueError):
        game.load_board(Board.from_rows([[0, 1, 2]], color_count=6))
