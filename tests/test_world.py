import random

import pytest
from esper import World

from chromadrop.components.board_state import BoardState
from chromadrop.config import GameConfig
from chromadrop.systems.state_utils import get_board, get_config, get_or_create_cascade_state
from chromadrop.world import create_world


def test_create_world_registers_resources():
    config = GameConfig(width=4, height=3, color_count=5)
    world = create_world(config, rng=random.Random(2))
    assert get_config(world) is config
    board = get_board(world)
    assert (board.rows, board.cols, board.color_count) == (3, 4, 5)
    assert len(list(world.get_component(BoardState))) == 1
    assert get_or_create_cascade_state(world).active is False


def test_same_seed_gives_same_board():
    a = create_world(rng=random.Random(9))
    b = create_world(rng=random.Random(9))
    assert get_board(a) == get_board(b)


def test_missing_resources_raise():
    world = World()
    with pytest.raises(RuntimeError):
        get_config(world)
    with pytest.raises(RuntimeError):
        get_board(world)
