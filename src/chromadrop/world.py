import random

from esper import World
from chromadrop.components.board_state import BoardState
from chromadrop.components.cascade_state import CascadeState
from chromadrop.config import GameConfig
from chromadrop.systems.board_ops import initialize_board


def create_world(
    config: GameConfig | None = None,
    *,
    rng: random.Random | None = None,
) -> World:
    """Build the ECS world holding the config resource, cascade state and a random board."""
    config = config or GameConfig()
    world = World()
    setattr(world, "random", rng or random.Random())

    # Global resources: configuration and cascade bookkeeping.
    state_entity = world.create_entity()
    world.add_component(state_entity, config)
    world.add_component(state_entity, CascadeState())

    board = initialize_board(config.height, config.width, config.color_count, getattr(world, "random"))
    world.create_entity(BoardState(board=board))
    return world
