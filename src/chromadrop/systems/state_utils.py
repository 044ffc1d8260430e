from esper import World

from chromadrop.components.board import Board
from chromadrop.components.board_state import BoardState
from chromadrop.components.cascade_state import CascadeState
from chromadrop.components.drag_state import DragState
from chromadrop.config import GameConfig


def get_config(world: World) -> GameConfig:
    for _, config in world.get_component(GameConfig):
        return config
    raise RuntimeError("GameConfig resource not found")


def get_board_state(world: World) -> BoardState:
    for _, state in world.get_component(BoardState):
        return state
    raise RuntimeError("BoardState not found; was the world built with create_world?")


def get_board(world: World) -> Board:
    return get_board_state(world).board


def set_board(world: World, board: Board) -> None:
    get_board_state(world).board = board


def get_or_create_cascade_state(world: World) -> CascadeState:
    """Return the shared CascadeState component, creating it if absent."""
    existing = list(world.get_component(CascadeState))
    if existing:
        return existing[0][1]
    world.create_entity(CascadeState())
    return list(world.get_component(CascadeState))[0][1]


def get_drag(world: World) -> tuple[int, DragState] | None:
    for entity, drag in world.get_component(DragState):
        return entity, drag
    return None
