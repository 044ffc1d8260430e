import pytest

from chromadrop.events.bus import (
    EVENT_BOARD_CHANGED,
    EVENT_CASCADE_COMPLETE,
    EVENT_GRAB_REJECTED,
    EVENT_POINTER_DOWN,
    EVENT_POINTER_MOVE,
    EVENT_POINTER_UP,
    EVENT_TILE_SWAPPED,
)
from chromadrop.systems.board_ops import find_matches
from chromadrop.utils.board_geometry import region_for_tiles

from tests.helpers import BASE_ROWS, TILE, cell_center, make_game, record

REGION = region_for_tiles(5, 6, TILE)


def _drag_to(game, row, col):
    x, y = cell_center(row, col)
    return game.move_to(x, y, REGION)


def test_drag_swaps_without_resolving_until_release():
    rows = [row[:] for row in BASE_ROWS]
    rows[0] = [1, 1, 2, 3, 4, 5]
    game = make_game(rows)
    assert game.grab(0, 2)
    assert _drag_to(game, 0, 1)
    assert game.current_board().row_values(0) == (1, 2, 1, 3, 4, 5)
    assert game.grabbed_position() == (0, 1)
    completed = record(game.event_bus, EVENT_CASCADE_COMPLETE)
    assert game.release()
    assert game.current_board().row_values(0) == (1, 2, 1, 3, 4, 5)
    assert completed and completed[0]["depth"] == 0
    assert not game.settling
    assert game.grabbed_position() is None


def test_dragged_block_is_carried_across_several_swaps():
    game = make_game()
    original = game.current_board()
    carried = original.at((0, 0))
    game.grab(0, 0)
    assert _drag_to(game, 0, 1)
    assert _drag_to(game, 1, 2)      # diagonal step
    assert _drag_to(game, 2, 2)
    board = game.current_board()
    assert board.at((2, 2)) == carried
    assert board.at((0, 0)) == original.at((0, 1))
    assert board.at((0, 1)) == original.at((1, 2))
    assert board.at((1, 2)) == original.at((2, 2))
    assert game.grabbed_position() == (2, 2)


@pytest.mark.parametrize("target", [
    (0, 2),     # two columns away
    (2, 0),     # two rows away
    (0, 0),     # same cell
])
def test_non_adjacent_or_same_cell_ignored(target):
    game = make_game()
    before = game.current_board()
    swaps = record(game.event_bus, EVENT_TILE_SWAPPED)
    game.grab(0, 0)
    assert not _drag_to(game, *target)
    assert game.current_board() == before
    assert game.grabbed_position() == (0, 0)
    assert swaps == []


def test_pointer_outside_board_ignored():
    game = make_game()
    before = game.current_board()
    game.grab(0, 0)
    assert not game.move_to(-10.0, 10.0, REGION)
    assert not game.move_to(10.0, -10.0, REGION)
    assert game.current_board() == before


def test_move_without_region_is_noop():
    game = make_game()
    before = game.current_board()
    game.grab(0, 0)
    x, y = cell_center(0, 1)
    assert not game.move_to(x, y)
    assert game.current_board() == before


def test_region_provider_supplies_geometry():
    game = make_game()
    game.interaction_system.region_provider = lambda: REGION
    game.grab(0, 0)
    x, y = cell_center(1, 0)
    assert game.move_to(x, y)
    assert game.grabbed_position() == (1, 0)


def test_move_without_grab_is_noop():
    game = make_game()
    before = game.current_board()
    assert not _drag_to(game, 0, 1)
    assert game.current_board() == before


def test_grab_out_of_bounds_rejected():
    game = make_game()
    rejected = record(game.event_bus, EVENT_GRAB_REJECTED)
    assert not game.grab(5, 0)
    assert not game.grab(0, -1)
    assert game.grabbed_position() is None
    assert [r["reason"] for r in rejected] == ["out_of_bounds", "out_of_bounds"]


def test_grab_while_dragging_replaces_grabbed_cell():
    game = make_game()
    game.grab(0, 0)
    game.grab(3, 3, offset_x=4.0, offset_y=9.0)
    assert game.grabbed_position() == (3, 3)
    assert game.snapshot().grabbed == (3, 3)


def test_release_without_drag_is_noop():
    game = make_game()
    completed = record(game.event_bus, EVENT_CASCADE_COMPLETE)
    assert not game.release()
    assert completed == []


def test_cancel_behaves_like_release():
    game = make_game()
    completed = record(game.event_bus, EVENT_CASCADE_COMPLETE)
    game.grab(1, 1)
    assert game.cancel()
    assert game.grabbed_position() is None
    assert len(completed) == 1


def test_pointer_events_drive_the_controller():
    rows = [row[:] for row in BASE_ROWS]
    rows[0] = [1, 1, 2, 3, 4, 5]
    game = make_game(rows)
    changes = record(game.event_bus, EVENT_BOARD_CHANGED)
    bus = game.event_bus
    bus.emit(EVENT_POINTER_DOWN, row=0, col=2, offset_x=12.0, offset_y=30.0)
    x, y = cell_center(0, 1)
    bus.emit(EVENT_POINTER_MOVE, x=x, y=y, region=REGION)
    assert game.current_board().row_values(0) == (1, 2, 1, 3, 4, 5)
    assert [c["reason"] for c in changes] == ["swap"]
    bus.emit(EVENT_POINTER_UP)
    assert game.grabbed_position() is None
    assert find_matches(game.current_board()) == frozenset()


def test_snapshot_exposes_rows_and_grab():
    game = make_game()
    game.grab(2, 3)
    snap = game.snapshot()
    assert snap.rows == tuple(tuple(row) for row in BASE_ROWS)
    assert snap.grabbed == (2, 3)
    assert snap.settling is False
