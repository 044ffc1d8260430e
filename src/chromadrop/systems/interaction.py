from __future__ import annotations

import logging
from typing import Optional, Tuple

from esper import World

from chromadrop.components.board import Board
from chromadrop.components.board_snapshot import BoardSnapshot
from chromadrop.components.drag_state import DragState
from chromadrop.events.bus import (
    EventBus,
    EVENT_POINTER_DOWN,
    EVENT_POINTER_MOVE,
    EVENT_POINTER_UP,
    EVENT_POINTER_CANCEL,
    EVENT_TILE_GRABBED,
    EVENT_GRAB_REJECTED,
    EVENT_TILE_SWAPPED,
    EVENT_TILE_RELEASED,
    EVENT_BOARD_CHANGED,
)
from chromadrop.systems.board_ops import is_valid_swap, swap_cells
from chromadrop.systems.cascade import CascadeSystem
from chromadrop.systems.state_utils import (
    get_board,
    get_drag,
    get_or_create_cascade_state,
    set_board,
)
from chromadrop.utils.board_geometry import BoardRegion, RegionProvider, cell_at_point

logger = logging.getLogger(__name__)


class InteractionSystem:
    """Drag-to-swap controller: Idle until a grab, Dragging until release or cancel.

    The dragged block travels with the pointer: each move onto a neighbouring
    cell (diagonals included) swaps the two cells and the drag continues from
    the new cell. Releasing hands the board to the cascade system.
    """

    def __init__(
        self,
        world: World,
        event_bus: EventBus,
        cascade: CascadeSystem,
        *,
        region_provider: RegionProvider | None = None,
    ):
        self.world = world
        self.event_bus = event_bus
        self.cascade = cascade
        self.region_provider = region_provider
        self.event_bus.subscribe(EVENT_POINTER_DOWN, self.on_pointer_down)
        self.event_bus.subscribe(EVENT_POINTER_MOVE, self.on_pointer_move)
        self.event_bus.subscribe(EVENT_POINTER_UP, self.on_pointer_up)
        self.event_bus.subscribe(EVENT_POINTER_CANCEL, self.on_pointer_cancel)

    # ------------------------------------------------------------------
    # Bus handlers
    # ------------------------------------------------------------------
    def on_pointer_down(self, sender, **kwargs):
        row = kwargs.get('row')
        col = kwargs.get('col')
        if row is None or col is None:
            return
        self.grab(row, col, offset_x=kwargs.get('offset_x', 0.0), offset_y=kwargs.get('offset_y', 0.0))

    def on_pointer_move(self, sender, **kwargs):
        x = kwargs.get('x')
        y = kwargs.get('y')
        if x is None or y is None:
            return
        self.move_to(x, y, kwargs.get('region'))

    def on_pointer_up(self, sender, **kwargs):
        self.release()

    def on_pointer_cancel(self, sender, **kwargs):
        self.cancel()

    # ------------------------------------------------------------------
    # Public contract
    # ------------------------------------------------------------------
    def grab(self, row: int, col: int, *, offset_x: float = 0.0, offset_y: float = 0.0) -> bool:
        board = get_board(self.world)
        if get_or_create_cascade_state(self.world).active:
            logger.debug("grab at %s ignored while cascade is active", (row, col))
            self.event_bus.emit(EVENT_GRAB_REJECTED, row=row, col=col, reason="cascade_active")
            return False
        if not board.in_bounds((row, col)):
            self.event_bus.emit(EVENT_GRAB_REJECTED, row=row, col=col, reason="out_of_bounds")
            return False
        current = get_drag(self.world)
        if current is not None:
            # A fresh press replaces the previous grab.
            self.world.remove_component(current[0], DragState)
        self.world.create_entity(DragState(position=(row, col), offset_x=offset_x, offset_y=offset_y))
        self.event_bus.emit(EVENT_TILE_GRABBED, row=row, col=col, offset_x=offset_x, offset_y=offset_y)
        return True

    def move_to(self, x: float, y: float, region: BoardRegion | None = None) -> bool:
        """Swap the dragged block into the cell under (x, y) if that cell is a neighbour."""
        current = get_drag(self.world)
        if current is None:
            return False
        _, drag = current
        if get_or_create_cascade_state(self.world).active:
            logger.debug("move to %s ignored while cascade is active", (x, y))
            return False
        if region is None and self.region_provider is not None:
            region = self.region_provider()
        if region is None:
            return False
        board = get_board(self.world)
        target = cell_at_point(region, x, y, board.rows, board.cols)
        if target is None:
            return False
        src = drag.position
        if not is_valid_swap(board, src, target):
            return False
        set_board(self.world, swap_cells(board, src, target))
        drag.position = target
        logger.debug("swapped %s -> %s", src, target)
        self.event_bus.emit(EVENT_TILE_SWAPPED, src=src, dst=target)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="swap", board=get_board(self.world))
        return True

    def release(self) -> bool:
        """End the drag and start cascade resolution; False when nothing was grabbed.

        The settled board arrives with ``EVENT_CASCADE_COMPLETE`` once the
        cascade finishes and is also readable through ``current_board``.
        Headless callers that need it synchronously use ``PuzzleGame.settle``.
        """
        return self._end_drag(cancelled=False)

    def cancel(self) -> bool:
        return self._end_drag(cancelled=True)

    def current_board(self) -> Board:
        return get_board(self.world)

    def grabbed_position(self) -> Optional[Tuple[int, int]]:
        current = get_drag(self.world)
        if current is None:
            return None
        return current[1].position

    def snapshot(self) -> BoardSnapshot:
        return BoardSnapshot(
            rows=get_board(self.world).to_rows(),
            grabbed=self.grabbed_position(),
            settling=self.cascade.active,
        )

    def _end_drag(self, *, cancelled: bool) -> bool:
        current = get_drag(self.world)
        if current is None:
            return False
        entity, drag = current
        position = drag.position
        self.world.remove_component(entity, DragState)
        self.event_bus.emit(EVENT_TILE_RELEASED, row=position[0], col=position[1], cancelled=cancelled)
        self.cascade.start(reason="release")
        return True
