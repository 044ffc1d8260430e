from __future__ import annotations

import logging
import random

from esper import World

from chromadrop.components.board import Board
from chromadrop.components.cascade_state import CascadeState
from chromadrop.events.bus import (
    EventBus,
    EVENT_TICK,
    EVENT_MATCH_FOUND,
    EVENT_MATCH_CLEARED,
    EVENT_GRAVITY_APPLIED,
    EVENT_REFILL_COMPLETED,
    EVENT_CASCADE_STEP,
    EVENT_CASCADE_COMPLETE,
    EVENT_BOARD_CHANGED,
)
from chromadrop.systems.board_ops import (
    clear_and_refill_detailed,
    find_match_groups,
    find_matches,
    respawn_board_without_matches,
)
from chromadrop.systems.state_utils import (
    get_board,
    get_config,
    get_or_create_cascade_state,
    set_board,
)

logger = logging.getLogger(__name__)


class CascadeSystem:
    """Resolves matches step by step, pausing ``step_delay_ms`` between gravity steps.

    The pause is measured in tick time: the host emits ``EVENT_TICK`` with ``dt``
    (seconds) and the system advances once enough time has accumulated. While
    a cascade is active the board belongs to this system; the interaction
    system refuses new grabs and swaps until ``EVENT_CASCADE_COMPLETE``.
    """

    def __init__(self, world: World, event_bus: EventBus):
        self.world = world
        self.event_bus = event_bus
        self.event_bus.subscribe(EVENT_TICK, self.on_tick)

    @property
    def active(self) -> bool:
        return get_or_create_cascade_state(self.world).active

    def start(self, reason: str = "release") -> bool:
        """Begin resolving the current board. Returns False if a cascade is already running."""
        state = get_or_create_cascade_state(self.world)
        if state.active:
            return False
        state.active = True
        state.depth = 0
        state.elapsed = 0.0
        state.reason = reason
        logger.debug("cascade started (%s)", reason)
        self._advance(state)
        return True

    def on_tick(self, sender, **kwargs):
        state = get_or_create_cascade_state(self.world)
        if not state.active:
            return
        dt = kwargs.get('dt', 1/60)
        state.elapsed += dt
        if state.elapsed < get_config(self.world).step_delay:
            return
        state.elapsed = 0.0
        self._advance(state)

    def run_to_completion(self) -> Board:
        """Finish any active cascade immediately, ignoring the pacing delay."""
        state = get_or_create_cascade_state(self.world)
        while state.active:
            self._advance(state)
        return get_board(self.world)

    def _advance(self, state: CascadeState) -> None:
        try:
            self._step(state)
        except Exception:
            # A failed step must not leave the board locked.
            logger.exception("cascade step %d failed", state.depth)
            self._reset(state)
            raise

    def _step(self, state: CascadeState) -> None:
        board = get_board(self.world)
        matches = find_matches(board)
        if not matches:
            self._finish(state, board)
            return
        config = get_config(self.world)
        rng: random.Random = getattr(self.world, "random")
        if state.depth >= config.max_cascade_steps:
            logger.warning("cascade hit %d steps; respawning board", state.depth)
            board = respawn_board_without_matches(board.rows, board.cols, board.color_count, rng)
            set_board(self.world, board)
            self.event_bus.emit(EVENT_BOARD_CHANGED, reason="cascade_limit", board=board)
            self._finish(state, board)
            return
        state.depth += 1
        positions = sorted(matches)
        self.event_bus.emit(
            EVENT_MATCH_FOUND,
            positions=positions,
            groups=find_match_groups(board),
            size=len(positions),
            depth=state.depth,
        )
        outcome = clear_and_refill_detailed(board, matches, rng)
        set_board(self.world, outcome.board)
        logger.debug("cascade step %d cleared %d cells", state.depth, len(positions))
        self.event_bus.emit(EVENT_MATCH_CLEARED, positions=positions, colors=outcome.cleared)
        self.event_bus.emit(EVENT_GRAVITY_APPLIED, moves=outcome.moves)
        if outcome.new_tiles:
            self.event_bus.emit(EVENT_REFILL_COMPLETED, new_tiles=outcome.new_tiles)
        self.event_bus.emit(EVENT_CASCADE_STEP, depth=state.depth, positions=positions, reason=state.reason)
        self.event_bus.emit(EVENT_BOARD_CHANGED, reason="cascade", board=outcome.board)

    def _finish(self, state: CascadeState, board: Board) -> None:
        depth = state.depth
        reason = state.reason
        self._reset(state)
        logger.debug("cascade complete after %d steps", depth)
        self.event_bus.emit(EVENT_CASCADE_COMPLETE, depth=depth, board=board, reason=reason)

    @staticmethod
    def _reset(state: CascadeState) -> None:
        state.active = False
        state.depth = 0
        state.elapsed = 0.0
        state.reason = None
