"""Headless puzzle session: world, event bus and systems wired together.

A host (renderer, test, demo loop) drives the session by calling ``grab``,
``move_to`` and ``release`` (or emitting the pointer events on ``event_bus``)
and by calling ``tick`` with elapsed seconds so the cascade can advance.
"""
from __future__ import annotations

import random
from typing import Any, Mapping, Optional, Tuple

from chromadrop.components.board import Board
from chromadrop.components.board_snapshot import BoardSnapshot
from chromadrop.config import GameConfig
from chromadrop.events.bus import EVENT_TICK, EventBus
from chromadrop.systems.cascade import CascadeSystem
from chromadrop.systems.interaction import InteractionSystem
from chromadrop.systems.state_utils import set_board
from chromadrop.utils.board_geometry import BoardRegion, RegionProvider
from chromadrop.world import create_world


class PuzzleGame:
    def __init__(
        self,
        config: GameConfig | Mapping[str, Any] | None = None,
        *,
        rng: random.Random | None = None,
        region_provider: RegionProvider | None = None,
        event_bus: EventBus | None = None,
    ):
        if not isinstance(config, GameConfig):
            config = GameConfig.from_options(config)
        self.config = config
        self.event_bus = event_bus or EventBus()
        self.world = create_world(config, rng=rng)
        self.cascade_system = CascadeSystem(self.world, self.event_bus)
        self.interaction_system = InteractionSystem(
            self.world,
            self.event_bus,
            self.cascade_system,
            region_provider=region_provider,
        )

    def start(self) -> None:
        """Settle matches already present on the freshly generated board."""
        if self.config.settle_initial_board:
            self.cascade_system.start(reason="initial")

    def load_board(self, board: Board) -> None:
        """Replace the board wholesale, e.g. with a prepared layout."""
        if (board.rows, board.cols) != (self.config.height, self.config.width):
            raise ValueError(
                f"Board is {board.rows}x{board.cols}, expected {self.config.height}x{self.config.width}"
            )
        if board.color_count != self.config.color_count:
            raise ValueError(f"Board uses {board.color_count} colors, expected {self.config.color_count}")
        if self.cascade_system.active:
            raise RuntimeError("Cannot replace the board while a cascade is resolving")
        set_board(self.world, board)

    def tick(self, dt: float) -> None:
        self.event_bus.emit(EVENT_TICK, dt=dt)

    def settle(self, dt: float | None = None, max_ticks: int = 10_000) -> Board:
        """Tick until the cascade finishes and return the settled board."""
        step = self.config.step_delay if dt is None else dt
        if step <= 0:
            return self.cascade_system.run_to_completion()
        for _ in range(max_ticks):
            if not self.cascade_system.active:
                break
            self.tick(step)
        return self.current_board()

    # Controller contract passthrough
    def grab(self, row: int, col: int, *, offset_x: float = 0.0, offset_y: float = 0.0) -> bool:
        return self.interaction_system.grab(row, col, offset_x=offset_x, offset_y=offset_y)

    def move_to(self, x: float, y: float, region: BoardRegion | None = None) -> bool:
        return self.interaction_system.move_to(x, y, region)

    def release(self) -> bool:
        return self.interaction_system.release()

    def cancel(self) -> bool:
        return self.interaction_system.cancel()

    def current_board(self) -> Board:
        return self.interaction_system.current_board()

    def grabbed_position(self) -> Optional[Tuple[int, int]]:
        return self.interaction_system.grabbed_position()

    def snapshot(self) -> BoardSnapshot:
        return self.interaction_system.snapshot()

    @property
    def settling(self) -> bool:
        return self.cascade_system.active
