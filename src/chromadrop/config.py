"""Game configuration resource.

Holds the tunable board dimensions, palette size and cascade pacing. Stored as a
component on the state entity created by ``create_world`` so every system reads
the same values.
"""
from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any, Mapping

from chromadrop.constants import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    COLOR_COUNT,
    MAX_CASCADE_STEPS,
    STEP_DELAY_MS,
)

# Option names accepted from host applications mapped to dataclass fields.
_OPTION_ALIASES = {
    "width": "width",
    "height": "height",
    "colorCount": "color_count",
    "stepDelayMs": "step_delay_ms",
    "maxCascadeSteps": "max_cascade_steps",
    "settleInitialBoard": "settle_initial_board",
}


@dataclass(slots=True)
class GameConfig:
    width: int = BOARD_WIDTH
    height: int = BOARD_HEIGHT
    color_count: int = COLOR_COUNT
    step_delay_ms: float = STEP_DELAY_MS
    max_cascade_steps: int = MAX_CASCADE_STEPS
    settle_initial_board: bool = True

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError(f"Board dimensions must be positive, got {self.height}x{self.width}")
        if self.color_count < 2:
            raise ValueError(f"color_count must be at least 2, got {self.color_count}")
        if self.step_delay_ms < 0:
            raise ValueError(f"step_delay_ms must not be negative, got {self.step_delay_ms}")
        if self.max_cascade_steps < 1:
            raise ValueError(f"max_cascade_steps must be at least 1, got {self.max_cascade_steps}")

    @property
    def step_delay(self) -> float:
        """Cascade pacing interval in seconds (tick ``dt`` units)."""
        return self.step_delay_ms / 1000.0

    @classmethod
    def from_options(cls, options: Mapping[str, Any] | None = None) -> "GameConfig":
        """Build a config from camelCase or snake_case option names."""
        if not options:
            return cls()
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, Any] = {}
        for key, value in options.items():
            name = _OPTION_ALIASES.get(key, key)
            if name not in known:
                raise ValueError(f"Unknown game option: {key!r}")
            if name in kwargs:
                raise ValueError(f"Game option given twice: {key!r}")
            kwargs[name] = value
        for name in ("width", "height", "color_count", "max_cascade_steps"):
            if name in kwargs:
                value = kwargs[name]
                if isinstance(value, bool) or not isinstance(value, int):
                    raise ValueError(f"{name} must be an integer, got {value!r}")
        if "step_delay_ms" in kwargs:
            value = kwargs["step_delay_ms"]
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValueError(f"step_delay_ms must be a number, got {value!r}")
        return cls(**kwargs)
