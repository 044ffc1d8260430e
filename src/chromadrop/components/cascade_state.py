from dataclasses import dataclass
from typing import Optional


@dataclass(slots=True)
class CascadeState:
    """Tracks an in-flight cascade resolution shared across systems."""

    active: bool = False
    depth: int = 0
    elapsed: float = 0.0
    reason: Optional[str] = None
