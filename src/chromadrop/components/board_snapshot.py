from dataclasses import dataclass
from typing import Optional, Tuple

@dataclass(frozen=True, slots=True)
class BoardSnapshot:
    """Everything a renderer needs for one frame: colors, highlighted cell, busy flag."""
    rows: Tuple[Tuple[int, ...], ...]
    grabbed: Optional[Tuple[int, int]] = None
    settling: bool = False
