from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Callable, Optional, Tuple


@dataclass(frozen=True, slots=True)
class BoardRegion:
    """Screen rectangle the board is rendered into (origin top-left, y grows downward)."""
    left: float
    top: float
    width: float
    height: float


RegionProvider = Callable[[], Optional[BoardRegion]]


def cell_at_point(region: BoardRegion, x: float, y: float, rows: int, cols: int) -> Tuple[int, int] | None:
    """Map pointer coordinates to a (row, col) using the region's cell size.

    The result is not bounds-checked; points outside the region yield cells
    outside the grid. Returns None when the region has no usable area.
    """
    if region.width <= 0 or region.height <= 0 or rows <= 0 or cols <= 0:
        return None
    cell_width = region.width / cols
    cell_height = region.height / rows
    col = math.floor((x - region.left) / cell_width)
    row = math.floor((y - region.top) / cell_height)
    return row, col


def region_for_tiles(rows: int, cols: int, tile_size: float, left: float = 0.0, top: float = 0.0) -> BoardRegion:
    """Region covering a board drawn with square tiles of ``tile_size`` starting at (left, top)."""
    return BoardRegion(left=left, top=top, width=cols * tile_size, height=rows * tile_size)
