from dataclasses import dataclass
from typing import Tuple

@dataclass(slots=True)
class DragState:
    """Marks that a block is being dragged.

    Fields:
      position: cell currently carrying the dragged block (moves with each swap).
      offset_x / offset_y: pointer offset inside the cell at grab time.
    """
    position: Tuple[int, int]
    offset_x: float = 0.0
    offset_y: float = 0.0
