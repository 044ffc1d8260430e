from blinker import Signal
from typing import Dict

class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps bound methods of systems alive even when the caller drops the system.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# SYSTEM & TIMING
# ============================================================================
EVENT_TICK = "tick"                            # payload: dt=float (seconds)


# ============================================================================
# POINTER INPUT (mouse and touch share these)
# ============================================================================
EVENT_POINTER_DOWN = "pointer_down"            # payload: row, col, offset_x=float, offset_y=float
EVENT_POINTER_MOVE = "pointer_move"            # payload: x, y, region=BoardRegion|None
EVENT_POINTER_UP = "pointer_up"                # payload: None
EVENT_POINTER_CANCEL = "pointer_cancel"        # payload: None


# ============================================================================
# DRAG & SWAP
# ============================================================================
EVENT_TILE_GRABBED = "tile_grabbed"            # payload: row, col, offset_x, offset_y
EVENT_GRAB_REJECTED = "grab_rejected"          # payload: row, col, reason=str
EVENT_TILE_SWAPPED = "tile_swapped"            # payload: src=(r,c), dst=(r,c)
EVENT_TILE_RELEASED = "tile_released"          # payload: row, col, cancelled=bool


# ============================================================================
# MATCH & CASCADE
# ============================================================================
EVENT_MATCH_FOUND = "match_found"              # payload: positions=[(r,c),...], groups=[[(r,c),...]], size=int, depth=int
EVENT_MATCH_CLEARED = "match_cleared"          # payload: positions=[(r,c),...], colors=[(r,c,color),...]
EVENT_GRAVITY_APPLIED = "gravity_applied"      # payload: moves=[GravityMove,...]
EVENT_REFILL_COMPLETED = "refill_completed"    # payload: new_tiles=[(r,c),...]
EVENT_CASCADE_STEP = "cascade_step"            # payload: depth=int, positions=[(r,c),...], reason=str
EVENT_CASCADE_COMPLETE = "cascade_complete"    # payload: depth=int, board=Board, reason=str
EVENT_BOARD_CHANGED = "board_changed"          # payload: reason=str, board=Board
