# Default board footprint: HEIGHT rows by WIDTH columns.
BOARD_WIDTH = 6
BOARD_HEIGHT = 5

# Symbolic palette; a cell stores an index into this list.
PALETTE = ['red', 'blue', 'green', 'yellow', 'purple', 'orange']
COLOR_COUNT = len(PALETTE)

# Shortest run of equal colors that counts as a match.
MIN_MATCH_LENGTH = 3

# Pause between cascade steps, in milliseconds.
STEP_DELAY_MS = 300

# Upper bound on gravity steps per cascade before the board is respawned.
MAX_CASCADE_STEPS = 100

# Attempts allowed when building a match-free replacement board.
RESPAWN_MAX_ATTEMPTS = 200


def color_name(index: int) -> str:
    if 0 <= index < len(PALETTE):
        return PALETTE[index]
    return f"color-{index}"
