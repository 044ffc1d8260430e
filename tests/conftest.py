import sys, os

# Ensure the repo root (for tests.helpers) and src are on path for test imports
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
SRC = os.path.join(ROOT, 'src')
for path in (SRC, ROOT):
    if path not in sys.path:
        sys.path.insert(0, path)

from tests.helpers import ScriptedRandom, make_game

__all__ = [
    "ScriptedRandom",
    "make_game",
]
