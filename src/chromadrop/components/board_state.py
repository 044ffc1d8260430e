from dataclasses import dataclass

from chromadrop.components.board import Board

@dataclass(slots=True)
class BoardState:
    """Holder for the current board on the board entity.

    The Board value itself is immutable; systems replace ``board`` wholesale.
    """
    board: Board
