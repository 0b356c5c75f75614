"""
Patience game state management.

This package provides piles, moves and the game state that applies, undoes
and redoes moves under a rule set.
"""

from patience.solitaire.pile import Pile, PileKind
from patience.solitaire.move import Move, MoveRecord, TransferStyle
from patience.solitaire.state import (
    CardView,
    GameState,
    GameStatus,
    GameView,
    PileView,
)

__all__ = [
    "Pile",
    "PileKind",
    "Move",
    "MoveRecord",
    "TransferStyle",
    "CardView",
    "GameState",
    "GameStatus",
    "GameView",
    "PileView",
]
