"""
API module for patience.

This module provides the programmatic API front ends use to play patience
games.
"""

from patience.api.solitaire import (
    new_game,
    apply_move,
    reveal,
    undo,
    redo,
    get_view,
    detect_stuck,
    legal_moves,
)
from patience.api.snapshot import serialize, deserialize

__all__ = [
    # Game flow
    "new_game",
    "apply_move",
    "reveal",
    "undo",
    "redo",
    "get_view",
    "detect_stuck",
    "legal_moves",
    # Snapshots
    "serialize",
    "deserialize",
]
