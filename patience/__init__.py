"""
Patience: a solitaire game engine core.

Cards, a seeded deck, piles, moves with undo/redo, and rule sets for
Klondike and FreeCell.
"""

__version__ = "0.1.0"
