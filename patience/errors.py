"""
Exceptions raised by the patience engine.

Every error is local to the call that raised it and leaves the game state
unchanged, so callers can simply report it and carry on.
"""


class PatienceError(Exception):
    """Base class for all patience engine errors."""

    pass


class EmptyDeck(PatienceError):
    """Raised when more cards are drawn than remain in the deck."""

    def __init__(self, requested: int, remaining: int):
        super().__init__(
            f"Cannot draw {requested} card(s), only {remaining} remaining"
        )
        self.requested = requested
        self.remaining = remaining


class PileError(PatienceError):
    """Raised when a pile operation violates the shape of its pile kind."""

    pass


class CapacityExceeded(PileError):
    """Raised when a pile refuses a card."""

    pass


class InsufficientCards(PileError):
    """Raised when a pile cannot give up the requested group of cards."""

    pass


class IllegalMove(PatienceError):
    """Raised when a move fails rule validation."""

    def __init__(self, move, reason: str):
        super().__init__(f"Illegal move {move}: {reason}")
        self.move = move
        self.reason = reason


class HistoryError(PatienceError):
    """Raised at the boundaries of the undo/redo history."""

    pass


class NothingToUndo(HistoryError):
    """Raised when undo is requested with an empty history."""

    pass


class NothingToRedo(HistoryError):
    """Raised when redo is requested with nothing to redo."""

    pass


class UnknownRuleSet(PatienceError, ValueError):
    """Raised when a rule set id is not registered."""

    pass


class SnapshotError(PatienceError):
    """Raised when a serialized game cannot be restored."""

    pass
