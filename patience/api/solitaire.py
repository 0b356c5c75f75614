"""
Functional API for playing patience games.

These functions are what front ends call: they create games, apply moves
and hand back immutable `GameView` snapshots for rendering. Errors are
raised as exceptions from `patience.errors` and never leave a game half
changed.

>>> state = new_game("klondike", seed=42)
>>> view = apply_move(state, "stock", "waste")
>>> view.pile("waste").top.face_up
True
"""

from typing import List, Optional

from patience.events import EventEmitter
from patience.solitaire.move import Move
from patience.solitaire.state import GameState, GameView
from patience.variants import RuleSetRegistry


def new_game(
    rule_set_id: str = "klondike",
    seed: Optional[int] = None,
    event_bus: Optional[EventEmitter] = None,
    **options,
) -> GameState:
    """
    Deal a new game.

    Args:
        rule_set_id: Registered rule set name, e.g. "klondike" or "freecell"
        seed: Shuffle seed; the same seed always deals the same layout
        event_bus: Emitter the game publishes on, the process-wide bus by
            default
        **options: Options for the rule set, e.g. ``draw_count=3``

    Returns:
        The new game state

    Raises:
        UnknownRuleSet: If the rule set id is not registered
    """
    rules = RuleSetRegistry.create(rule_set_id, **options)
    return GameState.deal(rules, seed, event_bus)


def apply_move(
    state: GameState, source: str, dest: str, count: int = 1
) -> GameView:
    """
    Move `count` cards from `source` to `dest`.

    Raises:
        IllegalMove: If the move breaks the rules; the game is unchanged.
    """
    state.apply_move(Move(source, dest, count))
    return state.view()


def reveal(state: GameState, pile_id: str) -> GameView:
    """Turn over the face-down top card of a tableau pile (when auto-flip is off)."""
    state.apply_move(Move(pile_id, pile_id, 0))
    return state.view()


def undo(state: GameState) -> GameView:
    """
    Take back the last move.

    Raises:
        NothingToUndo: If no move has been made.
    """
    state.undo()
    return state.view()


def redo(state: GameState) -> GameView:
    """
    Re-apply the last undone move.

    Raises:
        NothingToRedo: If nothing was undone since the last new move.
    """
    state.redo()
    return state.view()


def get_view(state: GameState) -> GameView:
    return state.view()


def detect_stuck(state: GameState) -> GameView:
    """Check for remaining legal moves and return the updated view."""
    state.detect_stuck()
    return state.view()


def legal_moves(state: GameState) -> List[Move]:
    return state.legal_moves()
