"""
Export and import of complete game states.

A snapshot is UTF-8 encoded JSON holding the rule set and its options, the
piles with every card's orientation, the undo and redo histories and the
counters. Restoring a snapshot gives a game that plays, undoes and redoes
exactly like the original.
"""

from typing import Any, Dict, Optional
import json
import logging

from patience.common.card import Card, Rank, Suit
from patience.errors import PatienceError, SnapshotError
from patience.events import EventEmitter
from patience.solitaire.move import MoveRecord
from patience.solitaire.pile import Pile, PileKind
from patience.solitaire.state import GameState, GameStatus
from patience.variants import RuleSetRegistry

logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = 1


def state_to_dict(state: GameState) -> Dict[str, Any]:
    """
    Convert a game state to a dictionary suitable for serialization.

    Returns:
        Dictionary representation of the game state
    """
    return {
        "version": SNAPSHOT_VERSION,
        "game_id": state.id,
        "rule_set": state.rules.name,
        "options": state.rules.options_dict(),
        "seed": state.seed,
        "status": state.status.name,
        "score": state.score,
        "redeals_used": state.redeals_used,
        "piles": [
            {
                "id": pile.pile_id,
                "kind": pile.kind.name,
                "suit": pile.suit.name if pile.suit else None,
                "cards": [
                    {"card": card.code, "face_up": card.is_face_up} for card in pile
                ],
            }
            for pile in state.piles.values()
        ],
        "history": [record.to_dict() for record in state.history],
        "redo": [record.to_dict() for record in state.redo_stack],
    }


def state_from_dict(
    data: Dict[str, Any], event_bus: Optional[EventEmitter] = None
) -> GameState:
    """
    Rebuild a game state from `state_to_dict` output.

    Args:
        data: Snapshot dictionary
        event_bus: Emitter the restored game publishes on

    Raises:
        SnapshotError: If the data is malformed, the cards on the board
            are not exactly one standard deck, or the undo and redo
            histories cannot be replayed on the board.
    """
    try:
        if data["version"] != SNAPSHOT_VERSION:
            raise SnapshotError(f"Unsupported snapshot version: {data['version']}")

        rules = RuleSetRegistry.create(data["rule_set"], **data["options"])
        piles = [
            Pile(
                entry["id"],
                PileKind[entry["kind"]],
                Suit[entry["suit"]] if entry["suit"] else None,
                [
                    Card.from_code(card["card"], card["face_up"])
                    for card in entry["cards"]
                ],
            )
            for entry in data["piles"]
        ]
        state = GameState(
            rules,
            piles,
            seed=data["seed"],
            game_id=data["game_id"],
            history=[MoveRecord.from_dict(record) for record in data["history"]],
            redo_stack=[MoveRecord.from_dict(record) for record in data["redo"]],
            score=int(data["score"]),
            redeals_used=int(data["redeals_used"]),
            status=GameStatus[data["status"]],
            event_bus=event_bus,
        )
    except SnapshotError:
        raise
    except (KeyError, TypeError, ValueError, PatienceError) as exc:
        raise SnapshotError(f"Invalid snapshot: {exc}") from exc

    expected = {(suit, rank): 1 for suit in Suit for rank in Rank}
    if dict(state.card_multiset()) != expected:
        raise SnapshotError("Snapshot does not hold exactly one standard deck")
    _check_history(state)

    logger.debug("Restored %s game %s", rules.name, state.id)
    return state


def _check_history(state: GameState) -> None:
    """Undo the whole history and redo it again on a copy of the board."""
    replay = GameState(
        state.rules,
        [pile.clone() for pile in state.piles.values()],
        history=state.history,
        redo_stack=state.redo_stack,
        score=state.score,
        redeals_used=state.redeals_used,
        status=state.status,
        event_bus=EventEmitter(),
    )
    try:
        while replay.can_undo:
            replay.undo()
        while replay.can_redo:
            replay.redo()
    except PatienceError as exc:
        raise SnapshotError(f"History does not fit the board: {exc}") from exc


def serialize(state: GameState) -> bytes:
    """Encode a game state as UTF-8 JSON."""
    return json.dumps(state_to_dict(state), ensure_ascii=False).encode("utf-8")


def deserialize(data: bytes, event_bus: Optional[EventEmitter] = None) -> GameState:
    """
    Decode bytes produced by `serialize`.

    Raises:
        SnapshotError: If the bytes are not a valid snapshot.
    """
    try:
        decoded = json.loads(data.decode("utf-8"))
    except (UnicodeDecodeError, ValueError) as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(decoded, dict):
        raise SnapshotError("Snapshot must be a JSON object")
    return state_from_dict(decoded, event_bus)
