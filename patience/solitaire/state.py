"""
Game state for patience games.

`GameState` owns every pile on the board and the undo/redo history. It is
only changed through `apply_move`, `undo` and `redo`; each of these either
completes or raises without touching the board. Rendering code reads the
board through `GameView`, an immutable snapshot.
"""

from collections import Counter
from dataclasses import dataclass, field
from enum import Enum, auto
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple, TYPE_CHECKING
import logging
import uuid

from patience.common.card import Card, Rank, Suit
from patience.common.deck import Deck
from patience.errors import (
    CapacityExceeded,
    HistoryError,
    IllegalMove,
    InsufficientCards,
    NothingToRedo,
    NothingToUndo,
)
from patience.events import EventBus, EventEmitter, EngineEventType
from patience.solitaire.move import Move, MoveRecord, TransferStyle
from patience.solitaire.pile import Pile, PileKind

if TYPE_CHECKING:
    from patience.variants.base import RuleSet

logger = logging.getLogger(__name__)


class GameStatus(Enum):
    """Possible statuses of a patience game."""

    IN_PROGRESS = auto()
    WON = auto()
    STUCK = auto()


@dataclass(frozen=True)
class CardView:
    """Read-only view of a card on the board."""

    suit: Suit
    rank: Rank
    face_up: bool

    @property
    def code(self) -> str:
        return f"{self.rank.rank_str}{self.suit.letter}"

    def __str__(self) -> str:
        return self.code if self.face_up else "??"


@dataclass(frozen=True)
class PileView:
    """Read-only view of a pile, bottom card first."""

    pile_id: str
    kind: PileKind
    suit: Optional[Suit] = None
    cards: Tuple[CardView, ...] = ()

    @property
    def top(self) -> Optional[CardView]:
        return self.cards[-1] if self.cards else None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.pile_id,
            "kind": self.kind.name,
            "suit": self.suit.name if self.suit else None,
            "cards": [
                {"card": card.code, "face_up": card.face_up} for card in self.cards
            ],
        }


@dataclass(frozen=True)
class GameView:
    """
    Immutable snapshot of a game for front ends.

    Attributes:
        game_id: Unique identifier of the game
        rule_set: Name of the rule set being played
        status: Current status
        score: Current score
        moves: Number of moves in the undo history
        redeals_used: Number of times the waste was turned back into the stock
        piles: Every pile, in board order
        can_undo: Whether undo is possible
        can_redo: Whether redo is possible
    """

    game_id: str
    rule_set: str
    status: GameStatus
    score: int
    moves: int
    redeals_used: int
    piles: Tuple[PileView, ...]
    can_undo: bool = field(default=False, compare=False)
    can_redo: bool = field(default=False, compare=False)

    def pile(self, pile_id: str) -> PileView:
        for pile in self.piles:
            if pile.pile_id == pile_id:
                return pile
        raise KeyError(pile_id)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert the view to a dictionary suitable for serialization.

        Returns:
            Dictionary representation of the view
        """
        return {
            "game_id": self.game_id,
            "rule_set": self.rule_set,
            "status": self.status.name,
            "score": self.score,
            "moves": self.moves,
            "redeals_used": self.redeals_used,
            "can_undo": self.can_undo,
            "can_redo": self.can_redo,
            "piles": [pile.to_dict() for pile in self.piles],
        }


class GameState:
    """
    The full board of one patience game plus its move history.

    A game state holds a reference to exactly one rule set for its lifetime.
    Calls on one state must come from one caller at a time; separate states
    share nothing mutable.
    """

    def __init__(
        self,
        rules: "RuleSet",
        piles: Iterable[Pile],
        seed: Optional[int] = None,
        game_id: Optional[str] = None,
        history: Iterable[MoveRecord] = (),
        redo_stack: Iterable[MoveRecord] = (),
        score: int = 0,
        redeals_used: int = 0,
        status: Optional[GameStatus] = None,
        event_bus: Optional[EventEmitter] = None,
    ):
        """
        Initialize a game state from an already dealt board.

        Most callers want `GameState.deal` instead.

        Args:
            rules: Rule set governing the game
            piles: Every pile on the board, in display order
            seed: Seed the deck was shuffled with, if known
            game_id: Identifier of the game (generated when omitted)
            history: Applied moves, oldest first
            redo_stack: Undone moves, the next one to redo last
            score: Current score
            redeals_used: Number of stock redeals already used
            status: Status to restore; computed from the board when omitted
            event_bus: Emitter to publish on, the process-wide bus by default
        """
        self.rules = rules
        self.seed = seed
        self.id = game_id or str(uuid.uuid4())
        self._piles: Dict[str, Pile] = {}
        for pile in piles:
            if pile.pile_id in self._piles:
                raise ValueError(f"Duplicate pile id: {pile.pile_id}")
            self._piles[pile.pile_id] = pile
        self._undo: List[MoveRecord] = list(history)
        self._redo: List[MoveRecord] = list(redo_stack)
        self._score = score
        self._redeals_used = redeals_used
        self._status = status if status is not None else self._evaluate_status()
        self.event_bus = event_bus if event_bus is not None else EventBus.get_instance()

    @classmethod
    def deal(
        cls,
        rules: "RuleSet",
        seed: Optional[int] = None,
        event_bus: Optional[EventEmitter] = None,
    ) -> "GameState":
        """
        Shuffle a standard deck and deal it according to `rules`.

        Args:
            rules: Rule set to play
            seed: Shuffle seed; the same seed always produces the same layout
            event_bus: Emitter to publish on, the process-wide bus by default

        Returns:
            A new game in progress
        """
        if event_bus is None:
            event_bus = EventBus.get_instance()
        game_id = str(uuid.uuid4())

        deck = Deck.build_standard().shuffle(seed)
        event_bus.emit(
            EngineEventType.SHUFFLE,
            {"game_id": game_id, "seed": seed, "cards": deck.size},
        )

        piles = rules.initial_deal(deck)
        state = cls(
            rules, piles.values(), seed=seed, game_id=game_id, event_bus=event_bus
        )

        logger.debug("Dealt %s game %s with seed %s", rules.name, state.id, seed)
        event_bus.emit(
            EngineEventType.GAME_CREATED,
            {"game_id": state.id, "rule_set": rules.name, "seed": seed},
        )
        return state

    # Observers

    @property
    def piles(self) -> Mapping[str, Pile]:
        """Read-only mapping of pile id to pile, in board order."""
        return MappingProxyType(self._piles)

    def pile(self, pile_id: str) -> Pile:
        return self._piles[pile_id]

    def piles_of_kind(self, kind: PileKind) -> List[Pile]:
        return [pile for pile in self._piles.values() if pile.kind is kind]

    @property
    def status(self) -> GameStatus:
        return self._status

    @property
    def score(self) -> int:
        return self._score

    @property
    def redeals_used(self) -> int:
        return self._redeals_used

    @property
    def history(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._undo)

    @property
    def redo_stack(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._redo)

    @property
    def can_undo(self) -> bool:
        return bool(self._undo)

    @property
    def can_redo(self) -> bool:
        return bool(self._redo)

    def card_multiset(self) -> Counter:
        """Count of every (suit, rank) on the board."""
        return Counter(
            (card.suit, card.rank) for pile in self._piles.values() for card in pile
        )

    def check_move(self, move: Move) -> Optional[str]:
        """Why `move` is illegal, or None when it is legal. Never mutates."""
        return self.rules.check_move(self, move)

    def is_legal(self, move: Move) -> bool:
        return self.check_move(move) is None

    def legal_moves(self) -> List[Move]:
        return self.rules.legal_moves(self)

    def view(self) -> GameView:
        """Take an immutable snapshot of the board."""
        return GameView(
            game_id=self.id,
            rule_set=self.rules.name,
            status=self._status,
            score=self._score,
            moves=len(self._undo),
            redeals_used=self._redeals_used,
            piles=tuple(
                PileView(
                    pile_id=pile.pile_id,
                    kind=pile.kind,
                    suit=pile.suit,
                    cards=tuple(
                        CardView(card.suit, card.rank, card.is_face_up)
                        for card in pile
                    ),
                )
                for pile in self._piles.values()
            ),
            can_undo=self.can_undo,
            can_redo=self.can_redo,
        )

    # Transitions

    def apply_move(self, move: Move) -> Move:
        """
        Validate and apply a move.

        Args:
            move: The move to apply; its sequence number is ignored

        Returns:
            The applied move, carrying its sequence number

        Raises:
            IllegalMove: If the rule set rejects the move. The board is left
                exactly as it was.
        """
        reason = self.rules.check_move(self, move)
        if reason is not None:
            logger.debug("Rejected %s: %s", move, reason)
            self.event_bus.emit(
                EngineEventType.MOVE_REJECTED,
                {"game_id": self.id, "move": move.to_dict(), "reason": reason},
            )
            raise IllegalMove(move, reason)

        record = self._plan(move)
        self._perform(record)
        self._undo.append(record)
        self._redo.clear()

        logger.debug("Applied %s (score %+d)", record.move, record.score_delta)
        self._publish(EngineEventType.MOVE_APPLIED, record)
        self._refresh_status()
        return record.move

    def undo(self) -> MoveRecord:
        """
        Take back the last applied move.

        Raises:
            NothingToUndo: If no move has been applied.
            HistoryError, PileError: If the recorded move no longer fits the
                board. The board and the history are left unchanged.
        """
        if not self._undo:
            raise NothingToUndo("No moves to undo")

        record = self._undo[-1]
        self._reverse(record)
        self._redo.append(self._undo.pop())

        logger.debug("Undid %s", record.move)
        self._publish(EngineEventType.MOVE_UNDONE, record)
        self._refresh_status()
        return record

    def redo(self) -> MoveRecord:
        """
        Re-apply the most recently undone move.

        Raises:
            NothingToRedo: If nothing was undone since the last new move.
            HistoryError, PileError, IllegalMove: If the recorded move no
                longer fits the board. The board and the history are left unchanged.
        """
        if not self._redo:
            raise NothingToRedo("No moves to redo")

        record = self._redo[-1]
        self._perform(record)
        self._undo.append(self._redo.pop())

        logger.debug("Redid %s", record.move)
        self._publish(EngineEventType.MOVE_REDONE, record)
        self._refresh_status()
        return record

    def detect_stuck(self) -> GameStatus:
        """
        Check whether any legal move remains.

        This enumerates every legal move, so it is only run on request.

        Returns:
            The updated status
        """
        if self._status is GameStatus.WON:
            return self._status

        if self.rules.legal_moves(self):
            self._status = GameStatus.IN_PROGRESS
        else:
            self._status = GameStatus.STUCK
            logger.info("Game %s has no legal moves left", self.id)
            self.event_bus.emit(
                EngineEventType.GAME_STUCK,
                {"game_id": self.id, "moves": len(self._undo)},
            )
        return self._status

    # Internals

    def _plan(self, move: Move) -> MoveRecord:
        """Work out how a validated move changes the board, without changing it."""
        move = Move(move.source, move.dest, move.count, len(self._undo) + 1)
        style = self.rules.transfer_style(self, move)
        source = self._piles[move.source]

        auto_flipped = False
        if style is not TransferStyle.REVEAL and self.rules.auto_flip:
            exposed_index = source.size - move.count - 1
            if source.kind is PileKind.TABLEAU and exposed_index >= 0:
                auto_flipped = not source.cards[exposed_index].is_face_up

        delta = self.rules.score_move(self, move, reveals=auto_flipped)
        # Score never drops below zero
        delta = max(delta, -self._score)

        return MoveRecord(
            move=move,
            style=style,
            auto_flipped=auto_flipped,
            score_delta=delta,
            used_redeal=self.rules.uses_redeal(self, move),
        )

    def _record_piles(self, record: MoveRecord) -> Tuple[Pile, Pile]:
        move = record.move
        for pile_id in (move.source, move.dest):
            if pile_id not in self._piles:
                raise HistoryError(f"Move {move} names unknown pile {pile_id}")
        return self._piles[move.source], self._piles[move.dest]

    @staticmethod
    def _flip_top(pile: Pile) -> None:
        top = pile.peek_top()
        if top is None:
            raise InsufficientCards(f"{pile.pile_id} has no card to turn over")
        top.flip()

    def _perform(self, record: MoveRecord) -> None:
        move = record.move
        source, dest = self._record_piles(record)

        if record.style is TransferStyle.REVEAL:
            self._flip_top(source)
        else:
            if record.auto_flipped and source.size <= move.count:
                raise InsufficientCards(
                    f"{source.pile_id} has no card left to turn over"
                )
            cards = source.pop(move.count)
            if record.style is TransferStyle.TURNED:
                cards = self._turn_over(cards)
            try:
                dest.push_many(cards)
            except CapacityExceeded as exc:
                if record.style is TransferStyle.TURNED:
                    cards = self._turn_over(cards)
                source.push_many(cards)
                raise IllegalMove(move, str(exc)) from exc
            if record.auto_flipped:
                source.peek_top().flip()

        self._score += record.score_delta
        if record.used_redeal:
            self._redeals_used += 1

    def _reverse(self, record: MoveRecord) -> None:
        move = record.move
        source, dest = self._record_piles(record)

        if record.style is TransferStyle.REVEAL:
            self._flip_top(source)
        else:
            if record.auto_flipped and source.is_empty():
                raise InsufficientCards(
                    f"{source.pile_id} has no card to turn back over"
                )
            cards = dest.pop(move.count)
            if record.style is TransferStyle.TURNED:
                cards = self._turn_over(cards)
            try:
                source.push_many(cards)
            except CapacityExceeded:
                if record.style is TransferStyle.TURNED:
                    cards = self._turn_over(cards)
                dest.push_many(cards)
                raise
            if record.auto_flipped:
                # The card the returned group now covers
                source.cards[-move.count - 1].flip()

        self._score -= record.score_delta
        if record.used_redeal:
            self._redeals_used -= 1

    @staticmethod
    def _turn_over(cards: List[Card]) -> List[Card]:
        """Turn a group of cards over as one packet: reversed and flipped."""
        cards = list(reversed(cards))
        for card in cards:
            card.flip()
        return cards

    def _evaluate_status(self) -> GameStatus:
        if self.rules.is_win(self):
            return GameStatus.WON
        return GameStatus.IN_PROGRESS

    def _refresh_status(self) -> None:
        previous = self._status
        self._status = self._evaluate_status()
        if self._status is GameStatus.WON and previous is not GameStatus.WON:
            logger.info("Game %s won in %d moves", self.id, len(self._undo))
            self.event_bus.emit(
                EngineEventType.GAME_WON,
                {"game_id": self.id, "moves": len(self._undo), "score": self._score},
            )

    def _publish(self, event_type: EngineEventType, record: MoveRecord) -> None:
        move = record.move
        self.event_bus.emit(
            event_type,
            {
                "game_id": self.id,
                "move": move.to_dict(),
                "score": self._score,
            },
        )
        if record.style is TransferStyle.TURNED and event_type is EngineEventType.MOVE_APPLIED:
            if self._piles[move.dest].kind is PileKind.STOCK:
                self.event_bus.emit(
                    EngineEventType.STOCK_RECYCLED,
                    {"game_id": self.id, "redeals_used": self._redeals_used},
                )
            else:
                self.event_bus.emit(
                    EngineEventType.CARD_DEALT,
                    {
                        "game_id": self.id,
                        "cards": [
                            str(card)
                            for card in self._piles[move.dest].top_group(move.count)
                        ],
                    },
                )
        revealed = record.style is TransferStyle.REVEAL or record.auto_flipped
        if revealed and event_type is not EngineEventType.MOVE_UNDONE:
            card = self._piles[move.source].peek_top()
            self.event_bus.emit(
                EngineEventType.CARD_REVEALED,
                {"game_id": self.id, "pile_id": move.source, "card": str(card)},
            )
