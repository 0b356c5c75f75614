"""Base class for patience rule sets."""

from abc import ABC, abstractmethod
from dataclasses import asdict
from typing import Any, Dict, List, Optional, Sequence, Type, TYPE_CHECKING

from patience.common.card import Card, Rank, Suit
from patience.common.deck import Deck
from patience.solitaire.move import Move, TransferStyle
from patience.solitaire.pile import Pile, PileKind

if TYPE_CHECKING:
    from patience.solitaire.state import GameState


def foundation_id(suit: Suit) -> str:
    return f"foundation-{suit.name.lower()}"


def tableau_id(index: int) -> str:
    return f"tableau-{index}"


class RuleSet(ABC):
    """
    Policy object for one patience variant.

    A rule set is stateless: it inspects a game state but never changes it,
    so one instance can be shared by any number of games.
    """

    #: Registry name of the variant
    name: str = ""
    #: Frozen dataclass holding the variant's options
    options_class: Type = None

    def __init__(self, options=None):
        self._options = options if options is not None else self.options_class()

    @property
    def options(self):
        return self._options

    def options_dict(self) -> Dict[str, Any]:
        return asdict(self._options)

    @property
    def auto_flip(self) -> bool:
        """Whether a face-down tableau card is turned up as soon as it is exposed."""
        return True

    @abstractmethod
    def initial_deal(self, deck: Deck) -> Dict[str, Pile]:
        """Deal `deck` into the starting piles, keyed by pile id in board order."""
        pass

    @abstractmethod
    def is_movable_group(self, state: "GameState", pile: Pile, count: int) -> bool:
        """Whether the top `count` cards of `pile` may be picked up together."""
        pass

    @abstractmethod
    def can_accept(
        self, state: "GameState", dest: Pile, group: Sequence[Card]
    ) -> bool:
        """Whether `dest` takes `group`, judged by its leading card and size."""
        pass

    def check_stock_move(self, state: "GameState", move: Move) -> Optional[str]:
        """Validate a move to or from the stock. Variants with a stock override this."""
        return "This game has no stock"

    def check_reveal(self, state: "GameState", pile: Pile) -> Optional[str]:
        top = pile.peek_top()
        if pile.kind is not PileKind.TABLEAU or top is None or top.is_face_up:
            return f"{pile.pile_id} has no face-down card to turn over"
        if self.auto_flip:
            return "Cards are turned over automatically"
        return None

    def check_move(self, state: "GameState", move: Move) -> Optional[str]:
        """
        Validate a move without changing anything.

        Returns:
            None for a legal move, otherwise the reason it is illegal
        """
        piles = state.piles
        if move.source not in piles:
            return f"Unknown pile: {move.source}"
        if move.dest not in piles:
            return f"Unknown pile: {move.dest}"

        source = piles[move.source]
        dest = piles[move.dest]

        if move.is_reveal:
            return self.check_reveal(state, source)
        if move.source == move.dest:
            return "Source and destination are the same pile"
        if move.count < 1:
            return "At least one card must be moved"
        if source.kind is PileKind.STOCK or dest.kind is PileKind.STOCK:
            return self.check_stock_move(state, move)
        if move.count > source.size:
            return f"{source.pile_id} holds only {source.size} card(s)"
        if not self.is_movable_group(state, source, move.count):
            return f"Top {move.count} card(s) of {source.pile_id} cannot be moved together"

        group = source.top_group(move.count)
        if not self.can_accept(state, dest, group):
            return f"{dest.pile_id} cannot take {group[0]}"
        return None

    def transfer_style(self, state: "GameState", move: Move) -> TransferStyle:
        if move.is_reveal:
            return TransferStyle.REVEAL
        piles = state.piles
        if PileKind.STOCK in (piles[move.source].kind, piles[move.dest].kind):
            return TransferStyle.TURNED
        return TransferStyle.PLAIN

    def score_move(self, state: "GameState", move: Move, reveals: bool = False) -> int:
        """Score change for a validated move. Unscored by default."""
        return 0

    def uses_redeal(self, state: "GameState", move: Move) -> bool:
        """Whether the move turns the waste back into the stock."""
        return False

    def legal_moves(self, state: "GameState") -> List[Move]:
        """
        Every legal move in the current state.

        Moving an entire tableau pile onto an empty tableau pile changes
        nothing and is left out.
        """
        moves = []
        piles = list(state.piles.values())
        for source in piles:
            reveal = Move(source.pile_id, source.pile_id, 0)
            if self.check_move(state, reveal) is None:
                moves.append(reveal)
            for count in range(1, source.size + 1):
                for dest in piles:
                    if dest is source:
                        continue
                    if (
                        source.kind is PileKind.TABLEAU
                        and dest.kind is PileKind.TABLEAU
                        and dest.is_empty()
                        and count == source.size
                    ):
                        continue
                    move = Move(source.pile_id, dest.pile_id, count)
                    if self.check_move(state, move) is None:
                        moves.append(move)
        return moves

    def is_win(self, state: "GameState") -> bool:
        """Won when every foundation holds all thirteen ranks of its suit."""
        foundations = state.piles_of_kind(PileKind.FOUNDATION)
        if not foundations:
            return False
        for pile in foundations:
            if pile.size != len(Rank):
                return False
            if {card.rank for card in pile} != set(Rank):
                return False
            if pile.suit is not None and any(card.suit != pile.suit for card in pile):
                return False
        return True

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._options!r})"
