"""
Piles of cards on a patience board.

A pile is an ordered sequence of cards whose last card is the top. Its kind
decides the structural rules: foundations only grow by suit from the ace up
and free cells hold a single card. Stock, waste and tableau piles take any
card structurally; building rules for the tableau belong to the rule set,
which also lets the initial deal place face-down cards.

The kind-specific checks are plain functions so they can be used for
validation without touching any pile.
"""

from enum import Enum, auto
from typing import Iterable, List, Optional, Sequence, Tuple

from patience.common.card import Card, Rank, Suit
from patience.errors import CapacityExceeded, InsufficientCards

FREE_CELL_CAPACITY = 1


class PileKind(Enum):
    """The kinds of pile found on a patience board."""

    STOCK = auto()
    WASTE = auto()
    FOUNDATION = auto()
    TABLEAU = auto()
    FREE_CELL = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


def is_alternating_run(cards: Sequence[Card]) -> bool:
    """
    Whether the cards form a face-up run descending by one rank with
    alternating colours, bottom card first.
    """
    if not cards or not all(card.is_face_up for card in cards):
        return False
    for lower, upper in zip(cards, cards[1:]):
        if lower.color == upper.color:
            return False
        if lower.rank.rank_value != upper.rank.rank_value + 1:
            return False
    return True


def builds_down_alternating(base: Card, card: Card) -> bool:
    """Whether `card` can sit on `base` in a tableau: opposite colour, one rank lower."""
    return (
        base.color != card.color
        and base.rank.rank_value == card.rank.rank_value + 1
    )


def foundation_accepts(suit: Optional[Suit], top: Optional[Card], card: Card) -> bool:
    """Foundation rule: the bound suit, ace first, then one rank higher each time."""
    if suit is not None and card.suit != suit:
        return False
    if top is None:
        return card.rank == Rank.ACE
    return card.suit == top.suit and card.rank.rank_value == top.rank.rank_value + 1


def accepts(pile: "Pile", card: Card) -> bool:
    """Structural check of whether `pile` can take `card` on top."""
    if pile.kind is PileKind.FOUNDATION:
        return foundation_accepts(pile.suit, pile.peek_top(), card)
    if pile.kind is PileKind.FREE_CELL:
        return pile.size < FREE_CELL_CAPACITY
    return True


class Pile:
    """
    A named, ordered pile of cards.

    >>> pile = Pile("foundation-hearts", PileKind.FOUNDATION, Suit.HEARTS)
    >>> pile.push(Card(Suit.HEARTS, Rank.ACE, face_up=True))
    >>> pile.size
    1
    """

    def __init__(
        self,
        pile_id: str,
        kind: PileKind,
        suit: Optional[Suit] = None,
        cards: Optional[Iterable[Card]] = None,
    ):
        """
        Initialize a pile.

        :param pile_id: Name of the pile, unique on its board
        :param kind: Kind of pile
        :param suit: Suit bound to a foundation (ignored for other kinds)
        :param cards: Initial cards, bottom first. They are placed as-is.
        """
        if not isinstance(kind, PileKind):
            raise TypeError(f"Invalid pile kind: {kind}")
        self.pile_id = pile_id
        self.kind = kind
        self.suit = suit if kind is PileKind.FOUNDATION else None
        self._cards: List[Card] = []
        if cards is not None:
            self.push_many(cards)

    @property
    def cards(self) -> Tuple[Card, ...]:
        return tuple(self._cards)

    @property
    def size(self) -> int:
        return len(self._cards)

    @property
    def face_down_count(self) -> int:
        return sum(1 for card in self._cards if not card.is_face_up)

    def is_empty(self) -> bool:
        return not self._cards

    def peek_top(self) -> Optional[Card]:
        """The top card, or None for an empty pile."""
        return self._cards[-1] if self._cards else None

    def top_group(self, count: int) -> Tuple[Card, ...]:
        """The top `count` cards, bottom first, without removing them."""
        if count < 1 or count > len(self._cards):
            return ()
        return tuple(self._cards[-count:])

    def push(self, card: Card) -> None:
        """
        Put a card on top of the pile.

        :raises CapacityExceeded: If the pile kind forbids the card.
        """
        if not accepts(self, card):
            raise CapacityExceeded(f"{self.pile_id} cannot take {card}")
        self._cards.append(card)

    def push_many(self, cards: Iterable[Card]) -> None:
        """
        Push several cards in order. Either all of them land or none does.

        :raises CapacityExceeded: If any card would be refused.
        """
        cards = list(cards)
        pushed = 0
        try:
            for card in cards:
                self.push(card)
                pushed += 1
        except CapacityExceeded:
            if pushed:
                del self._cards[-pushed:]
            raise

    def pop(self, count: int = 1, require_run: bool = False) -> List[Card]:
        """
        Remove and return the top `count` cards, bottom first.

        :param count: Number of cards to take
        :param require_run: Only give up a face-up, alternating-colour,
            descending run
        :raises InsufficientCards: If the pile cannot give up that group.
        """
        if count < 1:
            raise InsufficientCards(f"Cannot take {count} cards from {self.pile_id}")
        if count > len(self._cards):
            raise InsufficientCards(
                f"{self.pile_id} holds {len(self._cards)} card(s), {count} requested"
            )
        group = self._cards[-count:]
        if require_run and not is_alternating_run(group):
            raise InsufficientCards(
                f"Top {count} card(s) of {self.pile_id} are not a movable run"
            )
        del self._cards[-count:]
        return group

    def clone(self) -> "Pile":
        """An independent copy of the pile and its cards."""
        copy = Pile(self.pile_id, self.kind, self.suit)
        copy._cards = [card.clone() for card in self._cards]
        return copy

    def __len__(self) -> int:
        return len(self._cards)

    def __iter__(self):
        return iter(self._cards)

    def __repr__(self) -> str:
        return f"Pile({self.pile_id!r}, PileKind.{self.kind.name}, {len(self._cards)} cards)"

    def __str__(self) -> str:
        return f"{self.kind} {self.pile_id} ({len(self._cards)} cards)"
