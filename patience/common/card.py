"""
This module defines the `Suit`, `Color`, `Rank`, and `Card` classes, which are
used to represent playing cards in patience games.

- `Suit`: An enum representing the four suits of a standard deck of playing
cards: Hearts, Diamonds, Clubs, and Spades.

- `Color`: The colour of a suit, used by tableau building rules.

- `Rank`: An enum representing the thirteen ranks of a standard deck, from
Ace (1) to King (13).

- `Card`: A class representing a playing card. A card has a fixed suit and
rank plus a face-up flag. Equality and hashing only look at the suit and
rank; the orientation is presentation state.

This module is part of the `patience` package, a solitaire game engine core.
"""

from enum import Enum, unique


@unique
class Color(Enum):
    """
    Enum for card colours.
    """

    RED = "red"
    BLACK = "black"

    def __str__(self) -> str:
        return self.value


@unique
class Suit(Enum):
    """
    Enum for suits in a card deck.
    """

    HEARTS = "♥"
    DIAMONDS = "♦"
    CLUBS = "♣"
    SPADES = "♠"

    @property
    def color(self) -> Color:
        """The colour of the suit."""
        if self in (Suit.HEARTS, Suit.DIAMONDS):
            return Color.RED
        return Color.BLACK

    @property
    def letter(self) -> str:
        """Single-letter code used in compact card codes."""
        return self.name[0]

    @classmethod
    def from_letter(cls, letter: str) -> "Suit":
        for suit in cls:
            if suit.letter == letter.upper():
                return suit
        raise ValueError(f"Invalid suit letter: {letter!r}")

    def __str__(self) -> str:
        return self.value


@unique
class Rank(Enum):
    """
    Enum for ranks in a card deck. Aces are low.
    """

    ACE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13

    @property
    def rank_value(self) -> int:
        """The numeric value of the rank, 1 through 13."""
        return self.value

    @property
    def rank_str(self):
        """A string representation of the rank."""
        if self in (self.ACE, self.JACK, self.QUEEN, self.KING):
            return self.name[0]
        return str(self.value)

    @classmethod
    def from_str(cls, text: str) -> "Rank":
        for rank in cls:
            if rank.rank_str == text.upper():
                return rank
        raise ValueError(f"Invalid rank: {text!r}")

    def __str__(self) -> str:
        return self.rank_str


class Card:
    """
    Class representing a playing card.

    The suit and rank are fixed at construction; only the face-up flag can
    change, through `flip()`.

    >>> card = Card(Suit.HEARTS, Rank.ACE)
    >>> print(card)
    A of ♥
    >>> card.is_face_up
    False
    >>> card.flip()
    >>> card.is_face_up
    True
    """

    __slots__ = ("_suit", "_rank", "_face_up")

    def __init__(self, suit: Suit, rank: Rank, face_up: bool = False):
        """
        Initialize a Card instance.

        :param suit: Suit of the card (one of the Suit enums)
        :param rank: Rank of the card (one of the Rank enums)
        :param face_up: Initial orientation, face down by default
        """
        if not isinstance(suit, Suit):
            raise TypeError(f"Invalid suit: {suit}")
        if not isinstance(rank, Rank):
            raise TypeError(f"Invalid rank: {rank}")
        self._suit = suit
        self._rank = rank
        self._face_up = bool(face_up)

    @property
    def suit(self) -> Suit:
        return self._suit

    @property
    def rank(self) -> Rank:
        return self._rank

    @property
    def color(self) -> Color:
        return self._suit.color

    @property
    def is_face_up(self) -> bool:
        return self._face_up

    @property
    def code(self) -> str:
        """Compact code such as ``AH`` or ``10S``."""
        return f"{self._rank.rank_str}{self._suit.letter}"

    @classmethod
    def from_code(cls, code: str, face_up: bool = False) -> "Card":
        """
        Build a card from its compact code.

        >>> Card.from_code("QS")
        Card(Suit.SPADES, Rank.QUEEN)
        """
        if len(code) < 2:
            raise ValueError(f"Invalid card code: {code!r}")
        return cls(Suit.from_letter(code[-1]), Rank.from_str(code[:-1]), face_up)

    def flip(self) -> None:
        """Turn the card over."""
        self._face_up = not self._face_up

    def clone(self) -> "Card":
        """Return an independent copy with the same suit, rank and orientation."""
        return Card(self._suit, self._rank, self._face_up)

    def __eq__(self, other):
        """
        Checks if this card is equal to another card.

        :param other: The other card to compare to.
        :return: True if the cards have the same rank and suit, False otherwise.
        """
        if isinstance(other, Card):
            return self._rank == other._rank and self._suit == other._suit
        return NotImplemented

    def __hash__(self):
        return hash((self._suit, self._rank))

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"Card(Suit.{self._suit.name}, Rank.{self._rank.name})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the card.

        :return: A string representation of the card.
        """
        return f"{self._rank.rank_str} of {self._suit}"
