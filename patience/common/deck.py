"""
This module contains the Deck class, which represents a deck of cards.

The top of the deck is the end of the card list.

>>> deck = Deck.build_standard()
>>> deck.size
52
>>> deck.draw(1)
[Card(Suit.SPADES, Rank.KING)]
>>> deck.size
51
"""

import random
from typing import List, Optional

from patience.common.card import Card, Rank, Suit
from patience.errors import EmptyDeck


class Deck:
    """
    A class representing a deck of cards.
    """

    def __init__(self, cards: Optional[List[Card]] = None):
        """
        Initialize a Deck instance.

        :param cards: A list of Card instances to populate the deck (optional).
                      If not provided, the deck starts empty.
        """
        self._cards: List[Card] = list(cards) if cards is not None else []

    @classmethod
    def build_standard(cls) -> "Deck":
        """
        Construct the 52-card deck in canonical order, every card face down.

        Suits follow the `Suit` order and ranks run from ace to king.

        >>> Deck.build_standard().cards[0]
        Card(Suit.HEARTS, Rank.ACE)
        """
        return cls([Card(suit, rank) for suit in Suit for rank in Rank])

    def shuffle(self, seed: Optional[int] = None) -> "Deck":
        """
        Shuffle the cards in place.

        The permutation only depends on the seed, so the same seed always
        yields the same order. A seed of None draws fresh entropy.

        :param seed: Seed for the private random generator.
        :return: The deck itself, for chaining.
        """
        random.Random(seed).shuffle(self._cards)
        return self

    def draw(self, num_cards: int = 1) -> List[Card]:
        """
        Remove and return the top `num_cards` cards, topmost first.

        :raises EmptyDeck: If fewer than `num_cards` cards remain. The deck is
            left unchanged.
        """
        if num_cards < 1:
            raise ValueError("Number of cards to draw must be at least 1")
        if num_cards > len(self._cards):
            raise EmptyDeck(num_cards, len(self._cards))
        drawn = self._cards[-num_cards:]
        del self._cards[-num_cards:]
        drawn.reverse()
        return drawn

    @property
    def cards(self) -> List[Card]:
        """A copy of the remaining cards, bottom first."""
        return list(self._cards)

    @property
    def size(self) -> int:
        """
        Return the number of remaining cards in the deck.

        :return: The size of the deck.
        """
        return len(self._cards)

    def is_empty(self) -> bool:
        """
        Check if the deck is empty.

        :return: True if the deck is empty, False otherwise.
        """
        return len(self._cards) == 0

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        """
        Provide a machine-readable representation of the deck.

        :return: A string representation of the deck.
        """
        return f"Deck({[repr(card) for card in self._cards]})"

    def __str__(self) -> str:
        """
        Provide a human-readable representation of the deck.

        :return: A string representation of the deck.
        """
        return f"Deck of {len(self._cards)} cards"
