"""
FreeCell patience.

All 52 cards are dealt face up to eight tableau piles (7, 7, 7, 7, 6, 6, 6,
6). Four free cells hold one card each and the foundations are built up by
suit from the ace. Tableau piles build down in alternating colours and any
card may fill an empty pile.

Runs may be moved as a unit when enough free cells and empty tableau piles
are available to shuttle them card by card: at most
``(empty cells + 1) * 2 ** empty piles`` cards, where an empty destination
pile does not count.
"""

from dataclasses import dataclass
from typing import Dict, Sequence, TYPE_CHECKING

from patience.common.card import Card, Suit
from patience.common.deck import Deck
from patience.solitaire.pile import (
    Pile,
    PileKind,
    builds_down_alternating,
    foundation_accepts,
    is_alternating_run,
)
from patience.variants.base import RuleSet, foundation_id, tableau_id

if TYPE_CHECKING:
    from patience.solitaire.state import GameState

TABLEAU_PILES = 8
MAX_FREE_CELLS = 4


def cell_id(index: int) -> str:
    return f"cell-{index}"


@dataclass(frozen=True)
class FreeCellOptions:
    """
    FreeCell options.

    Attributes:
        free_cells: Number of free cells, 0 to 4
        supermoves: Allow moving runs longer than one card
    """

    free_cells: int = MAX_FREE_CELLS
    supermoves: bool = True

    def __post_init__(self):
        if not 0 <= self.free_cells <= MAX_FREE_CELLS:
            raise ValueError(f"free_cells must be between 0 and {MAX_FREE_CELLS}")


class FreeCellRules(RuleSet):
    """Rule set for FreeCell."""

    name = "freecell"
    options_class = FreeCellOptions

    @property
    def auto_flip(self) -> bool:
        # Every card is dealt face up
        return False

    def initial_deal(self, deck: Deck) -> Dict[str, Pile]:
        piles: Dict[str, Pile] = {}
        for index in range(1, self.options.free_cells + 1):
            piles[cell_id(index)] = Pile(cell_id(index), PileKind.FREE_CELL)
        for suit in Suit:
            piles[foundation_id(suit)] = Pile(
                foundation_id(suit), PileKind.FOUNDATION, suit
            )

        tableau = [
            Pile(tableau_id(i + 1), PileKind.TABLEAU) for i in range(TABLEAU_PILES)
        ]
        dealt = 0
        while not deck.is_empty():
            card = deck.draw(1)[0]
            if not card.is_face_up:
                card.flip()
            tableau[dealt % TABLEAU_PILES].push(card)
            dealt += 1
        for pile in tableau:
            piles[pile.pile_id] = pile
        return piles

    def max_movable(self, state: "GameState", to_empty_pile: bool = False) -> int:
        """Longest run that can be moved in one go."""
        if not self.options.supermoves:
            return 1
        empty_cells = sum(
            1 for pile in state.piles_of_kind(PileKind.FREE_CELL) if pile.is_empty()
        )
        empty_piles = sum(
            1 for pile in state.piles_of_kind(PileKind.TABLEAU) if pile.is_empty()
        )
        if to_empty_pile:
            empty_piles -= 1
        return (empty_cells + 1) * 2 ** max(empty_piles, 0)

    def is_movable_group(self, state: "GameState", pile: Pile, count: int) -> bool:
        if count < 1 or count > pile.size:
            return False
        if pile.kind in (PileKind.FREE_CELL, PileKind.FOUNDATION):
            return count == 1
        if pile.kind is PileKind.TABLEAU:
            return (
                is_alternating_run(pile.top_group(count))
                and count <= self.max_movable(state)
            )
        return False

    def can_accept(
        self, state: "GameState", dest: Pile, group: Sequence[Card]
    ) -> bool:
        if not group:
            return False
        lead = group[0]
        top = dest.peek_top()

        if dest.kind is PileKind.FREE_CELL:
            return len(group) == 1 and dest.is_empty()

        if dest.kind is PileKind.FOUNDATION:
            return len(group) == 1 and foundation_accepts(dest.suit, top, lead)

        if dest.kind is PileKind.TABLEAU:
            if len(group) > self.max_movable(state, to_empty_pile=top is None):
                return False
            return top is None or builds_down_alternating(top, lead)

        return False
