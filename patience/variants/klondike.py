"""
Klondike patience.

Seven tableau piles of one to seven cards with only the top card face up,
the remaining 24 cards in the stock, four foundations built up by suit from
the ace. Tableau piles build down in alternating colours and accept a king
(or any card, if configured) when empty. The stock is dealt to the waste one
or three cards at a time and the waste can be turned back into the stock.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Sequence, TYPE_CHECKING

from patience.common.card import Card, Rank, Suit
from patience.common.deck import Deck
from patience.solitaire.move import Move
from patience.solitaire.pile import (
    Pile,
    PileKind,
    builds_down_alternating,
    foundation_accepts,
    is_alternating_run,
)
from patience.solitaire import scoring
from patience.variants.base import RuleSet, foundation_id, tableau_id

if TYPE_CHECKING:
    from patience.solitaire.state import GameState

STOCK = "stock"
WASTE = "waste"
TABLEAU_PILES = 7


@dataclass(frozen=True)
class KlondikeOptions:
    """
    Klondike options.

    Attributes:
        draw_count: Cards dealt from the stock at a time, 1 or 3
        max_redeals: How often the waste may be turned back into the stock,
            None for no limit
        auto_flip: Turn up exposed tableau cards automatically
        kings_only_on_empty: Only kings (with their run) may fill an empty
            tableau pile
        scoring: Keep the standard score
    """

    draw_count: int = 1
    max_redeals: Optional[int] = None
    auto_flip: bool = True
    kings_only_on_empty: bool = True
    scoring: bool = True

    def __post_init__(self):
        if self.draw_count not in (1, 3):
            raise ValueError("draw_count must be 1 or 3")
        if self.max_redeals is not None and self.max_redeals < 0:
            raise ValueError("max_redeals must be non-negative or None")


class KlondikeRules(RuleSet):
    """Rule set for Klondike."""

    name = "klondike"
    options_class = KlondikeOptions

    @property
    def auto_flip(self) -> bool:
        return self.options.auto_flip

    def initial_deal(self, deck: Deck) -> Dict[str, Pile]:
        """
        Deal row by row across the tableau, then leave the rest as the stock.

        Pile ``tableau-n`` receives n cards and its top card is turned up.
        """
        piles: Dict[str, Pile] = {
            STOCK: Pile(STOCK, PileKind.STOCK),
            WASTE: Pile(WASTE, PileKind.WASTE),
        }
        for suit in Suit:
            piles[foundation_id(suit)] = Pile(
                foundation_id(suit), PileKind.FOUNDATION, suit
            )

        tableau = [
            Pile(tableau_id(i + 1), PileKind.TABLEAU) for i in range(TABLEAU_PILES)
        ]
        for row in range(TABLEAU_PILES):
            for column in range(row, TABLEAU_PILES):
                card = deck.draw(1)[0]
                if column == row and not card.is_face_up:
                    card.flip()
                tableau[column].push(card)
        for pile in tableau:
            piles[pile.pile_id] = pile

        # The deck's top card stays on top of the stock
        remaining = deck.draw(deck.size) if deck.size else []
        for card in remaining:
            if card.is_face_up:
                card.flip()
        piles[STOCK].push_many(reversed(remaining))
        return piles

    def check_stock_move(self, state: "GameState", move: Move) -> Optional[str]:
        stock = state.pile(STOCK)
        waste = state.pile(WASTE)

        if move.source == STOCK:
            if move.dest != WASTE:
                return "Stock cards can only be dealt to the waste"
            if stock.is_empty():
                return "Stock is empty"
            expected = min(self.options.draw_count, stock.size)
            if move.count != expected:
                return f"Deal {expected} card(s) from the stock"
            return None

        if move.source != WASTE:
            return "Only the waste can be turned back into the stock"
        if not stock.is_empty():
            return "Stock is not empty yet"
        if waste.is_empty():
            return "Waste is empty"
        if move.count != waste.size:
            return "The whole waste must be turned over"
        if not self.allows_recycle(state):
            return "No redeals left"
        return None

    def allows_recycle(self, state: "GameState") -> bool:
        limit = self.options.max_redeals
        return limit is None or state.redeals_used < limit

    def is_movable_group(self, state: "GameState", pile: Pile, count: int) -> bool:
        if count < 1 or count > pile.size:
            return False
        if pile.kind in (PileKind.WASTE, PileKind.FOUNDATION):
            return count == 1 and pile.peek_top().is_face_up
        if pile.kind is PileKind.TABLEAU:
            return is_alternating_run(pile.top_group(count))
        return False

    def can_accept(
        self, state: "GameState", dest: Pile, group: Sequence[Card]
    ) -> bool:
        if not group:
            return False
        lead = group[0]
        top = dest.peek_top()

        if dest.kind is PileKind.FOUNDATION:
            return len(group) == 1 and foundation_accepts(dest.suit, top, lead)

        if dest.kind is PileKind.TABLEAU:
            if top is None:
                return not self.options.kings_only_on_empty or lead.rank == Rank.KING
            return top.is_face_up and builds_down_alternating(top, lead)

        return False

    def score_move(self, state: "GameState", move: Move, reveals: bool = False) -> int:
        if not self.options.scoring:
            return 0
        if move.is_reveal:
            return scoring.TURN_OVER_TABLEAU_CARD
        source = state.pile(move.source).kind
        dest = state.pile(move.dest).kind
        delta = scoring.transfer_score(source, dest, self.options.draw_count)
        if reveals:
            delta += scoring.TURN_OVER_TABLEAU_CARD
        return delta

    def uses_redeal(self, state: "GameState", move: Move) -> bool:
        return move.source == WASTE and move.dest == STOCK
