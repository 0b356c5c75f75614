"""Standard Klondike scoring values."""

from patience.solitaire.pile import PileKind

WASTE_TO_TABLEAU = 5
TO_FOUNDATION = 10
TURN_OVER_TABLEAU_CARD = 5
FOUNDATION_TO_TABLEAU = -15
RECYCLE_DRAW_ONE = -100
RECYCLE_DRAW_THREE = 0

TRANSFER_SCORES = {
    (PileKind.WASTE, PileKind.TABLEAU): WASTE_TO_TABLEAU,
    (PileKind.WASTE, PileKind.FOUNDATION): TO_FOUNDATION,
    (PileKind.TABLEAU, PileKind.FOUNDATION): TO_FOUNDATION,
    (PileKind.FOUNDATION, PileKind.TABLEAU): FOUNDATION_TO_TABLEAU,
}


def transfer_score(source: PileKind, dest: PileKind, draw_count: int = 1) -> int:
    """Score for moving cards from a pile of kind `source` to one of kind `dest`."""
    if source is PileKind.WASTE and dest is PileKind.STOCK:
        return RECYCLE_DRAW_ONE if draw_count == 1 else RECYCLE_DRAW_THREE
    return TRANSFER_SCORES.get((source, dest), 0)
