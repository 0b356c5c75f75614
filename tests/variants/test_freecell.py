"""
Tests for the FreeCell rule set.
"""

from collections import Counter

import pytest

from patience.common.card import Rank, Suit
from patience.errors import IllegalMove
from patience.solitaire.move import Move
from patience.solitaire.pile import Pile, PileKind
from patience.solitaire.state import GameState
from patience.variants import FreeCellOptions, FreeCellRules
from patience.variants.freecell import cell_id


def board(rules, tableau, cells=()):
    piles = []
    for index in range(1, rules.options.free_cells + 1):
        cards = [cells[index - 1]] if index <= len(cells) else []
        piles.append(Pile(cell_id(index), PileKind.FREE_CELL, cards=cards))
    for suit in Suit:
        piles.append(
            Pile(f"foundation-{suit.name.lower()}", PileKind.FOUNDATION, suit)
        )
    for index, cards in enumerate(tableau, start=1):
        piles.append(Pile(f"tableau-{index}", PileKind.TABLEAU, cards=cards))
    return GameState(rules, piles)


def test_options_validation():
    with pytest.raises(ValueError):
        FreeCellOptions(free_cells=5)
    with pytest.raises(ValueError):
        FreeCellOptions(free_cells=-1)


def test_initial_layout():
    state = GameState.deal(FreeCellRules(), seed=42)

    sizes = [pile.size for pile in state.piles_of_kind(PileKind.TABLEAU)]
    assert sizes == [7, 7, 7, 7, 6, 6, 6, 6]
    assert all(
        card.is_face_up
        for pile in state.piles_of_kind(PileKind.TABLEAU)
        for card in pile
    )
    assert len(state.piles_of_kind(PileKind.FREE_CELL)) == 4
    assert "stock" not in state.piles
    assert state.card_multiset() == Counter(
        (suit, rank) for suit in Suit for rank in Rank
    )


def test_fewer_free_cells():
    state = GameState.deal(FreeCellRules(FreeCellOptions(free_cells=2)), seed=1)
    assert [pile.pile_id for pile in state.piles_of_kind(PileKind.FREE_CELL)] == [
        "cell-1",
        "cell-2",
    ]


def test_same_seed_same_layout():
    first = GameState.deal(FreeCellRules(), seed=9).view()
    second = GameState.deal(FreeCellRules(), seed=9).view()
    assert first.piles == second.piles


def test_no_stock_moves():
    state = GameState.deal(FreeCellRules(), seed=42)
    with pytest.raises(IllegalMove):
        state.apply_move(Move("stock", "waste", 1))


def test_free_cell_holds_one_card(up):
    state = board(FreeCellRules(), tableau=[[up("5D"), up("9S")], [up("3C")]])
    state.apply_move(Move("tableau-1", "cell-1", 1))
    assert state.pile("cell-1").peek_top() == up("9S")

    with pytest.raises(IllegalMove):
        state.apply_move(Move("tableau-2", "cell-1", 1))
    state.apply_move(Move("tableau-2", "cell-2", 1))
    assert state.score == 0


def test_cell_to_tableau_and_foundation(up):
    state = board(
        FreeCellRules(), tableau=[[up("9S")]], cells=[up("8H"), up("AD")]
    )
    state.apply_move(Move("cell-1", "tableau-1", 1))
    state.apply_move(Move("cell-2", "foundation-diamonds", 1))
    assert state.pile("tableau-1").cards == (up("9S"), up("8H"))
    assert state.pile("foundation-diamonds").size == 1
    assert all(pile.is_empty() for pile in state.piles_of_kind(PileKind.FREE_CELL))


def test_empty_tableau_takes_any_card(up):
    state = board(FreeCellRules(), tableau=[[up("KS"), up("5H")], []])
    state.apply_move(Move("tableau-1", "tableau-2", 1))
    assert state.pile("tableau-2").peek_top() == up("5H")


def test_building_down_alternating(up):
    state = board(FreeCellRules(), tableau=[[up("10H")], [up("9D")], [up("9C")]])
    with pytest.raises(IllegalMove):
        state.apply_move(Move("tableau-2", "tableau-1", 1))
    state.apply_move(Move("tableau-3", "tableau-1", 1))


@pytest.mark.parametrize(
    "free_cells,expected",
    [(0, 1), (1, 2), (2, 3), (4, 5)],
)
def test_max_movable_with_cells(up, free_cells, expected):
    rules = FreeCellRules(FreeCellOptions(free_cells=free_cells))
    state = board(rules, tableau=[[up("KS")], [up("QD")]])
    assert rules.max_movable(state) == expected


def test_max_movable_counts_empty_piles(up):
    rules = FreeCellRules(FreeCellOptions(free_cells=2))
    state = board(rules, tableau=[[up("KS")], []])
    assert rules.max_movable(state) == 6
    # An empty destination cannot help shuttle the run
    assert rules.max_movable(state, to_empty_pile=True) == 3


def test_run_longer_than_capacity_is_illegal(up):
    run = [up("9S"), up("8D")]
    no_cells = FreeCellRules(FreeCellOptions(free_cells=0))
    state = board(no_cells, tableau=[[up("10H")], list(run)])
    with pytest.raises(IllegalMove):
        state.apply_move(Move("tableau-2", "tableau-1", 2))

    one_cell = FreeCellRules(FreeCellOptions(free_cells=1))
    state = board(one_cell, tableau=[[up("10H")], list(run)])
    state.apply_move(Move("tableau-2", "tableau-1", 2))
    assert state.pile("tableau-1").cards == (up("10H"), up("9S"), up("8D"))


def test_run_to_empty_pile_uses_smaller_capacity(up):
    rules = FreeCellRules(FreeCellOptions(free_cells=0))
    state = board(rules, tableau=[[up("9S"), up("8D")], [], [up("10H")]])
    with pytest.raises(IllegalMove):
        state.apply_move(Move("tableau-1", "tableau-2", 2))
    state.apply_move(Move("tableau-1", "tableau-3", 2))


def test_supermoves_disabled(up):
    rules = FreeCellRules(FreeCellOptions(supermoves=False))
    state = board(rules, tableau=[[up("10H")], [up("9S"), up("8D")]])
    assert rules.max_movable(state) == 1
    with pytest.raises(IllegalMove):
        state.apply_move(Move("tableau-2", "tableau-1", 2))


def test_undo_free_cell_move(up):
    state = board(FreeCellRules(), tableau=[[up("5D"), up("9S")]])
    before = state.view()
    state.apply_move(Move("tableau-1", "cell-3", 1))
    state.undo()
    assert state.view() == before


def test_no_cards_turned_over(up):
    rules = FreeCellRules()
    assert not rules.auto_flip
    state = board(rules, tableau=[[up("5D"), up("9S")], [up("10H")]])
    state.apply_move(Move("tableau-1", "tableau-2", 1))
    assert not state.history[-1].auto_flipped


def test_legal_moves_are_legal():
    state = GameState.deal(FreeCellRules(), seed=42)
    moves = state.legal_moves()
    assert moves
    assert any(move.dest.startswith("cell-") for move in moves)
    for move in moves:
        assert state.check_move(move) is None
