import pytest

from patience.common.card import Card, Rank, Suit
from patience.errors import CapacityExceeded, InsufficientCards
from patience.solitaire.pile import (
    Pile,
    PileKind,
    accepts,
    builds_down_alternating,
    is_alternating_run,
)


def test_new_pile_is_empty():
    pile = Pile("tableau-1", PileKind.TABLEAU)
    assert pile.is_empty()
    assert pile.size == 0
    assert pile.peek_top() is None


def test_invalid_kind():
    with pytest.raises(TypeError):
        Pile("x", "tableau")


def test_suit_only_kept_for_foundations():
    assert Pile("t", PileKind.TABLEAU, Suit.HEARTS).suit is None
    assert Pile("f", PileKind.FOUNDATION, Suit.HEARTS).suit is Suit.HEARTS


def test_foundation_starts_with_ace(up):
    pile = Pile("foundation-hearts", PileKind.FOUNDATION, Suit.HEARTS)
    with pytest.raises(CapacityExceeded):
        pile.push(up("2H"))
    pile.push(up("AH"))
    assert pile.peek_top() == up("AH")


def test_foundation_rejects_wrong_suit(up):
    pile = Pile("foundation-hearts", PileKind.FOUNDATION, Suit.HEARTS)
    with pytest.raises(CapacityExceeded):
        pile.push(up("AS"))


def test_foundation_rejects_non_sequential_rank(up):
    pile = Pile("foundation-hearts", PileKind.FOUNDATION, Suit.HEARTS)
    pile.push(up("AH"))
    pile.push(up("2H"))
    with pytest.raises(CapacityExceeded):
        pile.push(up("4H"))
    with pytest.raises(CapacityExceeded):
        pile.push(up("2H"))
    assert pile.size == 2


def test_full_foundation(up):
    cards = [Card(Suit.CLUBS, rank, face_up=True) for rank in Rank]
    pile = Pile("foundation-clubs", PileKind.FOUNDATION, Suit.CLUBS, cards)
    assert pile.size == 13
    assert pile.peek_top().rank == Rank.KING


def test_free_cell_holds_one_card(up):
    cell = Pile("cell-1", PileKind.FREE_CELL)
    cell.push(up("5D"))
    with pytest.raises(CapacityExceeded):
        cell.push(up("6D"))
    assert cell.pop() == [up("5D")]
    cell.push(up("6D"))


def test_tableau_accepts_any_card(up, down):
    pile = Pile("tableau-1", PileKind.TABLEAU)
    pile.push(down("3C"))
    pile.push(up("KH"))
    pile.push(up("KS"))
    assert pile.size == 3
    assert pile.face_down_count == 1


def test_push_many_is_all_or_nothing(up):
    pile = Pile("foundation-spades", PileKind.FOUNDATION, Suit.SPADES, [up("AS")])
    with pytest.raises(CapacityExceeded):
        pile.push_many([up("2S"), up("3S"), up("5S")])
    assert pile.cards == (up("AS"),)


def test_pop_returns_group_bottom_first(up):
    pile = Pile("tableau-1", PileKind.TABLEAU, cards=[up("KS"), up("QH"), up("JC")])
    assert pile.pop(2) == [up("QH"), up("JC")]
    assert pile.cards == (up("KS"),)


def test_pop_too_many(up):
    pile = Pile("waste", PileKind.WASTE, cards=[up("KS")])
    with pytest.raises(InsufficientCards):
        pile.pop(2)
    with pytest.raises(InsufficientCards):
        pile.pop(0)
    assert pile.size == 1


def test_pop_requires_run(up, down):
    pile = Pile(
        "tableau-1",
        PileKind.TABLEAU,
        cards=[down("2D"), up("9S"), up("8D"), up("7C")],
    )
    assert pile.pop(3, require_run=True) == [up("9S"), up("8D"), up("7C")]

    pile = Pile("tableau-2", PileKind.TABLEAU, cards=[down("2D"), up("9S"), up("8D")])
    with pytest.raises(InsufficientCards):
        pile.pop(3, require_run=True)
    assert pile.size == 3


def test_pop_never_flips(up, down):
    pile = Pile("tableau-1", PileKind.TABLEAU, cards=[down("2D"), up("9S")])
    pile.pop()
    assert not pile.peek_top().is_face_up


def test_top_group(up):
    pile = Pile("tableau-1", PileKind.TABLEAU, cards=[up("KS"), up("QH")])
    assert pile.top_group(2) == (up("KS"), up("QH"))
    assert pile.top_group(3) == ()
    assert pile.top_group(0) == ()


def test_clone_is_independent(up):
    pile = Pile("tableau-1", PileKind.TABLEAU, cards=[up("KS")])
    copy = pile.clone()
    copy.peek_top().flip()
    copy.push(up("QH"))
    assert pile.size == 1
    assert pile.peek_top().is_face_up


@pytest.mark.parametrize(
    "codes,expected",
    [
        (["KS", "QH", "JC", "10D"], True),
        (["9S"], True),
        (["9S", "8S"], False),
        (["9S", "7H"], False),
        (["9S", "10H"], False),
        ([], False),
    ],
)
def test_is_alternating_run(up, codes, expected):
    assert is_alternating_run([up(code) for code in codes]) is expected


def test_face_down_cards_are_not_a_run(up, down):
    assert not is_alternating_run([down("KS"), up("QH")])


def test_builds_down_alternating(up):
    assert builds_down_alternating(up("QH"), up("JS"))
    assert not builds_down_alternating(up("QH"), up("JD"))
    assert not builds_down_alternating(up("QH"), up("10S"))


def test_accepts_does_not_mutate(up):
    pile = Pile("foundation-hearts", PileKind.FOUNDATION, Suit.HEARTS)
    assert accepts(pile, up("AH"))
    assert not accepts(pile, up("AS"))
    assert pile.is_empty()
