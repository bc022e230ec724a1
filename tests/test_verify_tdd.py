from __future__ import annotations

from bingo_cards.builder.batch import generate_batch
from bingo_cards.models import Card, Game
from bingo_cards.rng import LCGSource
from bingo_cards.verify import verify_card, verify_game

VALID = (
    [1, None, 21, None, 41, None, 61, None, 81]
    + [None, 11, None, 31, None, 51, None, 71, 82]
    + [2, 12, 22, None, 42, None, 62, None, None]
)


def test_verify_reports_clean_batch():
    game = Game(filename="g", cards=generate_batch(50, LCGSource(123)))
    rep = verify_game(game)
    assert rep["ok_cards_valid"] is True
    assert rep["ok_no_identical_cards"] is True
    assert rep["violations"] == {}
    assert sum(rep["frequencies"].values()) == 50 * 15
    assert rep["frequencies"][90] == 0
    for column in rep["column_uniformity"].values():
        assert 0.0 <= column["p_value"] <= 1.0


def test_hand_built_card_is_valid():
    assert verify_card(Card(title="1", number=1, cells=list(VALID))) == []


def test_verify_flags_broken_cards():
    broken = list(VALID)
    broken[0], broken[18] = 95, None
    problems = verify_card(Card(title="x", number=2, cells=broken))
    assert any("outside" in p for p in problems)
    assert "row 2 has 4 numbers, expected 5" in problems

    assert verify_card(Card(title="y", number=3, cells=[None] * 10)) == ["expected 27 cells, got 10"]


def test_verify_flags_empty_column_and_repeats():
    cells = list(VALID)
    cells[3 + 9] = None  # column 3 now empty, row 1 short
    cells[7 + 9] = 61  # repeats row 0's 61
    problems = verify_card(Card(title="z", number=4, cells=cells))
    assert "column 3 is empty" in problems
    assert "card repeats a number" in problems


def test_verify_flags_identical_cards():
    card = Card(title="1", number=1, cells=list(VALID))
    twin = Card(title="2", number=2, cells=list(VALID))
    rep = verify_game(Game(filename="g", cards=[card, twin]))
    assert rep["ok_no_identical_cards"] is False
    assert rep["ok_cards_valid"] is True
