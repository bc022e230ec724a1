from __future__ import annotations

import pytest

from bingo_cards.builder.card import generate_card
from bingo_cards.checker import ClaimStatus, check_claim, find_card, has_bingo, has_full_row, has_line
from bingo_cards.models import Card, Game
from bingo_cards.rng import LCGSource

ROW0 = [1, None, 3, None, 5, None, 7, None, 9]
ROW1 = [None, 12, None, 32, None, 52, None, 72, 82]
ROW2 = [2, None, 23, None, 43, None, 63, None, 83]
CELLS = ROW0 + ROW1 + ROW2


def test_line_example_from_first_row():
    assert has_line(CELLS, {1, 3, 5, 7, 9})
    assert not has_line(CELLS, {1, 3})


def test_line_checks_flat_groups_not_printed_rows():
    # Only cells 0..4 matter for the first group, so 7 and 9 are not needed.
    assert has_line(CELLS, [1, 3, 5])
    assert not has_full_row(CELLS, [1, 3, 5])
    # The second group straddles row 0 (cells 5..8) and row 1 (cell 9).
    assert has_line(CELLS, [7, 9])


def test_full_row_needs_every_number_of_the_row():
    assert has_full_row(CELLS, [12, 32, 52, 72, 82])
    assert not has_full_row(CELLS, [12, 32, 52, 72])


def test_bingo_requires_all_fifteen_numbers():
    numbers = [v for v in CELLS if v is not None]
    assert len(numbers) == 15
    assert has_bingo(CELLS, numbers)
    for missing in numbers:
        assert not has_bingo(CELLS, [n for n in numbers if n != missing])


def test_bingo_on_generated_card():
    card = generate_card("1", LCGSource(31))
    drawn = list(range(1, 90))
    assert has_bingo(card.cells, drawn)
    assert has_line(card.cells, drawn)
    assert not has_bingo(card.cells, [])


def test_checkers_do_not_mutate_inputs():
    cells = list(CELLS)
    drawn = [1, 3, 5]
    has_line(cells, drawn)
    has_bingo(cells, drawn)
    assert cells == CELLS
    assert drawn == [1, 3, 5]


def game() -> Game:
    return Game(filename="g", cards=[Card(title="g-7", number=7, cells=list(CELLS))])


def test_find_card_by_number():
    assert find_card(game(), 7).title == "g-7"
    assert find_card(game(), 8) is None


def test_claims():
    assert check_claim(game(), "7", [1, 3, 5], "line").status is ClaimStatus.VALID
    assert check_claim(game(), " 7 ", [1], "line").status is ClaimStatus.NOT_VALID
    assert check_claim(game(), "8", [1, 3, 5], "line").status is ClaimStatus.CARD_NOT_FOUND
    assert check_claim(game(), "seven", [], "bingo").status is ClaimStatus.INVALID_INPUT
    assert check_claim(game(), "", [], "bingo").status is ClaimStatus.INVALID_INPUT
    assert check_claim(game(), "²", [], "line").status is ClaimStatus.INVALID_INPUT
    assert check_claim(game(), "٧", [], "line").status is ClaimStatus.INVALID_INPUT
    result = check_claim(game(), "7", [v for v in CELLS if v], "bingo")
    assert result.valid
    assert result.card.number == 7


def test_unknown_claim_kind():
    with pytest.raises(ValueError):
        check_claim(game(), "7", [], "house")
