from __future__ import annotations

from datetime import datetime

import pytest

from bingo_cards.builder import batch as batch_module
from bingo_cards.builder.batch import build_game, generate_batch, generate_batch_with_stats
from bingo_cards.builder.card import generate_card
from bingo_cards.models import Card
from bingo_cards.rng import LCGSource
from bingo_cards.uniqueness import cells_hash


def test_empty_batch():
    assert generate_batch(0) == []


def test_negative_count_rejected():
    with pytest.raises(ValueError):
        generate_batch(-1)


def test_titles_are_sequence_positions():
    cards = generate_batch(25, LCGSource(1))
    assert [c.title for c in cards] == [str(i) for i in range(1, 26)]
    assert [c.number for c in cards] == list(range(1, 26))


def test_batch_is_reproducible_with_seeded_source():
    a = generate_batch(10, LCGSource(77))
    b = generate_batch(10, LCGSource(77))
    assert [c.cells for c in a] == [c.cells for c in b]


def test_ten_thousand_cards_are_mutually_unique():
    cards = generate_batch(10_000, LCGSource(20250824))
    assert len(cards) == 10_000
    assert len({cells_hash(c.cells) for c in cards}) == 10_000


def test_collisions_regenerate_then_accept(monkeypatch):
    fixed = generate_card("1", LCGSource(1))

    def same_card(card_number, rng=None, *, max_attempts=100):
        return Card(title=str(card_number), number=int(card_number), cells=list(fixed.cells))

    monkeypatch.setattr(batch_module, "generate_card", same_card)
    cards, stats = generate_batch_with_stats(3, LCGSource(1), max_attempts=3)
    assert len(cards) == 3
    assert stats.cards == 3
    assert stats.collisions == 6
    assert stats.accepted_duplicates == 2


def test_build_game_names_batch_after_timestamp_and_event():
    game = build_game(2, "Xmas", LCGSource(4), now=datetime(2024, 12, 25, 14, 30))
    assert game.filename == "20241225-1430-Xmas"
    assert len(game.cards) == 2


@pytest.mark.parametrize("max_attempts", [0, -1])
def test_non_positive_attempts_still_build_every_card(max_attempts):
    cards, stats = generate_batch_with_stats(2, LCGSource(1), max_attempts=max_attempts)
    assert [c.number for c in cards] == [1, 2]
    assert all(len(c.cells) == 27 for c in cards)
    assert stats.cards == 2
