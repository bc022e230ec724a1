from __future__ import annotations

from datetime import datetime
from pathlib import Path

import pytest
from hypothesis import given, settings, strategies as st

from bingo_cards.builder.batch import generate_batch
from bingo_cards.models import Card, Game
from bingo_cards.rng import LCGSource
from bingo_cards.serialize import (
    MalformedSegmentError,
    export_filename,
    parse_game,
    read_bingo_cards,
    serialize_game,
    write_bingo_cards,
)

ROW0 = [1, None, 3, None, 5, None, 7, None, 9]


def sample_game() -> Game:
    cells = ROW0 + [None] * 18
    return Game(filename="night", cards=[Card(title="night-4", number=4, cells=cells)])


def test_serialize_exact_format():
    text = serialize_game(sample_game())
    assert text == "|CardNo.4;1;;3;;5;;7;;9" + ";" * 18
    assert text.count(";") == 27


def test_parse_empty_content_gives_empty_game():
    game = parse_game("night", "")
    assert game.filename == "night"
    assert game.cards == []


def test_parse_derives_titles_from_filename():
    game = parse_game("night", serialize_game(sample_game()))
    assert game == sample_game()
    assert game.cards[0].title == "night-4"


@settings(max_examples=30, deadline=None)
@given(seed=st.integers(min_value=0, max_value=2**32 - 1), n=st.integers(min_value=0, max_value=12))
def test_round_trip_keeps_cells_and_numbers(seed, n):
    game = Game(filename="g", cards=generate_batch(n, LCGSource(seed)))
    parsed = parse_game("g", serialize_game(game))
    assert len(parsed.cards) == n
    for i, card in enumerate(parsed.cards):
        assert card.cells == game.cards[i].cells
        assert card.number == i + 1


def test_serialize_parse_serialize_is_byte_identical():
    game = Game(filename="g", cards=generate_batch(20, LCGSource(8)))
    first = serialize_game(game)
    assert serialize_game(parse_game("g", first)) == first


@pytest.mark.parametrize(
    "content",
    [
        "|CardNo.1;1;2;3",
        "|Card.1" + ";" * 27,
        "|CardNo.x" + ";" * 27,
        "|CardNo.1;a" + ";" * 26,
        "|CardNo.1;-5" + ";" * 26,
        "|CardNo.1;91" + ";" * 26,
        "|CardNo.1;999" + ";" * 26,
        "|CardNo.1" + ";" * 27 + "5\n",
        "|CardNo.1;²" + ";" * 26,
        "|CardNo.²" + ";" * 27,
    ],
)
def test_malformed_segments_raise(content):
    with pytest.raises(MalformedSegmentError):
        parse_game("bad", content)


def test_malformed_error_names_position():
    good = serialize_game(sample_game())
    with pytest.raises(MalformedSegmentError) as err:
        parse_game("bad", good + "|CardNo.5;1")
    assert err.value.position == 2


def test_export_filename_pattern():
    name = export_filename("Summer Fair", datetime(2024, 7, 1, 9, 5))
    assert name == "Summer Fair-20240701-0905.bingoCards"


def test_write_refuses_overwrite_and_reads_back(tmp_path: Path):
    target = tmp_path / "out" / "night.bingoCards"
    write_bingo_cards(target, sample_game(), mkdirs=True, overwrite=False)
    with pytest.raises(FileExistsError):
        write_bingo_cards(target, sample_game(), mkdirs=True, overwrite=False)
    write_bingo_cards(target, sample_game(), mkdirs=True, overwrite=True)
    assert read_bingo_cards(target) == sample_game()


def test_parser_accepts_field_bounds():
    game = parse_game("edge", "|CardNo.1;0;90" + ";" * 25)
    assert game.cards[0].cells[:3] == [0, 90, None]
