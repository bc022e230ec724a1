from __future__ import annotations

from pathlib import Path

import pytest

from bingo_cards.draw import DrawState, load_draw_state, save_draw_state
from bingo_cards.rng import LCGSource


def test_draws_every_number_once_then_stops():
    state = DrawState()
    rng = LCGSource(9)
    drawn = [state.draw(rng) for _ in range(89)]
    assert sorted(drawn) == list(range(1, 90))
    assert state.remaining() == []
    assert state.draw(rng) is None
    assert len(state.drawn) == 89


def test_mark_validates_range_and_repeats():
    state = DrawState()
    state.mark(45)
    with pytest.raises(ValueError):
        state.mark(45)
    with pytest.raises(ValueError):
        state.mark(90)
    with pytest.raises(ValueError):
        state.mark(0)
    assert state.drawn == [45]


def test_recent_is_newest_first_and_restart_clears():
    state = DrawState.from_list([5, 6, 7])
    assert state.recent(2) == [7, 6]
    state.restart()
    assert state.to_list() == []


def test_from_list_rejects_repeats():
    with pytest.raises(ValueError):
        DrawState.from_list([3, 3])


def test_persistence_round_trip(tmp_path: Path):
    path = tmp_path / "state" / "draw.json"
    assert load_draw_state(path).drawn == []
    save_draw_state(path, DrawState.from_list([10, 20]))
    assert load_draw_state(path).drawn == [10, 20]
    path.write_text('{"drawn": 1}', encoding="utf-8")
    with pytest.raises(ValueError):
        load_draw_state(path)
