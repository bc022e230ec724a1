from __future__ import annotations

import logging
from typing import List, Optional, Set, Union

from ..layout import CELLS, COLUMNS, NUMBERS_PER_ROW, ROWS, column_indices, column_range, flat_index
from ..models import Card, Cells, create_card_id
from ..rng import FloatSource, index_from, randint_from, system_random
from ..uniqueness import has_duplicate_rows

logger = logging.getLogger(__name__)

MAX_ATTEMPTS = 100
MAX_VALUE_TRIES = 100


def _filled_in_row(cells: Cells, row: int) -> int:
    return sum(1 for c in range(COLUMNS) if cells[flat_index(row, c)] is not None)


def _filled_in_column(cells: Cells, col: int) -> int:
    return sum(1 for i in column_indices(col) if cells[i] is not None)


def _sort_column(cells: Cells, col: int) -> None:
    positions = [i for i in column_indices(col) if cells[i] is not None]
    values = sorted(cells[i] for i in positions)  # type: ignore[type-var]
    for i, value in zip(positions, values):
        cells[i] = value


def _seed_columns(cells: Cells, used: Set[int], rng: FloatSource) -> None:
    """Two ascending numbers per column, one randomly chosen row left blank."""
    for col in range(COLUMNS):
        lo, hi = column_range(col)
        picked: List[int] = []
        while len(picked) < 2:
            value = randint_from(rng, lo, hi)
            if value in used:
                continue
            used.add(value)
            picked.append(value)
        picked.sort()
        skip_row = index_from(rng, ROWS)
        target_rows = [r for r in range(ROWS) if r != skip_row]
        for row, value in zip(target_rows, picked):
            cells[flat_index(row, col)] = value


def _trim_row(cells: Cells, row: int, used: Set[int], rng: FloatSource) -> None:
    while _filled_in_row(cells, row) > NUMBERS_PER_ROW:
        # never empty a column completely
        candidates = [
            c
            for c in range(COLUMNS)
            if cells[flat_index(row, c)] is not None and _filled_in_column(cells, c) > 1
        ]
        if not candidates:
            return
        col = candidates[index_from(rng, len(candidates))]
        idx = flat_index(row, col)
        used.discard(cells[idx])  # type: ignore[arg-type]
        cells[idx] = None


def _pad_row(cells: Cells, row: int, used: Set[int], rng: FloatSource) -> None:
    empty = [c for c in range(COLUMNS) if cells[flat_index(row, c)] is None]
    while _filled_in_row(cells, row) < NUMBERS_PER_ROW and empty:
        col = empty.pop(index_from(rng, len(empty)))
        lo, hi = column_range(col)
        for _ in range(MAX_VALUE_TRIES):
            value = randint_from(rng, lo, hi)
            if value not in used:
                break
        else:
            continue
        used.add(value)
        cells[flat_index(row, col)] = value
        _sort_column(cells, col)


def _build_cells(rng: FloatSource) -> Cells:
    cells: Cells = [None] * CELLS
    used: Set[int] = set()
    _seed_columns(cells, used, rng)
    for row in range(ROWS):
        filled = _filled_in_row(cells, row)
        if filled > NUMBERS_PER_ROW:
            _trim_row(cells, row, used, rng)
        elif filled < NUMBERS_PER_ROW:
            _pad_row(cells, row, used, rng)
    return cells


def rows_balanced(cells: Cells) -> bool:
    return all(_filled_in_row(cells, r) == NUMBERS_PER_ROW for r in range(ROWS))


def _as_card(card_number: Union[str, int], cells: Cells) -> Card:
    title = str(card_number)
    return Card(title=create_card_id(title), number=int(title), cells=cells)


def generate_card(
    card_number: Union[str, int],
    rng: Optional[FloatSource] = None,
    *,
    max_attempts: int = MAX_ATTEMPTS,
) -> Card:
    """Build one 90-ball card: 5 numbers per row, no blank column.

    Attempts whose rows cannot be balanced to five numbers, or whose rows
    collide, are thrown away and rebuilt from scratch. After
    ``max_attempts`` failures an unchecked card built from the system
    source is returned instead of raising. The fallback still seeds the
    columns and runs the row adjustment pass, so its rows hold five
    numbers whenever trimming can reach that; only the acceptance checks
    are skipped.
    """
    rng = rng if rng is not None else system_random()
    for attempt in range(max_attempts):
        cells = _build_cells(rng)
        if rows_balanced(cells) and not has_duplicate_rows(cells):
            return _as_card(card_number, cells)
        logger.debug("Card %s: attempt %d rejected, rebuilding", card_number, attempt + 1)

    logger.warning(
        "Card %s: %d attempts exhausted, falling back to an unchecked card",
        card_number,
        max_attempts,
    )
    return _as_card(card_number, _build_cells(system_random()))
