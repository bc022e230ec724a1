from __future__ import annotations

from typing import List, Tuple

ROWS = 3
COLUMNS = 9
CELLS = ROWS * COLUMNS
NUMBERS_PER_ROW = 5
LOWEST_NUMBER = 1
HIGHEST_NUMBER = 89


def column_range(col: int) -> Tuple[int, int]:
    """Inclusive value range of a column.

    - column 0: 1..9
    - columns 1..7: 10c..10c+9
    - column 8: 80..89 (90 is never dealt)
    """
    if not 0 <= col < COLUMNS:
        raise ValueError(f"column out of range: {col}")
    lo = LOWEST_NUMBER if col == 0 else col * 10
    hi = HIGHEST_NUMBER if col == COLUMNS - 1 else col * 10 + 9
    return lo, hi


COLUMN_RANGES: List[Tuple[int, int]] = [column_range(c) for c in range(COLUMNS)]


def flat_index(row: int, col: int) -> int:
    return row * COLUMNS + col


def row_indices(row: int) -> range:
    start = row * COLUMNS
    return range(start, start + COLUMNS)


def column_indices(col: int) -> List[int]:
    return [flat_index(r, col) for r in range(ROWS)]
