from __future__ import annotations

import hashlib
import json
from typing import Iterable, List, Optional, Sequence, Tuple

from .layout import COLUMNS, ROWS


def cells_hash(cells: Sequence[Optional[int]]) -> str:
    """Content key of a card: cells joined by commas, blanks as ''."""
    return ",".join("" if v is None else str(v) for v in cells)


def row_signature(cells: Sequence[Optional[int]], row: int) -> Tuple[str, ...]:
    start = row * COLUMNS
    return tuple("" if v is None else str(v) for v in cells[start : start + COLUMNS])


def has_duplicate_rows(cells: Sequence[Optional[int]]) -> bool:
    signatures = [row_signature(cells, r) for r in range(ROWS)]
    return len(set(signatures)) != len(signatures)


def column_values(cells: Sequence[Optional[int]], col: int) -> List[int]:
    return [v for v in (cells[r * COLUMNS + col] for r in range(ROWS)) if v is not None]


def matrix_hash(cells: Sequence[Optional[int]]) -> str:
    payload = json.dumps(list(cells), ensure_ascii=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()


def cards_hash(all_cells: Iterable[Sequence[Optional[int]]]) -> str:
    hashes = [matrix_hash(c) for c in all_cells]
    payload = json.dumps(hashes, ensure_ascii=True, separators=(",", ":"))
    return "sha256:" + hashlib.sha256(payload.encode("utf-8")).hexdigest()
