"""Win conditions evaluated against the numbers drawn so far."""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Collection, Iterable, Optional, Sequence, Tuple

from .layout import ROWS, row_indices
from .models import Card, Cells, Game

# Flat-index triples checked by has_line. These are the first fifteen
# cells of the grid in groups of five, not the three printed rows.
LINE_INDICES: Tuple[Tuple[int, ...], ...] = (
    (0, 1, 2, 3, 4),
    (5, 6, 7, 8, 9),
    (10, 11, 12, 13, 14),
)

ROW_INDICES: Tuple[Tuple[int, ...], ...] = tuple(tuple(row_indices(r)) for r in range(ROWS))

_CARD_NUMBER_RE = re.compile(r"[0-9]+")


def _covered(cells: Cells, indices: Iterable[int], drawn: Collection[int]) -> bool:
    return all(cells[i] is None or cells[i] in drawn for i in indices)


def has_line(cells: Cells, drawn: Iterable[int]) -> bool:
    """True when any group in ``LINE_INDICES`` is fully drawn.

    Blank cells count as covered.
    """
    drawn_set = set(drawn)
    return any(_covered(cells, line, drawn_set) for line in LINE_INDICES)


def has_full_row(cells: Cells, drawn: Iterable[int]) -> bool:
    """Standard 90-ball line: all numbers of one printed row drawn."""
    drawn_set = set(drawn)
    return any(_covered(cells, row, drawn_set) for row in ROW_INDICES)


def has_bingo(cells: Cells, drawn: Iterable[int]) -> bool:
    drawn_set = set(drawn)
    return _covered(cells, range(len(cells)), drawn_set)


def find_card(game: Game, number: int) -> Optional[Card]:
    for card in game.cards:
        if card.number == number:
            return card
    return None


class ClaimStatus(str, Enum):
    VALID = "valid"
    NOT_VALID = "not_valid"
    CARD_NOT_FOUND = "card_not_found"
    INVALID_INPUT = "invalid_input"


CLAIM_KINDS = {"line": has_line, "bingo": has_bingo}


@dataclass
class ClaimResult:
    status: ClaimStatus
    card: Optional[Card] = None

    @property
    def valid(self) -> bool:
        return self.status is ClaimStatus.VALID


def check_claim(game: Game, card_input: str, drawn: Sequence[int], kind: str = "line") -> ClaimResult:
    """Resolve a card number typed by the caller and test a line or bingo claim."""
    if kind not in CLAIM_KINDS:
        raise ValueError(f"kind must be one of {sorted(CLAIM_KINDS)}, got {kind!r}")
    text = (card_input or "").strip()
    if not _CARD_NUMBER_RE.fullmatch(text):
        return ClaimResult(status=ClaimStatus.INVALID_INPUT)
    card = find_card(game, int(text))
    if card is None:
        return ClaimResult(status=ClaimStatus.CARD_NOT_FOUND)
    if CLAIM_KINDS[kind](card.cells, drawn):
        return ClaimResult(status=ClaimStatus.VALID, card=card)
    return ClaimResult(status=ClaimStatus.NOT_VALID, card=card)
