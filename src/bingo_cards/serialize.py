from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from .layout import CELLS
from .models import Card, Cells, Game, create_card_id, create_game_id

CARD_SEPARATOR = "|"
FIELD_SEPARATOR = ";"
CARD_PREFIX = "CardNo."
EXTENSION = ".bingoCards"
MAX_FIELD_VALUE = 90

_CARD_NO_RE = re.compile(r"CardNo\.([0-9]+)")
_FIELD_RE = re.compile(r"[0-9]+")


class MalformedSegmentError(ValueError):
    """A card segment of a ``.bingoCards`` blob could not be parsed."""

    def __init__(self, position: int, reason: str):
        super().__init__(f"Malformed card segment at position {position}: {reason}")
        self.position = position
        self.reason = reason


def format_timestamp(now: Optional[datetime] = None) -> str:
    """``YYYYMMDD-HHMM`` in local time."""
    return (now or datetime.now()).strftime("%Y%m%d-%H%M")


def export_filename(event_header: str, now: Optional[datetime] = None) -> str:
    return f"{event_header}-{format_timestamp(now)}{EXTENSION}"


def _encode_cells(cells: Cells) -> str:
    return FIELD_SEPARATOR.join("" if v is None else str(v) for v in cells)


def serialize_game(game: Game) -> str:
    return "".join(
        f"{CARD_SEPARATOR}{CARD_PREFIX}{card.number}{FIELD_SEPARATOR}{_encode_cells(card.cells)}"
        for card in game.cards
    )


def _parse_segment(filename: str, segment: str, position: int) -> Card:
    tokens = segment.split(FIELD_SEPARATOR)
    match = _CARD_NO_RE.fullmatch(tokens[0])
    if match is None:
        raise MalformedSegmentError(position, f"bad card prefix {tokens[0]!r}")
    if len(tokens) != CELLS + 1:
        raise MalformedSegmentError(position, f"expected {CELLS + 1} tokens, got {len(tokens)}")
    cells: Cells = []
    for token in tokens[1:]:
        if token == "":
            cells.append(None)
        elif not _FIELD_RE.fullmatch(token):
            raise MalformedSegmentError(position, f"non-numeric field {token!r}")
        elif int(token) > MAX_FIELD_VALUE:
            raise MalformedSegmentError(position, f"field {token} exceeds {MAX_FIELD_VALUE}")
        else:
            cells.append(int(token))
    number = int(match.group(1))
    return Card(title=create_card_id(f"{filename}-{number}"), number=number, cells=cells)


def parse_game(filename: str, content: str) -> Game:
    """Decode a ``.bingoCards`` blob.

    Card titles are derived as ``<filename>-<number>``. Run untrusted
    content through ``validation`` first; this only guards structure.
    """
    segments = [s for s in content.split(CARD_SEPARATOR) if s]
    cards: List[Card] = [
        _parse_segment(filename, segment, position)
        for position, segment in enumerate(segments, start=1)
    ]
    return Game(filename=create_game_id(filename), cards=cards)


def ensure_parent(path: Path, *, mkdirs: bool) -> None:
    parent = path.parent
    if not parent.exists() and mkdirs:
        parent.mkdir(parents=True, exist_ok=True)


def write_bingo_cards(path: Path, game: Game, *, mkdirs: bool, overwrite: bool) -> None:
    if path.exists() and not overwrite:
        raise FileExistsError(
            f"Refusing to overwrite existing file without --force: {path}"
        )
    ensure_parent(path, mkdirs=mkdirs)
    # newline="" keeps the blob byte-exact on every platform
    with path.open("w", newline="", encoding="utf-8") as f:
        f.write(serialize_game(game))


def read_bingo_cards(path: Path, filename: Optional[str] = None) -> Game:
    content = path.read_text(encoding="utf-8")
    return parse_game(filename if filename is not None else path.stem, content)
