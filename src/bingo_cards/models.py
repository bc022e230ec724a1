"""Plain data carried between the generators, the codec and the checkers."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, NewType, Optional

from .layout import COLUMNS, ROWS

CardId = NewType("CardId", str)
GameId = NewType("GameId", str)

Cells = List[Optional[int]]


def create_card_id(value: str) -> CardId:
    return CardId(str(value))


def create_game_id(value: str) -> GameId:
    return GameId(str(value))


@dataclass
class Card:
    """One 3x9 ticket, cells row-major with ``None`` for blanks."""

    title: CardId
    number: int
    cells: Cells

    def rows(self) -> List[Cells]:
        return [self.cells[r * COLUMNS : (r + 1) * COLUMNS] for r in range(ROWS)]

    def numbers(self) -> List[int]:
        return [v for v in self.cells if v is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {"title": str(self.title), "number": self.number, "cells": list(self.cells)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        return cls(
            title=create_card_id(data["title"]),
            number=int(data["number"]),
            cells=[None if v is None else int(v) for v in data["cells"]],
        )


@dataclass
class Game:
    """A named batch of cards."""

    filename: GameId
    cards: List[Card] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"filename": str(self.filename), "cards": [c.to_dict() for c in self.cards]}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Game":
        return cls(
            filename=create_game_id(data["filename"]),
            cards=[Card.from_dict(c) for c in data.get("cards", [])],
        )
