"""90-ball bingo card generation, serialization and win checking."""

from .builder import build_game, generate_batch, generate_card
from .checker import check_claim, has_bingo, has_line
from .models import Card, Game
from .serialize import parse_game, serialize_game

__all__ = [
    "Card",
    "Game",
    "build_game",
    "check_claim",
    "generate_batch",
    "generate_card",
    "has_bingo",
    "has_line",
    "parse_game",
    "serialize_game",
]
