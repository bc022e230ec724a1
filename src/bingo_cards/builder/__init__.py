"""Card and batch builders."""

from .batch import BatchStats, build_game, generate_batch, generate_batch_with_stats
from .card import generate_card

__all__ = ["BatchStats", "build_game", "generate_batch", "generate_batch_with_stats", "generate_card"]
