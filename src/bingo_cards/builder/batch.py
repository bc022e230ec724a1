from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional, Set, Tuple

from ..models import Card, Game, create_game_id
from ..rng import FloatSource, system_random
from ..serialize import format_timestamp
from ..uniqueness import cells_hash
from .card import MAX_ATTEMPTS, generate_card

logger = logging.getLogger(__name__)


@dataclass
class BatchStats:
    """Bookkeeping for one batch run."""

    cards: int
    collisions: int = 0
    accepted_duplicates: int = 0
    elapsed: float = 0.0


def generate_batch_with_stats(
    count: int,
    rng: Optional[FloatSource] = None,
    *,
    max_attempts: int = MAX_ATTEMPTS,
) -> Tuple[List[Card], BatchStats]:
    """Generate ``count`` cards titled 1..count with pairwise distinct cells.

    Each new card is checked against every card accepted before it; a
    colliding card is regenerated up to ``max_attempts`` times and the
    last attempt is kept regardless. Every card gets at least one attempt,
    even when ``max_attempts`` is zero or negative.
    """
    if count < 0:
        raise ValueError(f"count must be non-negative, got {count}")
    rng = rng if rng is not None else system_random()

    start = time.perf_counter()
    stats = BatchStats(cards=0)
    seen: Set[str] = set()
    cards: List[Card] = []
    for i in range(1, count + 1):
        for _attempt in range(max(1, max_attempts)):
            card = generate_card(str(i), rng, max_attempts=max_attempts)
            key = cells_hash(card.cells)
            if key not in seen:
                break
            stats.collisions += 1
        else:
            stats.accepted_duplicates += 1
            logger.warning("Card %d duplicates an earlier card after %d attempts", i, max_attempts)
        seen.add(key)
        cards.append(card)

    stats.cards = len(cards)
    stats.elapsed = time.perf_counter() - start
    logger.info(
        "Generated %d cards in %.3fs (%d collisions)", stats.cards, stats.elapsed, stats.collisions
    )
    return cards, stats


def generate_batch(
    count: int,
    rng: Optional[FloatSource] = None,
    *,
    max_attempts: int = MAX_ATTEMPTS,
) -> List[Card]:
    cards, _stats = generate_batch_with_stats(count, rng, max_attempts=max_attempts)
    return cards


def build_game(
    count: int,
    event_header: str,
    rng: Optional[FloatSource] = None,
    now: Optional[datetime] = None,
    *,
    max_attempts: int = MAX_ATTEMPTS,
) -> Game:
    """Fresh game named ``<YYYYMMDD-HHMM>-<event_header>``."""
    cards = generate_batch(count, rng, max_attempts=max_attempts)
    return Game(filename=create_game_id(f"{format_timestamp(now)}-{event_header}"), cards=cards)
