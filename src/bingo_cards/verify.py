from __future__ import annotations

import math
from collections import Counter
from typing import Dict, List, Sequence

from .layout import CELLS, COLUMNS, NUMBERS_PER_ROW, ROWS, column_range
from .models import Card, Game
from .uniqueness import cards_hash, cells_hash, column_values, has_duplicate_rows


def verify_card(card: Card) -> List[str]:
    """Return the invariant violations of a card (empty when valid)."""
    cells = card.cells
    if len(cells) != CELLS:
        return [f"expected {CELLS} cells, got {len(cells)}"]

    problems: List[str] = []
    for r in range(ROWS):
        filled = sum(1 for v in cells[r * COLUMNS : (r + 1) * COLUMNS] if v is not None)
        if filled != NUMBERS_PER_ROW:
            problems.append(f"row {r} has {filled} numbers, expected {NUMBERS_PER_ROW}")

    for c in range(COLUMNS):
        values = column_values(cells, c)
        if not values:
            problems.append(f"column {c} is empty")
            continue
        lo, hi = column_range(c)
        out_of_range = [v for v in values if not lo <= v <= hi]
        if out_of_range:
            problems.append(f"column {c} holds {out_of_range} outside {lo}..{hi}")
        if any(a >= b for a, b in zip(values, values[1:])):
            problems.append(f"column {c} is not strictly ascending: {values}")

    numbers = card.numbers()
    if len(numbers) != len(set(numbers)):
        problems.append("card repeats a number")
    if has_duplicate_rows(cells):
        problems.append("card has identical rows")
    return problems


def check_no_identical_cards(cards: Sequence[Card]) -> bool:
    seen = set()
    for card in cards:
        h = cells_hash(card.cells)
        if h in seen:
            return False
        seen.add(h)
    return True


def compute_frequencies(cards: Sequence[Card], highest: int = 90) -> Dict[int, int]:
    counts: Counter[int] = Counter()
    for card in cards:
        counts.update(card.numbers())
    # ensure all numbers present with 0
    for x in range(1, highest + 1):
        counts.setdefault(x, 0)
    return dict(counts)


def chi2_wilson_hilferty_pvalue(stat: float, df: int) -> float:
    if df <= 0:
        return 1.0
    # Wilson-Hilferty: cube root of chi2/df is roughly normal
    t = (stat / df) ** (1.0 / 3.0)
    mu = 1.0 - 2.0 / (9.0 * df)
    sigma = math.sqrt(2.0 / (9.0 * df))
    z = (t - mu) / sigma

    def phi(val: float) -> float:
        return 0.5 * (1.0 + math.erf(val / math.sqrt(2.0)))

    p_right = 1.0 - phi(z)
    return max(0.0, min(1.0, p_right))


def column_uniformity(freqs: Dict[int, int]) -> Dict[str, Dict[str, float]]:
    """Chi-square of each column's counts against a uniform spread."""
    out: Dict[str, Dict[str, float]] = {}
    for c in range(COLUMNS):
        lo, hi = column_range(c)
        observed = [freqs.get(x, 0) for x in range(lo, hi + 1)]
        total = sum(observed)
        df = len(observed) - 1
        if total == 0:
            out[str(c)] = {"stat": 0.0, "df": df, "p_value": 1.0}
            continue
        expected = total / len(observed)
        stat = sum((o - expected) ** 2 / expected for o in observed)
        out[str(c)] = {
            "stat": round(stat, 6),
            "df": df,
            "p_value": round(chi2_wilson_hilferty_pvalue(stat, df), 6),
        }
    return out


def verify_game(game: Game) -> Dict[str, object]:
    violations = {}
    for card in game.cards:
        problems = verify_card(card)
        if problems:
            violations[str(card.number)] = problems
    freqs = compute_frequencies(game.cards)
    return {
        "filename": str(game.filename),
        "cards": len(game.cards),
        "violations": violations,
        "ok_cards_valid": not violations,
        "ok_no_identical_cards": check_no_identical_cards(game.cards),
        "cards_hash": cards_hash(c.cells for c in game.cards),
        "frequencies": freqs,
        "column_uniformity": column_uniformity(freqs),
    }
