from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from .layout import HIGHEST_NUMBER, LOWEST_NUMBER
from .rng import FloatSource, index_from, system_random
from .serialize import ensure_parent


@dataclass
class DrawState:
    """Numbers called so far, in call order."""

    drawn: List[int] = field(default_factory=list)

    def __post_init__(self) -> None:
        seen = set()
        for number in self.drawn:
            self._check_number(number)
            if number in seen:
                raise ValueError(f"number {number} drawn twice")
            seen.add(number)

    @staticmethod
    def _check_number(number: int) -> None:
        if not LOWEST_NUMBER <= number <= HIGHEST_NUMBER:
            raise ValueError(f"number {number} outside {LOWEST_NUMBER}..{HIGHEST_NUMBER}")

    def remaining(self) -> List[int]:
        called = set(self.drawn)
        return [n for n in range(LOWEST_NUMBER, HIGHEST_NUMBER + 1) if n not in called]

    def draw(self, rng: Optional[FloatSource] = None) -> Optional[int]:
        """Call a uniformly chosen undrawn number; ``None`` once all are out."""
        rng = rng if rng is not None else system_random()
        available = self.remaining()
        if not available:
            return None
        number = available[index_from(rng, len(available))]
        self.drawn.append(number)
        return number

    def mark(self, number: int) -> None:
        self._check_number(number)
        if number in self.drawn:
            raise ValueError(f"number {number} already drawn")
        self.drawn.append(number)

    def restart(self) -> None:
        self.drawn.clear()

    def recent(self, k: int = 10) -> List[int]:
        return list(reversed(self.drawn[-k:])) if k > 0 else []

    def to_list(self) -> List[int]:
        return list(self.drawn)

    @classmethod
    def from_list(cls, numbers: Sequence[int]) -> "DrawState":
        return cls(drawn=[int(n) for n in numbers])


def load_draw_state(path: Path) -> DrawState:
    if not path.exists():
        return DrawState()
    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, list):
        raise ValueError("Draw state file must hold a JSON list")
    return DrawState.from_list(data)


def save_draw_state(path: Path, state: DrawState, *, mkdirs: bool = True) -> None:
    ensure_parent(path, mkdirs=mkdirs)
    path.write_text(json.dumps(state.to_list()) + "\n", encoding="utf-8")
