from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Callable, List, Sequence, TypeVar


try:  # optional dependency
    import numpy as _np  # type: ignore
except Exception:  # pragma: no cover - optional
    _np = None

T = TypeVar("T")

# Anything returning floats in [0, 1) can drive the generators.
FloatSource = Callable[[], float]


def randint_from(rng: FloatSource, a: int, b: int) -> int:
    """Uniform integer in [a, b] drawn from a bare float source."""
    return a + int(rng() * (b - a + 1))


def index_from(rng: FloatSource, size: int) -> int:
    return int(rng() * size)


@dataclass
class RandomSource:
    engine: str

    def __call__(self) -> float:
        return self.random()

    def random(self) -> float:
        raise NotImplementedError

    def randint(self, a: int, b: int) -> int:
        return randint_from(self.random, a, b)

    def choice(self, seq: Sequence[T]) -> T:
        return seq[index_from(self.random, len(seq))]

    def shuffle(self, arr: List[T]) -> None:
        # Fisher-Yates, so every engine shuffles from its own stream
        for i in range(len(arr) - 1, 0, -1):
            j = index_from(self.random, i + 1)
            arr[i], arr[j] = arr[j], arr[i]

    def sample(self, seq: Sequence[T], k: int) -> List[T]:
        pool = list(seq)
        self.shuffle(pool)
        return pool[:k]


class PyRandomSource(RandomSource):
    def __init__(self, seed: int | None = None):
        super().__init__(engine="py_random")
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()

    def randint(self, a: int, b: int) -> int:
        return self._rng.randint(a, b)

    def shuffle(self, arr: List[T]) -> None:
        self._rng.shuffle(arr)


class LCGSource(RandomSource):
    """32-bit linear congruential generator (Numerical Recipes constants).

    Tiny and fully reproducible across platforms, which makes it the
    preferred source for fixtures that pin exact card contents.
    """

    A = 1664525
    C = 1013904223
    M = 2**32

    def __init__(self, seed: int):
        super().__init__(engine="lcg")
        self._state = seed % self.M

    def random(self) -> float:
        self._state = (self.A * self._state + self.C) % self.M
        return self._state / self.M


class NumpyPCG64Source(RandomSource):  # pragma: no cover - covered when numpy present
    def __init__(self, seed: int):
        if _np is None:
            raise RuntimeError("numpy is not installed; install bingo-cards[pcg]")
        super().__init__(engine="numpy_pcg64")
        self._rng = _np.random.Generator(_np.random.PCG64(seed))

    def random(self) -> float:
        return float(self._rng.random())

    def randint(self, a: int, b: int) -> int:
        return int(self._rng.integers(low=a, high=b + 1))


def create_rng(engine: str, seed: int) -> RandomSource:
    engine = (engine or "py_random").strip().lower()
    if engine == "py_random":
        return PyRandomSource(seed)
    if engine == "lcg":
        return LCGSource(seed)
    if engine == "numpy_pcg64":
        return NumpyPCG64Source(seed)
    raise ValueError(f"Unsupported RNG engine: {engine}")


def system_random() -> FloatSource:
    """The unseeded process-level source."""
    return random.random
