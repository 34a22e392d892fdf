# server/utils/random_source.py
"""Injectable randomness for the simulation."""

import math
import random
from typing import Optional, Protocol, Sequence, TypeVar

T = TypeVar("T")


class RandomSource(Protocol):
    """Anything producing floats uniformly in [0, 1)."""

    def random(self) -> float: ...


class SeededRandom:
    """Reproducible source backed by a private ``random.Random``."""

    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self._rng = random.Random(seed)

    def random(self) -> float:
        return self._rng.random()


class SystemRandom:
    """Default entropy-seeded source used by hosts."""

    def __init__(self):
        self._rng = random.Random()

    def random(self) -> float:
        return self._rng.random()


def uniform(rng: RandomSource, low: float, high: float) -> float:
    """Draw from [low, high) using a single ``rng.random()`` call."""
    return low + rng.random() * (high - low)


def randint_below(rng: RandomSource, n: int) -> int:
    """Draw an integer in [0, n)."""
    return min(int(math.floor(rng.random() * n)), n - 1)


def choice(rng: RandomSource, items: Sequence[T]) -> T:
    """Pick one item uniformly."""
    return items[randint_below(rng, len(items))]


def make_random(seed: Optional[str] = None) -> RandomSource:
    """Build the host's source: seeded when a seed is configured."""
    if seed is None or seed == "":
        return SystemRandom()
    return SeededRandom(int(seed))
