"""Injectable uniform random source for variable rewards."""

import random
from collections.abc import Sequence
from typing import Protocol, TypeVar


T = TypeVar("T")


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def random(self) -> float:
        """Return the next uniform float in [0, 1)."""
        ...


class SystemRandomSource:
    """Process-wide pseudo-random generator; not cryptographically strong."""

    def __init__(self, seed: int | None = None) -> None:
        self._random = random.Random(seed)

    def random(self) -> float:
        return self._random.random()


system_random: RandomSource = SystemRandomSource()


def choose(items: Sequence[T], rng: RandomSource) -> T:
    """Pick one element uniformly."""
    index = min(int(rng.random() * len(items)), len(items) - 1)
    return items[index]


def shuffled(items: Sequence[T], rng: RandomSource) -> list[T]:
    """Return a Fisher-Yates shuffled copy of items."""
    result = list(items)
    for i in range(len(result) - 1, 0, -1):
        j = min(int(rng.random() * (i + 1)), i)
        result[i], result[j] = result[j], result[i]
    return result
