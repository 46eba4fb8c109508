"""Deterministic random source: a small linear congruential generator."""

import time
from typing import Optional, TypeVar

T = TypeVar("T")

_MULTIPLIER = 9301
_INCREMENT = 49297
_MODULUS = 233280


def _default_seed() -> int:
    return int(time.time() * 1000)


class SeededRandom:
    """LCG seeded at construction. Same seed, same sequence."""

    def __init__(self, seed: Optional[int] = None):
        self.state = _default_seed() if seed is None else int(seed)

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self.state = (self.state * _MULTIPLIER + _INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def randrange(self, start: int, stop: int) -> int:
        """Return an integer in [start, stop)."""
        return int(self.random() * (stop - start)) + start

    def shuffle(self, items: list) -> None:
        """Fisher-Yates shuffle in place."""
        for i in range(len(items) - 1, 0, -1):
            j = self.randrange(0, i + 1)
            items[i], items[j] = items[j], items[i]


def shuffled(items: list[T], seed: Optional[int] = None) -> list[T]:
    """Return a shuffled copy of items using a fresh generator."""
    result = list(items)
    SeededRandom(seed).shuffle(result)
    return result
