"""Pseudo-random number helpers sharing one generator."""

from __future__ import annotations

import math
import random as _random
import time

_rng = _random.Random()
_already_seeded = False


def seed_rand(seed: int | None = None) -> None:
    """Seed the generator with the given seed, or with the current time."""
    _rng.seed(time.time_ns() if seed is None else seed)


def seed_rand_once(seed: int | None = None) -> None:
    """Seed the generator only the first time this function is called."""
    global _already_seeded
    if not _already_seeded:
        seed_rand(seed)
        _already_seeded = True


def random_value(low: float = 0.0, high: float = 1.0) -> float:
    """Return a random float between low and high."""
    return _rng.random() * (high - low) + low


def random_int(low: int, high: int) -> int:
    """Return a random integer in [low, high]."""
    return _rng.randint(low, high)


def random_gaussian_value(mean: float, sigma: float) -> float:
    """Return a sample from a normal distribution (polar Box-Muller)."""
    while True:
        x1 = 2.0 * random_value() - 1.0
        x2 = 2.0 * random_value() - 1.0
        w = x1 * x1 + x2 * x2
        if 0.0 < w < 1.0:
            break
    w = math.sqrt((-2.0 * math.log(w)) / w)
    return mean + x1 * w * sigma


class UnrepeatedRandomizer:
    """Gives random integers in [low, high] without repeating any of them."""

    def __init__(self, low: int, high: int) -> None:
        if low > high:
            raise ValueError("low must not be greater than high")
        self.low = low
        self.high = high
        self._values: list[int] = []
        self.reset()

    def get(self) -> int:
        """Return a value not given before; starts over once all were given."""
        if not self._values:
            self.reset()
        idx = random_int(0, len(self._values) - 1)
        value = self._values[idx]
        self._values[idx] = self._values[-1]
        self._values.pop()
        return value

    def empty(self) -> bool:
        """Return whether every value in the range was already given."""
        return not self._values

    def left(self) -> int:
        """Return how many values are still to be given."""
        return len(self._values)

    def reset(self) -> None:
        """Make every value in the range available again."""
        self._values = list(range(self.low, self.high + 1))

    def __len__(self) -> int:
        return self.left()