"""
Injectable randomness.

Everything random in a game (the shuffle and every opponent decision draw)
goes through one ``random.Random`` generator so a seeded game replays
exactly. Tests can swap in any object with a ``next_float()`` method.
"""

import random
from typing import Iterable, Optional, Protocol


class RandomSource(Protocol):
    """Anything that yields uniform floats in [0, 1)."""

    def next_float(self) -> float:
        ...


class SeededRandom:
    """
    ``RandomSource`` backed by ``random.Random``.

    The wrapped generator is exposed as ``generator`` so the deck can
    shuffle from the same stream.
    """

    def __init__(self, seed: Optional[int] = None):
        self.generator = random.Random(seed)

    def next_float(self) -> float:
        return self.generator.random()


class FixedRandom:
    """
    Replays a fixed list of draws, then repeats the last one.

    Useful to pin an opponent's decision in a test or a scripted demo.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        if not self._values:
            raise ValueError("FixedRandom needs at least one value")
        for v in self._values:
            if not 0.0 <= v < 1.0:
                raise ValueError(f"Draws must be in [0, 1), got {v}")
        self._index = 0
        self.calls = 0

    def next_float(self) -> float:
        value = self._values[min(self._index, len(self._values) - 1)]
        self._index += 1
        self.calls += 1
        return value
