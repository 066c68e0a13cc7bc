#!/usr/bin/env python3
"""
Random sources for tile spawning.
The engine only ever asks for floats in [0, 1), so any object with a
next_float() method can drive it.
"""

import random
from typing import Iterable, Optional, Protocol


class RandomSource(Protocol):
    def next_float(self) -> float:
        ...


class DefaultRandom:
    """Seedable source backed by random.Random."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def next_float(self) -> float:
        return self._random.random()


class SequenceRandom:
    """
    Replays a fixed list of floats, cycling when exhausted.
    Used to script tile spawns in tests and replays.
    """

    def __init__(self, values: Iterable[float]):
        self._values = list(values)
        if not self._values:
            raise ValueError("SequenceRandom needs at least one value")
        for value in self._values:
            if not 0.0 <= value < 1.0:
                raise ValueError(f"Random value out of range [0, 1): {value}")
        self._index = 0

    def next_float(self) -> float:
        value = self._values[self._index % len(self._values)]
        self._index += 1
        return value
