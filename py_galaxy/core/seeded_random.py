"""
Seeded random engine for galaxy generation.

Built on Johannes Baagøe's Alea algorithm: small state, fast, and fully
reproducible from a single seed. Every stage of the generator draws from one
instance so that identical seeds reproduce identical galaxies. Python's
random and NumPy's random must not be used in generation code.
"""

import math
from typing import Sequence, TypeVar

T = TypeVar("T")

_TWO_POW_32 = 0x100000000  # 2^32
_TWO_POW_NEG_32 = 2.3283064365386963e-10  # 2^-32


def _uint32(n):
    """Convert to unsigned 32-bit integer."""
    return int(n) & 0xFFFFFFFF


class _Mash:
    """Alea's string hash, used only while seeding."""

    def __init__(self):
        self.n = 0xEFC8249D

    def __call__(self, data) -> float:
        for char in str(data):
            self.n += ord(char)
            h = 0.02519603282416938 * self.n
            self.n = _uint32(h)
            h -= self.n
            h *= self.n
            self.n = _uint32(h)
            h -= self.n
            self.n += h * _TWO_POW_32
        return _uint32(self.n) * _TWO_POW_NEG_32


class SeededRandom:
    """
    Deterministic pseudo-random source.

    Output is a pure function of (seed, call_count). Two engines built from
    the same seed and driven through the same call sequence produce the
    same values.
    """

    def __init__(self, seed=0):
        """Initialize with an integer (or string) seed."""
        self.seed = seed
        self.call_count = 0

        mash = _Mash()
        self._s0 = mash(" ")
        self._s1 = mash(" ")
        self._s2 = mash(" ")
        self._c = 1

        self._s0 -= mash(seed)
        if self._s0 < 0:
            self._s0 += 1
        self._s1 -= mash(seed)
        if self._s1 < 0:
            self._s1 += 1
        self._s2 -= mash(seed)
        if self._s2 < 0:
            self._s2 += 1

    def random(self) -> float:
        """Generate next random number in [0, 1)."""
        self.call_count += 1
        t = 2091639 * self._s0 + self._c * _TWO_POW_NEG_32
        self._s0 = self._s1
        self._s1 = self._s2
        self._c = int(t)
        self._s2 = t - self._c
        return self._s2

    def uniform01(self) -> float:
        """Alias of random() for callers that prefer the explicit name."""
        return self.random()

    def range(self, low: float, high: float) -> float:
        """Uniform float in [low, high)."""
        return low + self.random() * (high - low)

    def int_range(self, low: int, high: int) -> int:
        """Uniform integer in [low, high], both ends inclusive."""
        return low + int(self.random() * (high - low + 1))

    def boolean(self, probability: float = 0.5) -> bool:
        """True with the given probability."""
        return self.random() < probability

    def angle(self) -> float:
        """Uniform angle in [0, 2*pi)."""
        return self.range(0.0, 2.0 * math.pi)

    def choice(self, seq: Sequence[T]) -> T:
        """Choose a random element from a non-empty sequence."""
        if not seq:
            raise IndexError("Cannot choose from an empty sequence")
        return seq[int(self.random() * len(seq))]

    def weighted_choice(self, items: Sequence[T], weights: Sequence[float]) -> T:
        """
        Pick one item using cumulative weights and a single draw.

        Falls back to the first item if rounding leaves the draw above the
        cumulative total.
        """
        if not items or len(items) != len(weights):
            raise ValueError("items and weights must be non-empty and of equal length")

        total = float(sum(weights))
        roll = self.random() * total
        cumulative = 0.0
        for item, weight in zip(items, weights):
            cumulative += weight
            if roll < cumulative:
                return item
        return items[0]
