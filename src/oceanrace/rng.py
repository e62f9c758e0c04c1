"""Deterministic random number utilities.

Every piece of procedural content is derived from the voyage seed plus a
purpose tag, so islands, weather and reflections are decorrelated yet all
reproducible from a single integer.
"""

from typing import MutableSequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF

FNV_OFFSET_BASIS = 2166136261
FNV_PRIME = 16777619

# Purpose tags for derive_seed
ISLANDS_TAG = ""
WEATHER_TAG = "weather:"
REFLECTIONS_TAG = "qmarks:"


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


def hash_seed_string(text: str) -> int:
    """Fold a string into an unsigned 32-bit seed with FNV-1a.

    Args:
        text: Input string.

    Returns:
        Hash in [0, 2**32).
    """
    h = FNV_OFFSET_BASIS
    for ch in text:
        h ^= ord(ch)
        h = _imul(h, FNV_PRIME)
    return h


def derive_seed(seed: int, tag: str) -> int:
    """Derive an independent generator seed from a voyage seed and purpose tag."""
    return hash_seed_string(f"{tag}{seed}")


class SeededRng:
    """Small 32-bit generator (mulberry32 mixing).

    Calling the instance is equivalent to ``random()``.
    """

    def __init__(self, seed: int):
        self._state = seed & _MASK32

    def random(self) -> float:
        """Return the next float in [0, 1)."""
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        x = _imul(t ^ (t >> 15), t | 1)
        x ^= (x + _imul(x ^ (x >> 7), x | 61)) & _MASK32
        return ((x ^ (x >> 14)) & _MASK32) / 4294967296

    __call__ = random


def make_rng(seed: int) -> SeededRng:
    """Create a generator whose output sequence is a pure function of seed."""
    return SeededRng(seed)


def random_int(rng: SeededRng, lo: int, hi: int) -> int:
    """Uniform integer in the inclusive range [lo, hi]."""
    return int(rng() * (hi - lo + 1)) + lo


def shuffle(rng: SeededRng, items: MutableSequence[T]) -> MutableSequence[T]:
    """Fisher-Yates shuffle in place, walking down from the last index.

    Returns:
        The same sequence, for chaining.
    """
    for i in range(len(items) - 1, 0, -1):
        j = random_int(rng, 0, i)
        items[i], items[j] = items[j], items[i]
    return items
