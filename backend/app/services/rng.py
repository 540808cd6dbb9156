"""
Seedable pseudo-random source for the point search.

Mulberry32 with exact 32-bit arithmetic, so one seed always yields the same sequence of
floats in [0, 1). Determinism of seeded layouts depends on this sequence being stable.
"""

from __future__ import annotations

import time
from typing import Sequence, TypeVar

T = TypeVar("T")

_MASK32 = 0xFFFFFFFF
_GOLDEN_GAMMA = 0x9E3779B9


def _imul(a: int, b: int) -> int:
    """Low 32 bits of a 32-bit integer product."""
    return (a * b) & _MASK32


class Mulberry32:
    """Mulberry32 generator; calling the instance returns the next float in [0, 1)."""

    def __init__(self, seed: int) -> None:
        self._state = seed & _MASK32

    def __call__(self) -> float:
        self._state = (self._state + 0x6D2B79F5) & _MASK32
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & _MASK32
        return ((r ^ (r >> 14)) & _MASK32) / 4294967296.0

    def randint_below(self, n: int) -> int:
        """Uniform index in [0, n)."""
        return int(self() * n)


def seed_from_string(seed: str) -> int:
    """Sum of the first UTF-16 code unit of each character."""
    total = 0
    for ch in seed:
        cp = ord(ch)
        if cp > 0xFFFF:
            cp = 0xD800 + ((cp - 0x10000) >> 10)
        total += cp
    return total & _MASK32


def unseeded_seed(call_counter: int, now_ms: int | None = None) -> int:
    """Wall-clock milliseconds XOR the scrambled call counter, so repeated calls diverge."""
    if now_ms is None:
        now_ms = time.time_ns() // 1_000_000
    return ((now_ms & _MASK32) ^ ((call_counter * _GOLDEN_GAMMA) & _MASK32)) & _MASK32


def make_rng(seed: str | None, call_counter: int, now_ms: int | None = None) -> Mulberry32:
    """Generator for one search invocation. A non-empty seed string makes it deterministic."""
    if seed:
        return Mulberry32(seed_from_string(seed))
    return Mulberry32(unseeded_seed(call_counter, now_ms))


def shuffle(items: Sequence[T], rng: Mulberry32) -> list[T]:
    """Fisher-Yates shuffled copy."""
    out = list(items)
    for i in range(len(out) - 1, 0, -1):
        j = int(rng() * (i + 1))
        out[i], out[j] = out[j], out[i]
    return out
