"""Deterministic integer hashing used to key every spawn decision.

All randomness in the world engine flows through :func:`hash3`.  The
function folds three integers into a 32-bit seed with large odd prime
multipliers, then draws a single sample from a ``mulberry32`` generator.
Only integer arithmetic is involved, so the same inputs yield the same
float on every platform and in every process.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

_MASK32 = 0xFFFFFFFF
_TWO_POW_32 = 4294967296.0

_PRIME_A = 73856093
_PRIME_B = 19349663
_PRIME_T = 83492791
_MULBERRY_INCREMENT = 0x6D2B79F5


def mulberry32(state: int) -> float:
    """Return the first ``mulberry32`` sample for ``state`` in ``[0, 1)``."""

    t = (state + _MULBERRY_INCREMENT) & _MASK32
    t = ((t ^ (t >> 15)) * (t | 1)) & _MASK32
    t ^= (t + ((t ^ (t >> 7)) * (t | 61))) & _MASK32
    return ((t ^ (t >> 14)) & _MASK32) / _TWO_POW_32


def fold_seed(seed_a: int, seed_b: int, time_bucket: int) -> int:
    """Fold three integers into an unsigned 32-bit seed."""

    return ((seed_a * _PRIME_A) ^ (seed_b * _PRIME_B) ^ (time_bucket * _PRIME_T)) & _MASK32


def hash3(seed_a: int, seed_b: int, time_bucket: int) -> float:
    """Map an integer grid coordinate and time bucket to ``[0, 1)``."""

    return mulberry32(fold_seed(int(seed_a), int(seed_b), int(time_bucket)))


def cell_hash(lat: float, lng: float, time_shift: int = 0, *, grid_size: float = 0.0001) -> float:
    """Hash the grid cell containing ``(lat, lng)``."""

    cells_per_degree = 1.0 / grid_size
    return hash3(math.floor(lat * cells_per_degree), math.floor(lng * cells_per_degree), time_shift)


@dataclass(frozen=True)
class WorldHash:
    """Binds an optional world salt to :func:`hash3`.

    A salt of zero reproduces :func:`hash3` exactly; any other salt yields
    an independent world sharing the same algorithms.
    """

    salt: int = 0

    def __call__(self, seed_a: int, seed_b: int, time_bucket: int) -> float:
        if self.salt:
            return hash3(seed_a ^ self.salt, seed_b, time_bucket + self.salt)
        return hash3(seed_a, seed_b, time_bucket)


def current_hour(timestamp: float, *, bucket_seconds: int = 3600) -> int:
    """Return the time bucket for a Unix ``timestamp``."""

    return math.floor(timestamp / bucket_seconds)


__all__ = ["WorldHash", "cell_hash", "current_hour", "fold_seed", "hash3", "mulberry32"]
