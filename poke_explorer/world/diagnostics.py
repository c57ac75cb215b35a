"""Distribution checks for the hash and the species selector."""

from __future__ import annotations

from typing import Iterable

import numpy as np

from .rng import hash3
from .species import SpeciesSelector


def hash_samples(count: int, *, time_bucket: int = 0, width: int = 97) -> np.ndarray:
    """Sample :func:`hash3` over a block of neighbouring grid cells."""

    if count <= 0:
        raise ValueError("count must be positive")
    values = [hash3(index % width, index // width, time_bucket) for index in range(count)]
    return np.asarray(values, dtype=np.float64)


def hash_histogram(samples: np.ndarray, bins: int = 10) -> np.ndarray:
    """Bucket ``samples`` from ``[0, 1)`` into ``bins`` equal-width counts."""

    if bins <= 0:
        raise ValueError("bins must be positive")
    counts, _ = np.histogram(samples, bins=bins, range=(0.0, 1.0))
    return counts


def chi_square_uniformity(counts: np.ndarray) -> float:
    """Pearson chi-square statistic of ``counts`` against a flat expectation."""

    counts = np.asarray(counts, dtype=np.float64)
    expected = counts.sum() / counts.size
    if expected == 0:
        return 0.0
    return float(((counts - expected) ** 2 / expected).sum())


def wildcard_fraction(draws: Iterable[float], selector: SpeciesSelector | None = None) -> float:
    """Share of raw draws landing in the full-catalog wildcard band."""

    selector = selector or SpeciesSelector()
    flags = np.fromiter((selector.is_wildcard(draw) for draw in draws), dtype=bool)
    if flags.size == 0:
        return 0.0
    return float(flags.mean())


__all__ = ["chi_square_uniformity", "hash_histogram", "hash_samples", "wildcard_fraction"]
