"""
Seeded pseudo-random helpers.

Derived values (a vehicle's ETA, a recommendation's fuel savings) are bound
to an integer seed so that repeated calls for the same logical entity return
the same number within and across processes.
"""
import zlib
from typing import Sequence, TypeVar

import numpy as np

T = TypeVar("T")


def pseudo_random(seed: int) -> float:
    """
    Returns a reproducible value in [0, 1) for the given integer seed.
    """
    generator = np.random.Generator(np.random.PCG64(abs(int(seed))))
    return float(generator.random())


def route_seed(route_id: str) -> int:
    """
    Maps a route id to a stable integer seed.
    Numeric ids ("42") use their value, anything else its CRC32.
    """
    route_id = str(route_id)
    if route_id.isdigit():
        return int(route_id)
    return zlib.crc32(route_id.encode("utf-8"))


def digits_seed(identifier: str, default: int = 1) -> int:
    """Integer formed by the digits of an identifier ("15-3" -> 153)."""
    digits = "".join(ch for ch in str(identifier) if ch.isdigit())
    return int(digits) if digits else default


def weighted_choice(options: Sequence[T], weights: Sequence[float], draw: float) -> T:
    """
    Picks an option given a uniform draw in [0, 1).

    The draw is scaled by the total weight and the first option whose
    cumulative weight strictly exceeds it is returned. A draw landing
    exactly on a boundary therefore selects the next option.
    """
    if len(options) != len(weights) or not options:
        raise ValueError("options and weights must be non-empty and of equal length")
    total = float(sum(weights))
    if total <= 0:
        raise ValueError("weights must sum to a positive value")

    target = draw * total
    cumulative = 0.0
    for option, weight in zip(options, weights):
        cumulative += weight
        if target < cumulative:
            return option
    # Rounding can leave target == total
    return options[-1]
