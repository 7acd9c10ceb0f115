"""Rounding and averaging helpers shared by the scoring engines.

Python's built-in ``round`` uses banker's rounding, which would make a
composite of 6.5 land on 6 while 7.5 lands on 8. Every engine rounds half
away from zero instead so equal inputs always bucket the same way.
"""
from __future__ import annotations

import math
from typing import Sequence


def round_half_up(value: float) -> int:
    """Round to the nearest integer, with halves rounded up."""

    return int(math.floor(value + 0.5))


def round1(value: float) -> float:
    """Round to one decimal place, with halves rounded up."""

    return math.floor(value * 10 + 0.5) / 10


def clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; an empty sequence averages to ``0.0``."""

    if not values:
        return 0.0
    return sum(values) / len(values)


def population_std(values: Sequence[float]) -> float:
    if not values:
        return 0.0
    avg = mean(values)
    return math.sqrt(sum((v - avg) ** 2 for v in values) / len(values))


__all__ = ["round_half_up", "round1", "clamp", "mean", "population_std"]
