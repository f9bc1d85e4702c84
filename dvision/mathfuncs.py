"""Small statistics and angle helpers."""

from __future__ import annotations

import math
from collections.abc import Sequence
from typing import Any


def mean(values: Sequence[float]) -> float:
    """Return the mean of a population, or 0 when it is empty."""
    if not values:
        return 0.0
    return sum(values) / float(len(values))


def stdev(values: Sequence[float], mean_value: float | None = None) -> float:
    """Return the sample standard deviation (N-1), or 0 for fewer than two values."""
    if len(values) <= 1:
        return 0.0
    if mean_value is None:
        mean_value = mean(values)
    total = sum((v - mean_value) ** 2 for v in values)
    return math.sqrt(total / float(len(values) - 1))


def median(values: Sequence[float]) -> float:
    """Return the median of a population, or 0 when it is empty."""
    if not values:
        return 0.0
    ordered = sorted(values)
    half = len(ordered) // 2
    if len(ordered) % 2 == 1:
        return float(ordered[half])
    return (float(ordered[half - 1]) + float(ordered[half])) / 2.0


def minimum(values: Sequence[Any]) -> Any:
    """Return the smallest value, or NaN when there is none."""
    if not values:
        return math.nan
    return min(values)


def maximum(values: Sequence[Any]) -> Any:
    """Return the largest value, or NaN when there is none."""
    if not values:
        return math.nan
    return max(values)


def signed_angle(angle: float) -> float:
    """Convert an angle in [0, 360) degrees into (-180, 180]."""
    return angle if angle <= 180 else angle - 360


def absolute_angle(angle: float) -> float:
    """Convert an angle in (-180, 180] degrees into [0, 360)."""
    return angle if angle >= 0 else angle + 360