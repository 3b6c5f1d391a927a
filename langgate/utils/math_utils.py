"""
Numeric helpers shared by the routing and evaluation engines.
"""

import math
import numbers
from typing import Any, Iterable, Sequence

import numpy as np


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    """
    Weight-normalized mean: Σ(vᵢ·wᵢ) / Σwᵢ.
    
    Returns 0.0 when there are no values or the total weight is not positive.
    """
    if len(values) == 0:
        return 0.0
    if len(values) != len(weights):
        raise ValueError("values and weights must have the same length")
    
    w = np.asarray(weights, dtype=float)
    total = float(np.sum(w))
    if total <= 0:
        return 0.0
    return float(np.dot(np.asarray(values, dtype=float), w) / total)


def mean(values: Iterable[float]) -> float:
    """Arithmetic mean, 0.0 for an empty input."""
    arr = np.fromiter(values, dtype=float)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def is_real_number(value: Any) -> bool:
    """True for real numbers. Booleans and numeric strings do not count."""
    return isinstance(value, numbers.Real) and not isinstance(value, bool)


def is_unit_interval(value: Any) -> bool:
    """True if value is a finite real number in [0, 1]."""
    if not is_real_number(value):
        return False
    number = float(value)
    return math.isfinite(number) and 0.0 <= number <= 1.0


def clamp_unit(value: float) -> float:
    """Clamp a score into [0, 1]; NaN maps to 0."""
    number = float(value)
    if math.isnan(number):
        return 0.0
    return min(1.0, max(0.0, number))
