"""Small float helpers shared by indicators and analysis."""

import math

import numpy as np


def is_nan(value) -> bool:
    """Check if a value is undefined (None or NaN)."""
    if value is None:
        return True
    return math.isnan(value)


def nan_array(length: int) -> np.ndarray:
    """Create a float64 array of `length` undefined values."""
    return np.full(length, np.nan, dtype=np.float64)


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves rounding towards +infinity."""
    return int(math.floor(value + 0.5))


def clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(upper, value))


def window_mean(values, start: int, end: int) -> float:
    """Mean of values[start:end], summed left to right.

    The explicit sequential sum keeps results identical between indicators
    that share a seed (EMA seed == SMA at the same index).
    """
    total = 0.0
    for i in range(start, end):
        total += float(values[i])
    return total / (end - start)


def require_period(period: int, name: str = "period") -> None:
    if period < 1:
        raise ValueError(f"{name} must be >= 1, got {period}")
