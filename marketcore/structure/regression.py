"""Ordinary least-squares line fitting."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence


@dataclass
class LineFit:
    slope: float
    intercept: float
    r2: float


def linear_regression(xs: Sequence[float], ys: Sequence[float]) -> LineFit:
    """
    Fit y = slope * x + intercept by least squares.

    Fewer than two points give a zero fit. When y has no variance the fit
    explains nothing beyond the mean and R^2 is reported as 0.
    """
    n = len(xs)
    if n < 2:
        return LineFit(slope=0.0, intercept=0.0, r2=0.0)

    sum_x = 0.0
    sum_y = 0.0
    sum_xy = 0.0
    sum_x2 = 0.0
    for x, y in zip(xs, ys):
        sum_x += x
        sum_y += y
        sum_xy += x * y
        sum_x2 += x * x

    denominator = n * sum_x2 - sum_x * sum_x
    if denominator == 0:
        return LineFit(slope=0.0, intercept=sum_y / n, r2=0.0)

    slope = (n * sum_xy - sum_x * sum_y) / denominator
    intercept = (sum_y - slope * sum_x) / n

    mean_y = sum_y / n
    ss_total = 0.0
    ss_residual = 0.0
    for x, y in zip(xs, ys):
        ss_total += (y - mean_y) ** 2
        ss_residual += (y - (slope * x + intercept)) ** 2

    r2 = 1 - ss_residual / ss_total if ss_total > 0 else 0.0
    return LineFit(slope=slope, intercept=intercept, r2=r2)
