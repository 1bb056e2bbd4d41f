"""Overall trend classification from a least-squares fit of closes."""

from __future__ import annotations

from typing import Sequence

from marketcore.models.analysis import Trend
from marketcore.models.candle import Candle
from marketcore.numeric import clamp, round_half_up
from marketcore.structure.regression import linear_regression


def detect_trend(
    candles: Sequence[Candle],
    min_bars: int = 20,
    sideways_threshold: float = 0.1,
) -> tuple[Trend, int]:
    """
    Classify the trend of the whole series.

    The close-vs-index slope is normalised by the close range over the
    series length. Below `sideways_threshold` (absolute) the market is
    sideways with strength R^2 * 50; otherwise bullish/bearish by sign with
    strength R^2 * 100.

    Returns:
        (trend, strength) with strength in 0-100
    """
    if len(candles) < min_bars:
        return Trend.SIDEWAYS, 0

    close_values = [c.close for c in candles]
    fit = linear_regression(list(range(len(close_values))), close_values)

    price_range = max(close_values) - min(close_values)
    if price_range == 0:
        return Trend.SIDEWAYS, 0

    normalized_slope = fit.slope * len(candles) / price_range

    if abs(normalized_slope) < sideways_threshold:
        return Trend.SIDEWAYS, int(clamp(round_half_up(fit.r2 * 50), 0, 100))

    strength = int(clamp(round_half_up(fit.r2 * 100), 0, 100))
    if normalized_slope > 0:
        return Trend.BULLISH, strength
    return Trend.BEARISH, strength
