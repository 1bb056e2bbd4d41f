"""Pivot (local peak / trough) detection."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

from marketcore.models.candle import Candle


@dataclass
class Pivots:
    """Indices of local highs (peaks) and lows (troughs), oldest first."""

    peaks: list[int] = field(default_factory=list)
    troughs: list[int] = field(default_factory=list)


def find_pivots(candles: Sequence[Candle], lookback: int = 5) -> Pivots:
    """
    Find local peaks and troughs.

    Bar i is a peak when its high is strictly greater than every high within
    `lookback` bars on both sides, and a trough when its low is strictly
    lower than every such low. The first and last `lookback` bars can never
    be pivots.
    """
    pivots = Pivots()

    for i in range(lookback, len(candles) - lookback):
        is_peak = True
        is_trough = True

        for j in range(1, lookback + 1):
            before = candles[i - j]
            after = candles[i + j]
            if candles[i].high <= before.high or candles[i].high <= after.high:
                is_peak = False
            if candles[i].low >= before.low or candles[i].low >= after.low:
                is_trough = False
            if not is_peak and not is_trough:
                break

        if is_peak:
            pivots.peaks.append(i)
        if is_trough:
            pivots.troughs.append(i)

    return pivots
