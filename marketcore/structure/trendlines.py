"""Automatic trendline fitting through recent pivots."""

from __future__ import annotations

from typing import Sequence

from marketcore.models.analysis import LevelKind, TrendLine
from marketcore.models.candle import Candle
from marketcore.numeric import round_half_up
from marketcore.structure.pivots import Pivots, find_pivots
from marketcore.structure.regression import linear_regression


def _fit_line(
    candles: Sequence[Candle],
    indices: list[int],
    prices: list[float],
    kind: LevelKind,
    min_r2: float,
) -> TrendLine | None:
    fit = linear_regression(indices, prices)
    if not fit.r2 > min_r2:
        return None

    start_idx = indices[0]
    end_idx = indices[-1]
    return TrendLine(
        start_time=candles[start_idx].time,
        start_price=fit.slope * start_idx + fit.intercept,
        end_time=candles[end_idx].time,
        end_price=fit.slope * end_idx + fit.intercept,
        kind=kind,
        strength=round_half_up(fit.r2 * 100),
    )


def detect_trendlines(
    candles: Sequence[Candle],
    lookback: int = 5,
    max_points: int = 6,
    min_pivots: int = 3,
    min_r2: float = 0.7,
    pivots: Pivots | None = None,
) -> list[TrendLine]:
    """
    Fit a resistance line through the most recent peaks and a support line
    through the most recent troughs.

    Each side uses its last `max_points` pivots (at least `min_pivots`
    required) and is kept only when the fit's R^2 exceeds `min_r2`.
    """
    if pivots is None:
        pivots = find_pivots(candles, lookback)

    trendlines: list[TrendLine] = []

    if len(pivots.peaks) >= min_pivots:
        recent = pivots.peaks[-max_points:]
        line = _fit_line(
            candles, recent, [candles[i].high for i in recent], LevelKind.RESISTANCE, min_r2
        )
        if line is not None:
            trendlines.append(line)

    if len(pivots.troughs) >= min_pivots:
        recent = pivots.troughs[-max_points:]
        line = _fit_line(
            candles, recent, [candles[i].low for i in recent], LevelKind.SUPPORT, min_r2
        )
        if line is not None:
            trendlines.append(line)

    return trendlines
