"""Indicators computed from full OHLCV candles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from marketcore.models.candle import Candle, highs, lows, volumes
from marketcore.numeric import nan_array, require_period, window_mean

FIBONACCI_RETRACEMENT_LEVELS: list[tuple[float, str]] = [
    (0.0, "0%"),
    (0.236, "23.6%"),
    (0.382, "38.2%"),
    (0.5, "50%"),
    (0.618, "61.8%"),
    (0.786, "78.6%"),
    (1.0, "100%"),
]

FIBONACCI_EXTENSION_LEVELS: list[tuple[float, str]] = [
    (1.272, "127.2%"),
    (1.414, "141.4%"),
    (1.618, "161.8%"),
    (2.0, "200%"),
    (2.618, "261.8%"),
]


@dataclass
class FibonacciLevel:
    level: float
    price: float
    label: str


@dataclass
class IchimokuResult:
    tenkan_sen: np.ndarray  # Conversion line
    kijun_sen: np.ndarray  # Base line
    senkou_span_a: np.ndarray  # Leading span A, displaced forward
    senkou_span_b: np.ndarray  # Leading span B, displaced forward
    chikou_span: np.ndarray  # Lagging span, displaced backward


def true_range(candles: Sequence[Candle]) -> np.ndarray:
    """
    Calculate True Range.

    TR = max(high - low, abs(high - prev_close), abs(low - prev_close));
    the first bar has no previous close and uses high - low.
    """
    n = len(candles)
    result = np.empty(n, dtype=np.float64)
    for i, candle in enumerate(candles):
        if i == 0:
            result[i] = candle.range_size
            continue
        prev_close = candles[i - 1].close
        result[i] = max(
            candle.range_size,
            abs(candle.high - prev_close),
            abs(candle.low - prev_close),
        )
    return result


def atr(candles: Sequence[Candle], period: int = 14) -> np.ndarray:
    """
    Calculate Average True Range (ATR).

    The first value (index period - 1) is the simple mean of the first
    `period` true ranges, then Wilder's smoothing:
    atr[i] = (atr[i-1] * (period - 1) + tr[i]) / period.
    """
    require_period(period)
    tr = true_range(candles)
    result = nan_array(len(tr))
    if len(tr) < period:
        return result

    result[period - 1] = window_mean(tr, 0, period)
    for i in range(period, len(tr)):
        result[i] = (result[i - 1] * (period - 1) + tr[i]) / period

    return result


def vwap(candles: Sequence[Candle]) -> np.ndarray:
    """
    Calculate Volume Weighted Average Price anchored at the first bar.

    Uses the typical price (H + L + C) / 3; a missing or zero volume
    counts as 1 so the running ratio is always defined.
    """
    result = np.empty(len(candles), dtype=np.float64)
    cumulative_tpv = 0.0
    cumulative_volume = 0.0

    for i, candle in enumerate(candles):
        volume = candle.volume or 1.0
        cumulative_tpv += candle.typical_price * volume
        cumulative_volume += volume
        result[i] = cumulative_tpv / cumulative_volume

    return result


def obv(candles: Sequence[Candle]) -> np.ndarray:
    """Calculate On-Balance Volume, seeded with the first bar's volume."""
    n = len(candles)
    result = np.empty(n, dtype=np.float64)
    if n == 0:
        return result

    volume = volumes(candles)
    result[0] = volume[0]
    for i in range(1, n):
        if candles[i].close > candles[i - 1].close:
            result[i] = result[i - 1] + volume[i]
        elif candles[i].close < candles[i - 1].close:
            result[i] = result[i - 1] - volume[i]
        else:
            result[i] = result[i - 1]

    return result


def _high_low_midpoint(candles: Sequence[Candle], start: int, period: int) -> float:
    high = -np.inf
    low = np.inf
    for candle in candles[start : start + period]:
        if candle.high > high:
            high = candle.high
        if candle.low < low:
            low = candle.low
    return (high + low) / 2


def ichimoku_cloud(
    candles: Sequence[Candle],
    tenkan_period: int = 9,
    kijun_period: int = 26,
    senkou_b_period: int = 52,
    displacement: int = 26,
) -> IchimokuResult:
    """
    Calculate the Ichimoku Cloud.

    Senkou spans are projected `displacement` bars forward and then cut back
    to the input length, so their leading positions stay undefined. Chikou is
    the close shifted `displacement` bars back.
    """
    n = len(candles)
    tenkan_sen = nan_array(n)
    kijun_sen = nan_array(n)
    senkou_span_a = nan_array(n + displacement)
    senkou_span_b = nan_array(n + displacement)
    chikou_span = nan_array(n)

    for i in range(n):
        if i >= tenkan_period - 1:
            tenkan_sen[i] = _high_low_midpoint(candles, i - tenkan_period + 1, tenkan_period)

        if i >= kijun_period - 1:
            kijun_sen[i] = _high_low_midpoint(candles, i - kijun_period + 1, kijun_period)

        if not np.isnan(tenkan_sen[i]) and not np.isnan(kijun_sen[i]):
            senkou_span_a[i + displacement] = (tenkan_sen[i] + kijun_sen[i]) / 2

        if i >= senkou_b_period - 1:
            senkou_span_b[i + displacement] = _high_low_midpoint(
                candles, i - senkou_b_period + 1, senkou_b_period
            )

        if i >= displacement:
            chikou_span[i - displacement] = candles[i].close

    return IchimokuResult(
        tenkan_sen=tenkan_sen,
        kijun_sen=kijun_sen,
        senkou_span_a=senkou_span_a[:n],
        senkou_span_b=senkou_span_b[:n],
        chikou_span=chikou_span,
    )


def _series_high_low(candles: Sequence[Candle]) -> tuple[float, float]:
    return float(highs(candles).max()), float(lows(candles).min())


def fibonacci_retracement(candles: Sequence[Candle]) -> list[FibonacciLevel]:
    """Retracement prices measured down from the series high."""
    if not candles:
        return []

    high, low = _series_high_low(candles)
    diff = high - low
    return [
        FibonacciLevel(level=level, price=high - diff * level, label=label)
        for level, label in FIBONACCI_RETRACEMENT_LEVELS
    ]


def fibonacci_extension(candles: Sequence[Candle]) -> list[FibonacciLevel]:
    """Extension targets measured up from the series low."""
    if not candles:
        return []

    high, low = _series_high_low(candles)
    diff = high - low
    return [
        FibonacciLevel(level=level, price=low + diff * level, label=label)
        for level, label in FIBONACCI_EXTENSION_LEVELS
    ]


def heikin_ashi(candles: Sequence[Candle]) -> list[Candle]:
    """
    Convert candles to Heikin-Ashi candles.

    ha_close = (O + H + L + C) / 4
    ha_open  = (prev ha_open + prev ha_close) / 2, first bar (O + C) / 2
    ha_high  = max(H, ha_open, ha_close)
    ha_low   = min(L, ha_open, ha_close)
    """
    result: list[Candle] = []

    for i, c in enumerate(candles):
        ha_close = (c.open + c.high + c.low + c.close) / 4
        if i == 0:
            ha_open = (c.open + c.close) / 2
        else:
            ha_open = (result[i - 1].open + result[i - 1].close) / 2

        result.append(
            Candle(
                time=c.time,
                open=ha_open,
                high=max(c.high, ha_open, ha_close),
                low=min(c.low, ha_open, ha_close),
                close=ha_close,
                volume=c.volume,
            )
        )

    return result
