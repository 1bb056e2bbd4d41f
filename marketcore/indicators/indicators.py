"""Technical indicators over a single value series (usually closes).

Every function returns a float64 array index-aligned with its input.
Positions before an indicator's warm-up window hold NaN; output length
always equals input length.

Window statistics are recomputed in full at every step (O(n * period)),
summing left to right, so identical inputs give identical outputs and the
EMA seed equals the SMA at the same index exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

import numpy as np

from marketcore.numeric import nan_array, require_period, window_mean


@dataclass
class MACDResult:
    macd: np.ndarray
    signal: np.ndarray
    histogram: np.ndarray


@dataclass
class BollingerBandsResult:
    upper: np.ndarray
    middle: np.ndarray
    lower: np.ndarray


@dataclass
class StochasticRSIResult:
    k: np.ndarray
    d: np.ndarray


def _as_array(values: Sequence[float]) -> np.ndarray:
    return np.asarray(values, dtype=np.float64)


def sma(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate Simple Moving Average.

    Args:
        values: Sequence of values
        period: SMA period

    Returns:
        Array of SMA values, NaN for indices < period - 1
    """
    require_period(period)
    arr = _as_array(values)
    result = nan_array(len(arr))

    for i in range(period - 1, len(arr)):
        result[i] = window_mean(arr, i - period + 1, i + 1)

    return result


def ema(values: Sequence[float], period: int) -> np.ndarray:
    """
    Calculate Exponential Moving Average.

    The first value (index period - 1) is the SMA of the first `period`
    values; afterwards ema[i] = (x[i] - ema[i-1]) * 2 / (period + 1) + ema[i-1].

    Args:
        values: Sequence of values
        period: EMA period

    Returns:
        Array of EMA values (same length as input, with NaN for initial values)
    """
    require_period(period)
    arr = _as_array(values)
    result = nan_array(len(arr))
    if len(arr) < period:
        return result

    multiplier = 2 / (period + 1)
    current = window_mean(arr, 0, period)
    result[period - 1] = current

    for i in range(period, len(arr)):
        current = (arr[i] - current) * multiplier + current
        result[i] = current

    return result


def rsi(closes: Sequence[float], period: int = 14) -> np.ndarray:
    """
    Calculate Relative Strength Index.

    Uses the plain mean of the trailing `period` gains and losses (not
    Wilder's smoothing). A window without losses yields 100.

    Args:
        closes: Sequence of close prices
        period: RSI period

    Returns:
        Array of RSI values in [0, 100], NaN for indices < period
    """
    require_period(period)
    arr = _as_array(closes)
    n = len(arr)
    result = nan_array(n)
    if n < 2:
        return result

    deltas = np.diff(arr)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    for i in range(period, n):
        avg_gain = window_mean(gains, i - period, i)
        avg_loss = window_mean(losses, i - period, i)

        if avg_loss == 0:
            result[i] = 100.0
        else:
            rs = avg_gain / avg_loss
            result[i] = 100 - (100 / (1 + rs))

    return result


def macd(
    closes: Sequence[float],
    fast_period: int = 12,
    slow_period: int = 26,
    signal_period: int = 9,
) -> MACDResult:
    """
    Calculate MACD line, signal line and histogram.

    The signal line is an EMA over the defined MACD values only; it is
    mapped back onto the original indices through the positions where the
    MACD line is defined.
    """
    fast = ema(closes, fast_period)
    slow = ema(closes, slow_period)
    n = len(fast)

    macd_line = fast - slow  # NaN wherever either EMA is undefined

    defined = np.flatnonzero(~np.isnan(macd_line))
    compact_signal = ema(macd_line[defined], signal_period)

    signal_line = nan_array(n)
    signal_line[defined] = compact_signal

    histogram = macd_line - signal_line
    return MACDResult(macd=macd_line, signal=signal_line, histogram=histogram)


def bollinger_bands(
    closes: Sequence[float],
    period: int = 20,
    std_dev: float = 2.0,
) -> BollingerBandsResult:
    """
    Calculate Bollinger Bands.

    middle = SMA(period); upper/lower = middle +/- std_dev * sigma where sigma
    is the population standard deviation of the trailing window.
    """
    arr = _as_array(closes)
    middle = sma(arr, period)
    upper = nan_array(len(arr))
    lower = nan_array(len(arr))

    for i in range(period - 1, len(arr)):
        mean = middle[i]
        variance = 0.0
        for j in range(i - period + 1, i + 1):
            variance += (arr[j] - mean) ** 2
        std = np.sqrt(variance / period)

        upper[i] = mean + std_dev * std
        lower[i] = mean - std_dev * std

    return BollingerBandsResult(upper=upper, middle=middle, lower=lower)


def stochastic_rsi(
    closes: Sequence[float],
    rsi_period: int = 14,
    stoch_period: int = 14,
    k_smoothing: int = 3,
    d_smoothing: int = 3,
) -> StochasticRSIResult:
    """
    Calculate Stochastic RSI.

    Raw %K = (RSI - min RSI) / (max RSI - min RSI) * 100 over the trailing
    `stoch_period` RSI values (50 when the window is flat). %K is the SMA of
    raw %K and %D the SMA of %K; undefined values stay undefined through
    both smoothings.
    """
    require_period(stoch_period, "stoch_period")
    rsi_values = rsi(closes, rsi_period)
    n = len(rsi_values)
    raw_k = nan_array(n)

    for i in range(rsi_period + stoch_period - 1, n):
        window = rsi_values[i - stoch_period + 1 : i + 1]
        if np.isnan(window).any():
            continue

        min_rsi = window.min()
        max_rsi = window.max()
        if max_rsi == min_rsi:
            raw_k[i] = 50.0
        else:
            raw_k[i] = (rsi_values[i] - min_rsi) / (max_rsi - min_rsi) * 100

    k = sma(raw_k, k_smoothing)
    d = sma(k, d_smoothing)
    return StochasticRSIResult(k=k, d=d)
