"""IndicatorCalculator: every library indicator for one candle series."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from marketcore.indicators.indicators import (
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
    stochastic_rsi,
)
from marketcore.indicators.ohlcv import (
    atr,
    fibonacci_extension,
    fibonacci_retracement,
    heikin_ashi,
    ichimoku_cloud,
    obv,
    vwap,
)
from marketcore.models.candle import Candle, closes, validate_series
from marketcore.numeric import is_nan

logger = logging.getLogger(__name__)

# Fixed library defaults: (fast, slow, signal), (stoch, k, d), (tenkan, kijun, senkou_b, displacement)
MACD_PERIODS = (12, 26, 9)
STOCH_RSI_PERIODS = (14, 3, 3)
ICHIMOKU_PERIODS = (9, 26, 52, 26)


def _last_defined(values: np.ndarray) -> float | None:
    for value in values[::-1]:
        if not is_nan(value):
            return float(value)
    return None


class IndicatorCalculator:
    """Calculator for all technical indicators of a candle series."""

    def __init__(
        self,
        sma_fast_period: int = 20,
        sma_slow_period: int = 50,
        ema_fast_period: int = 12,
        ema_slow_period: int = 26,
        rsi_period: int = 14,
        bollinger_period: int = 20,
        bollinger_std_dev: float = 2.0,
        atr_period: int = 14,
    ):
        self.sma_fast_period = sma_fast_period
        self.sma_slow_period = sma_slow_period
        self.ema_fast_period = ema_fast_period
        self.ema_slow_period = ema_slow_period
        self.rsi_period = rsi_period
        self.bollinger_period = bollinger_period
        self.bollinger_std_dev = bollinger_std_dev
        self.atr_period = atr_period

    def calculate_all(self, candles: Sequence[Candle]) -> dict:
        """
        Calculate all indicators for the given candles.

        Returns:
            Dict keyed by indicator name. Series values are arrays aligned
            with the input; Fibonacci entries are lists of levels and
            heikin_ashi a list of candles.
        """
        validate_series(candles)
        close_values = closes(candles)

        macd_result = macd(close_values, *MACD_PERIODS)
        bands = bollinger_bands(close_values, self.bollinger_period, self.bollinger_std_dev)
        stoch = stochastic_rsi(close_values, self.rsi_period, *STOCH_RSI_PERIODS)
        cloud = ichimoku_cloud(candles, *ICHIMOKU_PERIODS)

        return {
            f"sma{self.sma_fast_period}": sma(close_values, self.sma_fast_period),
            f"sma{self.sma_slow_period}": sma(close_values, self.sma_slow_period),
            f"ema{self.ema_fast_period}": ema(close_values, self.ema_fast_period),
            f"ema{self.ema_slow_period}": ema(close_values, self.ema_slow_period),
            "rsi": rsi(close_values, self.rsi_period),
            "macd": macd_result.macd,
            "macd_signal": macd_result.signal,
            "macd_histogram": macd_result.histogram,
            "bb_upper": bands.upper,
            "bb_middle": bands.middle,
            "bb_lower": bands.lower,
            "stoch_rsi_k": stoch.k,
            "stoch_rsi_d": stoch.d,
            "vwap": vwap(candles),
            "atr": atr(candles, self.atr_period),
            "obv": obv(candles),
            "ichimoku_tenkan": cloud.tenkan_sen,
            "ichimoku_kijun": cloud.kijun_sen,
            "ichimoku_senkou_a": cloud.senkou_span_a,
            "ichimoku_senkou_b": cloud.senkou_span_b,
            "ichimoku_chikou": cloud.chikou_span,
            "fib_retracement": fibonacci_retracement(candles),
            "fib_extension": fibonacci_extension(candles),
            "heikin_ashi": heikin_ashi(candles),
        }

    @property
    def warmup_bars(self) -> int:
        """Bars needed before every series indicator has a defined value."""
        fast, slow, signal = MACD_PERIODS
        stoch_period, k_smoothing, d_smoothing = STOCH_RSI_PERIODS
        tenkan, kijun, senkou_b, displacement = ICHIMOKU_PERIODS
        return max(
            self.sma_fast_period,
            self.sma_slow_period,
            self.ema_fast_period,
            self.ema_slow_period,
            self.rsi_period + 1,
            max(fast, slow) + signal - 1,
            self.bollinger_period,
            self.rsi_period + stoch_period + k_smoothing + d_smoothing - 2,
            self.atr_period,
            max(tenkan, kijun) + displacement,  # senkou span A
            senkou_b + displacement,  # senkou span B
            displacement + 1,  # chikou span
        )

    def calculate_latest(self, candles: Sequence[Candle]) -> dict[str, float] | None:
        """
        Calculate indicators for the latest bar only.

        Backward-displaced series (chikou) end in undefined values, so each
        entry is the last defined value of its series.

        Returns:
            Dict with one float per series indicator, or None if the series
            is shorter than `warmup_bars`
        """
        min_len = self.warmup_bars
        if len(candles) < min_len:
            logger.debug("Need %d candles for latest indicators, got %d", min_len, len(candles))
            return None

        latest = {}
        for name, values in self.calculate_all(candles).items():
            if not isinstance(values, np.ndarray):
                continue
            value = _last_defined(values)
            if value is not None:
                latest[name] = value
        return latest
