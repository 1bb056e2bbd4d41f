"""Technical indicators (pure math, no I/O)."""

from marketcore.indicators.calculator import IndicatorCalculator
from marketcore.indicators.indicators import (
    BollingerBandsResult,
    MACDResult,
    StochasticRSIResult,
    bollinger_bands,
    ema,
    macd,
    rsi,
    sma,
    stochastic_rsi,
)
from marketcore.indicators.ohlcv import (
    FibonacciLevel,
    IchimokuResult,
    atr,
    fibonacci_extension,
    fibonacci_retracement,
    heikin_ashi,
    ichimoku_cloud,
    obv,
    true_range,
    vwap,
)

__all__ = [
    "sma",
    "ema",
    "rsi",
    "macd",
    "bollinger_bands",
    "stochastic_rsi",
    "true_range",
    "atr",
    "vwap",
    "obv",
    "ichimoku_cloud",
    "fibonacci_retracement",
    "fibonacci_extension",
    "heikin_ashi",
    "MACDResult",
    "BollingerBandsResult",
    "StochasticRSIResult",
    "IchimokuResult",
    "FibonacciLevel",
    "IndicatorCalculator",
]
