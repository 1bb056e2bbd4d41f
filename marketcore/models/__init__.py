"""Data models for candles, analysis results and configuration."""

from marketcore.models.analysis import (
    Bias,
    LevelKind,
    MarketAnalysis,
    Pattern,
    Recommendation,
    SupportResistance,
    Trend,
    TrendLine,
)
from marketcore.models.candle import (
    Candle,
    InvalidSeriesError,
    closes,
    highs,
    lows,
    validate_series,
    volumes,
)
from marketcore.models.config import (
    DEFAULT_INITIAL_CAPITAL,
    STRATEGY_DEFAULTS,
    AnalyzerConfig,
    StrategyConfig,
    StrategyType,
)

__all__ = [
    "Bias",
    "LevelKind",
    "MarketAnalysis",
    "Pattern",
    "Recommendation",
    "SupportResistance",
    "Trend",
    "TrendLine",
    "Candle",
    "InvalidSeriesError",
    "closes",
    "highs",
    "lows",
    "validate_series",
    "volumes",
    "DEFAULT_INITIAL_CAPITAL",
    "STRATEGY_DEFAULTS",
    "AnalyzerConfig",
    "StrategyConfig",
    "StrategyType",
]
