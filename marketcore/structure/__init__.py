"""Market structure analysis: pivots, trendlines, levels, patterns, trend."""

from marketcore.structure.analyzer import (
    MarketStructureAnalyzer,
    build_summary,
    calculate_sentiment_score,
    get_recommendation,
    run_analysis,
)
from marketcore.structure.levels import detect_support_resistance
from marketcore.structure.patterns import detect_patterns
from marketcore.structure.pivots import Pivots, find_pivots
from marketcore.structure.regression import LineFit, linear_regression
from marketcore.structure.trend import detect_trend
from marketcore.structure.trendlines import detect_trendlines

__all__ = [
    "MarketStructureAnalyzer",
    "run_analysis",
    "build_summary",
    "calculate_sentiment_score",
    "get_recommendation",
    "detect_support_resistance",
    "detect_patterns",
    "detect_trend",
    "detect_trendlines",
    "find_pivots",
    "Pivots",
    "linear_regression",
    "LineFit",
]
