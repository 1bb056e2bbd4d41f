"""Market structure analysis pipeline.

Runs pivot detection once and feeds it to every stage:

1. Trendlines through recent peaks/troughs
2. Support/resistance clustering
3. Pattern recognition
4. Trend classification
5. Sentiment score (-100..100) and recommendation
6. Human readable summary

This module is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

import logging
from typing import Sequence

from marketcore.models.analysis import (
    Bias,
    LevelKind,
    MarketAnalysis,
    Pattern,
    Recommendation,
    SupportResistance,
    Trend,
)
from marketcore.models.candle import Candle, validate_series
from marketcore.models.config import AnalyzerConfig
from marketcore.numeric import clamp, round_half_up
from marketcore.structure.levels import detect_support_resistance
from marketcore.structure.patterns import detect_patterns
from marketcore.structure.pivots import find_pivots
from marketcore.structure.trend import detect_trend
from marketcore.structure.trendlines import detect_trendlines

logger = logging.getLogger(__name__)

TREND_WEIGHT = 50
PATTERN_WEIGHT = 15
MOMENTUM_WEIGHT = 200

INSUFFICIENT_DATA_SUMMARY = "Insufficient data for analysis"


def calculate_sentiment_score(
    trend: Trend,
    trend_strength: int,
    patterns: Sequence[Pattern],
    candles: Sequence[Candle],
    momentum_bars: int = 5,
) -> int:
    """
    Combine trend, patterns and recent momentum into a score in [-100, 100].

    - Trend: up to +/-50, scaled by trend strength
    - Each pattern: up to +/-15, scaled by its confidence
    - Momentum: close change over the last `momentum_bars` bars, times 200
    """
    score = 0.0

    if trend == Trend.BULLISH:
        score += trend_strength / 100 * TREND_WEIGHT
    elif trend == Trend.BEARISH:
        score -= trend_strength / 100 * TREND_WEIGHT

    for pattern in patterns:
        pattern_score = pattern.confidence / 100 * PATTERN_WEIGHT
        if pattern.bias == Bias.BULLISH:
            score += pattern_score
        elif pattern.bias == Bias.BEARISH:
            score -= pattern_score

    if len(candles) >= momentum_bars:
        first = candles[-momentum_bars].close
        last = candles[-1].close
        score += (last - first) / first * MOMENTUM_WEIGHT

    return int(clamp(round_half_up(score), -100, 100))


def get_recommendation(score: int) -> Recommendation:
    """Map a sentiment score to a recommendation."""
    if score >= 60:
        return Recommendation.STRONG_BUY
    if score >= 25:
        return Recommendation.BUY
    if score >= -25:
        return Recommendation.HOLD
    if score >= -60:
        return Recommendation.SELL
    return Recommendation.STRONG_SELL


def build_summary(
    trend: Trend,
    trend_strength: int,
    levels: Sequence[SupportResistance],
    patterns: Sequence[Pattern],
) -> str:
    summary = f"Market is in a {trend.value} trend"
    if trend_strength > 70:
        summary += " with strong conviction"
    elif trend_strength > 40:
        summary += " with moderate strength"
    else:
        summary += " with weak momentum"

    support = next((lvl for lvl in levels if lvl.kind == LevelKind.SUPPORT), None)
    resistance = next((lvl for lvl in levels if lvl.kind == LevelKind.RESISTANCE), None)
    if support is not None:
        summary += f". Key support at ${support.price:.2f}"
    if resistance is not None:
        summary += f", resistance at ${resistance.price:.2f}"

    if patterns:
        summary += f". {patterns[0].name} pattern detected ({patterns[0].confidence}% confidence)"

    return summary


class MarketStructureAnalyzer:
    """Infer trend, levels and patterns from a candle series.

    Holds only configuration; every call recomputes from the input.
    """

    def __init__(self, config: AnalyzerConfig | None = None):
        self.config = config or AnalyzerConfig()

    def analyze(self, candles: Sequence[Candle]) -> MarketAnalysis:
        """Run the full pipeline.

        Series shorter than `config.min_bars` return a neutral result.

        Raises:
            InvalidSeriesError: If timestamps are not strictly increasing.
        """
        validate_series(candles)
        cfg = self.config

        if len(candles) < cfg.min_bars:
            logger.debug(
                "Skipping analysis: %d candles, need %d", len(candles), cfg.min_bars
            )
            return MarketAnalysis(summary=INSUFFICIENT_DATA_SUMMARY)

        pivots = find_pivots(candles, cfg.pivot_lookback)

        trendlines = detect_trendlines(
            candles,
            max_points=cfg.trendline_points,
            min_pivots=cfg.min_trendline_pivots,
            min_r2=cfg.min_r2,
            pivots=pivots,
        )
        levels = detect_support_resistance(
            candles,
            sensitivity=cfg.sensitivity,
            min_touches=cfg.min_level_touches,
            max_levels=cfg.max_levels,
            pivots=pivots,
        )
        patterns = detect_patterns(
            candles,
            min_bars=cfg.min_bars,
            tolerance=cfg.double_pattern_tolerance,
            min_separation=cfg.double_pattern_min_separation,
            pivots=pivots,
        )
        trend, trend_strength = detect_trend(
            candles, min_bars=cfg.min_bars, sideways_threshold=cfg.sideways_threshold
        )

        score = calculate_sentiment_score(
            trend, trend_strength, patterns, candles, cfg.momentum_bars
        )

        logger.debug(
            "Analysis: %d peaks, %d troughs, trend=%s(%d), score=%d",
            len(pivots.peaks),
            len(pivots.troughs),
            trend.value,
            trend_strength,
            score,
        )

        return MarketAnalysis(
            trendlines=trendlines,
            support_resistance=levels,
            patterns=patterns,
            trend=trend,
            trend_strength=trend_strength,
            summary=build_summary(trend, trend_strength, levels, patterns),
            sentiment_score=score,
            recommendation=get_recommendation(score),
        )


def run_analysis(
    candles: Sequence[Candle], config: AnalyzerConfig | None = None
) -> MarketAnalysis:
    """Analyze a series with the given (or default) configuration."""
    return MarketStructureAnalyzer(config).analyze(candles)
