"""Market structure analysis result models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class Trend(str, Enum):
    """Overall trend direction."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    SIDEWAYS = "sideways"


class Bias(str, Enum):
    """Directional bias of a detected pattern."""

    BULLISH = "bullish"
    BEARISH = "bearish"
    NEUTRAL = "neutral"


class LevelKind(str, Enum):
    SUPPORT = "support"
    RESISTANCE = "resistance"


class Recommendation(str, Enum):
    STRONG_BUY = "Strong Buy"
    BUY = "Buy"
    HOLD = "Hold"
    SELL = "Sell"
    STRONG_SELL = "Strong Sell"


@dataclass
class TrendLine:
    """Fitted line through recent pivots, evaluated at its first and last pivot."""

    start_time: int
    start_price: float
    end_time: int
    end_price: float
    kind: LevelKind
    strength: int  # 0-100, R^2 scaled


@dataclass
class SupportResistance:
    price: float
    kind: LevelKind
    strength: int  # 0-100
    touches: int


@dataclass
class Pattern:
    name: str
    bias: Bias
    confidence: int  # 0-100
    start_index: int
    end_index: int
    description: str = ""


@dataclass
class MarketAnalysis:
    """Complete market structure analysis of one series."""

    trendlines: list[TrendLine] = field(default_factory=list)
    support_resistance: list[SupportResistance] = field(default_factory=list)
    patterns: list[Pattern] = field(default_factory=list)
    trend: Trend = Trend.SIDEWAYS
    trend_strength: int = 0
    summary: str = ""
    sentiment_score: int = 0  # -100 (extremely bearish) to +100 (extremely bullish)
    recommendation: Recommendation = Recommendation.HOLD
