"""Strategy and analyzer configuration models."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class StrategyType(str, Enum):
    SMA_CROSSOVER = "sma_crossover"
    EMA_CROSSOVER = "ema_crossover"
    RSI_REVERSAL = "rsi_reversal"
    BOLLINGER_BOUNCE = "bollinger_bounce"


DEFAULT_INITIAL_CAPITAL = 10000.0

# Per-strategy defaults applied to omitted fields
STRATEGY_DEFAULTS: dict[StrategyType, dict[str, float]] = {
    StrategyType.SMA_CROSSOVER: {"fast_period": 10, "slow_period": 30},
    StrategyType.EMA_CROSSOVER: {"fast_period": 12, "slow_period": 26},
    StrategyType.RSI_REVERSAL: {
        "rsi_period": 14,
        "rsi_buy_threshold": 30,
        "rsi_sell_threshold": 70,
    },
    # Bollinger bounce reuses fast_period as the band period
    StrategyType.BOLLINGER_BOUNCE: {"fast_period": 20},
}


class StrategyConfig(BaseModel):
    """Backtest strategy selection plus its numeric parameters.

    Fields left as None are filled from STRATEGY_DEFAULTS by `resolved()`.
    """

    type: StrategyType

    fast_period: int | None = Field(default=None, ge=1)
    slow_period: int | None = Field(default=None, ge=1)

    rsi_period: int | None = Field(default=None, ge=1)
    rsi_buy_threshold: float | None = None
    rsi_sell_threshold: float | None = None

    initial_capital: float | None = Field(default=None, gt=0)

    def resolved(self) -> "StrategyConfig":
        """Return a copy with per-strategy defaults applied."""
        updates: dict[str, float] = {}
        for key, value in STRATEGY_DEFAULTS[self.type].items():
            if getattr(self, key) is None:
                updates[key] = value
        if self.initial_capital is None:
            updates["initial_capital"] = DEFAULT_INITIAL_CAPITAL
        return self.model_copy(update=updates)


class AnalyzerConfig(BaseModel):
    """Tunable constants of the market structure analyzer."""

    # Pivot detection
    pivot_lookback: int = Field(default=5, ge=1)

    # Support/resistance clustering (tolerance as a fraction of the price range)
    sensitivity: float = 0.02
    max_levels: int = 6
    min_level_touches: int = 2

    # Trendlines
    trendline_points: int = 6
    min_trendline_pivots: int = 3
    min_r2: float = 0.7

    # Patterns and trend
    min_bars: int = 20
    double_pattern_tolerance: float = 0.02
    double_pattern_min_separation: int = 5
    sideways_threshold: float = 0.1

    # Sentiment momentum window
    momentum_bars: int = 5
