"""Bollinger band bounce strategy.

- Close at or below the lower band -> BUY
- Close at or above the upper band -> SELL

Bands use the configured period (fast_period) and a fixed 2 sigma width.
"""

from __future__ import annotations

from typing import Sequence

from marketcore.indicators import bollinger_bands
from marketcore.models.candle import Candle, closes
from marketcore.models.config import StrategyConfig, StrategyType
from marketcore.strategy.protocol import Signal
from marketcore.strategy.registry import register_strategy

BAND_STD_DEV = 2.0


@register_strategy(StrategyType.BOLLINGER_BOUNCE.value)
class BollingerBounceStrategy:
    """Buy the lower band, sell the upper band."""

    description = "Buy at lower band, sell at upper"

    def __init__(self, config: StrategyConfig | None = None):
        self.config = (config or StrategyConfig(type=StrategyType.BOLLINGER_BOUNCE)).resolved()
        self.period = self.config.fast_period

    @property
    def name(self) -> str:
        return StrategyType.BOLLINGER_BOUNCE.value

    @property
    def display_name(self) -> str:
        return "Bollinger Bounce"

    @property
    def required_indicators(self) -> list[str]:
        return [f"bb{self.period}"]

    def generate(self, candles: Sequence[Candle]) -> list[Signal]:
        close_values = closes(candles)
        bands = bollinger_bands(close_values, self.period, BAND_STD_DEV)

        signals: list[Signal] = []
        for i, close in enumerate(close_values):
            # The first defined band (index period - 1) is skipped
            if i < self.period:
                signals.append(Signal.HOLD)
            elif close <= bands.lower[i]:
                signals.append(Signal.BUY)
            elif close >= bands.upper[i]:
                signals.append(Signal.SELL)
            else:
                signals.append(Signal.HOLD)
        return signals

    def reason(self, signal: Signal) -> str:
        if signal == Signal.BUY:
            return "Price at lower BB"
        return "Price at upper BB"
