"""Moving average crossover strategies.

- Fast MA crosses above slow MA (golden cross) -> BUY
- Fast MA crosses below slow MA (death cross) -> SELL

A cross needs both averages defined on the current and previous bar.
This module is pure business logic with no I/O dependencies.
"""

from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from marketcore.indicators import ema, sma
from marketcore.models.candle import Candle, closes
from marketcore.models.config import StrategyConfig, StrategyType
from marketcore.strategy.protocol import Signal
from marketcore.strategy.registry import register_strategy


def crossover_signals(fast: np.ndarray, slow: np.ndarray) -> list[Signal]:
    """Turn two aligned moving averages into per-bar crossover signals."""
    signals: list[Signal] = []
    for i in range(len(fast)):
        if i < 1 or np.isnan([fast[i], slow[i], fast[i - 1], slow[i - 1]]).any():
            signals.append(Signal.HOLD)
        elif fast[i - 1] <= slow[i - 1] and fast[i] > slow[i]:
            signals.append(Signal.BUY)
        elif fast[i - 1] >= slow[i - 1] and fast[i] < slow[i]:
            signals.append(Signal.SELL)
        else:
            signals.append(Signal.HOLD)
    return signals


class _MovingAverageCrossover:
    strategy_type: StrategyType
    label: str
    average: Callable[[Sequence[float], int], np.ndarray]

    def __init__(self, config: StrategyConfig | None = None):
        self.config = (config or StrategyConfig(type=self.strategy_type)).resolved()
        self.fast_period = self.config.fast_period
        self.slow_period = self.config.slow_period

    @property
    def name(self) -> str:
        return self.strategy_type.value

    @property
    def display_name(self) -> str:
        return f"{self.label} Crossover"

    @property
    def required_indicators(self) -> list[str]:
        prefix = self.label.lower()
        return [f"{prefix}{self.fast_period}", f"{prefix}{self.slow_period}"]

    def generate(self, candles: Sequence[Candle]) -> list[Signal]:
        close_values = closes(candles)
        fast = self.average(close_values, self.fast_period)
        slow = self.average(close_values, self.slow_period)
        return crossover_signals(fast, slow)

    def reason(self, signal: Signal) -> str:
        if signal == Signal.BUY:
            return f"{self.label} Golden Cross"
        return f"{self.label} Death Cross"


@register_strategy(StrategyType.SMA_CROSSOVER.value)
class SmaCrossoverStrategy(_MovingAverageCrossover):
    """SMA golden/death cross strategy (defaults 10/30)."""

    strategy_type = StrategyType.SMA_CROSSOVER
    label = "SMA"
    average = staticmethod(sma)
    description = "Buy on golden cross, sell on death cross"


@register_strategy(StrategyType.EMA_CROSSOVER.value)
class EmaCrossoverStrategy(_MovingAverageCrossover):
    """EMA golden/death cross strategy (defaults 12/26)."""

    strategy_type = StrategyType.EMA_CROSSOVER
    label = "EMA"
    average = staticmethod(ema)
    description = "Fast/slow EMA crossover signals"
