"""RSI reversal strategy.

- RSI crosses up through the buy threshold (leaving oversold) -> BUY
- RSI crosses down through the sell threshold (leaving overbought) -> SELL
"""

from __future__ import annotations

from typing import Sequence

import numpy as np

from marketcore.indicators import rsi
from marketcore.models.candle import Candle, closes
from marketcore.models.config import StrategyConfig, StrategyType
from marketcore.strategy.protocol import Signal
from marketcore.strategy.registry import register_strategy


@register_strategy(StrategyType.RSI_REVERSAL.value)
class RsiReversalStrategy:
    """Mean-reversion entries on RSI leaving its extreme zones."""

    description = "Buy oversold, sell overbought"

    def __init__(self, config: StrategyConfig | None = None):
        self.config = (config or StrategyConfig(type=StrategyType.RSI_REVERSAL)).resolved()
        self.rsi_period = self.config.rsi_period
        self.buy_threshold = self.config.rsi_buy_threshold
        self.sell_threshold = self.config.rsi_sell_threshold

    @property
    def name(self) -> str:
        return StrategyType.RSI_REVERSAL.value

    @property
    def display_name(self) -> str:
        return "RSI Reversal"

    @property
    def required_indicators(self) -> list[str]:
        return [f"rsi{self.rsi_period}"]

    def generate(self, candles: Sequence[Candle]) -> list[Signal]:
        values = rsi(closes(candles), self.rsi_period)

        signals: list[Signal] = []
        for i in range(len(values)):
            if i < 1 or np.isnan(values[i]) or np.isnan(values[i - 1]):
                signals.append(Signal.HOLD)
            elif values[i - 1] <= self.buy_threshold and values[i] > self.buy_threshold:
                signals.append(Signal.BUY)
            elif values[i - 1] >= self.sell_threshold and values[i] < self.sell_threshold:
                signals.append(Signal.SELL)
            else:
                signals.append(Signal.HOLD)
        return signals

    def reason(self, signal: Signal) -> str:
        if signal == Signal.BUY:
            return "RSI oversold reversal"
        return "RSI overbought reversal"
