"""Single-position backtest engine.

Replays a strategy's per-bar signals over a candle series:

1. BUY while flat: convert all cash to shares at the bar's close
2. SELL while long: convert all shares back to cash at the bar's close
3. Redundant signals (BUY while long, SELL while flat) are ignored
4. A position still open after the last bar is closed at the last close

No pyramiding and no shorting, so trades strictly alternate buy, sell.
Equity is recorded once per bar: shares * close while long, else cash.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Sequence

from marketcore.models.candle import Candle, validate_series
from marketcore.models.config import StrategyConfig
from marketcore.strategy import Signal, SignalGenerator, create_strategy

from backtest.stats import (
    BacktestResult,
    EquityPoint,
    StatisticsCalculator,
    Trade,
    TradeSide,
)

logger = logging.getLogger(__name__)

END_OF_PERIOD_REASON = "End of period"


class Position(str, Enum):
    FLAT = "flat"
    LONG = "long"


class BacktestEngine:
    """Run one strategy configuration against candle series."""

    def __init__(self, config: StrategyConfig):
        self.config = config.resolved()
        self.initial_capital = self.config.initial_capital
        self.strategy: SignalGenerator = create_strategy(
            self.config.type.value, config=self.config
        )

    def run(self, candles: Sequence[Candle]) -> BacktestResult:
        """Generate signals, simulate execution and compute statistics.

        Raises:
            InvalidSeriesError: If timestamps are not strictly increasing.
        """
        validate_series(candles)
        signals = self.strategy.generate(candles)
        trades, equity = self.simulate(candles, signals)
        return StatisticsCalculator().calculate(
            self.strategy.display_name, trades, equity, self.initial_capital
        )

    def simulate(
        self, candles: Sequence[Candle], signals: Sequence[Signal]
    ) -> tuple[list[Trade], list[EquityPoint]]:
        """Execute signals bar by bar.

        Returns:
            (trades, equity curve with one point per candle)
        """
        if len(signals) != len(candles):
            raise ValueError(
                f"Expected one signal per candle: {len(signals)} signals, {len(candles)} candles"
            )

        position = Position.FLAT
        cash = self.initial_capital
        shares = 0.0
        trades: list[Trade] = []
        equity: list[EquityPoint] = []

        for candle, signal in zip(candles, signals):
            price = candle.close

            if signal == Signal.BUY and position == Position.FLAT:
                shares = cash / price
                cash = 0.0
                position = Position.LONG
                trades.append(
                    Trade(TradeSide.BUY, candle.time, price, self.strategy.reason(signal))
                )
            elif signal == Signal.SELL and position == Position.LONG:
                cash = shares * price
                shares = 0.0
                position = Position.FLAT
                trades.append(
                    Trade(TradeSide.SELL, candle.time, price, self.strategy.reason(signal))
                )

            value = shares * price if position == Position.LONG else cash
            equity.append(EquityPoint(candle.time, value))

        if position == Position.LONG:
            last = candles[-1]
            trades.append(Trade(TradeSide.SELL, last.time, last.close, END_OF_PERIOD_REASON))
            logger.debug("Closed open position at end of period: %.4f", last.close)

        return trades, equity


def run_backtest(candles: Sequence[Candle], config: StrategyConfig) -> BacktestResult:
    """Backtest one strategy configuration on a candle series."""
    return BacktestEngine(config).run(candles)
