"""Statistics calculator for backtest results.

Computes performance metrics from the executed trade list and the
per-bar equity curve:

- total return: final equity vs initial capital, in percent
- max drawdown: largest percent decline from the running equity peak
  (the peak starts at the initial capital)
- win rate / profit factor / Sharpe: from round-trip percent returns,
  one per buy -> sell pair. A round trip is a win only when its return is
  strictly positive.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from enum import Enum

logger = logging.getLogger(__name__)

# Sharpe annualisation: sqrt(252) trading days
TRADING_DAYS_PER_YEAR = 252


class TradeSide(str, Enum):
    BUY = "buy"
    SELL = "sell"


@dataclass
class Trade:
    side: TradeSide
    time: int
    price: float
    reason: str


@dataclass
class EquityPoint:
    time: int
    value: float


@dataclass
class BacktestResult:
    """Complete backtest results."""

    strategy: str
    initial_capital: float

    trades: list[Trade] = field(default_factory=list)
    equity: list[EquityPoint] = field(default_factory=list)

    # Round trips
    total_trades: int = 0
    winning_trades: int = 0
    losing_trades: int = 0
    win_rate: float = 0.0
    round_trip_returns: list[float] = field(default_factory=list)

    # Performance
    final_equity: float = 0.0
    total_return: float = 0.0
    max_drawdown: float = 0.0
    sharpe_ratio: float = 0.0
    profit_factor: float = 0.0


def round_trip_returns(trades: list[Trade]) -> list[float]:
    """Percent return of every buy -> sell pair, in trade order."""
    returns: list[float] = []
    entry_price: float | None = None
    for trade in trades:
        if trade.side == TradeSide.BUY:
            entry_price = trade.price
        elif entry_price is not None:
            returns.append((trade.price - entry_price) / entry_price * 100)
            entry_price = None
    return returns


def max_drawdown(equity: list[EquityPoint], initial_capital: float) -> float:
    """Largest percent decline from the running peak of the equity curve."""
    peak = initial_capital
    worst = 0.0
    for point in equity:
        if point.value > peak:
            peak = point.value
        drawdown = (peak - point.value) / peak * 100
        if drawdown > worst:
            worst = drawdown
    return worst


def sharpe_ratio(returns: list[float]) -> float:
    """Annualised mean / sample standard deviation of round-trip returns.

    Returns 0 for fewer than two returns or zero deviation.
    """
    if len(returns) < 2:
        return 0.0

    mean = sum(returns) / len(returns)
    variance = 0.0
    for r in returns:
        variance += (r - mean) ** 2
    std = math.sqrt(variance / (len(returns) - 1))
    if std == 0:
        return 0.0
    return mean / std * math.sqrt(TRADING_DAYS_PER_YEAR)


def profit_factor(returns: list[float]) -> float:
    """Sum of winning returns over the absolute sum of losing returns.

    +inf when there are gains but no losses, 0 when there is nothing to compare.
    """
    total_gain = 0.0
    total_loss = 0.0
    for r in returns:
        if r > 0:
            total_gain += r
        else:
            total_loss += abs(r)

    if total_loss > 0:
        return total_gain / total_loss
    if total_gain > 0:
        return float("inf")
    return 0.0


class StatisticsCalculator:
    """Calculate backtest statistics from trades and the equity curve."""

    def calculate(
        self,
        strategy: str,
        trades: list[Trade],
        equity: list[EquityPoint],
        initial_capital: float,
    ) -> BacktestResult:
        result = BacktestResult(
            strategy=strategy,
            initial_capital=initial_capital,
            trades=trades,
            equity=equity,
        )
        self._calc_round_trips(result)
        self._calc_performance(result)
        logger.debug(
            "%s: %d round trips, return %.2f%%, max drawdown %.2f%%",
            strategy,
            result.total_trades,
            result.total_return,
            result.max_drawdown,
        )
        return result

    def _calc_round_trips(self, result: BacktestResult) -> None:
        returns = round_trip_returns(result.trades)
        result.round_trip_returns = returns
        result.total_trades = len(result.trades) // 2
        result.winning_trades = sum(1 for r in returns if r > 0)
        result.losing_trades = len(returns) - result.winning_trades

        resolved = result.winning_trades + result.losing_trades
        if resolved > 0:
            result.win_rate = result.winning_trades / resolved * 100

        result.sharpe_ratio = sharpe_ratio(returns)
        result.profit_factor = profit_factor(returns)

    def _calc_performance(self, result: BacktestResult) -> None:
        initial = result.initial_capital
        result.final_equity = result.equity[-1].value if result.equity else initial
        result.total_return = (result.final_equity - initial) / initial * 100
        result.max_drawdown = max_drawdown(result.equity, initial)
