"""Backtesting system for indicator-driven trading strategies.

Only depends on marketcore/ for business logic; adds file loading,
export, reporting and a command-line interface on top.

Usage:
    python -m backtest --data prices.csv --strategy sma_crossover
    python -m backtest --data prices.csv --analyze
    python -m backtest --list-strategies
"""

from backtest.engine import BacktestEngine, run_backtest
from backtest.runner import BacktestRunner, InsufficientDataError
from backtest.stats import BacktestResult, EquityPoint, Trade, TradeSide

__all__ = [
    "BacktestEngine",
    "BacktestRunner",
    "BacktestResult",
    "EquityPoint",
    "InsufficientDataError",
    "Trade",
    "TradeSide",
    "run_backtest",
]
