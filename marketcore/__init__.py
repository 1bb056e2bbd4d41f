"""Core quantitative logic: indicators, market structure and trading signals.

This package contains pure computation with no I/O dependencies
(no network, filesystem or environment access). It is shared by the
backtesting tooling (backtest/) and any caller that supplies an
ordered OHLCV series.
"""
