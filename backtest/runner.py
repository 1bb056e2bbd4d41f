"""Backtest runner: validates input size and runs one or all strategies."""

from __future__ import annotations

import logging
from typing import Sequence

from marketcore.models.candle import Candle
from marketcore.models.config import StrategyConfig, StrategyType
from marketcore.strategy import list_strategies

from backtest.config import BacktestSettings, get_backtest_settings
from backtest.engine import BacktestEngine
from backtest.stats import BacktestResult

logger = logging.getLogger(__name__)


class InsufficientDataError(ValueError):
    """Raised when a series is too short for a meaningful backtest."""


class BacktestRunner:
    """Run backtests with the caller-side minimum bar requirement applied."""

    def __init__(self, settings: BacktestSettings | None = None):
        self.settings = settings or get_backtest_settings()

    def _check_length(self, candles: Sequence[Candle]) -> None:
        if len(candles) < self.settings.min_bars:
            raise InsufficientDataError(
                f"Backtest needs at least {self.settings.min_bars} candles, got {len(candles)}"
            )

    def run(self, candles: Sequence[Candle], config: StrategyConfig) -> BacktestResult:
        """Backtest a single strategy configuration.

        Raises:
            InsufficientDataError: If there are fewer than `min_bars` candles.
        """
        self._check_length(candles)
        if config.initial_capital is None:
            config = config.model_copy(update={"initial_capital": self.settings.initial_capital})

        logger.info("Running %s on %d candles", config.type.value, len(candles))
        result = BacktestEngine(config).run(candles)
        logger.info(
            "%s finished: %d trades, return %.2f%%",
            result.strategy,
            result.total_trades,
            result.total_return,
        )
        return result

    def run_all(
        self, candles: Sequence[Candle], initial_capital: float | None = None
    ) -> list[BacktestResult]:
        """Run every registered strategy with its defaults.

        Returns:
            Results sorted by total return, best first.
        """
        self._check_length(candles)
        results = [
            self.run(
                candles,
                StrategyConfig(type=StrategyType(name), initial_capital=initial_capital),
            )
            for name in list_strategies()
        ]
        return sorted(results, key=lambda r: r.total_return, reverse=True)
