"""Backtest tooling configuration.

Loaded from BACKTEST_* environment variables or a local .env file. The
core engine never reads this; the runner and CLI pass values explicitly.
"""

from __future__ import annotations

from pydantic_settings import BaseSettings, SettingsConfigDict


class BacktestSettings(BaseSettings):
    """Backtest configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="BACKTEST_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    initial_capital: float = 10000.0
    strategy: str = "sma_crossover"

    # Backtests on shorter series are rejected by the runner
    min_bars: int = 30

    log_level: str = "INFO"

    # Labels used when exporting series
    symbol: str = "UNKNOWN"
    timeframe: str = "1d"


_settings: BacktestSettings | None = None


def get_backtest_settings() -> BacktestSettings:
    """Get cached backtest settings instance."""
    global _settings
    if _settings is None:
        _settings = BacktestSettings()
    return _settings
