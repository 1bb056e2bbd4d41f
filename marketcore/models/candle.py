"""OHLCV candle data model and series helpers."""

from __future__ import annotations

from typing import Sequence

import numpy as np
from pydantic import BaseModel, ConfigDict, model_validator


class InvalidSeriesError(ValueError):
    """Raised when a candle series is not strictly ordered oldest-first."""


class Candle(BaseModel):
    """OHLCV bar. `time` is the bar open time in epoch seconds."""

    model_config = ConfigDict(frozen=True)

    time: int
    open: float
    high: float
    low: float
    close: float
    volume: float | None = None

    @model_validator(mode="after")
    def _check_prices(self) -> "Candle":
        for field_name in ("open", "high", "low", "close"):
            if not getattr(self, field_name) > 0:
                raise ValueError(
                    f"{field_name} must be positive, got {getattr(self, field_name)}"
                )
        if self.high < max(self.open, self.close):
            raise ValueError(
                f"high {self.high} is below max(open, close) at time {self.time}"
            )
        if self.low > min(self.open, self.close):
            raise ValueError(
                f"low {self.low} is above min(open, close) at time {self.time}"
            )
        if self.volume is not None and self.volume < 0:
            raise ValueError(f"volume must be non-negative, got {self.volume}")
        return self

    @property
    def typical_price(self) -> float:
        return (self.high + self.low + self.close) / 3

    @property
    def range_size(self) -> float:
        """Get the full range (high - low) of the candle."""
        return self.high - self.low


def validate_series(candles: Sequence[Candle]) -> None:
    """Ensure timestamps are unique and strictly increasing.

    Raises:
        InvalidSeriesError: naming the first out-of-order index.
    """
    for i in range(1, len(candles)):
        if candles[i].time <= candles[i - 1].time:
            raise InvalidSeriesError(
                f"Timestamps must be strictly increasing: index {i} "
                f"(time={candles[i].time}) follows time={candles[i - 1].time}"
            )


def closes(candles: Sequence[Candle]) -> np.ndarray:
    """Get array of close prices."""
    return np.array([c.close for c in candles], dtype=np.float64)


def highs(candles: Sequence[Candle]) -> np.ndarray:
    """Get array of high prices."""
    return np.array([c.high for c in candles], dtype=np.float64)


def lows(candles: Sequence[Candle]) -> np.ndarray:
    """Get array of low prices."""
    return np.array([c.low for c in candles], dtype=np.float64)


def volumes(candles: Sequence[Candle]) -> np.ndarray:
    """Get array of volumes, missing volume as 0."""
    return np.array([c.volume or 0.0 for c in candles], dtype=np.float64)
