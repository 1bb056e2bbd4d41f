"""Signal generator protocol.

This module provides:
- Signal: per-bar action emitted by a generator
- SignalGenerator: Runtime-checkable Protocol that strategies must satisfy
"""

from __future__ import annotations

from enum import Enum
from typing import Protocol, Sequence, runtime_checkable

from marketcore.models.candle import Candle


class Signal(str, Enum):
    """Per-bar trading action."""

    BUY = "buy"
    SELL = "sell"
    HOLD = "hold"


@runtime_checkable
class SignalGenerator(Protocol):
    """Protocol that all backtest strategies must implement.

    Generators are pure: the same candles always give the same signals,
    one per bar.
    """

    @property
    def name(self) -> str:
        """Unique strategy identifier (e.g., 'sma_crossover')."""
        ...

    @property
    def display_name(self) -> str:
        """Human readable name (e.g., 'SMA Crossover')."""
        ...

    @property
    def description(self) -> str:
        ...

    @property
    def required_indicators(self) -> list[str]:
        """List of indicator names this strategy requires.

        Example: ['sma10', 'sma30']
        """
        ...

    def generate(self, candles: Sequence[Candle]) -> list[Signal]:
        """Return one signal per candle."""
        ...

    def reason(self, signal: Signal) -> str:
        """Trade reason recorded when a BUY or SELL signal is executed."""
        ...
