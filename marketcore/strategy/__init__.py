"""Strategy plugin system.

Public API:
- SignalGenerator: Protocol that all strategies must implement
- Signal: per-bar BUY / SELL / HOLD action
- register_strategy: Decorator to register a strategy class
- create_strategy: Factory function to instantiate strategies by name
- list_strategies: Discover all registered strategies
- describe_strategies: Name, display name, description and indicators of each strategy
- get_strategy_class: Get strategy class by name without instantiating

Importing this package auto-registers all built-in strategies.
"""

from marketcore.strategy.protocol import Signal, SignalGenerator
from marketcore.strategy.registry import (
    create_strategy,
    describe_strategies,
    get_strategy_class,
    list_strategies,
    register_strategy,
)

# Import built-in strategies to trigger auto-registration
from marketcore.strategy.bollinger_bounce import BollingerBounceStrategy
from marketcore.strategy.crossover import (
    EmaCrossoverStrategy,
    SmaCrossoverStrategy,
    crossover_signals,
)
from marketcore.strategy.rsi_reversal import RsiReversalStrategy

__all__ = [
    "Signal",
    "SignalGenerator",
    "register_strategy",
    "create_strategy",
    "describe_strategies",
    "list_strategies",
    "get_strategy_class",
    "SmaCrossoverStrategy",
    "EmaCrossoverStrategy",
    "RsiReversalStrategy",
    "BollingerBounceStrategy",
    "crossover_signals",
]
