"""Name -> class lookup for backtest signal generators.

Strategy modules register themselves on import:

    @register_strategy("sma_crossover")
    class SmaCrossoverStrategy:
        ...

The backtest engine then resolves `StrategyConfig.type` through
`create_strategy(config.type.value, config=config)`.
"""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

_REGISTRY: dict[str, type] = {}


def register_strategy(name: str) -> Callable[[type], type]:
    """Class decorator adding a generator to the registry under `name`.

    Raises:
        ValueError: When `name` is taken.
    """

    def decorator(cls: type) -> type:
        existing = _REGISTRY.get(name)
        if existing is not None:
            raise ValueError(
                f"Cannot register {cls.__name__} as '{name}': already registered by {existing.__name__}"
            )
        _REGISTRY[name] = cls
        logger.debug("Strategy '%s' -> %s", name, cls.__name__)
        return cls

    return decorator


def get_strategy_class(name: str) -> type:
    """Look up a registered generator class.

    Raises:
        KeyError: Unknown name; the message lists what is registered.
    """
    try:
        return _REGISTRY[name]
    except KeyError:
        known = ", ".join(list_strategies()) or "nothing registered"
        raise KeyError(f"No strategy named '{name}' (known: {known})") from None


def create_strategy(name: str, **kwargs: Any):
    """Instantiate the generator registered as `name` with `kwargs`."""
    return get_strategy_class(name)(**kwargs)


def list_strategies() -> list[str]:
    return sorted(_REGISTRY)


def describe_strategies() -> list[tuple[str, str, str, list[str]]]:
    """(name, display name, description, indicators) of every registered generator, by name."""
    rows = []
    for name in list_strategies():
        strategy = create_strategy(name)
        rows.append((name, strategy.display_name, strategy.description, strategy.required_indicators))
    return rows
