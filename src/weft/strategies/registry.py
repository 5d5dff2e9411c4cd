"""Strategy registry implementation."""

from __future__ import annotations

from typing import Any

from weft.kernel.config import CompositionConfig
from weft.kernel.errors import InvalidArgument, UnknownStrategy
from weft.kernel.metaobject import MetaObject, Source
from weft.kernel.trace import Trace
from weft.strategies.base import Strategy
from weft.strategies.copy_mix import CopyMix
from weft.strategies.forward import ForwardProxy
from weft.strategies.prototype import PrototypeDelegate


class StrategyRegistry:
    """Registry for looking up composition strategies by name."""

    def __init__(self, strategies: dict[str, Strategy] | None = None) -> None:
        self._strategies: dict[str, Strategy] = dict(strategies or {})

    def register(self, strategy: Strategy, name: str | None = None) -> None:
        """Register a strategy under its own name or an explicit alias."""
        if not isinstance(strategy, Strategy):
            raise InvalidArgument(f"Expected a Strategy, got {type(strategy).__name__}", strategy)
        self._strategies[name or strategy.name] = strategy

    def get(self, name: str) -> Strategy:
        if name not in self._strategies:
            raise UnknownStrategy(name)
        return self._strategies[name]

    def names(self) -> list[str]:
        return list(self._strategies)

    def __getitem__(self, name: str) -> Strategy:
        return self.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self._strategies

    def attach(self, name: str, receiver: MetaObject, source: Source, **options: Any) -> MetaObject:
        """Attach ``source`` to ``receiver`` with the named strategy."""
        return self.get(name).attach(receiver, source, **options)


def default_registry(config: CompositionConfig | None = None, trace: Trace | None = None) -> StrategyRegistry:
    """Create a registry holding the three built-in strategies."""
    registry = StrategyRegistry()
    registry.register(CopyMix(config, trace))
    registry.register(ForwardProxy(config, trace))
    registry.register(PrototypeDelegate(config, trace))
    return registry


_default = default_registry()


def compose(
    receiver: MetaObject,
    source: Source,
    strategy: str = "mix",
    registry: StrategyRegistry | None = None,
    **options: Any,
) -> MetaObject:
    """Attach ``source`` to ``receiver`` using a strategy picked by name.

    Args:
        receiver: Object to attach behavior to
        source: Behavior source
        strategy: "mix", "delegate" or "prototype", or any name registered
            on ``registry``
        registry: Registry to look the strategy up in, defaults to the
            built-in strategies
        **options: Passed through to the strategy's attach (e.g. ``names``
            for "delegate")

    Returns:
        The receiver

    Raises:
        UnknownStrategy: no strategy is registered under ``strategy``.
    """
    return (registry or _default).attach(strategy, receiver, source, **options)
