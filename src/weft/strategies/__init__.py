"""Composition strategies - the ways a receiver reaches a behavior source."""

from weft.strategies.base import Strategy, callable_names
from weft.strategies.copy_mix import CopyMix, mix
from weft.strategies.forward import ForwardProxy, delegate, is_forwarder, make_forwarder
from weft.strategies.prototype import (
    PrototypeDelegate,
    create_delegating,
    prototype_chain,
    set_prototype,
)
from weft.strategies.registry import StrategyRegistry, compose, default_registry

__all__ = [
    "Strategy",
    "callable_names",
    # Copy-Mix
    "CopyMix",
    "mix",
    # Forward-Proxy
    "ForwardProxy",
    "delegate",
    "is_forwarder",
    "make_forwarder",
    # Prototype-Delegate
    "PrototypeDelegate",
    "create_delegating",
    "prototype_chain",
    "set_prototype",
    # Registry
    "StrategyRegistry",
    "compose",
    "default_registry",
]
