"""Prototype-Delegate strategy: one back-reference, open for extension."""

from __future__ import annotations

import logging
from typing import Any

from weft.kernel.config import DEFAULT_CONFIG, CompositionConfig
from weft.kernel.errors import PropertyNotFound
from weft.kernel.metaobject import (
    MetaObject,
    MethodEntry,
    Source,
    bind,
    find_owner,
    iter_chain,
    link,
    require_receiver,
    require_source,
)
from weft.kernel.trace import Trace
from weft.strategies.base import Strategy

logger = logging.getLogger(__name__)


class PrototypeDelegate(Strategy):
    """Link the receiver to a single prototype.

    Semantics:
        - Nothing is copied; the receiver keeps one back-reference
        - Lookups the receiver cannot answer fall through the chain
        - Entries found on the chain run with the original receiver as self
        - Methods added to any prototype later are visible immediately
        - Relinking replaces the previous prototype (strictly one)
    """

    name = "prototype"

    def attach(self, receiver: MetaObject, source: Source, **options: Any) -> MetaObject:
        return self.set_prototype(receiver, source)

    def create(self, source: Source | None = None, **state: Any) -> MetaObject:
        if source is not None:
            require_source(source)
        receiver = MetaObject(state)
        if source is not None:
            link(receiver, source, self.config)
        logger.debug("created %r delegating to %s", receiver, type(source).__name__)
        self._record("create_delegating", receiver, sorted(state))
        return receiver

    def set_prototype(self, receiver: MetaObject, source: Source | None) -> MetaObject:
        require_receiver(receiver)
        if source is not None:
            require_source(source)
        link(receiver, source, self.config)
        logger.debug("set prototype of %r", receiver)
        self._record("set_prototype", receiver, cleared=source is None)
        return receiver

    def resolve(self, receiver: MetaObject, name: str) -> MethodEntry | None:
        try:
            _, value = find_owner(receiver, name, self.config)
        except PropertyNotFound:
            return None
        if not callable(value):
            return None
        return bind(value, receiver)


def create_delegating(
    source: Source | None = None,
    *,
    config: CompositionConfig | None = None,
    trace: Trace | None = None,
    **state: Any,
) -> MetaObject:
    """Create a receiver whose prototype is ``source``.

    Args:
        source: Prototype to delegate to, or None for no prototype
        config: Chain depth settings, defaults to DEFAULT_CONFIG
        trace: Optional trace recording the creation
        **state: Initial own properties of the new receiver

    Returns:
        A new MetaObject

    Example:
        >>> person = MetaObject({"greet": lambda self: f"hi {self.name}"})
        >>> ada = create_delegating(person, name="Ada")
        >>> ada.greet()
        'hi Ada'
    """
    return PrototypeDelegate(config, trace).create(source, **state)


def set_prototype(
    receiver: MetaObject,
    source: Source | None,
    *,
    config: CompositionConfig | None = None,
    trace: Trace | None = None,
) -> MetaObject:
    """Replace the receiver's direct prototype; None clears it.

    Raises:
        InvalidArgument: receiver is not a MetaObject or source is not a source.
        CyclicDelegation: the new link would loop back to receiver. The old
            prototype stays in place.
    """
    return PrototypeDelegate(config, trace).set_prototype(receiver, source)


def prototype_chain(receiver: Source, config: CompositionConfig | None = None) -> list[Source]:
    """The receiver followed by every prototype on its chain."""
    return list(iter_chain(receiver, config or DEFAULT_CONFIG))
