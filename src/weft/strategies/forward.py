"""Forward-Proxy strategy: a fixed set of names, late-bound bodies."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any

from weft.kernel.config import CompositionConfig
from weft.kernel.errors import InvalidArgument, MethodNotFound, PropertyNotFound
from weft.kernel.metaobject import (
    MetaObject,
    MethodEntry,
    Source,
    bind,
    find_owner,
    iter_chain,
    note_forward_source,
    require_receiver,
    require_source,
)
from weft.kernel.trace import Trace
from weft.strategies.base import Strategy, callable_names

logger = logging.getLogger(__name__)

# Marks a forwarding entry with the (source, name) it forwards to
FORWARD_ATTR = "__weft_forward__"


def make_forwarder(source: Source, name: str) -> MethodEntry:
    """Build an entry that calls ``source[name]`` with the caller's receiver.

    The source is consulted on every call, through its own prototype chain,
    so replacing the implementation anywhere on that chain changes what the
    forwarder runs.
    """

    def forward(self: Any, *args: Any, **kwargs: Any) -> Any:
        try:
            _, entry = find_owner(source, name)
        except PropertyNotFound as exc:
            raise MethodNotFound(name, self, f"forward source cannot resolve '{name}'") from exc
        return bind(entry, self)(*args, **kwargs)

    forward.__name__ = name
    forward.__qualname__ = f"forward.{name}"
    setattr(forward, FORWARD_ATTR, (source, name))
    return forward


def is_forwarder(entry: Any) -> bool:
    return callable(entry) and hasattr(entry, FORWARD_ATTR)


def _resolvable(source: Source, name: str) -> bool:
    try:
        find_owner(source, name)
    except PropertyNotFound:
        return False
    return True


class ForwardProxy(Strategy):
    """Give the receiver one forwarding entry per name.

    Semantics:
        - Names default to the source's enumerable callables, computed once
        - Each forwarder looks the body up on the source at call time
        - Names added to the source later are never forwarded
        - The forwarded body runs with the receiver, not the source, as self
    """

    name = "delegate"

    def attach(self, receiver: MetaObject, source: Source, **options: Any) -> MetaObject:
        return self.delegate(receiver, source, **options)

    def delegate(
        self,
        receiver: MetaObject,
        source: Source,
        names: Sequence[str] | None = None,
    ) -> MetaObject:
        require_receiver(receiver)
        require_source(source)
        # a forwarder that can reach its own receiver would call itself
        if any(ancestor is receiver for ancestor in iter_chain(source, self.config)):
            raise InvalidArgument("cannot forward a receiver to itself or to an object delegating to it", source)
        if names is None:
            selected = callable_names(source, self.config)
        elif isinstance(names, str):
            raise InvalidArgument("names must be a sequence of strings, not a string", names)
        else:
            selected = list(names)
            for name in selected:
                if not isinstance(name, str):
                    raise InvalidArgument(f"Forwarded names must be strings, got {type(name).__name__}", name)

        forwarders = [(name, make_forwarder(source, name)) for name in selected]
        with receiver._lock:
            for name, forwarder in forwarders:
                receiver._own[name] = forwarder
            note_forward_source(receiver, source)

        missing = [name for name in selected if not _resolvable(source, name)]
        if missing:
            logger.debug("forwarding names not yet defined on source: %s", missing)
        logger.debug("forwarded %d names onto %r", len(selected), receiver)
        self._record("delegate", receiver, selected)
        return receiver

    def resolve(self, receiver: MetaObject, name: str) -> MethodEntry | None:
        entry = receiver._own.get(name)
        if not is_forwarder(entry):
            return None
        return bind(entry, receiver)


def delegate(
    receiver: MetaObject,
    source: Source,
    names: Sequence[str] | None = None,
    *,
    config: CompositionConfig | None = None,
    trace: Trace | None = None,
) -> MetaObject:
    """Forward ``names`` from receiver to source.

    Args:
        receiver: Object receiving the forwarders
        source: MetaObject or mapping the calls are forwarded to
        names: Names to forward; defaults to the source's current enumerable
            callables
        config: Enumerability settings, defaults to DEFAULT_CONFIG
        trace: Optional trace recording the delegation

    Returns:
        The receiver

    Raises:
        InvalidArgument: for a non-MetaObject receiver, a non-source source,
            or a non-string name. Nothing is forwarded in that case.
    """
    return ForwardProxy(config, trace).delegate(receiver, source, names)
