"""Receiver and behavior-source model.

A MetaObject is an insertion-ordered table of own properties plus at most
one prototype. It plays both roles: a receiver holding state and a behavior
source holding method entries. Name lookup checks the object's own table,
then walks the prototype chain. Functions found anywhere on the chain are
bound to the object the lookup started from, so ``self.x = ...`` inside a
shared method lands on the receiver and never on the shared source.

The class has no public methods, since a class attribute would shadow an own
property of the same name. Introspection lives in module-level functions
(``own_names``, ``has_own``, ``get_prototype``...).
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Mapping
from typing import Any, TypeAlias

from weft.kernel.config import DEFAULT_CONFIG, CompositionConfig
from weft.kernel.errors import (
    CyclicDelegation,
    InvalidArgument,
    MethodNotFound,
    PropertyNotFound,
)

MethodEntry: TypeAlias = Callable[..., Any]

_SLOTS = frozenset({"_own", "_prototype", "_forwards", "_lock"})
_MISSING = object()


class MetaObject:
    """Mutable property table with an optional single prototype.

    Attribute and item access are equivalent: ``obj.name`` and
    ``obj["name"]`` both resolve through the delegation chain, and both
    assignment forms write to the own table.

    Functions stored on a MetaObject are methods and receive the receiver
    as their first argument. Wrap a plain callback in ``staticmethod`` to
    store it unbound.
    """

    __slots__ = ("_own", "_prototype", "_forwards", "_lock", "__weakref__")

    # not a container of its names; use own_names()
    __iter__ = None

    def __init__(
        self,
        state: Mapping[str, Any] | None = None,
        prototype: Source | None = None,
    ) -> None:
        own = dict(state or {})
        for name in own:
            _check_name(name)
        object.__setattr__(self, "_own", own)
        object.__setattr__(self, "_prototype", None)
        object.__setattr__(self, "_forwards", [])
        object.__setattr__(self, "_lock", threading.RLock())
        if prototype is not None:
            link(self, prototype)

    def __getattr__(self, name: str) -> Any:
        # unset slots and dunder probes (copy, pickle) must not hit the table
        if name in _SLOTS or (name.startswith("__") and name.endswith("__")):
            raise AttributeError(name)
        return lookup(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _SLOTS:
            object.__setattr__(self, name, value)
            return
        define(self, name, value)

    def __delattr__(self, name: str) -> None:
        with self._lock:
            if name not in self._own:
                raise PropertyNotFound(name, self, f"'{name}' is not an own property")
            del self._own[name]

    def __getitem__(self, name: str) -> Any:
        return lookup(self, name)

    def __setitem__(self, name: str, value: Any) -> None:
        define(self, name, value)

    def __delitem__(self, name: str) -> None:
        self.__delattr__(name)

    def __contains__(self, name: object) -> bool:
        if not isinstance(name, str):
            return False
        try:
            find_owner(self, name)
        except PropertyNotFound:
            return False
        return True

    def __dir__(self) -> list[str]:
        names: dict[str, None] = {}
        for obj in iter_chain(self):
            names.update(dict.fromkeys(own_names(obj)))
        return list(names)

    def __repr__(self) -> str:
        own = dict(own_items(self))
        if self._prototype is None:
            return f"MetaObject({own!r})"
        return f"MetaObject({own!r}, prototype=<{type(self._prototype).__name__} at {id(self._prototype):#x}>)"


Source: TypeAlias = MetaObject | Mapping[str, Any]

# Role names: one type serves as both
Receiver = MetaObject
BehaviorSource = MetaObject


def _check_name(name: object) -> None:
    if not isinstance(name, str):
        raise InvalidArgument(f"Property names must be strings, got {type(name).__name__}", name)


def is_source(value: object) -> bool:
    return isinstance(value, (MetaObject, Mapping))


def require_receiver(value: object, role: str = "receiver") -> MetaObject:
    if not isinstance(value, MetaObject):
        raise InvalidArgument(f"{role} must be a MetaObject, got {type(value).__name__}", value)
    return value


def require_source(value: object, role: str = "source") -> Source:
    if not is_source(value):
        raise InvalidArgument(
            f"{role} must be a MetaObject or a mapping, got {type(value).__name__}", value
        )
    return value  # type: ignore[return-value]


def own_items(obj: Source) -> list[tuple[str, Any]]:
    """Snapshot of an object's own properties, in insertion order."""
    if isinstance(obj, MetaObject):
        with obj._lock:
            return list(obj._own.items())
    if isinstance(obj, Mapping):
        return list(obj.items())
    raise InvalidArgument(f"Expected a MetaObject or a mapping, got {type(obj).__name__}", obj)


def own_names(obj: Source) -> set[str]:
    """Names of an object's own properties, excluding anything delegated."""
    return {name for name, _ in own_items(obj)}


def has_own(obj: Source, name: str) -> bool:
    return _own_get(obj, name) is not _MISSING


def get_own(obj: Source, name: str, default: Any = None) -> Any:
    """Raw own value of ``name`` on ``obj``, ignoring the prototype chain."""
    value = _own_get(obj, name)
    return default if value is _MISSING else value


def define(obj: MetaObject, name: str, value: Any) -> None:
    """Set an own property on ``obj``. Never writes through to a prototype."""
    _check_name(name)
    with obj._lock:
        obj._own[name] = value


def get_prototype(obj: MetaObject) -> Source | None:
    return require_receiver(obj)._prototype


def link(obj: MetaObject, prototype: Source | None, config: CompositionConfig = DEFAULT_CONFIG) -> None:
    """Point ``obj`` at a new direct prototype, refusing cycles.

    The previous prototype is kept if the new link would loop back to ``obj``
    or make the chain deeper than ``config.max_chain_depth``.
    """
    if prototype is not None:
        require_source(prototype, "prototype")
        hops = 0
        for ancestor in iter_chain(prototype, config):
            if ancestor is obj:
                raise CyclicDelegation("prototype link would create a delegation cycle", (obj, prototype))
            hops += 1
        if hops > config.max_chain_depth:
            raise CyclicDelegation(
                f"delegation chain longer than max_chain_depth={config.max_chain_depth}",
                (obj, prototype),
            )
    with obj._lock:
        obj._prototype = prototype


def note_forward_source(obj: MetaObject, source: Source) -> None:
    """Remember that ``obj`` forwards to ``source``, for miss diagnostics."""
    with obj._lock:
        if not any(s is source for s in obj._forwards):
            obj._forwards.append(source)


def iter_chain(obj: Source, config: CompositionConfig = DEFAULT_CONFIG) -> Iterator[Source]:
    """Yield ``obj`` then each prototype up the delegation chain.

    Raises:
        CyclicDelegation: if an object repeats or the chain is deeper than
            ``config.max_chain_depth``.
    """
    seen: set[int] = set()
    current: Source | None = obj
    depth = 0
    while current is not None:
        if id(current) in seen:
            raise CyclicDelegation("delegation chain contains a cycle", (obj, current))
        if depth > config.max_chain_depth:
            raise CyclicDelegation(
                f"delegation chain longer than max_chain_depth={config.max_chain_depth}", (obj,)
            )
        seen.add(id(current))
        yield current
        current = current._prototype if isinstance(current, MetaObject) else None
        depth += 1


def find_owner(obj: Source, name: str, config: CompositionConfig = DEFAULT_CONFIG) -> tuple[Source, Any]:
    """Find the first object on the chain owning ``name``.

    Returns:
        The owning object and the raw (unbound) value.

    Raises:
        MethodNotFound: if the name is missing but one of the chain's forward
            sources defines it.
        PropertyNotFound: for any other miss.
    """
    chain = []
    for current in iter_chain(obj, config):
        value = _own_get(current, name)
        if value is not _MISSING:
            return current, value
        chain.append(current)
    raise _miss(obj, name, chain)


def bind(value: Any, receiver: Any) -> Any:
    """Bind a raw property value to ``receiver`` via the descriptor protocol.

    Functions become bound methods, properties run their getter, and
    staticmethods unwrap. Values without ``__get__`` are returned as is.
    """
    get = getattr(type(value), "__get__", None)
    if get is None:
        return value
    return get(value, receiver, type(receiver))


def lookup(obj: Source, name: str, config: CompositionConfig = DEFAULT_CONFIG) -> Any:
    """Resolve ``name`` on ``obj`` and bind the result to ``obj``."""
    _, value = find_owner(obj, name, config)
    return bind(value, obj)


def _own_get(obj: Source, name: str) -> Any:
    if isinstance(obj, MetaObject):
        return obj._own.get(name, _MISSING)
    try:
        return obj[name]
    except KeyError:
        return _MISSING


def _miss(obj: Source, name: str, chain: list[Source]) -> PropertyNotFound:
    for current in chain:
        if not isinstance(current, MetaObject):
            continue
        for source in current._forwards:
            if any(_own_get(s, name) is not _MISSING for s in iter_chain(source)):
                return MethodNotFound(name, obj, f"method '{name}' exists on a forward source but is not forwarded")
    return PropertyNotFound(name, obj)
