"""Decorator combinators: decorate, after, before, around, guard, maybe, once, memoize."""

# Combinators satisfy the following laws:
#
# 1. Identity: decorate(m) is m
#    Decorating with no advice returns the entry itself
#
# 2. Sequencing: decorate(m, a, b) == b(a(m)) == decorate(decorate(m, a), b)
#    Advice applies left to right; nesting decorate calls changes nothing
#
# 3. Receiver propagation: for every wrapper w built here,
#    w(r, *args) calls the wrapped entry and every advice with r
#
# 4. after is transparent: decorate(m, after(f))(r, *a) == m(r, *a)
#    The side effects never change the returned value
#
# 5. Not commutative: decorate(m, after(f), maybe) != decorate(m, maybe, after(f))
#    With an absent argument the first skips f, the second still runs it


from __future__ import annotations

import functools
import logging
import weakref
from collections.abc import Callable, Hashable
from typing import Any

from weft.kernel.errors import InvalidArgument
from weft.kernel.metaobject import MethodEntry

from .types import (
    ABSENT,
    STATE_SCOPE_ATTR,
    Combinator,
    FallbackPolicy,
    Predicate,
    SideEffect,
    StateScope,
    is_absent,
)

logger = logging.getLogger(__name__)


def _require_callable(value: Any, role: str) -> None:
    if not callable(value):
        raise InvalidArgument(f"{role} must be callable, got {type(value).__name__}", value)


def decorate(entry: MethodEntry, *advices: Combinator) -> MethodEntry:
    """Wrap a method entry with each advice in turn.

    Args:
        entry: Method entry taking the receiver as its first argument
        *advices: Combinators applied left to right

    Returns:
        The wrapped entry, callable exactly like ``entry``

    Example:
        >>> save = decorate(save, after(persist), maybe)
    """
    _require_callable(entry, "entry")
    for advice in advices:
        _require_callable(advice, "advice")

    wrapped = entry
    for advice in advices:
        wrapped = advice(wrapped)
        _require_callable(wrapped, "advice result")
    return wrapped


def after(*side_effects: SideEffect) -> Combinator:
    """Run side effects after the method, keeping the method's result.

    Semantics:
        - Call the method with the receiver and arguments, keep its value
        - Call each side effect left to right with the same receiver and
          the same arguments (not the value)
        - Return the method's value unchanged
    """
    for effect in side_effects:
        _require_callable(effect, "side effect")

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            value = method(self, *args, **kwargs)
            for effect in side_effects:
                effect(self, *args, **kwargs)
            return value

        return wrapper

    return combinator


def before(*side_effects: SideEffect) -> Combinator:
    """Run side effects left to right, then the method."""
    for effect in side_effects:
        _require_callable(effect, "side effect")

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            for effect in side_effects:
                effect(self, *args, **kwargs)
            return method(self, *args, **kwargs)

        return wrapper

    return combinator


def around(advice: Callable[..., Any]) -> Combinator:
    """Give ``advice`` full control over the call.

    The advice is called as ``advice(proceed, self, *args, **kwargs)``.
    ``proceed(*args, **kwargs)`` invokes the method with the same receiver;
    the advice may call it zero or more times and with other arguments.
    """
    _require_callable(advice, "advice")

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            def proceed(*call_args: Any, **call_kwargs: Any) -> Any:
                return method(self, *call_args, **call_kwargs)

            return advice(proceed, self, *args, **kwargs)

        return wrapper

    return combinator


def returning(value: Any) -> FallbackPolicy:
    """Fallback policy that always returns ``value``."""

    def fallback(self: Any, *args: Any, **kwargs: Any) -> Any:
        return value

    return fallback


def first_absent(self: Any, *args: Any, **kwargs: Any) -> Any:
    """Fallback policy returning the first absent argument.

    Positional arguments are checked in order, then keyword values.
    Returns ABSENT if no argument is absent.
    """
    for value in (*args, *kwargs.values()):
        if is_absent(value):
            return value
    return ABSENT


def guard(predicate: Predicate, fallback: FallbackPolicy | None = None) -> Combinator:
    """Call the method only while ``predicate`` holds.

    Semantics:
        - Evaluate ``predicate(self, *args, **kwargs)``
        - Truthy: call the method and return its value
        - Falsy: skip the method, return ``fallback(self, *args, **kwargs)``

    Args:
        predicate: Decides whether the method runs
        fallback: Policy producing the value on skip, defaults to None
    """
    _require_callable(predicate, "predicate")
    policy = fallback if fallback is not None else returning(None)
    _require_callable(policy, "fallback")

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            if predicate(self, *args, **kwargs):
                return method(self, *args, **kwargs)
            logger.debug("guard skipped %s", getattr(method, "__qualname__", method))
            return policy(self, *args, **kwargs)

        return wrapper

    return combinator


def _all_present(self: Any, *args: Any, **kwargs: Any) -> bool:
    return not any(is_absent(value) for value in (*args, *kwargs.values()))


def maybe(entry: MethodEntry) -> MethodEntry:
    """Skip the method when any argument is None or ABSENT.

    The first absent argument is returned instead. The receiver itself is
    never inspected.
    """
    return guard(_all_present, first_absent)(entry)


def provided(predicate: Predicate) -> Combinator:
    """Run the method only when ``predicate`` holds, otherwise return None."""
    return guard(predicate)


def unless(predicate: Predicate) -> Combinator:
    """Run the method only when ``predicate`` does not hold, otherwise return None."""
    _require_callable(predicate, "predicate")

    def negated(self: Any, *args: Any, **kwargs: Any) -> bool:
        return not predicate(self, *args, **kwargs)

    return guard(negated)


class _ScopedState:
    """Holds one mutable dict per scope unit: the entry, or each receiver."""

    def __init__(self, scope: StateScope) -> None:
        self.scope = scope
        self._shared: dict[Any, Any] = {}
        self._per_receiver: weakref.WeakKeyDictionary[Any, dict[Any, Any]] = weakref.WeakKeyDictionary()

    def for_receiver(self, receiver: Any) -> dict[Any, Any]:
        if self.scope is StateScope.SHARED:
            return self._shared
        try:
            state = self._per_receiver.get(receiver)
            if state is None:
                state = self._per_receiver[receiver] = {}
        except TypeError as exc:
            raise InvalidArgument(
                f"per-receiver state needs a hashable, weak-referenceable receiver, "
                f"got {type(receiver).__name__}",
                receiver,
            ) from exc
        return state


def _stateful_scope(scope: StateScope | str) -> StateScope:
    scope = StateScope(scope)
    if scope is StateScope.NONE:
        raise InvalidArgument("stateful combinators need SHARED or PER_RECEIVER scope", scope)
    return scope


def _declare(target: Any, scope: StateScope) -> Any:
    setattr(target, STATE_SCOPE_ATTR, scope)
    return target


def once(scope: StateScope = StateScope.PER_RECEIVER) -> Combinator:
    """Run the method on the first call only; later calls return the first result.

    With SHARED scope the first call from any receiver settles the result
    for all of them. With PER_RECEIVER each receiver gets its own first call.
    """
    scope = _stateful_scope(scope)

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")
        states = _ScopedState(scope)

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            state = states.for_receiver(self)
            if "value" not in state:
                state["value"] = method(self, *args, **kwargs)
            return state["value"]

        return _declare(wrapper, scope)

    return _declare(combinator, scope)


def _default_key(*args: Any, **kwargs: Any) -> Hashable:
    return args, frozenset(kwargs.items())


def memoize(
    scope: StateScope = StateScope.PER_RECEIVER,
    key: Callable[..., Hashable] | None = None,
) -> Combinator:
    """Cache results by argument key.

    Args:
        scope: SHARED keeps one cache for the entry, so receivers that share
            the entry (by Copy-Mix reference or through a prototype) share
            results. PER_RECEIVER keeps a cache per receiver.
        key: Builds the cache key from the call arguments (receiver
            excluded); defaults to the positional tuple plus keyword items.
    """
    scope = _stateful_scope(scope)
    make_key = key or _default_key
    _require_callable(make_key, "key")

    def combinator(method: MethodEntry) -> MethodEntry:
        _require_callable(method, "entry")
        states = _ScopedState(scope)

        @functools.wraps(method)
        def wrapper(self: Any, *args: Any, **kwargs: Any) -> Any:
            cache = states.for_receiver(self)
            cache_key = make_key(*args, **kwargs)
            if cache_key not in cache:
                cache[cache_key] = method(self, *args, **kwargs)
            return cache[cache_key]

        def cache_clear() -> None:
            states._shared.clear()
            states._per_receiver.clear()

        wrapper.cache_clear = cache_clear  # type: ignore[attr-defined]
        return _declare(wrapper, scope)

    return _declare(combinator, scope)
