"""Combinator types and sentinels."""

from __future__ import annotations

from collections.abc import Callable
from enum import Enum
from typing import Any, TypeAlias

from weft.kernel.metaobject import MethodEntry

Combinator: TypeAlias = Callable[[MethodEntry], MethodEntry]
SideEffect: TypeAlias = Callable[..., Any]
Predicate: TypeAlias = Callable[..., bool]
FallbackPolicy: TypeAlias = Callable[..., Any]

# Attribute a stateful combinator and its wrappers carry
STATE_SCOPE_ATTR = "__weft_state_scope__"


class _Absent:
    """Marker for a value that was never supplied, as opposed to None."""

    _instance: _Absent | None = None

    def __new__(cls) -> _Absent:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "ABSENT"

    def __bool__(self) -> bool:
        return False


ABSENT = _Absent()


def is_absent(value: object) -> bool:
    """True for None and for the ABSENT sentinel."""
    return value is None or value is ABSENT


class StateScope(str, Enum):
    """Where a combinator keeps its mutable state.

    - NONE: the combinator keeps no state
    - SHARED: one state per wrapped entry. Every receiver reaching that
      entry shares it, whether it holds a Copy-Mix reference to the entry or
      reaches it through a prototype link.
    - PER_RECEIVER: one state per receiver, keyed weakly by the receiver the
      entry is invoked on. Receivers sharing a prototype stay isolated.
    """

    NONE = "none"
    SHARED = "shared"
    PER_RECEIVER = "per_receiver"


def state_scope(entry: Any) -> StateScope:
    """The declared state scope of a combinator or a decorated entry."""
    return getattr(entry, STATE_SCOPE_ATTR, StateScope.NONE)
