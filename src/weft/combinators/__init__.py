"""Combinators - method decorators that carry the receiver through every call."""

from .ops import (
    after,
    around,
    before,
    decorate,
    first_absent,
    guard,
    maybe,
    memoize,
    once,
    provided,
    returning,
    unless,
)
from .types import (
    ABSENT,
    Combinator,
    FallbackPolicy,
    Predicate,
    SideEffect,
    StateScope,
    is_absent,
    state_scope,
)

__all__ = [
    "decorate",
    # Advice
    "after",
    "before",
    "around",
    # Guards
    "guard",
    "maybe",
    "provided",
    "unless",
    "returning",
    "first_absent",
    # Stateful
    "once",
    "memoize",
    "StateScope",
    "state_scope",
    # Types
    "ABSENT",
    "is_absent",
    "Combinator",
    "FallbackPolicy",
    "Predicate",
    "SideEffect",
]
