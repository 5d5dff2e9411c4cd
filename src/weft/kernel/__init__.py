"""Kernel layer - the object model shared by every strategy."""

from weft.kernel.config import DEFAULT_CONFIG, CompositionConfig
from weft.kernel.errors import (
    CompositionError,
    CyclicDelegation,
    InvalidArgument,
    MethodNotFound,
    PropertyNotFound,
    UnknownStrategy,
)
from weft.kernel.metaobject import (
    BehaviorSource,
    MetaObject,
    MethodEntry,
    Receiver,
    Source,
    bind,
    define,
    find_owner,
    get_own,
    get_prototype,
    has_own,
    iter_chain,
    lookup,
    own_items,
    own_names,
)
from weft.kernel.policy import POLICY_MATRIX, BindingPolicy, binding_policy
from weft.kernel.trace import Evidence, Trace

__all__ = [
    "MetaObject",
    "Receiver",
    "BehaviorSource",
    "MethodEntry",
    "Source",
    # Lookup & introspection
    "bind",
    "define",
    "find_owner",
    "get_own",
    "get_prototype",
    "has_own",
    "iter_chain",
    "lookup",
    "own_items",
    "own_names",
    # Policy
    "BindingPolicy",
    "POLICY_MATRIX",
    "binding_policy",
    # Config
    "CompositionConfig",
    "DEFAULT_CONFIG",
    # Errors
    "CompositionError",
    "CyclicDelegation",
    "InvalidArgument",
    "MethodNotFound",
    "PropertyNotFound",
    "UnknownStrategy",
    # Tracing
    "Evidence",
    "Trace",
]
