from .combinators import (
    ABSENT,
    StateScope,
    after,
    around,
    before,
    decorate,
    guard,
    maybe,
    memoize,
    once,
    provided,
    returning,
    state_scope,
    unless,
)
from .kernel import (
    POLICY_MATRIX,
    BehaviorSource,
    BindingPolicy,
    CompositionConfig,
    CompositionError,
    CyclicDelegation,
    InvalidArgument,
    MetaObject,
    MethodNotFound,
    PropertyNotFound,
    Receiver,
    Trace,
    UnknownStrategy,
    binding_policy,
    get_prototype,
    has_own,
    own_names,
)
from .strategies import (
    CopyMix,
    ForwardProxy,
    PrototypeDelegate,
    Strategy,
    StrategyRegistry,
    compose,
    create_delegating,
    default_registry,
    delegate,
    mix,
    set_prototype,
)

__all__ = [
    # Object model
    "MetaObject",
    "Receiver",
    "BehaviorSource",
    "own_names",
    "has_own",
    "get_prototype",
    # Strategies
    "mix",
    "delegate",
    "create_delegating",
    "set_prototype",
    "compose",
    "Strategy",
    "CopyMix",
    "ForwardProxy",
    "PrototypeDelegate",
    "StrategyRegistry",
    "default_registry",
    # Combinators
    "decorate",
    "after",
    "before",
    "around",
    "guard",
    "maybe",
    "provided",
    "unless",
    "returning",
    "once",
    "memoize",
    "StateScope",
    "state_scope",
    "ABSENT",
    # Policy
    "BindingPolicy",
    "POLICY_MATRIX",
    "binding_policy",
    # Config
    "CompositionConfig",
    # Errors
    "CompositionError",
    "CyclicDelegation",
    "InvalidArgument",
    "MethodNotFound",
    "PropertyNotFound",
    "UnknownStrategy",
    # Tracing
    "Trace",
]
