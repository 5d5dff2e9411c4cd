"""Strategy interface shared by the composition modes."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from typing import Any, ClassVar

from weft.kernel.config import DEFAULT_CONFIG, CompositionConfig
from weft.kernel.metaobject import MetaObject, MethodEntry, Source, own_items
from weft.kernel.policy import BindingPolicy, binding_policy
from weft.kernel.trace import Trace


class Strategy(ABC):
    """One way of connecting a receiver to a behavior source.

    Attributes:
        name: Registry key, also the key of the strategy's row in the
            binding policy matrix.
        config: Chain depth and enumerability settings.
        trace: Optional trace that records every attach.
    """

    name: ClassVar[str]

    def __init__(self, config: CompositionConfig | None = None, trace: Trace | None = None) -> None:
        self.config = config or DEFAULT_CONFIG
        self.trace = trace

    @property
    def policy(self) -> BindingPolicy:
        return binding_policy(self.name)

    @abstractmethod
    def attach(self, receiver: MetaObject, source: Source, **options: Any) -> MetaObject:
        """Connect ``source`` to ``receiver`` and return the receiver."""
        ...

    @abstractmethod
    def resolve(self, receiver: MetaObject, name: str) -> MethodEntry | None:
        """Return the entry this strategy supplies for ``name``, bound to ``receiver``.

        Returns None when the strategy supplies nothing under that name.
        """
        ...

    def _record(self, action: str, receiver: MetaObject, names: Iterable[str] = (), **info: Any) -> None:
        if self.trace is not None:
            self.trace.record(action, self.name, receiver, names, **info)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(config={self.config!r})"


def callable_names(source: Source, config: CompositionConfig) -> list[str]:
    """Enumerable names of the callable own properties of ``source``, in order."""
    return [name for name, value in own_items(source) if callable(value) and config.is_enumerable(name)]
