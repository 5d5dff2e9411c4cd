"""Error types for composition and lookup failures."""

from __future__ import annotations

from typing import Any


class CompositionError(Exception):
    """Base class for every error raised by weft."""


class InvalidArgument(CompositionError, TypeError):
    """A composition operation received a value it cannot compose.

    Raised before any mutation happens, so the receiver is left untouched.
    """

    def __init__(self, message: str, value: object = None) -> None:
        self.value = value
        super().__init__(message)

    def __repr__(self) -> str:
        return f"InvalidArgument({str(self)!r}, value={self.value!r})"


class PropertyNotFound(CompositionError, AttributeError):
    """Lookup of a name failed on the receiver and its whole delegation chain.

    Subclasses AttributeError so ``getattr(obj, name, default)`` and
    ``hasattr`` behave as they do for ordinary Python objects.
    """

    def __init__(self, name: str, receiver: Any = None, message: str | None = None) -> None:
        super().__init__(message or f"property '{name}' not found")
        # AttributeError.__init__ resets .name, so assign afterwards
        self.name = name
        self.receiver = receiver

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class MethodNotFound(PropertyNotFound):
    """A forwarded method was invoked or looked up but is not forwarded.

    Either the name was never forwarded onto the receiver, or the source
    no longer defines it at call time.
    """

    def __init__(self, name: str, receiver: Any = None, message: str | None = None) -> None:
        super().__init__(name, receiver, message or f"method '{name}' is not forwarded")


class CyclicDelegation(CompositionError):
    """The delegation chain loops back on itself or exceeds the depth bound."""

    def __init__(self, message: str, chain: tuple[Any, ...] = ()) -> None:
        self.chain = chain
        super().__init__(message)


class UnknownStrategy(CompositionError, KeyError):
    """No strategy is registered under the requested name."""

    def __init__(self, name: str) -> None:
        self.name = name
        super().__init__(f"Strategy '{name}' not found in registry")

    def __str__(self) -> str:
        return str(self.args[0])
