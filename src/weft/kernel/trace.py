"""Composition trace - optional record of attach events.

A Trace never changes how receivers resolve names. It keeps evidence of
which strategy attached which names to which receiver, in order, for
debugging and for asserting on composition order in tests.

Receivers are held weakly: a trace does not keep composed objects alive.
"""

from __future__ import annotations

import weakref
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any


@dataclass(frozen=True)
class Evidence:
    """One attach event.

    Attributes:
        id: Position in the trace, starting at 0
        action: Operation that ran ("mix", "delegate", "create_delegating",
            "set_prototype")
        strategy: Registry name of the strategy that ran it
        names: Names written onto the receiver, in order
        info: Operation-specific extras (e.g. ``cleared`` for set_prototype)
    """

    id: int
    action: str
    strategy: str
    names: tuple[str, ...] = ()
    info: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))
    receiver_ref: weakref.ref[Any] | None = field(default=None, repr=False, compare=False)

    @property
    def receiver(self) -> Any:
        """The receiver, or None once it has been garbage collected."""
        return self.receiver_ref() if self.receiver_ref is not None else None


class Trace:
    """Ordered log of attach events.

    A disabled trace costs one flag check per attach.
    """

    def __init__(self, enabled: bool = True) -> None:
        self.enabled = enabled
        self._events: list[Evidence] = []

    def record(
        self,
        action: str,
        strategy: str,
        receiver: Any = None,
        names: Iterable[str] = (),
        **info: Any,
    ) -> int | None:
        """Record an attach event and return its id, or None when disabled."""
        if not self.enabled:
            return None

        event = Evidence(
            id=len(self._events),
            action=action,
            strategy=strategy,
            names=tuple(names),
            info=info,
            receiver_ref=weakref.ref(receiver) if receiver is not None else None,
        )
        self._events.append(event)
        return event.id

    def get_events(self) -> list[Evidence]:
        return list(self._events)

    def find_all(self, action: str) -> list[Evidence]:
        """Return every recorded event with the given action."""
        return [e for e in self._events if e.action == action]

    def for_receiver(self, receiver: Any) -> list[Evidence]:
        """Events that attached behavior to ``receiver``, oldest first."""
        return [e for e in self._events if e.receiver is receiver]

    def attached_names(self, receiver: Any) -> list[str]:
        """Every name written onto ``receiver``, in attach order.

        A name attached twice appears twice.
        """
        return [name for e in self.for_receiver(receiver) for name in e.names]

    def __iter__(self) -> Iterator[Evidence]:
        return iter(list(self._events))

    def __len__(self) -> int:
        return len(self._events)

    def clear(self) -> None:
        self._events.clear()
