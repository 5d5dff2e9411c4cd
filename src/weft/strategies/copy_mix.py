"""Copy-Mix strategy: early-bound reference copies."""

from __future__ import annotations

import logging
from typing import Any

from weft.kernel.config import CompositionConfig
from weft.kernel.metaobject import (
    MetaObject,
    MethodEntry,
    Source,
    bind,
    own_items,
    require_receiver,
    require_source,
)
from weft.kernel.trace import Trace
from weft.strategies.base import Strategy

logger = logging.getLogger(__name__)

_MISSING = object()


class CopyMix(Strategy):
    """Copy the source's callables onto the receiver as own properties.

    Semantics:
        - The receiver gets the very same objects the source holds at mix
          time, not wrappers
        - No link to the source remains, so later changes to the source
          are invisible to the receiver
        - Sources are applied left to right; a later source wins on a
          name clash
    """

    name = "mix"

    def attach(self, receiver: MetaObject, source: Source, **options: Any) -> MetaObject:
        return self.mix(receiver, source, **options)

    def mix(self, receiver: MetaObject, *sources: Source) -> MetaObject:
        require_receiver(receiver)
        for source in sources:
            require_source(source)

        # Snapshot every source before touching the receiver
        copies: list[tuple[str, MethodEntry]] = []
        for source in sources:
            copies.extend(
                (name, value)
                for name, value in own_items(source)
                if callable(value) and self.config.is_enumerable(name)
            )

        with receiver._lock:
            for name, value in copies:
                previous = receiver._own.get(name, _MISSING)
                if previous is not _MISSING and previous is not value:
                    logger.warning("mix overwrites own property %r on %r", name, receiver)
                receiver._own[name] = value

        logger.debug("mixed %d entries into %r", len(copies), receiver)
        self._record("mix", receiver, [name for name, _ in copies])
        return receiver

    def resolve(self, receiver: MetaObject, name: str) -> MethodEntry | None:
        value = receiver._own.get(name, _MISSING)
        if value is _MISSING or not callable(value):
            return None
        return bind(value, receiver)


def mix(
    receiver: MetaObject,
    *sources: Source,
    config: CompositionConfig | None = None,
    trace: Trace | None = None,
) -> MetaObject:
    """Copy every enumerable callable own property of each source onto receiver.

    Args:
        receiver: Object receiving the copies
        *sources: MetaObjects or mappings to copy from, applied in order
        config: Enumerability settings, defaults to DEFAULT_CONFIG
        trace: Optional trace recording the mix

    Returns:
        The receiver

    Raises:
        InvalidArgument: receiver is not a MetaObject or a source is neither a
            MetaObject nor a mapping. Nothing is copied in that case.
    """
    return CopyMix(config, trace).mix(receiver, *sources)
