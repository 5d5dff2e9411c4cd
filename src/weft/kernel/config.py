"""Composition configuration."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CompositionConfig:
    """Settings shared by the composition strategies.

    Attributes:
        max_chain_depth: Most prototype hops a lookup will follow before the
            chain is treated as cyclic.
        include_private: Whether names starting with an underscore are copied
            by ``mix`` and forwarded by ``delegate`` when no explicit names
            are given.
    """

    max_chain_depth: int = 64
    include_private: bool = False

    def __post_init__(self) -> None:
        if self.max_chain_depth <= 0:
            raise ValueError("max_chain_depth must be positive")

    def is_enumerable(self, name: str) -> bool:
        return self.include_private or not name.startswith("_")


DEFAULT_CONFIG = CompositionConfig()
