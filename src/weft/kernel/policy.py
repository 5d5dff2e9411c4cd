"""Binding policy matrix.

Each composition strategy makes two binding-time choices and one
extensibility choice:

- body: when the implementation that runs is chosen. Early means at attach
  time; late means at every call.
- identity: when the set of names and the entries behind them is fixed.
- extension: whether names added to the source after attaching become
  usable on the receiver.

The matrix is data. The test suite checks each row against the strategy's
observed behavior.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict

from weft.kernel.errors import UnknownStrategy

Binding = Literal["early", "late"]
Extension = Literal["open", "closed"]
Cardinality = Literal["many-to-many", "many-to-one"]


class BindingPolicy(BaseModel):
    """Binding and extensibility guarantees of one strategy."""

    model_config = ConfigDict(frozen=True)

    strategy: str
    body: Binding
    identity: Binding
    extension: Extension
    cardinality: Cardinality
    description: str = ""

    @property
    def is_open(self) -> bool:
        return self.extension == "open"

    @property
    def late_bound_body(self) -> bool:
        return self.body == "late"


POLICY_MATRIX: dict[str, BindingPolicy] = {
    "mix": BindingPolicy(
        strategy="mix",
        body="early",
        identity="early",
        extension="closed",
        cardinality="many-to-many",
        description="Copies references to the source's callables; no link remains.",
    ),
    "delegate": BindingPolicy(
        strategy="delegate",
        body="late",
        identity="early",
        extension="closed",
        cardinality="many-to-many",
        description="Forwards a fixed set of names; each call looks the body up again.",
    ),
    "prototype": BindingPolicy(
        strategy="prototype",
        body="late",
        identity="late",
        extension="open",
        cardinality="many-to-one",
        description="Falls through to a single prototype for any name the receiver lacks.",
    ),
    "decorate": BindingPolicy(
        strategy="decorate",
        body="early",
        identity="early",
        extension="closed",
        cardinality="many-to-many",
        description=(
            "Captures the wrapped entry when decorating; decorate a forwarder "
            "to keep the body late-bound."
        ),
    ),
}


def binding_policy(strategy: str) -> BindingPolicy:
    """Get the binding policy for a strategy name."""
    if strategy not in POLICY_MATRIX:
        raise UnknownStrategy(strategy)
    return POLICY_MATRIX[strategy]
