#!/usr/bin/env python3
"""
Composition strategies side by side.

This example attaches the same person behavior to three receivers, one per
strategy, then changes the behavior source and shows who sees what.

Key concepts:
- mix() copies references: later changes to the source are invisible
- delegate() forwards a fixed set of names: replaced bodies are picked up,
  new names are not
- create_delegating() links to a prototype: everything added later is visible
- In every case the method runs with the receiver as self
"""

from __future__ import annotations

import logging

from weft import (
    MetaObject,
    PropertyNotFound,
    binding_policy,
    create_delegating,
    delegate,
    mix,
    own_names,
)


# ==================== Behavior ====================

def full_name(self) -> str:
    return f"{self.first_name} {self.last_name}"


def rename(self, first: str, last: str):
    self.first_name = first
    self.last_name = last
    return self


def shout_name(self) -> str:
    return full_name(self).upper()


def initials(self) -> str:
    return f"{self.first_name[0]}.{self.last_name[0]}."


# ==================== Walkthrough ====================

def show(label: str, receiver: MetaObject) -> None:
    try:
        extra = receiver.initials()
    except PropertyNotFound as exc:
        extra = f"<{type(exc).__name__}>"
    print(f"{label:<10} full_name={receiver.full_name()!r:<16} initials={extra:<18} own={sorted(own_names(receiver))}")


def main() -> None:
    person = MetaObject({"full_name": full_name, "rename": rename})

    mixed = mix(MetaObject({"first_name": "Ada", "last_name": "Lovelace"}), person)
    forwarded = delegate(MetaObject({"first_name": "Grace", "last_name": "Hopper"}), person)
    linked = create_delegating(person, first_name="Margaret", last_name="Hamilton")

    print("=" * 60)
    print("Before changing the source")
    print("=" * 60)
    for label, receiver in (("mix", mixed), ("delegate", forwarded), ("prototype", linked)):
        show(label, receiver)

    # Replace one body, add one new method
    person.full_name = shout_name
    person.initials = initials

    print("\n" + "=" * 60)
    print("After replacing full_name and adding initials")
    print("=" * 60)
    for label, receiver in (("mix", mixed), ("delegate", forwarded), ("prototype", linked)):
        show(label, receiver)

    print("\n" + "=" * 60)
    print("Binding policy")
    print("=" * 60)
    for name in ("mix", "delegate", "prototype", "decorate"):
        policy = binding_policy(name)
        print(f"{name:<10} body={policy.body:<6} identity={policy.identity:<6} extension={policy.extension}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    main()
