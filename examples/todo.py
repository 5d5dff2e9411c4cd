#!/usr/bin/env python3
"""
Decorator combinators on a todo item.

A todo list keeps items as MetaObjects that share one prototype. The
prototype's mutators are decorated so that every change is persisted, null
arguments are ignored, and the expensive summary is computed once per item.

Key concepts:
- after() runs side effects with the same receiver and arguments
- maybe short-circuits on None / ABSENT arguments
- memoize keeps per-receiver caches even though the entry is shared
- Advice order matters: decorate(m, after(save), maybe) never saves a no-op
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from weft import (
    ABSENT,
    MetaObject,
    StateScope,
    after,
    create_delegating,
    decorate,
    maybe,
    memoize,
    state_scope,
)


# ==================== Persistence ====================

@dataclass
class Store:
    """In-memory store that records every save."""

    rows: list[dict[str, Any]] = field(default_factory=list)

    def save(self, todo: MetaObject, *args: Any, **kwargs: Any) -> None:
        self.rows.append({"title": todo.title, "done": todo.done})


# ==================== Behavior ====================

def set_title(self, title: str):
    self.title = title
    return self


def set_done(self, done: bool):
    self.done = done
    return self


def summary(self, width: int) -> str:
    mark = "x" if self.done else " "
    return f"[{mark}] {self.title}"[:width]


def make_todo_behavior(store: Store) -> MetaObject:
    return MetaObject(
        {
            "set_title": decorate(set_title, after(store.save), maybe),
            "set_done": decorate(set_done, after(store.save), maybe),
            "summary": decorate(summary, memoize(StateScope.PER_RECEIVER)),
        }
    )


def main() -> None:
    store = Store()
    behavior = make_todo_behavior(store)

    groceries = create_delegating(behavior, title="groceries", done=False)
    laundry = create_delegating(behavior, title="laundry", done=False)

    groceries.set_done(True)
    groceries.set_title(None)
    laundry.set_title("laundry and ironing")
    laundry.set_done(ABSENT)

    print("Saved rows:")
    for row in store.rows:
        print(f"  {row}")

    print("\nSummaries:")
    print(f"  {groceries.summary(30)}")
    print(f"  {laundry.summary(30)}")
    print(f"\nsummary state scope: {state_scope(behavior['summary']).value}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.DEBUG)
    main()
