"""Tests for the decorator combinator layer."""

import pytest

from weft import (
    ABSENT,
    InvalidArgument,
    MetaObject,
    StateScope,
    after,
    around,
    before,
    create_delegating,
    decorate,
    delegate,
    guard,
    maybe,
    memoize,
    mix,
    once,
    provided,
    returning,
    state_scope,
    unless,
)
from weft.combinators import is_absent
from weft.kernel import get_own

from fakes import CallLog, FakeStore, make_person


def answer(self) -> int:
    return 42


class TestAfter:
    def test_after_runs_side_effects_in_order(self) -> None:
        log: list[str] = []

        def f1(self) -> None:
            log.append("a")

        def f2(self) -> None:
            log.append("b")

        wrapped = decorate(answer, after(f1, f2))

        assert wrapped(MetaObject()) == 42
        assert log == ["a", "b"]

    def test_after_runs_method_first(self) -> None:
        log: list[str] = []

        def method(self) -> str:
            log.append("method")
            return "done"

        def effect(self) -> str:
            log.append("effect")
            return "ignored"

        assert decorate(method, after(effect))(None) == "done"
        assert log == ["method", "effect"]

    def test_side_effects_get_receiver_and_original_arguments(self) -> None:
        store = FakeStore()
        todo = MetaObject({"title": "write tests"})

        def set_done(self, done: bool, *, by: str) -> str:
            self.done = done
            return "updated"

        todo.set_done = decorate(set_done, after(store.persist))

        assert todo.set_done(True, by="ada") == "updated"
        assert todo.done is True
        assert store.saved == [(todo, (True,), {"by": "ada"})]

    def test_side_effect_errors_propagate(self) -> None:
        def boom(self) -> None:
            raise RuntimeError("persist failed")

        with pytest.raises(RuntimeError, match="persist failed"):
            decorate(answer, after(boom))(MetaObject())


class TestBeforeAndAround:
    def test_before_runs_side_effects_first(self) -> None:
        log: list[str] = []

        def method(self) -> str:
            log.append("method")
            return "done"

        def effect(self) -> None:
            log.append("effect")

        assert decorate(method, before(effect))(None) == "done"
        assert log == ["effect", "method"]

    def test_around_controls_the_call(self) -> None:
        def double(self, value: int) -> int:
            return value * 2

        def clamp(proceed, self, value: int) -> int:
            return min(proceed(value), self.limit)

        obj = MetaObject({"limit": 10, "double": decorate(double, around(clamp))})

        assert obj.double(3) == 6
        assert obj.double(30) == 10

    def test_around_proceed_keeps_receiver(self) -> None:
        seen = []

        def method(self) -> None:
            seen.append(self)

        def twice(proceed, self) -> None:
            proceed()
            proceed()

        obj = MetaObject({"method": decorate(method, around(twice))})
        obj.method()

        assert seen == [obj, obj]


class TestGuards:
    def test_maybe_short_circuits_on_absent(self) -> None:
        log = CallLog()
        wrapped = maybe(log.entry("called"))

        assert wrapped(MetaObject(), ABSENT) is ABSENT
        assert log.calls == []

    def test_maybe_calls_through_when_present(self) -> None:
        log = CallLog()
        receiver = MetaObject()
        wrapped = maybe(log.entry("called"))

        assert wrapped(receiver, 5) == "called"
        assert log.calls == [(receiver, (5,), {})]

    def test_maybe_treats_none_as_absent(self) -> None:
        log = CallLog()
        wrapped = maybe(log.entry("called"))

        assert wrapped(MetaObject(), 1, None) is None
        assert log.calls == []

    def test_maybe_returns_first_absent_argument(self) -> None:
        wrapped = maybe(answer)
        assert wrapped(MetaObject(), 1, ABSENT, None) is ABSENT
        assert wrapped(MetaObject(), 1, None, ABSENT) is None

    def test_maybe_checks_keyword_arguments(self) -> None:
        log = CallLog()
        wrapped = maybe(log.entry("called"))

        assert wrapped(MetaObject(), 1, name=ABSENT) is ABSENT
        assert log.calls == []

    def test_maybe_ignores_the_receiver(self) -> None:
        log = CallLog()
        assert maybe(log.entry("called"))(None, 5) == "called"

    def test_maybe_attached_by_prototype(self) -> None:
        def set_name(self, name: str):
            self.name = name
            return self

        source = MetaObject({"set_name": maybe(set_name)})
        ada = create_delegating(source)

        assert ada.set_name(None) is None
        assert not hasattr(ada, "name")
        assert ada.set_name("Ada") is ada
        assert ada.name == "Ada"

    def test_guard_uses_fallback_policy(self) -> None:
        def positive(self, value: int) -> bool:
            return value > 0

        def halve(self, value: int) -> float:
            return value / 2

        wrapped = decorate(halve, guard(positive, returning(0)))

        assert wrapped(None, 8) == 4
        assert wrapped(None, -8) == 0

    def test_guard_fallback_sees_receiver(self) -> None:
        def closed(self) -> bool:
            return not self.closed

        def fallback(self) -> str:
            return f"{self.name} is closed"

        obj = MetaObject({"name": "shop", "closed": True})
        obj.enter = decorate(lambda self: "welcome", guard(closed, fallback))

        assert obj.enter() == "shop is closed"

    def test_provided_and_unless(self) -> None:
        def is_admin(self) -> bool:
            return self.role == "admin"

        def delete(self) -> str:
            return "deleted"

        admin = MetaObject({"role": "admin", "delete": decorate(delete, provided(is_admin))})
        guest = MetaObject({"role": "guest", "delete": decorate(delete, provided(is_admin))})
        assert admin.delete() == "deleted"
        assert guest.delete() is None

        guest.delete = decorate(delete, unless(is_admin))
        assert guest.delete() == "deleted"

    def test_is_absent(self) -> None:
        assert is_absent(None)
        assert is_absent(ABSENT)
        assert not is_absent(0)
        assert not is_absent("")
        assert repr(ABSENT) == "ABSENT"
        assert not ABSENT


class TestDecorate:
    def test_decorate_without_advice_is_identity(self) -> None:
        assert decorate(answer) is answer

    def test_decorate_nests_transparently(self) -> None:
        log: list[str] = []

        def first(self) -> None:
            log.append("first")

        def second(self) -> None:
            log.append("second")

        nested = decorate(decorate(answer, after(first)), after(second))
        flat = decorate(answer, after(first), after(second))

        assert nested(None) == flat(None) == 42
        assert log == ["first", "second", "first", "second"]

    def test_wrapper_keeps_metadata(self) -> None:
        wrapped = decorate(answer, after(lambda self: None), maybe)
        assert wrapped.__name__ == "answer"
        assert wrapped.__wrapped__.__wrapped__ is answer

    def test_order_matters_with_absent_arguments(self) -> None:
        log: list[str] = []

        def method(self, value) -> str:
            return "method"

        def effect(self, value) -> None:
            log.append("effect")

        guarded_outside = decorate(method, after(effect), maybe)
        guarded_inside = decorate(method, maybe, after(effect))

        assert guarded_outside(None, ABSENT) is ABSENT
        assert log == []

        assert guarded_inside(None, ABSENT) is ABSENT
        assert log == ["effect"]

        assert guarded_outside(None, 1) == guarded_inside(None, 1) == "method"

    def test_invalid_arguments(self) -> None:
        with pytest.raises(InvalidArgument):
            decorate("not callable")  # type: ignore[arg-type]
        with pytest.raises(InvalidArgument):
            decorate(answer, "not advice")  # type: ignore[arg-type]
        with pytest.raises(InvalidArgument):
            after(42)  # type: ignore[arg-type]
        with pytest.raises(InvalidArgument):
            guard(lambda self: True, fallback="nope")  # type: ignore[arg-type]

    def test_decorated_entry_on_a_plain_class(self) -> None:
        store = FakeStore()

        def save_title(self, title: str) -> str:
            self.title = title
            return title

        class Todo:
            save = decorate(save_title, after(store.persist))

        todo = Todo()

        assert todo.save("ship it") == "ship it"
        assert todo.title == "ship it"
        assert store.saved == [(todo, ("ship it",), {})]


class TestContextPropagation:
    """A decorated method mutates the receiver under every strategy."""

    @staticmethod
    def make_source(store: FakeStore) -> MetaObject:
        def rename(self, first: str) -> None:
            self.first_name = first

        return MetaObject({"rename": decorate(rename, after(store.persist))})

    def test_copy_mix(self) -> None:
        store = FakeStore()
        source = self.make_source(store)
        ada = mix(MetaObject({"first_name": "Ada"}), source)

        ada.rename("Grace")

        assert ada.first_name == "Grace"
        assert store.saved == [(ada, ("Grace",), {})]
        assert "first_name" not in source

    def test_forward_proxy(self) -> None:
        store = FakeStore()
        source = self.make_source(store)
        ada = delegate(MetaObject({"first_name": "Ada"}), source)

        ada.rename("Grace")

        assert ada.first_name == "Grace"
        assert store.saved == [(ada, ("Grace",), {})]
        assert "first_name" not in source

    def test_prototype(self) -> None:
        store = FakeStore()
        source = self.make_source(store)
        ada = create_delegating(source, first_name="Ada")

        ada.rename("Grace")

        assert ada.first_name == "Grace"
        assert store.saved == [(ada, ("Grace",), {})]
        assert "first_name" not in source

    def test_decorating_a_forwarder_keeps_body_late_bound(self) -> None:
        log: list[str] = []
        person = make_person()
        ada = delegate(MetaObject({"first_name": "Ada", "last_name": "Lovelace"}), person)
        ada.full_name = decorate(get_own(ada, "full_name"), after(lambda self: log.append("read")))

        person.full_name = lambda self: "replaced"

        assert ada.full_name() == "replaced"
        assert log == ["read"]


class TestStatefulCombinators:
    def test_state_scope_is_declared(self) -> None:
        assert state_scope(once()) is StateScope.PER_RECEIVER
        assert state_scope(memoize(StateScope.SHARED)) is StateScope.SHARED
        assert state_scope(decorate(answer, memoize())) is StateScope.PER_RECEIVER
        assert state_scope(decorate(answer, after(lambda self: None))) is StateScope.NONE
        assert state_scope(answer) is StateScope.NONE

    def test_outer_wrapper_reports_inner_state(self) -> None:
        wrapped = decorate(answer, once(StateScope.SHARED), after(lambda self: None))
        assert state_scope(wrapped) is StateScope.SHARED

    def test_none_scope_is_rejected(self) -> None:
        with pytest.raises(InvalidArgument):
            once(StateScope.NONE)
        with pytest.raises(InvalidArgument):
            memoize("none")

    def test_once_per_receiver(self) -> None:
        log = CallLog()
        source = MetaObject({"init": decorate(log.entry("ready"), once())})
        ada = create_delegating(source)
        grace = create_delegating(source)

        assert ada.init() == "ready"
        assert ada.init() == "ready"
        assert grace.init() == "ready"
        assert [call[0] for call in log.calls] == [ada, grace]

    def test_once_shared(self) -> None:
        log = CallLog()
        source = MetaObject({"init": decorate(log.entry("ready"), once(StateScope.SHARED))})
        ada = create_delegating(source)
        grace = create_delegating(source)

        ada.init()
        grace.init()

        assert [call[0] for call in log.calls] == [ada]

    def test_memoize_shared_across_prototype_receivers(self) -> None:
        calls: list[int] = []

        def square(self, n: int) -> int:
            calls.append(n)
            return n * n

        source = MetaObject({"square": decorate(square, memoize(StateScope.SHARED))})
        ada = create_delegating(source)
        grace = create_delegating(source)

        assert ada.square(3) == 9
        assert grace.square(3) == 9
        assert calls == [3]

    def test_memoize_shared_across_copy_mix_receivers(self) -> None:
        calls: list[int] = []

        def square(self, n: int) -> int:
            calls.append(n)
            return n * n

        source = {"square": decorate(square, memoize(StateScope.SHARED))}
        ada = mix(MetaObject(), source)
        grace = mix(MetaObject(), source)

        ada.square(4)
        grace.square(4)

        assert calls == [4]

    def test_memoize_per_receiver_isolates_caches(self) -> None:
        def describe(self, prefix: str) -> str:
            return f"{prefix} {self.name}"

        source = MetaObject({"describe": decorate(describe, memoize())})
        ada = create_delegating(source, name="Ada")
        grace = create_delegating(source, name="Grace")

        assert ada.describe("hi") == "hi Ada"
        assert grace.describe("hi") == "hi Grace"

        ada.name = "Augusta"
        assert ada.describe("hi") == "hi Ada"

    def test_memoize_custom_key_and_clear(self) -> None:
        calls: list[str] = []

        def lookup(self, name: str) -> str:
            calls.append(name)
            return name.lower()

        wrapped = decorate(lookup, memoize(StateScope.SHARED, key=lambda name: name.lower()))

        assert wrapped(None, "Ada") == "ada"
        assert wrapped(None, "ADA") == "ada"
        assert calls == ["Ada"]

        wrapped.cache_clear()
        wrapped(None, "ADA")
        assert calls == ["Ada", "ADA"]

    def test_per_receiver_state_needs_weakrefable_receiver(self) -> None:
        wrapped = decorate(answer, memoize())

        with pytest.raises(InvalidArgument):
            wrapped(5)
