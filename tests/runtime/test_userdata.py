"""Tests for userdata handles and the LocalRuntime object model.

Critical Invariants:
- Borrows are scoped to one call; conflicting borrows fail
- Methods only accept a receiver of their own type
- A type with no declared capabilities gets no implicit protocol
"""

from concurrent.futures import ThreadPoolExecutor

import pytest

from mathbridge.bridge import UserDataBridge, userdata
from mathbridge.core.errors import (
    BorrowError,
    CapabilityError,
    FieldError,
    RegistrationConflictError,
    TypeMismatchError,
)
from mathbridge.core.identity import TypeKey
from mathbridge.core.types import Repr
from mathbridge.linalg import Vector2, Vector3
from mathbridge.runtime import LocalRuntime, MetaMethod, ScriptRuntime, UserData


class Counter:
    def __init__(self, n: int = 0) -> None:
        self.n = n

    def copy(self) -> "Counter":
        return Counter(self.n)


@userdata(Counter)
class CounterBridge(UserDataBridge):
    """Declares members but no capabilities."""

    @classmethod
    def add_fields(cls, fields):
        fields.add_field_method_get("n", lambda rt, this: this.n)

    @classmethod
    def add_methods(cls, methods):
        methods.add_method_mut("bump", lambda rt, this: setattr(this, "n", this.n + 1))
        methods.add_method("peek", lambda rt, this: this.n)


class Twice:
    pass


@userdata(Twice)
class TwiceBridge(UserDataBridge):
    @classmethod
    def add_methods(cls, methods):
        methods.add_function("go", lambda rt: 1)
        methods.add_function("go", lambda rt: 2)


@pytest.fixture
def counter(runtime):
    return runtime.create_userdata(Counter(3))


def test_local_runtime_satisfies_protocol(runtime):
    assert isinstance(runtime, ScriptRuntime)


# Metatables


def test_metatable_built_once_per_type(runtime):
    key = TypeKey(Vector2, Repr.F32)

    assert runtime.metatable_for(key) is runtime.metatable_for(key)


def test_concurrent_metatable_builds_share_one_table(runtime):
    key = TypeKey(Vector3, Repr.F64)
    with ThreadPoolExecutor(max_workers=8) as pool:
        tables = list(pool.map(lambda _: runtime.metatable_for(key), range(32)))

    assert all(table is tables[0] for table in tables)


def test_runtimes_have_separate_metatables_over_shared_descriptors(registry, settings):
    a = LocalRuntime(registry=registry, settings=settings)
    b = LocalRuntime(registry=registry, settings=settings)
    key = TypeKey(Vector2, Repr.F64)

    assert a.metatable_for(key) is not b.metatable_for(key)
    assert a.metatable_for(key).descriptor is b.metatable_for(key).descriptor


def test_duplicate_member_is_a_conflict(runtime):
    with pytest.raises(RegistrationConflictError, match="already defines 'go'"):
        runtime.metatable_for(TypeKey(Twice))


def test_unbridged_type_is_rejected(runtime):
    with pytest.raises(TypeMismatchError, match="has no script bridge"):
        runtime.create_userdata(object())


# Fields and calls


def test_field_get_and_method_calls(counter):
    assert counter.n == 3
    counter.bump()
    assert counter.peek() == 4


def test_read_only_field_cannot_be_set(counter):
    with pytest.raises(FieldError, match="no settable field 'n'"):
        counter.n = 10


def test_unknown_member_raises_field_error(counter):
    """FieldError is an AttributeError, so hasattr keeps working."""
    with pytest.raises(FieldError, match="has no member 'missing'"):
        counter.missing
    assert not hasattr(counter, "missing")
    assert hasattr(counter, "bump")


def test_dir_lists_members(counter):
    assert counter.metatable.member_names() == ["n", "bump", "peek"]
    assert dir(counter) == ["bump", "n", "peek"]


def test_raw_call_conventions(runtime, counter):
    runtime.call_method(counter, "bump")

    assert runtime.get(counter, "n") == 4


def test_method_rejects_foreign_receiver(runtime, counter):
    """CRITICAL: A method called with the wrong self fails as a type mismatch."""
    peek = counter.metatable.methods["peek"]
    other = runtime.create_userdata(Vector2.zeros())

    with pytest.raises(TypeMismatchError, match="peek: bad self, expected Counter"):
        runtime.invoke(peek, (other,))
    with pytest.raises(TypeMismatchError, match="got nil"):
        runtime.invoke(peek, ())


# Borrows


def test_exclusive_borrow_blocks_shared_access(counter):
    with counter.borrow_mut():
        with pytest.raises(BorrowError, match="already mutably borrowed"):
            counter.peek()


def test_shared_borrows_overlap_but_block_mutation(counter):
    with counter.borrow(), counter.borrow():
        assert counter.peek() == 3
        with pytest.raises(BorrowError, match="already borrowed"):
            counter.bump()


def test_borrow_released_after_error(counter):
    with pytest.raises(RuntimeError):
        with counter.borrow_mut():
            raise RuntimeError("boom")

    counter.bump()
    assert counter.n == 4


# Capability-free types


def test_clone_requires_capability(runtime, counter):
    with pytest.raises(CapabilityError, match="not clonable"):
        runtime.clone(counter)


def test_equality_is_identity_without_partial_eq(runtime, counter):
    twin = runtime.create_userdata(Counter(3))

    assert counter == counter
    assert counter != twin
    assert counter != 3


def test_tostring_falls_back_to_generic_label(counter):
    assert str(counter).startswith("Counter: 0x")
    assert repr(counter).startswith("<UserData Counter: 0x")


def test_arith_without_hook_is_type_mismatch(runtime, counter):
    with pytest.raises(TypeMismatchError, match="attempt to perform __add on a Counter value"):
        counter + counter
    with pytest.raises(TypeMismatchError):
        runtime.arith(MetaMethod.UNM, counter)


def test_handles_are_unhashable(counter):
    assert isinstance(counter, UserData)
    with pytest.raises(TypeError):
        hash(counter)


# Tables and globals


def test_tables_and_globals(runtime):
    table = runtime.create_table({"a": 1})
    runtime.globals["t"] = table

    assert runtime.globals["t"] == {"a": 1}
    assert runtime.create_table() == {}
