"""Tests for vector bindings as seen from script code.

Critical Invariants:
- Arguments are coerced to the handle's representation or rejected
- Output handles are written in place and returned as-is
- Operator hooks always allocate
"""

import math

import numpy as np
import pytest
from hypothesis import given
from hypothesis import strategies as st

from mathbridge import BridgeSettings, LocalRuntime, TypeRegistry, build_namespace
from mathbridge.core.capability import Capability
from mathbridge.core.errors import BorrowError, TypeMismatchError
from mathbridge.core.identity import TypeKey
from mathbridge.core.types import Repr
from mathbridge.linalg import Vector2, Vector3

coordinate = st.floats(min_value=-1e3, max_value=1e3, allow_nan=False, allow_infinity=False)


@pytest.fixture(scope="module")
def f64_vectors():
    """Vector2<f64> type handle shared across hypothesis examples."""
    runtime = LocalRuntime(registry=TypeRegistry(), settings=BridgeSettings())
    return build_namespace(runtime)["Vector2"]("f64")


# Construction and fields


def test_norm_of_3_4_is_5(vec2):
    v = vec2.new(3.0, 4.0)

    assert v.norm() == 5.0
    assert isinstance(v.norm(), float)


def test_constructors(vec2, vec3):
    assert vec2.zeros() == vec2.new(0.0, 0.0)
    assert vec2.x_axis() == vec2.new(1.0, 0.0)
    assert vec2.y_axis() == vec2.new(0.0, 1.0)
    assert vec3.z_axis() == vec3.new(0.0, 0.0, 1.0)


def test_field_roundtrip(vec3):
    v = vec3.new(1.0, 2.0, 3.0)
    v.y = 7
    v.z = -0.5

    assert (v.x, v.y, v.z) == (1.0, 7.0, -0.5)


def test_f32_fields_round_to_representation(vec2):
    v = vec2.new(0.1, 0.0)

    assert v.x == pytest.approx(0.1, rel=1e-6)
    assert v.x != 0.1


def test_field_set_rejects_non_numbers(vec2):
    v = vec2.new(1.0, 2.0)

    with pytest.raises(TypeMismatchError, match="field 'x': expected number"):
        v.x = "left"
    with pytest.raises(TypeMismatchError):
        v.y = True
    assert (v.x, v.y) == (1.0, 2.0)


def test_oversized_integer_is_type_mismatch(vec2, vec3):
    v = vec3.new(1.0, 2.0, 3.0)

    with pytest.raises(TypeMismatchError, match="field 'x': number out of range for f64"):
        v.x = 10**400
    with pytest.raises(TypeMismatchError, match="new: argument #1: number out of range for f32"):
        vec2.new(10**400, 0)
    assert v.x == 1.0


def test_constructor_rejects_missing_coordinate(vec3):
    with pytest.raises(TypeMismatchError, match="new: argument #3: expected number"):
        vec3.new(1.0, 2.0)


def test_surplus_arguments_are_ignored(vec2):
    assert vec2.new(1.0, 2.0, 3.0) == vec2.new(1.0, 2.0)


def test_set_replaces_whole_value(vec3):
    v = vec3.new(1.0, 2.0, 3.0)

    assert v.set(4.0, 5.0, 6.0) is None
    assert v == vec3.new(4.0, 5.0, 6.0)


def test_set_rejects_bad_input_without_partial_write(vec2):
    v = vec2.new(1.0, 2.0)

    with pytest.raises(TypeMismatchError, match="set: argument #3"):
        v.set(9.0, "nope")
    assert v == vec2.new(1.0, 2.0)


# Arithmetic with output parameters


def test_add_allocates_without_output(vec2):
    a = vec2.new(1.0, 2.0)
    b = vec2.new(3.0, 4.0)

    result = a.add(a, b)

    assert result == vec2.new(4.0, 6.0)
    assert result is not a and result is not b


def test_add_writes_into_output_handle(vec2):
    """CRITICAL: The output handle is mutated in place and returned as-is."""
    a = vec2.new(1.0, 2.0)
    b = vec2.new(3.0, 4.0)
    out = vec2.zeros()
    with out.borrow() as storage:
        coords = storage.coords

    result = a.add(a, b, out)

    assert result is out
    assert out == vec2.new(4.0, 6.0)
    with out.borrow() as storage:
        assert storage.coords is coords


def test_output_may_alias_an_operand(vec2):
    v = vec2.new(1.0, 1.0)

    v.add(v, v, v)
    v.sub(v, vec2.x_axis(), v)

    assert v == vec2.new(1.0, 2.0)


def test_sub_of_self_is_zero(vec2):
    v = vec2.new(3.0, 4.0)

    assert v.sub(v, v) == vec2.zeros()


def test_output_handle_must_match_type(vec2, vec3, namespace):
    a = vec2.new(1.0, 2.0)
    f64 = namespace["Vector2"]("f64")

    expected = "add: argument #3: expected Vector2<f32>, got Vector3<f64>"
    with pytest.raises(TypeMismatchError, match=expected):
        a.add(a, a, vec3.zeros())
    with pytest.raises(TypeMismatchError, match="got Vector2<f64>"):
        a.add(a, a, f64.zeros())


def test_operands_must_match_representation(vec2, namespace):
    f64 = namespace["Vector2"]("f64")
    zero = vec2.zeros()

    with pytest.raises(TypeMismatchError, match="sub: argument #2: expected Vector2<f32>"):
        zero.sub(zero, f64.zeros())


def test_output_write_respects_borrows(vec2):
    out = vec2.zeros()

    with out.borrow():
        with pytest.raises(BorrowError):
            out.add(vec2.x_axis(), vec2.y_axis(), out)


# Operators


def test_operator_hooks_allocate(vec2):
    a = vec2.new(1.0, 2.0)
    b = vec2.new(0.5, 0.5)

    assert a + b == vec2.new(1.5, 2.5)
    assert a - b == vec2.new(0.5, 1.5)
    assert -a == vec2.new(-1.0, -2.0)
    assert a == vec2.new(1.0, 2.0)


def test_operator_with_number_is_type_mismatch(vec2):
    v = vec2.new(1.0, 2.0)

    with pytest.raises(TypeMismatchError, match="__add: argument #2"):
        v + 1.0
    with pytest.raises(TypeMismatchError, match="__sub: argument #1"):
        1.0 - v


def test_equality_across_types_is_false(vec2, vec3, namespace):
    assert vec2.zeros() != vec3.zeros()
    assert vec2.zeros() != namespace["Vector2"]("f64").zeros()


def test_tostring_uses_debug_format(vec2):
    assert str(vec2.new(3.0, 4.0)) == "Vector2<f32>(3.0, 4.0)"


# Normalization


def test_normalize_mut_in_place(vec3):
    v = vec3.new(0.0, 3.0, 4.0)

    assert v.normalize_mut() is None
    assert v.norm() == pytest.approx(1.0)
    assert (v.y, v.z) == (pytest.approx(0.6), pytest.approx(0.8))


def test_normalize_zero_vector_is_nan(vec3):
    v = vec3.zeros()
    with np.errstate(invalid="ignore"):
        v.normalize_mut()

    assert math.isnan(v.x)


def test_norm_does_not_mutate(vec2):
    v = vec2.new(3.0, 4.0)
    v.norm()

    assert v == vec2.new(3.0, 4.0)


# Capabilities


def test_vector_capabilities(runtime, vec2):
    caps = runtime.registry.descriptor(Vector2, Repr.F32).capabilities

    for capability in (
        Capability.CLONE,
        Capability.COPY,
        Capability.SEND,
        Capability.SYNC,
        Capability.DEBUG,
        Capability.PARTIAL_EQ,
    ):
        assert capability in caps
    assert Capability.META_TYPE not in caps


def test_vector3_declares_conversion_from_itself(runtime, vec3):
    caps = runtime.registry.descriptor(Vector3, Repr.F64).capabilities

    assert caps.conversion_from(TypeKey(Vector3, Repr.F64)) is not None
    assert runtime.registry.descriptor(Vector2, Repr.F64).capabilities.conversions == ()


def test_clone_is_independent(runtime, vec2):
    v = vec2.new(1.0, 2.0)
    c = runtime.clone(v)
    c.x = 10.0

    assert c is not v
    assert v.x == 1.0


# Properties


@given(ax=coordinate, ay=coordinate, bx=coordinate, by=coordinate)
def test_sub_undoes_add(f64_vectors, ax, ay, bx, by):
    """PROPERTY: sub(add(a, b), b) == a (up to rounding)."""
    V = f64_vectors
    a, b = V.new(ax, ay), V.new(bx, by)

    back = a.sub(a.add(a, b), b)

    assert back.x == pytest.approx(ax, abs=1e-9)
    assert back.y == pytest.approx(ay, abs=1e-9)


@given(x=coordinate, y=coordinate)
def test_normalized_vectors_have_unit_norm(f64_vectors, x, y):
    """PROPERTY: normalize_mut leaves any non-zero vector with norm 1."""
    if math.hypot(x, y) < 1e-6:
        return
    v = f64_vectors.new(x, y)

    v.normalize_mut()

    assert v.norm() == pytest.approx(1.0, rel=1e-9)


@given(x=coordinate, y=coordinate)
def test_output_form_matches_allocating_form(f64_vectors, x, y):
    V = f64_vectors
    a = V.new(x, y)
    out = V.zeros()

    assert a.add(a, V.x_axis(), out) == a.add(a, V.x_axis())
    assert a.sub(a, V.y_axis(), out) == a.sub(a, V.y_axis())
