"""Tests for type handles (`Type<T>` objects) and type tokens.

Critical Invariants:
- descriptor() decodes back to the subject's canonical descriptor
- from() converts same-type or declared-convertible values only
- has() reflects declared capabilities
"""

import pytest

from mathbridge.bridge import TypeToken
from mathbridge.core.capability import Capability
from mathbridge.core.errors import ConversionError, InvalidHandleError, TypeMismatchError
from mathbridge.core.types import Repr
from mathbridge.linalg import Vector2
from mathbridge.runtime import LightUserData


def test_type_handle_name(vec2, vec3):
    assert vec2.name == "Vector2<f32>"
    assert vec3.name == "Vector3<f64>"


def test_type_handle_is_type_token(vec2):
    with vec2.borrow() as token:
        assert isinstance(token, TypeToken)
    assert vec2.type_name == "Type<Vector2<f32>>"


def test_descriptor_roundtrip(runtime, vec2):
    """CRITICAL: The encoded descriptor decodes to the canonical one."""
    handle = vec2.descriptor()

    assert isinstance(handle, LightUserData)
    assert runtime.decode_type(handle) is runtime.registry.descriptor(Vector2, Repr.F32)


def test_type_of_instance_matches_descriptor(runtime, vec2):
    v = vec2.new(1.0, 2.0)

    assert runtime.type_of(v) == vec2.descriptor()


def test_decode_forged_handle(runtime, vec2):
    handle = vec2.descriptor()

    with pytest.raises(InvalidHandleError):
        runtime.decode_type(LightUserData(handle.value + 4096))
    with pytest.raises(InvalidHandleError):
        runtime.decode_type(vec2)


@pytest.mark.parametrize(
    "name,expected",
    [("clone", True), ("copy", True), ("debug", True), ("partial_eq", True), ("fly", False)],
)
def test_has_reports_subject_capabilities(vec2, name, expected):
    assert vec2.has(name) is expected


def test_has_for_isometry(namespace):
    iso = namespace["Isometry2"]("f32")

    assert iso.has("send") is True
    assert iso.has("partial_eq") is False


def test_has_requires_string(vec2):
    with pytest.raises(TypeMismatchError, match="has: argument #1: expected string"):
        vec2.has(1)


def test_type_handle_capabilities(vec2):
    with vec2.borrow() as token:
        subject_caps = token.subject.capabilities
    type_caps = vec2.metatable.capabilities

    assert Capability.META_TYPE in type_caps
    assert Capability.CLONE in type_caps
    assert Capability.META_TYPE not in subject_caps


def test_from_same_type_copies(vec2):
    v = vec2.new(1.0, 2.0)

    copy = vec2.from_(v)
    copy.x = 9.0

    assert copy is not v
    assert v.x == 1.0


def test_from_declared_conversion(vec3):
    v = vec3.new(1.0, 2.0, 3.0)

    assert vec3.from_(v) == v


def test_from_unrelated_type_fails(vec2, vec3, namespace):
    with pytest.raises(ConversionError, match="cannot convert Vector3<f64> into Vector2<f32>"):
        vec2.from_(vec3.zeros())
    with pytest.raises(ConversionError, match="Vector2<f64> into Vector2<f32>"):
        vec2.from_(namespace["Vector2"]("f64").zeros())


@pytest.mark.parametrize("value", [None, 1.5, "vector", {"x": 1.0}])
def test_from_non_userdata_fails(vec2, value):
    with pytest.raises(ConversionError, match="cannot convert"):
        vec2.from_(value)


def test_raw_function_call(runtime, vec2):
    v = runtime.call_function(vec2, "new", 3.0, 4.0)

    assert runtime.call_method(v, "norm") == 5.0
    assert runtime.call_function(vec2, "from", v) == v


def test_clone_type_handle(runtime, vec2):
    twin = runtime.clone(vec2)

    assert twin is not vec2
    assert twin.name == vec2.name
    assert twin.new(1.0, 1.0) == vec2.new(1.0, 1.0)


def test_type_handle_tostring(vec2):
    assert str(vec2).startswith("Type<Vector2<f32>>: 0x")


def test_create_userdata_type_accepts_tags(runtime):
    handle = runtime.create_userdata_type(Vector2, "f64")

    assert handle.name == "Vector2<f64>"
