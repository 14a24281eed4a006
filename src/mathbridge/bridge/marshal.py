"""Marshalling between script values and native values.

Parameter converters turn script arguments into typed native arguments and
raise TypeMismatchError on anything they cannot coerce. Handle arguments are
copied out of their handle, so the native call never aliases script storage;
the one exception is an output handle, which is passed through as a handle
and written in place by `write_out`.

Points are not bridged on their own: a point crosses the boundary as the
vector handle of its coordinates.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import numpy as np

from mathbridge.core.errors import TypeMismatchError
from mathbridge.core.identity import LightUserData, TypeDescriptor, TypeKey
from mathbridge.core.types import Repr
from mathbridge.linalg import Point, Unit, Vector
from mathbridge.runtime.models import Param
from mathbridge.runtime.userdata import UserData

if TYPE_CHECKING:
    from mathbridge.runtime.protocol import ScriptRuntime


def _type_name(value: object) -> str:
    if isinstance(value, UserData):
        return value.type_name
    return "nil" if value is None else type(value).__name__


def scalar(rep: Repr) -> Param:
    """Converter for a number in representation `rep`."""

    def convert(runtime: ScriptRuntime, value: object, what: str) -> Any:
        return rep.coerce(value, what)

    return convert


def string() -> Param:
    def convert(runtime: ScriptRuntime, value: object, what: str) -> str:
        if not isinstance(value, str):
            raise TypeMismatchError(f"{what}: expected string, got {_type_name(value)}")
        return value

    return convert


def raw() -> Param:
    """Converter passing the script value through untouched."""

    def convert(runtime: ScriptRuntime, value: object, what: str) -> object:
        return value

    return convert


def userdata_of(native: type, rep: Repr | None = None) -> Param:
    """Converter accepting only a handle whose value is exactly `native<rep>`.

    The handle itself is returned, not a copy of its value.
    """
    key = TypeKey(native, rep)

    def convert(runtime: ScriptRuntime, value: object, what: str) -> UserData:
        if not isinstance(value, UserData) or value.metatable.key != key:
            raise TypeMismatchError(f"{what}: expected {key.name}, got {_type_name(value)}")
        return value

    return convert


def value_of(native: type, rep: Repr | None = None) -> Param:
    """Converter copying a `native<rep>` value out of its handle.

    Point classes are accepted as well and are rebuilt from the vector
    handle of their coordinates.
    """
    if isinstance(native, type) and issubclass(native, Point):
        vector = value_of(native.VECTOR, rep)

        def convert_point(runtime: ScriptRuntime, value: object, what: str) -> Point:
            return native(vector(runtime, value, what))

        return convert_point

    handle = userdata_of(native, rep)

    def convert(runtime: ScriptRuntime, value: object, what: str) -> Any:
        with handle(runtime, value, what).borrow() as inner:
            return inner.copy()

    return convert


def unit(native: type[Vector], rep: Repr) -> Param:
    """Converter normalizing a vector argument on the way in."""
    vector = value_of(native, rep)

    def convert(runtime: ScriptRuntime, value: object, what: str) -> Unit[Any]:
        return Unit.new_normalize(vector(runtime, value, what))

    return convert


def optional(param: Param) -> Param:
    """Make a converter accept nil."""

    def convert(runtime: ScriptRuntime, value: object, what: str) -> Any:
        return None if value is None else param(runtime, value, what)

    return convert


def write_out(out: UserData | None, result: Any) -> Any:
    """Deliver an arithmetic result into an output handle, or return it for allocation.

    With an output handle, the result is written into the handle's existing
    storage and the same handle is returned; the handle's identity never
    changes. Without one, the result is returned as is and becomes a new
    handle on the way back to the script.

    Raises:
        TypeMismatchError: If the output handle holds a different type.
        BorrowError: If the output handle is currently borrowed.
    """
    if out is None:
        return result
    with out.borrow_mut() as target:
        if type(target) is not type(result) or target.scalar is not result.scalar:
            raise TypeMismatchError(
                f"output handle holds {out.type_name}, result is {result.type_name()}"
            )
        target.assign(result)
    return out


def to_script(runtime: ScriptRuntime, value: Any) -> Any:
    """Convert a native value into a script value.

    Raises:
        TypeMismatchError: If the value has no script representation.
    """
    if value is None or isinstance(value, bool | str | UserData | LightUserData | dict):
        return value
    if isinstance(value, int | float):
        return value
    if isinstance(value, np.floating):
        return float(value)
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, TypeDescriptor):
        return runtime.encode_type(value)
    if isinstance(value, Point):
        return runtime.create_userdata(value.coords.copy())
    if isinstance(value, Unit):
        return to_script(runtime, value.into_inner())
    return runtime.create_userdata(value)


def from_script(runtime: ScriptRuntime, value: object, native: type, rep: Repr | None) -> Any:
    """Convert a script value into a native value of `native<rep>`.

    Numbers convert through `rep`; everything else must be a handle of the
    requested type (or, for points, of the matching vector type).
    """
    if native is float:
        if rep is None:
            raise TypeError("a representation is required to convert numbers")
        return scalar(rep)(runtime, value, "value")
    return value_of(native, rep)(runtime, value, "value")
