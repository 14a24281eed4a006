"""Script bindings for vectors and isometries.

Every binding is generic over the representation: the registrars carry the
representation of the metatable being built, and converters are created for
it, so one bridge class serves `Vector2<f32>` and `Vector2<f64>` alike.

Output parameters:
    `add`, `sub` (vectors) and `mul`, `div` (isometries) accept an optional
    output handle. Given one, the result is written into that handle's
    storage and the handle is returned; otherwise a new handle is returned.
    The output handle goes last, `add(a, b, out)`. With
    `out_arg_order = "legacy"`, Vector3 and Isometry3 take it first,
    `add(out, a, b)`.
"""

from __future__ import annotations

import operator
from collections.abc import Callable
from typing import Any, ClassVar

from mathbridge.bridge import marshal
from mathbridge.bridge.core import UserDataBridge, userdata
from mathbridge.core.capability import CapabilitySet
from mathbridge.linalg import Isometry, Isometry2, Isometry3, Vector, Vector2, Vector3
from mathbridge.runtime.metatable import UserDataFields, UserDataMethods
from mathbridge.runtime.models import MetaMethod


def _leading_out(methods: UserDataMethods, bridge: type[LinalgBridge]) -> bool:
    return bridge.legacy_leading_out and methods.settings.out_arg_order == "legacy"


def add_binary_out(
    methods: UserDataMethods,
    bridge: type[LinalgBridge],
    name: str,
    op: Callable[[Any, Any], Any],
) -> None:
    """Register `name(a, b, out?)` computing `op(a, b)` with the output-parameter convention."""
    value = marshal.value_of(bridge.native, methods.scalar)
    out = marshal.optional(marshal.userdata_of(bridge.native, methods.scalar))
    if _leading_out(methods, bridge):
        methods.add_function(
            name, lambda rt, target, a, b: marshal.write_out(target, op(a, b)), out, value, value
        )
    else:
        methods.add_function(
            name, lambda rt, a, b, target: marshal.write_out(target, op(a, b)), value, value, out
        )


class LinalgBridge(UserDataBridge):
    """Capabilities shared by every math value type."""

    legacy_leading_out: ClassVar[bool] = False

    @classmethod
    def on_metatable_init(cls, table: CapabilitySet) -> None:
        table.add_clone().add_copy().add_send().add_sync().add_debug()


class VectorBridge(LinalgBridge):
    """Fields, arithmetic and constructors for fixed-size vectors."""

    native: ClassVar[type[Vector]]

    @classmethod
    def on_metatable_init(cls, table: CapabilitySet) -> None:
        super().on_metatable_init(table)
        table.add_partial_eq()

    @classmethod
    def add_fields(cls, fields: UserDataFields) -> None:
        coord = marshal.scalar(fields.scalar)
        for axis in cls.native.AXES:
            fields.add_field_method_get(axis, _getter(axis))
            fields.add_field_method_set(axis, _setter(axis), coord)

    @classmethod
    def add_methods(cls, methods: UserDataMethods) -> None:
        native, scalar = cls.native, methods.scalar
        coords = [marshal.scalar(scalar)] * native.DIM
        value = marshal.value_of(native, scalar)

        def set_coords(rt: Any, this: Vector, *components: Any) -> None:
            this.assign(native.new(*components, scalar=scalar))

        methods.add_method_mut("set", set_coords, *coords)

        add_binary_out(methods, cls, "add", operator.add)
        add_binary_out(methods, cls, "sub", operator.sub)

        methods.add_meta_function(MetaMethod.ADD, lambda rt, a, b: a + b, value, value)
        methods.add_meta_function(MetaMethod.SUB, lambda rt, a, b: a - b, value, value)
        methods.add_meta_function(MetaMethod.UNM, lambda rt, a: -a, value)

        methods.add_method_mut("normalize_mut", _normalize_mut)
        methods.add_method("norm", lambda rt, this: this.norm())

    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        native, scalar = cls.native, methods.scalar
        coords = [marshal.scalar(scalar)] * native.DIM
        methods.add_function("new", lambda rt, *c: native.new(*c, scalar=scalar), *coords)
        methods.add_function("zeros", lambda rt: native.zeros(scalar))
        methods.add_function("x_axis", lambda rt: native.x_axis(scalar))
        methods.add_function("y_axis", lambda rt: native.y_axis(scalar))


def _getter(axis: str) -> Callable[[Any, Vector], float]:
    return lambda rt, this: getattr(this, axis)


def _setter(axis: str) -> Callable[[Any, Vector, Any], None]:
    return lambda rt, this, value: setattr(this, axis, value)


def _normalize_mut(rt: Any, this: Vector) -> None:
    this.normalize_mut()


@userdata(Vector2)
class Vector2Bridge(VectorBridge):
    pass


@userdata(Vector3)
class Vector3Bridge(VectorBridge):
    legacy_leading_out = True

    @classmethod
    def on_metatable_init(cls, table: CapabilitySet) -> None:
        super().on_metatable_init(table)
        table.add_conversion_from(table.owner)

    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        super().add_type_methods(methods)
        scalar = methods.scalar
        methods.add_function("z_axis", lambda rt: Vector3.z_axis(scalar))


class IsometryBridge(LinalgBridge):
    """Composition for rigid transforms. Translation and rotation stay opaque."""

    native: ClassVar[type[Isometry]]

    @classmethod
    def add_methods(cls, methods: UserDataMethods) -> None:
        add_binary_out(methods, cls, "mul", operator.mul)
        add_binary_out(methods, cls, "div", operator.truediv)

    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        scalar = methods.scalar
        methods.add_function("identity", lambda rt: cls.native.identity(scalar))


@userdata(Isometry2)
class Isometry2Bridge(IsometryBridge):
    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        super().add_type_methods(methods)
        scalar = methods.scalar
        angle = marshal.scalar(scalar)
        methods.add_function(
            "new",
            lambda rt, t, a: Isometry2.new(t, a),
            marshal.value_of(Vector2, scalar),
            angle,
        )
        methods.add_function(
            "translation",
            lambda rt, x, y: Isometry2.from_translation(x, y, scalar),
            angle,
            angle,
        )
        methods.add_function("rotation", lambda rt, a: Isometry2.from_rotation(a, scalar), angle)


@userdata(Isometry3)
class Isometry3Bridge(IsometryBridge):
    legacy_leading_out = True

    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        super().add_type_methods(methods)
        scalar = methods.scalar
        coord = marshal.scalar(scalar)
        vector = marshal.value_of(Vector3, scalar)
        methods.add_function(
            "new", lambda rt, t, axisangle: Isometry3.new(t, axisangle), vector, vector
        )
        methods.add_function(
            "translation",
            lambda rt, x, y, z: Isometry3.from_translation(x, y, z, scalar),
            coord,
            coord,
            coord,
        )
        methods.add_function(
            "rotation", lambda rt, axisangle: Isometry3.from_rotation(axisangle), vector
        )
