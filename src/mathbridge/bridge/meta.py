"""Type handles: the script-side object standing for a native type.

`Type<Vector2<f32>>` carries the static constructors of `Vector2<f32>`, a
capability predicate, the encoded descriptor of its subject, and a generic
`from` conversion into the subject type.

Usage:
    V = runtime.create_userdata_type(Vector2, "f32")
    v = V.new(3.0, 4.0)
    V.has("clone")        # True
    V.descriptor()        # LightUserData
    V.from_(other)        # ConversionError unless convertible
"""

from __future__ import annotations

import functools
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from mathbridge.bridge import marshal
from mathbridge.bridge.core import UserDataBridge
from mathbridge.core.capability import Capability, CapabilitySet, copy_value
from mathbridge.core.errors import ConversionError
from mathbridge.core.identity import TypeDescriptor, TypeKey
from mathbridge.runtime.metatable import UserDataFields, UserDataMethods
from mathbridge.runtime.userdata import UserData

if TYPE_CHECKING:
    from mathbridge.runtime.protocol import ScriptRuntime


@dataclass(frozen=True, slots=True)
class TypeToken:
    """Zero-state value identifying a type; the payload of a type handle."""

    subject: TypeDescriptor

    def copy(self) -> TypeToken:
        return self

    def __repr__(self) -> str:
        return f"Type<{self.subject.name}>"


def convert_into(runtime: ScriptRuntime, target: TypeKey, value: object) -> Any:
    """Reinterpret a script value as a native value of `target`.

    A handle of the target type is copied; a handle of a type the target
    declared a conversion from is converted.

    Raises:
        ConversionError: If the value's runtime type does not match.
    """
    if not isinstance(value, UserData):
        kind = "nil" if value is None else type(value).__name__
        raise ConversionError(f"cannot convert {kind} into {target.name}")
    source = value.metatable.key
    if source == target:
        convert = copy_value
    else:
        runtime.metatable_for(target)
        conversion = runtime.registry.descriptor_for(target).capabilities.conversion_from(source)
        if conversion is None:
            raise ConversionError(f"cannot convert {source.name} into {target.name}")
        convert = conversion.convert
    with value.borrow() as inner:
        return convert(inner)


def responds_to(runtime: ScriptRuntime, subject: TypeKey, name: str) -> bool:
    """Check whether `subject` declared the capability called `name`."""
    capability = Capability.lookup(name)
    if capability is None:
        return False
    runtime.metatable_for(subject)
    return capability in runtime.registry.descriptor_for(subject).capabilities


@functools.cache
def type_bridge(subject: type[UserDataBridge]) -> type[UserDataBridge]:
    """Build (once) the bridge for type handles of `subject`'s native type."""

    class TypeBridge(UserDataBridge):
        native = TypeToken

        @classmethod
        def on_metatable_init(cls, table: CapabilitySet) -> None:
            table.add_clone().add_copy().add_send().add_sync().add_meta_type()
            subject.on_type_metatable_init(table)

        @classmethod
        def add_fields(cls, fields: UserDataFields) -> None:
            fields.add_field_method_get("name", lambda rt, this: this.subject.name)
            subject.add_type_fields(fields)

        @classmethod
        def add_methods(cls, methods: UserDataMethods) -> None:
            target = methods.key.subject_key()
            methods.add_function(
                "from", lambda rt, value: convert_into(rt, target, value), marshal.raw()
            )
            methods.add_function(
                "has", lambda rt, name: responds_to(rt, target, name), marshal.string()
            )
            methods.add_function("descriptor", lambda rt: rt.registry.descriptor_for(target))
            subject.add_type_methods(methods)

    TypeBridge.__name__ = TypeBridge.__qualname__ = f"TypeBridge[{subject.__name__}]"
    return TypeBridge
