"""In-process implementation of the ScriptRuntime object model.

LocalRuntime keeps one metatable per type, built on first use, and applies
script calling conventions: argument conversion through each member's
parameter converters, borrows scoped to a single call, and return values
converted back to script values.
"""

from __future__ import annotations

import threading
from typing import Any

from mathbridge.config import BridgeSettings
from mathbridge.core.capability import Capability
from mathbridge.core.errors import CapabilityError, FieldError, TypeMismatchError
from mathbridge.core.identity import (
    LightUserData,
    TypeDescriptor,
    TypeKey,
    TypeRegistry,
    get_registry,
)
from mathbridge.core.types import Repr
from mathbridge.runtime.metatable import MetaTable
from mathbridge.runtime.models import MetaMethod, Method, MethodKind
from mathbridge.runtime.userdata import UserData


class LocalRuntime:
    """Single-isolate script object model living in the host process.

    Args:
        registry: Type registry to draw descriptors from (process-wide by default).
        settings: Bridge settings; loaded from the environment by default.
    """

    def __init__(
        self, registry: TypeRegistry | None = None, settings: BridgeSettings | None = None
    ) -> None:
        self._registry = registry if registry is not None else get_registry()
        self._settings = settings if settings is not None else BridgeSettings()
        self._metatables: dict[TypeDescriptor, MetaTable] = {}
        self._lock = threading.RLock()
        self._globals: dict[str, Any] = {}

    @property
    def registry(self) -> TypeRegistry:
        return self._registry

    @property
    def settings(self) -> BridgeSettings:
        return self._settings

    @property
    def globals(self) -> dict[str, Any]:
        return self._globals

    # Metatables and handle creation

    def metatable_for(self, key: TypeKey) -> MetaTable:
        """Get the metatable for a type, building it exactly once.

        Raises:
            TypeMismatchError: If no bridge is registered for the type.
            RegistrationConflictError: If the bridge declares conflicting members.
        """
        desc = self._registry.descriptor_for(key)
        table = self._metatables.get(desc)
        if table is not None:
            return table
        # Late import to avoid circular dependency
        from mathbridge.bridge.core import build_metatable

        with self._lock:
            table = self._metatables.get(desc)
            if table is None:
                table = build_metatable(desc, self._settings)
                self._metatables[desc] = table
        return table

    def create_userdata(self, value: Any) -> UserData:
        from mathbridge.bridge.core import key_of

        return UserData(self, self.metatable_for(key_of(value)), value)

    def create_userdata_type(self, subject: type, scalar: Repr | str | None = None) -> UserData:
        from mathbridge.bridge.meta import TypeToken

        if scalar is not None:
            scalar = Repr.parse(scalar)
        desc = self._registry.descriptor(subject, scalar)
        return self.create_userdata(TypeToken(desc))

    def create_table(self, items: Any = None) -> dict[str, Any]:
        return dict(items) if items is not None else {}

    # Indexing and calls

    def _member(self, handle: UserData, name: str) -> Method:
        method = handle.metatable.methods.get(name)
        if method is None:
            raise FieldError(f"{handle.type_name} has no member {name!r}")
        return method

    def get(self, handle: UserData, name: str) -> Any:
        field = handle.metatable.fields.get(name)
        if field is not None:
            if field.getter is None:
                raise FieldError(f"{handle.type_name}.{name} is write-only")
            with handle.borrow() as this:
                return self.to_script(field.getter(self, this))
        method = self._member(handle, name)
        return lambda *args: self.invoke(method, args)

    def set(self, handle: UserData, name: str, value: Any) -> None:
        field = handle.metatable.fields.get(name)
        if field is None or field.setter is None:
            raise FieldError(f"{handle.type_name} has no settable field {name!r}")
        converted = field.param(self, value, f"field {name!r}") if field.param else value
        with handle.borrow_mut() as this:
            field.setter(self, this, converted)

    def call_method(self, handle: UserData, name: str, *args: Any) -> Any:
        return self.invoke(self._member(handle, name), (handle, *args))

    def call_function(self, handle: UserData, name: str, *args: Any) -> Any:
        return self.invoke(self._member(handle, name), args)

    def invoke(self, method: Method, args: tuple[Any, ...]) -> Any:
        """Call a metatable member with script arguments.

        For methods, the first argument is the receiver and must be a handle
        of the member's own type. Arguments are converted before the receiver
        is borrowed, so passing the receiver as an argument is allowed.
        """
        if not method.takes_self:
            return self.to_script(method.func(self, *method.convert_args(self, args)))
        receiver = args[0] if args else None
        if not isinstance(receiver, UserData) or receiver.metatable.key != method.owner:
            expected = method.owner.name if method.owner is not None else "userdata"
            raise TypeMismatchError(
                f"{method.name}: bad self, expected {expected}, got {self.type_name(receiver)}"
            )
        converted = method.convert_args(self, args[1:])
        if method.kind is MethodKind.METHOD_MUT:
            with receiver.borrow_mut() as this:
                result = method.func(self, this, *converted)
        else:
            with receiver.borrow() as this:
                result = method.func(self, this, *converted)
        return self.to_script(result)

    # Operators and protocols

    def arith(self, op: MetaMethod, a: Any, b: Any = None) -> Any:
        hook = None
        for operand in (a, b):
            if isinstance(operand, UserData):
                hook = operand.metatable.meta.get(op)
                if hook is not None:
                    break
        if hook is None:
            culprit = a if isinstance(a, UserData) or b is None else b
            raise TypeMismatchError(
                f"attempt to perform {op.value} on a {self.type_name(culprit)} value"
            )
        args = (a,) if op is MetaMethod.UNM else (a, b)
        return self.invoke(hook, args)

    def equals(self, a: Any, b: Any) -> bool:
        if a is b:
            return True
        if not isinstance(a, UserData) or not isinstance(b, UserData):
            if isinstance(a, UserData) or isinstance(b, UserData):
                return False
            return bool(a == b)
        if a.metatable.descriptor is not b.metatable.descriptor:
            return False
        hook = a.metatable.meta.get(MetaMethod.EQ)
        if hook is not None:
            return bool(self.invoke(hook, (a, b)))
        if Capability.PARTIAL_EQ not in a.metatable.capabilities:
            return False
        with a.borrow() as left, b.borrow() as right:
            return bool(left == right)

    def tostring(self, value: Any) -> str:
        if not isinstance(value, UserData):
            return str(value)
        hook = value.metatable.meta.get(MetaMethod.TOSTRING)
        if hook is not None:
            return str(self.invoke(hook, (value,)))
        if Capability.DEBUG in value.metatable.capabilities:
            with value.borrow() as this:
                return repr(this)
        return f"{value.type_name}: 0x{id(value):016x}"

    def clone(self, handle: UserData) -> UserData:
        """Duplicate a handle's value into a new handle.

        Raises:
            CapabilityError: If the handle's type never declared CLONE.
        """
        if Capability.CLONE not in handle.metatable.capabilities:
            raise CapabilityError(f"{handle.type_name} is not clonable")
        with handle.borrow() as this:
            return UserData(self, handle.metatable, this.copy())

    def type_name(self, value: Any) -> str:
        if isinstance(value, UserData):
            return value.type_name
        if value is None:
            return "nil"
        return type(value).__name__

    # Type tokens and value conversion

    def type_of(self, handle: UserData) -> LightUserData:
        return self.encode_type(handle.metatable.descriptor)

    def encode_type(self, desc: TypeDescriptor) -> LightUserData:
        return self._registry.encode(desc)

    def decode_type(self, handle: object) -> TypeDescriptor:
        return self._registry.decode(handle)

    def to_script(self, value: Any) -> Any:
        from mathbridge.bridge.marshal import to_script

        return to_script(self, value)

    def from_script(self, value: object, native: type, scalar: Repr | str | None = None) -> Any:
        from mathbridge.bridge.marshal import from_script

        return from_script(self, value, native, Repr.parse(scalar) if scalar is not None else None)
