"""Scripting runtime protocol.

The bridge is written against this interface. It abstracts the host object
model of an embedded scripting runtime:
- Userdata handles with runtime-managed lifetime
- Metatables with fields, methods and operator hooks
- Light userdata for pointer-sized opaque values
- Tables and globals

Usage:
    runtime = LocalRuntime()
    install(runtime)
    V = runtime.globals["nalgebra"]["Vector2"]["f32"]
"""

from __future__ import annotations

from typing import Any, Protocol, runtime_checkable

from mathbridge.config import BridgeSettings
from mathbridge.core.identity import LightUserData, TypeDescriptor, TypeKey, TypeRegistry
from mathbridge.runtime.metatable import MetaTable
from mathbridge.runtime.models import MetaMethod
from mathbridge.runtime.userdata import UserData


@runtime_checkable
class ScriptRuntime(Protocol):
    """Host object model consumed by the bridge."""

    @property
    def registry(self) -> TypeRegistry:
        """Type registry descriptors are drawn from."""
        ...

    @property
    def settings(self) -> BridgeSettings:
        """Settings metatables are built with."""
        ...

    @property
    def globals(self) -> dict[str, Any]:
        """Global namespace visible to scripts."""
        ...

    def metatable_for(self, key: TypeKey) -> MetaTable:
        """Get the metatable for a type, building it on first use."""
        ...

    def create_userdata(self, value: Any) -> UserData:
        """Wrap a native value in a new handle."""
        ...

    def create_userdata_type(self, subject: type, scalar: Any = None) -> UserData:
        """Create the type handle carrying static constructors for a type."""
        ...

    def create_table(self, items: Any = None) -> dict[str, Any]:
        """Create a script table."""
        ...

    def get(self, handle: UserData, name: str) -> Any:
        """Index a handle: field value or member function."""
        ...

    def set(self, handle: UserData, name: str, value: Any) -> None:
        """Assign a field on a handle."""
        ...

    def call_method(self, handle: UserData, name: str, *args: Any) -> Any:
        """Call a member passing the handle as first argument."""
        ...

    def call_function(self, handle: UserData, name: str, *args: Any) -> Any:
        """Call a member without passing the handle."""
        ...

    def arith(self, op: MetaMethod, a: Any, b: Any = None) -> Any:
        """Apply an operator hook."""
        ...

    def equals(self, a: Any, b: Any) -> bool:
        """Script equality."""
        ...

    def tostring(self, value: Any) -> str:
        """Script string conversion."""
        ...

    def clone(self, handle: UserData) -> UserData:
        """Duplicate a handle's value into a new handle."""
        ...

    def type_of(self, handle: UserData) -> LightUserData:
        """Encoded type token of a handle's value type."""
        ...

    def encode_type(self, desc: TypeDescriptor) -> LightUserData:
        """Encode a descriptor for the script side."""
        ...

    def decode_type(self, handle: object) -> TypeDescriptor:
        """Validate and decode a type token from the script side."""
        ...

    def to_script(self, value: Any) -> Any:
        """Convert a native return value into a script value."""
        ...

    def from_script(self, value: object, native: type, scalar: Any = None) -> Any:
        """Convert a script value into a native value of the given type."""
        ...
