"""Bridge registry, decorator, and metatable construction.

A bridge describes how one native type appears on the script side: which
capabilities it declares, which fields and methods its values expose, and
which static constructors its type handle carries.

Usage:
    @userdata(Vector2)
    class Vector2Bridge(UserDataBridge):
        @classmethod
        def on_metatable_init(cls, table: CapabilitySet) -> None:
            table.add_clone().add_copy().add_debug()

        @classmethod
        def add_methods(cls, methods: UserDataMethods) -> None:
            methods.add_method("norm", lambda rt, this: this.norm())
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any, ClassVar

from mathbridge.config import BridgeSettings
from mathbridge.core.capability import CapabilitySet
from mathbridge.core.errors import RegistrationConflictError, TypeMismatchError
from mathbridge.core.identity import TypeDescriptor, TypeKey
from mathbridge.runtime.metatable import MetaTable, UserDataFields, UserDataMethods


class UserDataBridge:
    """Base class for per-type bridges. Every hook defaults to declaring nothing."""

    native: ClassVar[type] = object

    @classmethod
    def on_metatable_init(cls, table: CapabilitySet) -> None:
        """Declare capabilities of the native type."""

    @classmethod
    def add_fields(cls, fields: UserDataFields) -> None:
        """Register field accessors on values."""

    @classmethod
    def add_methods(cls, methods: UserDataMethods) -> None:
        """Register methods, functions and operator hooks on values."""

    @classmethod
    def on_type_metatable_init(cls, table: CapabilitySet) -> None:
        """Declare extra capabilities of the type handle."""

    @classmethod
    def add_type_fields(cls, fields: UserDataFields) -> None:
        """Register fields on the type handle."""

    @classmethod
    def add_type_methods(cls, methods: UserDataMethods) -> None:
        """Register static constructors on the type handle."""


class BridgeRegistry:
    """Maps native classes to the bridge that exposes them."""

    def __init__(self) -> None:
        self._by_native: dict[type, type[UserDataBridge]] = {}

    def register(self, native: type, bridge: type[UserDataBridge]) -> type[UserDataBridge]:
        """Register a bridge for a native class.

        Raises:
            RegistrationConflictError: If another bridge is registered for the class.
        """
        existing = self._by_native.get(native)
        if existing is not None and existing is not bridge:
            raise RegistrationConflictError(
                f"{native.__name__} is already bridged by {existing.__name__}"
            )
        self._by_native[native] = bridge
        return bridge

    def get(self, native: type) -> type[UserDataBridge] | None:
        return self._by_native.get(native)


# Module-level registry instance
_bridges = BridgeRegistry()


def get_bridges() -> BridgeRegistry:
    """Access the global bridge registry."""
    return _bridges


def userdata(native: type) -> Callable[[type[UserDataBridge]], type[UserDataBridge]]:
    """Register the decorated bridge class for `native`.

    Args:
        native: Native class the bridge exposes.

    Returns:
        Class decorator.
    """

    def decorator(bridge: type[UserDataBridge]) -> type[UserDataBridge]:
        bridge.native = native
        return _bridges.register(native, bridge)

    return decorator


def key_of(value: Any) -> TypeKey:
    """Type key of a native value, including its representation."""
    # Late import to avoid circular dependency
    from mathbridge.bridge.meta import TypeToken

    if isinstance(value, TypeToken):
        return value.subject.key.meta()
    return TypeKey(type(value), getattr(value, "scalar", None))


def bridge_for(key: TypeKey) -> type[UserDataBridge]:
    """Resolve the bridge for a type key.

    Raises:
        TypeMismatchError: If the native class has no registered bridge.
    """
    bridge = _bridges.get(key.subject)
    if bridge is None:
        raise TypeMismatchError(f"{key.subject_key().name} has no script bridge")
    if key.is_meta:
        from mathbridge.bridge.meta import type_bridge

        return type_bridge(bridge)
    return bridge


def build_metatable(desc: TypeDescriptor, settings: BridgeSettings | None = None) -> MetaTable:
    """Build the metatable for a descriptor from its bridge.

    Capabilities are declared on the descriptor itself, so repeated builds
    (one per runtime) re-declare the same capabilities idempotently.
    """
    bridge = bridge_for(desc.key)
    table = MetaTable(desc)
    bridge.on_metatable_init(desc.capabilities)
    bridge.add_fields(UserDataFields(table, settings))
    bridge.add_methods(UserDataMethods(table, settings))
    return table
