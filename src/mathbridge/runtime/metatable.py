"""Metatables and the registrars bridges use to fill them.

A MetaTable holds everything the script side can reach on values of one
type: fields, methods, functions and operator hooks. Capabilities live on
the type's descriptor and are shared by every runtime.

Usage:
    table = MetaTable(descriptor)
    fields = UserDataFields(table)
    fields.add_field_method_get("x", lambda rt, this: this.x)

    methods = UserDataMethods(table)
    methods.add_method("norm", lambda rt, this: this.norm())
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable
from typing import Any

from mathbridge.config import BridgeSettings
from mathbridge.core.capability import CapabilitySet
from mathbridge.core.errors import RegistrationConflictError
from mathbridge.core.identity import TypeDescriptor, TypeKey
from mathbridge.core.types import Repr
from mathbridge.runtime.models import Field, MetaMethod, Method, MethodKind, Param


class MetaTable:
    """Script-visible members of one type.

    Args:
        descriptor: Canonical descriptor of the type this table describes.
    """

    def __init__(self, descriptor: TypeDescriptor) -> None:
        self._descriptor = descriptor
        self.fields: dict[str, Field] = {}
        self.methods: dict[str, Method] = {}
        self.meta: dict[MetaMethod, Method] = {}

    @property
    def descriptor(self) -> TypeDescriptor:
        return self._descriptor

    @property
    def key(self) -> TypeKey:
        return self._descriptor.key

    @property
    def name(self) -> str:
        return self._descriptor.name

    @property
    def capabilities(self) -> CapabilitySet:
        return self._descriptor.capabilities

    def member_names(self) -> list[str]:
        """Field and method names, in declaration order."""
        return [*self.fields, *self.methods]

    def __repr__(self) -> str:
        return f"MetaTable({self.name}, members={self.member_names()})"


class _Registrar:
    def __init__(self, table: MetaTable, settings: BridgeSettings | None = None) -> None:
        self._table = table
        self._settings = settings if settings is not None else BridgeSettings()

    @property
    def settings(self) -> BridgeSettings:
        return self._settings

    @property
    def key(self) -> TypeKey:
        return self._table.key

    @property
    def scalar(self) -> Repr:
        """Representation of the type being registered."""
        if self._table.key.scalar is None:
            raise TypeError(f"{self._table.name} is not generic over a representation")
        return self._table.key.scalar

    def _check_name_free(self, name: str) -> None:
        if name in self._table.methods or name in self._table.fields:
            raise RegistrationConflictError(f"{self._table.name} already defines {name!r}")


class UserDataFields(_Registrar):
    """Registers field accessors on a metatable."""

    def add_field_method_get(self, name: str, getter: Callable[[Any, Any], Any]) -> None:
        """Add a getter called as `getter(runtime, this)` under a shared borrow."""
        field = self._table.fields.get(name)
        if field is not None and field.getter is not None:
            raise RegistrationConflictError(f"{self._table.name} already has a getter for {name!r}")
        if field is None:
            self._check_name_free(name)
            field = Field(name=name)
        self._table.fields[name] = dataclasses.replace(field, getter=getter)

    def add_field_method_set(
        self, name: str, setter: Callable[[Any, Any, Any], None], param: Param
    ) -> None:
        """Add a setter called as `setter(runtime, this, value)` under an exclusive borrow.

        The new value passes through `param` before the borrow is taken.
        """
        field = self._table.fields.get(name)
        if field is not None and field.setter is not None:
            raise RegistrationConflictError(f"{self._table.name} already has a setter for {name!r}")
        if field is None:
            self._check_name_free(name)
            field = Field(name=name)
        self._table.fields[name] = dataclasses.replace(field, setter=setter, param=param)


class UserDataMethods(_Registrar):
    """Registers methods, functions and operator hooks on a metatable."""

    def _add(self, name: str, kind: MethodKind, func: Callable[..., Any], params: tuple) -> None:
        self._check_name_free(name)
        self._table.methods[name] = Method(
            name=name, kind=kind, func=func, params=params, owner=self._table.key
        )

    def add_method(self, name: str, func: Callable[..., Any], *params: Param) -> None:
        """Add a method called as `func(runtime, this, *args)` with `this` borrowed shared."""
        self._add(name, MethodKind.METHOD, func, params)

    def add_method_mut(self, name: str, func: Callable[..., Any], *params: Param) -> None:
        """Add a method called as `func(runtime, this, *args)` with `this` borrowed exclusively."""
        self._add(name, MethodKind.METHOD_MUT, func, params)

    def add_function(self, name: str, func: Callable[..., Any], *params: Param) -> None:
        """Add a function called as `func(runtime, *args)`."""
        self._add(name, MethodKind.FUNCTION, func, params)

    def add_meta_function(self, meta: MetaMethod, func: Callable[..., Any], *params: Param) -> None:
        """Add an operator hook called as `func(runtime, *args)`."""
        if meta in self._table.meta:
            raise RegistrationConflictError(f"{self._table.name} already defines {meta.value}")
        self._table.meta[meta] = Method(
            name=meta.value, kind=MethodKind.FUNCTION, func=func, params=params
        )
