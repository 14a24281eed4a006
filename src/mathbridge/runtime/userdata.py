"""Userdata handles: runtime-owned containers of exactly one native value.

Python code drives a handle the way script code would:

    v = V.new(3.0, 4.0)      # V is a type handle from the namespace
    v.x                      # field get
    v.x = 5.0                # field set, coerced to the representation
    v.norm()                 # methods are bound to the handle (colon call)
    v.add(v, v)              # functions are not bound (dot call)
    -v, v + v, v - v         # operator hooks
    V.from_(v)               # trailing underscore for Python keywords
"""

from __future__ import annotations

import functools
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from mathbridge.core.errors import BorrowError
from mathbridge.runtime.models import MetaMethod

if TYPE_CHECKING:
    from mathbridge.runtime.metatable import MetaTable
    from mathbridge.runtime.protocol import ScriptRuntime


class UserData:
    """Opaque script handle holding one native value.

    The bridge never owns a handle's lifetime; it borrows the contents for the
    duration of one call. Shared borrows may overlap; an exclusive borrow
    excludes every other borrow.
    """

    __slots__ = ("_runtime", "_metatable", "_value", "_borrows")

    def __init__(self, runtime: ScriptRuntime, metatable: MetaTable, value: Any) -> None:
        object.__setattr__(self, "_runtime", runtime)
        object.__setattr__(self, "_metatable", metatable)
        object.__setattr__(self, "_value", value)
        object.__setattr__(self, "_borrows", 0)  # >0 shared, -1 exclusive

    @property
    def metatable(self) -> MetaTable:
        return self._metatable

    @property
    def type_name(self) -> str:
        return self._metatable.name

    @contextmanager
    def borrow(self) -> Iterator[Any]:
        """Borrow the wrapped value for reading.

        Raises:
            BorrowError: If the value is exclusively borrowed.
        """
        if self._borrows < 0:
            raise BorrowError(f"{self.type_name} is already mutably borrowed")
        object.__setattr__(self, "_borrows", self._borrows + 1)
        try:
            yield self._value
        finally:
            object.__setattr__(self, "_borrows", self._borrows - 1)

    @contextmanager
    def borrow_mut(self) -> Iterator[Any]:
        """Borrow the wrapped value exclusively for in-place mutation.

        Raises:
            BorrowError: If any other borrow is active.
        """
        if self._borrows != 0:
            raise BorrowError(f"{self.type_name} is already borrowed")
        object.__setattr__(self, "_borrows", -1)
        try:
            yield self._value
        finally:
            object.__setattr__(self, "_borrows", 0)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)
        table = self._metatable
        if name not in table.fields and name not in table.methods and name.endswith("_"):
            name = name[:-1]
        method = table.methods.get(name)
        if method is not None and method.takes_self:
            return functools.partial(self._runtime.call_method, self, name)
        return self._runtime.get(self, name)

    def __setattr__(self, name: str, value: Any) -> None:
        self._runtime.set(self, name, value)

    def __dir__(self) -> list[str]:
        return self._metatable.member_names()

    def __add__(self, other: Any) -> Any:
        return self._runtime.arith(MetaMethod.ADD, self, other)

    def __radd__(self, other: Any) -> Any:
        return self._runtime.arith(MetaMethod.ADD, other, self)

    def __sub__(self, other: Any) -> Any:
        return self._runtime.arith(MetaMethod.SUB, self, other)

    def __rsub__(self, other: Any) -> Any:
        return self._runtime.arith(MetaMethod.SUB, other, self)

    def __neg__(self) -> Any:
        return self._runtime.arith(MetaMethod.UNM, self)

    def __eq__(self, other: object) -> bool:
        return self._runtime.equals(self, other)

    __hash__ = None  # type: ignore[assignment]

    def __str__(self) -> str:
        return self._runtime.tostring(self)

    def __repr__(self) -> str:
        return f"<UserData {self._runtime.tostring(self)}>"
