"""Runtime object-model types: metamethods and method descriptors."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mathbridge.core.identity import TypeKey
    from mathbridge.runtime.protocol import ScriptRuntime

type Param = Callable[[ScriptRuntime, object, str], Any]
"""Converter from a script value to a native argument.

Called as `param(runtime, value, what)`; `what` names the argument in error
messages. Raises TypeMismatchError when the value cannot be coerced.
"""


class MetaMethod(Enum):
    """Operator hooks a metatable can provide."""

    ADD = "__add"
    SUB = "__sub"
    UNM = "__unm"
    EQ = "__eq"
    TOSTRING = "__tostring"


class MethodKind(Enum):
    """How a metatable member is invoked."""

    METHOD = auto()  # receives a shared borrow of self
    METHOD_MUT = auto()  # receives an exclusive borrow of self
    FUNCTION = auto()  # plain function, no self


@dataclass(frozen=True, slots=True)
class Method:
    """A callable member of a metatable together with its parameter converters."""

    name: str
    kind: MethodKind
    func: Callable[..., Any]
    params: tuple[Param, ...] = ()
    owner: TypeKey | None = None

    @property
    def takes_self(self) -> bool:
        return self.kind is not MethodKind.FUNCTION

    def convert_args(self, runtime: ScriptRuntime, args: Sequence[object]) -> list[Any]:
        """Convert script arguments through the declared parameter converters.

        Missing arguments are passed to converters as None (script nil) and
        surplus arguments are ignored.
        """
        offset = 2 if self.takes_self else 1
        converted = []
        for i, param in enumerate(self.params):
            value = args[i] if i < len(args) else None
            converted.append(param(runtime, value, f"{self.name}: argument #{i + offset}"))
        return converted


@dataclass(frozen=True, slots=True)
class Field:
    """Getter and optional setter for a named field."""

    name: str
    getter: Callable[[ScriptRuntime, Any], Any] | None = None
    setter: Callable[[ScriptRuntime, Any, Any], None] | None = None
    param: Param | None = None
