"""Host object model of the embedded scripting runtime."""

from mathbridge.core.identity import LightUserData
from mathbridge.runtime.local import LocalRuntime
from mathbridge.runtime.metatable import MetaTable, UserDataFields, UserDataMethods
from mathbridge.runtime.models import Field, MetaMethod, Method, MethodKind, Param
from mathbridge.runtime.protocol import ScriptRuntime
from mathbridge.runtime.userdata import UserData

__all__ = [
    # Protocol
    "ScriptRuntime",
    "LocalRuntime",
    # Object model
    "UserData",
    "LightUserData",
    "MetaTable",
    "MetaMethod",
    "Method",
    "MethodKind",
    "Field",
    "Param",
    # Registrars
    "UserDataFields",
    "UserDataMethods",
]
