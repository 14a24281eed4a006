"""Core primitives: representations, errors, capabilities, type identity.

Architecture Note:
    core/ has no knowledge of the scripting runtime or the math types. The
    runtime/ package builds on it, bridge/ binds native types through it,
    and module/ assembles the script-visible namespace.
"""

from mathbridge.core.capability import Capability, CapabilitySet, Conversion
from mathbridge.core.errors import (
    BorrowError,
    BridgeError,
    CapabilityError,
    ConversionError,
    FieldError,
    InvalidHandleError,
    RegistrationConflictError,
    TypeMismatchError,
)
from mathbridge.core.identity import (
    LightUserData,
    TypeDescriptor,
    TypeKey,
    TypeRegistry,
    get_registry,
)
from mathbridge.core.types import Repr

__all__ = [
    # Types
    "Repr",
    # Errors
    "BridgeError",
    "TypeMismatchError",
    "InvalidHandleError",
    "ConversionError",
    "CapabilityError",
    "BorrowError",
    "FieldError",
    "RegistrationConflictError",
    # Capability
    "Capability",
    "CapabilitySet",
    "Conversion",
    # Identity
    "TypeKey",
    "TypeDescriptor",
    "LightUserData",
    "TypeRegistry",
    "get_registry",
]
