"""Error taxonomy for the bridge.

Per-call errors (type mismatch, invalid handle, failed conversion, borrow
conflicts) propagate to the calling script frame as ordinary exceptions.
Only RegistrationConflictError is fatal, and only while a namespace is being
assembled.
"""

from __future__ import annotations


class BridgeError(Exception):
    """Base class for every error raised by the bridge."""

    pass


class TypeMismatchError(BridgeError, TypeError):
    """Raised when a script value cannot be coerced to the expected native type."""

    pass


class InvalidHandleError(BridgeError, ValueError):
    """Raised when an opaque type handle was never issued by the registry."""

    pass


class ConversionError(BridgeError, TypeError):
    """Raised when `from` cannot reinterpret a value as the target type."""

    pass


class CapabilityError(BridgeError):
    """Raised when a protocol is used on a type that never declared the capability."""

    pass


class BorrowError(BridgeError, RuntimeError):
    """Raised when a handle is borrowed mutably while another borrow is active."""

    pass


class FieldError(BridgeError, AttributeError):
    """Raised when a handle has no field or method with the requested name."""

    pass


class RegistrationConflictError(BridgeError, RuntimeError):
    """Raised when two registrations claim the same name or capability slot."""

    pass
