"""Capability models.

A capability is a cross-cutting behavior a native type opts into on the
script side: duplication, debug formatting, thread-shareability markers,
equality, and convertibility from another type.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from mathbridge.core.identity.models import TypeKey


class Capability(Enum):
    """Named capabilities a type can declare on its metatable."""

    CLONE = "clone"  # value-semantics duplication
    COPY = "copy"  # bitwise-copyable duplication
    SEND = "send"  # safe to move between threads
    SYNC = "sync"  # safe to share between threads
    DEBUG = "debug"  # human-readable formatting
    PARTIAL_EQ = "partial_eq"  # structural equality
    META_TYPE = "meta_type"  # value is a type token for another type

    @classmethod
    def lookup(cls, name: str) -> Capability | None:
        """Resolve a script-side capability name, or None if unknown."""
        try:
            return cls(name.lower())
        except ValueError:
            return None


@dataclass(frozen=True, slots=True)
class Conversion:
    """Declared convertibility into the owning type from `source`."""

    source: TypeKey
    convert: Callable[[Any], Any]
