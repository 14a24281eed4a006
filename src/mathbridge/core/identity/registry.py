"""Process-wide type-identity registry.

Descriptors live in an append-only arena. The opaque handle handed to script
code packs a per-registry tag into the high bits and the arena index into the
low 32 bits, so decoding is a tag comparison plus a bounds check and never
trusts the handle's bits beyond that.

Usage:
    registry = get_registry()
    desc = registry.descriptor(Vector2, Repr.F32)
    handle = registry.encode(desc)
    assert registry.decode(handle) is desc
"""

from __future__ import annotations

import secrets
import threading
from collections.abc import Iterator

from mathbridge.core.errors import InvalidHandleError
from mathbridge.core.identity.models import LightUserData, TypeDescriptor, TypeKey
from mathbridge.core.types import Repr

_INDEX_BITS = 32
_INDEX_MASK = (1 << _INDEX_BITS) - 1


class TypeRegistry:
    """Maps each TypeKey to exactly one TypeDescriptor for the registry's lifetime.

    First registration of a key is serialized by a lock; every later lookup
    observes the same descriptor.
    """

    def __init__(self) -> None:
        """Initialize an empty registry with a fresh handle tag."""
        self._by_key: dict[TypeKey, TypeDescriptor] = {}
        self._arena: list[TypeDescriptor] = []
        self._lock = threading.Lock()
        self._tag = secrets.randbits(_INDEX_BITS - 1) | 1

    def descriptor(
        self, subject: type, scalar: Repr | None = None, *, meta: bool = False
    ) -> TypeDescriptor:
        """Get or create the descriptor for a type instantiation.

        Args:
            subject: Native class.
            scalar: Representation the class is instantiated with, if generic.
            meta: If True, describe the type-token type of the instantiation.

        Returns:
            The canonical descriptor.
        """
        return self.descriptor_for(TypeKey(subject, scalar, is_meta=meta))

    def descriptor_for(self, key: TypeKey) -> TypeDescriptor:
        """Get or create the descriptor for a key."""
        desc = self._by_key.get(key)
        if desc is not None:
            return desc
        with self._lock:
            desc = self._by_key.get(key)
            if desc is None:
                desc = TypeDescriptor(key=key, index=len(self._arena))
                self._arena.append(desc)
                self._by_key[key] = desc
        return desc

    def lookup(self, key: TypeKey) -> TypeDescriptor | None:
        """Get the descriptor for a key without creating one."""
        return self._by_key.get(key)

    def encode(self, desc: TypeDescriptor) -> LightUserData:
        """Encode a descriptor as an opaque handle.

        Raises:
            InvalidHandleError: If the descriptor was issued by another registry.
        """
        if not self._owns(desc):
            raise InvalidHandleError(f"{desc!r} was not issued by this registry")
        return LightUserData((self._tag << _INDEX_BITS) | desc.index)

    def decode(self, handle: object) -> TypeDescriptor:
        """Recover the descriptor behind an opaque handle.

        Args:
            handle: Script value expected to be a LightUserData from encode().

        Returns:
            The descriptor the handle was encoded from.

        Raises:
            InvalidHandleError: If the handle is not a light userdata or does
                not correspond to any descriptor issued here.
        """
        if not isinstance(handle, LightUserData):
            raise InvalidHandleError(
                f"Expected a type handle (light userdata), got {type(handle).__name__}"
            )
        raw = handle.value
        if not isinstance(raw, int) or raw < 0 or (raw >> _INDEX_BITS) != self._tag:
            raise InvalidHandleError(f"Invalid type handle {handle!r}")
        index = raw & _INDEX_MASK
        if index >= len(self._arena):
            raise InvalidHandleError(f"Invalid type handle {handle!r}")
        return self._arena[index]

    def _owns(self, desc: TypeDescriptor) -> bool:
        return 0 <= desc.index < len(self._arena) and self._arena[desc.index] is desc

    def __len__(self) -> int:
        return len(self._arena)

    def __iter__(self) -> Iterator[TypeDescriptor]:
        return iter(list(self._arena))


# Module-level registry instance
_registry = TypeRegistry()


def get_registry() -> TypeRegistry:
    """Access the process-wide type registry."""
    return _registry
