"""Per-type capability set with a fluent declaration API.

Usage:
    caps = CapabilitySet(key)
    caps.add_clone().add_copy().add_send().add_sync().add_debug()
    caps.add_conversion_from(other_key)

    Capability.CLONE in caps  # True
"""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator
from typing import TYPE_CHECKING, Any, Self

from mathbridge.core.capability.models import Capability, Conversion
from mathbridge.core.errors import RegistrationConflictError

if TYPE_CHECKING:
    from mathbridge.core.identity.models import TypeKey


def copy_value(value: Any) -> Any:
    """Default conversion: duplicate the source value."""
    return value.copy()


class CapabilitySet:
    """Capabilities declared for one concrete type.

    Declarations are idempotent and order independent. Flags can only be
    added, never removed, so a capability stays available for the lifetime
    of the process once declared. Re-declaring a conversion with a different
    converter is a registration conflict.

    Args:
        owner: Key of the type these capabilities belong to.
    """

    __slots__ = ("_owner", "_flags", "_conversions", "_lock")

    def __init__(self, owner: TypeKey) -> None:
        self._owner = owner
        self._flags: set[Capability] = set()
        self._conversions: dict[TypeKey, Conversion] = {}
        self._lock = threading.Lock()

    @property
    def owner(self) -> TypeKey:
        return self._owner

    def add(self, capability: Capability) -> Self:
        """Declare a capability. Declaring it again is a no-op."""
        with self._lock:
            self._flags.add(capability)
        return self

    def add_clone(self) -> Self:
        return self.add(Capability.CLONE)

    def add_copy(self) -> Self:
        return self.add(Capability.COPY)

    def add_send(self) -> Self:
        return self.add(Capability.SEND)

    def add_sync(self) -> Self:
        return self.add(Capability.SYNC)

    def add_debug(self) -> Self:
        return self.add(Capability.DEBUG)

    def add_partial_eq(self) -> Self:
        return self.add(Capability.PARTIAL_EQ)

    def add_meta_type(self) -> Self:
        return self.add(Capability.META_TYPE)

    def add_conversion_from(
        self, source: TypeKey, convert: Callable[[Any], Any] = copy_value
    ) -> Self:
        """Declare that values of `source` can be converted into the owner type.

        Args:
            source: Key of the type converted from.
            convert: Function producing an owner-type value from a source value.

        Returns:
            This set, for chaining.

        Raises:
            RegistrationConflictError: If a different converter is already
                declared for the same source.
        """
        with self._lock:
            existing = self._conversions.get(source)
            if existing is not None:
                if existing.convert is not convert:
                    raise RegistrationConflictError(
                        f"Conflicting conversions into {self._owner.name} from {source.name}"
                    )
                return self
            self._conversions[source] = Conversion(source=source, convert=convert)
        return self

    def has(self, capability: Capability) -> bool:
        return capability in self._flags

    def __contains__(self, capability: object) -> bool:
        return capability in self._flags

    def __iter__(self) -> Iterator[Capability]:
        return iter(sorted(self._flags, key=lambda c: c.value))

    def __len__(self) -> int:
        return len(self._flags)

    def conversion_from(self, source: TypeKey) -> Conversion | None:
        """Get the declared conversion from `source`, if any."""
        return self._conversions.get(source)

    @property
    def conversions(self) -> tuple[Conversion, ...]:
        return tuple(self._conversions.values())

    def is_empty(self) -> bool:
        return not self._flags and not self._conversions

    def __repr__(self) -> str:
        names = ", ".join(c.value for c in self)
        return f"CapabilitySet({self._owner.name}: {names})"
