"""Type identity models.

Usage:
    key = TypeKey(Vector2, Repr.F32)
    key.name  # "Vector2<f32>"
    key.meta().name  # "Type<Vector2<f32>>"
"""

from __future__ import annotations

from dataclasses import dataclass, field

from mathbridge.core.capability import CapabilitySet
from mathbridge.core.types import Repr


@dataclass(frozen=True, slots=True)
class TypeKey:
    """Structural key of one concrete type instantiation.

    `meta` marks the type-token type of `subject` (the script-side object
    that carries static constructors for it).
    """

    subject: type
    scalar: Repr | None = None
    is_meta: bool = False

    @property
    def name(self) -> str:
        base = self.subject.__name__
        if self.scalar is not None:
            base = f"{base}<{self.scalar.value}>"
        return f"Type<{base}>" if self.is_meta else base

    def meta(self) -> TypeKey:
        """Key of the type-token type for this key."""
        return TypeKey(self.subject, self.scalar, is_meta=True)

    def subject_key(self) -> TypeKey:
        """Key of the type a type-token stands for."""
        return TypeKey(self.subject, self.scalar)


@dataclass(eq=False, slots=True)
class TypeDescriptor:
    """Canonical identity record for one type. Equality is identity.

    Descriptors are created by TypeRegistry only and are never destroyed.
    """

    key: TypeKey
    index: int
    capabilities: CapabilitySet = field(init=False)

    def __post_init__(self) -> None:
        self.capabilities = CapabilitySet(self.key)

    @property
    def name(self) -> str:
        return self.key.name

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.name}, index={self.index})"


@dataclass(frozen=True, slots=True)
class LightUserData:
    """Pointer-sized opaque script value with no ownership attached."""

    value: int

    def __repr__(self) -> str:
        if isinstance(self.value, int) and not isinstance(self.value, bool):
            return f"LightUserData({self.value:#018x})"
        return f"LightUserData({self.value!r})"
