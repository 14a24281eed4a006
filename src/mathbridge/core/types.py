"""Numeric representations native values are monomorphized over."""

from __future__ import annotations

import numbers
from enum import Enum

import numpy as np

from mathbridge.core.errors import TypeMismatchError


class Repr(Enum):
    """Scalar representation of a native value (the `T` in `Vector2<T>`)."""

    F32 = "f32"
    F64 = "f64"

    @property
    def dtype(self) -> type[np.floating]:
        """numpy scalar type backing this representation."""
        return np.float32 if self is Repr.F32 else np.float64

    @classmethod
    def parse(cls, name: str | Repr) -> Repr:
        """Resolve a representation from its script-side tag ("f32", "f64").

        Raises:
            ValueError: If the tag names no supported representation.
        """
        if isinstance(name, Repr):
            return name
        try:
            return cls(name)
        except ValueError:
            supported = ", ".join(r.value for r in cls)
            raise ValueError(f"Unknown representation {name!r} (supported: {supported})") from None

    def coerce(self, value: object, what: str = "value") -> np.floating:
        """Coerce a script scalar into this representation.

        Booleans are rejected even though Python treats them as ints; script
        runtimes keep booleans and numbers apart.

        Args:
            value: Script-side value.
            what: Description used in the error message.

        Returns:
            Scalar of this representation's dtype.

        Raises:
            TypeMismatchError: If value is not a real number, or is an integer
                too large for a float.
        """
        if isinstance(value, bool | np.bool_) or not isinstance(value, numbers.Real):
            raise TypeMismatchError(
                f"{what}: expected number ({self.value}), got {type(value).__name__}"
            )
        try:
            return self.dtype(value)
        except (OverflowError, ValueError) as e:
            raise TypeMismatchError(f"{what}: number out of range for {self.value}") from e

    def __str__(self) -> str:
        return self.value
