from __future__ import annotations

from mathbridge.linalg.vector import Vector


class Unit[V: Vector]:
    """A vector known to have unit length."""

    __slots__ = ("_value",)

    def __init__(self, value: V) -> None:
        self._value = value

    @classmethod
    def new_normalize(cls, value: V) -> Unit[V]:
        """Normalize a copy of `value` and wrap it."""
        normalized = value.copy()
        normalized.normalize_mut()
        return cls(normalized)

    def into_inner(self) -> V:
        return self._value

    def __repr__(self) -> str:
        return f"Unit({self._value!r})"
