"""Read-only namespace exposed to scripts: type name -> representation -> type handle.

Usage:
    ns = build_namespace(runtime)
    V = ns["Vector2"]["f32"]
    V = ns["Vector2"]("f32")  # call form, as scripts index families
    ns.lookup("Isometry3", "f64")
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from mathbridge.core.errors import BridgeError
from mathbridge.runtime.userdata import UserData


class UnknownTypeError(BridgeError, KeyError):
    """Raised when the namespace has no type with the requested name."""

    pass


class UnknownRepresentationError(BridgeError, KeyError):
    """Raised when a known type has no instantiation for the requested representation."""

    pass


class Family(Mapping[str, UserData]):
    """Type handles of one native type, keyed by representation name."""

    def __init__(self, name: str, handles: Mapping[str, UserData]) -> None:
        self._name = name
        self._handles = MappingProxyType(dict(handles))

    @property
    def name(self) -> str:
        return self._name

    def __getitem__(self, representation: str) -> UserData:
        try:
            return self._handles[representation]
        except KeyError:
            available = ", ".join(self._handles)
            raise UnknownRepresentationError(
                f"{self._name} has no {representation!r} representation (available: {available})"
            ) from None

    def __call__(self, representation: str) -> UserData:
        return self[representation]

    def __iter__(self) -> Iterator[str]:
        return iter(self._handles)

    def __len__(self) -> int:
        return len(self._handles)

    def __repr__(self) -> str:
        return f"Family({self._name}: {', '.join(self._handles)})"


class Namespace(Mapping[str, Family]):
    """Two-level ordered mapping built once at module load."""

    def __init__(self, families: Mapping[str, Family]) -> None:
        self._families = MappingProxyType(dict(families))

    def __getitem__(self, type_name: str) -> Family:
        try:
            return self._families[type_name]
        except KeyError:
            raise UnknownTypeError(f"No type named {type_name!r} in namespace") from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._families)

    def __len__(self) -> int:
        return len(self._families)

    def lookup(self, type_name: str, representation: str) -> UserData:
        """Get the type handle for a type and representation.

        Raises:
            UnknownTypeError: If the type name is not registered.
            UnknownRepresentationError: If the type has no such representation.
        """
        return self[type_name][representation]

    def __repr__(self) -> str:
        return f"Namespace({', '.join(self._families)})"
