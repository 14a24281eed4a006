"""Namespace assembly and lookup."""

from mathbridge.module.assembler import NATIVE_TYPES, build_namespace, install
from mathbridge.module.namespace import (
    Family,
    Namespace,
    UnknownRepresentationError,
    UnknownTypeError,
)

__all__ = [
    "NATIVE_TYPES",
    "build_namespace",
    "install",
    "Namespace",
    "Family",
    "UnknownTypeError",
    "UnknownRepresentationError",
]
