"""Capability declarations attached to each type's metatable."""

from mathbridge.core.capability.models import Capability, Conversion
from mathbridge.core.capability.table import CapabilitySet, copy_value

__all__ = [
    "Capability",
    "Conversion",
    "CapabilitySet",
    "copy_value",
]
