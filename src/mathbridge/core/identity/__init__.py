"""Type identity: canonical descriptors and opaque handles."""

from mathbridge.core.identity.models import LightUserData, TypeDescriptor, TypeKey
from mathbridge.core.identity.registry import TypeRegistry, get_registry

__all__ = [
    "TypeKey",
    "TypeDescriptor",
    "LightUserData",
    "TypeRegistry",
    "get_registry",
]
