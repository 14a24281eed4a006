"""Bridges exposing native types to the script side.

Importing this package registers the bindings for every math type.
"""

from mathbridge.bridge import linalg
from mathbridge.bridge.core import (
    BridgeRegistry,
    UserDataBridge,
    bridge_for,
    build_metatable,
    get_bridges,
    key_of,
    userdata,
)
from mathbridge.bridge.linalg import (
    Isometry2Bridge,
    Isometry3Bridge,
    Vector2Bridge,
    Vector3Bridge,
)
from mathbridge.bridge.meta import TypeToken, convert_into, responds_to

__all__ = [
    "linalg",
    # Registry
    "UserDataBridge",
    "BridgeRegistry",
    "userdata",
    "get_bridges",
    "bridge_for",
    "build_metatable",
    "key_of",
    # Bindings
    "Vector2Bridge",
    "Vector3Bridge",
    "Isometry2Bridge",
    "Isometry3Bridge",
    # Type handles
    "TypeToken",
    "convert_into",
    "responds_to",
]
