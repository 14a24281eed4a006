"""mathbridge: numpy-backed vectors, points and isometries for embedded scripts.

Usage:
    from mathbridge import LocalRuntime, install

    runtime = LocalRuntime()
    nalgebra = install(runtime)

    V = nalgebra["Vector2"]("f32")
    v = V.new(3.0, 4.0)
    v.norm()            # 5.0
    v.x = 6.0
    w = v.add(v, v)     # new handle
    v.add(v, v, w)      # result written into w

    I = nalgebra["Isometry3"]("f64")
    iso = I.translation(1.0, 2.0, 3.0)
    iso.mul(iso, I.identity())
"""

__version__ = "0.1.0"

# Bridges (importing registers the math bindings)
from mathbridge.bridge import (
    TypeToken,
    UserDataBridge,
    get_bridges,
    userdata,
)

# Configuration
from mathbridge.config import BridgeSettings

# Core primitives
from mathbridge.core import (
    BorrowError,
    BridgeError,
    Capability,
    CapabilityError,
    CapabilitySet,
    ConversionError,
    FieldError,
    InvalidHandleError,
    RegistrationConflictError,
    Repr,
    TypeDescriptor,
    TypeKey,
    TypeMismatchError,
    TypeRegistry,
    get_registry,
)

# Math values
from mathbridge.linalg import (
    Isometry2,
    Isometry3,
    Point2,
    Point3,
    Unit,
    Vector2,
    Vector3,
)

# Namespace
from mathbridge.module import (
    Namespace,
    UnknownRepresentationError,
    UnknownTypeError,
    build_namespace,
    install,
)

# Runtime
from mathbridge.runtime import (
    LightUserData,
    LocalRuntime,
    ScriptRuntime,
    UserData,
)

__all__ = [
    # Version
    "__version__",
    # Core
    "Repr",
    "TypeKey",
    "TypeDescriptor",
    "TypeRegistry",
    "get_registry",
    "Capability",
    "CapabilitySet",
    # Errors
    "BridgeError",
    "TypeMismatchError",
    "InvalidHandleError",
    "ConversionError",
    "CapabilityError",
    "BorrowError",
    "FieldError",
    "RegistrationConflictError",
    "UnknownTypeError",
    "UnknownRepresentationError",
    # Math
    "Vector2",
    "Vector3",
    "Point2",
    "Point3",
    "Isometry2",
    "Isometry3",
    "Unit",
    # Runtime
    "ScriptRuntime",
    "LocalRuntime",
    "UserData",
    "LightUserData",
    # Bridges
    "UserDataBridge",
    "userdata",
    "get_bridges",
    "TypeToken",
    # Namespace
    "Namespace",
    "build_namespace",
    "install",
    # Config
    "BridgeSettings",
]
