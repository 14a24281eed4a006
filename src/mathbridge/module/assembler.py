"""Namespace assembly.

One data-driven loop over a static table of native types and the configured
representations replaces per-type registration code. Every metatable is
built during assembly, so a registration conflict fails the load instead of
the first script call.
"""

from __future__ import annotations

import warnings
from collections.abc import Iterable, Sequence

from mathbridge.core.errors import RegistrationConflictError
from mathbridge.core.identity import TypeKey
from mathbridge.core.types import Repr
from mathbridge.linalg import Isometry2, Isometry3, Vector2, Vector3
from mathbridge.module.namespace import Family, Namespace
from mathbridge.runtime.protocol import ScriptRuntime
from mathbridge.runtime.userdata import UserData

NATIVE_TYPES: tuple[tuple[str, type], ...] = (
    ("Vector2", Vector2),
    ("Vector3", Vector3),
    ("Isometry2", Isometry2),
    ("Isometry3", Isometry3),
)
"""Types exposed by the namespace, in namespace order."""


def _check_unique(kind: str, names: Iterable[str]) -> None:
    seen: set[str] = set()
    for name in names:
        if name in seen:
            raise RegistrationConflictError(f"Duplicate {kind} {name!r} in namespace")
        seen.add(name)


def build_namespace(
    runtime: ScriptRuntime,
    types: Sequence[tuple[str, type]] = NATIVE_TYPES,
    representations: Sequence[str | Repr] | None = None,
    *,
    stacklevel: int = 2,
) -> Namespace:
    """Build the namespace table for a runtime.

    Args:
        runtime: Runtime the type handles are created in.
        types: (name, native class) pairs to expose.
        representations: Representations to instantiate each type with.
            Defaults to the runtime's settings.
        stacklevel: Frame the legacy-order DeprecationWarning is attributed to,
            counted as in warnings.warn.

    Returns:
        Immutable namespace: type name -> representation name -> type handle.

    Raises:
        RegistrationConflictError: On duplicate type names or representations,
            or conflicting declarations in any bridge.
        TypeMismatchError: If a listed type has no bridge.
    """
    settings = runtime.settings
    if representations is None:
        reprs = settings.reprs()
    else:
        reprs = [Repr.parse(r) for r in representations]
    _check_unique("type", (name for name, _ in types))
    _check_unique("representation", (r.value for r in reprs))

    if settings.out_arg_order == "legacy":
        warnings.warn(
            "out_arg_order='legacy' puts the output handle first for Vector3 and Isometry3; "
            "switch scripts to add(a, b, out)",
            DeprecationWarning,
            stacklevel=stacklevel,
        )

    families: dict[str, Family] = {}
    for name, native in types:
        handles: dict[str, UserData] = {}
        for rep in reprs:
            handles[rep.value] = runtime.create_userdata_type(native, rep)
            runtime.metatable_for(TypeKey(native, rep))
        families[name] = Family(name, handles)
    return Namespace(families)


def install(runtime: ScriptRuntime, name: str | None = None) -> Namespace:
    """Build the namespace and publish it as a runtime global.

    Args:
        runtime: Runtime to install into.
        name: Global name; defaults to `settings.namespace_name`.

    Returns:
        The installed namespace.

    Raises:
        RegistrationConflictError: If the global name is already taken.
    """
    name = name or runtime.settings.namespace_name
    if name in runtime.globals:
        raise RegistrationConflictError(f"Global {name!r} is already defined")
    namespace = build_namespace(runtime, stacklevel=3)
    runtime.globals[name] = namespace
    return namespace
