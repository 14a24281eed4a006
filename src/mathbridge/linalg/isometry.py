"""Rigid transforms (rotation followed by translation).

Isometry2 stores its rotation as a unit complex number `[cos, sin]`,
Isometry3 as a unit quaternion `[w, i, j, k]`. Composition follows the usual
convention: `(a * b).transform_point(p) == a.transform_point(b.transform_point(p))`
and `a / b == a * b.inverse()`.
"""

from __future__ import annotations

import math
from typing import Any, ClassVar, Self

import numpy as np

from mathbridge.core.types import Repr
from mathbridge.linalg.vector import Point, Point2, Point3, Vector, Vector2, Vector3


def _same_kind(a: object, b: object) -> bool:
    return type(a) is type(b) and getattr(a, "scalar", None) is getattr(b, "scalar", None)


class Isometry:
    """Shared storage and operators for 2D and 3D isometries."""

    __slots__ = ("translation", "rotation")

    VECTOR: ClassVar[type[Vector]] = Vector
    POINT: ClassVar[type[Point]] = Point
    IDENTITY_ROTATION: ClassVar[tuple[float, ...]] = ()

    def __init__(self, translation: Vector, rotation: Any) -> None:
        if type(translation) is not self.VECTOR:
            raise TypeError(f"{type(self).__name__} needs a {self.VECTOR.__name__} translation")
        self.translation = translation.copy()
        self.rotation = np.array(rotation, dtype=translation.scalar.dtype)

    @property
    def scalar(self) -> Repr:
        return self.translation.scalar

    @classmethod
    def identity(cls, scalar: Repr = Repr.F64) -> Self:
        return cls(cls.VECTOR.zeros(scalar), cls.IDENTITY_ROTATION)

    def type_name(self) -> str:
        return f"{type(self).__name__}<{self.scalar}>"

    def _check(self, other: object) -> None:
        if not _same_kind(self, other):
            raise TypeError(f"Cannot combine {self.type_name()} with {type(other).__name__}")

    def _rotate(self, coords: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _compose_rotation(self, other: np.ndarray) -> np.ndarray:
        raise NotImplementedError

    def _invert_rotation(self) -> np.ndarray:
        raise NotImplementedError

    def transform_vector(self, vector: Vector) -> Vector:
        """Rotate a vector (translation does not apply to directions)."""
        return self.VECTOR(self._rotate(vector.coords), self.scalar)

    def transform_point(self, point: Point) -> Point:
        coords = self._rotate(point.coords.coords) + self.translation.coords
        return self.POINT(self.VECTOR(coords, self.scalar))

    def inverse(self) -> Self:
        inv = type(self)(self.translation, self._invert_rotation())
        inv.translation.assign(-inv.transform_vector(self.translation))
        return inv

    def __mul__(self, other: Self) -> Self:
        self._check(other)
        # b moves the origin to its translation; a then moves that point
        moved = self.transform_point(self.POINT(other.translation))
        return type(self)(moved.coords, self._compose_rotation(other.rotation))

    def __truediv__(self, other: Self) -> Self:
        self._check(other)
        return self * other.inverse()

    def __eq__(self, other: object) -> bool:
        if not _same_kind(self, other):
            return NotImplemented
        return self.translation == other.translation and bool(
            np.array_equal(self.rotation, other.rotation)  # type: ignore[attr-defined]
        )

    __hash__ = None  # type: ignore[assignment]

    def assign(self, other: Self) -> None:
        """Overwrite translation and rotation storage in place."""
        self._check(other)
        self.translation.coords[...] = other.translation.coords
        self.rotation[...] = other.rotation

    def copy(self) -> Self:
        return type(self)(self.translation, self.rotation)

    def __repr__(self) -> str:
        t = ", ".join(repr(float(c)) for c in self.translation.coords)
        r = ", ".join(repr(float(c)) for c in self.rotation)
        return f"{self.type_name()}(translation=[{t}], rotation=[{r}])"


class Isometry2(Isometry):
    """2D rigid transform. Rotation is the unit complex `[cos(angle), sin(angle)]`."""

    __slots__ = ()

    VECTOR = Vector2
    POINT = Point2
    IDENTITY_ROTATION = (1.0, 0.0)

    @classmethod
    def new(cls, translation: Vector2, angle: float) -> Self:
        return cls(translation, (math.cos(angle), math.sin(angle)))

    @classmethod
    def from_translation(cls, x: float, y: float, scalar: Repr = Repr.F64) -> Self:
        return cls(Vector2.new(x, y, scalar=scalar), cls.IDENTITY_ROTATION)

    @classmethod
    def from_rotation(cls, angle: float, scalar: Repr = Repr.F64) -> Self:
        return cls.new(Vector2.zeros(scalar), angle)

    def _rotate(self, coords: np.ndarray) -> np.ndarray:
        c, s = self.rotation
        return np.array([c * coords[0] - s * coords[1], s * coords[0] + c * coords[1]])

    def _compose_rotation(self, other: np.ndarray) -> np.ndarray:
        c1, s1 = self.rotation
        c2, s2 = other
        z = np.array([c1 * c2 - s1 * s2, s1 * c2 + c1 * s2])
        return z / np.linalg.norm(z)

    def _invert_rotation(self) -> np.ndarray:
        return np.array([self.rotation[0], -self.rotation[1]])


class Isometry3(Isometry):
    """3D rigid transform. Rotation is the unit quaternion `[w, i, j, k]`."""

    __slots__ = ()

    VECTOR = Vector3
    POINT = Point3
    IDENTITY_ROTATION = (1.0, 0.0, 0.0, 0.0)

    @classmethod
    def new(cls, translation: Vector3, axisangle: Vector3) -> Self:
        return cls(translation, _quaternion_from_axisangle(axisangle.coords))

    @classmethod
    def from_translation(cls, x: float, y: float, z: float, scalar: Repr = Repr.F64) -> Self:
        return cls(Vector3.new(x, y, z, scalar=scalar), cls.IDENTITY_ROTATION)

    @classmethod
    def from_rotation(cls, axisangle: Vector3) -> Self:
        return cls.new(Vector3.zeros(axisangle.scalar), axisangle)

    def _rotate(self, coords: np.ndarray) -> np.ndarray:
        w, u = self.rotation[0], self.rotation[1:]
        uv = np.cross(u, coords)
        return coords + 2.0 * (w * uv + np.cross(u, uv))

    def _compose_rotation(self, other: np.ndarray) -> np.ndarray:
        w1, v1 = self.rotation[0], self.rotation[1:]
        w2, v2 = other[0], other[1:]
        q = np.concatenate(([w1 * w2 - np.dot(v1, v2)], w1 * v2 + w2 * v1 + np.cross(v1, v2)))
        return q / np.linalg.norm(q)

    def _invert_rotation(self) -> np.ndarray:
        return np.concatenate(([self.rotation[0]], -self.rotation[1:]))


def _quaternion_from_axisangle(axisangle: np.ndarray) -> np.ndarray:
    """Unit quaternion for a rotation vector (axis scaled by angle in radians)."""
    angle = float(np.linalg.norm(axisangle))
    if angle == 0.0:
        return np.array(Isometry3.IDENTITY_ROTATION)
    axis = np.asarray(axisangle, dtype=np.float64) / angle
    half = angle / 2.0
    return np.concatenate(([math.cos(half)], math.sin(half) * axis))
