"""Vector and point value types backed by numpy arrays.

Usage:
    v = Vector2.new(3.0, 4.0, scalar=Repr.F32)
    v.norm()  # 5.0
    v.normalize_mut()

    p = Point3.from_vector(Vector3.x_axis(Repr.F64))
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

import numpy as np

from mathbridge.core.types import Repr


class Vector:
    """Fixed-size column vector. Subclasses pin the dimension."""

    __slots__ = ("coords", "scalar")

    DIM: ClassVar[int] = 0
    AXES: ClassVar[tuple[str, ...]] = ()

    def __init__(self, coords: Any, scalar: Repr = Repr.F64) -> None:
        data = np.array(coords, dtype=scalar.dtype)
        if data.shape != (self.DIM,):
            raise ValueError(f"expected {self.DIM} coordinates, got shape {data.shape}")
        self.coords = data
        self.scalar = scalar

    @classmethod
    def new(cls, *components: float, scalar: Repr = Repr.F64) -> Self:
        return cls(components, scalar)

    @classmethod
    def zeros(cls, scalar: Repr = Repr.F64) -> Self:
        return cls(np.zeros(cls.DIM), scalar)

    @classmethod
    def axis(cls, index: int, scalar: Repr = Repr.F64) -> Self:
        """Unit basis vector along `index`."""
        coords = np.zeros(cls.DIM)
        coords[index] = 1.0
        return cls(coords, scalar)

    @classmethod
    def x_axis(cls, scalar: Repr = Repr.F64) -> Self:
        return cls.axis(0, scalar)

    @classmethod
    def y_axis(cls, scalar: Repr = Repr.F64) -> Self:
        return cls.axis(1, scalar)

    def _same_kind(self, other: object) -> bool:
        return type(other) is type(self) and getattr(other, "scalar", None) is self.scalar

    def _check(self, other: object) -> None:
        if not self._same_kind(other):
            raise TypeError(f"Cannot combine {self.type_name()} with {type(other).__name__}")

    def type_name(self) -> str:
        return f"{type(self).__name__}<{self.scalar}>"

    def __add__(self, other: Self) -> Self:
        self._check(other)
        return type(self)(self.coords + other.coords, self.scalar)

    def __sub__(self, other: Self) -> Self:
        self._check(other)
        return type(self)(self.coords - other.coords, self.scalar)

    def __neg__(self) -> Self:
        return type(self)(-self.coords, self.scalar)

    def __eq__(self, other: object) -> bool:
        if not self._same_kind(other):
            return NotImplemented
        return bool(np.array_equal(self.coords, other.coords))  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __getitem__(self, index: int) -> float:
        return float(self.coords[index])

    def norm(self) -> float:
        """Euclidean length."""
        return float(np.linalg.norm(self.coords))

    def normalize_mut(self) -> float:
        """Rescale to unit length in place and return the previous norm.

        A zero vector ends up as NaNs; no special case.
        """
        norm = np.linalg.norm(self.coords)
        self.coords /= norm
        return float(norm)

    def assign(self, other: Self) -> None:
        """Overwrite this vector's storage with another vector's coordinates."""
        self._check(other)
        self.coords[...] = other.coords

    def copy(self) -> Self:
        return type(self)(self.coords, self.scalar)

    def __repr__(self) -> str:
        values = ", ".join(repr(float(c)) for c in self.coords)
        return f"{self.type_name()}({values})"


class _Coord:
    """Named view onto one slot of `Vector.coords`."""

    def __init__(self, index: int) -> None:
        self.index = index

    def __get__(self, instance: Vector | None, owner: type) -> Any:
        if instance is None:
            return self
        return float(instance.coords[self.index])

    def __set__(self, instance: Vector, value: float) -> None:
        instance.coords[self.index] = value


class Vector2(Vector):
    """2D vector."""

    __slots__ = ()

    DIM = 2
    AXES = ("x", "y")

    x = _Coord(0)
    y = _Coord(1)


class Vector3(Vector):
    """3D vector."""

    __slots__ = ()

    DIM = 3
    AXES = ("x", "y", "z")

    x = _Coord(0)
    y = _Coord(1)
    z = _Coord(2)

    @classmethod
    def z_axis(cls, scalar: Repr = Repr.F64) -> Self:
        return cls.axis(2, scalar)


class Point:
    """Location in space; wraps the coordinate vector it is measured by."""

    __slots__ = ("coords",)

    VECTOR: ClassVar[type[Vector]] = Vector

    def __init__(self, coords: Vector) -> None:
        if type(coords) is not self.VECTOR:
            raise TypeError(f"{type(self).__name__} needs a {self.VECTOR.__name__}")
        self.coords = coords

    @classmethod
    def from_vector(cls, vector: Vector) -> Self:
        return cls(vector.copy())

    @property
    def scalar(self) -> Repr:
        return self.coords.scalar

    def __sub__(self, other: Self) -> Vector:
        return self.coords - other.coords

    def __eq__(self, other: object) -> bool:
        if type(other) is not type(self):
            return NotImplemented
        return self.coords == other.coords  # type: ignore[attr-defined]

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        values = ", ".join(repr(float(c)) for c in self.coords.coords)
        return f"{type(self).__name__}<{self.scalar}>({values})"


class Point2(Point):
    __slots__ = ()
    VECTOR = Vector2


class Point3(Point):
    __slots__ = ()
    VECTOR = Vector3
