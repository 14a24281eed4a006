"""numpy-backed value types consumed by the bridge: vectors, points, isometries."""

from mathbridge.linalg.isometry import Isometry, Isometry2, Isometry3
from mathbridge.linalg.unit import Unit
from mathbridge.linalg.vector import Point, Point2, Point3, Vector, Vector2, Vector3

__all__ = [
    "Vector",
    "Vector2",
    "Vector3",
    "Point",
    "Point2",
    "Point3",
    "Isometry",
    "Isometry2",
    "Isometry3",
    "Unit",
]
