"""
Geometry primitives for house models.

Provides an immutable 3D vector for per-triangle work and the 2D footprint
helpers (winding, closing points, bounds) shared by the envelope, the shell
builder and the silhouette lookups.  Footprints live in the horizontal
``(x, z)`` plane; ``y`` is always the vertical axis.
"""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

from .exceptions import InvalidFootprintError


@dataclass(frozen=True, slots=True)
class Vector3D:
    """
    Immutable 3D vector.

    Supports arithmetic operations (``+``, ``-``, ``*``, unary ``-``)
    and the products needed for face classification.

    Examples:
        >>> v = Vector3D(1.0, 2.0, 3.0)
        >>> v.x, v.y, v.z
        (1.0, 2.0, 3.0)
        >>> Vector3D(1, 2, 3) + Vector3D(4, 5, 6)
        Vector3D(x=5, y=7, z=9)
        >>> -Vector3D(1, 0, 0)
        Vector3D(x=-1, y=0, z=0)
    """

    x: float
    y: float
    z: float

    def __add__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3D) -> Vector3D:
        return Vector3D(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3D:
        return Vector3D(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3D:
        return self * scalar

    def __neg__(self) -> Vector3D:
        return Vector3D(-self.x, -self.y, -self.z)

    def dot(self, other: Vector3D) -> float:
        """Dot product.

        Examples:
            >>> Vector3D(1, 0, 0).dot(Vector3D(0, 1, 0))
            0
        """
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3D) -> Vector3D:
        """Cross product.

        Examples:
            >>> Vector3D(1, 0, 0).cross(Vector3D(0, 1, 0))
            Vector3D(x=0, y=0, z=1)
        """
        return Vector3D(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x,
        )

    def length(self) -> float:
        """Vector magnitude.

        Examples:
            >>> Vector3D(3, 4, 0).length()
            5.0
        """
        return math.sqrt(self.x**2 + self.y**2 + self.z**2)

    def normalize(self) -> Vector3D:
        """Return unit vector (the zero vector stays zero).

        Examples:
            >>> Vector3D(0, 0, 5).normalize()
            Vector3D(x=0.0, y=0.0, z=1.0)
        """
        mag = self.length()
        if mag == 0:
            return Vector3D(0, 0, 0)
        return Vector3D(self.x / mag, self.y / mag, self.z / mag)

    def as_tuple(self) -> tuple[float, float, float]:
        """Return as tuple."""
        return (self.x, self.y, self.z)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> Vector3D:
        """Create from tuple, list or array row.

        Examples:
            >>> Vector3D.from_tuple([0, 1, 2])
            Vector3D(x=0.0, y=1.0, z=2.0)
        """
        return cls(float(t[0]), float(t[1]), float(t[2]))


def triangle_normal(a: Vector3D, b: Vector3D, c: Vector3D) -> Vector3D:
    """Unit face normal from the cross product of two edge vectors.

    Examples:
        >>> triangle_normal(Vector3D(0, 0, 0), Vector3D(1, 0, 0), Vector3D(0, 1, 0))
        Vector3D(x=0.0, y=0.0, z=1.0)
    """
    return (b - a).cross(c - a).normalize()


@dataclass(frozen=True, slots=True)
class FootprintPoint:
    """A point of a footprint polygon in the horizontal ``(x, z)`` plane."""

    x: float
    z: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.x, self.z)

    @classmethod
    def from_tuple(cls, t: Sequence[float]) -> FootprintPoint:
        return cls(float(t[0]), float(t[1]))


def to_points(coords: Iterable[FootprintPoint | Sequence[float]]) -> list[FootprintPoint]:
    """Coerce ``(x, z)`` tuples or points into a list of :class:`FootprintPoint`."""
    return [c if isinstance(c, FootprintPoint) else FootprintPoint.from_tuple(c) for c in coords]


def signed_area(points: Sequence[FootprintPoint]) -> float:
    """Twice the signed shoelace area; positive for counter-clockwise rings.

    Examples:
        >>> square = to_points([(0, 0), (1, 0), (1, 1), (0, 1)])
        >>> signed_area(square)
        2.0
        >>> signed_area(list(reversed(square)))
        -2.0
    """
    total = 0.0
    n = len(points)
    for i, point in enumerate(points):
        nxt = points[(i + 1) % n]
        total += point.x * nxt.z - nxt.x * point.z
    return float(total)


def is_closed(points: Sequence[FootprintPoint]) -> bool:
    """Whether the first and last points coincide."""
    return len(points) > 1 and points[0] == points[-1]


def strip_closing_point(points: Sequence[FootprintPoint]) -> list[FootprintPoint]:
    """Drop the duplicate closing point of a closed ring, if any."""
    return list(points[:-1]) if is_closed(points) else list(points)


def close_ring(points: Sequence[FootprintPoint]) -> list[FootprintPoint]:
    """Append the first point when the ring is open."""
    if not points or is_closed(points):
        return list(points)
    return [*points, points[0]]


def ensure_counter_clockwise(points: Sequence[FootprintPoint]) -> list[FootprintPoint]:
    return list(reversed(points)) if signed_area(points) < 0 else list(points)


def validate_footprint(points: Sequence[FootprintPoint]) -> list[FootprintPoint]:
    """Return the open ring of *points* after checking it can bound a wall.

    Raises:
        InvalidFootprintError: If fewer than three distinct points remain or
            two consecutive points coincide (zero-length edges break plane
            resolution).
    """
    ring = strip_closing_point(points)
    if len(ring) < 3:
        raise InvalidFootprintError("at least three distinct points are required", ring)
    for i, point in enumerate(ring):
        nxt = ring[(i + 1) % len(ring)]
        if point == nxt:
            raise InvalidFootprintError(f"consecutive duplicate point at index {i}", ring)
    return ring


def bounds_2d(points: Iterable[FootprintPoint]) -> tuple[float, float, float, float]:
    """Return ``(min_x, min_z, max_x, max_z)``.

    Examples:
        >>> bounds_2d(to_points([(-1, 0), (2, 0), (2, 5)]))
        (-1.0, 0.0, 2.0, 5.0)
    """
    xs: list[float] = []
    zs: list[float] = []
    for p in points:
        xs.append(float(p.x))
        zs.append(float(p.z))
    if not xs:
        msg = "bounds of an empty point set are undefined"
        raise ValueError(msg)
    return (min(xs), min(zs), max(xs), max(zs))
