"""Building envelope: the outer footprint and the polygons derived from it.

The envelope owns the outer footprint of the ground floor.  From it the
pipeline derives the inner wall line (a mitre offset by the wall thickness),
the first-floor footprint (clipped at a maximum depth, with the clip edge
widened to the rear wall's extent) and the flat roof rectangle over the rear
of the house.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from functools import cached_property

from shapely.geometry import Polygon, box
from shapely.geometry.polygon import orient

from .exceptions import InvalidFootprintError
from .geometry import (
    FootprintPoint,
    bounds_2d,
    close_ring,
    ensure_counter_clockwise,
    strip_closing_point,
    to_points,
    validate_footprint,
)
from .profile import XExtremes, outer_wall_x_at_z, x_extremes_at_z

logger = logging.getLogger(__name__)

_EDGE_EPSILON = 1e-6


def polygon_from_points(points: Sequence[FootprintPoint]) -> Polygon:
    """Shapely polygon of an ``(x, z)`` footprint."""
    return Polygon([p.as_tuple() for p in strip_closing_point(points)])


def points_from_polygon(polygon: Polygon) -> list[FootprintPoint]:
    """Open counter-clockwise ring of a shapely polygon's exterior."""
    oriented = orient(polygon, sign=1.0)
    return strip_closing_point(to_points(oriented.exterior.coords))


def _dedupe_consecutive(points: Sequence[FootprintPoint]) -> list[FootprintPoint]:
    result: list[FootprintPoint] = []
    for p in points:
        if not result or result[-1] != p:
            result.append(p)
    if len(result) > 1 and result[0] == result[-1]:
        result.pop()
    return result


@dataclass(frozen=True)
class Envelope:
    """
    Outer footprint of a building, stored as an open counter-clockwise ring.

    Use :meth:`from_points` to build one from raw coordinates; it validates
    the ring, drops a closing duplicate and fixes the winding.

    Examples:
        >>> env = Envelope.from_points([(-1, 0), (1, 0), (1, 2), (-1, 2), (-1, 0)])
        >>> len(env.points), env.front_z, env.rear_z
        (4, 0.0, 2.0)
        >>> env.left_x, env.right_x
        (-1.0, 1.0)
    """

    points: tuple[FootprintPoint, ...]

    @classmethod
    def from_points(cls, points: Iterable[FootprintPoint | Sequence[float]]) -> Envelope:
        """Validate and normalize *points* into an envelope.

        Raises:
            InvalidFootprintError: If the ring is degenerate.
        """
        ring = validate_footprint(to_points(points))
        return cls(tuple(ensure_counter_clockwise(ring)))

    # ------------------------------------------------------------------
    # Extents
    # ------------------------------------------------------------------

    @cached_property
    def bounds(self) -> tuple[float, float, float, float]:
        """``(min_x, min_z, max_x, max_z)``."""
        return bounds_2d(self.points)

    @property
    def front_z(self) -> float:
        return self.bounds[1]

    @property
    def rear_z(self) -> float:
        return self.bounds[3]

    @property
    def left_x(self) -> float:
        return self.bounds[0]

    @property
    def right_x(self) -> float:
        return self.bounds[2]

    @property
    def closed_ring(self) -> list[FootprintPoint]:
        return close_ring(self.points)

    def _edge_bounds(self, z: float) -> tuple[float, float]:
        xs = [p.x for p in self.points if abs(p.z - z) < _EDGE_EPSILON]
        return (min(xs), max(xs))

    @property
    def rear_edge_bounds(self) -> tuple[float, float]:
        """``(min_x, max_x)`` of the points on the rear wall line."""
        return self._edge_bounds(self.rear_z)

    @property
    def front_edge_bounds(self) -> tuple[float, float]:
        """``(min_x, max_x)`` of the points on the front wall line."""
        return self._edge_bounds(self.front_z)

    def to_shapely(self) -> Polygon:
        return polygon_from_points(self.points)

    # ------------------------------------------------------------------
    # Silhouette
    # ------------------------------------------------------------------

    def x_extremes_at_z(self, z: float) -> XExtremes | None:
        return x_extremes_at_z(self.points, z)

    def outer_wall_x_at_z(self, outward: int, z: float) -> float | None:
        return outer_wall_x_at_z(self.points, outward, z)

    # ------------------------------------------------------------------
    # Derived polygons
    # ------------------------------------------------------------------

    def inner_polygon(self, thickness: float) -> list[FootprintPoint]:
        """The footprint offset inward by *thickness* with mitred corners.

        Raises:
            InvalidFootprintError: If the offset collapses the footprint or
                splits it into several pieces.
        """
        if thickness <= 0:
            msg = f"thickness must be positive, got {thickness}"
            raise ValueError(msg)
        inset = self.to_shapely().buffer(-thickness, join_style="mitre")
        if inset.is_empty or inset.geom_type != "Polygon":
            raise InvalidFootprintError(
                f"inward offset by {thickness} leaves {inset.geom_type if not inset.is_empty else 'nothing'}",
                self.points,
            )
        inner = points_from_polygon(inset)
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Inner polygon at t=%.3f has %d points", thickness, len(inner))
        return inner

    def first_floor_outer(self, max_depth: float = 12.0) -> Envelope:
        """Footprint of the upper story, clipped at *max_depth*.

        Points on the clip line are pushed out to the rear wall's X extent
        (left half to the rear minimum, right half to the rear maximum), so
        the upper story keeps the rear width even where the ground floor
        tapers.
        """
        min_x, min_z, max_x, _ = self.bounds
        clipped = self.to_shapely().intersection(box(min_x - 1.0, min_z - 1.0, max_x + 1.0, max_depth))
        if clipped.is_empty or clipped.geom_type != "Polygon":
            raise InvalidFootprintError(f"clipping at z={max_depth} does not leave a single polygon", self.points)

        rear_min_x, rear_max_x = self.rear_edge_bounds
        mid_x = (rear_min_x + rear_max_x) / 2
        widened = [
            FootprintPoint(rear_min_x if p.x <= mid_x else rear_max_x, p.z) if abs(p.z - max_depth) < _EDGE_EPSILON else p
            for p in points_from_polygon(clipped)
        ]
        return Envelope.from_points(_dedupe_consecutive(widened))

    def flat_roof_polygon(self, depth: float = 3.0) -> list[FootprintPoint]:
        """Rectangle spanning the rear wall, *depth* meters deep (CCW)."""
        rear_min_x, rear_max_x = self.rear_edge_bounds
        start_z = self.rear_z - depth
        return [
            FootprintPoint(rear_min_x, start_z),
            FootprintPoint(rear_max_x, start_z),
            FootprintPoint(rear_max_x, self.rear_z),
            FootprintPoint(rear_min_x, self.rear_z),
        ]
