"""Facade profile resolution.

A facade profile describes the outer wall plane of one side elevation as a
short list of constant-X runs along Z.  Flat facades have a single segment;
stepped facades (a narrower rear wing, an extension) have several.

This module also answers the envelope-silhouette questions the carver and
the extension locator need: where does the closed outer footprint sit in X
at a given depth Z.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass

from .config import PLANE_TOLERANCE
from .geometry import FootprintPoint, close_ring

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ProfileSegment:
    """One run of constant outer-wall plane X over ``[z_start, z_end]``."""

    z_start: float
    z_end: float
    plane_x: float
    id: str = ""

    def __post_init__(self) -> None:
        if self.z_end < self.z_start:
            msg = f"segment z_end ({self.z_end}) must not be below z_start ({self.z_start})"
            raise ValueError(msg)

    @property
    def span(self) -> float:
        return self.z_end - self.z_start

    @property
    def z_mid(self) -> float:
        return (self.z_start + self.z_end) / 2

    def contains(self, z: float) -> bool:
        return self.z_start <= z <= self.z_end


@dataclass(frozen=True, slots=True)
class ProfileStep:
    """An X transition between two consecutive segments at depth ``z``."""

    z: float
    x_from: float
    x_to: float


@dataclass(frozen=True)
class FacadeProfile:
    """
    Ordered, non-overlapping outer-plane segments of one facade.

    Examples:
        >>> profile = FacadeProfile((
        ...     ProfileSegment(0.0, 4.0, 4.8),
        ...     ProfileSegment(4.0, 8.45, 4.1),
        ...     ProfileSegment(8.45, 12.0, 3.5),
        ... ))
        >>> profile.resolve_plane_x(2.0)
        4.8
        >>> profile.resolve_plane_x(4.0)
        4.8
        >>> profile.resolve_plane_x(30.0)
        3.5
    """

    segments: tuple[ProfileSegment, ...]

    def __post_init__(self) -> None:
        if not self.segments:
            msg = "a facade profile needs at least one segment"
            raise ValueError(msg)

    def segment_at(self, z: float) -> ProfileSegment:
        """First segment containing ``z``; the last segment when none does."""
        for segment in self.segments:
            if segment.contains(z):
                return segment
        return self.segments[-1]

    def resolve_plane_x(self, z: float) -> float:
        """Outer wall plane X at depth ``z``."""
        return self.segment_at(z).plane_x

    @property
    def z_range(self) -> tuple[float, float]:
        return (self.segments[0].z_start, self.segments[-1].z_end)

    @property
    def min_plane_x(self) -> float:
        return min(s.plane_x for s in self.segments)

    def steps(self) -> Iterator[ProfileStep]:
        """Yield the X transitions between consecutive segments."""
        for current, following in zip(self.segments, self.segments[1:]):
            if abs(current.plane_x - following.plane_x) > 1e-6:
                yield ProfileStep(z=current.z_end, x_from=current.plane_x, x_to=following.plane_x)

    def mirrored(self) -> FacadeProfile:
        """The same profile reflected through ``x = 0``."""
        return FacadeProfile(
            tuple(ProfileSegment(s.z_start, s.z_end, -s.plane_x, s.id) for s in self.segments)
        )

    @classmethod
    def flat(cls, plane_x: float, z_start: float = 0.0, z_end: float = 0.0, id: str = "") -> FacadeProfile:
        """A single-segment profile: every depth maps to ``plane_x``."""
        return cls((ProfileSegment(z_start, max(z_start, z_end), plane_x, id),))

    @classmethod
    def from_points(cls, points: Sequence[FootprintPoint], id_prefix: str = "") -> FacadeProfile | None:
        """Build a profile from the vertical runs of a stepped polyline.

        Consecutive points sharing X become one segment; the horizontal
        return edges between runs are skipped.  Returns ``None`` when the
        polyline has no vertical run.
        """
        segments: list[ProfileSegment] = []
        for a, b in zip(points, points[1:]):
            if abs(a.x - b.x) > 1e-6:
                continue
            z0, z1 = min(a.z, b.z), max(a.z, b.z)
            if z1 - z0 <= 1e-9:
                continue
            segments.append(ProfileSegment(z0, z1, a.x, f"{id_prefix}{len(segments)}" if id_prefix else ""))
        if not segments:
            return None
        return cls(tuple(segments))

    @classmethod
    def from_footprint(
        cls,
        polygon: Sequence[FootprintPoint],
        outward: int,
        id_prefix: str = "",
        tolerance: float = PLANE_TOLERANCE,
    ) -> FacadeProfile | None:
        """Read the outer wall runs of one flank off a closed footprint.

        Every edge running along Z at constant X that is the outermost wall
        on the ``outward`` side at its mid depth becomes a segment, ordered
        front to back.  Returns ``None`` when the flank has no such run, e.g.
        when it is sloped.

        Examples:
            >>> from facadekit.geometry import to_points
            >>> ring = to_points([(-4, 0), (4, 0), (4, 6), (3, 6), (3, 10), (-4, 10)])
            >>> [(s.z_start, s.z_end, s.plane_x) for s in FacadeProfile.from_footprint(ring, 1).segments]
            [(0.0, 6.0, 4.0), (6.0, 10.0, 3.0)]
        """
        ring = close_ring(polygon)
        runs: list[tuple[float, float, float]] = []
        for a, b in zip(ring, ring[1:]):
            if abs(a.x - b.x) > tolerance or abs(a.z - b.z) <= tolerance:
                continue
            z0, z1 = min(a.z, b.z), max(a.z, b.z)
            wall_x = outer_wall_x_at_z(ring, outward, (z0 + z1) / 2)
            if wall_x is None or abs(wall_x - a.x) > tolerance:
                continue
            runs.append((z0, z1, a.x))
        if not runs:
            return None
        runs.sort()
        return cls(
            tuple(
                ProfileSegment(z0, z1, x, f"{id_prefix}{i}" if id_prefix else "")
                for i, (z0, z1, x) in enumerate(runs)
            )
        )


# ---------------------------------------------------------------------------
# Envelope silhouette lookups
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class XExtremes:
    """The envelope's X extent at one depth."""

    min_x: float
    max_x: float
    xs: tuple[float, ...]


@dataclass(frozen=True, slots=True)
class WallPlanes:
    """Outer and inner X planes of a side wall at one depth."""

    outer_x: float
    inner_x: float


def x_extremes_at_z(
    polygon: Sequence[FootprintPoint],
    z: float,
    tolerance: float = PLANE_TOLERANCE,
) -> XExtremes | None:
    """Scan the closed ``polygon`` and return its X extent at depth ``z``.

    Edges crossing ``z`` contribute their interpolated X.  Edges running
    along ``z`` (within ``tolerance``) contribute both endpoints.  Returns
    ``None`` when no edge reaches ``z``.
    """
    ring = close_ring(polygon)
    xs: list[float] = []
    for a, b in zip(ring, ring[1:]):
        z_min = min(a.z, b.z)
        z_max = max(a.z, b.z)
        if z < z_min - tolerance or z > z_max + tolerance:
            continue
        if abs(a.z - b.z) < tolerance:
            if abs(z - a.z) < tolerance:
                xs.extend((a.x, b.x))
            continue
        t = (z - a.z) / (b.z - a.z)
        xs.append(a.x + t * (b.x - a.x))

    if not xs:
        return None
    return XExtremes(min_x=min(xs), max_x=max(xs), xs=tuple(xs))


def outer_wall_x_at_z(polygon: Sequence[FootprintPoint], outward: int, z: float) -> float | None:
    """Outer wall X at depth ``z`` on the side facing ``outward``.

    Horizontal edges are ignored.  Returns ``None`` (and logs a warning) when
    nothing crosses ``z``, e.g. for a depth outside the footprint.
    """
    ring = close_ring(polygon)
    xs: list[float] = []
    for a, b in zip(ring, ring[1:]):
        if z < min(a.z, b.z) or z > max(a.z, b.z):
            continue
        if abs(a.z - b.z) < 1e-6:
            continue
        t = (z - a.z) / (b.z - a.z)
        xs.append(a.x + t * (b.x - a.x))

    if not xs:
        logger.warning("No wall intersection at z=%.4f (outward=%+d)", z, outward)
        return None
    return max(xs) if outward == 1 else min(xs)


def wall_planes_at_z(
    polygon: Sequence[FootprintPoint],
    outward: int,
    z: float,
    thickness: float,
) -> WallPlanes | None:
    """Outer and inner planes of the wall facing ``outward`` at depth ``z``."""
    outer = outer_wall_x_at_z(polygon, outward, z)
    if outer is None:
        return None
    return WallPlanes(outer_x=outer, inner_x=outer - outward * thickness)
