"""Wall triangle classifier and shell carver.

The extruded shell is a closed prism.  Large parts of its surface are
replaced by separately built geometry: the front and rear facades carry
their own panels with detailing, and the side facades get flat panels
punched by the window openings.  The carver walks the shell's triangle
soup, classifies every triangle by the wall face it lies on, and drops
every triangle that is covered by replacement geometry.

A triangle lies on a plane when all three vertices are within the plane
tolerance of it; "facing" an axis means the absolute normal component along
that axis exceeds the facing threshold.

Classification rules, first match wins:

1. Z-facing triangles on the rear or front outer or inner plane.
2. In the ``FACADE`` role, or for a facade whose openings reach the story,
   X-facing triangles on a side profile segment's outer or inner plane
   whose Z span overlaps the segment.
3. X-facing triangles on the panel facade's outer or inner plane,
   resolved from the envelope silhouette at the triangle's mean Z.
4. X-facing triangles on an opening's outer or inner plane and inside the
   opening's extent.

Everything else is kept.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from enum import Enum

import numpy as np

from .config import FACING_THRESHOLD, PLANE_TOLERANCE
from .envelope import Envelope
from .extension import ExtensionWall
from .facade import FacadeContext, FacadeConvention, FacadeSide, create_facade_context
from .geometry import FootprintPoint, Vector3D, triangle_normal
from .meshes import MeshBuffers, Placement
from .profile import FacadeProfile, wall_planes_at_z
from .shell import ShellResult
from .windows import FacadePlan, OpeningCut

logger = logging.getLogger(__name__)

#: Exempts triangles in the extension band from removal when enabled.  The
#: band test runs and is counted, but the exemption has never been switched
#: on; enabling it changes which shell faces survive.
EXTENSION_WALL_EXEMPTION = False


class WallFace(Enum):
    """The wall face a shell triangle belongs to."""

    REAR_OUTER = "rear_outer"
    REAR_INNER = "rear_inner"
    FRONT_OUTER = "front_outer"
    FRONT_INNER = "front_inner"
    LEFT_FACADE_SEGMENT = "left_facade_segment"
    RIGHT_FACADE_SEGMENT = "right_facade_segment"
    UNCLASSIFIED_KEPT = "unclassified_kept"

    @property
    def removed(self) -> bool:
        return self is not WallFace.UNCLASSIFIED_KEPT


class ShellRole(Enum):
    """``SHELL`` carves only shared planes; ``FACADE`` also drops side segments."""

    SHELL = "shell"
    FACADE = "facade"


_SIDE_FACE = {
    FacadeSide.ARCHITECTURAL_LEFT: WallFace.LEFT_FACADE_SEGMENT,
    FacadeSide.ARCHITECTURAL_RIGHT: WallFace.RIGHT_FACADE_SEGMENT,
}


@dataclass(frozen=True)
class CarveContext:
    """Everything the classifier needs to know about one story's shell.

    Attributes:
        envelope_points: Outer footprint the shell was extruded from.
        front_z: Minimum Z of the footprint.
        rear_z: Maximum Z of the footprint.
        wall_thickness: Exterior wall thickness.
        profiles: Outer plane profile per side facade.
        opening_cuts: Opening cuts per side facade.
        role: Whether side profile segments are carved as well.
        extension: Located extension side wall, if any.
        panel_facade: The facade whose panel always replaces the shell surface.
        opening_facades: Facades whose openings reach this story; their
            profile segments are replaced by punched panels in either role.
        base_y: World elevation of the shell's local origin.
        convention: Mapping used for facade contexts.
    """

    envelope_points: tuple[FootprintPoint, ...]
    front_z: float
    rear_z: float
    wall_thickness: float
    profiles: Mapping[FacadeSide, FacadeProfile] = field(default_factory=dict)
    opening_cuts: Mapping[FacadeSide, tuple[OpeningCut, ...]] = field(default_factory=dict)
    role: ShellRole = ShellRole.SHELL
    extension: ExtensionWall | None = None
    panel_facade: FacadeSide = FacadeSide.ARCHITECTURAL_LEFT
    opening_facades: frozenset[FacadeSide] = frozenset()
    base_y: float = 0.0
    convention: FacadeConvention = FacadeConvention.ARCHITECTURAL
    tolerance: float = PLANE_TOLERANCE
    facing_threshold: float = FACING_THRESHOLD

    @classmethod
    def from_envelope(
        cls,
        envelope: Envelope,
        wall_thickness: float,
        plans: Iterable[FacadePlan] = (),
        **kwargs: object,
    ) -> CarveContext:
        """Build a context from an envelope and the facade plans of the story."""
        plan_list = list(plans)
        return cls(
            envelope_points=envelope.points,
            front_z=envelope.front_z,
            rear_z=envelope.rear_z,
            wall_thickness=wall_thickness,
            profiles={p.facade: p.profile for p in plan_list},
            opening_cuts={p.facade: p.opening_cuts for p in plan_list},
            **kwargs,  # type: ignore[arg-type]
        )

    @property
    def inner_rear_z(self) -> float:
        return self.rear_z - self.wall_thickness

    @property
    def inner_front_z(self) -> float:
        return self.front_z + self.wall_thickness

    def context_for(self, side: FacadeSide) -> FacadeContext:
        return create_facade_context(side, self.convention)


# ---------------------------------------------------------------------------
# Classification
# ---------------------------------------------------------------------------


def _on_x(a: Vector3D, b: Vector3D, c: Vector3D, x: float, tol: float) -> bool:
    return abs(a.x - x) < tol and abs(b.x - x) < tol and abs(c.x - x) < tol


def _on_z(a: Vector3D, b: Vector3D, c: Vector3D, z: float, tol: float) -> bool:
    return abs(a.z - z) < tol and abs(b.z - z) < tol and abs(c.z - z) < tol


def _on_profile_segment(
    a: Vector3D, b: Vector3D, c: Vector3D, profile: FacadeProfile, outward: int, context: CarveContext
) -> bool:
    tol = context.tolerance
    z_min = min(a.z, b.z, c.z)
    z_max = max(a.z, b.z, c.z)
    for seg in profile.segments:
        inner = seg.plane_x - outward * context.wall_thickness
        if not (_on_x(a, b, c, seg.plane_x, tol) or _on_x(a, b, c, inner, tol)):
            continue
        if z_max >= seg.z_start - tol and z_min < seg.z_end - tol:
            return True
    return False


def _in_opening(
    a: Vector3D, b: Vector3D, c: Vector3D, cuts: Iterable[OpeningCut], outward: int, context: CarveContext
) -> bool:
    tol = context.tolerance
    z_min, z_max = min(a.z, b.z, c.z), max(a.z, b.z, c.z)
    y_min = min(a.y, b.y, c.y) + context.base_y
    y_max = max(a.y, b.y, c.y) + context.base_y
    for cut in cuts:
        if cut.height <= 0:
            continue
        inner = cut.outer_plane_x - outward * context.wall_thickness
        if not (_on_x(a, b, c, cut.outer_plane_x, tol) or _on_x(a, b, c, inner, tol)):
            continue
        if (
            z_min >= cut.z_min - tol
            and z_max <= cut.z_max + tol
            and y_min >= cut.bottom - tol
            and y_max <= cut.top + tol
        ):
            return True
    return False


def classify_triangle(a: Vector3D, b: Vector3D, c: Vector3D, context: CarveContext) -> WallFace:
    """Classify one shell triangle given in the shell's local coordinates.

    Examples:
        >>> ctx = CarveContext(envelope_points=(), front_z=0.0, rear_z=10.0, wall_thickness=0.35)
        >>> classify_triangle(Vector3D(0, 0, 10), Vector3D(1, 0, 10), Vector3D(0, 1, 10), ctx)
        <WallFace.REAR_OUTER: 'rear_outer'>
        >>> classify_triangle(Vector3D(0, 0, 5), Vector3D(1, 0, 5), Vector3D(0, 1, 5), ctx)
        <WallFace.UNCLASSIFIED_KEPT: 'unclassified_kept'>
    """
    tol = context.tolerance
    n = triangle_normal(a, b, c)
    faces_x = abs(n.x) > context.facing_threshold
    faces_z = abs(n.z) > context.facing_threshold

    if faces_z:
        if _on_z(a, b, c, context.rear_z, tol):
            return WallFace.REAR_OUTER
        if _on_z(a, b, c, context.inner_rear_z, tol):
            return WallFace.REAR_INNER
        if _on_z(a, b, c, context.front_z, tol):
            return WallFace.FRONT_OUTER
        if _on_z(a, b, c, context.inner_front_z, tol):
            return WallFace.FRONT_INNER

    if not faces_x:
        return WallFace.UNCLASSIFIED_KEPT

    for side, profile in context.profiles.items():
        if context.role is ShellRole.FACADE or side in context.opening_facades:
            if _on_profile_segment(a, b, c, profile, context.context_for(side).outward, context):
                return _SIDE_FACE[side]

    if context.envelope_points:
        outward = context.context_for(context.panel_facade).outward
        z_mean = (a.z + b.z + c.z) / 3
        planes = wall_planes_at_z(context.envelope_points, outward, z_mean, context.wall_thickness)
        if planes is not None and (
            _on_x(a, b, c, planes.outer_x, tol) or _on_x(a, b, c, planes.inner_x, tol)
        ):
            return _SIDE_FACE[context.panel_facade]

    for side, cuts in context.opening_cuts.items():
        if _in_opening(a, b, c, cuts, context.context_for(side).outward, context):
            return _SIDE_FACE[side]

    return WallFace.UNCLASSIFIED_KEPT


def in_extension_band(a: Vector3D, b: Vector3D, c: Vector3D, context: CarveContext) -> bool:
    """Whether a triangle overlaps the extension wall's Z range and X band.

    The band spans the extension's outer plane and the inner plane one wall
    thickness into the building from the architectural right side.
    """
    ext = context.extension
    if ext is None:
        return False
    tol = context.tolerance
    z_min, z_max = min(a.z, b.z, c.z), max(a.z, b.z, c.z)
    if not (z_max >= ext.z0 - tol and z_min <= ext.z1 + tol):
        return False
    outward = context.context_for(FacadeSide.ARCHITECTURAL_RIGHT).outward
    inner = ext.x - outward * context.wall_thickness
    band_min = min(ext.x, inner) - tol
    band_max = max(ext.x, inner) + tol
    return max(a.x, b.x, c.x) >= band_min and min(a.x, b.x, c.x) <= band_max


# ---------------------------------------------------------------------------
# Carving
# ---------------------------------------------------------------------------


@dataclass
class CarveStats:
    """Per-class triangle counts of one carve pass."""

    counts: dict[WallFace, int] = field(default_factory=lambda: dict.fromkeys(WallFace, 0))
    extension_band_hits: int = 0

    @property
    def input_triangles(self) -> int:
        return sum(self.counts.values())

    @property
    def kept(self) -> int:
        return self.counts[WallFace.UNCLASSIFIED_KEPT]

    @property
    def removed(self) -> int:
        return self.input_triangles - self.kept

    def summary(self) -> str:
        parts = [f"{face.value}={count}" for face, count in self.counts.items() if count]
        return f"kept {self.kept}/{self.input_triangles} ({', '.join(parts)}; extension band {self.extension_band_hits})"


@dataclass(frozen=True)
class CarvedShell:
    """The shell triangles that survived carving."""

    buffers: MeshBuffers
    placement: Placement
    stats: CarveStats

    def world_buffers(self) -> MeshBuffers:
        return self.placement.apply(self.buffers)


def carve_shell(shell: ShellResult, context: CarveContext) -> CarvedShell:
    """Drop every shell triangle covered by replacement geometry.

    Kept triangles keep their positions and UVs; normals are recomputed on
    the resulting unindexed soup.
    """
    triangles = shell.buffers.triangles()
    uvs = shell.buffers.triangle_uvs()
    stats = CarveStats()
    keep = np.zeros(len(triangles), dtype=bool)

    for i, tri in enumerate(triangles):
        a, b, c = (Vector3D.from_tuple(v) for v in tri)
        face = classify_triangle(a, b, c, context)
        if in_extension_band(a, b, c, context):
            stats.extension_band_hits += 1
            if EXTENSION_WALL_EXEMPTION:
                face = WallFace.UNCLASSIFIED_KEPT
        stats.counts[face] += 1
        keep[i] = not face.removed

    kept_uvs = uvs[keep] if uvs is not None else np.zeros(0)
    buffers = MeshBuffers.from_triangles(triangles[keep], kept_uvs)
    logger.debug("Carved shell (%s): %s", context.role.value, stats.summary())
    return CarvedShell(buffers=buffers, placement=shell.placement, stats=stats)
