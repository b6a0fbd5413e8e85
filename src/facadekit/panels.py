"""Facade panels.

Each run of a side profile gets one flat panel per story, lying just
outside the outer wall plane and punched by the openings whose center
resolves to that run.  Steps between runs get thin return panels so the
facade reads as closed at every X transition.  The front and rear walls get
one panel per story spanning the footprint's edge at that end.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass

import numpy as np
import trimesh
from shapely.geometry import MultiPolygon, Polygon, box
from shapely.ops import unary_union

from .envelope import Envelope
from .meshes import BoxGeometry, MeshBuffers, Material, Placement, face_normals
from .profile import FacadeProfile, ProfileSegment
from .windows import EndFacade, EndOpening, FacadePlan, OpeningCut

logger = logging.getLogger(__name__)

#: Outward offset of facade panels from the outer wall plane.
PANEL_OUTSET = 0.02

#: Openings smaller than this in either direction are not punched.
MIN_HOLE_SIZE = 0.05

#: Thickness of return panels at profile steps.
PANEL_THICKNESS = 0.025


@dataclass(frozen=True)
class FacadePanel:
    """A panel mesh in local coordinates plus its world placement."""

    id: str
    buffers: MeshBuffers
    placement: Placement
    material: Material = Material.BRICK

    def world_buffers(self) -> MeshBuffers:
        return self.placement.apply(self.buffers)


def _punch(
    region: Polygon,
    rects: Iterable[tuple[float, float, float, float]],
    y0: float,
    y1: float,
    min_hole: float,
) -> tuple[Polygon | MultiPolygon, int]:
    """Subtract ``(u_min, u_max, bottom, top)`` openings clipped to ``[y0, y1]``."""
    holes = []
    for u_min, u_max, bottom, top in rects:
        bottom, top = max(bottom, y0), min(top, y1)
        if u_max - u_min < min_hole or top - bottom < min_hole:
            continue
        holes.append(box(u_min, bottom, u_max, top))
    if not holes:
        return region, 0
    return region.difference(unary_union(holes)), len(holes)


def _triangulate(region: Polygon | MultiPolygon) -> np.ndarray:
    """Triangles of a (u, y) region as an ``(n, 3, 2)`` array."""
    parts = list(region.geoms) if hasattr(region, "geoms") else [region]
    tris: list[np.ndarray] = []
    for part in parts:
        if not isinstance(part, Polygon) or part.is_empty or part.area <= 0:
            continue
        vertices, faces = trimesh.creation.triangulate_polygon(part, engine="earcut")
        tris.append(np.asarray(vertices, dtype=np.float64)[np.asarray(faces)])
    if not tris:
        return np.zeros((0, 3, 2))
    return np.concatenate(tris)


def _panel_buffers(region: Polygon | MultiPolygon, plane: float, outward: int, axis: int = 0) -> MeshBuffers:
    """Lift a ``(u, y)`` region onto the plane ``axis == plane``, facing ``outward``.

    On an X plane ``u`` runs along Z; on a Z plane it runs along X.
    """
    flat = _triangulate(region)
    if not len(flat):
        return MeshBuffers.empty()
    u_axis = 2 if axis == 0 else 0
    tris = np.empty((len(flat), 3, 3), dtype=np.float64)
    tris[:, :, axis] = plane
    tris[:, :, 1] = flat[:, :, 1]
    tris[:, :, u_axis] = flat[:, :, 0]
    wrong = face_normals(tris)[:, axis] * outward < 0
    tris[wrong] = tris[wrong][:, ::-1, :]
    return MeshBuffers.from_triangles(tris)


def _localized(world: MeshBuffers, origin: tuple[float, float, float]) -> MeshBuffers:
    return world.transformed(np.linalg.inv(Placement(origin).matrix()))


def segment_openings(profile: FacadeProfile, segment: ProfileSegment, cuts: tuple[OpeningCut, ...]) -> list[OpeningCut]:
    """The cuts whose Z center resolves to *segment*."""
    return [c for c in cuts if profile.segment_at(c.z_center) is segment]


def build_facade_panels(
    plan: FacadePlan,
    base_y: float,
    wall_height: float,
    *,
    z_extent: tuple[float, float] | None = None,
    outset: float = PANEL_OUTSET,
    min_hole: float = MIN_HOLE_SIZE,
    id_prefix: str | None = None,
) -> list[FacadePanel]:
    """One outward-facing panel per profile segment for the story
    ``[base_y, base_y + wall_height]``.

    Openings are clipped to the story, so a window running through both
    stories punches both stories' panels.  With *z_extent* the runs are
    fitted to the story's depth: clipped to it, with the last run stretched
    to its far end.
    """
    prefix = id_prefix or f"{plan.facade.name}_PANEL"
    outward = plan.ctx.outward
    segments = plan.profile.segments
    z_lo, z_hi = z_extent or plan.profile.z_range
    y0, y1 = base_y, base_y + wall_height
    panels: list[FacadePanel] = []

    for index, segment in enumerate(segments):
        z_start = max(segment.z_start, z_lo)
        z_end = z_hi if index == len(segments) - 1 else min(segment.z_end, z_hi)
        if z_end <= z_start:
            continue
        cuts = segment_openings(plan.profile, segment, plan.opening_cuts)
        region, holes = _punch(
            box(z_start, y0, z_end, y1), ((c.z_min, c.z_max, c.bottom, c.top) for c in cuts), y0, y1, min_hole
        )

        x = segment.plane_x + outward * outset
        origin = (x, (y0 + y1) / 2, (z_start + z_end) / 2)
        local = _localized(_panel_buffers(region, x, outward), origin)
        panel_id = f"{prefix}_{segment.id or index}"
        panels.append(FacadePanel(id=panel_id, buffers=local, placement=Placement(origin)))
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Panel %s: %d holes, %d triangles", panel_id, holes, local.triangle_count)
    return panels


def build_end_panel(
    envelope: Envelope,
    facade: EndFacade,
    openings: Sequence[EndOpening],
    base_y: float,
    wall_height: float,
    *,
    outset: float = PANEL_OUTSET,
    min_hole: float = MIN_HOLE_SIZE,
    id_prefix: str | None = None,
) -> FacadePanel:
    """The panel replacing the front or rear wall of one story.

    It spans the footprint's edge at that end, sits *outset* outside the
    outer wall plane and is punched by every opening overlapping the story
    ``[base_y, base_y + wall_height]``.
    """
    if facade is EndFacade.FRONT:
        (x_min, x_max), z_face = envelope.front_edge_bounds, envelope.front_z
    else:
        (x_min, x_max), z_face = envelope.rear_edge_bounds, envelope.rear_z
    y0, y1 = base_y, base_y + wall_height
    region, holes = _punch(
        box(x_min, y0, x_max, y1), ((o.x_min, o.x_max, o.bottom, o.top) for o in openings), y0, y1, min_hole
    )

    z = z_face + facade.outward * outset
    origin = ((x_min + x_max) / 2, (y0 + y1) / 2, z)
    local = _localized(_panel_buffers(region, z, facade.outward, axis=2), origin)
    panel_id = id_prefix or f"{facade.name}_PANEL"
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Panel %s: %d holes, %d triangles", panel_id, holes, local.triangle_count)
    return FacadePanel(id=panel_id, buffers=local, placement=Placement(origin))


def build_return_panels(
    profile: FacadeProfile,
    y0: float,
    y1: float,
    *,
    thickness: float = PANEL_THICKNESS,
    z_offset: float = 0.002,
    id_prefix: str = "RETURN",
) -> list[FacadePanel]:
    """One thin box per X step of *profile*, spanning ``[y0, y1]``."""
    panels: list[FacadePanel] = []
    if y1 <= y0:
        return panels
    for index, step in enumerate(profile.steps()):
        x_min, x_max = sorted((step.x_from, step.x_to))
        geometry = BoxGeometry(x_max - x_min, y1 - y0, thickness)
        panels.append(
            FacadePanel(
                id=f"{id_prefix}_{index}",
                buffers=geometry.to_buffers(),
                placement=Placement(((x_min + x_max) / 2, (y0 + y1) / 2, step.z - z_offset)),
            )
        )
    return panels
