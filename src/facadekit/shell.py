"""Extruded wall shell.

The wall shell of one story is the region between the outer footprint and
the inner wall line, extruded to the story height.  The footprint is built
in ``(x, -z)`` shape space and extruded along local +Z; rotating by -90
degrees about X then maps ``(x, -z, h)`` to world ``(x, h, z)``, so the
extrusion axis becomes world +Y.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import numpy as np
import trimesh
from shapely.geometry import Polygon
from trimesh import transformations

from .exceptions import ShellBuildError
from .geometry import FootprintPoint, strip_closing_point
from .meshes import MeshBuffers, Placement

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ShellResult:
    """Shell triangles in local coordinates plus their world placement."""

    buffers: MeshBuffers
    placement: Placement

    @property
    def base_y(self) -> float:
        return self.placement.position[1]

    def world_buffers(self) -> MeshBuffers:
        return self.placement.apply(self.buffers)


def _shape_coords(points: Sequence[FootprintPoint]) -> list[tuple[float, float]]:
    return [(p.x, -p.z) for p in strip_closing_point(points)]


def shell_outline(outer_points: Sequence[FootprintPoint], inner_points: Sequence[FootprintPoint]) -> Polygon:
    """The shell cross-section in shape space: outer ring minus the inner hole."""
    return Polygon(_shape_coords(outer_points), [_shape_coords(inner_points)])


def build_extruded_shell(
    outer_points: Sequence[FootprintPoint],
    inner_points: Sequence[FootprintPoint],
    height: float,
    base_y: float = 0.0,
) -> ShellResult:
    """Extrude the footprint ring into a closed wall shell.

    Args:
        outer_points: Outer footprint, open or closed.
        inner_points: Inner wall line, open or closed.
        height: Story height.
        base_y: Elevation of the shell's bottom, carried by the placement.

    Raises:
        ShellBuildError: If the ring region is empty or self-intersecting,
            or *height* is not positive.
    """
    if height <= 0:
        msg = f"shell height must be positive, got {height}"
        raise ShellBuildError(msg)

    outline = shell_outline(outer_points, inner_points)
    if outline.is_empty or not outline.is_valid or outline.area <= 0:
        raise ShellBuildError("shell footprint ring is empty or invalid", area=float(outline.area))

    mesh = trimesh.creation.extrude_polygon(outline, height, engine="earcut")
    mesh.apply_transform(transformations.rotation_matrix(-np.pi / 2, (1.0, 0.0, 0.0)))

    buffers = MeshBuffers.from_triangles(mesh.triangles)
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug(
            "Extruded shell: %d triangles, ring area %.3f, height %.3f, base %.3f",
            buffers.triangle_count,
            outline.area,
            height,
            base_y,
        )
    return ShellResult(buffers=buffers, placement=Placement((0.0, base_y, 0.0), (0.0, 0.0, 0.0)))
