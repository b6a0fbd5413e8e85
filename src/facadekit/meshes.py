"""Mesh buffers, placements and geometry descriptors.

Every builder in facadekit emits flat, unindexed triangle soup:

* ``positions`` holds three floats per vertex, three vertices per triangle;
* ``uvs`` holds two floats per vertex;
* ``normals`` holds three floats per vertex (face normals, repeated).

Geometry descriptors (:class:`BoxGeometry`, :class:`FrameGeometry`) describe
a shape in its local frame and realise it with :meth:`to_buffers`.  A
:class:`Placement` positions local geometry in the world.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum

import numpy as np
import trimesh
from numpy.typing import NDArray
from shapely.geometry import Polygon
from trimesh import transformations

FloatArray = NDArray[np.float64]

# ---------------------------------------------------------------------------
# Normals and UVs
# ---------------------------------------------------------------------------


def face_normals(triangles: FloatArray) -> FloatArray:
    """Unit normals of an ``(n, 3, 3)`` triangle array.

    Degenerate triangles get a zero normal.

    Examples:
        >>> face_normals(np.array([[[0, 0, 0], [1, 0, 0], [0, 1, 0]]], dtype=float))
        array([[0., 0., 1.]])
    """
    tris = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    cross = np.cross(tris[:, 1] - tris[:, 0], tris[:, 2] - tris[:, 0])
    lengths = np.linalg.norm(cross, axis=1)
    out = np.zeros_like(cross)
    nonzero = lengths > 0
    out[nonzero] = cross[nonzero] / lengths[nonzero, None]
    return out


def planar_uvs(triangles: FloatArray) -> FloatArray:
    """World-planar UVs, ``(n, 3, 2)``.

    Horizontal faces map ``(x, z)``, faces turned towards X map ``(z, y)``
    and every other face maps ``(x, y)``.  Texture density is therefore one
    repeat per meter regardless of where a triangle ends up.
    """
    tris = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
    normals = np.abs(face_normals(tris))
    uvs = np.empty((len(tris), 3, 2), dtype=np.float64)
    dominant = np.argmax(normals, axis=1)
    for i, axis in enumerate(dominant):
        tri = tris[i]
        if axis == 1:
            uvs[i] = tri[:, [0, 2]]
        elif axis == 0:
            uvs[i] = tri[:, [2, 1]]
        else:
            uvs[i] = tri[:, [0, 1]]
    return uvs


# ---------------------------------------------------------------------------
# Buffers
# ---------------------------------------------------------------------------


@dataclass(frozen=True, eq=False)
class MeshBuffers:
    """Flat position/UV/normal arrays of an unindexed triangle soup."""

    positions: FloatArray
    uvs: FloatArray
    normals: FloatArray

    def __post_init__(self) -> None:
        if self.positions.size % 9:
            msg = f"positions must hold whole triangles, got {self.positions.size} floats"
            raise ValueError(msg)
        vertices = self.positions.size // 3
        if self.uvs.size not in (0, vertices * 2):
            msg = f"expected {vertices * 2} uv floats, got {self.uvs.size}"
            raise ValueError(msg)
        if self.normals.size != self.positions.size:
            msg = f"expected {self.positions.size} normal floats, got {self.normals.size}"
            raise ValueError(msg)

    @property
    def vertex_count(self) -> int:
        return self.positions.size // 3

    @property
    def triangle_count(self) -> int:
        return self.positions.size // 9

    @property
    def has_uvs(self) -> bool:
        return self.uvs.size > 0

    def triangles(self) -> FloatArray:
        """``(n, 3, 3)`` view of the positions."""
        return self.positions.reshape(-1, 3, 3)

    def triangle_uvs(self) -> FloatArray | None:
        return self.uvs.reshape(-1, 3, 2) if self.has_uvs else None

    @classmethod
    def empty(cls) -> MeshBuffers:
        return cls(np.zeros(0), np.zeros(0), np.zeros(0))

    @classmethod
    def from_triangles(cls, triangles: FloatArray, uvs: FloatArray | None = None) -> MeshBuffers:
        """Build buffers from ``(n, 3, 3)`` triangles.

        Normals are always recomputed per face.  When *uvs* is ``None`` the
        planar world mapping is generated.
        """
        tris = np.asarray(triangles, dtype=np.float64).reshape(-1, 3, 3)
        if uvs is None:
            uv_array = planar_uvs(tris) if len(tris) else np.zeros((0, 3, 2))
        else:
            uv_array = np.asarray(uvs, dtype=np.float64)
        normals = np.repeat(face_normals(tris), 3, axis=0) if len(tris) else np.zeros((0, 3))
        return cls(
            positions=tris.reshape(-1).copy(),
            uvs=uv_array.reshape(-1).copy(),
            normals=normals.reshape(-1),
        )

    @classmethod
    def from_trimesh(cls, mesh: trimesh.Trimesh) -> MeshBuffers:
        return cls.from_triangles(mesh.triangles)

    @classmethod
    def concatenate(cls, parts: Iterable[MeshBuffers]) -> MeshBuffers:
        items = [p for p in parts if p.triangle_count]
        if not items:
            return cls.empty()
        return cls(
            positions=np.concatenate([p.positions for p in items]),
            uvs=np.concatenate([p.uvs for p in items]) if all(p.has_uvs for p in items) else np.zeros(0),
            normals=np.concatenate([p.normals for p in items]),
        )

    def transformed(self, matrix: FloatArray) -> MeshBuffers:
        """Apply a rigid 4x4 transform; UVs are carried over unchanged."""
        if not self.triangle_count:
            return self
        m = np.asarray(matrix, dtype=np.float64)
        points = self.positions.reshape(-1, 3)
        moved = points @ m[:3, :3].T + m[:3, 3]
        normals = self.normals.reshape(-1, 3) @ m[:3, :3].T
        return MeshBuffers(moved.reshape(-1), self.uvs.copy(), normals.reshape(-1))


# ---------------------------------------------------------------------------
# Placement
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class Placement:
    """World position and intrinsic XYZ Euler rotation (radians)."""

    position: tuple[float, float, float] = (0.0, 0.0, 0.0)
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)

    def matrix(self) -> FloatArray:
        """4x4 transform: translation applied after rotation."""
        rx, ry, rz = self.rotation
        rot = transformations.euler_matrix(rx, ry, rz, "rxyz")
        return transformations.translation_matrix(self.position) @ rot

    def apply(self, buffers: MeshBuffers) -> MeshBuffers:
        return buffers.transformed(self.matrix())


# ---------------------------------------------------------------------------
# Geometry descriptors
# ---------------------------------------------------------------------------


class GeometryKind(Enum):
    BOX = "box"
    FRAME = "frame"


@dataclass(frozen=True, slots=True)
class BoxGeometry:
    """An axis-aligned box centered on its local origin."""

    size_x: float
    size_y: float
    size_z: float

    kind = GeometryKind.BOX

    def __post_init__(self) -> None:
        if min(self.size_x, self.size_y, self.size_z) <= 0:
            msg = f"box sizes must be positive, got ({self.size_x}, {self.size_y}, {self.size_z})"
            raise ValueError(msg)

    @property
    def extents(self) -> tuple[float, float, float]:
        return (self.size_x, self.size_y, self.size_z)

    def to_buffers(self) -> MeshBuffers:
        return MeshBuffers.from_trimesh(trimesh.creation.box(extents=self.extents))


@dataclass(frozen=True, slots=True)
class FrameGeometry:
    """
    A rectangular window frame: a ``width`` x ``height`` ring of profile
    ``border``, extruded by ``depth`` and centered on its local origin.

    Unrotated, the ring lies in the local XY plane with the depth along Z.
    With ``rotate_for_side`` the frame is turned for a side wall: width runs
    along Z and depth along X.  When the border leaves no clear opening the
    frame is solid.
    """

    width: float
    height: float
    depth: float
    border: float
    rotate_for_side: bool = True

    kind = GeometryKind.FRAME

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0 or self.depth <= 0:
            msg = f"frame sizes must be positive, got ({self.width}, {self.height}, {self.depth})"
            raise ValueError(msg)

    @property
    def inner_width(self) -> float:
        return self.width - 2 * self.border

    @property
    def inner_height(self) -> float:
        return self.height - 2 * self.border

    def outline(self) -> Polygon:
        """The frame's cross-section as a shapely polygon (hole included)."""
        hw, hh = self.width / 2, self.height / 2
        shell = [(-hw, -hh), (hw, -hh), (hw, hh), (-hw, hh)]
        if self.inner_width <= 0 or self.inner_height <= 0:
            return Polygon(shell)
        iw, ih = self.inner_width / 2, self.inner_height / 2
        hole = [(-iw, -ih), (-iw, ih), (iw, ih), (iw, -ih)]
        return Polygon(shell, [hole])

    def to_buffers(self) -> MeshBuffers:
        mesh = trimesh.creation.extrude_polygon(self.outline(), self.depth, engine="earcut")
        mesh.apply_translation((0.0, 0.0, -self.depth / 2))
        if self.rotate_for_side:
            mesh.apply_transform(transformations.rotation_matrix(-np.pi / 2, (0.0, 1.0, 0.0)))
        return MeshBuffers.from_trimesh(mesh)


# ---------------------------------------------------------------------------
# Materials and assembly meshes
# ---------------------------------------------------------------------------


class Material(Enum):
    """Material references understood by consumers."""

    FRAME = "frame"
    GLASS = "glass"
    BLUE_STONE = "blue_stone"
    METAL_BAND = "metal_band"
    METAL_SLATE = "metal_slate"
    REVEAL = "reveal"
    BRICK = "brick"

    @property
    def color(self) -> str:
        return _MATERIAL_COLORS[self]


_MATERIAL_COLORS: dict[Material, str] = {
    Material.FRAME: "#383E42",
    Material.GLASS: "#E6E8EA",
    Material.BLUE_STONE: "#5F6B73",
    Material.METAL_BAND: "#2F3237",
    Material.METAL_SLATE: "#3A3F44",
    Material.REVEAL: "#E8E5DF",
    Material.BRICK: "#9C5A3C",
}


def is_transparent_id(mesh_id: str) -> bool:
    """Whether a mesh id names a transparent (glazing) element.

    Examples:
        >>> is_transparent_id("SIDE_L_TALL_1_GLASS_LOWER")
        True
        >>> is_transparent_id("SIDE_L_TALL_1_FRAME")
        False
    """
    return "_GLASS" in mesh_id.upper()


@dataclass(frozen=True)
class WindowAssemblyMesh:
    """One sub-mesh of a window assembly, positioned in world coordinates."""

    id: str
    geometry: BoxGeometry | FrameGeometry
    position: tuple[float, float, float]
    rotation: tuple[float, float, float] = (0.0, 0.0, 0.0)
    material: Material = Material.FRAME

    @property
    def is_transparent(self) -> bool:
        return is_transparent_id(self.id)

    @property
    def placement(self) -> Placement:
        return Placement(self.position, self.rotation)

    def world_buffers(self) -> MeshBuffers:
        return self.placement.apply(self.geometry.to_buffers())
