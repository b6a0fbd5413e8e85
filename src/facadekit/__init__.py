"""
facadekit: procedural house facade and opening geometry.

This package generates the 3D geometry of a multi-story house from a
footprint polygon, wall thickness, story heights and window specifications:
stepped side facade profiles, window placements and assemblies, extruded
wall shells carved around replacement facade panels.

Basic usage:
    from facadekit import build_house, default_house_spec

    # Build the reference house
    model = build_house(default_house_spec())

    # Iterate world-space meshes
    for mesh_id, buffers, material in model.world_meshes():
        print(mesh_id, buffers.triangle_count, material.value)

    # Plan and assemble the windows of a single facade
    from facadekit import FacadeProfile, build_facade_plan, build_facade_windows
    plan = build_facade_plan("architecturalLeft", specs, FacadeProfile.flat(4.8))
    meshes = build_facade_windows(plan)
"""

from __future__ import annotations

__version__ = "0.1.0"

# Window assemblies
from .assembly import (
    RearSillParams,
    SideSillParams,
    build_end_window,
    build_facade_windows,
    build_reveals,
    build_sill,
    build_window_assembly,
    rear_facing_sill,
    side_facing_sill,
)

# Shell carving
from .carver import (
    CarveContext,
    CarvedShell,
    CarveStats,
    ShellRole,
    WallFace,
    carve_shell,
    classify_triangle,
)

# Configuration
from .config import (
    FACING_THRESHOLD,
    PLANE_TOLERANCE,
    STEP_MARGIN,
    LevelHeights,
    WallThickness,
    WindowDimensions,
    cm_to_m,
)
from .envelope import Envelope

# Exceptions
from .exceptions import (
    FacadeKitError,
    InvalidFootprintError,
    InvalidSillParametersError,
    ShellBuildError,
)
from .extension import ExtensionWall, locate_extension_side_wall

# Facade conventions
from .facade import (
    FacadeContext,
    FacadeConvention,
    FacadeSide,
    create_facade_context,
    world_side_from_outward,
)

# Geometry utilities
from .geometry import FootprintPoint, Vector3D, signed_area, to_points

# House pipeline
from .house import EndFacadeAssembly, FacadeAssembly, HouseModel, HouseSpec, build_house, default_house_spec

# Meshes
from .meshes import (
    BoxGeometry,
    FrameGeometry,
    Material,
    MeshBuffers,
    Placement,
    WindowAssemblyMesh,
    face_normals,
    is_transparent_id,
    planar_uvs,
)
from .panels import FacadePanel, build_end_panel, build_facade_panels, build_return_panels

# Profiles
from .profile import (
    FacadeProfile,
    ProfileSegment,
    WallPlanes,
    XExtremes,
    outer_wall_x_at_z,
    wall_planes_at_z,
    x_extremes_at_z,
)
from .shell import ShellResult, build_extruded_shell

# Windows
from .windows import (
    Band,
    EndFacade,
    EndOpening,
    FacadePlan,
    OpeningCut,
    SimpleWindowSpec,
    TallWindowSpec,
    WindowKind,
    WindowPlacement,
    WindowSpec,
    build_facade_plan,
    build_opening_cuts,
    plan_window_placements,
)

__all__ = [
    "FACING_THRESHOLD",
    "PLANE_TOLERANCE",
    "STEP_MARGIN",
    "Band",
    "BoxGeometry",
    "CarveContext",
    "CarveStats",
    "CarvedShell",
    "EndFacade",
    "EndFacadeAssembly",
    "EndOpening",
    "Envelope",
    "ExtensionWall",
    "FacadeAssembly",
    "FacadeContext",
    "FacadeConvention",
    "FacadeKitError",
    "FacadePanel",
    "FacadePlan",
    "FacadeProfile",
    "FacadeSide",
    "FootprintPoint",
    "FrameGeometry",
    "HouseModel",
    "HouseSpec",
    "InvalidFootprintError",
    "InvalidSillParametersError",
    "LevelHeights",
    "Material",
    "MeshBuffers",
    "OpeningCut",
    "Placement",
    "ProfileSegment",
    "RearSillParams",
    "ShellBuildError",
    "ShellResult",
    "ShellRole",
    "SideSillParams",
    "SimpleWindowSpec",
    "TallWindowSpec",
    "Vector3D",
    "WallFace",
    "WallPlanes",
    "WallThickness",
    "WindowAssemblyMesh",
    "WindowDimensions",
    "WindowKind",
    "WindowPlacement",
    "WindowSpec",
    "XExtremes",
    "__version__",
    "build_end_panel",
    "build_end_window",
    "build_extruded_shell",
    "build_facade_panels",
    "build_facade_plan",
    "build_facade_windows",
    "build_house",
    "build_opening_cuts",
    "build_return_panels",
    "build_reveals",
    "build_sill",
    "build_window_assembly",
    "carve_shell",
    "classify_triangle",
    "cm_to_m",
    "create_facade_context",
    "default_house_spec",
    "face_normals",
    "is_transparent_id",
    "locate_extension_side_wall",
    "outer_wall_x_at_z",
    "planar_uvs",
    "plan_window_placements",
    "rear_facing_sill",
    "side_facing_sill",
    "signed_area",
    "to_points",
    "wall_planes_at_z",
    "world_side_from_outward",
    "x_extremes_at_z",
]
