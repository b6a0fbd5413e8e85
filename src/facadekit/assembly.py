"""Window assembly factory.

Turns a :class:`~facadekit.windows.WindowPlacement` into the ordered list of
sub-meshes a side window is made of: the frame, one or three glazing and
band elements, the stone sill, the four reveal returns and, for split tall
windows, the slate and floor bands at the first-floor datum.

All positions are absolute world coordinates.  On a side wall the frame's
width runs along Z and its depth along X, so boxes here are sized
``(depth_x, height_y, width_z)``.

Front and rear windows are simpler: a frame, one pane and, above floor
level, a sill projecting along Z.

Mesh ids are ``{window id}{suffix}``; glazing suffixes contain ``_GLASS``,
which consumers use to pick transparent materials.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .config import LevelHeights, WallThickness, WindowDimensions
from .exceptions import InvalidSillParametersError
from .facade import FacadeContext, WorldSide
from .meshes import BoxGeometry, FrameGeometry, Material, WindowAssemblyMesh
from .windows import EndFacade, EndOpening, FacadePlan, WindowKind, WindowPlacement

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Sills
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class RearSillParams:
    """A sill under an opening in a Z-facing (front or rear) wall."""

    x_center: float
    y_center: float
    z_face: float
    outward: int = 1


@dataclass(frozen=True, slots=True)
class SideSillParams:
    """A sill under an opening in an X-facing (side) wall."""

    z_center: float
    y_bottom: float
    x_face: float
    side: WorldSide


def rear_facing_sill(
    mesh_id: str,
    width: float,
    x_center: float,
    y_center: float,
    z_face: float,
    dimensions: WindowDimensions | None = None,
    *,
    outward: int = 1,
) -> WindowAssemblyMesh:
    """Sill projecting from a Z-facing wall at ``z_face``.

    ``outward`` is the wall's outward direction along Z: +1 for the rear
    wall, -1 for the front wall.
    """
    dims = dimensions or WindowDimensions()
    projection = dims.sill_depth / 2 + dims.sill_overhang
    return WindowAssemblyMesh(
        id=mesh_id,
        geometry=BoxGeometry(width, dims.sill_height, dims.sill_depth),
        position=(x_center, y_center, z_face + outward * projection),
        material=Material.BLUE_STONE,
    )


def side_facing_sill(
    mesh_id: str,
    width: float,
    z_center: float,
    y_bottom: float,
    x_face: float,
    side: WorldSide,
    dimensions: WindowDimensions | None = None,
) -> WindowAssemblyMesh:
    """Sill projecting from a side wall at ``x_face`` towards world *side*.

    The stone sits just below ``y_bottom`` and is ``sill_width_margin``
    longer than the opening.

    Raises:
        InvalidSillParametersError: If *side* is not ``"left"`` or ``"right"``.
    """
    dims = dimensions or WindowDimensions()
    projection = dims.sill_depth / 2 + dims.sill_overhang
    if side == "right":
        x = x_face + projection
    elif side == "left":
        x = x_face - projection
    else:
        raise InvalidSillParametersError(mesh_id, side)
    return WindowAssemblyMesh(
        id=mesh_id,
        geometry=BoxGeometry(dims.sill_depth, dims.sill_height, width + dims.sill_width_margin),
        position=(x, y_bottom - dims.sill_height / 2, z_center),
        material=Material.BLUE_STONE,
    )


def build_sill(
    mesh_id: str,
    width: float,
    params: RearSillParams | SideSillParams,
    dimensions: WindowDimensions | None = None,
) -> WindowAssemblyMesh:
    """Build a sill from whichever parameter set the caller holds.

    Raises:
        InvalidSillParametersError: For anything that is neither
            :class:`RearSillParams` nor :class:`SideSillParams`.
    """
    if isinstance(params, RearSillParams):
        return rear_facing_sill(
            mesh_id, width, params.x_center, params.y_center, params.z_face, dimensions, outward=params.outward
        )
    if isinstance(params, SideSillParams):
        return side_facing_sill(
            mesh_id, width, params.z_center, params.y_bottom, params.x_face, params.side, dimensions
        )
    raise InvalidSillParametersError(mesh_id, params)


# ---------------------------------------------------------------------------
# Reveals
# ---------------------------------------------------------------------------


def build_reveals(
    window_id: str,
    *,
    z_center: float,
    bottom: float,
    width: float,
    height: float,
    x_outer: float,
    x_inner: float,
    dimensions: WindowDimensions | None = None,
) -> list[WindowAssemblyMesh]:
    """The jamb, head and sill returns lining an opening through the wall.

    Jamb thickness is capped at half the width and head thickness at half
    the height, so narrow openings never get inverted reveals.
    """
    dims = dimensions or WindowDimensions()
    depth = max(dims.min_clear, abs(x_outer - x_inner))
    x_mid = (x_outer + x_inner) / 2
    y_center = bottom + height / 2
    jamb = min(dims.reveal_face, width / 2)
    head = min(dims.reveal_face, height / 2)
    clear = max(dims.min_clear, width - 2 * jamb)
    half = width / 2

    def reveal(suffix: str, size: tuple[float, float, float], position: tuple[float, float, float]) -> WindowAssemblyMesh:
        return WindowAssemblyMesh(
            id=f"{window_id}_REVEAL_{suffix}",
            geometry=BoxGeometry(*size),
            position=position,
            material=Material.REVEAL,
        )

    return [
        reveal("LEFT", (depth, height, jamb), (x_mid, y_center, z_center - half + jamb / 2)),
        reveal("RIGHT", (depth, height, jamb), (x_mid, y_center, z_center + half - jamb / 2)),
        reveal("HEAD", (depth, head, clear), (x_mid, bottom + height - head / 2, z_center)),
        reveal("SILL", (depth, head, clear), (x_mid, bottom + head / 2, z_center)),
    ]


# ---------------------------------------------------------------------------
# Window layouts
# ---------------------------------------------------------------------------


def _glass(mesh_id: str, x: float, y: float, z: float, height: float, width: float, dims: WindowDimensions) -> WindowAssemblyMesh:
    return WindowAssemblyMesh(
        id=mesh_id,
        geometry=BoxGeometry(dims.glass_thickness, max(dims.min_clear, height), max(dims.min_clear, width)),
        position=(x, y, z),
        material=Material.GLASS,
    )


def _simple_layout(
    placement: WindowPlacement,
    ctx: FacadeContext,
    frame_x: float,
    glass_x: float,
    dims: WindowDimensions,
) -> list[WindowAssemblyMesh]:
    window_id = placement.spec.id
    width, height = placement.width, placement.height
    y_center = placement.bottom + height / 2
    z = placement.z_center
    return [
        WindowAssemblyMesh(
            id=f"{window_id}_FRAME",
            geometry=FrameGeometry(width, height, dims.frame_depth, dims.frame_border),
            position=(frame_x, y_center, z),
            material=Material.FRAME,
        ),
        _glass(
            f"{window_id}_GLASS",
            glass_x,
            y_center,
            z,
            height - 2 * dims.frame_border,
            width - 2 * dims.frame_border,
            dims,
        ),
        side_facing_sill(
            f"{window_id}_SILL", width, z, placement.bottom, placement.outer_plane_x, ctx.sill_side, dims
        ),
    ]


def _split_layout(
    placement: WindowPlacement,
    ctx: FacadeContext,
    frame_x: float,
    glass_x: float,
    levels: LevelHeights,
    dims: WindowDimensions,
) -> list[WindowAssemblyMesh]:
    window_id = placement.spec.id
    width, height = placement.width, placement.height
    bottom = placement.bottom
    z = placement.z_center
    x_face = placement.outer_plane_x
    inner_width = width - 2 * dims.frame_border
    upper_height = height - dims.lower_glass_height - dims.mid_band_height
    band_top = bottom + dims.lower_glass_height + dims.mid_band_height

    return [
        WindowAssemblyMesh(
            id=f"{window_id}_FRAME",
            geometry=FrameGeometry(width, height, dims.frame_depth, dims.frame_border),
            position=(frame_x, bottom + height / 2, z),
            material=Material.FRAME,
        ),
        _glass(
            f"{window_id}_GLASS_LOWER",
            glass_x,
            bottom + dims.lower_glass_height / 2,
            z,
            dims.lower_glass_height,
            inner_width,
            dims,
        ),
        _glass(
            f"{window_id}_GLASS_UPPER",
            glass_x,
            band_top + upper_height / 2,
            z,
            upper_height,
            inner_width,
            dims,
        ),
        WindowAssemblyMesh(
            id=f"{window_id}_METAL_BAND",
            geometry=BoxGeometry(dims.metal_band_depth, dims.mid_band_height, max(dims.min_clear, inner_width)),
            position=(glass_x, bottom + dims.lower_glass_height + dims.mid_band_height / 2, z),
            material=Material.METAL_SLATE,
        ),
        side_facing_sill(f"{window_id}_SILL", width, z, bottom, x_face, ctx.sill_side, dims),
        WindowAssemblyMesh(
            id=f"{window_id}_SLATE_BAND",
            geometry=BoxGeometry(
                dims.slate_band_depth, dims.slate_band_height, width + dims.slate_band_width_margin
            ),
            position=(
                x_face + ctx.outward * (dims.frame_depth / 2 + dims.slate_band_offset),
                levels.first_floor,
                z,
            ),
            material=Material.METAL_BAND,
        ),
        WindowAssemblyMesh(
            id=f"{window_id}_FLOOR_BAND",
            geometry=BoxGeometry(dims.metal_band_depth, dims.floor_band_height, width),
            position=(
                frame_x
                + ctx.outward * (dims.frame_depth / 2 - dims.metal_band_depth / 2 + dims.floor_band_outset),
                levels.first_floor,
                z,
            ),
            material=Material.METAL_BAND,
        ),
    ]


def uses_split_layout(placement: WindowPlacement, dimensions: WindowDimensions | None = None) -> bool:
    """Whether *placement* gets the three-part tall glazing."""
    dims = dimensions or WindowDimensions()
    return placement.kind is WindowKind.TALL and placement.height >= dims.split_threshold


def build_window_assembly(
    placement: WindowPlacement,
    ctx: FacadeContext,
    level_heights: LevelHeights | None = None,
    wall_thickness: WallThickness | None = None,
    dimensions: WindowDimensions | None = None,
) -> list[WindowAssemblyMesh]:
    """Build every sub-mesh of one window.

    Args:
        placement: The resolved window.
        ctx: Conventions of the facade the window sits on.
        level_heights: Supplies the first-floor datum for split windows.
        wall_thickness: Depth of the reveals (exterior thickness).
        dimensions: Fixed window dimensions.

    Returns:
        Frame, glazing, sill, then the four reveals.  Split tall windows
        add the metal band and the slate and floor bands.  A zero-height
        placement yields an empty list.

    Examples:
        >>> from facadekit.facade import create_facade_context
        >>> from facadekit.profile import FacadeProfile
        >>> from facadekit.windows import Band, SimpleWindowSpec, plan_window_placements
        >>> ctx = create_facade_context("architecturalLeft")
        >>> spec = SimpleWindowSpec("W", 1.0, 5.5, Band(0.0, 2.15))
        >>> [p] = plan_window_placements(ctx, [spec], FacadeProfile.flat(4.8))
        >>> [m.id for m in build_window_assembly(p, ctx)][:3]
        ['W_FRAME', 'W_GLASS', 'W_SILL']
    """
    if placement.height <= 0:
        logger.debug("Skipping zero-height window %s", placement.spec.id)
        return []

    levels = level_heights or LevelHeights()
    walls = wall_thickness or WallThickness()
    dims = dimensions or WindowDimensions()

    frame_x = placement.outer_plane_x - ctx.outward * (dims.frame_depth / 2)
    glass_x = frame_x + ctx.interior * dims.glass_inset
    x_inner = placement.outer_plane_x + ctx.interior * walls.exterior

    if uses_split_layout(placement, dims):
        meshes = _split_layout(placement, ctx, frame_x, glass_x, levels, dims)
    else:
        meshes = _simple_layout(placement, ctx, frame_x, glass_x, dims)

    meshes.extend(
        build_reveals(
            placement.spec.id,
            z_center=placement.z_center,
            bottom=placement.bottom,
            width=placement.width,
            height=placement.height,
            x_outer=placement.outer_plane_x,
            x_inner=x_inner,
            dimensions=dims,
        )
    )
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Window %s: %d meshes", placement.spec.id, len(meshes))
    return meshes


def build_facade_windows(
    plan: FacadePlan | Iterable[WindowPlacement],
    ctx: FacadeContext | None = None,
    level_heights: LevelHeights | None = None,
    wall_thickness: WallThickness | None = None,
    dimensions: WindowDimensions | None = None,
) -> list[WindowAssemblyMesh]:
    """Assemblies of every placement of a facade, flattened in order."""
    if isinstance(plan, FacadePlan):
        placements: Iterable[WindowPlacement] = plan.placements
        ctx = plan.ctx
    else:
        placements = plan
        if ctx is None:
            msg = "ctx is required when passing bare placements"
            raise ValueError(msg)
    meshes: list[WindowAssemblyMesh] = []
    for placement in placements:
        meshes.extend(build_window_assembly(placement, ctx, level_heights, wall_thickness, dimensions))
    return meshes


# ---------------------------------------------------------------------------
# Front and rear windows
# ---------------------------------------------------------------------------


def build_end_window(
    opening: EndOpening,
    facade: EndFacade,
    z_face: float,
    dimensions: WindowDimensions | None = None,
) -> list[WindowAssemblyMesh]:
    """Frame, glass and sill of an opening in the front or rear wall.

    The frame is set into the wall by half its depth and the pane sits
    behind it.  Openings starting at floor level (doors, sliding windows)
    get no sill.

    Examples:
        >>> from facadekit.windows import EndFacade, EndOpening
        >>> door = EndOpening("D", x_center=0.7, width=1.0, bottom=0.0, height=2.5)
        >>> [m.id for m in build_end_window(door, EndFacade.FRONT, 0.0)]
        ['D_FRAME', 'D_GLASS']
    """
    dims = dimensions or WindowDimensions()
    outward = facade.outward
    frame_z = z_face - outward * (dims.frame_depth / 2)
    glass_z = frame_z - outward * dims.glass_inset
    y_center = opening.bottom + opening.height / 2

    meshes = [
        WindowAssemblyMesh(
            id=f"{opening.id}_FRAME",
            geometry=FrameGeometry(
                opening.width, opening.height, dims.frame_depth, dims.frame_border, rotate_for_side=False
            ),
            position=(opening.x_center, y_center, frame_z),
            material=Material.FRAME,
        ),
        WindowAssemblyMesh(
            id=f"{opening.id}_GLASS",
            geometry=BoxGeometry(
                max(dims.min_clear, opening.width - 2 * dims.frame_border),
                max(dims.min_clear, opening.height - 2 * dims.frame_border),
                dims.glass_thickness,
            ),
            position=(opening.x_center, y_center, glass_z),
            material=Material.GLASS,
        ),
    ]
    if opening.bottom > 0:
        meshes.append(
            rear_facing_sill(
                f"{opening.id}_SILL",
                opening.width + dims.sill_width_margin,
                opening.x_center,
                opening.bottom - dims.sill_height / 2,
                z_face,
                dims,
                outward=outward,
            )
        )
    return meshes
