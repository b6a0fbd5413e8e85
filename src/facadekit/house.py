"""End-to-end house pipeline.

:class:`HouseSpec` bundles the architectural parameters of a house;
:func:`build_house` runs the whole geometry pipeline on it:

1. facade plans (context, placements, opening cuts) per side facade;
2. the extension side wall, located once;
3. the ground-floor shell (role ``SHELL``) and the first-floor shell
   (role ``FACADE``, footprint clipped at the first-floor depth), each
   extruded and carved;
4. per side facade, the window assemblies, the facade panels that replace
   the carved shell surface, and the return panels at profile steps;
5. per end wall (front and rear), the windows and one punched panel per
   story.

Examples:
    >>> model = build_house()
    >>> sorted(m.value for m in model.facades)
    ['architecturalLeft', 'architecturalRight']
    >>> model.extension
    ExtensionWall(x=3.5, z0=8.45, z1=12.0)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping, Sequence
from dataclasses import dataclass, field

from .assembly import build_end_window, build_facade_windows
from .carver import CarveContext, CarvedShell, ShellRole, carve_shell
from .config import PLANE_TOLERANCE, LevelHeights, WallThickness, WindowDimensions, cm_to_m
from .envelope import Envelope
from .extension import ExtensionWall, locate_extension_side_wall
from .facade import FacadeConvention, FacadeSide, create_facade_context
from .geometry import FootprintPoint, to_points
from .meshes import Material, MeshBuffers, WindowAssemblyMesh
from .panels import FacadePanel, build_end_panel, build_facade_panels, build_return_panels
from .profile import FacadeProfile, outer_wall_x_at_z
from .shell import build_extruded_shell
from .windows import (
    Band,
    EndFacade,
    EndOpening,
    FacadePlan,
    SimpleWindowSpec,
    TallWindowSpec,
    WindowSpec,
    build_facade_plan,
)

logger = logging.getLogger(__name__)


def _segment_prefix(side: FacadeSide) -> str:
    return "L_" if side is FacadeSide.ARCHITECTURAL_LEFT else "R_"


@dataclass(frozen=True)
class HouseSpec:
    """Architectural parameters of one house.

    Attributes:
        footprint: Outer footprint of the ground floor, ``(x, z)`` meters.
        profiles: Outer plane profile per side facade.
        window_specs: Window specs per side facade.
        extension_profile: Stepped side profile the extension is read from.
        wall_thickness: Exterior and interior wall thickness.
        level_heights: Ceiling heights and first-floor datum.
        dimensions: Fixed window dimensions.
        first_floor_depth: Depth at which the first-floor footprint is clipped.
        flat_roof_depth: Depth of the flat roof over the rear.
        panel_facade: The facade whose shell surface is always replaced by panels.
        convention: Mapping of architectural sides onto world X.
        front_openings: Windows and doors of the front wall.
        rear_openings: Windows and doors of the rear wall.
    """

    footprint: tuple[FootprintPoint, ...]
    profiles: Mapping[FacadeSide, FacadeProfile]
    window_specs: Mapping[FacadeSide, tuple[WindowSpec, ...]] = field(default_factory=dict)
    extension_profile: FacadeProfile | None = None
    wall_thickness: WallThickness = field(default_factory=WallThickness)
    level_heights: LevelHeights = field(default_factory=LevelHeights)
    dimensions: WindowDimensions = field(default_factory=WindowDimensions)
    first_floor_depth: float = 12.0
    flat_roof_depth: float = 3.0
    panel_facade: FacadeSide = FacadeSide.ARCHITECTURAL_LEFT
    convention: FacadeConvention = FacadeConvention.ARCHITECTURAL
    front_openings: tuple[EndOpening, ...] = ()
    rear_openings: tuple[EndOpening, ...] = ()

    def __post_init__(self) -> None:
        if self.first_floor_depth <= 0:
            msg = f"first_floor_depth must be positive, got {self.first_floor_depth}"
            raise ValueError(msg)
        if self.flat_roof_depth <= 0:
            msg = f"flat_roof_depth must be positive, got {self.flat_roof_depth}"
            raise ValueError(msg)
        unknown = set(self.window_specs) - set(self.profiles)
        if unknown:
            msg = f"window specs given for facades without a profile: {sorted(s.value for s in unknown)}"
            raise ValueError(msg)
        if self.footprint:
            self._warn_on_profile_mismatch()

    def _warn_on_profile_mismatch(self) -> None:
        for side, profile in self.profiles.items():
            outward = create_facade_context(side, self.convention).outward
            for seg in profile.segments:
                wall_x = outer_wall_x_at_z(self.footprint, outward, seg.z_mid)
                if wall_x is not None and abs(wall_x - seg.plane_x) > PLANE_TOLERANCE:
                    logger.warning(
                        "Profile segment %s of %s at x=%.3f is %.3f m off the footprint wall at z=%.3f",
                        seg.id or "?",
                        side.value,
                        seg.plane_x,
                        wall_x - seg.plane_x,
                        seg.z_mid,
                    )

    @property
    def envelope(self) -> Envelope:
        return Envelope.from_points(self.footprint)

    @classmethod
    def from_centimeters(
        cls,
        footprint_cm: Sequence[Sequence[float]],
        *,
        profiles_cm: Mapping[FacadeSide, Sequence[Sequence[float]]] | None = None,
        window_specs: Mapping[FacadeSide, Sequence[WindowSpec]] | None = None,
        extension_profile_cm: Sequence[Sequence[float]] | None = None,
        **kwargs: object,
    ) -> HouseSpec:
        """Build a spec from centimeter tables of ``(x, z)`` points.

        Profiles are stepped polylines; their vertical runs become profile
        segments.  A facade with window specs but no profile polyline gets
        its profile read off the footprint.  Window specs and end openings
        are expected in meters already.

        Raises:
            ValueError: If a profile polyline has no vertical run, or a
                facade needing a derived profile has no wall along Z.
        """

        def convert(points: Sequence[Sequence[float]]) -> list[FootprintPoint]:
            return to_points((cm_to_m(x), cm_to_m(z)) for x, z in points)

        footprint = tuple(convert(footprint_cm))
        profiles: dict[FacadeSide, FacadeProfile] = {}
        for side, polyline in (profiles_cm or {}).items():
            profile = FacadeProfile.from_points(convert(polyline), id_prefix=_segment_prefix(side))
            if profile is None:
                msg = f"profile for {side.value} has no vertical run"
                raise ValueError(msg)
            profiles[side] = profile

        convention = kwargs.get("convention", FacadeConvention.ARCHITECTURAL)
        for side in window_specs or {}:
            if side in profiles:
                continue
            outward = create_facade_context(side, convention).outward  # type: ignore[arg-type]
            derived = FacadeProfile.from_footprint(footprint, outward, id_prefix=_segment_prefix(side))
            if derived is None:
                msg = f"no profile given for {side.value} and the footprint has no wall along Z on that side"
                raise ValueError(msg)
            profiles[side] = derived

        extension = FacadeProfile.from_points(convert(extension_profile_cm)) if extension_profile_cm else None
        return cls(
            footprint=footprint,
            profiles=profiles,
            window_specs={side: tuple(specs) for side, specs in (window_specs or {}).items()},
            extension_profile=extension,
            **kwargs,  # type: ignore[arg-type]
        )


def _end_openings(edge_x_cm: float, rows: Sequence[tuple[str, float, float, float, float]]) -> tuple[EndOpening, ...]:
    """Openings from ``(id, offset, width, bottom, height)`` rows measured from a wall edge."""
    return tuple(
        EndOpening(
            opening_id,
            x_center=cm_to_m(edge_x_cm + offset + width / 2),
            width=cm_to_m(width),
            bottom=cm_to_m(bottom),
            height=cm_to_m(height),
        )
        for opening_id, offset, width, bottom, height in rows
    )


def default_house_spec() -> HouseSpec:
    """The reference house.

    9.6 m wide at the front, 7.6 m at the rear and 15 m deep.  The +X flank
    steps in from 4.8 m to 4.1 m at 4 m depth and to 3.5 m at 8.45 m depth;
    the -X flank steps in once, from 4.8 m to 4.1 m at 4 m depth.  The
    architectural left facade carries a small window and three tall
    windows; the right facade a door and a small first-floor window.  Its
    profile is read off the footprint.
    """
    depth_cm = 1500.0
    rear_width_cm = 760.0
    stepped_cm = [
        (480.0, 0.0),
        (480.0, 400.0),
        (410.0, 400.0),
        (410.0, 845.0),
        (350.0, 845.0),
        (350.0, 1200.0),
        (350.0, depth_cm),
    ]
    front_left = (-480.0, 0.0)
    rear_left = (stepped_cm[-1][0] - rear_width_cm, depth_cm)
    left_step = [(rear_left[0], 400.0), (front_left[0], 400.0)]
    facade_run = stepped_cm[:-1]

    levels = LevelHeights()
    tall_ground = Band(0.0, levels.ground_ceiling)
    tall_first = Band(levels.ground_ceiling, 5.0)
    left_specs: list[WindowSpec] = [
        SimpleWindowSpec("SIDE_L_EXT", width=1.0, z_center=1.2, ground_band=Band(0.0, 2.15)),
        TallWindowSpec("SIDE_L_TALL_1", width=1.1, z_center=4.6, ground_band=tall_ground, first_floor_band=tall_first),
        TallWindowSpec("SIDE_L_TALL_2", width=1.1, z_center=6.8, ground_band=tall_ground, first_floor_band=tall_first),
        TallWindowSpec("SIDE_L_TALL_3", width=1.1, z_center=9.35, ground_band=tall_ground, first_floor_band=tall_first),
    ]
    right_specs: list[WindowSpec] = [
        SimpleWindowSpec("SIDE_R_DOOR", width=1.0, z_center=5.5, ground_band=Band(0.0, 2.15)),
        TallWindowSpec("SIDE_R_WIN", width=0.9, z_center=5.5, ground_band=Band(4.1, 4.1), first_floor_band=Band(4.1, 5.0)),
    ]

    # offsets along the wall from its left edge: (id, offset, width, bottom, height)
    front = _end_openings(
        front_left[0],
        [
            ("FRONT_G_W1", 115, 110, 70, 160),
            ("FRONT_G_W2", 295, 110, 70, 160),
            ("FRONT_G_DOOR", 500, 100, 0, 250),
            ("FRONT_G_W3", 715, 70, 165, 50),
            ("FRONT_F_W1", 125, 90, 340, 160),
            ("FRONT_F_W2", 305, 90, 340, 160),
            ("FRONT_F_W3", 505, 90, 340, 160),
            ("FRONT_F_W4", 715, 70, 410, 90),
        ],
    )
    rear = _end_openings(
        rear_left[0],
        [
            ("REAR_GROUND_BIG", 100, 560, 0, 245),
            ("REAR_FIRST_LEFT", 170, 110, 340, 160),
            ("REAR_FIRST_RIGHT", 480, 110, 340, 160),
        ],
    )

    return HouseSpec.from_centimeters(
        [front_left, *stepped_cm, rear_left, *left_step],
        profiles_cm={FacadeSide.ARCHITECTURAL_LEFT: facade_run},
        window_specs={
            FacadeSide.ARCHITECTURAL_LEFT: left_specs,
            FacadeSide.ARCHITECTURAL_RIGHT: right_specs,
        },
        extension_profile_cm=stepped_cm,
        level_heights=levels,
        front_openings=front,
        rear_openings=rear,
    )


# ---------------------------------------------------------------------------
# Model
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FacadeAssembly:
    """Everything generated for one side facade."""

    plan: FacadePlan
    windows: tuple[WindowAssemblyMesh, ...]
    panels: tuple[FacadePanel, ...]
    return_panels: tuple[FacadePanel, ...] = ()


@dataclass(frozen=True)
class EndFacadeAssembly:
    """Everything generated for the front or the rear wall."""

    openings: tuple[EndOpening, ...]
    windows: tuple[WindowAssemblyMesh, ...]
    panels: tuple[FacadePanel, ...]


@dataclass(frozen=True)
class HouseModel:
    """The generated geometry of a house."""

    spec: HouseSpec
    envelope: Envelope
    first_floor_envelope: Envelope
    extension: ExtensionWall | None
    ground_shell: CarvedShell
    first_shell: CarvedShell
    facades: Mapping[FacadeSide, FacadeAssembly]
    flat_roof: tuple[FootprintPoint, ...]
    end_facades: Mapping[EndFacade, EndFacadeAssembly] = field(default_factory=dict)

    def world_meshes(self) -> Iterator[tuple[str, MeshBuffers, Material]]:
        """Yield ``(id, buffers, material)`` for every mesh, in world coordinates."""
        yield "GROUND_SHELL", self.ground_shell.world_buffers(), Material.BRICK
        yield "FIRST_SHELL", self.first_shell.world_buffers(), Material.BRICK
        for assembly in self.facades.values():
            for mesh in assembly.windows:
                yield mesh.id, mesh.world_buffers(), mesh.material
            for panel in (*assembly.panels, *assembly.return_panels):
                yield panel.id, panel.world_buffers(), panel.material
        for end in self.end_facades.values():
            for mesh in end.windows:
                yield mesh.id, mesh.world_buffers(), mesh.material
            for panel in end.panels:
                yield panel.id, panel.world_buffers(), panel.material


def _opens_story(plan: FacadePlan, y0: float, y1: float) -> bool:
    return any(c.height > 0 and c.bottom < y1 and c.top > y0 for c in plan.opening_cuts)


def _build_end_facade(
    facade: EndFacade,
    openings: tuple[EndOpening, ...],
    ground: Envelope,
    upper: Envelope,
    levels: LevelHeights,
    dimensions: WindowDimensions,
) -> EndFacadeAssembly:
    windows: list[WindowAssemblyMesh] = []
    for opening in openings:
        story = upper if opening.bottom >= levels.first_floor else ground
        z_face = story.front_z if facade is EndFacade.FRONT else story.rear_z
        windows.extend(build_end_window(opening, facade, z_face, dimensions))
    panels = (
        build_end_panel(ground, facade, openings, 0.0, levels.ground_ceiling, id_prefix=f"{facade.name}_GROUND_PANEL"),
        build_end_panel(
            upper, facade, openings, levels.first_floor, levels.first_ceiling, id_prefix=f"{facade.name}_FIRST_PANEL"
        ),
    )
    return EndFacadeAssembly(openings=openings, windows=tuple(windows), panels=panels)


def build_house(spec: HouseSpec | None = None) -> HouseModel:
    """Run the full geometry pipeline on *spec* (the reference house by default)."""
    spec = spec or default_house_spec()
    thickness = spec.wall_thickness.exterior
    levels = spec.level_heights

    envelope = spec.envelope
    upper = envelope.first_floor_outer(spec.first_floor_depth)
    extension = locate_extension_side_wall(spec.extension_profile, envelope, flat_roof_depth=spec.flat_roof_depth)

    plans = [
        build_facade_plan(
            side,
            spec.window_specs.get(side, ()),
            profile,
            convention=spec.convention,
            dimensions=spec.dimensions,
        )
        for side, profile in spec.profiles.items()
    ]
    # facades whose ground story shell surface is replaced by punched panels
    ground_sides = frozenset(p.facade for p in plans if _opens_story(p, 0.0, levels.ground_ceiling))

    ground_raw = build_extruded_shell(envelope.points, envelope.inner_polygon(thickness), levels.ground_ceiling, 0.0)
    ground = carve_shell(
        ground_raw,
        CarveContext.from_envelope(
            envelope,
            thickness,
            plans,
            role=ShellRole.SHELL,
            extension=extension,
            panel_facade=spec.panel_facade,
            opening_facades=ground_sides,
            base_y=0.0,
            convention=spec.convention,
        ),
    )

    first_raw = build_extruded_shell(upper.points, upper.inner_polygon(thickness), levels.first_ceiling, levels.first_floor)
    first = carve_shell(
        first_raw,
        CarveContext.from_envelope(
            upper,
            thickness,
            plans,
            role=ShellRole.FACADE,
            extension=extension,
            panel_facade=spec.panel_facade,
            base_y=levels.first_floor,
            convention=spec.convention,
        ),
    )

    facades: dict[FacadeSide, FacadeAssembly] = {}
    for plan in plans:
        windows = build_facade_windows(
            plan,
            level_heights=levels,
            wall_thickness=spec.wall_thickness,
            dimensions=spec.dimensions,
        )
        panels: list[FacadePanel] = []
        returns: list[FacadePanel] = []
        if plan.facade is spec.panel_facade or plan.facade in ground_sides:
            panels.extend(
                build_facade_panels(
                    plan,
                    0.0,
                    levels.ground_ceiling,
                    z_extent=(envelope.front_z, envelope.rear_z),
                    id_prefix=f"{plan.facade.name}_GROUND_PANEL",
                )
            )
        if plan.facade is spec.panel_facade:
            returns.extend(
                build_return_panels(
                    plan.profile,
                    levels.first_floor,
                    levels.first_top,
                    id_prefix=f"{plan.facade.name}_RETURN",
                )
            )
        panels.extend(
            build_facade_panels(
                plan,
                levels.first_floor,
                levels.first_ceiling,
                z_extent=(upper.front_z, upper.rear_z),
                id_prefix=f"{plan.facade.name}_FIRST_PANEL",
            )
        )
        facades[plan.facade] = FacadeAssembly(
            plan=plan,
            windows=tuple(windows),
            panels=tuple(panels),
            return_panels=tuple(returns),
        )

    end_facades = {
        facade: _build_end_facade(facade, openings, envelope, upper, levels, spec.dimensions)
        for facade, openings in ((EndFacade.FRONT, spec.front_openings), (EndFacade.REAR, spec.rear_openings))
    }

    logger.debug("Ground shell: %s", ground.stats.summary())
    logger.debug("First shell: %s", first.stats.summary())
    return HouseModel(
        spec=spec,
        envelope=envelope,
        first_floor_envelope=upper,
        extension=extension,
        ground_shell=ground,
        first_shell=first,
        facades=facades,
        flat_roof=tuple(envelope.flat_roof_polygon(spec.flat_roof_depth)),
        end_facades=end_facades,
    )
