"""Window specifications, placement planning and opening cuts.

A window spec is the design-level description of an opening on a side
facade: its width, its nominal depth (Z center) and the vertical band it
occupies on each story.  Planning resolves each spec against a facade
profile into a :class:`WindowPlacement` with a concrete outer wall plane;
each placement then reduces to an :class:`OpeningCut` for the wall carver
and the facade panels.  Front and rear walls carry :class:`EndOpening`
records laid out directly in world X.

Examples:
    >>> from facadekit.facade import create_facade_context
    >>> from facadekit.profile import FacadeProfile
    >>> ctx = create_facade_context("architecturalLeft")
    >>> spec = SimpleWindowSpec("W1", width=1.0, z_center=5.5, ground_band=Band(0.0, 2.15))
    >>> [placement] = plan_window_placements(ctx, [spec], FacadeProfile.flat(4.8))
    >>> placement.outer_plane_x, placement.height
    (4.8, 2.15)
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from typing import ClassVar

from .config import WindowDimensions
from .facade import FacadeContext, FacadeConvention, FacadeSide, create_facade_context
from .profile import FacadeProfile

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Band:
    """A vertical interval ``[y0, y1]`` on one story.

    A band with ``y1 <= y0`` is closed: the window has no opening on that
    story.
    """

    y0: float = 0.0
    y1: float = 0.0

    def __post_init__(self) -> None:
        if self.y0 < 0 or self.y1 < 0:
            msg = f"band coordinates must be non-negative, got ({self.y0}, {self.y1})"
            raise ValueError(msg)

    @property
    def height(self) -> float:
        return max(0.0, self.y1 - self.y0)

    @property
    def is_open(self) -> bool:
        return self.y1 > self.y0


CLOSED_BAND = Band(0.0, 0.0)


class WindowKind(Enum):
    SIMPLE = "simple"
    TALL = "tall"


@dataclass(frozen=True)
class WindowSpec(ABC):
    """Fields shared by every window kind.

    Use :class:`SimpleWindowSpec` or :class:`TallWindowSpec`; each kind
    defines how its bands add up to the opening height.

    Attributes:
        id: Stable identifier, used as the prefix of every generated mesh id.
        width: Opening width along the facade (Z).
        z_center: Nominal depth of the opening center.
        ground_band: Vertical extent on the ground floor.
        first_floor_band: Vertical extent on the first floor.
    """

    kind: ClassVar[WindowKind]

    id: str
    width: float
    z_center: float
    ground_band: Band = CLOSED_BAND
    first_floor_band: Band = CLOSED_BAND

    def __post_init__(self) -> None:
        if self.width <= 0:
            msg = f"window '{self.id}' width must be positive, got {self.width}"
            raise ValueError(msg)

    @property
    def bottom(self) -> float:
        return self.ground_band.y0

    @property
    @abstractmethod
    def opening_height(self) -> float:
        """Total height of the opening, zero when every band is closed."""


@dataclass(frozen=True)
class SimpleWindowSpec(WindowSpec):
    """A single-story window or door: its opening is the ground band."""

    kind: ClassVar[WindowKind] = WindowKind.SIMPLE

    @property
    def opening_height(self) -> float:
        """
        Examples:
            >>> SimpleWindowSpec("D", 1.0, 5.5, Band(0.0, 2.15)).opening_height
            2.15
        """
        return max(0.0, self.ground_band.y1 - self.ground_band.y0)


@dataclass(frozen=True)
class TallWindowSpec(WindowSpec):
    """A window that may run continuously through both stories.

    The opening starts at the ground band's bottom and ends at the higher of
    the two band tops.
    """

    kind: ClassVar[WindowKind] = WindowKind.TALL

    @property
    def opening_height(self) -> float:
        """
        Examples:
            >>> TallWindowSpec("T", 1.1, 4.6, Band(0.0, 2.45), Band(2.45, 5.0)).opening_height
            5.0
        """
        top = max(self.ground_band.y1, self.first_floor_band.y1)
        return max(0.0, top - self.ground_band.y0)


# ---------------------------------------------------------------------------
# Front and rear walls
# ---------------------------------------------------------------------------


class EndFacade(Enum):
    """The Z-facing walls: the front at minimum Z, the rear at maximum Z."""

    FRONT = "front"
    REAR = "rear"

    @property
    def outward(self) -> int:
        """Direction of the wall's outward normal along Z."""
        return -1 if self is EndFacade.FRONT else 1


@dataclass(frozen=True)
class EndOpening:
    """A window or door in the front or rear wall.

    End openings are laid out directly in world X; there is no profile to
    resolve against.

    Attributes:
        id: Stable identifier, used as the prefix of every generated mesh id.
        x_center: Opening center along X.
        width: Opening width along X.
        bottom: World elevation of the opening's lower edge.
        height: Opening height.
    """

    id: str
    x_center: float
    width: float
    bottom: float
    height: float

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            msg = f"opening '{self.id}' needs a positive size, got {self.width} x {self.height}"
            raise ValueError(msg)
        if self.bottom < 0:
            msg = f"opening '{self.id}' bottom must be non-negative, got {self.bottom}"
            raise ValueError(msg)

    @property
    def x_min(self) -> float:
        return self.x_center - self.width / 2

    @property
    def x_max(self) -> float:
        return self.x_center + self.width / 2

    @property
    def top(self) -> float:
        return self.bottom + self.height


# ---------------------------------------------------------------------------
# Placement planning
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WindowPlacement:
    """A window spec resolved against a facade profile."""

    spec: WindowSpec
    outer_plane_x: float
    z_center: float
    width: float
    height: float

    @property
    def kind(self) -> WindowKind:
        return self.spec.kind

    @property
    def bottom(self) -> float:
        return self.spec.bottom

    @property
    def top(self) -> float:
        return self.bottom + self.height


def plan_window_placements(
    ctx: FacadeContext,
    specs: Iterable[WindowSpec],
    profile: FacadeProfile,
    dimensions: WindowDimensions | None = None,
) -> list[WindowPlacement]:
    """Resolve *specs* into placements, preserving order.

    Tall windows are shifted forward by ``dimensions.tall_front_offset``
    before the outer plane is looked up.  Specs whose bands are all closed
    still yield a zero-height placement; consumers skip those.
    """
    dims = dimensions or WindowDimensions()
    placements: list[WindowPlacement] = []
    for spec in specs:
        z_center = spec.z_center - dims.tall_front_offset if spec.kind is WindowKind.TALL else spec.z_center
        outer = profile.resolve_plane_x(z_center) - ctx.outward * dims.panel_plane_offset
        placements.append(
            WindowPlacement(
                spec=spec,
                outer_plane_x=outer,
                z_center=z_center,
                width=spec.width,
                height=spec.opening_height,
            )
        )
    if logger.isEnabledFor(logging.DEBUG):
        for p in placements:
            logger.debug(
                "Placed %s (%s) on %s at x=%.3f z=%.3f h=%.3f",
                p.spec.id,
                p.kind.value,
                ctx.facade.value,
                p.outer_plane_x,
                p.z_center,
                p.height,
            )
    return placements


# ---------------------------------------------------------------------------
# Opening cuts
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class OpeningCut:
    """Position and extent of one wall opening."""

    outer_plane_x: float
    z_center: float
    width: float
    height: float
    bottom: float = 0.0

    @property
    def z_min(self) -> float:
        return self.z_center - self.width / 2

    @property
    def z_max(self) -> float:
        return self.z_center + self.width / 2

    @property
    def top(self) -> float:
        return self.bottom + self.height


def build_opening_cuts(placements: Iterable[WindowPlacement]) -> list[OpeningCut]:
    """One cut per placement, in order."""
    return [
        OpeningCut(
            outer_plane_x=p.outer_plane_x,
            z_center=p.z_center,
            width=p.width,
            height=p.height,
            bottom=p.bottom,
        )
        for p in placements
    ]


@dataclass(frozen=True)
class FacadePlan:
    """Everything resolved for one facade before meshes are built."""

    ctx: FacadeContext
    profile: FacadeProfile
    placements: tuple[WindowPlacement, ...]
    opening_cuts: tuple[OpeningCut, ...]

    @property
    def facade(self) -> FacadeSide:
        return self.ctx.facade


def build_facade_plan(
    facade: FacadeSide | str,
    specs: Sequence[WindowSpec],
    profile: FacadeProfile,
    *,
    convention: FacadeConvention = FacadeConvention.ARCHITECTURAL,
    dimensions: WindowDimensions | None = None,
) -> FacadePlan:
    """Resolve the context, placements and opening cuts of one facade."""
    ctx = create_facade_context(facade, convention)
    placements = plan_window_placements(ctx, specs, profile, dimensions)
    return FacadePlan(
        ctx=ctx,
        profile=profile,
        placements=tuple(placements),
        opening_cuts=tuple(build_opening_cuts(placements)),
    )
