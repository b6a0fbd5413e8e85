"""Dimensional configuration for house geometry.

All lengths are meters.  Every value object here is frozen and validated on
construction; build functions receive them explicitly instead of reading
module globals, so two houses with different dimensions can be generated in
the same process.
"""

from __future__ import annotations

from dataclasses import dataclass, fields

#: Coordinate tolerance for plane and depth matching.
PLANE_TOLERANCE = 0.01

#: Minimum absolute normal component for a triangle to count as facing an axis.
FACING_THRESHOLD = 0.85

#: How far the envelope silhouette must step in before it counts as a step.
STEP_MARGIN = 0.05


def cm_to_m(value: float) -> float:
    """Convert centimeters to meters.

    Examples:
        >>> cm_to_m(480)
        4.8
    """
    return value / 100


def _require_non_negative(obj: object) -> None:
    for f in fields(obj):  # type: ignore[arg-type]
        value = getattr(obj, f.name)
        if isinstance(value, (int, float)) and value < 0:
            msg = f"{type(obj).__name__}.{f.name} must be non-negative, got {value}"
            raise ValueError(msg)


@dataclass(frozen=True)
class WindowDimensions:
    """Fixed dimensions of window assemblies.

    Attributes:
        frame_depth: Frame thickness across the wall (along X for side walls).
        frame_border: Frame profile width around the glazing.
        glass_inset: Glass offset from the frame plane towards the interior.
        glass_thickness: Pane thickness.
        sill_depth: Sill projection depth.
        sill_height: Sill stone height.
        sill_overhang: Extra outward offset of the sill beyond the wall face.
        sill_width_margin: Extra sill length beyond the opening width.
        reveal_face: Jamb and head reveal face thickness before clamping.
        metal_band_depth: Depth of the mid metal band and the floor band.
        floor_band_height: Height of the floor-transition band.
        floor_band_outset: Outward offset of the floor band from the frame face.
        slate_band_height: Height of the slate band at the first-floor datum.
        slate_band_depth: Depth of the slate band.
        slate_band_width_margin: Extra slate band length beyond the opening.
        slate_band_offset: Outward offset of the slate band from the frame face.
        split_threshold: Opening height from which tall windows split.
        lower_glass_height: Height of the lower pane of a split window.
        mid_band_height: Height of the metal band between split panes.
        tall_front_offset: Forward shift applied to tall window centers.
        min_clear: Smallest clear size a reveal may shrink to.
        panel_plane_offset: Offset of the opening plane from the outer wall.
    """

    frame_depth: float = 0.08
    frame_border: float = 0.07
    glass_inset: float = 0.015
    glass_thickness: float = 0.01
    sill_depth: float = 0.18
    sill_height: float = 0.05
    sill_overhang: float = 0.02
    sill_width_margin: float = 0.04
    reveal_face: float = 0.05
    metal_band_depth: float = 0.02
    floor_band_height: float = 0.12
    floor_band_outset: float = 0.015
    slate_band_height: float = 0.08
    slate_band_depth: float = 0.02
    slate_band_width_margin: float = 0.06
    slate_band_offset: float = 0.02
    split_threshold: float = 4.8
    lower_glass_height: float = 2.45
    mid_band_height: float = 0.45
    tall_front_offset: float = 0.70
    min_clear: float = 0.01
    panel_plane_offset: float = 0.0

    def __post_init__(self) -> None:
        _require_non_negative(self)
        if self.min_clear <= 0:
            msg = f"min_clear must be positive, got {self.min_clear}"
            raise ValueError(msg)
        # the upper pane of a split window must keep a clear height
        lower_parts = self.lower_glass_height + self.mid_band_height
        if self.split_threshold < lower_parts + self.min_clear:
            msg = (
                f"split_threshold ({self.split_threshold}) must leave room for an upper pane above "
                f"lower_glass_height + mid_band_height ({lower_parts})"
            )
            raise ValueError(msg)


@dataclass(frozen=True)
class WallThickness:
    """Exterior and interior wall thickness."""

    exterior: float = 0.35
    interior: float = 0.14

    def __post_init__(self) -> None:
        if self.exterior <= 0 or self.interior <= 0:
            msg = f"wall thickness must be positive, got exterior={self.exterior}, interior={self.interior}"
            raise ValueError(msg)


@dataclass(frozen=True)
class LevelHeights:
    """Ceiling heights per story and the first-floor datum."""

    ground_ceiling: float = 2.6
    first_ceiling: float = 2.5
    first_floor: float = 2.6

    def __post_init__(self) -> None:
        if self.ground_ceiling <= 0 or self.first_ceiling <= 0:
            msg = "ceiling heights must be positive"
            raise ValueError(msg)
        if self.first_floor < 0:
            msg = f"first_floor must be non-negative, got {self.first_floor}"
            raise ValueError(msg)

    @property
    def first_top(self) -> float:
        """Top of the first-floor walls."""
        return self.first_floor + self.first_ceiling
