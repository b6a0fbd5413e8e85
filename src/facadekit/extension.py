"""Side-wall extension locator.

An extension wing shows up as the narrowest run of a stepped side profile.
Where that run actually sits in X is read from the envelope silhouette at
the run's mid depth, because the profile may describe the opposite side of
a house whose envelope steps in on either flank.

The result is computed once per house and handed to the carver.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import PLANE_TOLERANCE, STEP_MARGIN
from .envelope import Envelope
from .profile import FacadeProfile, ProfileSegment

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ExtensionWall:
    """The located extension side wall: outer plane X over ``[z0, z1]``."""

    x: float
    z0: float
    z1: float

    @property
    def z_mid(self) -> float:
        return (self.z0 + self.z1) / 2


def narrowest_segment(profile: FacadeProfile, tolerance: float = PLANE_TOLERANCE) -> ProfileSegment:
    """The segment with the smallest plane X.

    Segments within *tolerance* of the minimum tie; ties go to the earliest
    start, then to the shortest span.
    """
    min_x = profile.min_plane_x
    candidates = [s for s in profile.segments if abs(s.plane_x - min_x) < tolerance]

    best = candidates[0]
    for seg in candidates[1:]:
        if abs(seg.z_start - best.z_start) > tolerance:
            if seg.z_start < best.z_start:
                best = seg
        elif seg.span < best.span:
            best = seg
    return best


def locate_extension_side_wall(
    profile: FacadeProfile | None,
    envelope: Envelope,
    *,
    flat_roof_depth: float = 3.0,
    step_margin: float = STEP_MARGIN,
) -> ExtensionWall | None:
    """Locate the extension side wall of *envelope* using *profile*.

    The chosen segment's Z range is kept.  Its X comes from the envelope
    slice at the segment's mid depth: the slice's right extreme when only
    the right flank steps in (by more than *step_margin*), the left extreme
    when only the left flank does.  Otherwise whichever slice extreme lies
    closer to the matching flat-roof extreme wins, right on a tie.  Without
    a slice the segment's own plane X is used.

    Returns:
        The located wall, or ``None`` when there is no profile.
    """
    if profile is None or not profile.segments:
        return None

    seg = narrowest_segment(profile)
    x = seg.plane_x
    slice_ = envelope.x_extremes_at_z(seg.z_mid)

    if slice_ is not None:
        right_steps_in = slice_.max_x < envelope.right_x - step_margin
        left_steps_in = slice_.min_x > envelope.left_x + step_margin

        if right_steps_in and not left_steps_in:
            x = slice_.max_x
        elif left_steps_in and not right_steps_in:
            x = slice_.min_x
        else:
            roof = envelope.flat_roof_polygon(flat_roof_depth)
            roof_min_x = min(p.x for p in roof)
            roof_max_x = max(p.x for p in roof)
            to_right = abs(slice_.max_x - roof_max_x)
            to_left = abs(slice_.min_x - roof_min_x)
            x = slice_.max_x if to_right <= to_left else slice_.min_x

    wall = ExtensionWall(x=x, z0=seg.z_start, z1=seg.z_end)
    logger.debug("Extension side wall at x=%.3f over z=[%.3f, %.3f]", wall.x, wall.z0, wall.z1)
    return wall
