"""Facade context resolution.

Maps an architectural facade identifier (left/right as seen by the architect,
independent of world orientation) to the world-space conventions every
builder needs: which way is outward along X, which way is interior, and on
which world side a sill overhang projects.

Examples:
    >>> ctx = create_facade_context(FacadeSide.ARCHITECTURAL_LEFT)
    >>> ctx.outward, ctx.interior, ctx.sill_side
    (1, -1, 'right')
    >>> create_facade_context("architecturalRight").outward
    -1
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Literal

WorldSide = Literal["left", "right"]


class FacadeSide(Enum):
    """Architectural facade identifiers."""

    ARCHITECTURAL_LEFT = "architecturalLeft"
    ARCHITECTURAL_RIGHT = "architecturalRight"

    @property
    def opposite(self) -> FacadeSide:
        if self is FacadeSide.ARCHITECTURAL_LEFT:
            return FacadeSide.ARCHITECTURAL_RIGHT
        return FacadeSide.ARCHITECTURAL_LEFT

    @classmethod
    def parse(cls, value: FacadeSide | str) -> FacadeSide:
        """Accept an enum member or one of its string spellings.

        ``"left"`` and ``"right"`` are read as the architectural sides.

        Raises:
            ValueError: For any other identifier.
        """
        if isinstance(value, FacadeSide):
            return value
        key = value.strip()
        for member in cls:
            if key == member.value or key.upper() == member.name:
                return member
        short = {"left": cls.ARCHITECTURAL_LEFT, "right": cls.ARCHITECTURAL_RIGHT}
        if key.lower() in short:
            return short[key.lower()]
        msg = f"facade must be one of {[m.value for m in cls]} (or 'left'/'right'), got '{value}'"
        raise ValueError(msg)


class FacadeConvention(Enum):
    """How architectural sides map onto world X.

    ``ARCHITECTURAL`` puts the architectural left facade on world +X.
    ``VIEWER`` is the mirrored mapping used when the house is laid out as
    seen from the street, with the left facade on world -X.
    """

    ARCHITECTURAL = "architectural"
    VIEWER = "viewer"


_OUTWARD: dict[FacadeConvention, dict[FacadeSide, Literal[1, -1]]] = {
    FacadeConvention.ARCHITECTURAL: {
        FacadeSide.ARCHITECTURAL_LEFT: 1,
        FacadeSide.ARCHITECTURAL_RIGHT: -1,
    },
    FacadeConvention.VIEWER: {
        FacadeSide.ARCHITECTURAL_LEFT: -1,
        FacadeSide.ARCHITECTURAL_RIGHT: 1,
    },
}


def world_side_from_outward(outward: int) -> WorldSide:
    """World side of the wall whose outward normal points along ``outward`` X.

    Examples:
        >>> world_side_from_outward(1)
        'right'
        >>> world_side_from_outward(-1)
        'left'
    """
    return "right" if outward == 1 else "left"


@dataclass(frozen=True, slots=True)
class FacadeContext:
    """World-space conventions for one facade.

    Attributes:
        facade: The architectural side this context describes.
        outward: +1 when the facade's outward normal points to world +X,
            -1 when it points to world -X.
        convention: The mapping the sign was derived with.
    """

    facade: FacadeSide
    outward: Literal[1, -1]
    convention: FacadeConvention = FacadeConvention.ARCHITECTURAL

    @property
    def interior(self) -> int:
        """Direction from the outer face into the building along X."""
        return -self.outward

    @property
    def sill_side(self) -> WorldSide:
        """World side a sill overhang projects towards (away from the building)."""
        return world_side_from_outward(self.outward)

    @property
    def world_side(self) -> WorldSide:
        return world_side_from_outward(self.outward)


def create_facade_context(
    facade: FacadeSide | str,
    convention: FacadeConvention = FacadeConvention.ARCHITECTURAL,
) -> FacadeContext:
    """Resolve the context for ``facade`` under ``convention``.

    Every legal identifier maps to a context and opposite sides always get
    opposite signs.
    """
    side = FacadeSide.parse(facade)
    return FacadeContext(facade=side, outward=_OUTWARD[convention][side], convention=convention)
