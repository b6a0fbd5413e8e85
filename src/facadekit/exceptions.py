"""Custom exceptions for facadekit."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class FacadeKitError(Exception):
    """Base exception for all facadekit errors."""

    pass


class InvalidSillParametersError(FacadeKitError):
    """Raised when a sill is requested without a complete parameter set.

    A sill is either rear-facing (centered on a Z face) or side-facing
    (centered on an X face).  Anything else is a programming error.
    """

    def __init__(self, mesh_id: str, params: Any) -> None:
        self.mesh_id = mesh_id
        self.params = params
        super().__init__(
            f"Invalid sill params for '{mesh_id}': provide either a rear-facing or a side-facing "
            f"parameter set, got {type(params).__name__}"
        )


class InvalidFootprintError(FacadeKitError):
    """Raised when a footprint polygon cannot describe a building outline."""

    def __init__(self, reason: str, points: Sequence[Any] | None = None) -> None:
        self.reason = reason
        self.points = list(points) if points is not None else []
        msg = f"Invalid footprint: {reason}"
        if self.points:
            preview = ", ".join(str(p) for p in self.points[:6])
            msg += f"\nPoints: {preview}"
            if len(self.points) > 6:
                msg += f" ... and {len(self.points) - 6} more"
        super().__init__(msg)


class ShellBuildError(FacadeKitError):
    """Raised when an extruded wall shell cannot be triangulated."""

    def __init__(self, message: str, *, area: float | None = None) -> None:
        self.area = area
        msg = message
        if area is not None:
            msg += f" (region area {area:.6f})"
        super().__init__(msg)
