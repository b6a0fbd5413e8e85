"""Tests for facadekit.geometry -- vectors and footprint helpers."""

from __future__ import annotations

import pytest

from facadekit.exceptions import InvalidFootprintError
from facadekit.geometry import (
    FootprintPoint,
    Vector3D,
    bounds_2d,
    close_ring,
    ensure_counter_clockwise,
    is_closed,
    signed_area,
    strip_closing_point,
    to_points,
    triangle_normal,
    validate_footprint,
)

_TOL = 1e-9


def _close(a: float, b: float, tol: float = _TOL) -> bool:
    return abs(a - b) < tol


# ---------------------------------------------------------------------------
# Vector3D
# ---------------------------------------------------------------------------


class TestVector3D:
    def test_arithmetic(self) -> None:
        a = Vector3D(1.0, 2.0, 3.0)
        b = Vector3D(0.5, 0.5, 0.5)
        assert a + b == Vector3D(1.5, 2.5, 3.5)
        assert a - b == Vector3D(0.5, 1.5, 2.5)
        assert a * 2 == Vector3D(2.0, 4.0, 6.0)
        assert 2 * a == a * 2
        assert -a == Vector3D(-1.0, -2.0, -3.0)

    def test_products(self) -> None:
        x = Vector3D(1, 0, 0)
        y = Vector3D(0, 1, 0)
        assert x.dot(y) == 0
        assert x.cross(y) == Vector3D(0, 0, 1)
        assert y.cross(x) == Vector3D(0, 0, -1)

    def test_normalize(self) -> None:
        v = Vector3D(3, 0, 4).normalize()
        assert _close(v.length(), 1.0)
        assert Vector3D(0, 0, 0).normalize() == Vector3D(0, 0, 0)

    def test_from_tuple_coerces_floats(self) -> None:
        v = Vector3D.from_tuple((1, 2, 3))
        assert v.as_tuple() == (1.0, 2.0, 3.0)
        assert isinstance(v.x, float)

    def test_immutable(self) -> None:
        v = Vector3D(1, 2, 3)
        with pytest.raises(AttributeError):
            v.x = 5  # type: ignore[misc]


class TestTriangleNormal:
    def test_counter_clockwise_faces_up(self) -> None:
        n = triangle_normal(Vector3D(0, 0, 0), Vector3D(1, 0, 0), Vector3D(0, 1, 0))
        assert n == Vector3D(0.0, 0.0, 1.0)

    def test_reversed_winding_flips(self) -> None:
        n = triangle_normal(Vector3D(0, 0, 0), Vector3D(0, 1, 0), Vector3D(1, 0, 0))
        assert _close(n.z, -1.0)

    def test_degenerate_is_zero(self) -> None:
        n = triangle_normal(Vector3D(0, 0, 0), Vector3D(1, 0, 0), Vector3D(2, 0, 0))
        assert n == Vector3D(0, 0, 0)


# ---------------------------------------------------------------------------
# Footprints
# ---------------------------------------------------------------------------


class TestFootprintRings:
    def test_to_points(self) -> None:
        pts = to_points([(0, 0), FootprintPoint(1.0, 2.0)])
        assert pts == [FootprintPoint(0.0, 0.0), FootprintPoint(1.0, 2.0)]

    def test_signed_area(self) -> None:
        square = to_points([(0, 0), (2, 0), (2, 2), (0, 2)])
        assert _close(signed_area(square), 8.0)
        assert _close(signed_area(list(reversed(square))), -8.0)

    def test_close_and_strip(self) -> None:
        pts = to_points([(0, 0), (1, 0), (1, 1)])
        closed = close_ring(pts)
        assert is_closed(closed)
        assert len(closed) == 4
        assert close_ring(closed) == closed
        assert strip_closing_point(closed) == pts
        assert strip_closing_point(pts) == pts

    def test_winding(self) -> None:
        cw = to_points([(0, 0), (0, 1), (1, 1), (1, 0)])
        assert signed_area(ensure_counter_clockwise(cw)) > 0
        ccw = ensure_counter_clockwise(cw)
        assert ensure_counter_clockwise(ccw) == ccw

    def test_bounds(self) -> None:
        assert bounds_2d(to_points([(-1, 3), (4, -2), (0, 0)])) == (-1.0, -2.0, 4.0, 3.0)

    def test_bounds_empty_raises(self) -> None:
        with pytest.raises(ValueError, match="empty"):
            bounds_2d([])


class TestValidateFootprint:
    def test_strips_closing_point(self) -> None:
        ring = validate_footprint(to_points([(0, 0), (1, 0), (1, 1), (0, 0)]))
        assert len(ring) == 3

    def test_too_few_points(self) -> None:
        with pytest.raises(InvalidFootprintError, match="three"):
            validate_footprint(to_points([(0, 0), (1, 0)]))

    def test_consecutive_duplicate(self) -> None:
        with pytest.raises(InvalidFootprintError, match="duplicate") as exc_info:
            validate_footprint(to_points([(0, 0), (1, 0), (1, 0), (1, 1)]))
        assert len(exc_info.value.points) == 4
