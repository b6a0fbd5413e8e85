"""Tests for facade profiles and envelope silhouette lookups."""

from __future__ import annotations

import logging

import pytest

from facadekit.geometry import to_points
from facadekit.profile import (
    FacadeProfile,
    ProfileSegment,
    outer_wall_x_at_z,
    wall_planes_at_z,
    x_extremes_at_z,
)

_TOL = 1e-9


def _close(a: float, b: float, tol: float = _TOL) -> bool:
    return abs(a - b) < tol


# ---------------------------------------------------------------------------
# Segments and resolution
# ---------------------------------------------------------------------------


class TestProfileSegment:
    def test_properties(self) -> None:
        seg = ProfileSegment(4.0, 8.0, 4.1)
        assert seg.span == 4.0
        assert seg.z_mid == 6.0
        assert seg.contains(4.0)
        assert seg.contains(8.0)
        assert not seg.contains(8.01)

    def test_inverted_range_rejected(self) -> None:
        with pytest.raises(ValueError, match="z_end"):
            ProfileSegment(5.0, 4.0, 1.0)


class TestResolvePlaneX:
    def test_inside_first_segment(self, stepped_profile: FacadeProfile) -> None:
        assert stepped_profile.resolve_plane_x(2.0) == 4.8

    def test_shared_boundary_goes_to_first_match(self, stepped_profile: FacadeProfile) -> None:
        assert stepped_profile.resolve_plane_x(4.0) == 4.8
        assert stepped_profile.resolve_plane_x(8.45) == 4.1

    def test_middle_and_last(self, stepped_profile: FacadeProfile) -> None:
        assert stepped_profile.resolve_plane_x(6.0) == 4.1
        assert stepped_profile.resolve_plane_x(10.0) == 3.5

    def test_out_of_range_clamps_to_last(self, stepped_profile: FacadeProfile) -> None:
        assert stepped_profile.resolve_plane_x(30.0) == 3.5
        assert stepped_profile.resolve_plane_x(-1.0) == 3.5

    def test_flat_profile_resolves_everywhere(self) -> None:
        profile = FacadeProfile.flat(4.8)
        for z in (-5.0, 0.0, 5.5, 100.0):
            assert profile.resolve_plane_x(z) == 4.8

    def test_empty_profile_rejected(self) -> None:
        with pytest.raises(ValueError, match="at least one segment"):
            FacadeProfile(())


class TestProfileShape:
    def test_extents(self, stepped_profile: FacadeProfile) -> None:
        assert stepped_profile.z_range == (0.0, 12.0)
        assert stepped_profile.min_plane_x == 3.5

    def test_steps(self, stepped_profile: FacadeProfile) -> None:
        steps = list(stepped_profile.steps())
        assert [(s.z, s.x_from, s.x_to) for s in steps] == [(4.0, 4.8, 4.1), (8.45, 4.1, 3.5)]

    def test_flat_has_no_steps(self, flat_profile: FacadeProfile) -> None:
        assert list(flat_profile.steps()) == []

    def test_mirrored(self, stepped_profile: FacadeProfile) -> None:
        mirrored = stepped_profile.mirrored()
        assert [s.plane_x for s in mirrored.segments] == [-4.8, -4.1, -3.5]
        assert mirrored.segments[1].id == "L_1"

    def test_from_points(self) -> None:
        polyline = to_points([(4.8, 0), (4.8, 4), (4.1, 4), (4.1, 8.45), (3.5, 8.45), (3.5, 12)])
        profile = FacadeProfile.from_points(polyline, id_prefix="L_")
        assert profile is not None
        assert [(s.z_start, s.z_end, s.plane_x) for s in profile.segments] == [
            (0.0, 4.0, 4.8),
            (4.0, 8.45, 4.1),
            (8.45, 12.0, 3.5),
        ]
        assert [s.id for s in profile.segments] == ["L_0", "L_1", "L_2"]

    def test_from_points_without_vertical_run(self) -> None:
        assert FacadeProfile.from_points(to_points([(0, 1), (5, 1)])) is None


# ---------------------------------------------------------------------------
# Envelope silhouette
# ---------------------------------------------------------------------------


_L_SHAPE = to_points([(-5, 0), (5, 0), (5, 10), (-3, 10), (-3, 5), (-5, 5)])


class TestXExtremesAtZ:
    def test_crossing_edges(self) -> None:
        ext = x_extremes_at_z(_L_SHAPE, 7.5)
        assert ext is not None
        assert (ext.min_x, ext.max_x) == (-3.0, 5.0)

    def test_horizontal_edge_contributes_both_endpoints(self) -> None:
        ext = x_extremes_at_z(_L_SHAPE, 5.0)
        assert ext is not None
        assert ext.min_x == -5.0
        assert ext.max_x == 5.0
        assert -3.0 in ext.xs

    def test_outside_returns_none(self) -> None:
        assert x_extremes_at_z(_L_SHAPE, 20.0) is None


class TestOuterWallXAtZ:
    def test_outward_picks_side(self) -> None:
        assert outer_wall_x_at_z(_L_SHAPE, 1, 7.5) == 5.0
        assert outer_wall_x_at_z(_L_SHAPE, -1, 7.5) == -3.0
        assert outer_wall_x_at_z(_L_SHAPE, -1, 2.5) == -5.0

    def test_sloped_edge_interpolates(self) -> None:
        trapezoid = to_points([(-4, 0), (4, 0), (3, 10), (-3, 10)])
        x = outer_wall_x_at_z(trapezoid, 1, 5.0)
        assert x is not None
        assert _close(x, 3.5)

    def test_no_crossing_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.WARNING, logger="facadekit.profile"):
            assert outer_wall_x_at_z(_L_SHAPE, 1, 42.0) is None
        assert "No wall intersection" in caplog.text

    def test_wall_planes(self) -> None:
        planes = wall_planes_at_z(_L_SHAPE, 1, 2.0, 0.35)
        assert planes is not None
        assert planes.outer_x == 5.0
        assert _close(planes.inner_x, 4.65)
        left = wall_planes_at_z(_L_SHAPE, -1, 2.0, 0.35)
        assert left is not None
        assert _close(left.inner_x, -4.65)
        assert wall_planes_at_z(_L_SHAPE, 1, -3.0, 0.35) is None


class TestFromFootprint:
    def test_flank_runs(self) -> None:
        right = FacadeProfile.from_footprint(_L_SHAPE, -1, id_prefix="R_")
        assert right is not None
        assert [(s.z_start, s.z_end, s.plane_x, s.id) for s in right.segments] == [
            (0.0, 5.0, -5.0, "R_0"),
            (5.0, 10.0, -3.0, "R_1"),
        ]
        left = FacadeProfile.from_footprint(_L_SHAPE, 1)
        assert left is not None
        assert [(s.z_start, s.z_end, s.plane_x) for s in left.segments] == [(0.0, 10.0, 5.0)]

    def test_stepped_flank_of_reference_footprint(self) -> None:
        ring = to_points([
            (-4.8, 0), (4.8, 0), (4.8, 4), (4.1, 4), (4.1, 8.45),
            (3.5, 8.45), (3.5, 15), (-4.1, 15), (-4.1, 4), (-4.8, 4),
        ])
        profile = FacadeProfile.from_footprint(ring, -1)
        assert profile is not None
        assert [(s.z_start, s.z_end, s.plane_x) for s in profile.segments] == [(0.0, 4.0, -4.8), (4.0, 15.0, -4.1)]
        assert profile.resolve_plane_x(5.5) == -4.1

    def test_sloped_flank_has_no_runs(self) -> None:
        trapezoid = to_points([(-4, 0), (4, 0), (3, 10), (-3, 10)])
        assert FacadeProfile.from_footprint(trapezoid, 1) is None
