"""Tests for the side-wall extension locator."""

from __future__ import annotations

from facadekit.envelope import Envelope
from facadekit.extension import ExtensionWall, locate_extension_side_wall, narrowest_segment
from facadekit.house import HouseSpec
from facadekit.profile import FacadeProfile, ProfileSegment

_RECT = Envelope.from_points([(-5, 0), (5, 0), (5, 10), (-5, 10)])
_LEFT_STEP = Envelope.from_points([(-5, 0), (5, 0), (5, 10), (-3, 10), (-3, 5), (-5, 5)])
_RIGHT_STEP = Envelope.from_points([(-5, 0), (5, 0), (5, 5), (3, 5), (3, 10), (-5, 10)])


class TestNarrowestSegment:
    def test_minimum_plane_x(self, stepped_profile: FacadeProfile) -> None:
        seg = narrowest_segment(stepped_profile)
        assert (seg.z_start, seg.z_end, seg.plane_x) == (8.45, 12.0, 3.5)

    def test_tie_goes_to_earliest_start(self) -> None:
        profile = FacadeProfile((
            ProfileSegment(0.0, 2.0, 3.0),
            ProfileSegment(2.0, 5.0, 4.0),
            ProfileSegment(5.0, 6.0, 3.0),
        ))
        seg = narrowest_segment(profile)
        assert seg.z_start == 0.0

    def test_tie_on_start_goes_to_shortest_span(self) -> None:
        profile = FacadeProfile((
            ProfileSegment(0.0, 3.0, 3.0),
            ProfileSegment(0.005, 1.0, 3.0),
        ))
        seg = narrowest_segment(profile)
        assert seg.z_end == 1.0

    def test_reference_house_tie(self, house_spec: HouseSpec) -> None:
        assert house_spec.extension_profile is not None
        seg = narrowest_segment(house_spec.extension_profile)
        assert (seg.z_start, seg.z_end) == (8.45, 12.0)


class TestLocateExtensionSideWall:
    def test_no_profile(self) -> None:
        assert locate_extension_side_wall(None, _RECT) is None

    def test_right_step_in(self) -> None:
        wall = locate_extension_side_wall(FacadeProfile((ProfileSegment(5.0, 10.0, 3.0),)), _RIGHT_STEP)
        assert wall == ExtensionWall(x=3.0, z0=5.0, z1=10.0)
        assert wall.z_mid == 7.5

    def test_left_step_in(self) -> None:
        wall = locate_extension_side_wall(FacadeProfile((ProfileSegment(5.0, 10.0, -3.0),)), _LEFT_STEP)
        assert wall is not None
        assert wall.x == -3.0

    def test_slice_overrides_profile_side(self) -> None:
        # the profile describes the opposite flank; the silhouette decides
        wall = locate_extension_side_wall(FacadeProfile((ProfileSegment(5.0, 10.0, 3.0),)), _LEFT_STEP)
        assert wall is not None
        assert wall.x == -3.0

    def test_no_step_tie_goes_right(self) -> None:
        wall = locate_extension_side_wall(FacadeProfile((ProfileSegment(0.0, 10.0, 5.0),)), _RECT)
        assert wall is not None
        assert wall.x == 5.0

    def test_slice_outside_footprint_uses_plane_x(self) -> None:
        wall = locate_extension_side_wall(FacadeProfile((ProfileSegment(20.0, 30.0, 2.5),)), _RECT)
        assert wall == ExtensionWall(x=2.5, z0=20.0, z1=30.0)

    def test_reference_house(self, house_spec: HouseSpec) -> None:
        wall = locate_extension_side_wall(house_spec.extension_profile, house_spec.envelope)
        assert wall == ExtensionWall(x=3.5, z0=8.45, z1=12.0)
