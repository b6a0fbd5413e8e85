"""Shared fixtures for facadekit tests."""

from __future__ import annotations

import pytest

from facadekit import (
    Band,
    Envelope,
    FacadeProfile,
    HouseModel,
    HouseSpec,
    ProfileSegment,
    SimpleWindowSpec,
    build_house,
    default_house_spec,
)


@pytest.fixture
def stepped_profile() -> FacadeProfile:
    """The +X flank of the reference house: 4.8 m, 4.1 m, then 3.5 m."""
    return FacadeProfile((
        ProfileSegment(0.0, 4.0, 4.8, "L_0"),
        ProfileSegment(4.0, 8.45, 4.1, "L_1"),
        ProfileSegment(8.45, 12.0, 3.5, "L_2"),
    ))


@pytest.fixture
def flat_profile() -> FacadeProfile:
    """A single 10 m run at x = 4.8."""
    return FacadeProfile.flat(4.8, 0.0, 10.0)


@pytest.fixture
def square_envelope() -> Envelope:
    """A 4 x 4 m footprint centered on x = 0, front wall at z = 0."""
    return Envelope.from_points([(-2, 0), (2, 0), (2, 4), (-2, 4)])


@pytest.fixture
def door_spec() -> SimpleWindowSpec:
    return SimpleWindowSpec("W", width=1.0, z_center=5.5, ground_band=Band(0.0, 2.15))


@pytest.fixture
def house_spec() -> HouseSpec:
    return default_house_spec()


@pytest.fixture(scope="session")
def house() -> HouseModel:
    """The reference house, built once per session."""
    return build_house()
