"""Tests for window specs, placement planning and opening cuts."""

from __future__ import annotations

import logging

import pytest

from facadekit.config import WindowDimensions
from facadekit.facade import FacadeConvention, FacadeSide, create_facade_context
from facadekit.profile import FacadeProfile
from facadekit.windows import (
    CLOSED_BAND,
    Band,
    EndFacade,
    EndOpening,
    OpeningCut,
    SimpleWindowSpec,
    TallWindowSpec,
    WindowKind,
    WindowSpec,
    build_facade_plan,
    build_opening_cuts,
    plan_window_placements,
)

_TOL = 1e-9


def _close(a: float, b: float, tol: float = _TOL) -> bool:
    return abs(a - b) < tol


# ---------------------------------------------------------------------------
# Specs
# ---------------------------------------------------------------------------


class TestBand:
    def test_open_and_closed(self) -> None:
        assert Band(0.0, 2.6).is_open
        assert Band(0.0, 2.6).height == 2.6
        assert not Band(4.1, 4.1).is_open
        assert Band(4.1, 4.1).height == 0.0
        assert not CLOSED_BAND.is_open

    def test_negative_rejected(self) -> None:
        with pytest.raises(ValueError, match="non-negative"):
            Band(-1.0, 2.0)


class TestWindowSpecs:
    def test_base_class_is_abstract(self) -> None:
        with pytest.raises(TypeError, match="abstract"):
            WindowSpec("X", 1.0, 5.0)  # type: ignore[abstract]

    def test_simple_height_is_ground_band(self) -> None:
        spec = SimpleWindowSpec("D", 1.0, 5.5, ground_band=Band(0.0, 2.15))
        assert spec.kind is WindowKind.SIMPLE
        assert spec.opening_height == 2.15
        assert spec.bottom == 0.0

    def test_tall_height_spans_both_bands(self) -> None:
        spec = TallWindowSpec("T", 1.1, 4.6, ground_band=Band(0.0, 2.45), first_floor_band=Band(2.45, 5.0))
        assert spec.kind is WindowKind.TALL
        assert spec.opening_height == 5.0

    def test_tall_first_floor_only(self) -> None:
        spec = TallWindowSpec("T", 0.9, 5.5, ground_band=Band(4.1, 4.1), first_floor_band=Band(4.1, 5.0))
        assert _close(spec.opening_height, 0.9)
        assert spec.bottom == 4.1

    def test_all_closed_bands_give_zero_height(self) -> None:
        assert TallWindowSpec("T", 1.0, 2.0).opening_height == 0.0
        assert SimpleWindowSpec("S", 1.0, 2.0).opening_height == 0.0

    def test_non_positive_width_rejected(self) -> None:
        with pytest.raises(ValueError, match="width"):
            SimpleWindowSpec("S", 0.0, 2.0)


class TestEndOpenings:
    def test_extent(self) -> None:
        opening = EndOpening("W", x_center=-3.1, width=1.1, bottom=0.7, height=1.6)
        assert _close(opening.x_min, -3.65)
        assert _close(opening.x_max, -2.55)
        assert _close(opening.top, 2.3)

    def test_invalid_rejected(self) -> None:
        with pytest.raises(ValueError, match="positive size"):
            EndOpening("W", 0.0, 0.0, 0.0, 1.0)
        with pytest.raises(ValueError, match="bottom"):
            EndOpening("W", 0.0, 1.0, -0.1, 1.0)

    def test_outward(self) -> None:
        assert EndFacade.FRONT.outward == -1
        assert EndFacade.REAR.outward == 1


# ---------------------------------------------------------------------------
# Placements
# ---------------------------------------------------------------------------


class TestPlanWindowPlacements:
    def test_simple_placement(self, flat_profile: FacadeProfile, door_spec: SimpleWindowSpec) -> None:
        ctx = create_facade_context("architecturalLeft")
        [placement] = plan_window_placements(ctx, [door_spec], flat_profile)
        assert placement.outer_plane_x == 4.8
        assert placement.z_center == 5.5
        assert placement.width == 1.0
        assert placement.height == 2.15
        assert placement.top == 2.15

    def test_tall_window_shifted_forward(self, stepped_profile: FacadeProfile) -> None:
        ctx = create_facade_context("architecturalLeft")
        spec = TallWindowSpec("T", 1.1, 4.6, ground_band=Band(0.0, 2.6), first_floor_band=Band(2.6, 5.0))
        [placement] = plan_window_placements(ctx, [spec], stepped_profile)
        assert _close(placement.z_center, 3.9)
        assert placement.outer_plane_x == 4.8
        assert placement.height == 5.0

    def test_order_preserved(self, stepped_profile: FacadeProfile) -> None:
        ctx = create_facade_context("architecturalLeft")
        specs = [SimpleWindowSpec(f"W{i}", 1.0, z) for i, z in enumerate((10.0, 2.0, 6.0))]
        placements = plan_window_placements(ctx, specs, stepped_profile)
        assert [p.spec.id for p in placements] == ["W0", "W1", "W2"]
        assert [p.outer_plane_x for p in placements] == [3.5, 4.8, 4.1]

    def test_panel_plane_offset(self, flat_profile: FacadeProfile, door_spec: SimpleWindowSpec) -> None:
        dims = WindowDimensions(panel_plane_offset=0.1)
        left = create_facade_context("architecturalLeft")
        [placement] = plan_window_placements(left, [door_spec], flat_profile, dims)
        assert _close(placement.outer_plane_x, 4.7)

    def test_debug_logging(
        self, flat_profile: FacadeProfile, door_spec: SimpleWindowSpec, caplog: pytest.LogCaptureFixture
    ) -> None:
        ctx = create_facade_context("architecturalLeft")
        with caplog.at_level(logging.DEBUG, logger="facadekit.windows"):
            plan_window_placements(ctx, [door_spec], flat_profile)
        assert "Placed W (simple) on architecturalLeft" in caplog.text


# ---------------------------------------------------------------------------
# Opening cuts and plans
# ---------------------------------------------------------------------------


class TestOpeningCuts:
    def test_one_cut_per_placement(self, flat_profile: FacadeProfile, door_spec: SimpleWindowSpec) -> None:
        ctx = create_facade_context("architecturalLeft")
        placements = plan_window_placements(ctx, [door_spec, door_spec], flat_profile)
        cuts = build_opening_cuts(placements)
        assert len(cuts) == 2
        assert cuts[0] == OpeningCut(outer_plane_x=4.8, z_center=5.5, width=1.0, height=2.15, bottom=0.0)

    def test_extent(self) -> None:
        cut = OpeningCut(outer_plane_x=4.1, z_center=6.0, width=0.9, height=0.9, bottom=4.1)
        assert _close(cut.z_min, 5.55)
        assert _close(cut.z_max, 6.45)
        assert _close(cut.top, 5.0)


class TestBuildFacadePlan:
    def test_plan(self, stepped_profile: FacadeProfile, door_spec: SimpleWindowSpec) -> None:
        plan = build_facade_plan("architecturalLeft", [door_spec], stepped_profile)
        assert plan.facade is FacadeSide.ARCHITECTURAL_LEFT
        assert plan.ctx.outward == 1
        assert len(plan.placements) == len(plan.opening_cuts) == 1
        assert plan.opening_cuts[0].outer_plane_x == 4.1

    def test_viewer_convention(self, flat_profile: FacadeProfile) -> None:
        plan = build_facade_plan(FacadeSide.ARCHITECTURAL_LEFT, [], flat_profile, convention=FacadeConvention.VIEWER)
        assert plan.ctx.outward == -1
        assert plan.placements == ()
