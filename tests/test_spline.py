"""
Tests for CubicSpline.
"""

from __future__ import annotations

import numpy as np
import pytest

from roadspline.config import SolverConfig, SplineSettings
from roadspline.exceptions import NotFittedError, SingularMatrixError
from roadspline.spline import CubicSpline, Point2D


def _road(count: int, pivot_tolerance=None) -> CubicSpline:
    """Unfitted spline along a gently winding road of ``count`` points."""
    spline = CubicSpline(pivot_tolerance=pivot_tolerance)
    for i in range(count):
        spline.add_point(10.0 * i, 100.0 * np.sin(i / 5.0))
    return spline


class TestControlPoints:
    """Tests for point bookkeeping."""

    def test_empty(self, empty_spline):
        assert empty_spline.point_count() == 0
        assert len(empty_spline) == 0
        assert not empty_spline.is_fitted
        assert empty_spline.coefficients is None

    def test_add_point(self, empty_spline):
        empty_spline.add_point(1, 2)
        assert empty_spline.point_count() == 1
        assert empty_spline.point(0) == Point2D(1.0, 2.0)

    def test_point_out_of_range(self, empty_spline):
        empty_spline.add_point(1.0, 2.0)
        assert empty_spline.point(1) is None
        assert empty_spline.point(-1) is None

    def test_points_keep_order(self, demo_points):
        spline = CubicSpline()
        for x, y in demo_points:
            spline.add_point(x, y)
        assert [tuple(p) for p in spline.points()] == demo_points

    def test_points_are_immutable(self, two_point_spline):
        with pytest.raises(AttributeError):
            two_point_spline.point(0).x = 5.0

    def test_clear(self, demo_spline):
        demo_spline.clear()
        assert demo_spline.point_count() == 0
        assert not demo_spline.is_fitted


class TestFit:
    """Tests for fitting."""

    @pytest.mark.parametrize("count", [0, 1])
    def test_too_few_points(self, count):
        spline = CubicSpline()
        for i in range(count):
            spline.add_point(float(i), float(i))

        assert spline.fit() is False
        assert not spline.is_fitted
        assert spline.interp(0.5) is None
        with pytest.raises(NotFittedError):
            spline.evaluate(0.5)

    def test_fit_succeeds(self, demo_spline, demo_points):
        assert demo_spline.is_fitted
        coeffs = demo_spline.coefficients
        for vec in (coeffs.ax, coeffs.bx, coeffs.cx, coeffs.dx, coeffs.ay, coeffs.by, coeffs.cy, coeffs.dy):
            assert vec.dim() == len(demo_points)

    def test_a_is_control_points(self, demo_spline, demo_points):
        coeffs = demo_spline.coefficients
        np.testing.assert_array_equal(coeffs.ax.to_array(), [p[0] for p in demo_points])
        np.testing.assert_array_equal(coeffs.ay.to_array(), [p[1] for p in demo_points])

    def test_natural_boundary(self, demo_spline):
        coeffs = demo_spline.coefficients
        n = demo_spline.point_count()
        for c in (coeffs.cx, coeffs.cy):
            assert c.get(0) == pytest.approx(0.0, abs=1e-9)
            assert c.get(n - 1) == pytest.approx(0.0, abs=1e-9)

    def test_last_b_and_d_unused(self, demo_spline):
        coeffs = demo_spline.coefficients
        last = demo_spline.point_count() - 1
        assert coeffs.bx.get(last) == 0
        assert coeffs.dx.get(last) == 0

    def test_fit_is_idempotent(self, demo_spline):
        before = demo_spline.sample(0.01)
        assert demo_spline.fit()
        np.testing.assert_array_equal(demo_spline.sample(0.01), before)

    def test_add_point_invalidates_fit(self, two_point_spline):
        two_point_spline.add_point(20.0, 5.0)
        assert not two_point_spline.is_fitted
        assert two_point_spline.coefficients is None
        with pytest.raises(NotFittedError):
            two_point_spline.evaluate(0.5)

        assert two_point_spline.fit()
        assert two_point_spline.evaluate(1.0) == Point2D(20.0, 5.0)

    def test_pivot_guard_accepts_spline_system(self, demo_points):
        spline = CubicSpline(pivot_tolerance=1e-12)
        for x, y in demo_points:
            spline.add_point(x, y)
        assert spline.fit()

    @pytest.mark.parametrize("count", [20, 30, 50, 100])
    @pytest.mark.parametrize("tolerance", [1e-12, 1e-9])
    def test_pivot_guard_accepts_long_roads(self, count, tolerance):
        spline = _road(count, pivot_tolerance=tolerance)
        assert spline.fit()
        unguarded = _road(count)
        assert unguarded.fit()
        np.testing.assert_array_equal(spline.sample(0.01), unguarded.sample(0.01))

    def test_pivot_guard_from_default_settings(self):
        settings = SplineSettings(solver=SolverConfig(guard=True))
        spline = _road(60, pivot_tolerance=settings.solver_pivot_tolerance)
        assert spline.fit()
        assert np.all(np.isfinite(spline.sample(0.005)))

    def test_coefficients_are_copies(self, demo_spline):
        before = demo_spline.evaluate(0.3)
        coeffs = demo_spline.coefficients
        coeffs.cx.set(4, 1e6)
        coeffs.ax.set(4, -1e6)
        assert demo_spline.evaluate(0.3) == before
        assert demo_spline.coefficients.cx.get(4) != 1e6


class TestFitSizeLimit:
    """Rows are never normalised, so very long roads underflow."""

    def test_hundred_points_are_finite(self):
        spline = _road(100)
        assert spline.fit()
        assert np.all(np.isfinite(spline.sample(0.001)))

    def test_underflow_reports_failure(self):
        spline = _road(400)
        assert not spline.fit()
        assert not spline.is_fitted
        with pytest.raises(NotFittedError):
            spline.evaluate(0.5)

    def test_underflow_with_guard_raises(self):
        spline = _road(400, pivot_tolerance=1e-12)
        with pytest.raises(SingularMatrixError):
            spline.fit()
        assert not spline.is_fitted


class TestEvaluate:
    """Tests for curve evaluation."""

    def test_two_point_line(self, two_point_spline):
        start = two_point_spline.evaluate(0.0)
        assert start.x == pytest.approx(0.0)
        assert start.y == pytest.approx(0.0)

        mid = two_point_spline.evaluate(0.5)
        assert mid.x == pytest.approx(5.0)
        assert mid.y == pytest.approx(0.0)

        near_end = two_point_spline.evaluate(1.0 - 1e-9)
        assert near_end.x == pytest.approx(10.0, abs=1e-6)
        assert near_end.y == pytest.approx(0.0)

    def test_collinear_points_stay_collinear(self, collinear_points):
        spline = CubicSpline()
        for x, y in collinear_points:
            spline.add_point(x, y)
        assert spline.fit()

        for t in np.linspace(0.0, 1.0, 101, endpoint=False):
            p = spline.evaluate(t)
            assert p.y == pytest.approx(1.5 * p.x - 0.5, abs=1e-6)

    def test_passes_through_control_points(self, demo_spline, demo_points):
        n = len(demo_points)
        for i, (x, y) in enumerate(demo_points):
            p = demo_spline.evaluate(i / (n - 1))
            assert p.x == pytest.approx(x, abs=1e-6)
            assert p.y == pytest.approx(y, abs=1e-6)

    def test_endpoints(self, demo_spline, demo_points):
        assert demo_spline.evaluate(0.0) == Point2D(*demo_points[0])
        assert demo_spline.evaluate(1.0) == Point2D(*demo_points[-1])

        near_end = demo_spline.evaluate(1.0 - 1e-9)
        assert near_end.x == pytest.approx(demo_points[-1][0], abs=1e-4)
        assert near_end.y == pytest.approx(demo_points[-1][1], abs=1e-4)

    def test_clamping(self, demo_spline):
        assert demo_spline.evaluate(-3.0) == demo_spline.evaluate(0.0)
        assert demo_spline.evaluate(7.5) == demo_spline.evaluate(1.0)

    def test_continuity_at_knots(self, demo_spline):
        n = demo_spline.point_count()
        for i in range(1, n - 1):
            t = i / (n - 1)
            left = demo_spline.evaluate(t - 1e-9)
            right = demo_spline.evaluate(t + 1e-9)
            assert left.x == pytest.approx(right.x, abs=1e-4)
            assert left.y == pytest.approx(right.y, abs=1e-4)

    def test_evaluate_does_not_mutate(self, demo_spline):
        before = demo_spline.coefficients.bx.to_array()
        demo_spline.evaluate(0.37)
        np.testing.assert_array_equal(demo_spline.coefficients.bx.to_array(), before)

    def test_nan_parameter_rejected(self, demo_spline):
        with pytest.raises(ValueError):
            demo_spline.evaluate(float("nan"))

    def test_interp_matches_evaluate(self, demo_spline):
        assert demo_spline.interp(0.42) == demo_spline.evaluate(0.42)

    @pytest.mark.requires_scipy
    def test_matches_scipy_natural_spline(self, demo_spline, demo_points):
        interpolate = pytest.importorskip("scipy.interpolate")
        n = len(demo_points)
        knots = np.linspace(0.0, 1.0, n)
        pts = np.array(demo_points)
        ref_x = interpolate.CubicSpline(knots, pts[:, 0], bc_type="natural")
        ref_y = interpolate.CubicSpline(knots, pts[:, 1], bc_type="natural")

        for t in np.linspace(0.0, 0.999, 57):
            p = demo_spline.evaluate(t)
            assert p.x == pytest.approx(float(ref_x(t)), abs=1e-6)
            assert p.y == pytest.approx(float(ref_y(t)), abs=1e-6)


class TestSample:
    """Tests for polyline sampling."""

    def test_default_step(self, demo_spline):
        samples = demo_spline.sample()
        n = demo_spline.point_count()
        expected = len(np.arange(0.0, 1.0, 1.0 / (n * 30)))
        assert samples.shape == (expected, 2)

    def test_sampling_density(self, demo_points):
        spline = CubicSpline(sampling_density=2)
        for x, y in demo_points:
            spline.add_point(x, y)
        spline.fit()
        expected = len(np.arange(0.0, 1.0, 1.0 / (2 * len(demo_points))))
        assert spline.sample().shape == (expected, 2)

    def test_explicit_step(self, two_point_spline):
        samples = two_point_spline.sample(0.25)
        np.testing.assert_allclose(samples[:, 0], [0.0, 2.5, 5.0, 7.5], atol=1e-12)
        np.testing.assert_allclose(samples[:, 1], 0.0, atol=1e-12)

    def test_first_sample_is_first_point(self, demo_spline, demo_points):
        samples = demo_spline.sample()
        np.testing.assert_allclose(samples[0], demo_points[0])

    def test_invalid_step(self, two_point_spline):
        with pytest.raises(ValueError):
            two_point_spline.sample(0.0)

    def test_not_fitted(self, empty_spline):
        with pytest.raises(NotFittedError):
            empty_spline.sample()
