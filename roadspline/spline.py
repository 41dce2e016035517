"""
Natural cubic spline through ordered 2D control points.

The curve is parametrised uniformly: with ``N`` control points the parameter
range ``[0, 1]`` is split into ``N - 1`` segments of width ``h = 1/(N-1)``,
and segment ``i`` is, for each coordinate,

    p(t) = a[i] + b[i] (t - t_i) + c[i] (t - t_i)^2 + d[i] (t - t_i)^3

with ``t_i = i h``. The second derivative is zero at both ends.

State:
- Empty / Collecting: no valid fit, ``evaluate`` raises ``NotFittedError``.
- Fitted: after a successful ``fit()``. Adding a point or clearing drops the
  fit, so coefficients never outlive the point set they were built from.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, fields
from typing import List, NamedTuple, Optional, Tuple

import numpy as np

from roadspline.band_matrix import BandMatrix
from roadspline.exceptions import NotFittedError, SegmentIndexError
from roadspline.logging import LOG_DEBUG, LOG_WARN, timed
from roadspline.solver import solve
from roadspline.vector import Vector

DEFAULT_SAMPLING_DENSITY = 30


class Point2D(NamedTuple):
    x: float
    y: float


@dataclass(frozen=True)
class SplineCoefficients:
    """Per-segment polynomial coefficients for both coordinates.

    Each vector has one entry per control point. Only indices ``0..N-2`` of
    ``b`` and ``d`` are meaningful; the last entry stays zero.
    """

    ax: Vector
    bx: Vector
    cx: Vector
    dx: Vector
    ay: Vector
    by: Vector
    cy: Vector
    dy: Vector

    def clone(self) -> "SplineCoefficients":
        return SplineCoefficients(*(getattr(self, f.name).clone() for f in fields(self)))

    def is_finite(self) -> bool:
        return all(np.all(np.isfinite(getattr(self, f.name).to_array())) for f in fields(self))


class CubicSpline:
    """Smooth curve through control points appended in drawing order.

    Example:
        spline = CubicSpline()
        spline.add_point(10.0, 10.0)
        spline.add_point(400.0, 50.0)
        spline.add_point(600.0, 150.0)
        if spline.fit():
            polyline = spline.sample()
    """

    def __init__(
        self,
        pivot_tolerance: Optional[float] = None,
        sampling_density: int = DEFAULT_SAMPLING_DENSITY,
    ):
        """
        Args:
            pivot_tolerance: Passed to ``solve``; None keeps unguarded elimination.
            sampling_density: Samples per control point used by ``sample()``
                when no explicit step is given.
        """
        self._points: List[Point2D] = []
        self._coefficients: Optional[SplineCoefficients] = None
        self.pivot_tolerance = pivot_tolerance
        self.sampling_density = sampling_density

    # ------------------------------------------------------------------
    # Control points
    # ------------------------------------------------------------------

    def add_point(self, x: float, y: float) -> None:
        """Append a control point. Invalidates any existing fit."""
        self._points.append(Point2D(float(x), float(y)))
        if self._coefficients is not None:
            LOG_DEBUG(f"CubicSpline: point added after fit, {len(self._points)} points, refit required")
            self._coefficients = None

    def clear(self) -> None:
        """Remove all control points and any fit."""
        self._points = []
        self._coefficients = None

    def point_count(self) -> int:
        return len(self._points)

    def __len__(self) -> int:
        return len(self._points)

    def point(self, i: int) -> Optional[Point2D]:
        """Return control point ``i``, or None when out of range."""
        if i < 0 or i >= len(self._points):
            return None
        return self._points[i]

    def points(self) -> Tuple[Point2D, ...]:
        return tuple(self._points)

    @property
    def is_fitted(self) -> bool:
        return self._coefficients is not None

    @property
    def coefficients(self) -> Optional[SplineCoefficients]:
        """Copies of the fitted coefficient vectors, or None when unfitted."""
        if self._coefficients is None:
            return None
        return self._coefficients.clone()

    # ------------------------------------------------------------------
    # Fitting
    # ------------------------------------------------------------------

    @timed
    def fit(self) -> bool:
        """Compute the spline coefficients for the current control points.

        Returns:
            True on success. False when fewer than two points are present,
            or when the system has no finite solution (the unnormalised
            elimination underflows past a couple of hundred points). State
            is left untouched on failure.

        Raises:
            SingularMatrixError: If ``pivot_tolerance`` is set and the
                elimination meets a zero pivot.
        """
        n = len(self._points)
        if n < 2:
            LOG_DEBUG(f"CubicSpline.fit: need at least 2 points, have {n}")
            return False

        h = 1.0 / (n - 1)

        # a is the control point itself
        ax = Vector.from_values(p.x for p in self._points)
        ay = Vector.from_values(p.y for p in self._points)

        # Natural boundary rows at both ends, (h, 4h, h) inside
        A = BandMatrix(n)
        A.set(0, 0, 1.0)
        A.set(n - 1, n - 1, 1.0)
        for i in range(1, n - 1):
            A.set(i, i - 1, h)
            A.set(i, i, 4 * h)
            A.set(i, i + 1, h)

        b0 = self._curvature_rhs(ax, h)
        b1 = self._curvature_rhs(ay, h)

        cx = solve(A, b0, self.pivot_tolerance)
        cy = solve(A, b1, self.pivot_tolerance)

        dx = Vector(n)
        dy = Vector(n)
        bx = Vector(n)
        by = Vector(n)
        with np.errstate(invalid="ignore", over="ignore"):
            for i in range(n - 1):
                dx.set(i, (cx.get(i + 1) - cx.get(i)) / (3 * h))
                dy.set(i, (cy.get(i + 1) - cy.get(i)) / (3 * h))
                bx.set(i, (ax.get(i + 1) - ax.get(i)) / h - h * (cx.get(i + 1) + 2 * cx.get(i)) / 3)
                by.set(i, (ay.get(i + 1) - ay.get(i)) / h - h * (cy.get(i + 1) + 2 * cy.get(i)) / 3)

        coefficients = SplineCoefficients(ax, bx, cx, dx, ay, by, cy, dy)
        if not coefficients.is_finite():
            LOG_WARN(f"CubicSpline.fit: non-finite coefficients for {n} points")
            return False

        self._coefficients = coefficients
        LOG_DEBUG(f"CubicSpline.fit: fitted {n - 1} segments")
        return True

    @staticmethod
    def _curvature_rhs(a: Vector, h: float) -> Vector:
        n = a.dim()
        rhs = Vector(n)
        for i in range(1, n - 1):
            rhs.set(i, 3 / h * (a.get(i + 1) - a.get(i)) - 3 / h * (a.get(i) - a.get(i - 1)))
        return rhs

    # ------------------------------------------------------------------
    # Evaluation
    # ------------------------------------------------------------------

    def evaluate(self, t: float) -> Point2D:
        """Return the curve point at parameter ``t``.

        ``t`` is clamped to ``[0, 1]``; ``t = 1`` gives the last control point.

        Raises:
            NotFittedError: If there is no fit for the current points.
            ValueError: If ``t`` is NaN.
        """
        coeffs = self._coefficients
        n = len(self._points)
        if coeffs is None or n < 2:
            raise NotFittedError(n)

        if math.isnan(t):
            raise ValueError("t must be a number, got nan")
        if t < 0:
            t = 0.0
        elif t >= 1:
            t = 1.0

        idx = math.floor(t * (n - 1))
        if idx >= n:
            raise SegmentIndexError(idx, n)

        if idx == n - 1:
            # Zero offset on the last knot, b and d are unset there
            return Point2D(float(coeffs.ax.get(idx)), float(coeffs.ay.get(idx)))

        h = 1.0 / (n - 1)
        dt = t - h * idx
        px = coeffs.ax.get(idx) + coeffs.bx.get(idx) * dt + coeffs.cx.get(idx) * dt ** 2 + coeffs.dx.get(idx) * dt ** 3
        py = coeffs.ay.get(idx) + coeffs.by.get(idx) * dt + coeffs.cy.get(idx) * dt ** 2 + coeffs.dy.get(idx) * dt ** 3
        return Point2D(float(px), float(py))

    def interp(self, t: float) -> Optional[Point2D]:
        """Like ``evaluate`` but returns None when the curve is not fitted."""
        if not self.is_fitted:
            return None
        return self.evaluate(t)

    def sample(self, step: Optional[float] = None) -> np.ndarray:
        """Sample the curve at ``t = 0, step, 2*step, ...`` below 1.

        Args:
            step: Parameter increment. Defaults to
                ``1 / (point_count * sampling_density)``.

        Returns:
            Array of shape ``(m, 2)`` with x and y columns.
        """
        if not self.is_fitted:
            raise NotFittedError(len(self._points))
        if step is None:
            step = 1.0 / (len(self._points) * self.sampling_density)
        if step <= 0:
            raise ValueError(f"step must be > 0, got {step}")

        ts = np.arange(0.0, 1.0, step)
        return np.array([self.evaluate(t) for t in ts], dtype=float).reshape(-1, 2)

    def __repr__(self) -> str:
        state = "fitted" if self.is_fitted else "unfitted"
        return f"CubicSpline(points={len(self._points)}, {state})"
