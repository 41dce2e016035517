"""
Random band systems and the solver round-trip check.

``round_trip_check`` solves random tridiagonal systems and verifies that
multiplying the solution back reproduces the right-hand side.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import numpy as np

from roadspline.band_matrix import BandMatrix
from roadspline.logging import LOG_DEBUG, LOG_WARN
from roadspline.solver import solve
from roadspline.vector import DEFAULT_EPSILON, Vector


def _rng(rng: Optional[np.random.Generator]) -> np.random.Generator:
    return rng if rng is not None else np.random.default_rng()


def random_band_matrix(
    n: int,
    low: float = -10.0,
    high: float = 10.0,
    rng: Optional[np.random.Generator] = None,
    diagonally_dominant: bool = True,
) -> BandMatrix:
    """Create a band matrix with uniform random entries in ``[low, high)``.

    With ``diagonally_dominant`` the main diagonal is replaced by a value whose
    magnitude exceeds the sum of the row's off-diagonal magnitudes, which keeps
    elimination without pivoting stable.
    """
    rng = _rng(rng)
    m = BandMatrix(n)
    for i in range(n):
        for j in (-1, 0, 1):
            m.set(i, i + j, rng.uniform(low, high))

        if diagonally_dominant:
            off = abs(m.get(i, i - 1)) + abs(m.get(i, i + 1))
            sign = 1.0 if rng.random() < 0.5 else -1.0
            m.set(i, i, sign * (off + rng.uniform(1.0, max(high - low, 2.0))))
    return m


def random_vector(
    n: int,
    low: float = -10.0,
    high: float = 10.0,
    rng: Optional[np.random.Generator] = None,
) -> Vector:
    return Vector.from_values(_rng(rng).uniform(low, high, size=n))


@dataclass
class RoundTripReport:
    trials: int
    failures: int
    max_error: float

    @property
    def passed(self) -> bool:
        return self.failures == 0


def round_trip_check(
    dimension: int,
    trials: int,
    epsilon: float = DEFAULT_EPSILON,
    seed: Optional[int] = None,
    tracker=None,
) -> RoundTripReport:
    """Check ``A @ solve(A, b) == b`` on random diagonally dominant systems.

    Args:
        dimension: Size of each random system.
        trials: Number of systems to solve.
        epsilon: Per-entry tolerance for the comparison.
        seed: Seed for reproducible systems.
        tracker: Optional ``TimeTracker`` receiving one timing per solve.

    Returns:
        RoundTripReport with the failure count and the largest residual.
    """
    rng = np.random.default_rng(seed)
    failures = 0
    max_error = 0.0

    for trial in range(trials):
        A = random_band_matrix(dimension, rng=rng)
        b = random_vector(dimension, rng=rng)

        if tracker is not None:
            with tracker.measure():
                x = solve(A, b)
        else:
            x = solve(A, b)

        y = A.multiply(x)
        error = float(np.max(np.abs(y.to_array() - b.to_array()))) if dimension else 0.0
        if not np.isfinite(error):
            error = float("inf")
        max_error = max(max_error, error)

        if not y.equals(b, epsilon).equal:
            failures += 1
            LOG_WARN(f"round_trip_check: trial {trial} residual {error:.3e} exceeds {epsilon}")

    LOG_DEBUG(f"round_trip_check: {trials} trials, {failures} failures, max error {max_error:.3e}")
    return RoundTripReport(trials=trials, failures=failures, max_error=max_error)
