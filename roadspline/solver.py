"""
Tridiagonal linear solver.

Solves ``A x = b`` for a ``BandMatrix`` by forward elimination without
pivoting followed by back-substitution. Each row ``i`` is replaced by
``row_i * A[i-1, i-1] - row_{i-1} * A[i, i-1]``, which clears the
sub-diagonal and leaves an upper-bidiagonal system.

No pivoting is performed. A zero pivot yields ``inf``/``nan`` entries in the
result unless a ``pivot_tolerance`` is given, in which case
``SingularMatrixError`` is raised instead.

Rows are never normalised, so each eliminated row carries the product of all
earlier pivots. For the spline system that product shrinks like ``(3.7 h)^i``
and underflows to zero somewhere past two hundred points, at which point the
result is ``nan`` (or ``SingularMatrixError`` with the guard on). The guard
compares each pivot against the magnitude of the terms that formed it, not
against an absolute threshold, so the shrinking scale alone never trips it.
"""

from __future__ import annotations

from typing import Optional

import numpy as np

from roadspline.band_matrix import BandMatrix
from roadspline.exceptions import DimensionMismatchError, SingularMatrixError
from roadspline.logging import LOG_DEBUG, LOG_WARN
from roadspline.vector import Vector


def _row_scale(A: BandMatrix, i: int) -> float:
    return max(abs(A.get(i, i + j)) for j in (-1, 0, 1))


def _check_pivot(row: int, pivot: float, scale: float, tolerance: Optional[float]) -> None:
    if tolerance is not None and not abs(pivot) > tolerance * scale:
        LOG_WARN(f"solve: pivot {pivot} at row {row} within tolerance {tolerance} of row scale {scale}")
        raise SingularMatrixError(row, float(pivot), tolerance)


def solve(A: BandMatrix, b: Vector, pivot_tolerance: Optional[float] = None) -> Vector:
    """Solve ``A x = b`` for tridiagonal ``A``.

    Args:
        A: Coefficient matrix. Not modified.
        b: Right-hand side. Not modified.
        pivot_tolerance: If set, a pivot ``p`` with
            ``|p| <= pivot_tolerance * scale`` raises instead of producing
            non-finite entries. ``scale`` is the largest magnitude among the
            row terms combined into ``p``.

    Returns:
        Solution vector ``x`` of dimension ``A.dim()``.

    Raises:
        DimensionMismatchError: If ``A`` and ``b`` differ in dimension.
        SingularMatrixError: If ``pivot_tolerance`` is set and a pivot is
            numerically zero relative to its row.
    """
    if A.dim() != b.dim():
        LOG_DEBUG(f"solve: dimension mismatch A={A.dim()}, b={b.dim()}")
        raise DimensionMismatchError("solve", A.dim(), b.dim())

    n = A.dim()
    x = Vector(n)
    if n == 0:
        return x

    A2 = A.clone()
    b2 = b.clone()
    scale = _row_scale(A2, 0)

    with np.errstate(divide="ignore", invalid="ignore", over="ignore", under="ignore"):
        # Forward elimination
        for i in range(1, n):
            c1 = A2.get(i - 1, i - 1)
            c2 = -A2.get(i, i - 1)
            _check_pivot(i - 1, c1, scale, pivot_tolerance)
            scale = max(abs(c1) * _row_scale(A2, i), abs(c2) * _row_scale(A2, i - 1))

            for j in (-1, 0, 1):
                sweep = A2.get(i - 1, i + j)
                prev_val = A2.get(i, i + j)
                A2.set(i, i + j, prev_val * c1 + sweep * c2)

            b2.set(i, b2.get(i) * c1 + b2.get(i - 1) * c2)

        # Back-substitution
        last = np.float64(A2.get(n - 1, n - 1))
        _check_pivot(n - 1, last, scale, pivot_tolerance)
        x.set(n - 1, np.float64(b2.get(n - 1)) / last)

        for i in range(n - 2, -1, -1):
            numerator = np.float64(b2.get(i)) - A2.get(i, i + 1) * x.get(i + 1)
            x.set(i, numerator / np.float64(A2.get(i, i)))

    return x
