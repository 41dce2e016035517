"""
Banded tridiagonal matrix.

Only the sub, main and super diagonals are stored. Row ``i`` keeps the
entries of columns ``i-1, i, i+1`` in slots 0, 1 and 2. Every other entry is
an implicit zero: reading it returns 0 and writing it is a no-op.
"""

from __future__ import annotations

import numpy as np

from roadspline.exceptions import DimensionMismatchError, InvalidDimensionError
from roadspline.vector import Vector

BAND_WIDTH = 3


class BandMatrix:
    """Square tridiagonal matrix of dimension ``n``."""

    def __init__(self, n: int = 0):
        """Initialize an all-zero band matrix.

        Args:
            n (int): Matrix dimension, 0 allowed.
        """
        if n < 0:
            raise InvalidDimensionError(n)
        self._n = int(n)
        self._m = np.zeros((self._n, BAND_WIDTH))

    def dim(self) -> int:
        """Get the dimension of the matrix."""
        return self._n

    def _slot(self, i: int, j: int) -> int:
        """Storage slot of entry (i, j), or -1 when it is outside the band."""
        if i < 0 or j < 0 or i >= self._n or j >= self._n:
            return -1
        k = j - (i - 1)  # 0 sub, 1 main, 2 super
        if k < 0 or k >= BAND_WIDTH:
            return -1
        return k

    def get(self, i: int, j: int) -> float:
        """Get the element at (i, j); 0 outside the matrix or the band."""
        k = self._slot(i, j)
        if k < 0:
            return 0.0
        return self._m[i, k]

    def set(self, i: int, j: int, value: float) -> None:
        """Set the element at (i, j); ignored outside the matrix or the band."""
        k = self._slot(i, j)
        if k < 0:
            return
        self._m[i, k] = value

    def clone(self) -> "BandMatrix":
        m2 = BandMatrix(self._n)
        m2._m[:] = self._m
        return m2

    def multiply(self, v: Vector) -> Vector:
        """Return ``A @ v`` using only the stored diagonals.

        Raises:
            DimensionMismatchError: If ``v`` does not match the matrix dimension.
        """
        if v.dim() != self._n:
            raise DimensionMismatchError("multiply", self._n, v.dim())

        result = Vector(self._n)
        for i in range(self._n):
            y = 0.0
            for j in (-1, 0, 1):
                y += self.get(i, i + j) * v.get(i + j)
            result.set(i, y)
        return result

    def to_dense(self) -> np.ndarray:
        """Materialize the full ``n x n`` matrix (diagnostics only)."""
        dense = np.zeros((self._n, self._n))
        for i in range(self._n):
            for j in (i - 1, i, i + 1):
                if 0 <= j < self._n:
                    dense[i, j] = self.get(i, j)
        return dense

    def format(self, band_only: bool = False) -> str:
        """Render the matrix as text, one row per line.

        Args:
            band_only: If True, print the stored ``n x 3`` band instead of the
                full matrix.
        """
        rows = []
        for i in range(self._n):
            if band_only:
                values = self._m[i]
            else:
                values = [self.get(i, j) for j in range(self._n)]
            rows.append(", ".join(str(float(x)) for x in values))
        return "\n".join(rows)

    def __repr__(self) -> str:
        return f"BandMatrix(n={self._n})"
