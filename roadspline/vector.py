"""
Fixed-size vector of reals with permissive index access.

Reads outside ``[0, n)`` return 0 and writes there are ignored. The band
matrix and the solver rely on this to treat out-of-band neighbours as zero.
"""

from __future__ import annotations

from typing import Iterable, NamedTuple

import numpy as np

from roadspline.exceptions import InvalidDimensionError
from roadspline.logging import LOG_DEBUG

DEFAULT_EPSILON = 1e-10


class EqualityResult(NamedTuple):
    """Outcome of ``Vector.equals``.

    ``equal`` only carries meaning when ``comparable`` is True.
    """

    comparable: bool
    equal: bool


class Vector:
    """Ordered sequence of ``n`` floats, fixed at construction."""

    def __init__(self, n: int = 0):
        if n < 0:
            raise InvalidDimensionError(n)
        self._n = int(n)
        self._v = np.zeros(self._n)

    @classmethod
    def from_values(cls, values: Iterable[float]) -> "Vector":
        data = np.array(list(values), dtype=float)
        v = cls(len(data))
        v._v[:] = data
        return v

    def dim(self) -> int:
        return self._n

    def __len__(self) -> int:
        return self._n

    def get(self, i: int) -> float:
        """Return entry ``i``, or 0 when ``i`` is out of range."""
        if i < 0 or i >= self._n:
            return 0.0
        return self._v[i]

    def set(self, i: int, value: float) -> None:
        """Set entry ``i``; out-of-range writes are ignored."""
        if i < 0 or i >= self._n:
            return
        self._v[i] = value

    def clone(self) -> "Vector":
        v2 = Vector(self._n)
        v2._v[:] = self._v
        return v2

    def equals(self, other: "Vector", epsilon: float = DEFAULT_EPSILON) -> EqualityResult:
        """Compare entry-wise within ``epsilon``.

        Args:
            other: Vector to compare against.
            epsilon: Largest allowed absolute difference per entry. A NaN
                entry never compares equal.

        Returns:
            EqualityResult. Vectors of different dimension are not comparable.
        """
        if self._n != other.dim():
            return EqualityResult(comparable=False, equal=False)

        for i in range(self._n):
            v1 = self._v[i]
            v2 = other.get(i)
            if not abs(v1 - v2) <= epsilon:
                LOG_DEBUG(f"Vector.equals: entry {i} differs, v1={v1}, v2={v2}")
                return EqualityResult(comparable=True, equal=False)

        return EqualityResult(comparable=True, equal=True)

    def to_array(self) -> np.ndarray:
        """Return a copy of the entries as a numpy array."""
        return self._v.copy()

    def format(self) -> str:
        return ", ".join(str(float(x)) for x in self._v)

    def __repr__(self) -> str:
        return f"Vector([{self.format()}])"
