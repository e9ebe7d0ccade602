# linalg/matrix.py
"""Fixed-size 2x2 algebra used by the bivariate kernel.

The matrices involved are always 2x2, so determinant, inverse and products
are written out in closed form instead of going through `numpy.linalg`.
`Matrix2` and `Vector2` are immutable values; every operation returns a new
object.
"""
from __future__ import annotations

import logging
from typing import Any, NamedTuple, Tuple

import numpy as np

from ..custom_types import Array, ArrayLike
from ..errors import SingularMatrixError
from ..array_backend.utils import _ensure_real_scalar, _ensure_square_matrix, _ensure_vector

__all__ = [
    "SINGULAR_RTOL",
    "Vector2",
    "Matrix2",
    "Transpose",
    "quadratic_form",
]

LOGGER = logging.getLogger(__name__)

# Relative tolerance below which a determinant counts as zero.
SINGULAR_RTOL = 4.0 * np.finfo(float).eps


class Vector2(NamedTuple):
    """A 2-D point or displacement."""
    x: float
    y: float

    @classmethod
    def coerce(cls, value: Any) -> Vector2:
        """Convert a pair, length-2 array or `Vector2` into a `Vector2` of floats."""
        if isinstance(value, Vector2):
            return value
        v = _ensure_vector(value, length=2, copy=False)
        return cls(float(v[0]), float(v[1]))

    def __sub__(self, other: Any) -> Vector2:  # type: ignore[override]
        other = Vector2.coerce(other)
        return Vector2(self.x - other.x, self.y - other.y)

    def __add__(self, other: Any) -> Vector2:  # type: ignore[override]
        other = Vector2.coerce(other)
        return Vector2(self.x + other.x, self.y + other.y)

    def __mul__(self, scalar: Any) -> Vector2:  # type: ignore[override]
        if np.ndim(scalar) != 0 or isinstance(scalar, (Matrix2, Transpose)):
            return NotImplemented
        s = _ensure_real_scalar(scalar)
        return Vector2(self.x * s, self.y * s)

    __rmul__ = __mul__


class Matrix2:
    """
    Immutable 2x2 real matrix ``[[a, b], [c, d]]``.

    Built from two row tuples::

        h = Matrix2((2.0, 0.3), (0.3, 0.5))

    Supports ``m @ v`` (matrix-vector), ``m @ n`` (matrix-matrix),
    ``m * s`` (scaling), ``m + n`` and ``m - n``.
    """

    __slots__ = ("_a", "_b", "_c", "_d")

    def __init__(self, row0: Tuple[float, float], row1: Tuple[float, float]):
        a, b = _ensure_vector(row0, length=2, copy=False)
        c, d = _ensure_vector(row1, length=2, copy=False)
        object.__setattr__(self, "_a", float(a))
        object.__setattr__(self, "_b", float(b))
        object.__setattr__(self, "_c", float(c))
        object.__setattr__(self, "_d", float(d))

    def __setattr__(self, name: str, value: Any) -> None:
        raise AttributeError("Matrix2 is immutable")

    @classmethod
    def identity(cls) -> Matrix2:
        return cls((1.0, 0.0), (0.0, 1.0))

    @classmethod
    def from_array(cls, matrix: ArrayLike) -> Matrix2:
        """Build from any (2, 2) array-like. A `Matrix2` is returned unchanged."""
        if isinstance(matrix, Matrix2):
            return matrix
        M = _ensure_square_matrix(matrix, n=2, copy=False)
        return cls((M[0, 0], M[0, 1]), (M[1, 0], M[1, 1]))

    # ------------------------------------------------------------------
    # accessors

    @property
    def rows(self) -> Tuple[Tuple[float, float], Tuple[float, float]]:
        return (self._a, self._b), (self._c, self._d)

    def to_array(self) -> Array:
        return np.array(self.rows, dtype=float)

    def __array__(self, dtype=None, copy=None) -> Array:
        arr = self.to_array()
        return arr if dtype is None else arr.astype(dtype)

    def __getitem__(self, index: Tuple[int, int]) -> float:
        i, j = index
        return self.rows[i][j]

    # ------------------------------------------------------------------
    # algebra

    def det(self) -> float:
        return self._a * self._d - self._b * self._c

    def is_singular(self, rtol: float = SINGULAR_RTOL) -> bool:
        """True if the determinant is zero up to `rtol` relative to its terms."""
        det = self.det()
        scale = max(abs(self._a * self._d), abs(self._b * self._c))
        return det == 0.0 or abs(det) <= rtol * scale

    def inverse(self, *, rtol: float = SINGULAR_RTOL) -> Matrix2:
        """
        Return the inverse ``(1/det) * [[d, -b], [-c, a]]``.

        Raises:
            SingularMatrixError: if the determinant is zero or numerically
                indistinguishable from zero.
        """
        if self.is_singular(rtol):
            LOGGER.debug("Refusing to invert singular matrix %r (det=%g)", self, self.det())
            raise SingularMatrixError(f"Matrix is singular (det={self.det()!r}): {self!r}")
        det = self.det()
        return Matrix2(
            (self._d / det, -self._b / det),
            (-self._c / det, self._a / det),
        )

    def transpose(self) -> Matrix2:
        return Matrix2((self._a, self._c), (self._b, self._d))

    @property
    def T(self) -> Matrix2:
        return self.transpose()

    def is_symmetric(self, atol: float = 0.0) -> bool:
        return abs(self._b - self._c) <= atol

    def __matmul__(self, other: Any):
        if isinstance(other, Matrix2):
            (e, f), (g, h) = other.rows
            return Matrix2(
                (self._a * e + self._b * g, self._a * f + self._b * h),
                (self._c * e + self._d * g, self._c * f + self._d * h),
            )
        try:
            v = Vector2.coerce(other)
        except (TypeError, ValueError):
            return NotImplemented
        return Vector2(self._a * v.x + self._b * v.y, self._c * v.x + self._d * v.y)

    def __mul__(self, scalar: Any) -> Matrix2:
        if isinstance(scalar, (Matrix2, Transpose)) or np.ndim(scalar) != 0:
            return NotImplemented
        s = _ensure_real_scalar(scalar)
        return Matrix2((self._a * s, self._b * s), (self._c * s, self._d * s))

    __rmul__ = __mul__

    def __add__(self, other: Any) -> Matrix2:
        if not isinstance(other, Matrix2):
            return NotImplemented
        return Matrix2((self._a + other._a, self._b + other._b),
                       (self._c + other._c, self._d + other._d))

    def __sub__(self, other: Any) -> Matrix2:
        if not isinstance(other, Matrix2):
            return NotImplemented
        return Matrix2((self._a - other._a, self._b - other._b),
                       (self._c - other._c, self._d - other._d))

    def __neg__(self) -> Matrix2:
        return self * -1.0

    # ------------------------------------------------------------------
    # value semantics

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, Matrix2):
            return NotImplemented
        return self.rows == other.rows

    def __hash__(self) -> int:
        return hash(self.rows)

    def __repr__(self) -> str:
        return f"Matrix2({self.rows[0]!r}, {self.rows[1]!r})"

    def __reduce__(self):
        return (Matrix2, self.rows)


class Transpose:
    """Row-vector wrapper so ``Transpose(u) * v`` reads as ``uᵗ v``."""

    __slots__ = ("vector",)

    def __init__(self, vector: Any):
        self.vector = Vector2.coerce(vector)

    def __mul__(self, other: Any):
        if isinstance(other, Matrix2):
            # uᵗ M is a row vector
            (a, b), (c, d) = other.rows
            u = self.vector
            return Transpose(Vector2(u.x * a + u.y * c, u.x * b + u.y * d))
        try:
            v = Vector2.coerce(other)
        except (TypeError, ValueError):
            return NotImplemented
        return self.vector.x * v.x + self.vector.y * v.y

    def __repr__(self) -> str:
        return f"Transpose({self.vector!r})"


def quadratic_form(x: Any, matrix: Matrix2) -> float:
    """Return ``xᵗ M x`` for a 2-vector `x`."""
    return Transpose(x) * (matrix @ x)
