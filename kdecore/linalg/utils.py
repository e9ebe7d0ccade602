# linalg/utils.py

from __future__ import annotations

import logging

import numpy as np
from typing import Any

from .matrix import Matrix2
from ..custom_types import ArrayLike
from ..errors import BandwidthError
from ..array_backend.utils import _ensure_real_scalar, _ensure_vector

LOGGER = logging.getLogger(__name__)


def add_diag_jitter(matrix: Matrix2 | ArrayLike, jitter: float | ArrayLike = 1e-6) -> Matrix2:
    """
    Return a new matrix = matrix + diag(jitter).

    Args:
      matrix: `Matrix2` or any (2, 2) array-like.
      jitter: scalar, or array-like of length 2 (interpreted elementwise).

    Returns:
      Matrix2 with jitter added to the diagonal.

    Raises:
        ValueError on invalid shapes or non-real jitter values.
    """
    M = Matrix2.from_array(matrix)

    if np.ndim(jitter) == 0:
        j = _ensure_real_scalar(jitter)
        j0, j1 = j, j
    else:
        j0, j1 = _ensure_vector(jitter, length=2)

    (a, b), (c, d) = M.rows
    return Matrix2((a + j0, b), (c, d + j1))


def symmetrize_pd(matrix: Matrix2 | ArrayLike,
                  *,
                  symmetrize: bool = True,
                  add_jitter: bool = True,
                  jitter: float = 1e-6) -> Matrix2:
    """
    Modify a 2x2 matrix to promote (but not guarantee) numerical positive
    definiteness.

    Optionally symmetrize the matrix by taking the average of the matrix with
    its transpose. In addition, optionally add a constant to the diagonal
    of the matrix. If both true (default), performs these two steps in this
    order. Useful for regularizing a bandwidth matrix rejected by
    `check_positive_definite`.

    Args:
    matrix : Matrix2 or array-like, shape (2, 2)
        Input matrix intended to be positive definite.
    jitter : float, default 1e-6
        Constant to add to matrix diagonal.

    Returns:
        Matrix2, the modified matrix.
    """
    C = Matrix2.from_array(matrix)

    if symmetrize:
        C = 0.5 * (C + C.T)
    if add_jitter:
        C = add_diag_jitter(C, jitter=jitter)

    return C


def check_positive_definite(matrix: Any, *, atol: float = 1e-12) -> Matrix2:
    """Validate a bandwidth matrix and return it as a `Matrix2`.

    A 2x2 matrix is symmetric positive definite exactly when it is symmetric,
    its leading entry is positive and its determinant is positive.

    Raises:
        BandwidthError: if any of the three conditions fails. NaN entries
            fail as well.
    """
    M = Matrix2.from_array(matrix)
    det = M.det()
    if not M.is_symmetric(atol):
        LOGGER.debug("Rejecting asymmetric bandwidth %r", M)
        raise BandwidthError(f"Bandwidth matrix must be symmetric. Got {M!r}.")
    if not (M[0, 0] > 0.0 and det > 0.0):
        LOGGER.debug("Rejecting bandwidth %r with det=%g", M, det)
        raise BandwidthError(
            f"Bandwidth matrix must be positive definite (det > 0). Got {M!r} with det={det!r}."
        )
    return M
