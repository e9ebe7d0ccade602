# array_backend/utils.py
"""
Utility functions for input canonicalization used by kdecore.

Points and bandwidths reach the kernels as Python floats, numpy scalars,
tuples, lists or small arrays. The helpers here convert them to one
canonical representation and raise early, with a readable message, when the
input cannot represent the requested value.

All functions that return arrays accept `copy: bool = True`. When `copy=True`
the returned array is guaranteed to be a different object from the input.
"""

from __future__ import annotations

import numpy as np
from typing import Any

from ..custom_types import Array, ArrayLike


def _is_array(x: Any) -> bool:
    return isinstance(x, np.ndarray)

def _as_array(x: Any) -> Array:
    try:
        return np.asarray(x)
    except Exception as e:
        raise TypeError(
            f"Could not convert input to array.\n"
            f"Input type: {type(x).__name__}\n"
            f"Input value: {repr(x)}\n"
            f"Original error: {e}"
        ) from e

def _is_numpy_scalar(x: Any) -> bool:
    """Return true if object is a numpy generic or Python scalar"""
    return np.isscalar(x) or isinstance(x, np.generic)


def _is_real_scalar(x: Any) -> bool:
    """Return true for real Python/numpy scalars and 0-D real arrays.

    Strings and booleans are not points, so they are rejected here even though
    numpy treats them as scalars.
    """
    if isinstance(x, (str, bytes, bool, np.bool_)):
        return False
    if _is_numpy_scalar(x):
        return not np.iscomplexobj(x) and np.issubdtype(np.asarray(x).dtype, np.number)
    if _is_array(x):
        return x.ndim == 0 and np.issubdtype(x.dtype, np.number) and not np.iscomplexobj(x)
    return False


def _ensure_real_scalar(x: Any) -> float:
    """
    Return a Python float for inputs that contain a single real value.

    Accepts:
      - Python scalars (int, float)
      - numpy scalar types (np.float64(...), np.int32(...))
      - 0-D numpy arrays (shape == ())

    Raises:
      ValueError if input contains more than one element or is complex.
      TypeError if input is not numeric.
    """
    # fast path for Python/numpy scalar
    if _is_numpy_scalar(x):
        # np.iscomplexobj handles python numbers too (returns False for ints/floats)
        if np.iscomplexobj(x):
            raise ValueError(f"_ensure_real_scalar: input is complex-valued: {x!r}")
        if isinstance(x, (str, bytes, bool, np.bool_)):
            raise TypeError(f"_ensure_real_scalar: input is not numeric: {x!r}")
        return float(x)

    arr = _as_array(x)
    if arr.size != 1:
        raise ValueError(f"_ensure_real_scalar: input must contain exactly one element; got size={arr.size}, shape={arr.shape}")
    if np.iscomplexobj(arr):
        raise ValueError(f"_ensure_real_scalar: input is complex-valued (shape={arr.shape}).")
    if not np.issubdtype(arr.dtype, np.number):
        raise TypeError(f"_ensure_real_scalar: input is not numeric (dtype={arr.dtype}).")

    return float(arr.reshape(()))


def _ensure_positive_scalar(x: Any, name: str = "value") -> float:
    """Return `x` as a float, raising ValueError unless it is strictly positive.

    NaN fails the check, since `NaN > 0` is False.
    """
    value = _ensure_real_scalar(x)
    if not value > 0.0:
        raise ValueError(f"{name} must be > 0. Got {value!r}.")
    return value


def _ensure_vector(x: ArrayLike, *, length: int | None = None, copy: bool = True) -> Array:
    """
    Ensure input is returned as a 1-D float vector of shape (n,).

    Accepts:
      - 1D arrays, tuples and lists -> (n,)
      - 2D arrays shaped (n,1) or (1,n) -> flattened
      - 0D scalar -> treated as length-1 vector (1,)

    Raises:
      ValueError for incompatible shapes (ndim > 2 or 2D with both dims >1)
      or when `length` is given and does not match.
    """
    arr = _as_array(x)

    if arr.ndim == 0:
        out = arr.reshape((1,))
    elif arr.ndim == 1:
        out = arr
    elif arr.ndim == 2:
        num_rows, num_cols = arr.shape
        if num_rows == 1 or num_cols == 1:
            out = np.ravel(arr)
        else:
            raise ValueError(f"_ensure_vector: 2D input has shape {arr.shape}, which is not a vector (expected (n,1) or (1,n)).")
    else:
        raise ValueError(f"_ensure_vector: input has too many dimensions (ndim={arr.ndim}).")

    if np.iscomplexobj(out):
        raise ValueError("_ensure_vector: input contains complex values.")

    # validate vector length
    if length is not None and out.size != length:
        raise ValueError(f"_ensure_vector: required length {length}. Got {out.size}.")

    out = out.astype(float, copy=False)
    return out.copy() if copy else out


def _ensure_square_matrix(x: ArrayLike, n: int | None = None, *, copy: bool = True) -> Array:
    """Ensure input is a 2d square float matrix, optionally of size (n, n)."""
    matrix = _as_array(x)
    if matrix.ndim != 2:
        raise ValueError(f"_ensure_square_matrix: Input cannot be interpreted as a 2D matrix. Shape {matrix.shape}")

    num_rows, num_cols = matrix.shape
    if num_rows != num_cols:
        raise ValueError(f"Array is not square. Shape {matrix.shape}")

    if n is not None and matrix.shape[0] != n:
        raise ValueError(f"Required matrix dimension {n}. Got {matrix.shape[0]}.")

    if np.iscomplexobj(matrix):
        raise ValueError("_ensure_square_matrix: input contains complex values.")

    matrix = matrix.astype(float, copy=False)
    return matrix.copy() if copy else matrix


# ------------------------------------------------------------------------------
# Batch arrays
# ------------------------------------------------------------------------------

def _ensure_batch_real_scalar(x: ArrayLike, *, copy: bool = True) -> Array:
    """
    Ensure `x` is a batch of real scalars with shape (B,).

    - scalar -> (1,)
    - 1D array (B,) -> returned (B,)
    - higher-dimensional inputs raise an error

    Args:
        x: scalar or array-like
        copy: if True, return a copy (new array). If False, may return a view.

    Returns:
        Float array with shape (B,).

    Raises:
        ValueError if the input contains complex numbers or has ndim >= 2.
    """
    if _is_numpy_scalar(x):
        return np.array([_ensure_real_scalar(x)])

    arr = _as_array(x)
    if arr.ndim == 0:
        return np.array([_ensure_real_scalar(arr)])
    if arr.ndim == 1:
        if np.iscomplexobj(arr):
            raise ValueError("_ensure_batch_real_scalar: input contains complex values.")
        out = arr.astype(float, copy=False)
        return out.copy() if copy else out
    raise ValueError(f"_ensure_batch_real_scalar: expected scalar or 1D array. Got shape={arr.shape}.")


def _ensure_batch_vector(x: ArrayLike, length: int | None = None,
                         *, copy: bool = True) -> Array:
    """Ensure `x` is a batch of vectors and return shape (B, d).

    Two-dimensional arrays are returned unchanged. A single vector (d,) is
    treated as a singleton batch (1, d). Higher dimensional arrays raise
    an error.

    Examples:
      - Input shape (d,) -> returned shape (1, d)
      - Input shape (B, d) -> returned shape (B, d)
      - other shapes -> raises error

    Raises:
        ValueError: If the input cannot be interpreted as a batch of vectors.
    """
    arr = _as_array(x)

    # If single vector value, standardize to (1,d)
    if arr.ndim < 2:
        v = _ensure_vector(arr, length=length, copy=copy)
        return v[np.newaxis, :]

    # Batch vector must be two dimensional
    if arr.ndim != 2:
        raise ValueError(
            f"_ensure_batch_vector: Array of shape {arr.shape} is not a batch vector. Require shape (n_batch, d)."
        )

    # Validate vector length
    if length is not None and arr.shape[1] != length:
        raise ValueError(f"_ensure_batch_vector: Required vector length {length}. Got {arr.shape[1]}.")

    if np.iscomplexobj(arr):
        raise ValueError("_ensure_batch_vector: input contains complex values.")

    out = arr.astype(float, copy=False)
    return out.copy() if copy else out
