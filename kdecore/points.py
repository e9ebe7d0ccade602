# points.py
"""
What counts as a point, and which bandwidth goes with it.

Two point families exist:

- ``SCALAR``: plain real numbers and the mixed `Sample`/`Uniform` values.
  Bandwidth is a positive float.
- ``VECTOR2``: 2-D coordinates (`Vector2`, or any pair). Bandwidth is a
  symmetric positive definite `Matrix2`.

The family of a point fixes the bandwidth kind. Handing a matrix to a scalar
point, or a float to a vector point, is a `TypeError`, not a domain error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Union

import numpy as np

from .errors import BandwidthError
from .linalg.matrix import Matrix2, Vector2
from .linalg.utils import check_positive_definite
from .distributions.maybe_uniform import Sample, Uniform
from .array_backend.utils import _is_real_scalar, _ensure_positive_scalar

__all__ = [
    "Vector2",
    "PointFamily",
    "SCALAR",
    "VECTOR2",
    "family_of",
    "check_bandwidth",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class PointFamily:
    name: str
    dimension: int
    bandwidth_type: type

    def __repr__(self) -> str:
        return f"PointFamily({self.name!r}, dimension={self.dimension})"


SCALAR = PointFamily("scalar", 1, float)
VECTOR2 = PointFamily("vector2", 2, Matrix2)


def _is_pair(point: Any) -> bool:
    if isinstance(point, Vector2):
        return True
    if isinstance(point, (tuple, list, np.ndarray)):
        return np.shape(point) == (2,)
    return False


def family_of(point: Any) -> PointFamily:
    """Return the family `point` belongs to.

    Raises:
        TypeError: if `point` is none of scalar, pair, `Sample`, `Uniform`.
    """
    if isinstance(point, (Sample, Uniform)) or _is_real_scalar(point):
        return SCALAR
    if _is_pair(point):
        return VECTOR2
    raise TypeError(f"Unsupported point type {type(point).__name__}: {point!r}")


def check_bandwidth(family: PointFamily, bandwidth: Any) -> Union[float, Matrix2]:
    """Canonicalize `bandwidth` for points of `family` and validate it.

    Returns:
        A positive float for ``SCALAR``, a positive definite `Matrix2` for
        ``VECTOR2``.

    Raises:
        TypeError: if the bandwidth kind does not match the family.
        BandwidthError: if the bandwidth is not positive (definite).
    """
    if family is SCALAR:
        if isinstance(bandwidth, Matrix2) or np.ndim(bandwidth) != 0:
            raise TypeError(f"Scalar points take a scalar bandwidth. Got {type(bandwidth).__name__}.")
        try:
            return _ensure_positive_scalar(bandwidth, name="bandwidth")
        except ValueError as e:
            LOGGER.debug("Rejecting scalar bandwidth %r", bandwidth)
            raise BandwidthError(str(e)) from e
    if family is VECTOR2:
        if not isinstance(bandwidth, Matrix2) and np.shape(bandwidth) != (2, 2):
            raise TypeError(f"2-D points take a 2x2 bandwidth matrix. Got {type(bandwidth).__name__}.")
        return check_positive_definite(bandwidth)
    raise TypeError(f"Unknown point family {family!r}")
