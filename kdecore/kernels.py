# kernels.py
"""
Gaussian kernel contributions for a single (query, reference) pair.

One function per closed-form formula:

==============================  ===========  ==============  =============
function                        query        reference       bandwidth
==============================  ===========  ==============  =============
`gaussian_density`              scalar       scalar          float
`gaussian_mixed_density`        scalar       Sample/Uniform  float
`gaussian_mixed_mixed_density`  Sample       Sample/Uniform  float
`bivariate_gaussian_density`    Vector2      Vector2         Matrix2
==============================  ===========  ==============  =============

`density` picks the right one from the kinds of its arguments. Summing and
weighting contributions over a data set is left to the caller;
`density_many` only evaluates one query against many references.
"""
from __future__ import annotations

import logging
import math
from typing import Any, Iterable

import numpy as np

from .custom_types import Array, Scalar
from .errors import UniformQueryError
from .linalg.matrix import Matrix2, Transpose, Vector2
from .points import SCALAR, VECTOR2, PointFamily, family_of, check_bandwidth
from .distributions.maybe_uniform import MaybeUniform, Sample, Uniform
from .distributions.normal import StandardNormal
from .array_backend.utils import (
    _ensure_real_scalar,
    _ensure_batch_real_scalar,
    _ensure_batch_vector,
)

__all__ = [
    "gaussian_density",
    "gaussian_mixed_density",
    "gaussian_mixed_mixed_density",
    "bivariate_gaussian_density",
    "density",
    "density_many",
]

LOGGER = logging.getLogger(__name__)

_SQRT_2PI = math.sqrt(2.0 * math.pi)


# ------------------------------------------------------------------------------
# Formulas. The underscored versions assume a validated bandwidth.
# ------------------------------------------------------------------------------

def _gaussian(x: float, xi: float, h: float) -> float:
    a = _SQRT_2PI * h
    b = -((x - xi) ** 2) / (2.0 * h * h)
    return math.exp(b) / a


def _uniform(xi: Uniform, h: float) -> float:
    return 1.0 / (xi.width() * h)


def _gaussian_mixed(x: float, xi: MaybeUniform, h: float) -> float:
    if isinstance(xi, Sample):
        return _gaussian(x, xi.value, h)
    if isinstance(xi, Uniform):
        return _uniform(xi, h)
    raise TypeError(f"Reference must be Sample or Uniform. Got {type(xi).__name__}.")


def _gaussian_mixed_mixed(x: MaybeUniform, xi: MaybeUniform, h: float) -> float:
    if isinstance(x, Uniform):
        LOGGER.debug("Uniform query %r against reference %r", x, xi)
        raise UniformQueryError(f"Query must be a concrete Sample, not {x!r}.")
    if not isinstance(x, Sample):
        raise TypeError(f"Query must be Sample or Uniform. Got {type(x).__name__}.")
    return _gaussian_mixed(x.value, xi, h)


def _bivariate_gaussian(x: Vector2, xi: Vector2, h: Matrix2) -> float:
    d = x - xi

    a = 1.0 / (2.0 * math.pi)
    b = h.det() ** -0.5
    c = Transpose(d) * (h.inverse() @ d)
    return a * b * math.exp(-0.5 * c)


def _as_scalar_point(x: Any, role: str) -> float:
    if isinstance(x, (Sample, Uniform)):
        raise TypeError(f"{role} must be a plain scalar here. Got {type(x).__name__}.")
    return _ensure_real_scalar(x)


# ------------------------------------------------------------------------------
# Public per-pairing entry points
# ------------------------------------------------------------------------------

def gaussian_density(x: Scalar, xi: Scalar, h: Scalar) -> float:
    """1-D Gaussian kernel ``exp(-(x - xi)² / (2h²)) / (√(2π) h)``.

    Raises:
        BandwidthError: if ``h <= 0``.
    """
    h = check_bandwidth(SCALAR, h)
    return _gaussian(_as_scalar_point(x, "query"), _as_scalar_point(xi, "reference"), h)


def gaussian_mixed_density(x: Scalar, xi: MaybeUniform, h: Scalar) -> float:
    """Scalar query against a mixed reference.

    ``Sample(xi)`` gives the 1-D Gaussian kernel; ``Uniform(range)`` gives
    ``1 / (range.width() * h)``.
    """
    h = check_bandwidth(SCALAR, h)
    return _gaussian_mixed(_as_scalar_point(x, "query"), xi, h)


def gaussian_mixed_mixed_density(x: MaybeUniform, xi: MaybeUniform, h: Scalar) -> float:
    """Mixed query against a mixed reference.

    Raises:
        UniformQueryError: if `x` is a `Uniform` marker.
        BandwidthError: if ``h <= 0``.
    """
    h = check_bandwidth(SCALAR, h)
    return _gaussian_mixed_mixed(x, xi, h)


def bivariate_gaussian_density(x: Any, xi: Any, h: Matrix2 | Any) -> float:
    """
    Bivariate Gaussian kernel with bandwidth (covariance) matrix `h`::

        d = x - xi
        (1 / 2π) · det(h)^(-1/2) · exp(-0.5 · dᵗ h⁻¹ d)

    Raises:
        BandwidthError: if `h` is not symmetric positive definite.
        SingularMatrixError: if `h` cannot be inverted.
    """
    h = check_bandwidth(VECTOR2, h)
    return _bivariate_gaussian(Vector2.coerce(x), Vector2.coerce(xi), h)


# ------------------------------------------------------------------------------
# Dispatch
# ------------------------------------------------------------------------------

def _check_kernel(kernel: Any) -> None:
    if not isinstance(kernel, StandardNormal):
        raise TypeError(f"Only the StandardNormal kernel is supported. Got {kernel!r}.")


def _common_family(x: Any, xi: Any) -> PointFamily:
    family = family_of(x)
    other = family_of(xi)
    if family is not other:
        raise TypeError(
            f"Query and reference belong to different point families: {family.name} vs {other.name}."
        )
    return family


def _dispatch(family: PointFamily, x: Any, xi: Any, h: Any) -> float:
    if family is VECTOR2:
        return _bivariate_gaussian(Vector2.coerce(x), Vector2.coerce(xi), h)

    x_mixed = isinstance(x, (Sample, Uniform))
    xi_mixed = isinstance(xi, (Sample, Uniform))
    if not x_mixed and not xi_mixed:
        return _gaussian(float(x), float(xi), h)
    if not x_mixed:
        return _gaussian_mixed(float(x), xi, h)
    if xi_mixed:
        return _gaussian_mixed_mixed(x, xi, h)
    # mixed query, plain reference
    return _gaussian_mixed_mixed(x, Sample(xi), h)


def density(kernel: StandardNormal, x: Any, xi: Any, bandwidth: Any) -> float:
    """Kernel contribution of reference `xi` at query `x`.

    Pairings handled:

    - scalar / scalar: `gaussian_density`
    - scalar / Sample or Uniform: `gaussian_mixed_density`
    - Sample or Uniform / Sample or Uniform: `gaussian_mixed_mixed_density`
    - Sample or Uniform / scalar: as above, reference taken as ``Sample(xi)``
    - Vector2 / Vector2: `bivariate_gaussian_density`

    Raises:
        TypeError: unknown kernel, unknown point type, query and reference
            of different families, or bandwidth of the wrong kind.
        DomainError: invalid bandwidth or a `Uniform` query.
    """
    _check_kernel(kernel)
    family = _common_family(x, xi)
    h = check_bandwidth(family, bandwidth)
    return _dispatch(family, x, xi, h)


def density_many(kernel: StandardNormal, x: Any, references: Iterable[Any], bandwidth: Any) -> Array:
    """Evaluate `density` for one query against each reference.

    `references` is a sequence of points, or an array of shape (n,) for scalar
    points or (n, 2) for 2-D points. The bandwidth is validated once. Returns
    an array of shape (n,) of unweighted, unsummed contributions.
    """
    _check_kernel(kernel)
    family = family_of(x)
    h = check_bandwidth(family, bandwidth)

    refs = references if isinstance(references, np.ndarray) else list(references)
    if len(refs) == 0:
        return np.empty(0, dtype=float)

    if family is VECTOR2:
        q = Vector2.coerce(x)
        if isinstance(refs, np.ndarray):
            if refs.ndim != 2:
                raise ValueError(f"2-D references must have shape (n, 2). Got {refs.shape}.")
        else:
            for i, xi in enumerate(refs):
                if family_of(xi) is not VECTOR2:
                    raise TypeError(f"Reference {i} is not a 2-D point: {xi!r}")
        X = _ensure_batch_vector(refs, length=2, copy=False)
        D = X - np.array(q)
        precision = h.inverse().to_array()
        quad = np.einsum("ni,ij,nj->n", D, precision, D)
        return np.exp(-0.5 * quad) * (h.det() ** -0.5) / (2.0 * np.pi)

    plain = isinstance(refs, np.ndarray) or not any(isinstance(r, (Sample, Uniform)) for r in refs)
    if plain and not isinstance(x, (Sample, Uniform)):
        X = _ensure_batch_real_scalar(refs, copy=False)
        return np.exp(-((float(x) - X) ** 2) / (2.0 * h * h)) / (_SQRT_2PI * h)

    out = np.empty(len(refs), dtype=float)
    for i, xi in enumerate(refs):
        if family_of(xi) is not SCALAR:
            raise TypeError(f"Reference {i} is not a scalar point: {xi!r}")
        out[i] = _dispatch(family, x, xi, h)
    return out
