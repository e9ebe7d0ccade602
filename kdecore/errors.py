# errors.py
"""
Exceptions raised by kdecore.

Every failure here is a precondition violation on the inputs of a single
call. They all derive from `ValueError`, so callers that already guard
numerical code with `except ValueError` keep working.
"""
import numpy as np

__all__ = [
    "DomainError",
    "BandwidthError",
    "IntervalError",
    "UniformQueryError",
    "SingularMatrixError",
]


class DomainError(ValueError):
    """Input lies outside the domain of the requested formula."""


class BandwidthError(DomainError):
    """Scalar bandwidth is not > 0, or bandwidth matrix is not positive definite."""


class IntervalError(DomainError):
    """Interval with non-positive width."""


class UniformQueryError(DomainError):
    """A `Uniform` marker was used where a concrete query position is required."""


class SingularMatrixError(DomainError, np.linalg.LinAlgError):
    """Matrix determinant is zero or numerically indistinguishable from zero."""
