"""Gaussian kernel density contributions for scalar, mixed and 2-D points."""

from kdecore.errors import (
    DomainError,
    BandwidthError,
    IntervalError,
    UniformQueryError,
    SingularMatrixError,
)
from kdecore.linalg.matrix import Matrix2, Transpose, Vector2, quadratic_form
from kdecore.points import PointFamily, SCALAR, VECTOR2, family_of, check_bandwidth
from kdecore.distributions import (
    Interval,
    Sample,
    Uniform,
    MaybeUniform,
    StandardNormal,
    STANDARD_NORMAL,
    pdf,
)
from kdecore.kernels import (
    gaussian_density,
    gaussian_mixed_density,
    gaussian_mixed_mixed_density,
    bivariate_gaussian_density,
    density,
    density_many,
)

__version__ = "0.1.0"
