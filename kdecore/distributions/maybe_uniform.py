# distributions/maybe_uniform.py
"""
Mixed scalar values: either a concrete sample or a uniform background marker.

A dataset axis that is binned or categorical at some rows is represented by
`Uniform(Interval(lo, hi))` at those rows and by `Sample(x)` everywhere
else. Both variants are frozen; construct once, pass around, drop.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from ..errors import IntervalError
from ..array_backend.utils import _ensure_real_scalar

__all__ = [
    "Interval",
    "Sample",
    "Uniform",
    "MaybeUniform",
]

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class Interval:
    """Closed interval ``[lower, upper]`` with strictly positive width."""
    lower: float
    upper: float

    def __post_init__(self):
        lower = _ensure_real_scalar(self.lower)
        upper = _ensure_real_scalar(self.upper)
        if not upper - lower > 0.0:
            LOGGER.debug("Rejecting interval [%r, %r]", lower, upper)
            raise IntervalError(f"Interval width must be > 0. Got [{lower!r}, {upper!r}].")
        object.__setattr__(self, "lower", lower)
        object.__setattr__(self, "upper", upper)

    def width(self) -> float:
        return self.upper - self.lower

    def __contains__(self, value: float) -> bool:
        return self.lower <= value <= self.upper


@dataclass(frozen=True)
class Sample:
    """A concrete scalar observation."""
    value: float

    def __post_init__(self):
        object.__setattr__(self, "value", _ensure_real_scalar(self.value))


@dataclass(frozen=True)
class Uniform:
    """Marker for "no localized sample here, uniform over `range`"."""
    range: Interval

    def __post_init__(self):
        if not isinstance(self.range, Interval):
            # accept a (lower, upper) pair
            lower, upper = self.range
            object.__setattr__(self, "range", Interval(lower, upper))

    def width(self) -> float:
        return self.range.width()


MaybeUniform = Union[Sample, Uniform]
