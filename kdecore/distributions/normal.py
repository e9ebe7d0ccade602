# distributions/normal.py
from __future__ import annotations

import math
from typing import Any

from .maybe_uniform import Sample, Uniform
from ..linalg.matrix import Vector2
from ..array_backend.utils import _is_real_scalar

__all__ = [
    "StandardNormal",
    "STANDARD_NORMAL",
    "pdf",
]

_SQRT_2PI = math.sqrt(2.0 * math.pi)


class StandardNormal:
    """
    The standard normal distribution, N(0, 1) in one dimension and N(0, I) in
    two. Stateless; also serves as the Gaussian kernel selector passed to
    `kdecore.kernels.density`.
    """

    def pdf(self, x: Any) -> float:
        """Density at `x`.

        - scalar ``x``: ``exp(-x²/2) / √(2π)``
        - ``Vector2(x, y)`` or a pair: ``exp(-(x²+y²)/2) / (2π)``
        - ``Sample(x)``: same as the scalar rule
        - ``Uniform(range)``: ``1 / range.width()``, independent of position
        """
        if isinstance(x, Sample):
            return self.pdf(x.value)
        if isinstance(x, Uniform):
            return 1.0 / x.width()
        if _is_real_scalar(x):
            x = float(x)
            return math.exp(-x * x / 2.0) / _SQRT_2PI
        try:
            v = Vector2.coerce(x)
        except (TypeError, ValueError) as e:
            raise TypeError(f"Unsupported point type {type(x).__name__}: {x!r}") from e
        return math.exp(-(v.x * v.x + v.y * v.y) / 2.0) / (2.0 * math.pi)

    def density(self, x: Any, xi: Any, bandwidth: Any) -> float:
        """Gaussian kernel contribution of reference `xi` at query `x`."""
        from ..kernels import density
        return density(self, x, xi, bandwidth)

    def __eq__(self, other: Any) -> bool:
        return isinstance(other, StandardNormal)

    def __hash__(self) -> int:
        return hash(StandardNormal)

    def __repr__(self) -> str:
        return "StandardNormal()"


STANDARD_NORMAL = StandardNormal()


def pdf(point: Any) -> float:
    """Marginal density of `point` under the standard normal."""
    return STANDARD_NORMAL.pdf(point)
