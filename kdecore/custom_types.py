# custom_types.py
"""
Type definitions and aliases shared across kdecore.

We generally following the conventions:
- Annotate function input with `ArrayLike`
- Annotate function output with `Array`
- Scalar points and scalar bandwidths are annotated `Scalar`
"""
from __future__ import annotations
from typing import TypeAlias, Union

from numpy.typing import (
    NDArray as NumpyArray,
    ArrayLike as NumpyArrayLike
)

from numpy import (
    floating as NumpyFloating,
)

Array = NumpyArray
ArrayLike: TypeAlias = NumpyArrayLike
Float: TypeAlias = NumpyFloating
Scalar: TypeAlias = Union[float, int, NumpyFloating]
