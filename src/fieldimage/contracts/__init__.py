"""Pipeline contracts: fail-fast enforcement of stage invariants.

This package enforces semantic guarantees between pipeline stages and
hosts the error types raised when a stage precondition is violated.

Key principle:
- Pydantic validates config correctness
- Contracts validate pipeline correctness
- Algorithms handle numeric edge cases (zero-variance bands, achromatic pixels)
"""

from fieldimage.contracts.failure import (
    ContractViolation,
    FieldImageError,
    MissingBandError,
    InvalidPercentileError,
    EmptyInputError,
    ShapeMismatchError,
    RowCountMismatchError,
    NonConvexRegionError,
)
from fieldimage.contracts.base import require
from fieldimage.contracts.raster import assert_raster
from fieldimage.contracts.color import assert_stretched, assert_hue
from fieldimage.contracts.mask import assert_labelled
from fieldimage.contracts.plots import assert_plot_grid, assert_plot_statistics

__all__ = [
    "ContractViolation",
    "FieldImageError",
    "MissingBandError",
    "InvalidPercentileError",
    "EmptyInputError",
    "ShapeMismatchError",
    "RowCountMismatchError",
    "NonConvexRegionError",
    "require",
    "assert_raster",
    "assert_stretched",
    "assert_hue",
    "assert_labelled",
    "assert_plot_grid",
    "assert_plot_statistics",
]
