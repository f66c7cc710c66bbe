"""Centralized failure types for the field imagery pipeline.

Two families of errors exist:

- ``FieldImageError`` (a ``ValueError``): the caller handed a stage input
  that violates its precondition (missing band, bad percentile, empty raster,
  mismatched shapes or row counts, invalid plot region).
- ``ContractViolation`` (a ``RuntimeError``): a pipeline stage did not produce
  the invariants it promised. This indicates a bug in pipeline logic.

Both are raised synchronously and never retried. Inputs are deterministic,
so retrying cannot change the outcome.
"""


class ContractViolation(RuntimeError):
    """Raised when a pipeline contract is violated.

    Key distinction:
    - FieldImageError: bad input to a stage (user/data error)
    - ValidationError: bad configuration (handled by Pydantic)
    - ContractViolation: pipeline bug (programmer error)
    """
    pass


class FieldImageError(ValueError):
    """Base class for stage precondition failures."""
    pass


class MissingBandError(FieldImageError):
    """A requested band index or name does not exist in the raster."""
    pass


class InvalidPercentileError(FieldImageError):
    """Percentiles outside [0, 1], or ``low >= high`` for a stretch."""
    pass


class EmptyInputError(FieldImageError):
    """A reduction (quantile, statistics) was asked over zero pixels."""
    pass


class ShapeMismatchError(FieldImageError):
    """Two rasters expected to be parallel have different pixel counts."""
    pass


class RowCountMismatchError(FieldImageError):
    """Table row count differs from the number of grid cells."""
    pass


class NonConvexRegionError(FieldImageError):
    """Plot region corners do not form a convex, non-degenerate quadrilateral."""
    pass
