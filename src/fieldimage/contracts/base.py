"""Base contract enforcement utilities.

The require() function is the single enforcement mechanism for all contracts
and stage preconditions.
"""

from typing import Type

from fieldimage.contracts.failure import ContractViolation


def require(condition: bool, message: str, error: Type[Exception] = ContractViolation) -> None:
    """Enforce a pipeline contract or stage precondition.

    Fail-fast: no recovery, no fallback, no silence.

    Parameters
    ----------
    condition : bool
        The invariant that must be true.

    message : str
        Error message explaining the violation (for debugging).

    error : type, optional
        Exception class to raise. Defaults to ContractViolation; stage
        preconditions pass one of the FieldImageError subclasses.

    Raises
    ------
    ContractViolation or FieldImageError
        If condition is False.

    Examples
    --------
    >>> require("x" in ds.coords, "Raster contract: missing 'x' coordinate")
    >>> require(len(values) > 0, "No pixels to threshold", EmptyInputError)
    """
    if not condition:
        raise error(message)
