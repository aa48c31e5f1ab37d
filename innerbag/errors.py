"""
Errors raised while generating inner bags.

Both failure kinds are recoverable: the call that raised them has already
released everything it allocated, so the caller may retry or carry on
without bagging. Precondition violations (a missing RNG, zero samples) are
not part of this taxonomy; they are checked with ``assert`` only.
"""

from __future__ import annotations


class BagGenerationError(Exception):
    """Base class for recoverable inner-bag generation failures."""

    pass


class AllocationFailure(BagGenerationError, MemoryError):
    """
    Raised when a buffer for a bag or bag list cannot be allocated.

    Attributes:
        what: Name of the buffer that failed (e.g. "occurrence_counts").
        size: Number of elements requested.
    """

    def __init__(self, what: str, size: int) -> None:
        super().__init__(f"Could not allocate {what} ({size} elements)")
        self.what = what
        self.size = size


class InvalidWeightTotal(BagGenerationError, ValueError):
    """
    Raised when a bag's total weight is NaN, infinite or not positive.

    Attributes:
        total: The offending total.
    """

    def __init__(self, total: float) -> None:
        super().__init__(
            f"Bag weight total must be finite and positive, got {total!r}"
        )
        self.total = total
