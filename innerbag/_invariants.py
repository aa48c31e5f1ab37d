"""
Optional invariant checks (internal).

The unweighted bootstrap total is taken to be the sample count, which the
counting argument guarantees. When invariant checks are enabled that
assumption is cross-checked against the safe summation of the bag's
weights. Checks default to on unless Python runs with ``-O``.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator

import numpy as np

from innerbag.safe_sum import add_positive_floats_safe

_LOWER_TOLERANCE = 0.999
_UPPER_TOLERANCE = 1.0001

_enabled: bool = __debug__


class InvariantViolation(AssertionError):
    """Raised when an enabled invariant check fails."""

    pass


def invariant_checks_enabled() -> bool:
    """Return whether invariant checks currently run."""
    return _enabled


def set_invariant_checks(enabled: bool) -> None:
    """Enable or disable invariant checks process-wide."""
    global _enabled
    _enabled = bool(enabled)


@contextmanager
def invariant_checks(enabled: bool) -> Iterator[None]:
    """
    Temporarily enable or disable invariant checks.

    Example:
        with invariant_checks(False):
            bags = generate_inner_bags(rng, n, None, 100)
    """
    previous = _enabled
    set_invariant_checks(enabled)
    try:
        yield
    finally:
        set_invariant_checks(previous)


def check_counting_total(weights: np.ndarray, total: float) -> None:
    """
    Verify a counting-derived total against the safe sum of *weights*.

    Does nothing when checks are disabled.

    Raises:
        InvariantViolation: If *total* is outside 0.1% of the safe sum.
    """
    if not _enabled:
        return
    safe_total = add_positive_floats_safe(weights)
    if not (
        safe_total * _LOWER_TOLERANCE <= total <= _UPPER_TOLERANCE * safe_total
    ):
        raise InvariantViolation(
            f"Counting total {total!r} disagrees with safe sum {safe_total!r}"
        )
