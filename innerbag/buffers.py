"""
Buffer allocation for inner bags (internal).

Every array a bag owns is obtained here so that an allocator failure always
surfaces as :class:`AllocationFailure` and never as a half-built object.
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Iterator

import numpy as np

from innerbag.errors import AllocationFailure

COUNT_DTYPE = np.int64
WEIGHT_DTYPE = np.float64


def _allocate(what: str, size: int, dtype: Any) -> np.ndarray:
    with allocation_guard(what, size):
        return np.empty(size, dtype=dtype)


def allocate_counts(n_samples: int) -> np.ndarray:
    """Allocate an uninitialized occurrence-count buffer."""
    return _allocate("occurrence_counts", n_samples, COUNT_DTYPE)


def allocate_weights(n_samples: int) -> np.ndarray:
    """Allocate an uninitialized effective-weight buffer."""
    return _allocate("weights", n_samples, WEIGHT_DTYPE)


@contextmanager
def allocation_guard(what: str, size: int) -> Iterator[None]:
    """
    Report a ``MemoryError`` raised inside the block as ``AllocationFailure``.

    For temporaries sized by the sample count that numpy allocates on the
    caller's behalf (drawn indices, converted weights, partial sums).
    """
    try:
        yield
    except AllocationFailure:
        raise
    except MemoryError:
        raise AllocationFailure(what, size) from None


def allocate_slots(n_slots: int) -> list[Any]:
    """
    Allocate a bag list with every slot set to ``None``.

    The empty sentinel is in place before any slot is populated, so the
    list can be torn down at any point of its population.
    """
    try:
        return [None] * n_slots
    except MemoryError:
        raise AllocationFailure("inner_bags", n_slots) from None
