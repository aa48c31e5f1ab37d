"""
Extended-precision summation of non-negative floats.

Naively adding many weights of arbitrary magnitude can overflow to
infinity part way through or lose the small terms to cancellation.
:func:`add_positive_floats_safe` scales every value by the largest
magnitude, sums the scaled values with :func:`math.fsum` (exactly rounded),
and scales the result back.
"""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def add_positive_floats_safe(values: Sequence[float] | np.ndarray) -> float:
    """
    Sum floating values without intermediate overflow or cancellation.

    Args:
        values: The values to add. Intended for non-negative inputs;
            negative values are summed correctly but callers should treat
            a non-positive result as invalid.

    Returns:
        The sum as a Python float. Returns 0.0 for an empty or all-zero
        input, NaN if any value is NaN, and ``inf`` if a value is infinite
        or the true sum exceeds the float range.

    Example:
        >>> add_positive_floats_safe([1e308, 1e308, -1e308])
        1e+308
    """
    arr = np.asarray(values, dtype=np.float64)
    if arr.size == 0:
        return 0.0

    scale = float(np.max(np.abs(arr)))
    if math.isnan(scale):
        return math.nan
    if math.isinf(scale):
        # +inf and -inf together have no meaningful sum
        if np.any(arr == math.inf) and np.any(arr == -math.inf):
            return math.nan
        return math.inf if np.any(arr == math.inf) else -math.inf
    if scale == 0.0:
        return 0.0

    scaled_total = math.fsum((arr / scale).tolist())
    return scaled_total * scale
