"""
InnerBag: one ensemble member's resampling of the training set.

A bag holds, for every training sample, how many times the sample was
drawn (its occurrence count) and the weight it carries into training
(occurrence count times the optional external sample weight), together
with the total of those weights.

Two generators build bags:

- generate_single_inner_bag: one bootstrap replicate (sampling with
  replacement) drawn from a caller-owned RNG
- generate_flat_inner_bag: every sample used exactly once

A bag is either fully valid or never returned. On any failure the
generator frees what it allocated, logs a warning and raises a
:class:`~innerbag.errors.BagGenerationError`.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from innerbag._canonical import fingerprint
from innerbag._invariants import check_counting_total
from innerbag.buffers import (
    WEIGHT_DTYPE,
    allocate_counts,
    allocate_weights,
    allocation_guard,
)
from innerbag.errors import BagGenerationError, InvalidWeightTotal
from innerbag.rng import DeterministicRng
from innerbag.safe_sum import add_positive_floats_safe

logger = logging.getLogger(__name__)

SampleWeights = Sequence[float] | np.ndarray


@dataclass(eq=False)
class InnerBag:
    """
    Occurrence counts, effective weights and total weight of one bag.

    A freshly constructed bag has both arrays set to ``None``; that is the
    unallocated state :meth:`free` accepts.

    Attributes:
        occurrence_counts: Times each sample was drawn (``int64``).
        weights: Effective weight of each sample (``float64``).
        weight_total: Total of ``weights``; finite and positive for any
            bag handed out by a generator.
    """

    occurrence_counts: np.ndarray | None = None
    weights: np.ndarray | None = None
    weight_total: float = 0.0

    @property
    def is_allocated(self) -> bool:
        """Whether both arrays are present."""
        return self.occurrence_counts is not None and self.weights is not None

    @property
    def n_samples(self) -> int:
        """Number of samples the bag covers (0 once freed)."""
        if self.occurrence_counts is None:
            return 0
        return len(self.occurrence_counts)

    def free(self) -> None:
        """Release both arrays. Safe to call on an unallocated or freed bag."""
        self.occurrence_counts = None
        self.weights = None
        self.weight_total = 0.0

    def fingerprint(self) -> str:
        """Return a 16-character hash of the counts and weights."""
        return fingerprint(
            {"occurrence_counts": self.occurrence_counts, "weights": self.weights}
        )

    def __repr__(self) -> str:
        return (
            f"InnerBag(n_samples={self.n_samples}, "
            f"weight_total={self.weight_total!r})"
        )


def _as_sample_weights(
    weights: SampleWeights | None, n_samples: int
) -> np.ndarray | None:
    if weights is None:
        return None
    with allocation_guard("sample_weights", n_samples):
        arr = np.asarray(weights, dtype=WEIGHT_DTYPE)
    assert arr.shape == (n_samples,), "weights must have one entry per sample"
    return arr


def _validate_total(total: float) -> None:
    if math.isnan(total) or math.isinf(total) or total <= 0:
        raise InvalidWeightTotal(total)


def generate_single_inner_bag(
    rng: DeterministicRng,
    n_samples: int,
    weights: SampleWeights | None = None,
) -> InnerBag:
    """
    Draw one bootstrap replicate of *n_samples* samples.

    Exactly *n_samples* indices are drawn uniformly with replacement from
    ``[0, n_samples)``; each draw increments that sample's count. The RNG
    is advanced by exactly those draws.

    Args:
        rng: RNG to draw from. Borrowed exclusively for the call.
        n_samples: Number of training samples (at least 1).
        weights: Optional external weight per sample. ``None`` means a
            uniform weight of 1.

    Returns:
        A valid InnerBag.

    Raises:
        AllocationFailure: If a buffer cannot be allocated.
        InvalidWeightTotal: If the weighted total is NaN, infinite or not
            positive.

    Example:
        rng = RandomDeterministic(42)
        bag = generate_single_inner_bag(rng, 100)
        assert bag.occurrence_counts.sum() == 100
    """
    logger.debug("Entered generate_single_inner_bag")

    assert rng is not None
    assert n_samples >= 1, "there must be at least one sample"

    bag = InnerBag()
    try:
        sample_weights = _as_sample_weights(weights, n_samples)
        counts = allocate_counts(n_samples)
        bag.occurrence_counts = counts
        bag_weights = allocate_weights(n_samples)
        bag.weights = bag_weights

        working = rng.copy()
        with allocation_guard("indices", n_samples):
            indices = working.sample_indices(n_samples, n_samples)
            rng.restore(working)
            counts[:] = np.bincount(indices, minlength=n_samples)

        if sample_weights is None:
            np.copyto(bag_weights, counts)
            total = float(n_samples)
            with allocation_guard("partial_sums", n_samples):
                check_counting_total(bag_weights, total)
        else:
            np.multiply(counts, sample_weights, out=bag_weights)
            with allocation_guard("partial_sums", n_samples):
                total = add_positive_floats_safe(bag_weights)
            _validate_total(total)
    except BagGenerationError as e:
        bag.free()
        logger.warning(f"generate_single_inner_bag: {e}")
        raise

    bag.weight_total = total

    logger.debug("Exited generate_single_inner_bag")
    return bag


def generate_flat_inner_bag(
    n_samples: int,
    weights: SampleWeights | None = None,
) -> InnerBag:
    """
    Build the degenerate bag that uses every sample exactly once.

    Args:
        n_samples: Number of training samples (at least 1).
        weights: Optional external weight per sample, copied into the bag
            unchanged. ``None`` means a uniform weight of 1.

    Returns:
        A valid InnerBag with every occurrence count equal to 1.

    Raises:
        AllocationFailure: If a buffer cannot be allocated.
        InvalidWeightTotal: If the weights total NaN, infinity or a
            non-positive value.
    """
    logger.debug("Entered generate_flat_inner_bag")

    assert n_samples >= 1, "there must be at least one sample"

    bag = InnerBag()
    try:
        sample_weights = _as_sample_weights(weights, n_samples)
        counts = allocate_counts(n_samples)
        bag.occurrence_counts = counts
        bag_weights = allocate_weights(n_samples)
        bag.weights = bag_weights

        if sample_weights is None:
            counts.fill(1)
            bag_weights.fill(1.0)
            total = float(n_samples)
        else:
            with allocation_guard("partial_sums", n_samples):
                total = add_positive_floats_safe(sample_weights)
            _validate_total(total)
            np.copyto(bag_weights, sample_weights)
            counts.fill(1)
    except BagGenerationError as e:
        bag.free()
        logger.warning(f"generate_flat_inner_bag: {e}")
        raise

    bag.weight_total = total

    logger.debug("Exited generate_flat_inner_bag")
    return bag
