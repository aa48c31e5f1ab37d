"""
Generation and teardown of a list of inner bags.

``generate_inner_bags`` builds the bags for a whole ensemble from one RNG
stream; ``free_inner_bags`` releases them. Both remap a requested count of
0 to a single slot through :func:`inner_bag_slot_count`: zero means "no
bagging", which is served by one flat bag covering every sample once.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterator

from innerbag.bag import (
    InnerBag,
    SampleWeights,
    generate_flat_inner_bag,
    generate_single_inner_bag,
)
from innerbag.buffers import allocate_slots
from innerbag.errors import BagGenerationError
from innerbag.rng import DeterministicRng

logger = logging.getLogger(__name__)


def inner_bag_slot_count(n_inner_bags: int) -> int:
    """Return the number of list slots used for *n_inner_bags* (0 maps to 1)."""
    return 1 if n_inner_bags == 0 else n_inner_bags


def free_inner_bags(
    n_inner_bags: int,
    inner_bags: list[InnerBag | None] | None,
) -> None:
    """
    Release every bag in *inner_bags*, then the list itself.

    Slots still holding ``None`` are skipped, so a list abandoned part way
    through population can be released safely.

    Args:
        n_inner_bags: The count originally requested (0 for a flat bag).
        inner_bags: The list returned by :func:`generate_inner_bags`. ``None``
            or an already released (empty) list is a no-op.
    """
    logger.debug("Entered free_inner_bags")
    if inner_bags:
        for i in range(inner_bag_slot_count(n_inner_bags)):
            inner_bag = inner_bags[i]
            if inner_bag is not None:
                inner_bag.free()
                inner_bags[i] = None
        inner_bags.clear()
    logger.debug("Exited free_inner_bags")


def generate_inner_bags(
    rng: DeterministicRng,
    n_samples: int,
    weights: SampleWeights | None,
    n_inner_bags: int,
) -> list[InnerBag]:
    """
    Generate the inner bags for an ensemble.

    With ``n_inner_bags == 0`` a single flat bag is returned and *rng* is
    left untouched. Otherwise *n_inner_bags* bootstrap bags are drawn in
    order from *rng*, so bag ``i``'s draws directly follow bag ``i-1``'s
    and the whole list is reproducible from the RNG's starting state.

    The operation is all-or-nothing: if any bag fails, every bag built so
    far is released and the error propagates.

    Args:
        rng: RNG shared by all bags, advanced in place.
        n_samples: Number of training samples (at least 1).
        weights: Optional external weight per sample.
        n_inner_bags: Number of bootstrap bags, or 0 for one flat bag.

    Returns:
        A list of ``inner_bag_slot_count(n_inner_bags)`` valid bags.

    Raises:
        AllocationFailure: If any buffer cannot be allocated.
        InvalidWeightTotal: If any bag's total weight is invalid.

    Example:
        rng = SeedBundle(root_seed=42).rng("inner_bags")
        bags = generate_inner_bags(rng, len(y), sample_weight, 10)
        try:
            train(bags)
        finally:
            free_inner_bags(10, bags)
    """
    logger.debug("Entered generate_inner_bags")

    assert rng is not None
    assert n_inner_bags >= 0

    n_slots = inner_bag_slot_count(n_inner_bags)
    try:
        inner_bags = allocate_slots(n_slots)
    except BagGenerationError as e:
        logger.warning(f"generate_inner_bags: {e}")
        raise

    try:
        if n_inner_bags == 0:
            inner_bags[0] = generate_flat_inner_bag(n_samples, weights)
        else:
            for i in range(n_inner_bags):
                inner_bags[i] = generate_single_inner_bag(rng, n_samples, weights)
    except BagGenerationError as e:
        logger.warning(f"generate_inner_bags: abandoning {n_slots} bag(s): {e}")
        free_inner_bags(n_inner_bags, inner_bags)
        raise

    logger.info(
        f"Generated {n_slots} inner bag(s) over {n_samples} samples"
        + (" (flat)" if n_inner_bags == 0 else "")
    )
    logger.debug("Exited generate_inner_bags")
    return inner_bags


@contextmanager
def inner_bags(
    rng: DeterministicRng,
    n_samples: int,
    weights: SampleWeights | None,
    n_inner_bags: int,
) -> Iterator[list[InnerBag]]:
    """
    Generate inner bags for the duration of a ``with`` block.

    The bags are released on exit, including when the block raises.

    Example:
        with inner_bags(rng, n_samples, None, 25) as bags:
            for bag in bags:
                fit_member(X, y, sample_weight=bag.weights)
    """
    bags = generate_inner_bags(rng, n_samples, weights, n_inner_bags)
    try:
        yield bags
    finally:
        free_inner_bags(n_inner_bags, bags)
