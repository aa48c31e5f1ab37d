"""
innerbag: Bootstrap inner bags for ensemble training.

An inner bag is one ensemble member's resampling of the training set:
an occurrence count and an effective weight per sample plus their total.
Bags are drawn with replacement from a reproducible RNG stream, or, when
no bagging is requested, a single flat bag uses every sample once.

Example:
    import innerbag

    rng = innerbag.SeedBundle(root_seed=42).rng()
    with innerbag.inner_bags(rng, n_samples=1000, weights=None, n_inner_bags=8) as bags:
        for bag in bags:
            member.fit(X, y, sample_weight=bag.weights)
"""

__version__ = "0.1.0"

from innerbag._invariants import (
    InvariantViolation,
    invariant_checks,
    invariant_checks_enabled,
    set_invariant_checks,
)
from innerbag.bag import InnerBag, generate_flat_inner_bag, generate_single_inner_bag
from innerbag.bags import (
    free_inner_bags,
    generate_inner_bags,
    inner_bag_slot_count,
    inner_bags,
)
from innerbag.config import BaggingSettings, ProjectConfig
from innerbag.errors import AllocationFailure, BagGenerationError, InvalidWeightTotal
from innerbag.rng import DeterministicRng, RandomDeterministic
from innerbag.safe_sum import add_positive_floats_safe
from innerbag.seeds import SeedBundle, SeedPlan, seeds

__all__ = [
    # Bags
    "InnerBag",
    "generate_single_inner_bag",
    "generate_flat_inner_bag",
    "generate_inner_bags",
    "free_inner_bags",
    "inner_bag_slot_count",
    "inner_bags",
    # Errors
    "BagGenerationError",
    "AllocationFailure",
    "InvalidWeightTotal",
    "InvariantViolation",
    # RNG / seeds
    "DeterministicRng",
    "RandomDeterministic",
    "SeedBundle",
    "SeedPlan",
    "seeds",
    # Summation
    "add_positive_floats_safe",
    # Config
    "BaggingSettings",
    "ProjectConfig",
    "invariant_checks",
    "invariant_checks_enabled",
    "set_invariant_checks",
]
