"""
SeedPlan: Generate independent seed bundles for parallel sub-ensembles.

An RNG must never be shared between threads, so sub-ensembles built
concurrently each need their own stream. A SeedPlan hands out one
deterministically-derived SeedBundle per stream.
"""

from __future__ import annotations

from typing import Iterator

from innerbag.seeds.bundle import SeedBundle


class SeedPlan:
    """
    Plan for generating seed bundles across independent streams.

    Example:
        plan = SeedPlan(base=42, streams=4)
        for bundle in plan:
            # bundle.stream_index: 0, 1, 2, 3
            bags = generate_inner_bags(bundle.rng(), n_samples, None, 8)
    """

    def __init__(self, base: int, streams: int = 1) -> None:
        """
        Initialize the seed plan.

        Args:
            base: The base seed for all bundles.
            streams: Number of independent streams.
        """
        if streams < 1:
            raise ValueError(f"streams must be at least 1, got {streams}")
        self._base = base
        self._streams = streams

    @property
    def base_seed(self) -> int:
        """The base seed for this plan."""
        return self._base

    @property
    def streams(self) -> int:
        """The number of streams in this plan."""
        return self._streams

    def __iter__(self) -> Iterator[SeedBundle]:
        for i in range(self._streams):
            yield SeedBundle(root_seed=self._base, stream_index=i)

    def __len__(self) -> int:
        return self._streams

    def __repr__(self) -> str:
        return f"SeedPlan(base={self._base}, streams={self._streams})"


def seeds(base: int, streams: int = 1) -> SeedPlan:
    """
    Create a SeedPlan for generating seed bundles.

    Args:
        base: The base seed for reproducibility.
        streams: Number of independent streams (default: 1).

    Returns:
        A SeedPlan that yields SeedBundle instances.
    """
    return SeedPlan(base=base, streams=streams)
