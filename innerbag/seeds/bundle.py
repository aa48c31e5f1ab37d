"""
SeedBundle: Explicit RNG control with deterministic derivation.

A SeedBundle provides:
- A root seed for reproducibility
- Deterministic sub-seed derivation via sha256
- The seeded RNG bags are drawn from
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass

from innerbag.rng import RandomDeterministic


@dataclass(frozen=True)
class SeedBundle:
    """
    Bundle of seeds for reproducible bag generation.

    All randomness used to build one ensemble should be derived from this
    bundle, so the ensemble's bags are reproducible given the same bundle.

    Attributes:
        root_seed: The base seed for all derivations.
        stream_index: The stream number (if part of a SeedPlan).
    """

    root_seed: int
    stream_index: int | None = None

    def derive(self, name: str) -> int:
        """
        Derive a sub-seed deterministically from root + name + stream.

        Uses SHA-256 for cross-platform stability.

        Args:
            name: A unique name for this sub-seed (e.g., "inner_bags").

        Returns:
            A 64-bit integer seed.
        """
        data = f"{self.root_seed}:{name}:{self.stream_index or 0}"
        h = hashlib.sha256(data.encode("utf-8")).digest()
        return int.from_bytes(h[:8], "big")

    def rng(self, name: str = "inner_bags") -> RandomDeterministic:
        """
        Create the deterministic RNG bag generation draws from.

        Args:
            name: Name for the derived seed (default: "inner_bags").

        Returns:
            A seeded RandomDeterministic instance.

        Example:
            bundle = SeedBundle(root_seed=42)
            bags = generate_inner_bags(bundle.rng(), n_samples, None, 10)
        """
        return RandomDeterministic(self.derive(name))
