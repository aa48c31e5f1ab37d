"""Contract tests for seed discipline.

These tests verify that:
1. Same seed bundle produces the same bag stream
2. Different bundles produce different streams
3. Derived seeds are deterministic
"""

from __future__ import annotations

from innerbag.bags import generate_inner_bags
from innerbag.seeds import SeedBundle


class TestSeedDiscipline:
    """Verify RNG reproducibility contract."""

    def test_same_bundle_same_bags(self):
        """Same bundle should produce identical bags."""
        bundle = SeedBundle(root_seed=12345, stream_index=0)

        bags1 = generate_inner_bags(bundle.rng(), 40, None, 3)
        bags2 = generate_inner_bags(bundle.rng(), 40, None, 3)

        assert [b.fingerprint() for b in bags1] == [b.fingerprint() for b in bags2]

    def test_different_bundles_different_bags(self):
        b1 = SeedBundle(root_seed=42, stream_index=0)
        b2 = SeedBundle(root_seed=43, stream_index=0)

        bags1 = generate_inner_bags(b1.rng(), 40, None, 1)
        bags2 = generate_inner_bags(b2.rng(), 40, None, 1)

        assert bags1[0].fingerprint() != bags2[0].fingerprint()

    def test_derived_seeds_deterministic(self):
        bundle = SeedBundle(root_seed=42)
        assert len({bundle.derive("inner_bags") for _ in range(10)}) == 1

    def test_different_names_different_seeds(self):
        bundle = SeedBundle(root_seed=42)
        seeds = {bundle.derive(name) for name in ("inner_bags", "shuffle", "split")}
        assert len(seeds) == 3
