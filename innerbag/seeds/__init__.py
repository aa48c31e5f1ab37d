"""
Seeds module: Explicit RNG control with deterministic derivation.

Provides:

- SeedBundle: Manages root seed and derived sub-seeds
- SeedPlan: Generates seed bundles for independent streams
- seeds(): Factory for creating seed plans
"""

from innerbag.seeds.bundle import SeedBundle
from innerbag.seeds.plan import SeedPlan, seeds

__all__ = [
    "SeedBundle",
    "SeedPlan",
    "seeds",
]
