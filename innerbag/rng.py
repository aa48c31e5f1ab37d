"""
Deterministic random number generation for bag sampling.

Provides:

- DeterministicRng: The contract the bag generators draw from
- RandomDeterministic: A seeded PCG64-backed implementation

The bootstrap generator never draws from the caller's RNG directly. It
takes a :meth:`~DeterministicRng.copy` as a local working copy, performs
every draw for one bag against that copy, and writes the advanced state
back with :meth:`~DeterministicRng.restore`. Bags drawn one after another
from the same RNG therefore continue a single reproducible stream.

An RNG instance is not thread-safe. Independent sub-ensembles built in
parallel need independent RNGs (see :class:`innerbag.seeds.SeedPlan`).
"""

from __future__ import annotations

from typing import Any

import numpy as np


class DeterministicRng:
    """
    Base class for reproducible RNGs consumed by the bag generators.

    Subclasses must implement :meth:`next_fast`, :meth:`copy` and
    :meth:`restore`. :meth:`sample_indices` defaults to repeated
    :meth:`next_fast` calls and may be overridden with a vectorised draw;
    whichever form a subclass uses defines its stream.
    """

    def next_fast(self, n: int) -> int:
        """Return an unbiased integer in ``[0, n)``, advancing the state."""
        raise NotImplementedError

    def copy(self) -> DeterministicRng:
        """Return an independent snapshot of the current state."""
        raise NotImplementedError

    def restore(self, other: DeterministicRng) -> None:
        """Overwrite this RNG's state with *other*'s state."""
        raise NotImplementedError

    def sample_indices(self, n: int, count: int) -> np.ndarray:
        """
        Draw *count* indices uniformly from ``[0, n)``.

        Args:
            n: Exclusive upper bound of each draw.
            count: Number of draws.

        Returns:
            An ``intp`` array of length *count*, in draw order.
        """
        out = np.empty(count, dtype=np.intp)
        for i in range(count):
            out[i] = self.next_fast(n)
        return out


class RandomDeterministic(DeterministicRng):
    """
    Seeded RNG backed by :class:`numpy.random.PCG64`.

    Snapshot and restore copy the bit generator's state dict, which is a
    constant-size operation.

    Example:
        rng = RandomDeterministic(42)
        working = rng.copy()
        indices = working.sample_indices(10, 10)
        rng.restore(working)
    """

    def __init__(self, seed: int | None = None) -> None:
        """
        Initialize the generator.

        Args:
            seed: Seed for PCG64. ``None`` seeds from OS entropy, which
                makes the stream non-reproducible.
        """
        self._generator = np.random.Generator(np.random.PCG64(seed))

    @property
    def state(self) -> dict[str, Any]:
        """The bit generator state (a JSON-compatible dict)."""
        return self._generator.bit_generator.state

    @state.setter
    def state(self, value: dict[str, Any]) -> None:
        self._generator.bit_generator.state = value

    def next_fast(self, n: int) -> int:
        return int(self._generator.integers(0, n))

    def sample_indices(self, n: int, count: int) -> np.ndarray:
        return self._generator.integers(0, n, size=count, dtype=np.intp)

    def copy(self) -> RandomDeterministic:
        clone = RandomDeterministic.__new__(RandomDeterministic)
        clone._generator = np.random.Generator(np.random.PCG64())
        clone.state = self.state
        return clone

    def restore(self, other: DeterministicRng) -> None:
        if not isinstance(other, RandomDeterministic):
            raise TypeError(
                f"Cannot restore RandomDeterministic from {type(other).__name__}"
            )
        self.state = other.state

    def __repr__(self) -> str:
        return f"RandomDeterministic(state={self.state['state']['state']})"
