"""Shared fixtures for innerbag tests."""

from __future__ import annotations

from typing import Sequence

import pytest

from innerbag._invariants import invariant_checks_enabled, set_invariant_checks
from innerbag.rng import DeterministicRng


class ScriptedRng(DeterministicRng):
    """RNG that replays a fixed draw sequence."""

    def __init__(self, draws: Sequence[int], position: int = 0) -> None:
        self.draws = list(draws)
        self.position = position

    def next_fast(self, n: int) -> int:
        value = self.draws[self.position]
        assert 0 <= value < n, f"scripted draw {value} outside [0, {n})"
        self.position += 1
        return value

    def copy(self) -> ScriptedRng:
        return ScriptedRng(self.draws, self.position)

    def restore(self, other: DeterministicRng) -> None:
        assert isinstance(other, ScriptedRng)
        self.position = other.position


@pytest.fixture
def scripted_rng():
    """Factory for RNGs that replay a given draw sequence."""
    return ScriptedRng


@pytest.fixture(autouse=True)
def _restore_invariant_checks():
    """Keep the process-wide invariant toggle from leaking between tests."""
    previous = invariant_checks_enabled()
    yield
    set_invariant_checks(previous)
