"""Tests for canonicalization and fingerprinting."""

from __future__ import annotations

import math

import numpy as np
import pytest

from innerbag._canonical import CanonicalizeError, canonical, fingerprint


class TestCanonical:
    """Tests for canonical() function."""

    def test_canonical_dict_ordering(self):
        """Dict keys should be sorted regardless of insertion order."""
        assert canonical({"b": 1, "a": 2}) == canonical({"a": 2, "b": 1})

    def test_canonical_list_preserves_order(self):
        assert canonical([3, 1, 2]) == "[3,1,2]"

    def test_canonical_float_uses_repr(self):
        assert canonical(0.1) == '"0.1"'

    def test_canonical_ndarray_carries_dtype(self):
        ints = canonical(np.array([1, 2], dtype=np.int64))
        floats = canonical(np.array([1.0, 2.0]))
        assert '"int64"' in ints
        assert ints != floats

    def test_canonical_numpy_scalars(self):
        assert canonical(np.int64(3)) == canonical(3)
        assert canonical(np.float64(0.5)) == canonical(0.5)

    def test_canonical_nan_raises(self):
        with pytest.raises(CanonicalizeError):
            canonical({"x": math.nan})

    def test_canonical_inf_in_array_raises(self):
        with pytest.raises(CanonicalizeError):
            canonical(np.array([1.0, math.inf]))

    def test_canonical_unknown_type_raises(self):
        with pytest.raises(CanonicalizeError):
            canonical(object())


class TestFingerprint:
    def test_length(self):
        assert len(fingerprint({"a": 1})) == 16

    def test_stable(self):
        data = {"counts": np.array([2, 0, 1])}
        assert fingerprint(data) == fingerprint({"counts": np.array([2, 0, 1])})

    def test_sensitive_to_values(self):
        assert fingerprint(np.array([2, 0, 1])) != fingerprint(np.array([2, 1, 0]))
