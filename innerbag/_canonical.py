"""
Low-level canonicalization primitives (internal).

This module provides deterministic JSON encoding and fingerprinting so
that bags drawn in different processes can be compared by a short hash.

Key design decisions:
- Floats use repr() for full precision
- NaN/Inf raise CanonicalizeError (not silently encoded)
- NumPy arrays become lists tagged with their dtype
- Keys are always sorted
"""

from __future__ import annotations

import hashlib
import json
import math
from typing import Any

import numpy as np


class CanonicalizeError(Exception):
    """Raised when an object cannot be canonicalized."""

    pass


def _encode_value(obj: Any) -> Any:
    """
    Recursively encode a value for canonical JSON serialization.

    Raises:
        CanonicalizeError: If the value cannot be canonicalized (e.g., NaN, Inf)
    """
    if obj is None:
        return None
    if isinstance(obj, (bool, np.bool_)):
        return bool(obj)
    if isinstance(obj, (int, np.integer)):
        return int(obj)
    if isinstance(obj, (float, np.floating)):
        value = float(obj)
        if math.isnan(value):
            raise CanonicalizeError("NaN not allowed in canonical values")
        if math.isinf(value):
            raise CanonicalizeError("Inf not allowed in canonical values")
        return repr(value)
    if isinstance(obj, str):
        return obj
    if isinstance(obj, np.ndarray):
        return {
            "__ndarray__": str(obj.dtype),
            "values": [_encode_value(item) for item in obj.ravel().tolist()],
        }
    if isinstance(obj, (list, tuple)):
        return [_encode_value(item) for item in obj]
    if isinstance(obj, dict):
        return {str(k): _encode_value(v) for k, v in sorted(obj.items())}

    raise CanonicalizeError(f"Cannot canonicalize type: {type(obj).__name__}")


def canonical(obj: Any) -> str:
    """
    Convert an object to a canonical JSON string.

    Args:
        obj: The object to canonicalize: JSON-compatible values, NumPy
             scalars and NumPy arrays.

    Returns:
        A canonical JSON string with sorted keys and consistent formatting.

    Raises:
        CanonicalizeError: If the object contains NaN, Inf, or non-serializable types.

    Example:
        >>> canonical({"b": 1, "a": 2})
        '{"a":2,"b":1}'
    """
    encoded = _encode_value(obj)
    return json.dumps(encoded, sort_keys=True, separators=(",", ":"))


def fingerprint(obj: Any) -> str:
    """
    Compute a stable fingerprint (hash) of an object.

    Uses SHA-256 of the canonical representation, truncated to 16 hex characters.

    Raises:
        CanonicalizeError: If the object cannot be canonicalized.
    """
    canonical_str = canonical(obj)
    hash_bytes = hashlib.sha256(canonical_str.encode("utf-8")).digest()
    return hash_bytes.hex()[:16]
