"""Cache key generation.

Provides stable parameter hashing for deterministic cache keys.
"""

import hashlib
import json
from collections.abc import Mapping
from pathlib import PurePath
from typing import Any

from pydantic import BaseModel

KEY_LENGTH = 32

# Prefix for type-tagged mapping keys and container markers. String keys
# that already start with it are escaped by doubling it.
_TAG = "$"


def _dump(obj: Any) -> str:
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False)


def _normalize_key(key: Any) -> str:
    """Map a mapping key to a string that keeps its type distinct."""
    if isinstance(key, PurePath):
        key = str(key)
    if isinstance(key, str):
        return _TAG + key if key.startswith(_TAG) else key
    return _TAG + _dump(_normalize(key))


def _normalize(obj: Any) -> Any:
    """Convert params into plain JSON data with a deterministic layout."""
    if obj is None or isinstance(obj, (str, int, float)):
        return obj
    if isinstance(obj, PurePath):
        return str(obj)
    if isinstance(obj, BaseModel):
        return _normalize(obj.model_dump(mode="json"))
    if isinstance(obj, Mapping):
        return {_normalize_key(k): _normalize(v) for k, v in obj.items()}
    if isinstance(obj, list):
        return [_normalize(v) for v in obj]
    if isinstance(obj, tuple):
        return {f"{_TAG}tuple": [_normalize(v) for v in obj]}
    if isinstance(obj, (set, frozenset)):
        return {f"{_TAG}set": sorted((_normalize(v) for v in obj), key=_dump)}
    raise TypeError(f"Cannot derive a stable cache key from {type(obj).__name__}")


def canonicalize(params: Any) -> str:
    """
    Serialize params to canonical JSON.

    Mapping keys are sorted and separators are compact, so structurally
    equal inputs serialize identically regardless of insertion order.
    Tuples, sets and non-string keys are type-tagged so they never
    serialize like their list or string look-alikes.

    Raises:
        TypeError: If params contain an object with no stable representation

    Example:
        >>> canonicalize({"b": 1, "a": [1, 2]})
        '{"a":[1,2],"b":1}'
        >>> canonicalize({1: "x"})
        '{"$1":"x"}'
    """
    return _dump(_normalize(params))


def generate_key(namespace: str, params: Any = None) -> str:
    """
    Compute a stable cache key from a namespace and parameters.

    Args:
        namespace: Logical namespace (e.g., "ast.parse")
        params: JSON-like structure (only values that affect the result)

    Returns:
        MD5 hex digest (32 chars)

    Raises:
        TypeError: If params cannot be canonicalized

    Example:
        >>> generate_key("ast.parse", {"filePath": "/src/app.js"})
        '5f0c...'
    """
    payload = canonicalize({"namespace": namespace, "params": params})
    return hashlib.md5(payload.encode("utf-8"), usedforsecurity=False).hexdigest()
