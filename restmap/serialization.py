"""
Canonical JSON encoding.

Parameters and raw results are passed through a JSON round-trip so every
caller sees the same container shapes: mappings become ``dict`` with string
keys, tuples and sets become ``list``.
"""

import json
from typing import Any, Optional


def _json_default_serializer(o):
    """Default JSON serializer for non-standard types."""
    if isinstance(o, (set, frozenset, tuple)):
        return list(o)
    if hasattr(o, "isoformat"):
        return o.isoformat()
    raise TypeError(f"Object of type {type(o).__name__} is not JSON serializable")


def dumps(value: Any, *, indent: Optional[int] = None, sort_keys: bool = False) -> str:
    return json.dumps(
        value,
        default=_json_default_serializer,
        indent=indent,
        sort_keys=sort_keys,
        ensure_ascii=False,
    )


def loads(text: str) -> Any:
    return json.loads(text)


def canonicalize(value: Any) -> Any:
    """
    Serialize then deserialize ``value``.

    Raises:
        TypeError: value holds something JSON cannot represent
        ValueError: value is cyclic or holds NaN keys
    """
    return loads(dumps(value))
