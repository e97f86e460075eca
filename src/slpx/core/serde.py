"""
Canonical JSON serialization helpers.

Provides a single canonical JSON policy used by the replay summary encoder, so that two
ingestions of the same replay produce byte-identical summaries. This module is zero-IO and
uses only the Python standard library.

Notes:
    - Canonical JSON:
        - sort_keys=True
        - separators=(",", ":")
        - ensure_ascii=False
        - allow_nan=False
"""

from __future__ import annotations

import json
from typing import Any

__all__ = [
    "json_dumps_canonical",
    "json_loads",
]


def json_dumps_canonical(obj: Any) -> str:
    """
    Serialize an object to a canonical JSON string.

    Args:
        obj (Any): JSON-serializable object.

    Returns:
        str: Canonical JSON string with sorted keys and compact separators.

    Raises:
        TypeError: If obj contains values that are not JSON-serializable.
        ValueError: If obj contains NaN or infinite floats.

    Examples:
        >>> json_dumps_canonical({"b": 1, "a": [1, 2]})
        '{"a":[1,2],"b":1}'
    """
    return json.dumps(obj, sort_keys=True, separators=(",", ":"), ensure_ascii=False, allow_nan=False)


def json_loads(s: str) -> Any:
    """
    Deserialize a JSON string using the stdlib json module.

    Args:
        s (str): JSON string to parse.

    Returns:
        Any: Decoded Python object.
    """
    return json.loads(s)
