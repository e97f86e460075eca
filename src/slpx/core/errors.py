"""
Core exception types raised by version parsing and summary encoding.

Notes:
    - This module uses only the Python standard library and has no side effects.
    - slpx.boundary chains these into slpx.io.errors types before they reach callers.

Examples:
    >>> from slpx.core.errors import VersionError
    >>> from slpx.core.versioning import parse_version
    >>> try:
    ...     parse_version("three")
    ... except VersionError as e:
    ...     msg = str(e)
    >>> "three" in msg
    True
"""

from __future__ import annotations

__all__ = [
    "EncodingError",
    "VersionError",
]


class VersionError(ValueError):
    """Malformed or unsupported Slippi replay version."""


class EncodingError(ValueError):
    """A mandatory replay record could not be encoded as text."""
