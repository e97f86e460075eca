"""
Integrity hashing for replay bytes.

The hash names the replay's frame artifact (see slpx.io.paths), so it must depend only on the
replay's bytes: two ingestions of the same file produce the same hash and the same path.

Notes:
    - SHA-256 hex digest over the raw replay bytes, read in fixed-size chunks.
    - Operates on an already-open binary stream; this module opens nothing.
"""

from __future__ import annotations

import hashlib
from typing import BinaryIO

__all__ = [
    "hash_replay",
]

_CHUNK_SIZE = 1 << 20


def hash_replay(stream: BinaryIO, sink: BinaryIO | None = None) -> str:
    """
    Compute the integrity hash of a replay stream, reading it to the end.

    Args:
        stream (BinaryIO): Replay bytes, positioned at the start.
        sink (BinaryIO | None): Optional writable stream receiving a copy of every chunk.

    Returns:
        str: SHA-256 hex digest of the bytes read.

    Examples:
        >>> import io
        >>> hash_replay(io.BytesIO(b"")) == hashlib.sha256(b"").hexdigest()
        True
    """
    h = hashlib.sha256()
    for chunk in iter(lambda: stream.read(_CHUNK_SIZE), b""):
        h.update(chunk)
        if sink is not None:
            sink.write(chunk)
    return h.hexdigest()
