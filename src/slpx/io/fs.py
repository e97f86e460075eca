"""
Filesystem helpers for slpx.io (local files only).

Responsibilities
- Directory creation, fsync, atomic rename, and quiet removal used by the IPC writer.
- Establish the semantics of the finalize step: tmp write → fsync → atomic rename.

Notes
- Atomicity via os.replace is guaranteed only when src and dst reside on the same filesystem;
  slpx.io.paths always places the tmp file next to its destination.
- All helpers are synchronous; no locking is performed.
"""

from __future__ import annotations

import logging
import os

logger = logging.getLogger(__name__)


def makedirs(path: str, exist_ok: bool = True) -> None:
    """
    Create directories recursively.

    Args:
        path (str): Directory path to create.
        exist_ok (bool): Do not error if the directory already exists.
    """
    os.makedirs(path, exist_ok=exist_ok)


def fsync_path(path: str) -> None:
    """
    Open a path read-only and fsync its file descriptor.

    Args:
        path (str): Path to an already-written file.

    Notes:
        Used after pyarrow closed the IPC writer, so the footer is on disk before the rename.
    """
    fd = os.open(path, os.O_RDONLY)
    try:
        os.fsync(fd)
    finally:
        os.close(fd)


def rename_atomic(src: str, dst: str) -> None:
    """
    Atomically rename src -> dst on the same filesystem (replacing dst if present).

    Args:
        src (str): Existing source path (the temporary file).
        dst (str): Final destination path.
    """
    os.replace(src, dst)


def remove_quietly(path: str) -> None:
    """
    Best-effort removal used on failure paths; a missing file is not an error.

    Notes:
        Other OSErrors are logged and not raised, so the original failure propagates.
    """
    try:
        os.remove(path)
    except FileNotFoundError:
        pass
    except OSError as exc:
        logger.warning("could not remove %s: %s", path, exc)


def file_size(path: str) -> int:
    return int(os.path.getsize(path)) if os.path.exists(path) else 0
