"""
Path helpers for Arrow IPC frame artifacts.

Layout (local files)
- <output_dir>/slippi_frames_<token>.arrow
- <output_dir>/slippi_frames_<token>.arrow.<uuid>.tmp   (in-flight write, same directory)

Token
- The replay's integrity hash, with characters outside [A-Za-z0-9._-] replaced by "_".
- Without a hash: "unknown-<uuid4 hex>" (or plain "unknown" when unique_unknown is off), so
  concurrent ingestions of hash-less replays never target the same file.

Notes
- stdlib + slpx.io.config only; no file IO happens here.
"""

from __future__ import annotations

import os
import re
import tempfile
import uuid
from dataclasses import dataclass
from typing import Final

from slpx.core.constants import FRAMES_FILE_PREFIX, FRAMES_FILE_SUFFIX, UNKNOWN_HASH

from .config import IoSettings

_UNSAFE_RE: Final[re.Pattern[str]] = re.compile(r"[^A-Za-z0-9._-]")


def output_dir(settings: IoSettings) -> str:
    """
    Directory that receives frame artifacts.

    Returns:
        str: settings.output_dir, or the system temp directory when unset.
    """
    return settings.output_dir or tempfile.gettempdir()


def sanitize_token(text: str) -> str:
    """
    Make a hash safe for use in a file name.

    Examples:
        >>> sanitize_token("xxh3:00ff/ab")
        'xxh3_00ff_ab'
    """
    s = _UNSAFE_RE.sub("_", text.strip())
    # Leading dots would hide the file or produce "." / ".." names.
    return s.lstrip(".") or UNKNOWN_HASH


def frames_token(hash_: str | None, *, unique_unknown: bool = True) -> str:
    """
    Token that identifies a replay's frame artifact.

    Args:
        hash_ (str | None): Integrity hash from the decoder.
        unique_unknown (bool): Append a random suffix when the hash is absent.

    Returns:
        str: Sanitized hash, "unknown-<hex>", or "unknown".
    """
    if hash_:
        return sanitize_token(hash_)
    if unique_unknown:
        return f"{UNKNOWN_HASH}-{uuid.uuid4().hex}"
    return UNKNOWN_HASH


@dataclass(slots=True, frozen=True)
class FramesPaths:
    """
    Temporary and final paths for one frame artifact.

    Attributes:
        tmp_path (str): Unique in-flight path ("*.arrow.<uuid>.tmp").
        final_path (str): Published path after the atomic rename.
    """

    tmp_path: str
    final_path: str


def frames_paths(settings: IoSettings, hash_: str | None) -> FramesPaths:
    """
    Compute the tmp and final paths for a replay's frame artifact.

    Notes:
        The tmp name carries its own uuid so two writers for the same hash never share a
        tmp file; the last rename wins and both see a complete file at final_path.
    """
    token = frames_token(hash_, unique_unknown=settings.unique_unknown)
    final_path = os.path.join(output_dir(settings), f"{FRAMES_FILE_PREFIX}{token}{FRAMES_FILE_SUFFIX}")
    tmp_path = f"{final_path}.{uuid.uuid4().hex}.tmp"
    return FramesPaths(tmp_path=tmp_path, final_path=final_path)
