"""
Custom exceptions for slpx ingestion.

Purpose
- Provide one fatal error family (SlpxError) that the boundary raises for every unrecoverable
  condition, so callers can rely on "no artifact is returned unless everything succeeded".
- Keep slpx.core as the source of truth for schema/version/encoding errors (see
  slpx.core.errors); the boundary chains those into the types below.

Taxonomy
- ReplayInputError: input file could not be opened or decoded.
- SummaryEncodingError: the mandatory start record could not be encoded.
- FramesSchemaError: frame data does not match the struct type built from occupancy.
- FramesWriteError: destination could not be created or written.
- FramesFinalizeError: footer/fsync/rename failed after the data was written.
- BoundaryEncodingError: a path or text is not representable as UTF-8.
- IoConfigError: invalid or unsupported configuration.

Notes
- These exceptions do not perform any IO and are stdlib-only.
"""

from __future__ import annotations


class SlpxError(Exception):
    """
    Base class for fatal ingestion errors.

    Notes:
        Raised before any ReplayArtifact escapes; no partial artifact is ever returned.
    """


class ReplayInputError(SlpxError):
    """Raised when the replay file cannot be opened or the decoder fails."""


class SummaryEncodingError(SlpxError):
    """Raised when the start record cannot be encoded (optional records degrade instead)."""


class FramesSchemaError(SlpxError):
    """
    Raised when frame data does not match the struct type derived from occupancy.

    Examples:
        - A frame is missing an occupied port
        - Follower data on a port that is not playing Ice Climbers
        - Unknown pre/post fields under strict schema
    """


class FramesWriteError(SlpxError):
    """
    Raised when the Arrow IPC destination cannot be created or written.

    Notes:
        The temporary file is removed before this is raised.
    """


class FramesFinalizeError(SlpxError):
    """
    Raised when the IPC footer, fsync, or the atomic rename fails.

    Notes:
        The write path is tmp IPC file → close (footer) → fsync → os.replace(tmp, final).
    """


class BoundaryEncodingError(SlpxError):
    """Raised when a path or summary text is not representable as UTF-8 text."""


class IoConfigError(SlpxError):
    """
    Raised when IO configuration is invalid or unsupported.

    Examples:
        - Unsupported compression codec
        - Output directory that is not a directory
    """
