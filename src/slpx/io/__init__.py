"""
slpx.io — Arrow-first IO layer for Slippi frame artifacts.

## Responsibilities
- Build the nested frame struct type from port occupancy and replay version (columnar).
- Write one Arrow IPC file per replay with atomic tmp → ready publish (write, fs, paths).
- Read artifacts back zero-copy (read) and carry runtime settings (config).

## Public API
- IoSettings — configuration (output_dir, compression, strict_schema, fsync, unique_unknown).
- columnarize / frames_type — row frames → struct column.
- write_frames — columnar frames → finalized Arrow IPC file.
- read_frames / scan_frames — consumer-side readers.

## Import DAG discipline
- Depends only on stdlib, pyarrow/polars, and slpx.core.*.
- MUST NOT import slpx.boundary, slpx.artifact, slpx.decode or slpx.cli.

## Notes
- IO write path: tmp IPC file → close (footer) → fsync → os.replace(tmp, final).
- Path: <output_dir or system temp>/slippi_frames_<hash-or-unknown-uuid>.arrow.
"""

from __future__ import annotations

from .columnar import FrameColumns, columnarize, frames_type
from .config import IoSettings
from .read import read_frames, scan_frames
from .write import WriteResult, write_frames

__all__ = [
    "IoSettings",
    "FrameColumns",
    "columnarize",
    "frames_type",
    "WriteResult",
    "write_frames",
    "read_frames",
    "scan_frames",
]
