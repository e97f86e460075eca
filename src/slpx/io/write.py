"""
Arrow IPC writer for columnar frames.

Overview
- Wraps the frame struct column under a single top-level field ("frame").
- Writes an Arrow IPC *file* (schema header, one record batch, footer) to a unique tmp path,
  finalizes it (writer close → optional fsync), then atomically renames it into place.
- Returns a WriteResult only after the rename; a returned path is always a complete file that
  any Arrow IPC reader (pyarrow, polars, Arrow.jl, ...) can open or memory-map.

Failure mapping (tmp file removed in every case)
- FramesWriteError: tmp file could not be created or the batch could not be written.
- FramesSchemaError: the column does not match its occupancy/version or the schema.
- FramesFinalizeError: footer/fsync/rename failed.

Notes
- The schema embeds key-value metadata:
    b"slpx_schema_version"  = FRAMES_SCHEMA_V
    b"slpx_slippi_version"  = replay version
    b"slpx_hash"            = integrity hash ("" when absent)
- No inter-process locking; the tmp → rename sequence is the only synchronization.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

import pyarrow as pa
import pyarrow.ipc as ipc

from slpx.core.constants import FRAME_FIELD
from slpx.core.versioning import FRAMES_SCHEMA_V

from .columnar import FrameColumns, validate_columns
from .config import IoSettings
from .errors import FramesFinalizeError, FramesSchemaError, FramesWriteError
from .fs import file_size, fsync_path, makedirs, remove_quietly, rename_atomic
from .paths import FramesPaths, frames_paths, output_dir

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class WriteResult:
    """
    Outcome of a finalized write.

    Attributes:
        path (str): Final path of the Arrow IPC file.
        rows (int): Number of frames written.
        bytes (int): File size in bytes.
    """

    path: str
    rows: int
    bytes: int


def frames_schema(columns: FrameColumns, hash_: str | None) -> pa.Schema:
    """
    Schema of the IPC file: one non-nullable struct field named "frame".

    Args:
        columns (FrameColumns): Columnar frames (its type becomes the field type).
        hash_ (str | None): Integrity hash recorded in schema metadata.
    """
    meta = {
        b"slpx_schema_version": str(FRAMES_SCHEMA_V).encode(),
        b"slpx_slippi_version": str(columns.version).encode(),
        b"slpx_hash": (hash_ or "").encode("utf-8"),
    }
    return pa.schema([pa.field(FRAME_FIELD, columns.type, nullable=False)], metadata=meta)


def _record_batch(columns: FrameColumns, schema: pa.Schema) -> pa.RecordBatch:
    validate_columns(columns)
    try:
        return pa.RecordBatch.from_arrays([columns.array], schema=schema)
    except (pa.ArrowException, TypeError, ValueError) as exc:
        raise FramesSchemaError(f"frame column does not match IPC schema: {exc}") from exc


def _write_ipc(paths: FramesPaths, schema: pa.Schema, batch: pa.RecordBatch, settings: IoSettings) -> None:
    options = ipc.IpcWriteOptions(compression=settings.compression)
    try:
        sink = pa.OSFile(paths.tmp_path, "wb")
    except (OSError, pa.ArrowException) as exc:
        raise FramesWriteError(f"failed to create {paths.tmp_path}: {exc}") from exc
    with sink:
        try:
            writer = ipc.new_file(sink, schema, options=options)
            writer.write_batch(batch)
        except (OSError, pa.ArrowException) as exc:
            raise FramesWriteError(f"failed to write frames to {paths.tmp_path}: {exc}") from exc
        try:
            # close() writes the footer; without it the file is not a valid IPC file.
            writer.close()
        except (OSError, pa.ArrowException) as exc:
            raise FramesFinalizeError(f"failed to finalize {paths.tmp_path}: {exc}") from exc


def write_frames(
    columns: FrameColumns,
    settings: IoSettings,
    *,
    hash_: str | None,
) -> WriteResult:
    """
    Persist columnar frames as an Arrow IPC file with atomic publish semantics.

    Args:
        columns (FrameColumns): Output of slpx.io.columnar.columnarize.
        settings (IoSettings): Output directory, compression, fsync policy.
        hash_ (str | None): Replay integrity hash; names the destination file.

    Returns:
        WriteResult: Final path, row count and size.

    Raises:
        FramesWriteError: Destination could not be created or written.
        FramesSchemaError: Column/schema mismatch.
        FramesFinalizeError: Footer, fsync, or rename failed.

    Notes:
        - Same hash → same final path; a concurrent writer for the same hash renames over it
          with an equally complete file.
        - Written uncompressed unless settings.compression is set.
    """
    schema = frames_schema(columns, hash_)
    batch = _record_batch(columns, schema)

    try:
        makedirs(output_dir(settings), exist_ok=True)
    except OSError as exc:
        raise FramesWriteError(f"failed to create output directory {output_dir(settings)!r}: {exc}") from exc

    paths = frames_paths(settings, hash_)
    try:
        _write_ipc(paths, schema, batch, settings)
        try:
            if settings.fsync:
                fsync_path(paths.tmp_path)
            rename_atomic(paths.tmp_path, paths.final_path)
        except OSError as exc:
            raise FramesFinalizeError(f"failed to publish {paths.final_path}: {exc}") from exc
    except BaseException:
        remove_quietly(paths.tmp_path)
        raise

    result = WriteResult(path=paths.final_path, rows=len(columns), bytes=file_size(paths.final_path))
    logger.info("wrote %d frames to %s (%d bytes)", result.rows, result.path, result.bytes)
    return result
