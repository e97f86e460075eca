"""
Read utilities for Arrow IPC frame artifacts (consumer side).

Overview
- read_frames(): pyarrow Table over the file, memory-mapped by default (zero-copy buffers).
- read_frames_schema(): schema and key-value metadata without reading the record batch.
- scan_frames(): Polars LazyFrame over the file for downstream analysis.

Notes
- These helpers never mutate the artifact; the writer's tmp → rename publish guarantees that a
  path handed out by slpx.boundary is complete before any of these can see it.
"""

from __future__ import annotations

import polars as pl
import pyarrow as pa
import pyarrow.ipc as ipc


def read_frames(path: str, *, memory_map: bool = True) -> pa.Table:
    """
    Read a frame artifact into a pyarrow Table.

    Args:
        path (str): Arrow IPC file written by slpx.io.write.
        memory_map (bool): Memory-map the file instead of reading it into memory.

    Returns:
        pa.Table: One column ("frame") with one row per frame.
    """
    source = pa.memory_map(path, "r") if memory_map else pa.OSFile(path, "rb")
    with source:
        return ipc.open_file(source).read_all()


def read_frames_schema(path: str) -> pa.Schema:
    """
    Read only the schema (including slpx_* metadata) of a frame artifact.
    """
    with pa.memory_map(path, "r") as source:
        return ipc.open_file(source).schema


def scan_frames(path: str) -> pl.LazyFrame:
    """
    Lazily scan a frame artifact with Polars.

    Returns:
        pl.LazyFrame: Single struct column "frame"; use ``.unnest("frame")`` to reach ``id`` and
        ``ports``.
    """
    return pl.scan_ipc(path)
