"""
slpx — Slippi replays as Arrow IPC files plus JSON summaries.

## Responsibilities
- Ingest one replay per call: decode, derive port occupancy, columnarize frames into a single
  nested Arrow struct column, write it as a finalized Arrow IPC file, and encode start/end/
  metadata as canonical JSON.
- Return an immutable ReplayArtifact (summaries + hash + file path) that can be handed to
  another runtime, which memory-maps the frames instead of re-parsing the replay.

## Public API
- read_slippi(path, skip_frames) — ingest one replay.
- ReplayArtifact — start()/end()/metadata()/hash()/frames_path().
- IoSettings — output directory, compression, strict schema, fsync.
- SlpxError — base of every fatal ingestion error.

## Examples
```python
from slpx import read_slippi
from slpx.io import read_frames

artifact = read_slippi("game.slp", 0)  # doctest: +SKIP
table = read_frames(artifact.frames_path())  # doctest: +SKIP
```
"""

from __future__ import annotations

from .artifact import ReplayArtifact
from .boundary import read_slippi
from .io.config import IoSettings
from .io.errors import SlpxError

__all__ = [
    "ReplayArtifact",
    "read_slippi",
    "IoSettings",
    "SlpxError",
]
