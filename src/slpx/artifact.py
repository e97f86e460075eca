"""
Immutable result of one replay ingestion.

ReplayArtifact aggregates the text summaries, the integrity hash, and the path of the Arrow IPC
frame file. It holds plain strings only (no open file, no Arrow buffers), so it can be passed by
value, pickled, or handed to a foreign runtime whose own reference counting governs its lifetime.

Absent vs empty
- Accessors return "" for an absent end record, metadata block, or hash. Callers must read ""
  as "absent" for those three; a present-but-empty encoding is never "" (an empty metadata
  mapping encodes as "{}"), so the collapse only merges "absent" with an empty hash string.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class ReplayArtifact:
    """
    Opaque, immutable handle for one ingested replay.

    Attributes:
        start_json (str): Canonical JSON of the game-start record.
        end_json (str | None): Canonical JSON of the game-end record, if present.
        metadata_json (str | None): Canonical JSON of the metadata block, if present.
        integrity_hash (str | None): Hash supplied by the decoder, if any.
        frames_arrow_path (str): Finalized Arrow IPC file holding the frames.

    Notes:
        Construction performs no IO; accessors never mutate state and are safe to call
        concurrently and in any order.

    Examples:
        >>> a = ReplayArtifact(start_json="{}", end_json=None, metadata_json=None,
        ...                    integrity_hash=None, frames_arrow_path="/tmp/x.arrow")
        >>> a.end() == "" and a.frames_path() == "/tmp/x.arrow"
        True
    """

    start_json: str
    end_json: str | None
    metadata_json: str | None
    integrity_hash: str | None
    frames_arrow_path: str

    def start(self) -> str:
        return self.start_json

    def end(self) -> str:
        """End record as JSON, or "" when absent."""
        return self.end_json or ""

    def metadata(self) -> str:
        """Metadata block as JSON, or "" when absent."""
        return self.metadata_json or ""

    def hash(self) -> str:
        """Integrity hash, or "" when absent."""
        return self.integrity_hash or ""

    def frames_path(self) -> str:
        return self.frames_arrow_path

    def to_dict(self) -> dict[str, str]:
        """Accessor view (absent fields as "")."""
        return {
            "start": self.start(),
            "end": self.end(),
            "metadata": self.metadata(),
            "hash": self.hash(),
            "frames_path": self.frames_path(),
        }
