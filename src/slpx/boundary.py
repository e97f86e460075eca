"""
Boundary entry points: one call ingests one replay and returns a ReplayArtifact.

read_slippi(path, skip_frames) drives, for a single replay:

    open → decode → port occupancy → columnarize → summaries → write Arrow IPC → ReplayArtifact

and the get_* functions mirror the accessor entry points a host runtime binds to.

Contract
- Every failure raises an slpx.io.errors.SlpxError subclass before a ReplayArtifact exists;
  no partially built artifact ever escapes.
- All state is local to the call (no module-level caches), so concurrent calls only share the
  filesystem, where distinct hashes map to distinct files.
- Summaries are encoded before the Arrow file is written, so a fatal summary failure leaves no
  file behind.
"""

from __future__ import annotations

import logging
import os

from slpx.core.errors import EncodingError
from slpx.core.game import Game
from slpx.core.occupancy import port_occupancy
from slpx.core.summary import encode_summaries
from slpx.io.columnar import columnarize
from slpx.io.config import IoSettings
from slpx.io.errors import BoundaryEncodingError, ReplayInputError, SummaryEncodingError
from slpx.io.fs import remove_quietly
from slpx.io.write import write_frames

from .artifact import ReplayArtifact
from .decode import DecodeOptions, Decoder, peppi_decoder

__all__ = [
    "read_slippi",
    "get_start",
    "get_end",
    "get_metadata",
    "get_hash",
    "get_frames_path",
]

logger = logging.getLogger(__name__)


def _ensure_text(value: str, what: str) -> str:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError as exc:
        raise BoundaryEncodingError(f"{what} is not representable as UTF-8: {value!r}") from exc
    return value


def _decode(path: str, decoder: Decoder, options: DecodeOptions) -> Game:
    try:
        fh = open(path, "rb")
    except OSError as exc:
        raise ReplayInputError(f"failed to open replay {path!r}: {exc}") from exc
    with fh:
        try:
            game = decoder(fh, options)
        except Exception as exc:
            raise ReplayInputError(f"failed to decode replay {path!r}: {exc}") from exc
    if not isinstance(game, Game):
        raise ReplayInputError(f"decoder returned {type(game).__name__}, expected Game")
    return game


def read_slippi(
    path: str | os.PathLike[str],
    skip_frames: int,
    *,
    decoder: Decoder | None = None,
    settings: IoSettings | None = None,
) -> ReplayArtifact:
    """
    Ingest one replay file.

    Args:
        path: Replay file (.slp).
        skip_frames (int): Integer-encoded boolean; non-zero decodes without frames and writes
            a zero-row (but fully typed) Arrow file.
        decoder (Decoder | None): Replay decoder (default: peppi_decoder).
        settings (IoSettings | None): IO settings (default: IoSettings.load()).

    Returns:
        ReplayArtifact: Summaries, hash, and the finalized Arrow IPC path.

    Raises:
        ReplayInputError: File could not be opened or decoded.
        SummaryEncodingError: Start record could not be encoded.
        FramesSchemaError / FramesWriteError / FramesFinalizeError: Arrow materialization failed.
        BoundaryEncodingError: Path or text not representable as UTF-8.
    """
    settings = settings if settings is not None else IoSettings.load()
    decoder = decoder if decoder is not None else peppi_decoder
    options = DecodeOptions(skip_frames=int(skip_frames) != 0)
    path_str = _ensure_text(os.fsdecode(path), "replay path")

    logger.info("ingesting %s (skip_frames=%s)", path_str, options.skip_frames)
    game = _decode(path_str, decoder, options)

    occupancy = port_occupancy(game.start)
    columns = columnarize(
        game.frames, occupancy, game.start.slippi.version, strict=settings.strict_schema
    )

    try:
        summaries = encode_summaries(game)
    except EncodingError as exc:
        raise SummaryEncodingError(str(exc)) from exc
    texts = {
        "start summary": summaries.start,
        "end summary": summaries.end,
        "metadata summary": summaries.metadata,
        "hash": game.hash,
    }
    for what, text in texts.items():
        if text is not None:
            _ensure_text(text, what)

    result = write_frames(columns, settings, hash_=game.hash)
    try:
        frames_path = _ensure_text(result.path, "frames path")
    except BoundaryEncodingError:
        remove_quietly(result.path)
        raise

    logger.info(
        "ingested %s: %d ports, %d frames -> %s", path_str, len(occupancy), result.rows, frames_path
    )
    return ReplayArtifact(
        start_json=summaries.start,
        end_json=summaries.end,
        metadata_json=summaries.metadata,
        integrity_hash=game.hash,
        frames_arrow_path=frames_path,
    )


def get_start(artifact: ReplayArtifact) -> str:
    return artifact.start()


def get_end(artifact: ReplayArtifact) -> str:
    return artifact.end()


def get_metadata(artifact: ReplayArtifact) -> str:
    return artifact.metadata()


def get_hash(artifact: ReplayArtifact) -> str:
    return artifact.hash()


def get_frames_path(artifact: ReplayArtifact) -> str:
    return artifact.frames_path()
