"""
Text summaries of the fixed-shape replay records.

Encodes Start (always present), End and the metadata block (optional) as canonical JSON. The
encoding is information-preserving: ``Start.model_validate(json_loads(text))`` rebuilds an equal
record. Absent records encode to None, which is distinct from the encoding of a present but
empty record (e.g. ``"{}"`` for empty metadata).

Failure policy
- Start is mandatory: failures raise EncodingError.
- End/metadata degrade to None with a warning; the frames artifact and the other summaries
  stay valid.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel

from .errors import EncodingError
from .game import Game, Start
from .serde import json_dumps_canonical

__all__ = [
    "ReplaySummaries",
    "encode_start",
    "encode_optional",
    "encode_summaries",
]

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class ReplaySummaries:
    start: str
    end: str | None
    metadata: str | None


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def encode_start(start: Start) -> str:
    """
    Encode the game-start record.

    Raises:
        EncodingError: If the record cannot be represented as JSON.
    """
    try:
        return json_dumps_canonical(_to_jsonable(start))
    except (TypeError, ValueError) as exc:
        raise EncodingError(f"failed to encode start record: {exc}") from exc


def encode_optional(value: BaseModel | dict[str, Any] | None, *, field: str) -> str | None:
    """
    Encode an optional record, degrading to None when it is absent or not encodable.

    Args:
        value: Pydantic record, JSON-like mapping, or None.
        field (str): Record name used in the degradation warning.

    Returns:
        str | None: Canonical JSON, or None.
    """
    if value is None:
        return None
    try:
        return json_dumps_canonical(_to_jsonable(value))
    except (TypeError, ValueError) as exc:
        logger.warning("dropping %s summary: %s", field, exc)
        return None


def encode_summaries(game: Game) -> ReplaySummaries:
    return ReplaySummaries(
        start=encode_start(game.start),
        end=encode_optional(game.end, field="end"),
        metadata=encode_optional(game.metadata, field="metadata"),
    )
