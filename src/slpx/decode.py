"""
Decoder seam: binary replay stream → slpx.core.game.Game.

The replay container itself is parsed by an external library. slpx only needs a callable
matching the Decoder protocol; tests inject fakes, and ``peppi_decoder`` adapts the
``peppi-py`` bindings (imported lazily, install with the ``peppi`` extra).

peppi-py returns dataclasses whose frame fields are Arrow arrays grouped by port
(leader/follower → pre/post → field). The adapter flattens grouped fields with "_"
(``position.x`` → ``position_x``), converts enums to their values, and transposes the
per-port columns back into row frames for the columnarizer. Frame fields unknown to
slpx.core.frames are dropped, as are fields the replay predates (peppi-py leaves those as
None rather than a column). peppi-py does not hash replays; peppi_decoder hashes the bytes.
"""

from __future__ import annotations

import dataclasses
import logging
import os
import tempfile
from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from typing import Any, BinaryIO, Protocol

import pyarrow as pa

from slpx.core.frames import POST_FIELDS, PRE_FIELDS, field_names
from slpx.core.game import End, FighterState, Frame, Game, PortFrame, Start
from slpx.core.hashing import hash_replay

logger = logging.getLogger(__name__)

_PRE_NAMES = field_names(PRE_FIELDS)
_POST_NAMES = field_names(POST_FIELDS)


@dataclass(frozen=True, slots=True)
class DecodeOptions:
    """
    Options forwarded to the decoder.

    Attributes:
        skip_frames (bool): Decode only start/end/metadata; frames come back as None.
    """

    skip_frames: bool = False


class Decoder(Protocol):
    def __call__(self, stream: BinaryIO, options: DecodeOptions) -> Game: ...


# -----------------------------------------------------------------------------
# Generic conversion helpers
# -----------------------------------------------------------------------------


def plain(value: Any) -> Any:
    """
    Convert decoder output into plain Python values.

    Dataclasses become dicts, enums their values, Arrow arrays lists, tuples lists.

    Examples:
        >>> from enum import Enum
        >>> class Color(Enum):
        ...     RED = 1
        >>> plain((Color.RED, {"a": (1, 2)}))
        [1, {'a': [1, 2]}]
    """
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: plain(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (pa.Array, pa.ChunkedArray)):
        return value.to_pylist()
    if isinstance(value, Mapping):
        return {k: plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [plain(v) for v in value]
    return value


def flatten(mapping: Mapping[str, Any], prefix: str = "") -> dict[str, Any]:
    """
    Flatten nested mappings, joining keys with "_".

    Examples:
        >>> flatten({"position": {"x": 1, "y": 2}, "state": 3})
        {'position_x': 1, 'position_y': 2, 'state': 3}
    """
    out: dict[str, Any] = {}
    for key, value in mapping.items():
        name = f"{prefix}_{key}" if prefix else str(key)
        if isinstance(value, Mapping):
            out.update(flatten(value, name))
        else:
            out[name] = value
    return out


def port_index(value: Any) -> int:
    """
    Normalize a port given as 0-based int or as a "P1".."P4" label.

    Examples:
        >>> port_index("P3"), port_index(1)
        (2, 1)
    """
    if isinstance(value, str):
        return int(value.strip().upper().removeprefix("P")) - 1
    return int(value)


# -----------------------------------------------------------------------------
# peppi-py adapter
# -----------------------------------------------------------------------------


def _netplay(raw: Any) -> dict[str, Any] | None:
    if not isinstance(raw, dict):
        return None
    return {k: raw[k] for k in ("name", "code", "suid") if k in raw}


def _start(raw: dict[str, Any]) -> Start:
    version = list(raw["slippi"]["version"]) + [0, 0, 0]
    players = []
    for p in raw.get("players") or []:
        team = p.get("team")
        players.append(
            {
                "port": port_index(p["port"]),
                "character": p["character"],
                "type": p.get("type") or 0,
                "stocks": p.get("stocks", 4),
                "costume": p.get("costume", 0),
                "team": team.get("color") if isinstance(team, dict) else team,
                "name_tag": p.get("name_tag"),
                "netplay": _netplay(p.get("netplay")),
            }
        )
    scene = raw.get("scene")
    match = raw.get("match")
    return Start.model_validate(
        {
            "slippi": {"major": version[0], "minor": version[1], "revision": version[2]},
            "players": players,
            "stage": raw.get("stage", 0),
            "timer": raw.get("timer", 480),
            "is_teams": bool(raw.get("is_teams", False)),
            "is_pal": raw.get("is_pal"),
            "random_seed": raw.get("random_seed", 0),
            "mode": scene.get("major") if isinstance(scene, dict) else None,
            "match_id": match.get("id") if isinstance(match, dict) else None,
        }
    )


def _end(raw: dict[str, Any] | None) -> End | None:
    if raw is None:
        return None
    players = raw.get("players")
    return End.model_validate(
        {
            "method": raw["method"],
            "lras_initiator": None if raw.get("lras_initiator") is None else port_index(raw["lras_initiator"]),
            "players": None
            if players is None
            else [{"port": port_index(p["port"]), "placement": p["placement"]} for p in players],
        }
    )


def _columns(raw: Mapping[str, Any] | None, names: frozenset[str], where: str) -> dict[str, list[Any]]:
    if raw is None:
        return {}
    flat = flatten(raw)
    dropped = sorted(k for k in flat if k not in names)
    if dropped:
        logger.debug("dropping %s fields unknown to slpx: %s", where, dropped)
    # Fields newer than the replay come back as None instead of a column.
    return {k: v for k, v in flat.items() if k in names and v is not None}


def _row(columns: dict[str, list[Any]], i: int) -> dict[str, Any]:
    return {k: col[i] for k, col in columns.items()}


def _frames(raw: dict[str, Any] | None, start: Start) -> list[Frame] | None:
    if raw is None:
        return None
    ids = raw.get("id") or []
    ports = raw.get("ports") or []
    per_port = []
    for player, data in zip(start.players, ports):
        leader = data["leader"]
        follower = data.get("follower")
        per_port.append(
            (
                player.port,
                _columns(leader.get("pre"), _PRE_NAMES, "pre"),
                _columns(leader.get("post"), _POST_NAMES, "post"),
                None if follower is None else _columns(follower.get("pre"), _PRE_NAMES, "pre"),
                None if follower is None else _columns(follower.get("post"), _POST_NAMES, "post"),
            )
        )

    frames: list[Frame] = []
    for i, index in enumerate(ids):
        port_frames: dict[Any, PortFrame] = {}
        for port, pre, post, f_pre, f_post in per_port:
            follower_state = None
            if f_pre is not None and f_post is not None:
                row_pre, row_post = _row(f_pre, i), _row(f_post, i)
                # Nana is absent on frames where every follower value is null.
                if any(v is not None for v in row_pre.values()):
                    follower_state = FighterState(pre=row_pre, post=row_post)
            port_frames[port] = PortFrame(
                leader=FighterState(pre=_row(pre, i), post=_row(post, i)),
                follower=follower_state,
            )
        frames.append(Frame(index=index, ports=port_frames))
    return frames


def game_from_peppi(peppi_game: Any, *, hash_: str | None = None) -> Game:
    """
    Convert a peppi-py Game into slpx's Game model.

    Args:
        peppi_game: Object exposing ``start``, ``end``, ``metadata`` and ``frames``.
        hash_ (str | None): Integrity hash of the replay bytes. peppi-py's Game carries no
            hash, so the decoder computes one; a ``hash`` attribute is used when present.
    """
    start = _start(plain(peppi_game.start))
    return Game(
        start=start,
        end=_end(plain(peppi_game.end)),
        metadata=plain(peppi_game.metadata),
        hash=hash_ if hash_ is not None else getattr(peppi_game, "hash", None),
        frames=_frames(plain(peppi_game.frames), start),
    )


def peppi_decoder(stream: BinaryIO, options: DecodeOptions) -> Game:
    """
    Decode a replay with peppi-py.

    peppi-py reads from a path, so the stream's own file is used when it has one; otherwise
    the stream is spooled to a temporary file that is removed afterwards. The integrity hash
    is the SHA-256 of the stream's bytes (see slpx.core.hashing).

    Raises:
        RuntimeError: If peppi-py is not installed.
    """
    try:
        import peppi_py  # type: ignore
    except ImportError as e:  # pragma: no cover
        raise RuntimeError("peppi-py is required to decode replays (pip install 'slpx[peppi]')") from e

    name = getattr(stream, "name", None)
    if isinstance(name, str) and os.path.isfile(name):
        digest = hash_replay(stream)
        return game_from_peppi(peppi_py.read_slippi(name, skip_frames=options.skip_frames), hash_=digest)

    with tempfile.NamedTemporaryFile(suffix=".slp", delete=False) as tmp:
        digest = hash_replay(stream, sink=tmp)
    try:
        return game_from_peppi(
            peppi_py.read_slippi(tmp.name, skip_frames=options.skip_frames), hash_=digest
        )
    finally:
        os.remove(tmp.name)
