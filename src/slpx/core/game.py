"""
Pydantic v2 models for a decoded Slippi replay.

These models are the in-memory shape produced by a decoder (see slpx.decode) and consumed by
the occupancy resolver, the frame columnarizer and the summary encoder. Start/End are fixed
shape (extra="forbid"); per-frame fighter state is a mapping keyed by the field names declared
in slpx.core.frames.

Style
- Zero-IO (stdlib + pydantic only).
- Ports are IntEnum values 0..3 and serialize as integers.

Examples:
    >>> from slpx.core.game import Game, Player, Port, Start, Slippi
    >>> start = Start(slippi=Slippi(major=3, minor=16), players=[Player(port=Port.P1, character=2)])
    >>> Game(start=start).frames is None
    True
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

from .typing import FrameIndex, JsonDict
from .versioning import SlippiVersion

__all__ = [
    "Port",
    "Slippi",
    "Netplay",
    "Player",
    "Start",
    "PlayerEnd",
    "End",
    "FighterState",
    "PortFrame",
    "Frame",
    "Game",
]


class Port(IntEnum):
    """Controller port. Column names use the ``P1``..``P4`` labels."""

    P1 = 0
    P2 = 1
    P3 = 2
    P4 = 3


# ============================================================================
# Start / End
# ============================================================================


class Slippi(BaseModel):
    """Version of the Slippi build that recorded the replay."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    revision: int = Field(default=0, ge=0)

    @property
    def version(self) -> SlippiVersion:
        return SlippiVersion(self.major, self.minor, self.revision)


class Netplay(BaseModel):
    """Online identity of a player (Slippi 3.9+)."""

    model_config = ConfigDict(extra="forbid")

    name: str
    code: str
    suid: str | None = None


class Player(BaseModel):
    """
    Participant in a port, as recorded in the game-start event.

    Attributes:
        port (Port): Controller port.
        character (int): External character id (see slpx.core.constants.ICE_CLIMBERS).
        type (int): Player type (0 human, 1 CPU, 2 demo).
        stocks (int): Starting stock count.
        costume (int): Costume index.
        team (int | None): Team id in team games.
        name_tag (str | None): In-game name tag.
        netplay (Netplay | None): Online identity.
    """

    model_config = ConfigDict(extra="forbid")

    port: Port
    character: int = Field(ge=0)
    type: int = 0
    stocks: int = 4
    costume: int = 0
    team: int | None = None
    name_tag: str | None = None
    netplay: Netplay | None = None


class Start(BaseModel):
    """
    Game-start record.

    Notes:
        ``players`` lists occupied ports only, in port order as decoded; the occupancy resolver
        and the columnarizer both follow this order.
    """

    model_config = ConfigDict(extra="forbid")

    slippi: Slippi
    players: list[Player] = Field(default_factory=list)
    stage: int = 0
    timer: int = 480
    is_teams: bool = False
    is_pal: bool | None = None
    random_seed: int = 0
    mode: int | None = None
    match_id: str | None = None

    @model_validator(mode="after")
    def _unique_ports(self) -> Start:
        ports = [p.port for p in self.players]
        if len(set(ports)) != len(ports):
            raise ValueError(f"duplicate ports in players: {[int(p) for p in ports]}")
        return self


class PlayerEnd(BaseModel):
    model_config = ConfigDict(extra="forbid")

    port: Port
    placement: int


class End(BaseModel):
    """Game-end record (absent for replays that were cut short)."""

    model_config = ConfigDict(extra="forbid")

    method: int
    lras_initiator: Port | None = None
    players: list[PlayerEnd] | None = None


# ============================================================================
# Frames
# ============================================================================


class FighterState(BaseModel):
    """Pre-frame and post-frame state of one fighter on one frame."""

    model_config = ConfigDict(extra="forbid")

    pre: dict[str, Any] = Field(default_factory=dict)
    post: dict[str, Any] = Field(default_factory=dict)


class PortFrame(BaseModel):
    """Leader state plus, for Ice Climbers, the follower (Nana) when she is alive."""

    model_config = ConfigDict(extra="forbid")

    leader: FighterState
    follower: FighterState | None = None


class Frame(BaseModel):
    model_config = ConfigDict(extra="forbid")

    index: FrameIndex
    ports: dict[Port, PortFrame] = Field(default_factory=dict)


class Game(BaseModel):
    """
    Fully decoded replay.

    Attributes:
        start (Start): Game-start record.
        end (End | None): Game-end record, if the replay has one.
        metadata (JsonDict | None): Free-form metadata block.
        hash (str | None): Integrity hash supplied by the decoder.
        frames (list[Frame] | None): Frames in recorded order; None when frames were skipped.
    """

    model_config = ConfigDict(extra="forbid")

    start: Start
    end: End | None = None
    metadata: JsonDict | None = None
    hash: str | None = None
    frames: list[Frame] | None = None
