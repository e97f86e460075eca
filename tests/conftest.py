from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

import pytest

from slpx.core.constants import FIRST_FRAME_INDEX, ICE_CLIMBERS
from slpx.core.game import (
    End,
    FighterState,
    Frame,
    Game,
    Player,
    PlayerEnd,
    Port,
    PortFrame,
    Slippi,
    Start,
)
from slpx.decode import DecodeOptions
from slpx.io.config import IoSettings

FOX = 2
MARTH = 9


def make_start(
    characters: Sequence[int] = (FOX, ICE_CLIMBERS),
    *,
    ports: Sequence[int] | None = None,
    version: tuple[int, int, int] = (3, 16, 0),
) -> Start:
    ports = list(ports) if ports is not None else list(range(len(characters)))
    return Start(
        slippi=Slippi(major=version[0], minor=version[1], revision=version[2]),
        players=[Player(port=Port(p), character=c) for p, c in zip(ports, characters)],
        stage=31,
        random_seed=1234,
        match_id="mode.unranked-2024-01-01T00:00:00.00-0",
    )


def make_state(i: int, character: int) -> FighterState:
    return FighterState(
        pre={"state": 14, "position_x": float(i), "position_y": 0.5, "buttons": i % 8},
        post={"character": character, "position_x": float(i), "percent": float(i % 100), "stocks": 4},
    )


def make_frames(start: Start, n: int, *, nana_dead_every: int = 100) -> list[Frame]:
    frames = []
    for i in range(n):
        ports: dict[Port, PortFrame] = {}
        for player in start.players:
            follower = None
            if player.character == ICE_CLIMBERS and i % nana_dead_every != nana_dead_every - 1:
                follower = make_state(i, 15)
            ports[player.port] = PortFrame(leader=make_state(i, player.character), follower=follower)
        frames.append(Frame(index=FIRST_FRAME_INDEX + i, ports=ports))
    return frames


def make_game(
    characters: Sequence[int] = (FOX, ICE_CLIMBERS),
    n_frames: int = 10,
    *,
    hash_: str | None = "deadbeef00112233",
    with_end: bool = True,
    metadata: dict[str, Any] | None = None,
    version: tuple[int, int, int] = (3, 16, 0),
    skip_frames: bool = False,
) -> Game:
    start = make_start(characters, version=version)
    end = None
    if with_end:
        end = End(
            method=2,
            players=[PlayerEnd(port=p.port, placement=i) for i, p in enumerate(start.players)],
        )
    return Game(
        start=start,
        end=end,
        metadata=metadata if metadata is not None else {"playedOn": "dolphin", "lastFrame": n_frames - 124},
        hash=hash_,
        frames=None if skip_frames else make_frames(start, n_frames),
    )


class FakeDecoder:
    """Decoder stand-in: records calls and returns a prepared Game."""

    def __init__(self, game: Game | Callable[[DecodeOptions], Game]) -> None:
        self.game = game
        self.calls: list[DecodeOptions] = []
        self.read_bytes: list[bytes] = []

    def __call__(self, stream, options: DecodeOptions) -> Game:
        self.calls.append(options)
        self.read_bytes.append(stream.read())
        if callable(self.game):
            return self.game(options)
        return self.game


@pytest.fixture
def game_factory() -> Callable[..., Game]:
    return make_game


@pytest.fixture
def start_factory() -> Callable[..., Start]:
    return make_start


@pytest.fixture
def frames_factory() -> Callable[..., list[Frame]]:
    return make_frames


@pytest.fixture
def fake_decoder_factory() -> Callable[..., FakeDecoder]:
    return FakeDecoder


@pytest.fixture
def replay_file(tmp_path) -> str:
    p = tmp_path / "game.slp"
    p.write_bytes(b"{U\x03raw[$U#l\x00\x00\x00\x00")
    return str(p)


@pytest.fixture
def settings(tmp_path) -> IoSettings:
    out = tmp_path / "frames"
    return IoSettings(output_dir=str(out))
