from __future__ import annotations

import logging
import os
from concurrent.futures import ThreadPoolExecutor

import pytest

from slpx.boundary import get_end, get_frames_path, get_hash, get_metadata, get_start, read_slippi
from slpx.core.constants import ICE_CLIMBERS
from slpx.core.game import End, FighterState, Port, Start
from slpx.core.serde import json_loads
from slpx.io.errors import (
    BoundaryEncodingError,
    FramesSchemaError,
    ReplayInputError,
    SummaryEncodingError,
)
from slpx.io.read import read_frames


def test_ingest_two_ports_with_ice_climbers(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    game = game_factory((2, ICE_CLIMBERS), n_frames=1200)
    decoder = fake_decoder_factory(game)

    artifact = read_slippi(replay_file, 0, decoder=decoder, settings=settings)

    assert decoder.calls[0].skip_frames is False
    assert decoder.read_bytes[0].startswith(b"{U\x03raw")
    assert artifact.hash() == game.hash
    assert Start.model_validate(json_loads(artifact.start())) == game.start
    assert End.model_validate(json_loads(artifact.end())) == game.end
    assert json_loads(artifact.metadata()) == game.metadata

    table = read_frames(artifact.frames_path())
    assert table.num_rows == 1200
    ports = table.schema.field("frame").type.field("ports").type
    assert [f.name for f in ports] == ["P1", "P2"]
    assert [f.name for f in ports.field("P1").type] == ["leader"]
    assert [f.name for f in ports.field("P2").type] == ["leader", "follower"]


def test_accessor_functions_mirror_methods(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    artifact = read_slippi(replay_file, 0, decoder=fake_decoder_factory(game_factory()), settings=settings)

    assert get_start(artifact) == artifact.start()
    assert get_end(artifact) == artifact.end()
    assert get_metadata(artifact) == artifact.metadata()
    assert get_hash(artifact) == artifact.hash()
    assert get_frames_path(artifact) == artifact.frames_path()
    # accessors are pure
    assert get_start(artifact) == get_start(artifact)


def test_ingest_is_idempotent_for_same_replay(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    decoder = fake_decoder_factory(game_factory(n_frames=30))

    a = read_slippi(replay_file, 0, decoder=decoder, settings=settings)
    b = read_slippi(replay_file, 0, decoder=decoder, settings=settings)

    assert a == b
    assert read_frames(a.frames_path()).equals(read_frames(b.frames_path()))
    assert len(os.listdir(settings.output_dir)) == 1


def test_skip_frames_writes_typed_empty_file(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    decoder = fake_decoder_factory(lambda opts: game_factory(skip_frames=opts.skip_frames))

    artifact = read_slippi(replay_file, 1, decoder=decoder, settings=settings)

    assert decoder.calls[0].skip_frames is True
    table = read_frames(artifact.frames_path())
    assert table.num_rows == 0
    assert [f.name for f in table.schema.field("frame").type.field("ports").type] == ["P1", "P2"]
    assert artifact.start() != ""


def test_absent_records_read_as_empty_strings(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    game = game_factory(hash_=None, with_end=False).model_copy(update={"metadata": None})

    artifact = read_slippi(replay_file, 0, decoder=fake_decoder_factory(game), settings=settings)

    assert artifact.end() == ""
    assert artifact.metadata() == ""
    assert artifact.hash() == ""
    assert os.path.basename(artifact.frames_path()).startswith("slippi_frames_unknown-")


def test_empty_metadata_is_distinct_from_absent(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    artifact = read_slippi(
        replay_file, 0, decoder=fake_decoder_factory(game_factory(metadata={})), settings=settings
    )

    assert artifact.metadata() == "{}"


def test_nonexistent_path_fails_without_writing(fake_decoder_factory, game_factory, tmp_path, settings) -> None:
    decoder = fake_decoder_factory(game_factory())

    with pytest.raises(ReplayInputError, match="failed to open"):
        read_slippi(str(tmp_path / "missing.slp"), 0, decoder=decoder, settings=settings)

    assert decoder.calls == []
    assert not os.path.exists(settings.output_dir)


def test_decoder_failure_is_input_error(fake_decoder_factory, replay_file, settings) -> None:
    def corrupt(opts):
        raise ValueError("unexpected event code 0x99")

    with pytest.raises(ReplayInputError, match="0x99"):
        read_slippi(replay_file, 0, decoder=fake_decoder_factory(corrupt), settings=settings)

    assert not os.path.exists(settings.output_dir)


def test_decoder_must_return_game(replay_file, settings) -> None:
    with pytest.raises(ReplayInputError, match="expected Game"):
        read_slippi(replay_file, 0, decoder=lambda stream, opts: {"start": {}}, settings=settings)


def test_frame_schema_violation_leaves_no_file(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    game = game_factory((2, 9), n_frames=3)
    # follower data on a port that is not Ice Climbers
    game.frames[1].ports[Port.P1].follower = FighterState(pre={}, post={})

    with pytest.raises(FramesSchemaError):
        read_slippi(replay_file, 0, decoder=fake_decoder_factory(game), settings=settings)

    assert not os.path.exists(settings.output_dir)


def test_start_encoding_failure_leaves_no_file(
    game_factory, fake_decoder_factory, replay_file, settings, monkeypatch
) -> None:
    def boom(obj):
        raise TypeError("cannot encode")

    monkeypatch.setattr("slpx.core.summary.json_dumps_canonical", boom)

    with pytest.raises(SummaryEncodingError, match="cannot encode"):
        read_slippi(replay_file, 0, decoder=fake_decoder_factory(game_factory()), settings=settings)

    assert not os.path.exists(settings.output_dir)


def test_non_utf8_path_rejected(fake_decoder_factory, game_factory, settings) -> None:
    decoder = fake_decoder_factory(game_factory())

    with pytest.raises(BoundaryEncodingError, match="replay path"):
        read_slippi(b"/tmp/replay-\xff.slp", 0, decoder=decoder, settings=settings)

    assert decoder.calls == []


def test_settings_loaded_from_environment_by_default(
    game_factory, fake_decoder_factory, replay_file, tmp_path, monkeypatch
) -> None:
    out = tmp_path / "env_out"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("SLPX_IO_OUTPUT_DIR", str(out))

    artifact = read_slippi(replay_file, 0, decoder=fake_decoder_factory(game_factory()))

    assert os.path.dirname(artifact.frames_path()) == str(out)


def test_concurrent_ingestions_of_distinct_replays(game_factory, fake_decoder_factory, replay_file, settings) -> None:
    hashes = [f"hash{i:02d}" for i in range(6)]

    def ingest(h: str):
        decoder = fake_decoder_factory(game_factory(n_frames=40, hash_=h))
        return read_slippi(replay_file, 0, decoder=decoder, settings=settings)

    with ThreadPoolExecutor(max_workers=4) as pool:
        artifacts = list(pool.map(ingest, hashes))

    assert [a.hash() for a in artifacts] == hashes
    assert len({a.frames_path() for a in artifacts}) == len(hashes)
    for a in artifacts:
        assert read_frames(a.frames_path()).num_rows == 40


def test_ingest_logs_summary_line(game_factory, fake_decoder_factory, replay_file, settings, caplog) -> None:
    with caplog.at_level(logging.INFO, logger="slpx"):
        read_slippi(replay_file, 0, decoder=fake_decoder_factory(game_factory(n_frames=4)), settings=settings)

    assert "2 ports, 4 frames" in caplog.text
