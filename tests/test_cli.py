from __future__ import annotations

import json
import os

import pytest

import slpx.cli as cli
from slpx.boundary import read_slippi


def _run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as exc:
        cli.main(argv)
    return exc.value.code


@pytest.fixture
def fake_ingest(monkeypatch, game_factory, fake_decoder_factory):
    decoder = fake_decoder_factory(lambda opts: game_factory(n_frames=8, skip_frames=opts.skip_frames))

    def _read(path, skip_frames, *, settings=None):
        return read_slippi(path, skip_frames, decoder=decoder, settings=settings)

    monkeypatch.setattr(cli, "read_slippi", _read)
    return decoder


def test_ingest_prints_artifact_json(fake_ingest, replay_file, tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    out_dir = tmp_path / "cli_out"

    code = _run(["ingest", replay_file, "--output-dir", str(out_dir)])

    assert code == 0
    payload = json.loads(capsys.readouterr().out)
    assert set(payload) == {"start", "end", "metadata", "hash", "frames_path"}
    assert os.path.dirname(payload["frames_path"]) == str(out_dir)
    assert fake_ingest.calls[0].skip_frames is False


def test_ingest_skip_frames_flag(fake_ingest, replay_file, tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    assert _run(["ingest", replay_file, "--skip-frames", "--output-dir", str(tmp_path)]) == 0
    assert fake_ingest.calls[0].skip_frames is True


def test_ingest_missing_replay_exits_nonzero(tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)

    code = _run(["ingest", str(tmp_path / "nope.slp"), "--output-dir", str(tmp_path / "o")])

    assert code == 1
    assert capsys.readouterr().out == ""


def test_inspect_prints_schema_and_head(fake_ingest, replay_file, tmp_path, monkeypatch, capsys) -> None:
    monkeypatch.chdir(tmp_path)
    _run(["ingest", replay_file, "--output-dir", str(tmp_path)])
    frames_path = json.loads(capsys.readouterr().out)["frames_path"]

    code = _run(["inspect", frames_path, "--n", "3"])

    out = capsys.readouterr().out
    assert code == 0
    assert "slpx_hash: deadbeef00112233" in out
    assert "ports" in out


def test_inspect_missing_file(tmp_path, capsys) -> None:
    assert _run(["inspect", str(tmp_path / "missing.arrow")]) == 1
    assert "File not found" in capsys.readouterr().err


def test_unknown_command_exits_2(capsys) -> None:
    assert _run(["frobnicate"]) == 2
