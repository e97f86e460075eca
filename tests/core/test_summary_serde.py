from __future__ import annotations

import logging

import pytest

from slpx.core.errors import EncodingError
from slpx.core.game import End, Start
from slpx.core.serde import json_dumps_canonical, json_loads
from slpx.core.summary import encode_optional, encode_start, encode_summaries


def test_json_dumps_canonical_sorted_and_unicode() -> None:
    obj1 = {"b": 2, "a": 1, "nested": {"y": 2, "x": 1}, "tag": "ＦＯＸ"}
    obj2 = {"nested": {"x": 1, "y": 2}, "a": 1, "tag": "ＦＯＸ", "b": 2}
    s1 = json_dumps_canonical(obj1)
    assert s1 == json_dumps_canonical(obj2)
    assert "ＦＯＸ" in s1


def test_start_summary_round_trips(game_factory) -> None:
    game = game_factory()

    text = encode_start(game.start)

    assert Start.model_validate(json_loads(text)) == game.start


def test_end_and_metadata_round_trip(game_factory) -> None:
    game = game_factory(metadata={"playedOn": "nintendont", "players": {"0": {"names": {"netplay": "a"}}}})

    summaries = encode_summaries(game)

    assert End.model_validate(json_loads(summaries.end)) == game.end
    assert json_loads(summaries.metadata) == game.metadata


def test_absent_records_encode_to_none(game_factory) -> None:
    game = game_factory(with_end=False)
    game = game.model_copy(update={"metadata": None})

    summaries = encode_summaries(game)

    assert summaries.end is None
    assert summaries.metadata is None


def test_present_but_empty_metadata_is_not_absent(game_factory) -> None:
    summaries = encode_summaries(game_factory(metadata={}))
    assert summaries.metadata == "{}"


def test_unencodable_metadata_degrades_with_warning(game_factory, caplog) -> None:
    game = game_factory(metadata={"raw": b"\x00\x01"})

    with caplog.at_level(logging.WARNING, logger="slpx.core.summary"):
        summaries = encode_summaries(game)

    assert summaries.metadata is None
    assert summaries.end is not None
    assert "metadata" in caplog.text


def test_encode_optional_rejects_nan_instead_of_emitting_invalid_json() -> None:
    assert encode_optional({"x": float("nan")}, field="metadata") is None


def test_encode_start_failure_is_fatal(game_factory, monkeypatch) -> None:
    game = game_factory()

    def boom(obj):
        raise TypeError("not serializable")

    monkeypatch.setattr("slpx.core.summary.json_dumps_canonical", boom)
    with pytest.raises(EncodingError):
        encode_start(game.start)
