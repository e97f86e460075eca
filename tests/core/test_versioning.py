"""Tests for `slpx.core.versioning` replay version helpers."""

import pytest

from slpx.core.errors import VersionError
from slpx.core.versioning import FRAMES_SCHEMA_V, SlippiVersion, parse_version


def test_versions_order_by_components() -> None:
    assert SlippiVersion(3, 5, 0) < SlippiVersion(3, 16, 0)
    assert SlippiVersion(2, 0, 1) > SlippiVersion(2, 0, 0)
    assert SlippiVersion(1, 4) == SlippiVersion(1, 4, 0)


@pytest.mark.parametrize("field", ["major", "minor", "revision"])
def test_version_rejects_negative_components(field: str) -> None:
    kwargs = {"major": 3, "minor": 16, "revision": 0}
    kwargs[field] = -1

    with pytest.raises(VersionError, match=f"SlippiVersion {field} must be non-negative"):
        SlippiVersion(**kwargs)


@pytest.mark.parametrize(
    "text,expected",
    [("3.16.0", SlippiVersion(3, 16, 0)), ("1.4", SlippiVersion(1, 4, 0)), (" 0.1.0 ", SlippiVersion(0, 1, 0))],
)
def test_parse_version(text: str, expected: SlippiVersion) -> None:
    assert parse_version(text) == expected


@pytest.mark.parametrize("bad", ["", "3", "3.x.0", "1.2.3.4"])
def test_parse_version_rejects_malformed(bad: str) -> None:
    with pytest.raises(VersionError):
        parse_version(bad)


def test_frames_schema_version_renders_dotted() -> None:
    assert str(FRAMES_SCHEMA_V).count(".") == 2
