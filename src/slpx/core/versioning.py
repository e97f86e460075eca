"""
Slippi replay versions and the slpx artifact schema version.

Replays record the Slippi version that produced them; newer versions append fields to the
pre-frame and post-frame events. The columnarizer uses these helpers to decide which fields
exist for a given replay. This module is zero-IO.

Notes:
    - SlippiVersion orders naturally (major, minor, revision), so ``version >= since`` is the
      gate used by slpx.core.frames.fields_for.
    - FRAMES_SCHEMA_V tags written Arrow files (schema key-value metadata).
"""

from __future__ import annotations

from dataclasses import dataclass

from .errors import VersionError

__all__ = [
    "SlippiVersion",
    "parse_version",
    "FRAMES_SCHEMA_V",
]


@dataclass(frozen=True, order=True, slots=True)
class SlippiVersion:
    """
    Immutable Slippi replay version.

    Attributes:
        major (int): Non-negative major component.
        minor (int): Non-negative minor component.
        revision (int): Non-negative revision component.

    Raises:
        VersionError: If any component is negative.

    Examples:
        >>> SlippiVersion(3, 16, 0) >= SlippiVersion(3, 5, 0)
        True
        >>> str(SlippiVersion(2, 0, 1))
        '2.0.1'
    """

    major: int
    minor: int
    revision: int = 0

    def __post_init__(self) -> None:
        for name in ("major", "minor", "revision"):
            if getattr(self, name) < 0:
                raise VersionError(f"SlippiVersion {name} must be non-negative, got {getattr(self, name)}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.revision}"


def parse_version(text: str) -> SlippiVersion:
    """
    Parse a dotted version string ("3.16.0" or "1.4").

    Args:
        text (str): Dotted version string; a missing revision defaults to 0.

    Returns:
        SlippiVersion

    Raises:
        VersionError: If the string is not two or three dot-separated integers.
    """
    parts = (text or "").strip().split(".")
    if len(parts) not in (2, 3):
        raise VersionError(f"invalid Slippi version {text!r}")
    try:
        nums = [int(p) for p in parts]
    except ValueError as exc:
        raise VersionError(f"invalid Slippi version {text!r}") from exc
    return SlippiVersion(*nums)


# Version of the Arrow layout written by slpx.io.write (bump when the struct shape changes).
FRAMES_SCHEMA_V = SlippiVersion(0, 1, 0)
