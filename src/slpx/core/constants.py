"""
slpx core constants.

Defines the character, port, and artifact-naming constants consumed by the occupancy resolver,
the frame columnarizer, and the Arrow IPC writer. This module is zero-IO and uses only the
Python standard library.

Notes:
    - ICE_CLIMBERS is the external character id of the only character that spawns a bound
      follower (Nana) next to the leader (Popo).
    - File naming: ``<output_dir>/slippi_frames_<token>.arrow`` where token is derived from the
      replay hash (see slpx.io.paths).
"""

from __future__ import annotations

from typing import Final

__all__ = [
    "ICE_CLIMBERS",
    "FIRST_FRAME_INDEX",
    "FRAME_FIELD",
    "FRAMES_FILE_PREFIX",
    "FRAMES_FILE_SUFFIX",
    "UNKNOWN_HASH",
]

# External character id for Ice Climbers.
ICE_CLIMBERS: Final[int] = 14

# Index of the first frame in a replay (the countdown starts before frame 0).
FIRST_FRAME_INDEX: Final[int] = -123

# Name of the single top-level field in the Arrow IPC schema.
FRAME_FIELD: Final[str] = "frame"

FRAMES_FILE_PREFIX: Final[str] = "slippi_frames_"
FRAMES_FILE_SUFFIX: Final[str] = ".arrow"

# Token used in place of the integrity hash when the decoder did not provide one.
UNKNOWN_HASH: Final[str] = "unknown"
