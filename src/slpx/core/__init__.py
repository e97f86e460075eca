"""
Core package for slpx contracts (replay models, frame field descriptors, occupancy, summaries).

## Contracts (single source of truth)
- Game models — pydantic records for a decoded replay (start/end/metadata/hash/frames).
- Frame fields — descriptors (name, dtype, since-version) for pre/post fighter state.
- Occupancy — which ports are occupied and which carry an Ice Climbers follower.
- Summaries — canonical JSON text for start/end/metadata.
- Versioning — Slippi replay versions and the artifact layout version.
- Hashing — integrity hash of the replay bytes (names the frame artifact).

## Notes
- Zero-IO policy: stdlib + pydantic only; no file/network IO.
- Column and field names are lower_snake; port columns use the P1..P4 labels.

## Downstream usage
- slpx.io — builds Arrow types from `frames` descriptors and `occupancy`, writes Arrow IPC files.
- slpx.boundary — drives occupancy → columnarize → summaries → write for one replay.
"""

from __future__ import annotations

from .game import End, Frame, Game, Port, Start
from .occupancy import PortOccupancy, port_occupancy
from .summary import ReplaySummaries, encode_summaries

__all__ = [
    "End",
    "Frame",
    "Game",
    "Port",
    "Start",
    "PortOccupancy",
    "port_occupancy",
    "ReplaySummaries",
    "encode_summaries",
]
