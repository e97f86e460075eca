"""
Port occupancy for a decoded replay.

The binary frame stream interleaves a follower (Nana) event after the leader event only for
ports playing Ice Climbers, so both decoding and columnarization need to know, per occupied
port, whether a follower exists. ``port_occupancy`` derives that once from the game-start
record. Pure function, zero-IO.
"""

from __future__ import annotations

from dataclasses import dataclass

from .constants import ICE_CLIMBERS
from .game import Port, Start

__all__ = [
    "PortOccupancy",
    "port_occupancy",
]


@dataclass(frozen=True, slots=True)
class PortOccupancy:
    """
    Occupied port and whether it carries a follower.

    Attributes:
        port (Port): Controller port.
        follower (bool): True exactly when the port's character is Ice Climbers.
    """

    port: Port
    follower: bool


def port_occupancy(start: Start) -> list[PortOccupancy]:
    """
    Derive port occupancy from the game-start record.

    Args:
        start (Start): Decoded game-start record.

    Returns:
        list[PortOccupancy]: One entry per player, same length and order as ``start.players``.

    Examples:
        >>> from slpx.core.game import Player, Slippi, Start
        >>> start = Start(
        ...     slippi=Slippi(major=3, minor=16),
        ...     players=[Player(port=Port.P1, character=14), Player(port=Port.P2, character=2)],
        ... )
        >>> [(int(o.port), o.follower) for o in port_occupancy(start)]
        [(0, True), (1, False)]
    """
    return [PortOccupancy(port=p.port, follower=p.character == ICE_CLIMBERS) for p in start.players]
