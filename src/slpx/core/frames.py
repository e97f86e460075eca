"""
Frozen field descriptors for per-frame fighter state.

Purpose:
- Declare every pre-frame and post-frame field the Arrow layout can carry, its storage dtype,
  and the Slippi version that introduced it.
- ``fields_for`` selects the subset present in a given replay; the columnarizer builds its
  schema from that subset so replays of different versions produce different (but always
  self-consistent) layouts.

Dtype strings:
    i8, u8, u16, u32, i32, f32 (mapped to Arrow types in slpx.io.columnar)

Notes:
- Core is zero-IO; slpx.io materializes these descriptors into pyarrow types.
- Grouped fields are flattened with "_" (position.x -> position_x).
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Final

from .versioning import SlippiVersion

__all__ = [
    "FieldDescriptor",
    "DTYPES",
    "PRE_FIELDS",
    "POST_FIELDS",
    "fields_for",
    "field_names",
]

DTYPES: Final[frozenset[str]] = frozenset({"i8", "u8", "u16", "u32", "i32", "f32"})

_V0_1 = SlippiVersion(0, 1, 0)


@dataclass(frozen=True, slots=True)
class FieldDescriptor:
    """
    One per-frame field.

    Attributes:
        name (str): Column name (lower_snake).
        dtype (str): Storage dtype, one of DTYPES.
        since (SlippiVersion): First Slippi version that records the field.
    """

    name: str
    dtype: str
    since: SlippiVersion = _V0_1

    def __post_init__(self) -> None:
        if self.dtype not in DTYPES:
            raise ValueError(f"unknown dtype {self.dtype!r} for field {self.name!r}")


def _f(name: str, dtype: str, major: int = 0, minor: int = 1) -> FieldDescriptor:
    return FieldDescriptor(name, dtype, SlippiVersion(major, minor, 0))


PRE_FIELDS: Final[tuple[FieldDescriptor, ...]] = (
    _f("random_seed", "u32"),
    _f("state", "u16"),
    _f("position_x", "f32"),
    _f("position_y", "f32"),
    _f("direction", "f32"),
    _f("joystick_x", "f32"),
    _f("joystick_y", "f32"),
    _f("cstick_x", "f32"),
    _f("cstick_y", "f32"),
    _f("triggers", "f32"),
    _f("buttons", "u32"),
    _f("buttons_physical", "u16"),
    _f("triggers_physical_l", "f32"),
    _f("triggers_physical_r", "f32"),
    _f("raw_analog_x", "i8", 1, 2),
    _f("percent", "f32", 1, 4),
    _f("raw_analog_y", "i8", 3, 15),
)

POST_FIELDS: Final[tuple[FieldDescriptor, ...]] = (
    _f("character", "u8"),
    _f("state", "u16"),
    _f("position_x", "f32"),
    _f("position_y", "f32"),
    _f("direction", "f32"),
    _f("percent", "f32"),
    _f("shield", "f32"),
    _f("last_attack_landed", "u8"),
    _f("combo_count", "u8"),
    _f("last_hit_by", "u8"),
    _f("stocks", "u8"),
    _f("state_age", "f32", 0, 2),
    _f("misc_as", "f32", 2, 0),
    _f("airborne", "u8", 2, 0),
    _f("ground", "u16", 2, 0),
    _f("jumps", "u8", 2, 0),
    _f("l_cancel", "u8", 2, 0),
    _f("hurtbox_state", "u8", 2, 1),
    _f("velocities_self_x_air", "f32", 3, 5),
    _f("velocities_self_y", "f32", 3, 5),
    _f("velocities_knockback_x", "f32", 3, 5),
    _f("velocities_knockback_y", "f32", 3, 5),
    _f("velocities_self_x_ground", "f32", 3, 5),
    _f("hitlag", "f32", 3, 8),
    _f("animation_index", "u32", 3, 11),
)


def fields_for(
    descriptors: Iterable[FieldDescriptor], version: SlippiVersion
) -> tuple[FieldDescriptor, ...]:
    """
    Select the descriptors recorded by a replay of the given version, in declaration order.

    Examples:
        >>> [f.name for f in fields_for(PRE_FIELDS, SlippiVersion(1, 2, 0))][-1]
        'raw_analog_x'
    """
    return tuple(d for d in descriptors if version >= d.since)


def field_names(descriptors: Iterable[FieldDescriptor]) -> frozenset[str]:
    return frozenset(d.name for d in descriptors)
