"""
Frame columnarizer: row frames → one Arrow struct column.

Overview
- frames_type() builds the nested struct type from port occupancy and the replay version:

      struct<
        id: int32,
        ports: struct<
          P1: struct<leader: struct<pre, post>, follower: struct<pre, post>>,   # Ice Climbers
          P2: struct<leader: struct<pre, post>>,
          ...
        >
      >

- columnarize() converts decoded frames into a StructArray of exactly that type, column by
  column, keeping the decoded frame order (rollback frames may repeat an index; nothing is
  sorted or de-duplicated).
- validate_columns() re-derives the type from the same occupancy/version and compares.

Source of truth
- Per-frame fields and the version that introduced them: slpx.core.frames.
- Which ports exist and which carry a follower: slpx.core.occupancy.

Notes
- leader is non-nullable; follower is nullable (Nana can be dead on a given frame).
- Leaf fields are nullable: a decoder may omit a field on some frames.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import pyarrow as pa

from slpx.core.frames import POST_FIELDS, PRE_FIELDS, FieldDescriptor, fields_for
from slpx.core.game import FighterState, Frame
from slpx.core.occupancy import PortOccupancy
from slpx.core.versioning import SlippiVersion

from .errors import FramesSchemaError

_ARROW_TYPES: dict[str, pa.DataType] = {
    "i8": pa.int8(),
    "u8": pa.uint8(),
    "u16": pa.uint16(),
    "u32": pa.uint32(),
    "i32": pa.int32(),
    "f32": pa.float32(),
}


def _state_type(fields: Sequence[FieldDescriptor]) -> pa.StructType:
    return pa.struct([pa.field(f.name, _ARROW_TYPES[f.dtype]) for f in fields])


def fighter_type(version: SlippiVersion) -> pa.StructType:
    """Struct type of one fighter's pre/post state for a replay version."""
    return pa.struct(
        [
            pa.field("pre", _state_type(fields_for(PRE_FIELDS, version)), nullable=False),
            pa.field("post", _state_type(fields_for(POST_FIELDS, version)), nullable=False),
        ]
    )


def port_type(occupancy: PortOccupancy, version: SlippiVersion) -> pa.StructType:
    fighter = fighter_type(version)
    fields = [pa.field("leader", fighter, nullable=False)]
    if occupancy.follower:
        fields.append(pa.field("follower", fighter, nullable=True))
    return pa.struct(fields)


def frames_type(occupancy: Sequence[PortOccupancy], version: SlippiVersion) -> pa.StructType:
    """
    Build the frame struct type for a replay.

    Args:
        occupancy (Sequence[PortOccupancy]): Occupied ports in decode order.
        version (SlippiVersion): Replay version (selects pre/post fields).

    Returns:
        pa.StructType: ``struct<id: int32, ports: struct<P?: ...>>`` with one port field per
        occupancy entry and a follower field only where ``follower`` is true.
    """
    ports = pa.struct(
        [pa.field(o.port.name, port_type(o, version), nullable=False) for o in occupancy]
    )
    return pa.struct(
        [
            pa.field("id", pa.int32(), nullable=False),
            pa.field("ports", ports, nullable=False),
        ]
    )


@dataclass(frozen=True, slots=True)
class FrameColumns:
    """
    Columnar frames plus the description they were built from.

    Attributes:
        array (pa.StructArray): One row per decoded frame.
        occupancy (tuple[PortOccupancy, ...]): Occupancy used to build ``array``.
        version (SlippiVersion): Replay version used to build ``array``.
    """

    array: pa.StructArray
    occupancy: tuple[PortOccupancy, ...]
    version: SlippiVersion

    def __len__(self) -> int:
        return len(self.array)

    @property
    def type(self) -> pa.StructType:
        return self.array.type


def _struct(
    arrays: list[pa.Array], fields: list[pa.Field], length: int, mask: pa.Array | None = None
) -> pa.StructArray:
    if not arrays:
        # A struct without children cannot infer its length from them.
        return pa.Array.from_buffers(pa.struct(fields), length, [None], children=[])
    return pa.StructArray.from_arrays(arrays, fields=fields, mask=mask)


def _to_array(values: list[Any], type_: pa.DataType, where: str) -> pa.Array:
    try:
        return pa.array(values, type=type_)
    except (pa.ArrowException, TypeError, ValueError, OverflowError) as exc:
        raise FramesSchemaError(f"values for {where} do not fit {type_}: {exc}") from exc


class _StateColumns:
    """Column buffers for one pre or post state struct."""

    def __init__(self, fields: Sequence[FieldDescriptor], where: str, strict: bool) -> None:
        self.fields = tuple(fields)
        self.names = frozenset(f.name for f in self.fields)
        self.where = where
        self.strict = strict
        self.columns: dict[str, list[Any]] = {f.name: [] for f in self.fields}

    def append(self, state: dict[str, Any], frame_index: int) -> None:
        if self.strict:
            extra = set(state) - self.names
            if extra:
                raise FramesSchemaError(
                    f"unexpected fields {sorted(extra)!r} in {self.where} on frame {frame_index}"
                )
        for name, col in self.columns.items():
            v = state.get(name)
            col.append(int(v) if isinstance(v, bool) else v)

    def append_null(self) -> None:
        for col in self.columns.values():
            col.append(None)

    def finish(self, type_: pa.StructType, length: int) -> pa.StructArray:
        arrays = [
            _to_array(self.columns[f.name], type_.field(f.name).type, f"{self.where}.{f.name}")
            for f in self.fields
        ]
        return _struct(arrays, list(type_), length)


class _FighterColumns:
    def __init__(self, version: SlippiVersion, where: str, strict: bool) -> None:
        self.pre = _StateColumns(fields_for(PRE_FIELDS, version), f"{where}.pre", strict)
        self.post = _StateColumns(fields_for(POST_FIELDS, version), f"{where}.post", strict)
        self.valid: list[bool] = []

    def append(self, state: FighterState, frame_index: int) -> None:
        self.pre.append(state.pre, frame_index)
        self.post.append(state.post, frame_index)
        self.valid.append(True)

    def append_null(self) -> None:
        self.pre.append_null()
        self.post.append_null()
        self.valid.append(False)

    def finish(self, type_: pa.StructType, length: int, nullable: bool) -> pa.StructArray:
        arrays = [
            self.pre.finish(type_.field("pre").type, length),
            self.post.finish(type_.field("post").type, length),
        ]
        mask = None
        if nullable and not all(self.valid):
            mask = pa.array([not v for v in self.valid], type=pa.bool_())
        return _struct(arrays, list(type_), length, mask=mask)


def columnarize(
    frames: Iterable[Frame] | None,
    occupancy: Sequence[PortOccupancy],
    version: SlippiVersion,
    *,
    strict: bool = True,
) -> FrameColumns:
    """
    Convert decoded frames into a single struct column.

    Args:
        frames (Iterable[Frame] | None): Decoded frames in recorded order; None (frames
            skipped) is treated as zero frames.
        occupancy (Sequence[PortOccupancy]): Occupancy derived from the same Start record
            the frames were decoded with.
        version (SlippiVersion): Replay version from the same Start record.
        strict (bool): Reject pre/post keys outside the version's field set (default True).
            When False, extra keys are ignored.

    Returns:
        FrameColumns: Struct array of ``frames_type(occupancy, version)``.

    Raises:
        FramesSchemaError: If a frame's ports do not match occupancy, follower data appears on
            a port without a follower, a strict-mode key is unknown, or a value does not fit
            its declared dtype.
    """
    occ = tuple(occupancy)
    ftype = frames_type(occ, version)
    rows = list(frames or ())
    n = len(rows)

    if n == 0:
        return FrameColumns(array=pa.array([], type=ftype), occupancy=occ, version=version)

    expected_ports = {o.port for o in occ}
    ids: list[int] = []
    leaders = {o.port: _FighterColumns(version, f"{o.port.name}.leader", strict) for o in occ}
    followers = {
        o.port: _FighterColumns(version, f"{o.port.name}.follower", strict) for o in occ if o.follower
    }

    for frame in rows:
        present = set(frame.ports)
        if present != expected_ports:
            missing = sorted(p.name for p in expected_ports - present)
            extra = sorted(p.name for p in present - expected_ports)
            raise FramesSchemaError(
                f"frame {frame.index}: ports do not match occupancy (missing={missing}, unexpected={extra})"
            )
        ids.append(frame.index)
        for o in occ:
            pf = frame.ports[o.port]
            leaders[o.port].append(pf.leader, frame.index)
            if o.follower:
                if pf.follower is None:
                    followers[o.port].append_null()
                else:
                    followers[o.port].append(pf.follower, frame.index)
            elif pf.follower is not None:
                raise FramesSchemaError(
                    f"frame {frame.index}: follower data on {o.port.name}, which has no follower"
                )

    ports_type = ftype.field("ports").type
    port_arrays: list[pa.Array] = []
    for o in occ:
        ptype = ports_type.field(o.port.name).type
        children = [leaders[o.port].finish(ptype.field("leader").type, n, nullable=False)]
        if o.follower:
            children.append(followers[o.port].finish(ptype.field("follower").type, n, nullable=True))
        port_arrays.append(_struct(children, list(ptype), n))

    array = _struct(
        [_to_array(ids, pa.int32(), "id"), _struct(port_arrays, list(ports_type), n)],
        list(ftype),
        n,
    )
    columns = FrameColumns(array=array, occupancy=occ, version=version)
    validate_columns(columns)
    return columns


def validate_columns(columns: FrameColumns) -> None:
    """
    Check that a column's type matches the type derived from its own occupancy and version.

    Raises:
        FramesSchemaError: On any mismatch (field names, order, dtypes or nullability).
    """
    expected = frames_type(columns.occupancy, columns.version)
    if not columns.array.type.equals(expected):
        raise FramesSchemaError(
            f"frame column type does not match occupancy/version: got {columns.array.type}, expected {expected}"
        )
