"""
Configuration for the slpx.io module.

Defines IoSettings, a frozen dataclass carrying runtime configuration for the Arrow IPC writer.
Settings are passed explicitly to every call; nothing is cached process-wide, so concurrent
ingestions with different settings do not interfere.

Precedence
- environment (SLPX_IO_*) > TOML (./slpx.toml or [tool.slpx.io] in ./pyproject.toml) > defaults

Notes
- Frame artifacts are written uncompressed by default so consumers can memory-map them.
- output_dir=None means the system temp directory (tempfile.gettempdir()).
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Literal

from .errors import IoConfigError

Compression = Literal["lz4", "zstd"]
_COMPRESSIONS: frozenset[str] = frozenset({"lz4", "zstd"})
_NO_COMPRESSION: frozenset[str] = frozenset({"", "none", "uncompressed", "off"})


@dataclass(frozen=True)
class IoSettings:
    """
    Runtime settings for the slpx.io layer.

    Attributes:
        output_dir (str | None): Directory receiving frame artifacts (None → system temp dir).
        compression (Literal["lz4","zstd"] | None): Arrow IPC body compression; None writes
            uncompressed buffers.
        strict_schema (bool): Reject pre/post fields outside the replay version's field set.
        fsync (bool): fsync the finalized IPC file before the atomic rename.
        unique_unknown (bool): Give hash-less replays a random file token instead of the
            shared "unknown" name.

    Examples:
        >>> from slpx.io import IoSettings
        >>> IoSettings(output_dir="out")  # doctest: +ELLIPSIS
        IoSettings(...)
    """

    output_dir: str | None = None
    compression: Compression | None = None
    strict_schema: bool = True
    fsync: bool = True
    unique_unknown: bool = True

    def __post_init__(self) -> None:
        if self.compression is not None and self.compression not in _COMPRESSIONS:
            raise IoConfigError(
                f"unsupported compression {self.compression!r}; expected one of {sorted(_COMPRESSIONS)}"
            )
        if self.output_dir is not None and os.path.exists(self.output_dir) and not os.path.isdir(
            self.output_dir
        ):
            raise IoConfigError(f"output_dir {self.output_dir!r} is not a directory")

    # Configuration loaders (env/TOML) with precedence: env > TOML > defaults.

    @classmethod
    def _apply_mapping(cls, base: IoSettings, cfg: dict[str, Any] | None) -> IoSettings:
        """Apply a loose config mapping onto IoSettings, returning a new instance."""
        if not isinstance(cfg, dict):
            return base

        s = base

        def _bool(v: Any) -> bool:
            if isinstance(v, bool):
                return v
            if isinstance(v, (int, float)):
                return bool(v)
            if isinstance(v, str):
                return v.strip().lower() in {"1", "true", "t", "yes", "y", "on"}
            return False

        if "output_dir" in cfg and isinstance(cfg["output_dir"], str):
            s = replace(s, output_dir=cfg["output_dir"] or None)

        if "compression" in cfg:
            comp = cfg["compression"]
            if comp is None or (isinstance(comp, str) and comp.strip().lower() in _NO_COMPRESSION):
                s = replace(s, compression=None)
            elif isinstance(comp, str):
                # invalid codecs raise IoConfigError from __post_init__
                s = replace(s, compression=comp.strip().lower())  # type: ignore[arg-type]

        for key in ("strict_schema", "fsync", "unique_unknown"):
            if key in cfg:
                s = replace(s, **{key: _bool(cfg[key])})

        return s

    @classmethod
    def from_env(cls, base: IoSettings | None = None, prefix: str = "SLPX_IO_") -> IoSettings:
        """
        Build IoSettings from environment variables. Precedence is env > base (if provided) > defaults.

        Recognized variables:
            - SLPX_IO_OUTPUT_DIR
            - SLPX_IO_COMPRESSION ("none" | "lz4" | "zstd")
            - SLPX_IO_STRICT_SCHEMA (1/0/true/false/yes/no/on/off)
            - SLPX_IO_FSYNC
            - SLPX_IO_UNIQUE_UNKNOWN
        """
        s = base or cls()

        mapping: dict[str, Any] = {}
        for key in ("output_dir", "compression", "strict_schema", "fsync", "unique_unknown"):
            v = os.getenv(prefix + key.upper())
            if v:
                mapping[key] = v

        return cls._apply_mapping(s, mapping)

    @classmethod
    def from_toml(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Build IoSettings from a TOML file.

        Search order when `path` is None:
            1) ./slpx.toml (with either top-level [io] or direct keys)
            2) ./pyproject.toml under [tool.slpx.io]

        Returns defaults if no file is present. Unreadable or malformed files raise
        IoConfigError.
        """
        s = cls()

        cand: list[Path] = []
        if path is not None:
            cand.append(Path(path))
        else:
            cand.append(Path.cwd() / "slpx.toml")
            cand.append(Path.cwd() / "pyproject.toml")

        cfg: dict[str, Any] | None = None
        for p in cand:
            if not p.exists():
                continue
            try:
                with p.open("rb") as fh:
                    data = tomllib.load(fh)
            except (OSError, tomllib.TOMLDecodeError) as exc:
                raise IoConfigError(f"failed to read {p}: {exc}") from exc
            if p.name == "pyproject.toml":
                tool = data.get("tool", {})
                cfg = tool.get("slpx", {}).get("io") if isinstance(tool, dict) else None
            elif isinstance(data.get("io"), dict):
                cfg = data["io"]
            else:
                cfg = data
            if cfg:
                break

        return cls._apply_mapping(s, cfg)

    @classmethod
    def load(cls, path: str | os.PathLike[str] | None = None) -> IoSettings:
        """
        Load IoSettings applying precedence: environment > TOML > defaults.

        Args:
            path: Optional explicit TOML path. If None, search defaults (slpx.toml, pyproject.toml).

        Returns:
            IoSettings
        """
        s = cls.from_toml(path)
        s = cls.from_env(base=s)
        return s
