"""
slpx command line.

Usage:
    slpx ingest game.slp [--skip-frames] [--output-dir DIR] [--log-level INFO]
    slpx inspect /tmp/slippi_frames_<hash>.arrow [--n 5]
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from dataclasses import replace
from pathlib import Path

import polars as pl

from .boundary import read_slippi
from .io.config import IoSettings
from .io.errors import SlpxError
from .io.read import read_frames_schema, scan_frames
from .logging_utils import configure_logging

logger = logging.getLogger(__name__)


def _print_head(path: Path, n: int = 5) -> None:
    """Print the first n frames of an Arrow IPC frame artifact via Polars.

    Args:
        path: Path to the .arrow file.
        n: Number of frames to print.
    """
    df = scan_frames(str(path)).head(n).collect()
    print(df.unnest("frame") if "frame" in df.columns else df)


def _cmd_ingest(argv: list[str]) -> int:
    p = argparse.ArgumentParser(
        prog="slpx ingest",
        description="Decode a Slippi replay, write its frames as Arrow IPC and print the summaries.",
    )
    p.add_argument("path", type=str, help="Path to a .slp replay.")
    p.add_argument("--skip-frames", action="store_true", help="Decode without frames.")
    p.add_argument("--output-dir", type=str, default=None, help="Directory for the .arrow file.")
    p.add_argument("--config", type=str, default=None, help="Explicit slpx TOML config path.")
    p.add_argument("--log-level", type=str, default="INFO", help="Logging level.")
    args = p.parse_args(argv)

    configure_logging(getattr(logging, args.log_level.upper(), logging.INFO))
    try:
        settings = IoSettings.load(args.config)
        if args.output_dir:
            settings = replace(settings, output_dir=args.output_dir)
        artifact = read_slippi(args.path, int(args.skip_frames), settings=settings)
    except SlpxError as exc:
        logger.error("ingest failed: %s", exc)
        return 1

    print(json.dumps(artifact.to_dict(), indent=2, ensure_ascii=False))
    return 0


def _cmd_inspect(argv: list[str]) -> int:
    p = argparse.ArgumentParser(prog="slpx inspect", description="Show an Arrow frame artifact.")
    p.add_argument("path", type=str, help="Path to a slippi_frames_*.arrow file.")
    p.add_argument("--n", type=int, default=5, help="Frames to display.")
    args = p.parse_args(argv)

    path = Path(args.path)
    if not path.is_file():
        print(f"File not found: {path}", file=sys.stderr)
        return 1
    schema = read_frames_schema(str(path))
    for key, value in (schema.metadata or {}).items():
        print(f"{key.decode()}: {value.decode()}")
    print(schema.field("frame").type)
    with pl.Config(tbl_cols=-1):
        _print_head(path, n=args.n)
    return 0


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="slpx", description="Slippi replay to Arrow IPC utilities.")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("ingest")
    sub.add_parser("inspect")
    return p


def main(argv: list[str] | None = None) -> None:
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        build_argparser().print_help()
        return
    cmd, rest = argv[0], argv[1:]
    if cmd == "ingest":
        code = _cmd_ingest(rest)
    elif cmd == "inspect":
        code = _cmd_inspect(rest)
    else:
        print(f"Unknown command: {cmd}", file=sys.stderr)
        code = 2
    raise SystemExit(code)


if __name__ == "__main__":
    main()
