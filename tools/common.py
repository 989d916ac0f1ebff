from __future__ import annotations

import argparse
import json
import sys
from datetime import date, timedelta
from pathlib import Path
from typing import Iterator, Optional, Tuple

from mcal.core.config import resolve_ephemeris_path


def add_common_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--date", type=date.fromisoformat, help="YYYY-MM-DD")
    parser.add_argument("--start", type=date.fromisoformat, help="YYYY-MM-DD (inclusive)")
    parser.add_argument("--end", type=date.fromisoformat, help="YYYY-MM-DD (inclusive)")
    parser.add_argument("--json", action="store_true")


def add_ephemeris_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--ephemeris", default=None, help="file name under ./data (default: MCAL_EPHEMERIS or de421.bsp)")
    parser.add_argument("--ephemeris-path", type=Path, default=None)


def ephemeris_or_skip(args: argparse.Namespace) -> Path:
    """Resolve through mcal.core.config; exit with SKIP when the file is absent."""
    p = resolve_ephemeris_path(args.ephemeris, args.ephemeris_path)
    if not p.exists():
        skip(f"ephemeris not found: {p} (set MCAL_EPHEMERIS_PATH or pass --ephemeris-path)")
    return p


def date_span(args: argparse.Namespace) -> Tuple[Optional[date], Optional[date]]:
    if args.start and args.end:
        return args.start, args.end
    return args.date, args.date


def days_inclusive(start: date, end: date) -> Iterator[date]:
    for k in range((end - start).days + 1):
        yield start + timedelta(days=k)


def dump_json(obj: object) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2, default=str))


def skip(msg: str) -> None:
    print(f"SKIP: {msg}")
    sys.exit(0)
