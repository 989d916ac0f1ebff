from __future__ import annotations

import os
from pathlib import Path

import pytest


def find_ephemeris_path() -> Path | None:
    env = os.environ.get("MCAL_EPHEMERIS_PATH")
    if env:
        p = Path(env).expanduser()
        if p.exists():
            return p

    repo = Path(__file__).resolve().parents[1]
    for name in ("de440s.bsp", "de421.bsp"):
        p = repo / "data" / name
        if p.exists():
            return p
    return None


@pytest.fixture
def ephemeris_path() -> Path:
    p = find_ephemeris_path()
    if p is None:
        pytest.skip("ephemeris not found (set MCAL_EPHEMERIS_PATH or place data/de421.bsp)")
    return p
