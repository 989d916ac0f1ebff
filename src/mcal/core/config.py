# src/mcal/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

MCAL_EPHEMERIS_ENV = "MCAL_EPHEMERIS"
MCAL_EPHEMERIS_PATH_ENV = "MCAL_EPHEMERIS_PATH"
DEFAULT_EPHEMERIS = "de421.bsp"


@dataclass(frozen=True)
class SolarTermConfig:
    """
    Configuration for solar longitude crossing searches (24 solar terms).
    All time units are explicit to avoid minute/second confusion.
    """
    # civil offset used to turn a term instant into a calendar date (Beijing time)
    utc_offset_hours: float = 8.0

    # half-width of the bracket around the mean-motion guess of each term
    search_window_days: int = 8
    scan_step_hours: int = 12

    tol_seconds: float = 1.0
    verify_max_abs_deg: float = 0.01


@dataclass(frozen=True)
class GridConfig:
    """
    Fixed shapes of the presentation grids.
    """
    cell_count: int = 42
    columns: int = 7
    slot_hours: int = 1
    week_days: int = 7


@dataclass(frozen=True)
class McalConfig:
    solarterm: SolarTermConfig = field(default_factory=SolarTermConfig)
    grid: GridConfig = field(default_factory=GridConfig)


def env_truthy(name: str) -> bool:
    v = os.environ.get(name, "")
    return v.strip().lower() in ("1", "true", "yes", "y", "on")


def project_data_dir() -> Path:
    return Path(__file__).resolve().parents[3] / "data"


def resolve_ephemeris_path(
    ephemeris: Optional[str] = None,
    ephemeris_path: Optional[Path] = None,
) -> Path:
    """
    Resolution priority:
      1) ephemeris_path if provided
      2) MCAL_EPHEMERIS_PATH
      3) ephemeris (or MCAL_EPHEMERIS, default de421.bsp):
         - absolute path -> use as is
         - file name -> resolve under project data dir
    """
    if ephemeris_path is not None:
        return Path(ephemeris_path).expanduser()

    env_path = os.environ.get(MCAL_EPHEMERIS_PATH_ENV, "").strip()
    if env_path:
        return Path(env_path).expanduser()

    name = (ephemeris or "").strip() or os.environ.get(MCAL_EPHEMERIS_ENV, "").strip() or DEFAULT_EPHEMERIS
    p = Path(name).expanduser()
    if p.is_absolute():
        return p
    return project_data_dir() / p
