# src/mcal/core/providers/skyfield_provider.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Literal, Optional, Sequence, Tuple

from skyfield.api import Loader

from mcal.core.config import resolve_ephemeris_path

log = logging.getLogger(__name__)


# ----------------------------
# Frame selection
# ----------------------------
EclipticFrameName = Literal[
    "of_date",   # true ecliptic/equinox of date (calendar-grade)
    "J2000",     # ecliptic J2000
]


def _resolve_ecliptic_frame(name: EclipticFrameName):
    from skyfield.framelib import ecliptic_frame, ecliptic_J2000_frame

    if name == "J2000":
        return ecliptic_J2000_frame
    return ecliptic_frame


@dataclass(frozen=True)
class SkyfieldProvider:
    """
    JPL-ephemeris solar longitude through Skyfield.

    The ephemeris is resolved by mcal.core.config.resolve_ephemeris_path
    (explicit path > MCAL_EPHEMERIS_PATH > MCAL_EPHEMERIS / de421.bsp under ./data)
    and is never downloaded.
    """

    ephemeris_path: Optional[Path] = None
    ephemeris: Optional[str] = None
    ecliptic_frame: EclipticFrameName = "of_date"

    def __post_init__(self) -> None:
        resolved = resolve_ephemeris_path(self.ephemeris, self.ephemeris_path)
        object.__setattr__(self, "ephemeris_path", resolved)

        if not resolved.exists():
            raise FileNotFoundError(
                f"Ephemeris not found: {resolved}\n"
                "Set MCAL_EPHEMERIS_PATH, place de421.bsp / de440s.bsp under ./data, "
                "or pass ephemeris_path=Path(...)."
            )

        loader = Loader(str(resolved.parent))
        eph = loader(resolved.name)
        ts = loader.timescale()

        object.__setattr__(self, "_eph", eph)
        object.__setattr__(self, "_ts", ts)
        object.__setattr__(self, "_earth", eph["earth"])
        object.__setattr__(self, "_sun", eph["sun"])
        object.__setattr__(self, "_frame", _resolve_ecliptic_frame(self.ecliptic_frame))

        start_utc, end_utc = self._compute_ephemeris_utc_range()
        object.__setattr__(self, "_ephem_start_utc", start_utc)
        object.__setattr__(self, "_ephem_end_utc", end_utc)
        log.debug("loaded ephemeris %s (%s .. %s)", resolved, start_utc.date(), end_utc.date())

    def _compute_ephemeris_utc_range(self) -> Tuple[datetime, datetime]:
        """
        Compute coverage from SPK segments so out-of-range requests fail early
        with a readable message.
        """
        segments = getattr(self._eph, "spk", None)
        if segments is None or not getattr(segments, "segments", None):
            return (
                datetime.min.replace(tzinfo=timezone.utc),
                datetime.max.replace(tzinfo=timezone.utc),
            )

        segs = segments.segments
        start_jd = max(s.start_jd for s in segs)
        end_jd = min(s.end_jd for s in segs)
        start_utc = self._ts.tt_jd(start_jd).utc_datetime().replace(tzinfo=timezone.utc)
        end_utc = self._ts.tt_jd(end_jd).utc_datetime().replace(tzinfo=timezone.utc)
        return start_utc, end_utc

    def covers(self, dt_utc: datetime) -> bool:
        dt = self._as_utc(dt_utc)
        return self._ephem_start_utc <= dt <= self._ephem_end_utc

    # ---- time helpers ----
    def _as_utc(self, dt_utc: datetime) -> datetime:
        if dt_utc.tzinfo is None:
            raise ValueError("dt_utc must be timezone-aware")
        return dt_utc.astimezone(timezone.utc)

    def _check_ephemeris_range(self, dt_utc: datetime) -> None:
        if not self.covers(dt_utc):
            raise ValueError(
                "Requested datetime is outside ephemeris coverage.\n"
                f"  requested: {self._as_utc(dt_utc).isoformat()}\n"
                f"  ephemeris: {self.ephemeris_path}\n"
                f"  coverage : {self._ephem_start_utc.isoformat()} .. {self._ephem_end_utc.isoformat()}"
            )

    def _lon_deg_many(self, dts_utc: Sequence[datetime]) -> List[float]:
        xs = [self._as_utc(dt) for dt in dts_utc]
        self._check_ephemeris_range(min(xs))
        self._check_ephemeris_range(max(xs))
        t = self._ts.from_datetimes(xs)
        obs = self._earth.at(t).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return [float(x) for x in lon.degrees % 360.0]

    # ---- public API ----
    def sun_ecliptic_longitude_deg(self, dt_utc: datetime) -> float:
        self._check_ephemeris_range(dt_utc)
        t = self._ts.from_datetime(self._as_utc(dt_utc))
        obs = self._earth.at(t).observe(self._sun).apparent()
        _lat, lon, _dist = obs.frame_latlon(self._frame)
        return float(lon.degrees % 360.0)

    def sun_ecliptic_longitude_deg_many(self, dts_utc: Sequence[datetime]) -> List[float]:
        if not dts_utc:
            return []
        return self._lon_deg_many(dts_utc)
