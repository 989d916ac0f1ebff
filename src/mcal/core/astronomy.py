# src/mcal/core/astronomy.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Protocol, Sequence, runtime_checkable


def norm360(deg: float) -> float:
    x = deg % 360.0
    return x + 360.0 if x < 0 else x


def angdiff180(deg: float) -> float:
    """Map angle to (-180, 180]."""
    x = (deg + 180.0) % 360.0 - 180.0
    return 180.0 if x == -180.0 else x


@runtime_checkable
class AstroProvider(Protocol):
    def sun_ecliptic_longitude_deg(self, dt_utc: datetime) -> float: ...


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        raise ValueError("datetime must be timezone-aware (UTC/+08:00 etc).")
    return dt.astimezone(timezone.utc)


@dataclass(frozen=True)
class AstronomyEngine:
    provider: AstroProvider

    def sun_lon(self, dt_utc: datetime) -> float:
        """Return apparent solar ecliptic longitude (degrees) at dt_utc (timezone-aware)."""
        return norm360(self.provider.sun_ecliptic_longitude_deg(_as_utc(dt_utc)))

    def sun_lon_many(self, dts_utc: Sequence[datetime]) -> List[float]:
        """
        Vectorized solar longitude if provider supports it; otherwise fall back to loop.
        """
        if not dts_utc:
            return []
        dts = [_as_utc(dt) for dt in dts_utc]
        f = getattr(self.provider, "sun_ecliptic_longitude_deg_many", None)
        if callable(f):
            return [norm360(float(v)) for v in f(dts)]
        return [self.sun_lon(dt) for dt in dts]
