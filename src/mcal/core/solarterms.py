# src/mcal/core/solarterms.py
from __future__ import annotations

import logging
from bisect import bisect_left, bisect_right
from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from functools import lru_cache
from typing import Dict, List, Mapping, Optional, Protocol, Sequence, Tuple, runtime_checkable

from mcal.core.astronomy import AstronomyEngine, angdiff180
from mcal.core.config import SolarTermConfig, env_truthy
from mcal.core.providers.meeus_provider import MeeusProvider
from mcal.core.rootfind import bisect_datetime
from mcal.features.config import TERM_DEGS_IN_YEAR, is_minor_term_deg, term_name_from_deg

log = logging.getLogger(__name__)

UTC = timezone.utc

# mean spacing of the 24 terms (tropical year / 24)
_MEAN_TERM_DAYS = 365.2422 / 24.0


def _debug_enabled() -> bool:
    return env_truthy("MCAL_DEBUG_TERMS")


# ============================================================
# Term-date sources
# ============================================================

@runtime_checkable
class TermDateSource(Protocol):
    def term_dates(self, year: int) -> Sequence[Tuple[int, date]]:
        """The 24 (degree, civil date) pairs of a Gregorian year, 小寒 first."""
        ...


def _build_grid(start_utc: datetime, end_utc: datetime, step: timedelta) -> List[datetime]:
    """
    Inclusive grid: start, start+step, ..., end.
    """
    ts: List[datetime] = []
    t = start_utc
    while t < end_utc:
        ts.append(t)
        t = t + step
    ts.append(end_utc)
    return ts


def solar_longitude_crossing(
    eng: AstronomyEngine,
    guess_utc: datetime,
    *,
    target_deg: float,
    config: SolarTermConfig = SolarTermConfig(),
) -> datetime:
    """
    Instant at which the apparent solar longitude reaches target_deg,
    searched within +-config.search_window_days of guess_utc.
    """
    window = timedelta(days=config.search_window_days)
    start_utc = guess_utc - window
    end_utc = guess_utc + window

    def g(t: datetime) -> float:
        return angdiff180(eng.sun_lon(t) - target_deg)

    ts = _build_grid(start_utc, end_utc, timedelta(hours=config.scan_step_hours))
    vs = [angdiff180(lon - target_deg) for lon in eng.sun_lon_many(ts)]

    bracket: Optional[Tuple[datetime, datetime]] = None
    for i in range(len(ts) - 1):
        if vs[i] == 0.0:
            return ts[i]
        if vs[i] < 0.0 < vs[i + 1]:
            bracket = (ts[i], ts[i + 1])
            break
    if bracket is None:
        raise RuntimeError(
            f"solar longitude {target_deg} not bracketed in {start_utc.isoformat()} .. {end_utc.isoformat()}"
        )

    r = bisect_datetime(g, bracket[0], bracket[1], tol_seconds=config.tol_seconds)
    err_deg = abs(g(r.t))
    if err_deg > config.verify_max_abs_deg:
        log.warning(
            "solar term crossing verification failed: deg=%s t=%s err=%.6f",
            target_deg, r.t.isoformat(), err_deg,
        )
    return r.t


@lru_cache(maxsize=64)
def _term_instants_for_year(
    eng: AstronomyEngine,
    year: int,
    config: SolarTermConfig,
) -> Tuple[Tuple[int, datetime], ...]:
    """
    24 (degree, instant_utc) pairs of a Gregorian year, cached per (engine, year, config).
    """
    base = datetime(year, 1, 6, tzinfo=UTC)
    out: List[Tuple[int, datetime]] = []
    for k, deg in enumerate(TERM_DEGS_IN_YEAR):
        guess = base + timedelta(days=_MEAN_TERM_DAYS * k)
        t = solar_longitude_crossing(eng, guess, target_deg=float(deg), config=config)
        out.append((deg, t))
        if _debug_enabled():
            log.debug("[MCAL_DEBUG_TERMS] year=%d deg=%03d %s at %s", year, deg, term_name_from_deg(deg), t.isoformat())

    log.debug("built solar term table year=%d provider=%s", year, type(eng.provider).__name__)
    return tuple(out)


@dataclass(frozen=True)
class AstronomicalTermTable:
    """
    Term dates computed from the sun's apparent ecliptic longitude.

    The default engine uses the closed-form MeeusProvider; pass an engine over
    a SkyfieldProvider for ephemeris-grade instants.
    """
    engine: AstronomyEngine = AstronomyEngine(provider=MeeusProvider())
    config: SolarTermConfig = SolarTermConfig()

    def term_instants(self, year: int) -> Tuple[Tuple[int, datetime], ...]:
        return _term_instants_for_year(self.engine, int(year), self.config)

    def term_dates(self, year: int) -> Tuple[Tuple[int, date], ...]:
        offset = timezone(timedelta(hours=self.config.utc_offset_hours))
        return tuple((deg, t.astimezone(offset).date()) for deg, t in self.term_instants(year))


@dataclass(frozen=True)
class StaticTermTable:
    """
    Precomputed per-year term dates, e.g. loaded from a published almanac.
    """
    table: Mapping[int, Sequence[Tuple[int, date]]]

    def term_dates(self, year: int) -> Sequence[Tuple[int, date]]:
        try:
            rows = self.table[int(year)]
        except KeyError as e:
            raise KeyError(f"no solar term dates for year {year}") from e
        if len(rows) != 24:
            raise ValueError(f"solar term table for {year} must hold 24 entries (got {len(rows)})")
        return rows


# ============================================================
# Calculator
# ============================================================

@dataclass(frozen=True)
class SolarTerm:
    """
    Solar term in effect on a date.

    days_until_next counts to the nearest term boundary on or after the date,
    so it is 0 on a term day; next_name / next_date always name the term after
    the one in effect.
    """
    name: str
    is_minor_term: bool
    days_until_next: int
    exact_date_if_today: Optional[date]
    degree: int
    next_name: str
    next_date: date


@dataclass(frozen=True)
class SolarTermCalculator:
    source: TermDateSource = AstronomicalTermTable()

    def _terms_around(self, d: date) -> List[Tuple[int, date]]:
        terms = list(self.source.term_dates(d.year))
        if d <= terms[0][1]:
            terms = list(self.source.term_dates(d.year - 1)) + terms
        if d >= terms[-1][1]:
            terms = terms + list(self.source.term_dates(d.year + 1))
        return terms

    def term_for(self, d: date) -> SolarTerm:
        terms = self._terms_around(d)
        dates = [t for _, t in terms]

        i = bisect_right(dates, d) - 1
        j = bisect_left(dates, d)
        deg, _ = terms[i]
        next_deg, next_date = terms[i + 1]

        return SolarTerm(
            name=term_name_from_deg(deg),
            is_minor_term=is_minor_term_deg(deg),
            days_until_next=(dates[j] - d).days,
            exact_date_if_today=d if dates[j] == d else None,
            degree=int(deg),
            next_name=term_name_from_deg(next_deg),
            next_date=next_date,
        )

    def terms_in_year(self, year: int) -> Dict[date, str]:
        """Term name by civil date for one Gregorian year."""
        return {t: term_name_from_deg(deg) for deg, t in self.source.term_dates(year)}
