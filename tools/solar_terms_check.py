from __future__ import annotations

"""
Solar term (二十四节气) check script: closed-form vs ephemeris term instants.

Uses:
- mcal.core.solarterms.AstronomicalTermTable
- mcal.core.providers.meeus_provider.MeeusProvider
- mcal.core.providers.skyfield_provider.SkyfieldProvider
"""

import argparse
from datetime import timedelta, timezone

from mcal.core.astronomy import AstronomyEngine
from mcal.core.providers.meeus_provider import MeeusProvider
from mcal.core.providers.skyfield_provider import SkyfieldProvider
from mcal.core.solarterms import AstronomicalTermTable
from mcal.features.config import term_info_from_deg

from tools.common import add_ephemeris_args, dump_json, ephemeris_or_skip

BEIJING = timezone(timedelta(hours=8))


def main() -> None:
    parser = argparse.ArgumentParser(description="Solar term (二十四节气) check")
    parser.add_argument("--year", type=int, required=True)
    parser.add_argument("--json", action="store_true")
    add_ephemeris_args(parser)
    args = parser.parse_args()

    eph_path = ephemeris_or_skip(args)

    closed = AstronomicalTermTable(engine=AstronomyEngine(provider=MeeusProvider()))
    precise = AstronomicalTermTable(engine=AstronomyEngine(provider=SkyfieldProvider(ephemeris_path=eph_path)))

    rows = []
    for (deg, t_closed), (_, t_precise) in zip(closed.term_instants(args.year), precise.term_instants(args.year)):
        info = term_info_from_deg(deg)
        a = t_closed.astimezone(BEIJING)
        b = t_precise.astimezone(BEIJING)
        rows.append(
            {
                "name": info.name,
                "kind": info.kind,
                "degree": info.deg,
                "closed_form": a.isoformat(),
                "ephemeris": b.isoformat(),
                "diff_seconds": round((t_closed - t_precise).total_seconds(), 1),
                "same_date": a.date() == b.date(),
            }
        )

    if args.json:
        dump_json({"year": args.year, "terms": rows})
        return

    for r in rows:
        flag = "" if r["same_date"] else "  DATE MISMATCH"
        print(f"{r['name']}  {r['kind']}  deg={r['degree']:03d}  {r['ephemeris']}  diff={r['diff_seconds']:+.1f}s{flag}")


if __name__ == "__main__":
    main()
