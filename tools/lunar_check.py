from __future__ import annotations

"""
Lunar calendar check script: print the combined calendar record per day.

Uses:
- mcal.features.multi_calendar.MultiCalendarResolver
"""

import argparse

from mcal.core.errors import OutOfRangeError
from mcal.features.multi_calendar import MultiCalendarResolver

from tools.common import add_common_args, date_span, days_inclusive, dump_json


def main() -> None:
    parser = argparse.ArgumentParser(description="Lunar calendar check")
    add_common_args(parser)
    args = parser.parse_args()

    start, end = date_span(args)
    if start is None or end is None:
        parser.error("--date or --start/--end required")

    resolver = MultiCalendarResolver()

    rows = []
    for d in days_inclusive(start, end):
        try:
            info = resolver.resolve(d)
        except OutOfRangeError as e:
            parser.error(str(e))
        l = info.lunar
        rows.append(
            {
                "date": d.isoformat(),
                "lunar": f"{l.year}-{'闰' if l.is_leap else ''}{l.month:02d}-{l.day:02d}",
                "label": l.description,
                "year_ganzhi": info.stem_branch.combined_label,
                "day_ganzhi": info.day_stem_branch.combined_label,
                "animal": l.zodiac_animal,
                "term": info.solar_term.name,
                "term_today": info.solar_term.exact_date_if_today is not None,
                "zodiac": info.zodiac.name,
                "festivals": [f.name for f in info.festivals],
            }
        )

    if args.json:
        dump_json({"days": rows})
        return

    for r in rows:
        term = f"[{r['term']}]" if r["term_today"] else r["term"]
        fest = " ".join(r["festivals"])
        print(
            f"{r['date']}  {r['label']:<8} {r['year_ganzhi']}年 {r['day_ganzhi']}日 "
            f"{r['animal']}  {term}  {r['zodiac']}  {fest}"
        )


if __name__ == "__main__":
    main()
