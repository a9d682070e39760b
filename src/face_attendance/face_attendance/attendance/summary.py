from __future__ import annotations

import math
from typing import Iterable, Optional

from ..common.datetime_utils import date_key, parse_iso
from ..core.enums import EventKind
from .model import AttendanceEvent, DailySummary


def _later(current: Optional[str], candidate: str) -> str:
    if current is None or parse_iso(candidate) > parse_iso(current):
        return candidate
    return current


def hours_between(check_in: str, check_out: str) -> float:
    seconds = (parse_iso(check_out) - parse_iso(check_in)).total_seconds()
    return math.floor(seconds / 3600 * 100 + 0.5) / 100


def compute_daily_summaries(events: Iterable[AttendanceEvent]) -> list[DailySummary]:
    """Group events by (identity, day), keeping the latest timestamp per kind.

    Result is sorted by date, newest day first.
    """

    groups: dict[tuple[str, str], dict] = {}
    for e in events:
        day = date_key(e.timestamp)
        g = groups.get((e.identity_id, day))
        if g is None:
            g = {"identity_name": e.identity_name, "check_in": None, "check_out": None}
            groups[(e.identity_id, day)] = g

        if e.kind == EventKind.CHECK_IN:
            g["check_in"] = _later(g["check_in"], e.timestamp)
        else:
            g["check_out"] = _later(g["check_out"], e.timestamp)

    summaries = []
    for (identity_id, day), g in groups.items():
        total = None
        if g["check_in"] and g["check_out"]:
            total = hours_between(g["check_in"], g["check_out"])
        summaries.append(
            DailySummary(
                identity_id=identity_id,
                identity_name=g["identity_name"],
                date=day,
                check_in=g["check_in"],
                check_out=g["check_out"],
                total_hours=total,
            )
        )

    summaries.sort(key=lambda s: s.date, reverse=True)
    return summaries
