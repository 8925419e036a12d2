"""School calendar helpers shared by calendar service implementations."""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Iterator, List, Optional

from .models import CalendarEvent, InterventionCycle


def iter_dates(start_date: str, end_date: str) -> Iterator[date]:
    """Yield every date from start_date to end_date (inclusive)."""

    current = date.fromisoformat(str(start_date))
    end = date.fromisoformat(str(end_date))
    while current <= end:
        yield current
        current += timedelta(days=1)


def non_instructional_dates(
    events: Iterable[CalendarEvent],
    start_date: str,
    end_date: str,
    grade: Optional[int] = None,
) -> List[str]:
    """Sorted ISO dates in [start_date, end_date] covered by any event.

    Multi-day events (end_date set) contribute every date of their range.
    When `grade` is given, events limited to other grades are ignored; events
    with no grade list affect everyone.
    """

    out = set()
    for ev in events:
        if grade is not None and ev.affects_grades is not None and int(grade) not in ev.affects_grades:
            continue
        for d in iter_dates(ev.date, ev.end_date or ev.date):
            iso = d.isoformat()
            if start_date <= iso <= end_date:
                out.add(iso)
    return sorted(out)


def pick_current_cycle(cycles: Iterable[InterventionCycle], on_date: str) -> Optional[InterventionCycle]:
    """Earliest-starting active cycle whose range contains `on_date`."""

    candidates = [
        c for c in cycles if c.status == "active" and c.start_date <= on_date <= c.end_date
    ]
    if not candidates:
        return None
    return sorted(candidates, key=lambda c: c.start_date)[0]
