"""Normalize stored group schedules into one view.

Groups carry their schedule in one of three shapes:

- basic:     {"days": ["monday", ...], "time": "09:00", "duration": 30}
- day-times: {"day_times": [{"day": "monday", "time": "09:00", "enabled": true}, ...],
              "duration": 30, "cycle_id": ..., "custom_start_date": ..., "custom_end_date": ...}
- flexible:  {"sessions_per_week": 3, "preferred_time": "09:00", "duration": 30,
              "computed_days": [<day-times entries>], "cycle_id": ...}

The engine never branches on these shapes; it only sees `NormalizedSchedule`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple

from .time_utils import WEEKDAYS


DEFAULT_DURATION = 30
# Time given to default-pattern days of a flexible schedule with no preferred time.
DEFAULT_TIME = "09:00"

# Day patterns used when a flexible schedule has no computed days yet.
DEFAULT_DAY_PATTERNS: Dict[int, Tuple[str, ...]] = {
    2: ("tuesday", "thursday"),
    3: ("monday", "wednesday", "friday"),
    4: ("monday", "tuesday", "thursday", "friday"),
    5: WEEKDAYS,
}


@dataclass(frozen=True)
class NormalizedSchedule:
    # weekday -> configured time (None when the day is enabled without a time)
    day_times: Dict[str, Optional[str]] = field(default_factory=dict)
    sessions_per_week: int = 0
    duration: int = DEFAULT_DURATION
    preferred_time: Optional[str] = None
    cycle_id: Optional[str] = None
    custom_start_date: Optional[str] = None
    custom_end_date: Optional[str] = None

    @property
    def days(self) -> Tuple[str, ...]:
        return tuple(d for d in WEEKDAYS if d in self.day_times)


def _clean_day(day: Any) -> Optional[str]:
    name = str(day or "").strip().lower()
    return name if name in WEEKDAYS else None


def _day_times_from_entries(entries: List[Mapping[str, Any]]) -> Dict[str, Optional[str]]:
    out: Dict[str, Optional[str]] = {}
    for e in entries or []:
        if not e.get("enabled", True):
            continue
        day = _clean_day(e.get("day"))
        if day is None:
            continue
        out[day] = e.get("time") or None
    return out


def normalize_group_schedule(schedule: Optional[Mapping[str, Any]]) -> NormalizedSchedule:
    """Collapse any stored schedule shape into a `NormalizedSchedule`."""

    if not schedule:
        return NormalizedSchedule()

    duration = int(schedule.get("duration") or DEFAULT_DURATION)
    common = dict(
        duration=duration,
        cycle_id=schedule.get("cycle_id"),
        custom_start_date=schedule.get("custom_start_date"),
        custom_end_date=schedule.get("custom_end_date"),
    )

    if "sessions_per_week" in schedule:
        per_week = int(schedule.get("sessions_per_week") or 0)
        preferred = schedule.get("preferred_time") or None
        computed = schedule.get("computed_days") or []
        day_times = _day_times_from_entries(computed)
        if not day_times:
            pattern = DEFAULT_DAY_PATTERNS.get(per_week, DEFAULT_DAY_PATTERNS[3])
            day_times = {d: preferred or DEFAULT_TIME for d in pattern}
        return NormalizedSchedule(day_times=day_times, sessions_per_week=per_week, preferred_time=preferred, **common)

    if "day_times" in schedule:
        day_times = _day_times_from_entries(schedule.get("day_times") or [])
        first_time = next((t for d, t in sorted(day_times.items(), key=lambda kv: WEEKDAYS.index(kv[0])) if t), None)
        return NormalizedSchedule(
            day_times=day_times,
            sessions_per_week=len(day_times),
            preferred_time=first_time,
            **common,
        )

    # basic: same time on every listed day
    time = schedule.get("time") or None
    days = [d for d in (_clean_day(x) for x in schedule.get("days") or []) if d is not None]
    day_times = {d: time for d in days}
    return NormalizedSchedule(day_times=day_times, sessions_per_week=len(day_times), preferred_time=time, **common)
