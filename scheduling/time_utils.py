"""Time arithmetic helpers.

All times are "HH:MM" strings inside a single calendar day (00:00-23:59).
Nothing here knows about timezones or dates crossing midnight.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional, Sequence, Tuple

from .models import TimeBlock, WeeklyTimeBlock


WEEKDAYS: Tuple[str, ...] = ("monday", "tuesday", "wednesday", "thursday", "friday")

MINUTES_PER_DAY = 24 * 60


def time_to_minutes(time: str) -> int:
    """Convert "HH:MM" to minutes since midnight."""

    hours, minutes = str(time).split(":")
    return int(hours) * 60 + int(minutes)


def minutes_to_time(minutes: int) -> str:
    """Convert minutes since midnight to "HH:MM"."""

    m = int(minutes)
    if m < 0 or m >= MINUTES_PER_DAY:
        raise ValueError(f"minutes must be within one day (0-{MINUTES_PER_DAY - 1}), got {m}")
    return f"{m // 60:02d}:{m % 60:02d}"


def add_minutes(time: str, minutes: int) -> str:
    return minutes_to_time(time_to_minutes(time) + int(minutes))


def format_time_display(time: str) -> str:
    """12-hour display form, e.g. "13:05" -> "1:05 PM"."""

    m = time_to_minutes(time)
    hours, mins = m // 60, m % 60
    period = "PM" if hours >= 12 else "AM"
    return f"{hours % 12 or 12}:{mins:02d} {period}"


def block_duration(block: TimeBlock) -> int:
    return time_to_minutes(block.end_time) - time_to_minutes(block.start_time)


def do_times_overlap(a: TimeBlock, b: TimeBlock) -> bool:
    """Half-open overlap test: back-to-back blocks do not overlap."""

    a_start, a_end = time_to_minutes(a.start_time), time_to_minutes(a.end_time)
    b_start, b_end = time_to_minutes(b.start_time), time_to_minutes(b.end_time)
    return a_start < b_end and b_start < a_end


def is_block_contained(inner: TimeBlock, outer: TimeBlock) -> bool:
    return (
        time_to_minutes(inner.start_time) >= time_to_minutes(outer.start_time)
        and time_to_minutes(inner.end_time) <= time_to_minutes(outer.end_time)
    )


def has_conflict(slot: TimeBlock, blocked: Iterable[TimeBlock]) -> bool:
    return any(do_times_overlap(slot, b) for b in blocked)


def generate_time_slots(duration: int, start_hour: int = 7, end_hour: int = 17, interval: int = 15) -> List[TimeBlock]:
    """Every `duration`-minute slot starting on `interval` steps from start_hour:00.

    A slot is kept only if it ends no later than end_hour:00. Output is in
    ascending start order; callers rely on that for first-match tie-breaking.
    """

    dur = int(duration)
    step = int(interval)
    if dur <= 0:
        raise ValueError("duration must be > 0")
    if step <= 0:
        raise ValueError("interval must be > 0")
    if not 0 <= int(start_hour) < int(end_hour) <= 23:
        raise ValueError(f"hour window must satisfy 0 <= start < end <= 23, got {start_hour}-{end_hour}")

    start = int(start_hour) * 60
    end = int(end_hour) * 60

    slots: List[TimeBlock] = []
    t = start
    while t + dur <= end:
        slots.append(TimeBlock(start_time=minutes_to_time(t), end_time=minutes_to_time(t + dur)))
        t += step
    return slots


def applies_to_day(block: WeeklyTimeBlock, day: str) -> bool:
    return day in block.days


def get_blocked_times_for_day(blocks: Iterable[WeeklyTimeBlock], day: str) -> List[TimeBlock]:
    return [b.as_block() for b in blocks if applies_to_day(b, day)]


def weekday_from_date(date_str: str) -> Optional[str]:
    """Weekday name for an ISO date, or None for Saturday/Sunday."""

    idx = date.fromisoformat(str(date_str)).weekday()  # Monday = 0
    if idx >= 5:
        return None
    return WEEKDAYS[idx]


def normalize_days(days: Optional[Sequence[str]]) -> Tuple[str, ...]:
    """Validate weekday names; None means every weekday.

    Order and duplicates are preserved as given: the weekly finder walks days
    in the caller's order.
    """

    if days is None:
        return WEEKDAYS
    out = []
    for d in days:
        name = str(d).strip().lower()
        if name not in WEEKDAYS:
            raise ValueError(f"Unknown or non-instructional weekday: {d!r}")
        out.append(name)
    return tuple(out)


def score_time_slot(slot: TimeBlock) -> int:
    """Base desirability by time of day (lower is better).

    08:00-10:59 -> 0, 11:00-13:59 -> 1, 14:00-14:59 -> 2, anything else -> 3.
    """

    start_hour = time_to_minutes(slot.start_time) / 60
    if 8 <= start_hour < 11:
        return 0
    if 11 <= start_hour < 14:
        return 1
    if 14 <= start_hour < 15:
        return 2
    return 3
