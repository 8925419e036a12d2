"""Interventionist availability.

Availability is stored as the windows a person IS available. Two views:
- `is_interventionist_available`: direct containment check for one slot
- `get_interventionist_blocked_times`: the complement inside the scheduling
  day, used to draw the unavailable gaps for a day
"""

from __future__ import annotations

from typing import List, Optional

from .models import Interventionist, TimeBlock
from .settings import SchedulingSettings
from .time_utils import get_blocked_times_for_day, is_block_contained, minutes_to_time, time_to_minutes


def get_interventionist_blocked_times(
    interventionist: Interventionist,
    day: str,
    *,
    settings: SchedulingSettings = SchedulingSettings(),
    day_start: Optional[str] = None,
    day_end: Optional[str] = None,
) -> List[TimeBlock]:
    """Blocked (unavailable) windows for `day`.

    The window defaults to `settings.day_start`..`settings.day_end`; explicit
    `day_start`/`day_end` override it. No availability for the day means
    available all day, so nothing is blocked.
    """

    available = sorted(
        get_blocked_times_for_day(interventionist.availability, day),
        key=lambda b: time_to_minutes(b.start_time),
    )
    if not available:
        return []

    start_of_day = time_to_minutes(day_start or settings.day_start)
    end_of_day = time_to_minutes(day_end or settings.day_end)

    blocked: List[TimeBlock] = []
    current = start_of_day
    for block in available:
        block_start = min(time_to_minutes(block.start_time), end_of_day)
        block_end = time_to_minutes(block.end_time)

        # gap before this available block
        if current < block_start:
            blocked.append(TimeBlock(start_time=minutes_to_time(current), end_time=minutes_to_time(block_start)))

        current = max(current, block_end)

    # gap after the last available block
    if current < end_of_day:
        blocked.append(TimeBlock(start_time=minutes_to_time(current), end_time=minutes_to_time(end_of_day)))

    return blocked


def is_interventionist_available(interventionist: Interventionist, day: str, slot: TimeBlock) -> bool:
    """True if the slot fits inside one of the day's availability windows.

    A person with no availability windows at all is treated as always available.
    """

    if not interventionist.availability:
        return True

    return any(
        day in block.days and is_block_contained(slot, block.as_block())
        for block in interventionist.availability
    )
