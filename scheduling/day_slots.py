"""Per-day slots from stored group schedules.

A group meeting mon/wed/fri expands into three `DaySlot`s, each carrying the
time configured for that day and the session length. Planning views use them
to list which configured days still have no session booked in a given week.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as _date, timedelta
from typing import Dict, Iterable, List, Mapping, Optional, Sequence

from utils.validators import require, validate_date

from .models import Group, Session
from .repositories import DataSources
from .schedule_shapes import normalize_group_schedule
from .time_utils import WEEKDAYS


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DaySlot:
    group: Group
    day: str
    time: Optional[str]  # configured time for the day; None when only the day is set
    duration: int


def expand_groups_to_day_slots(groups: Iterable[Group]) -> List[DaySlot]:
    """One slot per (group, scheduled day), in group order then weekday order.

    Groups without a stored schedule contribute nothing.
    """

    slots: List[DaySlot] = []
    for group in groups:
        schedule = normalize_group_schedule(group.schedule)
        for day in schedule.days:
            slots.append(DaySlot(group=group, day=day, time=schedule.day_times.get(day), duration=schedule.duration))
    return slots


def week_dates(on_date: str) -> Dict[str, str]:
    """Monday..Friday ISO dates of the week containing `on_date`."""

    require(validate_date(on_date, "Week date"))
    d = _date.fromisoformat(on_date)
    monday = d - timedelta(days=d.weekday())
    return {day: (monday + timedelta(days=i)).isoformat() for i, day in enumerate(WEEKDAYS)}


def is_day_slot_scheduled(slot: DaySlot, sessions: Sequence[Session], dates: Mapping[str, str]) -> bool:
    """True if the group has a non-cancelled session on the slot's date this week."""

    on_date = dates.get(slot.day)
    if not on_date:
        return False

    return any(
        s.group_id == slot.group.group_id and s.date == on_date and s.status != "cancelled"
        for s in sessions
    )


def get_unscheduled_day_slots(
    groups: Iterable[Group],
    sessions: Sequence[Session],
    dates: Mapping[str, str],
) -> List[DaySlot]:
    return [slot for slot in expand_groups_to_day_slots(groups) if not is_day_slot_scheduled(slot, sessions, dates)]


def unscheduled_day_slots_for_interventionist(
    sources: DataSources,
    interventionist_id: str,
    on_date: str,
) -> List[DaySlot]:
    """Configured days of an interventionist's groups with nothing booked in the week of `on_date`."""

    dates = week_dates(on_date)
    groups = sources.groups.list_groups_for_interventionist(interventionist_id)
    sessions = sources.sessions.list_sessions(dates["monday"], dates["friday"])

    open_slots = get_unscheduled_day_slots(groups, sessions, dates)
    logger.debug(
        "Interventionist %s week of %s: %d groups, %d unscheduled day slots",
        interventionist_id,
        dates["monday"],
        len(groups),
        len(open_slots),
    )
    return open_slots
