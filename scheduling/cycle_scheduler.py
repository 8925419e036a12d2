"""Cycle-aware scheduling.

Turns a group's weekly pattern into concrete dated sessions across one
intervention cycle:

1) resolve the cycle (explicit id, the group's stored cycle, else the one
   active today) and the date range (custom start/end override the cycle's)
2) list every date in range on a preferred weekday
3) drop non-instructional dates (reported back as skipped)
4) pick the best slot per remaining date, preferring the requested time (else
   the group's stored one) and the time chosen for the previous date
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date as _date
from typing import List, Optional, Sequence, Tuple

from utils.validators import require, validate_date, validate_time

from .calendar import iter_dates
from .context import load_scheduling_context
from .models import (
    CycleScheduleResult,
    CycleSchedulingOptions,
    InterventionCycle,
    ScheduleConflict,
    ScheduledSession,
    SchedulingContext,
    TimeBlock,
)
from .repositories import DataSources
from .schedule_shapes import normalize_group_schedule
from .scorer import build_day_constraints, evaluate_slot, existing_session_times_for_date
from .settings import SchedulingSettings
from .slot_finder import check_weekly_options
from .time_utils import WEEKDAYS, generate_time_slots, normalize_days, weekday_from_date


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CycleDate:
    date: str
    day: str


def generate_cycle_dates(start_date: str, end_date: str, days: Sequence[str]) -> List[CycleDate]:
    """Every date in [start_date, end_date] falling on one of `days` (Mon-Fri only)."""

    wanted = set(days)
    out: List[CycleDate] = []
    for d in iter_dates(start_date, end_date):
        iso = d.isoformat()
        day = weekday_from_date(iso)
        if day is not None and day in wanted:
            out.append(CycleDate(date=iso, day=day))
    return out


def partition_cycle_dates(
    dates: Sequence[CycleDate],
    non_instructional: Sequence[str],
) -> Tuple[List[CycleDate], List[str]]:
    """Split into (valid dates, skipped ISO dates); order is preserved in both."""

    blocked = set(non_instructional)
    valid = [d for d in dates if d.date not in blocked]
    skipped = [d.date for d in dates if d.date in blocked]
    return valid, skipped


def _failed(conflict_type: str, description: str) -> CycleScheduleResult:
    return CycleScheduleResult(conflicts=(ScheduleConflict(conflict_type=conflict_type, description=description),))


def group_not_found_result() -> CycleScheduleResult:
    return _failed("group_not_found", "Group not found")


def check_cycle_options(options: CycleSchedulingOptions) -> None:
    check_weekly_options(options.session_duration, options.preferred_days, options.start_hour, options.end_hour)
    require(validate_time(options.preferred_time, "Preferred time", allow_empty=True))
    require(validate_date(options.custom_start_date, "Custom start date", allow_empty=True))
    require(validate_date(options.custom_end_date, "Custom end date", allow_empty=True))


def _resolve_cycle(sources: DataSources, cycle_id: Optional[str], today: str) -> Optional[InterventionCycle]:
    try:
        if cycle_id:
            return sources.calendar.get_cycle(cycle_id)
        return sources.calendar.get_current_cycle(today)
    except Exception as e:
        # network or repository failure: report as no cycle
        logger.warning("Cycle lookup failed (cycle_id=%s): %s", cycle_id, e, exc_info=True)
        return None


def _non_instructional(sources: DataSources, start_date: str, end_date: str, grade: int) -> List[str]:
    try:
        return list(sources.calendar.get_non_instructional_dates(start_date, end_date, grade))
    except Exception as e:
        logger.warning(
            "Calendar lookup failed for %s..%s, assuming no closures: %s", start_date, end_date, e, exc_info=True
        )
        return []


def schedule_context_for_cycle(
    sources: DataSources,
    context: SchedulingContext,
    options: CycleSchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
    today: Optional[str] = None,
) -> CycleScheduleResult:
    """Cycle schedule for an already-loaded context (options must be validated)."""

    group = context.group
    stored = normalize_group_schedule(group.schedule)

    on_date = today or _date.today().isoformat()
    cycle = _resolve_cycle(sources, options.cycle_id or stored.cycle_id, on_date)
    if cycle is None:
        return _failed("no_cycle", "No active intervention cycle found")

    start_date = options.custom_start_date or stored.custom_start_date or cycle.start_date
    end_date = options.custom_end_date or stored.custom_end_date or cycle.end_date

    if options.preferred_days is not None:
        days = normalize_days(options.preferred_days)
    else:
        days = stored.days or WEEKDAYS

    preferred_time = options.preferred_time or stored.preferred_time

    closed = _non_instructional(sources, start_date, end_date, group.grade)
    valid, skipped = partition_cycle_dates(generate_cycle_dates(start_date, end_date, days), closed)

    all_slots = generate_time_slots(
        options.session_duration,
        options.start_hour,
        options.end_hour,
        settings.slot_interval,
    )

    scheduled: List[ScheduledSession] = []
    for cd in valid:
        existing = existing_session_times_for_date(context.existing_sessions, cd.date, options.session_duration)
        dc = build_day_constraints(context, cd.day, existing)
        previous_time = scheduled[-1].time if scheduled else None

        best: Optional[TimeBlock] = None
        best_conflicts: List[ScheduleConflict] = []
        best_score = float("inf")
        for slot in all_slots:
            score, conflicts = evaluate_slot(
                slot,
                dc,
                settings,
                preferred_time=preferred_time,
                previous_time=previous_time,
            )
            # strict: the earliest slot keeps a tie
            if score < best_score:
                best, best_conflicts, best_score = slot, conflicts, score

        if best is None:
            continue

        scheduled.append(
            ScheduledSession(
                date=cd.date,
                day=cd.day,
                time=best.start_time,
                end_time=best.end_time,
                conflicts=tuple(best_conflicts),
            )
        )

    logger.info(
        "Group %s cycle %s (%s..%s): %d sessions, %d skipped dates",
        group.group_id,
        cycle.cycle_id,
        start_date,
        end_date,
        len(scheduled),
        len(skipped),
    )

    return CycleScheduleResult(
        dates=tuple(scheduled),
        total_sessions=len(scheduled),
        skipped_dates=tuple(skipped),
        conflicts=(),
        valid_dates=tuple(cd.date for cd in valid),
    )


def generate_cycle_schedule(
    sources: DataSources,
    group_id: str,
    options: CycleSchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
    today: Optional[str] = None,
) -> CycleScheduleResult:
    """Dated sessions for one group across a cycle.

    `today` (ISO date) picks the current cycle when no cycle id is given;
    defaults to the real current date.
    """

    check_cycle_options(options)

    context = load_scheduling_context(sources, group_id)
    if context is None:
        return group_not_found_result()

    return schedule_context_for_cycle(sources, context, options, settings, today)
