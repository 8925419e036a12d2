"""Cross-group balancing for one cycle.

Groups are scheduled one after another, in the caller's order. With
`balance_workload` on, each interventionist's claimed start times per date are
tracked in an accumulator; a later group whose chosen time is already claimed
by the same interventionist that day is moved to the first free slot.

The accumulator maps "<interventionist_id>|<date>" to the set of claimed start
times. Pass one in to carry claims across calls (e.g. times that are already
booked); otherwise a fresh one is used per call.
"""

from __future__ import annotations

import logging
from collections import OrderedDict
from dataclasses import replace
from typing import List, MutableMapping, Optional, Sequence, Set

from .context import load_scheduling_context
from .cycle_scheduler import check_cycle_options, group_not_found_result, schedule_context_for_cycle
from .models import CycleScheduleResult, CycleSchedulingOptions, ScheduledSession
from .repositories import DataSources
from .scorer import build_day_constraints, detect_conflicts, existing_session_times_for_date
from .settings import SchedulingSettings
from .time_utils import generate_time_slots


logger = logging.getLogger(__name__)


UsedSlots = MutableMapping[str, Set[str]]


def slot_key(interventionist_id: str, date: str) -> str:
    return f"{interventionist_id}|{date}"


def auto_schedule_groups_for_cycle(
    sources: DataSources,
    group_ids: Sequence[str],
    cycle_id: str,
    options: CycleSchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
    used_slots: Optional[UsedSlots] = None,
    today: Optional[str] = None,
) -> "OrderedDict[str, CycleScheduleResult]":
    """Schedule each group for `cycle_id`, in order, optionally spreading load.

    Results are order-dependent: earlier groups keep their best times and later
    groups move. `group_ids` must therefore be an ordered sequence; sets are
    rejected.
    """

    if isinstance(group_ids, (set, frozenset)):
        raise TypeError("group_ids must be an ordered sequence, not a set")

    options = replace(options, cycle_id=cycle_id)
    check_cycle_options(options)

    claimed: UsedSlots = {} if used_slots is None else used_slots
    all_slots = generate_time_slots(
        options.session_duration,
        options.start_hour,
        options.end_hour,
        settings.slot_interval,
    )

    results: "OrderedDict[str, CycleScheduleResult]" = OrderedDict()
    for group_id in group_ids:
        context = load_scheduling_context(sources, group_id)
        if context is None:
            results[group_id] = group_not_found_result()
            continue

        schedule = schedule_context_for_cycle(sources, context, options, settings, today)

        if not (options.balance_workload and context.interventionist is not None):
            results[group_id] = schedule
            continue

        interventionist_id = context.interventionist.interventionist_id
        balanced: List[ScheduledSession] = []
        moved = 0
        for session in schedule.dates:
            key = slot_key(interventionist_id, session.date)
            taken = claimed.setdefault(key, set())

            if session.time in taken:
                free = next((s for s in all_slots if s.start_time not in taken), None)
                if free is None:
                    logger.warning(
                        "Group %s: no free slot for %s on %s, keeping %s",
                        group_id,
                        interventionist_id,
                        session.date,
                        session.time,
                    )
                else:
                    existing = existing_session_times_for_date(
                        context.existing_sessions, session.date, options.session_duration
                    )
                    dc = build_day_constraints(context, session.day, existing)
                    session = replace(
                        session,
                        time=free.start_time,
                        end_time=free.end_time,
                        conflicts=tuple(detect_conflicts(free, dc)),
                    )
                    moved += 1

            taken.add(session.time)
            balanced.append(session)

        if moved:
            logger.debug("Group %s: moved %d sessions to spread %s's load", group_id, moved, interventionist_id)

        results[group_id] = replace(schedule, dates=tuple(balanced))

    return results
