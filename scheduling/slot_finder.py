"""Weekly slot finder.

Finds recurring weekly slots (weekday + start/end time, no dates) for a group.

- `find_available_slots`: score every (preferred day x candidate slot), keep the best 20
- `suggest_schedule`: pick `sessions_per_week` of them, spread across days
- `suggest_optimal_times`: like find_available_slots, but penalizes start times
  that are already popular system-wide to spread interventionist load
"""

from __future__ import annotations

import logging
from collections import Counter
from typing import List, Optional, Sequence

from utils.validators import require, validate_hour_window, validate_positive_int, validate_weekdays

from .models import SchedulingOptions, SuggestedTimeSlot
from .repositories import DataSources
from .context import load_scheduling_context
from .schedule_shapes import normalize_group_schedule
from .scorer import build_day_constraints, evaluate_slot, existing_session_times_for_day
from .settings import SchedulingSettings
from .time_utils import generate_time_slots, normalize_days


logger = logging.getLogger(__name__)


def check_weekly_options(
    session_duration: int,
    preferred_days: Optional[Sequence[str]],
    start_hour: int,
    end_hour: int,
) -> None:
    require(validate_positive_int(session_duration, "Session duration"))
    require(validate_weekdays(preferred_days, "Preferred days"))
    require(validate_hour_window(start_hour, end_hour))


def _sorted_top(suggestions: List[SuggestedTimeSlot], limit: int) -> List[SuggestedTimeSlot]:
    # sorted() is stable: equal scores keep day-then-time enumeration order
    return sorted(suggestions, key=lambda s: s.score)[: int(limit)]


def find_available_slots(
    sources: DataSources,
    group_id: str,
    options: SchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
) -> List[SuggestedTimeSlot]:
    """Ranked weekly slots for a group (ascending score, at most `max_suggestions`)."""

    check_weekly_options(options.session_duration, options.preferred_days, options.start_hour, options.end_hour)

    context = load_scheduling_context(sources, group_id)
    if context is None:
        return []

    days = normalize_days(options.preferred_days)
    all_slots = generate_time_slots(
        options.session_duration,
        options.start_hour,
        options.end_hour,
        settings.slot_interval,
    )

    suggestions: List[SuggestedTimeSlot] = []
    for day in days:
        existing = existing_session_times_for_day(context.existing_sessions, day, settings.assumed_session_minutes)
        dc = build_day_constraints(context, day, existing)

        for slot in all_slots:
            score, conflicts = evaluate_slot(slot, dc, settings)
            suggestions.append(
                SuggestedTimeSlot(
                    day=day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    score=score,
                    conflicts=tuple(conflicts),
                )
            )

    top = _sorted_top(suggestions, settings.max_suggestions)
    logger.debug("Group %s: %d candidate slots, returning %d", group_id, len(suggestions), len(top))
    return top


def select_best_slots(slots: Sequence[SuggestedTimeSlot], count: int) -> List[SuggestedTimeSlot]:
    """Greedy pick of `count` slots from a ranked list.

    Pass 1 takes at most one slot per weekday; pass 2 fills whatever is left in
    score order, allowing a day to repeat.
    """

    n = max(0, int(count))
    picked: List[int] = []
    used_days = set()

    for i, slot in enumerate(slots):
        if len(picked) >= n:
            break
        if slot.day not in used_days:
            picked.append(i)
            used_days.add(slot.day)

    taken = set(picked)
    for i in range(len(slots)):
        if len(picked) >= n:
            break
        if i not in taken:
            picked.append(i)
            taken.add(i)

    return [slots[i] for i in picked]


def suggest_schedule(
    sources: DataSources,
    group_id: str,
    options: SchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
) -> List[SuggestedTimeSlot]:
    """Pick up to `sessions_per_week` weekly slots, spread across distinct days.

    When fewer than `sessions_per_week` conflict-free slots exist, slots scoring
    below `acceptable_score_threshold` are allowed instead of failing outright.
    """

    per_week = options.sessions_per_week
    if per_week is None:
        # a group with no stored schedule asks for nothing
        group = sources.groups.get_group(group_id)
        per_week = normalize_group_schedule(group.schedule).sessions_per_week if group is not None else 0
    else:
        require(validate_positive_int(per_week, "Sessions per week"))

    all_slots = find_available_slots(sources, group_id, options, settings)

    perfect = [s for s in all_slots if not s.conflicts]
    if len(perfect) >= per_week:
        return select_best_slots(perfect, per_week)

    acceptable = [s for s in all_slots if s.score < settings.acceptable_score_threshold]
    logger.info(
        "Group %s: only %d conflict-free slots for %d sessions, using %d acceptable slots",
        group_id,
        len(perfect),
        per_week,
        len(acceptable),
    )
    return select_best_slots(acceptable, per_week)


def suggest_optimal_times(
    sources: DataSources,
    group_id: str,
    options: SchedulingOptions,
    settings: SchedulingSettings = SchedulingSettings(),
) -> List[SuggestedTimeSlot]:
    """Weekly slots that avoid start times already popular across the whole system.

    Only interventionist availability and existing sessions are checked here;
    student constraints are left to `find_available_slots`.
    """

    check_weekly_options(options.session_duration, options.preferred_days, options.start_hour, options.end_hour)

    context = load_scheduling_context(sources, group_id)
    if context is None:
        return []

    days = normalize_days(options.preferred_days)
    all_slots = generate_time_slots(
        options.session_duration,
        options.start_hour,
        options.end_hour,
        settings.slot_interval,
    )

    popularity = Counter(
        s.time for s in context.existing_sessions if s.time and s.status != "cancelled"
    )

    suggestions: List[SuggestedTimeSlot] = []
    for day in days:
        existing = existing_session_times_for_day(context.existing_sessions, day, options.session_duration)
        dc = build_day_constraints(
            context,
            day,
            existing,
            include_students=False,
            existing_description="Overlaps with existing session",
        )

        for slot in all_slots:
            score, conflicts = evaluate_slot(
                slot,
                dc,
                settings,
                extra_penalty=settings.popularity_weight * popularity.get(slot.start_time, 0),
            )
            suggestions.append(
                SuggestedTimeSlot(
                    day=day,
                    start_time=slot.start_time,
                    end_time=slot.end_time,
                    score=score,
                    conflicts=tuple(conflicts),
                )
            )

    return _sorted_top(suggestions, settings.max_optimal_suggestions)
