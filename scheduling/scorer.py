"""Slot scoring + conflict detection.

A candidate slot is checked against three sources of blocked time:
1) the interventionist's availability
2) every roster student's blocked windows (grade-level + individual)
3) sessions that are already booked

Score (lower is better)
-----------------------
    base time-of-day score (0..3)
  + conflict_penalty per conflict
  - preferred_time_bonus if the slot starts at the requested time
  - consistency_bonus if it starts at the time chosen for the previous date

The bonuses are soft: a conflicted slot can only beat a clean one by the size
of the bonus, never by a whole conflict.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Tuple

from .availability import is_interventionist_available
from .constraints import get_student_blocked_times
from .models import Interventionist, ScheduleConflict, SchedulingContext, Session, Student, TimeBlock
from .settings import SchedulingSettings
from .time_utils import MINUTES_PER_DAY, do_times_overlap, has_conflict, minutes_to_time, score_time_slot, time_to_minutes, weekday_from_date


EXISTING_SESSION_DESCRIPTION = "Another session is already scheduled"


@dataclass(frozen=True)
class DayConstraints:
    """Blocked time for one weekday (weekly view) or one date (cycle view)."""

    day: str
    interventionist: Optional[Interventionist] = None
    students: Tuple[Student, ...] = ()
    student_blocked: Dict[str, List[TimeBlock]] = field(default_factory=dict)
    existing_blocked: Tuple[TimeBlock, ...] = ()
    existing_description: str = EXISTING_SESSION_DESCRIPTION


# ----------------------------
# Existing sessions -> blocked time
# ----------------------------


def _is_active(session: Session) -> bool:
    return bool(session.time) and session.status != "cancelled"


def _session_block(time: str, duration: int) -> TimeBlock:
    end = min(time_to_minutes(time) + int(duration), MINUTES_PER_DAY - 1)
    return TimeBlock(start_time=time, end_time=minutes_to_time(end))


def existing_session_times_for_day(sessions: Iterable[Session], day: str, duration: int) -> List[TimeBlock]:
    """Blocked time from booked sessions falling on `day` of any week."""

    return [
        _session_block(s.time, duration)
        for s in sessions
        if _is_active(s) and weekday_from_date(s.date) == day
    ]


def existing_session_times_for_date(sessions: Iterable[Session], date: str, duration: int) -> List[TimeBlock]:
    """Blocked time from booked sessions on one calendar date."""

    return [_session_block(s.time, duration) for s in sessions if _is_active(s) and s.date == date]


def build_day_constraints(
    context: SchedulingContext,
    day: str,
    existing_blocked: Iterable[TimeBlock],
    *,
    include_students: bool = True,
    existing_description: str = EXISTING_SESSION_DESCRIPTION,
) -> DayConstraints:
    students = context.students if include_students else ()
    student_blocked = (
        get_student_blocked_times(
            students,
            context.group.grade,
            context.grade_level_constraints,
            context.student_constraints,
            day,
        )
        if include_students
        else {}
    )
    return DayConstraints(
        day=day,
        interventionist=context.interventionist,
        students=tuple(students),
        student_blocked=student_blocked,
        existing_blocked=tuple(existing_blocked),
        existing_description=existing_description,
    )


# ----------------------------
# Conflicts + score
# ----------------------------


def detect_conflicts(slot: TimeBlock, dc: DayConstraints) -> List[ScheduleConflict]:
    conflicts: List[ScheduleConflict] = []

    if dc.interventionist is not None and not is_interventionist_available(dc.interventionist, dc.day, slot):
        conflicts.append(
            ScheduleConflict(
                conflict_type="interventionist_unavailable",
                description=f"{dc.interventionist.name} is not available",
            )
        )

    for student in dc.students:
        blocks = dc.student_blocked.get(student.student_id) or []
        if any(do_times_overlap(slot, b) for b in blocks):
            conflicts.append(
                ScheduleConflict(
                    conflict_type="student_unavailable",
                    description=f"{student.name} has a conflict",
                    student_id=str(student.student_id),
                    student_name=student.name,
                )
            )

    if has_conflict(slot, dc.existing_blocked):
        conflicts.append(ScheduleConflict(conflict_type="existing_session", description=dc.existing_description))

    return conflicts


def score_slot(
    slot: TimeBlock,
    conflict_count: int,
    settings: SchedulingSettings = SchedulingSettings(),
    *,
    preferred_time: Optional[str] = None,
    previous_time: Optional[str] = None,
    extra_penalty: float = 0.0,
) -> float:
    score = float(score_time_slot(slot)) + float(extra_penalty)
    score += settings.conflict_penalty * int(conflict_count)

    if preferred_time and slot.start_time == preferred_time:
        score -= settings.preferred_time_bonus
    if previous_time and slot.start_time == previous_time:
        score -= settings.consistency_bonus
    return score


def evaluate_slot(
    slot: TimeBlock,
    dc: DayConstraints,
    settings: SchedulingSettings = SchedulingSettings(),
    *,
    preferred_time: Optional[str] = None,
    previous_time: Optional[str] = None,
    extra_penalty: float = 0.0,
) -> Tuple[float, List[ScheduleConflict]]:
    """Return (score, conflicts) for one candidate slot."""

    conflicts = detect_conflicts(slot, dc)
    score = score_slot(
        slot,
        len(conflicts),
        settings,
        preferred_time=preferred_time,
        previous_time=previous_time,
        extra_penalty=extra_penalty,
    )
    return score, conflicts
