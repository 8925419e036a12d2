"""Data model for the intervention session scheduler.

Everything here is a small frozen dataclass. Instances are built fresh for each
scheduling request from the group/session/calendar repositories and are never
mutated in place.

Times are wall-clock strings in 24-hour "HH:MM" form and dates are ISO strings
("YYYY-MM-DD"), the same representation the repositories hand us.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional, Tuple


# ----------------------------
# Time blocks
# ----------------------------


@dataclass(frozen=True)
class TimeBlock:
    start_time: str  # "HH:MM"
    end_time: str  # "HH:MM"


@dataclass(frozen=True)
class WeeklyTimeBlock:
    """A time block that recurs on the listed weekdays."""

    start_time: str
    end_time: str
    days: Tuple[str, ...] = ()

    def as_block(self) -> TimeBlock:
        return TimeBlock(start_time=self.start_time, end_time=self.end_time)


# ----------------------------
# Entities (read from repositories)
# ----------------------------


@dataclass(frozen=True)
class Interventionist:
    interventionist_id: str
    name: str
    # When the person IS available. Empty means "available all day".
    availability: Tuple[WeeklyTimeBlock, ...] = ()


@dataclass(frozen=True)
class Group:
    group_id: str
    name: str
    grade: int
    interventionist_id: Optional[str] = None
    # Stored schedule in one of the basic / day-times / flexible shapes.
    # See scheduling.schedule_shapes.normalize_group_schedule.
    schedule: Optional[Mapping[str, Any]] = None


@dataclass(frozen=True)
class Student:
    student_id: str
    group_id: str
    name: str


@dataclass(frozen=True)
class GradeLevelConstraint:
    constraint_id: str
    grade: int
    label: str
    schedule: WeeklyTimeBlock
    constraint_type: str = "other"  # lunch | core_instruction | specials | therapy | other


@dataclass(frozen=True)
class StudentConstraint:
    constraint_id: str
    student_id: str
    label: str
    schedule: WeeklyTimeBlock
    constraint_type: str = "other"


@dataclass(frozen=True)
class Session:
    session_id: str
    group_id: str
    date: str  # YYYY-MM-DD
    time: Optional[str] = None  # HH:MM; untimed sessions never block a slot
    status: str = "planned"  # one of SESSION_STATUSES


@dataclass(frozen=True)
class InterventionCycle:
    cycle_id: str
    name: str
    start_date: str
    end_date: str
    status: str = "active"  # planning | active | completed
    grade_band: Optional[str] = None


@dataclass(frozen=True)
class CalendarEvent:
    """A non-instructional day, or an inclusive range of them."""

    event_id: str
    date: str
    title: str
    event_type: str = "holiday"
    end_date: Optional[str] = None
    # None means every grade is affected.
    affects_grades: Optional[Tuple[int, ...]] = None


# ----------------------------
# Scheduling inputs
# ----------------------------


@dataclass(frozen=True)
class SchedulingContext:
    """Snapshot of everything needed to schedule one group."""

    group: Group
    students: Tuple[Student, ...]
    interventionist: Optional[Interventionist]
    grade_level_constraints: Tuple[GradeLevelConstraint, ...]
    student_constraints: Tuple[StudentConstraint, ...]
    # Every booked session in the system, not just this group's.
    existing_sessions: Tuple[Session, ...]


@dataclass(frozen=True)
class SchedulingOptions:
    session_duration: int  # minutes
    sessions_per_week: Optional[int] = None  # None -> taken from the group's stored schedule
    preferred_days: Optional[Tuple[str, ...]] = None  # None -> all weekdays
    start_hour: int = 7
    end_hour: int = 17


@dataclass(frozen=True)
class CycleSchedulingOptions:
    session_duration: int
    preferred_days: Optional[Tuple[str, ...]] = None  # None -> group's stored schedule, then all weekdays
    cycle_id: Optional[str] = None  # None -> current active cycle
    preferred_time: Optional[str] = None
    start_hour: int = 7
    end_hour: int = 17
    balance_workload: bool = False

    # Mid-cycle starts / early ends override the cycle's own date range.
    custom_start_date: Optional[str] = None
    custom_end_date: Optional[str] = None


# ----------------------------
# Results
# ----------------------------


SESSION_STATUSES = ("planned", "completed", "cancelled")

CONFLICT_TYPES = (
    "interventionist_unavailable",
    "student_unavailable",
    "existing_session",
    "group_not_found",
    "no_cycle",
)


@dataclass(frozen=True)
class ScheduleConflict:
    conflict_type: str  # one of CONFLICT_TYPES
    description: str
    student_id: Optional[str] = None
    student_name: Optional[str] = None


@dataclass(frozen=True)
class SuggestedTimeSlot:
    day: str
    start_time: str
    end_time: str
    score: float  # lower is better
    conflicts: Tuple[ScheduleConflict, ...] = ()


@dataclass(frozen=True)
class ScheduledSession:
    date: str
    day: str
    time: str
    end_time: str
    conflicts: Tuple[ScheduleConflict, ...] = ()


@dataclass(frozen=True)
class CycleScheduleResult:
    dates: Tuple[ScheduledSession, ...] = ()
    total_sessions: int = 0
    # Non-instructional dates that fell on a preferred day (informational).
    skipped_dates: Tuple[str, ...] = ()
    conflicts: Tuple[ScheduleConflict, ...] = ()
    valid_dates: Tuple[str, ...] = ()


@dataclass(frozen=True)
class WorkloadReport:
    total_sessions: int
    sessions_by_day: Dict[str, int] = field(default_factory=dict)
    sessions_by_hour: Dict[int, int] = field(default_factory=dict)
    average_per_day: float = 0.0
