"""Collaborator interfaces consumed by the scheduling engine.

The engine reads from three sources:
- a group repository (groups, rosters, interventionists, blackout constraints)
- a session repository (booked sessions)
- a calendar service (instructional cycles, non-instructional dates)

Any implementation works as long as it satisfies the Protocols below and raises
`RepositoryError` for lookup failures. `InMemoryStore` implements all three and
is what the tests and the demo runner use; `load_store_from_json` builds one
from a JSON snapshot.
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Protocol, Sequence

from utils.validators import require, validate_choice

from .calendar import non_instructional_dates, pick_current_cycle
from .models import (
    CalendarEvent,
    GradeLevelConstraint,
    Group,
    InterventionCycle,
    Interventionist,
    Session,
    SESSION_STATUSES,
    Student,
    StudentConstraint,
    WeeklyTimeBlock,
)


class RepositoryError(RuntimeError):
    """A collaborator could not answer (network/storage failure)."""


class GroupRepository(Protocol):
    def get_group(self, group_id: str) -> Optional[Group]:  # pragma: no cover
        ...

    def list_students(self, group_id: str) -> List[Student]:  # pragma: no cover
        ...

    def get_interventionist(self, interventionist_id: str) -> Optional[Interventionist]:  # pragma: no cover
        ...

    def list_grade_constraints(self, grade: int) -> List[GradeLevelConstraint]:  # pragma: no cover
        ...

    def list_student_constraints(self, student_ids: Sequence[str]) -> List[StudentConstraint]:  # pragma: no cover
        ...

    def list_groups_for_interventionist(self, interventionist_id: str) -> List[Group]:  # pragma: no cover
        ...


class SessionRepository(Protocol):
    def list_sessions(
        self,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> List[Session]:  # pragma: no cover
        """All sessions, or those with start_date <= date <= end_date."""


class CalendarService(Protocol):
    def get_cycle(self, cycle_id: str) -> Optional[InterventionCycle]:  # pragma: no cover
        ...

    def get_current_cycle(self, on_date: str) -> Optional[InterventionCycle]:  # pragma: no cover
        ...

    def get_non_instructional_dates(
        self,
        start_date: str,
        end_date: str,
        grade: Optional[int] = None,
    ) -> List[str]:  # pragma: no cover
        ...


@dataclass(frozen=True)
class DataSources:
    groups: GroupRepository
    sessions: SessionRepository
    calendar: CalendarService

    @classmethod
    def from_store(cls, store: Any) -> "DataSources":
        """Use one object that implements all three interfaces."""

        return cls(groups=store, sessions=store, calendar=store)


# ----------------------------
# In-memory implementation
# ----------------------------


@dataclass
class InMemoryStore:
    groups: Dict[str, Group] = field(default_factory=dict)
    students: List[Student] = field(default_factory=list)
    interventionists: Dict[str, Interventionist] = field(default_factory=dict)
    grade_constraints: List[GradeLevelConstraint] = field(default_factory=list)
    student_constraints: List[StudentConstraint] = field(default_factory=list)
    sessions: List[Session] = field(default_factory=list)
    cycles: Dict[str, InterventionCycle] = field(default_factory=dict)
    events: List[CalendarEvent] = field(default_factory=list)

    # group repository

    def get_group(self, group_id: str) -> Optional[Group]:
        return self.groups.get(group_id)

    def list_students(self, group_id: str) -> List[Student]:
        return [s for s in self.students if s.group_id == group_id]

    def get_interventionist(self, interventionist_id: str) -> Optional[Interventionist]:
        return self.interventionists.get(interventionist_id)

    def list_grade_constraints(self, grade: int) -> List[GradeLevelConstraint]:
        return [c for c in self.grade_constraints if c.grade == int(grade)]

    def list_student_constraints(self, student_ids: Sequence[str]) -> List[StudentConstraint]:
        wanted = set(student_ids)
        return [c for c in self.student_constraints if c.student_id in wanted]

    def list_groups_for_interventionist(self, interventionist_id: str) -> List[Group]:
        return [g for g in self.groups.values() if g.interventionist_id == interventionist_id]

    # session repository

    def list_sessions(self, start_date: Optional[str] = None, end_date: Optional[str] = None) -> List[Session]:
        out = []
        for s in self.sessions:
            if start_date is not None and s.date < start_date:
                continue
            if end_date is not None and s.date > end_date:
                continue
            out.append(s)
        return out

    # calendar service

    def get_cycle(self, cycle_id: str) -> Optional[InterventionCycle]:
        return self.cycles.get(cycle_id)

    def get_current_cycle(self, on_date: str) -> Optional[InterventionCycle]:
        return pick_current_cycle(self.cycles.values(), on_date)

    def get_non_instructional_dates(self, start_date: str, end_date: str, grade: Optional[int] = None) -> List[str]:
        return non_instructional_dates(self.events, start_date, end_date, grade)


# -------------------------------------------------
# Loading
# -------------------------------------------------


def _weekly_block(raw: Dict[str, Any]) -> WeeklyTimeBlock:
    return WeeklyTimeBlock(
        start_time=raw["start_time"],
        end_time=raw["end_time"],
        days=tuple(str(d).lower() for d in raw.get("days", [])),
    )


def _grades(raw: Optional[Iterable[Any]]):
    return tuple(int(g) for g in raw) if raw is not None else None


def _session(raw: Dict[str, Any]) -> Session:
    status = raw.get("status", "planned")
    require(validate_choice(status, f"Session {raw.get('session_id')} status", SESSION_STATUSES))
    return Session(
        session_id=raw["session_id"],
        group_id=raw["group_id"],
        date=raw["date"],
        time=raw.get("time"),
        status=status,
    )


def store_from_dict(raw: Dict[str, Any]) -> InMemoryStore:
    """Build an `InMemoryStore` from plain dicts (as read from JSON)."""

    return InMemoryStore(
        groups={
            g["group_id"]: Group(
                group_id=g["group_id"],
                name=g.get("name", g["group_id"]),
                grade=int(g["grade"]),
                interventionist_id=g.get("interventionist_id"),
                schedule=g.get("schedule"),
            )
            for g in raw.get("groups", [])
        },
        students=[
            Student(student_id=s["student_id"], group_id=s["group_id"], name=s["name"])
            for s in raw.get("students", [])
        ],
        interventionists={
            i["interventionist_id"]: Interventionist(
                interventionist_id=i["interventionist_id"],
                name=i["name"],
                availability=tuple(_weekly_block(b) for b in i.get("availability", [])),
            )
            for i in raw.get("interventionists", [])
        },
        grade_constraints=[
            GradeLevelConstraint(
                constraint_id=c["constraint_id"],
                grade=int(c["grade"]),
                label=c.get("label", ""),
                constraint_type=c.get("type", "other"),
                schedule=_weekly_block(c["schedule"]),
            )
            for c in raw.get("grade_constraints", [])
        ],
        student_constraints=[
            StudentConstraint(
                constraint_id=c["constraint_id"],
                student_id=c["student_id"],
                label=c.get("label", ""),
                constraint_type=c.get("type", "other"),
                schedule=_weekly_block(c["schedule"]),
            )
            for c in raw.get("student_constraints", [])
        ],
        sessions=[_session(s) for s in raw.get("sessions", [])],
        cycles={
            c["cycle_id"]: InterventionCycle(
                cycle_id=c["cycle_id"],
                name=c.get("name", c["cycle_id"]),
                start_date=c["start_date"],
                end_date=c["end_date"],
                status=c.get("status", "active"),
                grade_band=c.get("grade_band"),
            )
            for c in raw.get("cycles", [])
        },
        events=[
            CalendarEvent(
                event_id=e["event_id"],
                date=e["date"],
                title=e.get("title", ""),
                event_type=e.get("type", "holiday"),
                end_date=e.get("end_date"),
                affects_grades=_grades(e.get("affects_grades")),
            )
            for e in raw.get("calendar", [])
        ],
    )


def load_store_from_json(path: str) -> InMemoryStore:
    """Load an `InMemoryStore` from a JSON file."""

    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return store_from_dict(raw)
