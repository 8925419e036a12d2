from __future__ import annotations

from typing import Dict, Iterable, List

from .models import GradeLevelConstraint, Student, StudentConstraint, TimeBlock


def get_student_blocked_times(
    students: Iterable[Student],
    grade: int,
    grade_constraints: Iterable[GradeLevelConstraint],
    student_constraints: Iterable[StudentConstraint],
    day: str,
) -> Dict[str, List[TimeBlock]]:
    """Blocked windows per student for one weekday.

    Each student gets the grade-level blocks for the group's grade plus their own
    blocks. Overlapping or duplicate blocks are kept as-is; conflict checks only
    ask whether any block overlaps.
    """

    grade_blocks = [
        c.schedule.as_block()
        for c in grade_constraints
        if int(c.grade) == int(grade) and day in c.schedule.days
    ]

    individual = list(student_constraints)

    out: Dict[str, List[TimeBlock]] = {}
    for student in students:
        blocked = list(grade_blocks)
        for c in individual:
            if c.student_id == student.student_id and day in c.schedule.days:
                blocked.append(c.schedule.as_block())
        out[student.student_id] = blocked
    return out
