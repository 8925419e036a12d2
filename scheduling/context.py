from __future__ import annotations

import logging
from typing import Optional

from .models import SchedulingContext
from .repositories import DataSources


logger = logging.getLogger(__name__)


def load_scheduling_context(sources: DataSources, group_id: str) -> Optional[SchedulingContext]:
    """Gather everything needed to schedule one group, or None if it does not exist.

    Existing sessions are loaded for the whole system, not just this group:
    an interventionist or a student can be shared across groups.
    """

    group = sources.groups.get_group(group_id)
    if group is None:
        logger.info("Group %s not found", group_id)
        return None

    students = tuple(sources.groups.list_students(group_id))

    interventionist = None
    if group.interventionist_id:
        interventionist = sources.groups.get_interventionist(group.interventionist_id)

    grade_constraints = tuple(sources.groups.list_grade_constraints(group.grade))
    student_ids = [s.student_id for s in students if s.student_id]
    student_constraints = tuple(sources.groups.list_student_constraints(student_ids)) if student_ids else ()

    existing = tuple(sources.sessions.list_sessions())

    return SchedulingContext(
        group=group,
        students=students,
        interventionist=interventionist,
        grade_level_constraints=grade_constraints,
        student_constraints=student_constraints,
        existing_sessions=existing,
    )
