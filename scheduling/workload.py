from __future__ import annotations

import logging
import math
from datetime import date
from typing import Dict

from utils.validators import require, validate_date_range

from .models import WorkloadReport
from .repositories import DataSources
from .time_utils import WEEKDAYS, weekday_from_date


logger = logging.getLogger(__name__)


def approximate_school_days(start_date: str, end_date: str) -> int:
    """Weekday estimate for a range: ceil(calendar-day difference * 5/7).

    Rough on purpose; it ignores holidays and where the weekends fall.
    """

    days = (date.fromisoformat(end_date) - date.fromisoformat(start_date)).days
    return math.ceil(days * 5 / 7)


def get_interventionist_workload(
    sources: DataSources,
    interventionist_id: str,
    start_date: str,
    end_date: str,
) -> WorkloadReport:
    """Session counts for one interventionist over [start_date, end_date].

    Counts the timed, non-cancelled sessions of every group the person leads.
    """

    require(validate_date_range(start_date, end_date))

    group_ids = {g.group_id for g in sources.groups.list_groups_for_interventionist(interventionist_id)}
    sessions = [
        s
        for s in sources.sessions.list_sessions(start_date, end_date)
        if s.group_id in group_ids and s.status != "cancelled" and s.time
    ]

    by_day: Dict[str, int] = {d: 0 for d in WEEKDAYS}
    by_hour: Dict[int, int] = {}
    for s in sessions:
        day = weekday_from_date(s.date)
        if day is not None:
            by_day[day] += 1
        hour = int(s.time.split(":")[0])
        by_hour[hour] = by_hour.get(hour, 0) + 1

    school_days = approximate_school_days(start_date, end_date)
    average = len(sessions) / school_days if school_days > 0 else 0.0

    logger.debug(
        "Workload %s %s..%s: %d sessions across %d groups",
        interventionist_id,
        start_date,
        end_date,
        len(sessions),
        len(group_ids),
    )

    return WorkloadReport(
        total_sessions=len(sessions),
        sessions_by_day=by_day,
        sessions_by_hour=dict(sorted(by_hour.items())),
        average_per_day=average,
    )
