import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.day_slots import (
    expand_groups_to_day_slots,
    get_unscheduled_day_slots,
    is_day_slot_scheduled,
    unscheduled_day_slots_for_interventionist,
    week_dates,
)
from scheduling.models import Group, Session
from scheduling.repositories import DataSources, load_store_from_json


BASIC = Group("g1", "Reading A", 2, schedule={"days": ["friday", "monday"], "time": "08:30", "duration": 40})
DAY_TIMES = Group(
    "g2",
    "Fluency",
    3,
    schedule={
        "day_times": [
            {"day": "tuesday", "time": "09:00", "enabled": True},
            {"day": "thursday", "time": "", "enabled": True},
            {"day": "friday", "time": "10:00", "enabled": False},
        ],
    },
)
UNSCHEDULED = Group("g3", "New group", 1)

WEEK = week_dates("2026-01-07")


def test_expand_groups_to_day_slots():
    slots = expand_groups_to_day_slots([BASIC, DAY_TIMES, UNSCHEDULED])

    assert [(s.group.group_id, s.day, s.time, s.duration) for s in slots] == [
        ("g1", "monday", "08:30", 40),
        ("g1", "friday", "08:30", 40),
        ("g2", "tuesday", "09:00", 30),
        ("g2", "thursday", None, 30),
    ]


def test_week_dates_runs_monday_to_friday():
    assert WEEK == {
        "monday": "2026-01-05",
        "tuesday": "2026-01-06",
        "wednesday": "2026-01-07",
        "thursday": "2026-01-08",
        "friday": "2026-01-09",
    }
    # A weekend date belongs to the week that just ended
    assert week_dates("2026-01-11")["monday"] == "2026-01-05"

    with pytest.raises(ValueError):
        week_dates("01/07/2026")


def test_cancelled_and_other_group_sessions_do_not_count():
    monday = expand_groups_to_day_slots([BASIC])[0]

    assert is_day_slot_scheduled(monday, [Session("x1", "g1", "2026-01-05", "08:30")], WEEK) is True
    assert is_day_slot_scheduled(monday, [Session("x1", "g1", "2026-01-05", status="cancelled")], WEEK) is False
    assert is_day_slot_scheduled(monday, [Session("x1", "g9", "2026-01-05", "08:30")], WEEK) is False
    assert is_day_slot_scheduled(monday, [Session("x1", "g1", "2026-01-12", "08:30")], WEEK) is False

    # No date known for the day
    assert is_day_slot_scheduled(monday, [Session("x1", "g1", "2026-01-05")], {}) is False


def test_get_unscheduled_day_slots():
    sessions = [
        Session("x1", "g1", "2026-01-05", "08:30"),
        Session("x2", "g2", "2026-01-08", "09:00", status="completed"),
    ]

    open_slots = get_unscheduled_day_slots([BASIC, DAY_TIMES], sessions, WEEK)
    assert [(s.group.group_id, s.day) for s in open_slots] == [("g1", "friday"), ("g2", "tuesday")]


def test_sample_school_unscheduled_day_slots():
    sources = DataSources.from_store(load_store_from_json(str(ROOT / "data" / "sample_school.json")))

    # Math already meets tue/thu that week; Wilson's four days are all open
    okafor = unscheduled_day_slots_for_interventionist(sources, "i-okafor", "2026-01-07")
    assert [(s.group.group_id, s.day, s.time, s.duration) for s in okafor] == [
        ("g-3-wilson", "monday", "09:30", 45),
        ("g-3-wilson", "tuesday", "09:30", 45),
        ("g-3-wilson", "thursday", "09:30", 45),
        ("g-3-wilson", "friday", "09:30", 45),
    ]

    # The cancelled phonics session leaves wednesday open
    rivera = unscheduled_day_slots_for_interventionist(sources, "i-rivera", "2026-01-07")
    assert [(s.group.group_id, s.day) for s in rivera] == [
        ("g-k-phonics", "monday"),
        ("g-k-phonics", "wednesday"),
        ("g-k-phonics", "friday"),
        ("g-2-fluency", "tuesday"),
        ("g-2-fluency", "thursday"),
    ]
