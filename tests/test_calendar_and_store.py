import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling import (
    CycleSchedulingOptions,
    DataSources,
    default_data_path,
    generate_cycle_schedule,
    load_scheduling_context,
    load_store_from_json,
    store_from_dict,
)
from scheduling.calendar import non_instructional_dates, pick_current_cycle
from scheduling.models import CalendarEvent, InterventionCycle, WeeklyTimeBlock


def test_non_instructional_dates_expand_ranges_and_filter_grades():
    events = [
        CalendarEvent("e1", "2026-01-19", "MLK Day"),
        CalendarEvent("e2", "2025-12-22", "Winter break", end_date="2026-01-02"),
        CalendarEvent("e3", "2026-01-30", "Grade 5 trip", affects_grades=(5,)),
        CalendarEvent("e4", "2026-01-19", "Duplicate closure"),
    ]

    everyone = non_instructional_dates(events, "2025-12-30", "2026-01-31")
    assert everyone == ["2025-12-30", "2025-12-31", "2026-01-01", "2026-01-02", "2026-01-19", "2026-01-30"]

    grade_2 = non_instructional_dates(events, "2025-12-30", "2026-01-31", grade=2)
    assert "2026-01-30" not in grade_2
    assert non_instructional_dates(events, "2026-01-20", "2026-01-31", grade=5) == ["2026-01-30"]


def test_pick_current_cycle_prefers_earliest_active_start():
    cycles = [
        InterventionCycle("late", "Late", "2026-01-10", "2026-03-01"),
        InterventionCycle("early", "Early", "2026-01-01", "2026-02-01"),
        InterventionCycle("draft", "Draft", "2025-12-01", "2026-04-01", status="planning"),
    ]

    assert pick_current_cycle(cycles, "2026-01-15").cycle_id == "early"
    assert pick_current_cycle(cycles, "2026-02-15").cycle_id == "late"
    assert pick_current_cycle(cycles, "2026-05-01") is None


def test_load_store_from_json(tmp_path):
    raw = {
        "groups": [{"group_id": "g1", "name": "Reading", "grade": "2", "interventionist_id": "i1"}],
        "students": [{"student_id": "s1", "group_id": "g1", "name": "Ava"}],
        "interventionists": [
            {
                "interventionist_id": "i1",
                "name": "Ms. Lee",
                "availability": [{"start_time": "08:00", "end_time": "12:00", "days": ["Monday"]}],
            }
        ],
        "student_constraints": [
            {
                "constraint_id": "sc1",
                "student_id": "s1",
                "label": "Speech",
                "type": "therapy",
                "schedule": {"start_time": "09:00", "end_time": "09:30", "days": ["monday"]},
            }
        ],
        "calendar": [{"event_id": "e1", "date": "2026-01-19", "title": "MLK", "affects_grades": [1, 2]}],
    }
    path = tmp_path / "school.json"
    path.write_text(json.dumps(raw), encoding="utf-8")

    store = load_store_from_json(str(path))

    assert store.groups["g1"].grade == 2
    assert store.interventionists["i1"].availability == (WeeklyTimeBlock("08:00", "12:00", ("monday",)),)
    assert store.student_constraints[0].constraint_type == "therapy"
    assert store.events[0].affects_grades == (1, 2)
    assert store.events[0].event_type == "holiday"
    assert store.sessions == []

    context = load_scheduling_context(DataSources.from_store(store), "g1")
    assert context is not None
    assert [s.student_id for s in context.students] == ["s1"]
    assert context.interventionist.name == "Ms. Lee"
    assert len(context.student_constraints) == 1


def test_default_data_path_env_override(monkeypatch, tmp_path):
    monkeypatch.delenv("INTERVENTION_SCHEDULER_DATA", raising=False)
    assert default_data_path() == (ROOT / "data" / "sample_school.json").resolve()

    custom = tmp_path / "other.json"
    monkeypatch.setenv("INTERVENTION_SCHEDULER_DATA", str(custom))
    assert default_data_path() == custom.resolve()


def test_sample_school_cycle_skips_closures_per_grade():
    store = load_store_from_json(str(ROOT / "data" / "sample_school.json"))
    sources = DataSources.from_store(store)
    options = CycleSchedulingOptions(session_duration=30, cycle_id="c-winter")

    # Grade 3, flexible 4/week -> mon/tue/thu/fri; the PD day only affects grades 3-4
    wilson = generate_cycle_schedule(sources, "g-3-wilson", options)
    assert list(wilson.skipped_dates) == ["2026-01-19", "2026-02-06", "2026-02-12"]

    # Grade 2 meets tue/thu (friday is disabled)
    fluency = generate_cycle_schedule(sources, "g-2-fluency", options)
    assert list(fluency.skipped_dates) == ["2026-02-12"]
    assert {s.day for s in fluency.dates} == {"tuesday", "thursday"}
    # ELA block 08:00-09:00 keeps grade 2 out of the early slots
    assert all(s.time >= "09:00" for s in fluency.dates if not s.conflicts)


def test_unknown_session_status_is_rejected():
    raw = {"sessions": [{"session_id": "x1", "group_id": "g1", "date": "2026-01-05", "status": "postponed"}]}
    with pytest.raises(ValueError, match="x1"):
        store_from_dict(raw)
