import logging
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.balancer import auto_schedule_groups_for_cycle
from scheduling.models import (
    CycleSchedulingOptions,
    Group,
    InterventionCycle,
    Interventionist,
    Student,
    StudentConstraint,
    WeeklyTimeBlock,
)
from scheduling.repositories import DataSources, InMemoryStore


ONE_WEEK = InterventionCycle("c1", "Spring", "2026-01-05", "2026-01-09", status="active")
ALL_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")


def _sources(*, student_constraints=()) -> DataSources:
    store = InMemoryStore(
        groups={
            "gA": Group("gA", "Reading A", 2, interventionist_id="i1"),
            "gB": Group("gB", "Reading B", 3, interventionist_id="i1"),
            "gC": Group("gC", "Math C", 4),
        },
        students=[
            Student("s1", "gA", "Ava"),
            Student("s2", "gB", "Liam"),
            Student("s3", "gC", "Zoe"),
        ],
        interventionists={"i1": Interventionist("i1", "Ms. Lee")},
        student_constraints=list(student_constraints),
        cycles={"c1": ONE_WEEK},
    )
    return DataSources.from_store(store)


def _options(**kw) -> CycleSchedulingOptions:
    base = dict(session_duration=30, start_hour=9, end_hour=17, preferred_time="09:00", balance_workload=True)
    base.update(kw)
    return CycleSchedulingOptions(**base)


def test_later_group_moves_to_the_next_free_slot():
    results = auto_schedule_groups_for_cycle(_sources(), ["gA", "gB"], "c1", _options())

    assert list(results) == ["gA", "gB"]
    assert {s.time for s in results["gA"].dates} == {"09:00"}
    assert {s.time for s in results["gB"].dates} == {"09:15"}
    assert all(s.end_time == "09:45" for s in results["gB"].dates)
    assert results["gB"].total_sessions == 5


def test_balancing_is_order_dependent():
    results = auto_schedule_groups_for_cycle(_sources(), ["gB", "gA"], "c1", _options())

    assert list(results) == ["gB", "gA"]
    assert {s.time for s in results["gB"].dates} == {"09:00"}
    assert {s.time for s in results["gA"].dates} == {"09:15"}


def test_without_balancing_both_groups_keep_their_best_time():
    results = auto_schedule_groups_for_cycle(_sources(), ["gA", "gB"], "c1", _options(balance_workload=False))

    assert {s.time for s in results["gA"].dates} == {"09:00"}
    assert {s.time for s in results["gB"].dates} == {"09:00"}


def test_groups_must_be_an_ordered_sequence():
    with pytest.raises(TypeError):
        auto_schedule_groups_for_cycle(_sources(), {"gA", "gB"}, "c1", _options())


def test_accumulator_can_be_passed_in_and_is_filled():
    used = {"i1|2026-01-05": {"09:00", "09:15"}}

    results = auto_schedule_groups_for_cycle(_sources(), ["gA"], "c1", _options(), used_slots=used)

    times = {s.date: s.time for s in results["gA"].dates}
    assert times["2026-01-05"] == "09:30"
    assert times["2026-01-06"] == "09:00"

    assert used["i1|2026-01-05"] == {"09:00", "09:15", "09:30"}
    assert used["i1|2026-01-09"] == {"09:00"}


def test_moved_sessions_get_their_conflicts_rechecked():
    # gB's only student is busy 09:30-09:45 every day
    busy = StudentConstraint("sc1", "s2", "OT", WeeklyTimeBlock("09:30", "09:45", ALL_DAYS), "therapy")
    results = auto_schedule_groups_for_cycle(_sources(student_constraints=[busy]), ["gA", "gB"], "c1", _options())

    moved = results["gB"].dates[0]
    assert moved.time == "09:15"
    assert [c.conflict_type for c in moved.conflicts] == ["student_unavailable"]
    assert moved.conflicts[0].student_id == "s2"


def test_full_day_keeps_the_time_and_warns(caplog):
    used = {"i1|2026-01-05": {"09:00", "09:15", "09:30"}}
    options = _options(end_hour=10)

    with caplog.at_level(logging.WARNING, logger="scheduling.balancer"):
        results = auto_schedule_groups_for_cycle(_sources(), ["gA"], "c1", options, used_slots=used)

    monday = results["gA"].dates[0]
    assert (monday.date, monday.time) == ("2026-01-05", "09:00")
    assert any("no free slot" in r.getMessage() for r in caplog.records)


def test_unknown_groups_and_groups_without_an_interventionist():
    results = auto_schedule_groups_for_cycle(_sources(), ["gA", "missing", "gC"], "c1", _options())

    assert list(results) == ["gA", "missing", "gC"]
    assert results["missing"].conflicts[0].conflict_type == "group_not_found"

    # gC has nobody to balance against, so it keeps its own best time
    assert {s.time for s in results["gC"].dates} == {"09:00"}
