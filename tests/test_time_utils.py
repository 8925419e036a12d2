import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from scheduling.models import TimeBlock
from scheduling.time_utils import (
    WEEKDAYS,
    add_minutes,
    block_duration,
    do_times_overlap,
    format_time_display,
    generate_time_slots,
    minutes_to_time,
    normalize_days,
    score_time_slot,
    time_to_minutes,
    weekday_from_date,
)


def _b(start: str, end: str) -> TimeBlock:
    return TimeBlock(start_time=start, end_time=end)


def test_overlap_is_symmetric_and_back_to_back_blocks_do_not_overlap():
    a = _b("09:00", "09:30")
    b = _b("09:15", "09:45")
    c = _b("09:30", "10:00")

    assert do_times_overlap(a, b) is True
    assert do_times_overlap(b, a) is True

    # Touching ends are free
    assert do_times_overlap(a, c) is False
    assert do_times_overlap(c, a) is False

    # Containment counts as overlap
    assert do_times_overlap(_b("08:00", "12:00"), _b("10:00", "10:15")) is True


def test_minutes_round_trip_and_day_bounds():
    for m in [0, 59, 600, 1439]:
        assert time_to_minutes(minutes_to_time(m)) == m

    assert minutes_to_time(545) == "09:05"

    with pytest.raises(ValueError):
        minutes_to_time(1440)
    with pytest.raises(ValueError):
        minutes_to_time(-1)


def test_generate_time_slots_respects_end_boundary():
    slots = generate_time_slots(30, 7, 17)

    assert slots[0] == _b("07:00", "07:30")
    assert slots[-1] == _b("16:30", "17:00")
    assert all(s.start_time != "16:45" for s in slots)
    assert len(slots) == 39

    starts = [time_to_minutes(s.start_time) for s in slots]
    assert starts == sorted(starts)


def test_generate_time_slots_rejects_non_positive_duration():
    with pytest.raises(ValueError):
        generate_time_slots(0)

    # Window too small for the duration -> nothing fits
    assert generate_time_slots(90, 9, 10) == []

    # "24:00" cannot be represented, so the window stops at 23
    with pytest.raises(ValueError, match="hour window"):
        generate_time_slots(30, 22, 24)
    assert generate_time_slots(30, 22, 23)[-1] == _b("22:30", "23:00")


def test_score_time_slot_tiers():
    expected = {
        "07:45": 3,
        "08:00": 0,
        "10:45": 0,
        "11:00": 1,
        "13:45": 1,
        "14:00": 2,
        "14:45": 2,
        "15:00": 3,
    }
    for start, score in expected.items():
        assert score_time_slot(_b(start, "23:00")) == score, start


def test_weekday_from_date_skips_weekends():
    assert weekday_from_date("2026-01-05") == "monday"
    assert weekday_from_date("2026-01-09") == "friday"
    assert weekday_from_date("2026-01-10") is None
    assert weekday_from_date("2026-01-11") is None


def test_normalize_days():
    assert normalize_days(None) == WEEKDAYS
    assert normalize_days(["Friday", " monday"]) == ("friday", "monday")

    with pytest.raises(ValueError):
        normalize_days(["saturday"])


def test_format_time_display():
    assert format_time_display("13:05") == "1:05 PM"
    assert format_time_display("00:15") == "12:15 AM"
    assert format_time_display("12:00") == "12:00 PM"
    assert format_time_display("09:30") == "9:30 AM"


def test_add_minutes_and_block_duration():
    assert add_minutes("09:45", 30) == "10:15"
    assert block_duration(_b("09:00", "10:15")) == 75

    with pytest.raises(ValueError):
        add_minutes("23:45", 30)
