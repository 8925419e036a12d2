"""Scheduler settings + data location.

The weights below are the fixed preference policy. They are kept together in
one frozen dataclass; callers pass a different instance to experiment.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path


DEFAULT_DATA_FILENAME = "sample_school.json"


@dataclass(frozen=True)
class SchedulingSettings:
    # Canonical scheduling day used when inverting availability into blocked time.
    day_start: str = "07:00"
    day_end: str = "17:00"

    # Candidate slots start every `slot_interval` minutes.
    slot_interval: int = 15

    # Score adjustments (lower score is better)
    conflict_penalty: float = 10.0
    preferred_time_bonus: float = 5.0
    consistency_bonus: float = 3.0
    popularity_weight: float = 2.0

    # Result sizes
    max_suggestions: int = 20
    max_optimal_suggestions: int = 30

    # suggest_schedule falls back to slots scoring below this when there are
    # not enough conflict-free ones.
    acceptable_score_threshold: float = 20.0

    # Booked sessions only carry a start time; the weekly view assumes this length.
    assumed_session_minutes: int = 30


def default_data_path() -> Path:
    """Resolve the JSON snapshot used by the demo runner.

    Uses `INTERVENTION_SCHEDULER_DATA` env var if set, else `data/sample_school.json`
    at the project root.
    """

    override = os.getenv("INTERVENTION_SCHEDULER_DATA")
    if override:
        return Path(override).expanduser().resolve()

    return (Path(__file__).resolve().parents[1] / "data" / DEFAULT_DATA_FILENAME).resolve()
