"""Validation helpers for scheduling option inputs.

Each helper returns (ok, message) so callers can either show the message or
turn it into an exception (see `require`).
"""

from __future__ import annotations

import re
from typing import Iterable, Optional, Tuple


_TIME_RE = re.compile(r"^([01]\d|2[0-3]):[0-5]\d$")
_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

INSTRUCTIONAL_DAYS = ("monday", "tuesday", "wednesday", "thursday", "friday")

# Slots end on the hour; 24:00 is not a valid "HH:MM".
LAST_HOUR = 23


def require(result: Tuple[bool, str]) -> None:
    """Raise ValueError with the validator's message when it failed."""

    ok, msg = result
    if not ok:
        raise ValueError(msg)


def validate_positive_int(value: int, field: str, min_value: int = 1, max_value: int | None = None) -> Tuple[bool, str]:
    if value is None:
        return False, f"{field} is required"
    if isinstance(value, bool) or not isinstance(value, int):
        return False, f"{field} must be a whole number, got {value!r}"
    if value < min_value:
        return False, f"{field} must be >= {min_value}"
    if max_value is not None and value > max_value:
        return False, f"{field} must be <= {max_value}"
    return True, ""


def validate_time(value: Optional[str], field: str, *, allow_empty: bool = False) -> Tuple[bool, str]:
    if value is None or not str(value).strip():
        if allow_empty:
            return True, ""
        return False, f"{field} is required"
    if not _TIME_RE.match(str(value).strip()):
        return False, f"{field} must be HH:MM (24-hour), got {value!r}"
    return True, ""


def validate_date(value: Optional[str], field: str, *, allow_empty: bool = False) -> Tuple[bool, str]:
    if value is None or not str(value).strip():
        if allow_empty:
            return True, ""
        return False, f"{field} is required"
    if not _DATE_RE.match(str(value).strip()):
        return False, f"{field} must be YYYY-MM-DD, got {value!r}"
    return True, ""


def validate_date_range(start_date: str, end_date: str) -> Tuple[bool, str]:
    for value, field in [(start_date, "Start date"), (end_date, "End date")]:
        ok, msg = validate_date(value, field)
        if not ok:
            return ok, msg
    if str(start_date) > str(end_date):
        return False, "Start date must be on or before end date"
    return True, ""


def validate_hour_window(start_hour: int, end_hour: int) -> Tuple[bool, str]:
    for value, field in [(start_hour, "Start hour"), (end_hour, "End hour")]:
        ok, msg = validate_positive_int(value, field, min_value=0, max_value=LAST_HOUR)
        if not ok:
            return ok, msg
    if int(start_hour) >= int(end_hour):
        return False, "Start hour must be before end hour"
    return True, ""


def validate_weekdays(values: Optional[Iterable[str]], field: str) -> Tuple[bool, str]:
    if values is None:
        return True, ""
    for v in values:
        if str(v).strip().lower() not in INSTRUCTIONAL_DAYS:
            return False, f"{field} must only contain: {', '.join(INSTRUCTIONAL_DAYS)} (got {v!r})"
    return True, ""


def validate_choice(value: str, field: str, allowed: Iterable[str]) -> Tuple[bool, str]:
    if not value or not str(value).strip():
        return False, f"{field} cannot be empty"
    allowed_set = {str(x) for x in allowed}
    if str(value) not in allowed_set:
        return False, f"{field} must be one of: {', '.join(sorted(allowed_set))}"
    return True, ""
