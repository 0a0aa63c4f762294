from __future__ import annotations

from typing import Iterable, List, Mapping, TypeVar

from dispatch_api.scheduling.enums import TimeOffStatus, TimeOffType
from dispatch_api.scheduling.timeutil import parse_date
from dispatch_api.scheduling.types import TimeOffRequest, ValidationResult

_VALID_TYPES = {t.value for t in TimeOffType}
_VALID_STATUSES = {s.value for s in TimeOffStatus}

A = TypeVar("A")


def validate_time_off_request(raw: Mapping) -> ValidationResult:
    """
    Validate an incoming time-off payload.

    Expects `start_date`/`end_date` as YYYY-MM-DD plus `type` and `status`.
    Every problem found is reported; nothing is raised for bad input.
    """
    errors: List[str] = []

    start = parse_date(raw.get("start_date"))
    end = parse_date(raw.get("end_date"))
    if start is None:
        errors.append("Invalid date format: start_date must be YYYY-MM-DD")
    if end is None:
        errors.append("Invalid date format: end_date must be YYYY-MM-DD")
    if start is not None and end is not None and end < start:
        errors.append("End date must be on or after start date")

    if _enum_value(raw.get("type")) not in _VALID_TYPES:
        errors.append("Invalid time off type")
    if _enum_value(raw.get("status")) not in _VALID_STATUSES:
        errors.append("Invalid status")

    return ValidationResult.from_errors(errors)


def check_time_off_conflicts(request: TimeOffRequest, assignments: Iterable[A]) -> List[A]:
    """Assignments for the requesting employee whose date falls inside the request (inclusive)."""
    return [
        a
        for a in assignments
        if a.employee_id == request.employee_id and request.start_date <= a.date <= request.end_date
    ]


def blocks_availability(request: TimeOffRequest, pending_blocks: bool = False) -> bool:
    if request.status == TimeOffStatus.approved:
        return True
    return pending_blocks and request.status == TimeOffStatus.pending


def _enum_value(value):
    value = getattr(value, "value", value)
    return value if isinstance(value, str) else None
