from __future__ import annotations

from datetime import date, timedelta
from typing import AbstractSet, List, Mapping, Optional, Sequence

from dispatch_api.scheduling.enums import ShiftPattern
from dispatch_api.scheduling.rules import LEGAL_SHIFT_DURATIONS
from dispatch_api.scheduling.timeutil import is_valid_date, is_valid_time, to_minutes
from dispatch_api.scheduling.types import ShiftAssignment, ValidationResult

# One cycle of consecutive working days per pattern, hours per position.
PATTERN_RULES = {
    ShiftPattern.four_by_ten: {"shift_count": 4, "durations": [10, 10, 10, 10]},
    ShiftPattern.three_by_twelve_plus_four: {"shift_count": 4, "durations": [12, 12, 12, 4]},
}


def shift_duration_hours(start, end) -> float:
    """Hours from start to end; an end earlier than the start crosses midnight."""
    minutes = to_minutes(end) - to_minutes(start)
    if minutes < 0:
        minutes += 24 * 60
    return minutes / 60.0


def coerce_pattern(pattern) -> Optional[ShiftPattern]:
    try:
        return ShiftPattern(pattern)
    except ValueError:
        return None


def cycle_length(pattern: ShiftPattern) -> int:
    return PATTERN_RULES[pattern]["shift_count"]


def expected_duration(pattern: ShiftPattern, position: int) -> int:
    """Hours the pattern expects for the `position`-th consecutive shift (0-based, cycling)."""
    durations = PATTERN_RULES[pattern]["durations"]
    return durations[position % len(durations)]


def consecutive_days_before(worked_days: AbstractSet[date], day: date) -> int:
    """Length of the unbroken run of worked days ending the day before `day`."""
    count = 0
    cur = day - timedelta(days=1)
    while cur in worked_days:
        count += 1
        cur -= timedelta(days=1)
    return count


def consecutive_days_after(worked_days: AbstractSet[date], day: date) -> int:
    count = 0
    cur = day + timedelta(days=1)
    while cur in worked_days:
        count += 1
        cur += timedelta(days=1)
    return count


def validate_shift_pattern(assignments: Sequence[ShiftAssignment], pattern) -> ValidationResult:
    """
    Check one employee's assignments against a named pattern.

    Count, per-position duration and day contiguity are all checked; every
    violation is reported rather than stopping at the first.
    """
    errors: List[str] = []
    rule_pattern = coerce_pattern(pattern)
    if rule_pattern is None:
        return ValidationResult.from_errors([f"Unknown shift pattern: {pattern}"])

    ordered = sorted(assignments, key=lambda a: a.date)
    required = cycle_length(rule_pattern)

    if len(ordered) != required:
        errors.append(f"Pattern {rule_pattern.value} requires {required} shifts, but found {len(ordered)}")

    for position, a in enumerate(ordered):
        hours = shift_duration_hours(a.start_time, a.end_time)
        expected = expected_duration(rule_pattern, position)
        if hours != expected:
            errors.append(
                f"Shift on {a.date.isoformat()} is {hours:g} hours; "
                f"pattern {rule_pattern.value} requires {expected} hours"
            )

    errors.extend(check_consecutive_days(ordered).errors)
    return ValidationResult.from_errors(errors)


def check_consecutive_days(assignments: Sequence[ShiftAssignment]) -> ValidationResult:
    if len(assignments) <= 1:
        return ValidationResult(is_valid=True)

    errors: List[str] = []
    ordered = sorted(assignments, key=lambda a: a.date)
    for prev, cur in zip(ordered, ordered[1:]):
        if (cur.date - prev.date).days != 1:
            errors.append(
                f"Shifts must be on consecutive days: {prev.date.isoformat()} is followed by {cur.date.isoformat()}"
            )
    return ValidationResult.from_errors(errors)


def validate_shift_assignment(raw: Mapping) -> ValidationResult:
    """Format and duration checks for a single raw assignment payload."""
    errors: List[str] = []

    if not is_valid_date(raw.get("date")):
        errors.append("Invalid date format: must be YYYY-MM-DD")

    start_ok = is_valid_time(raw.get("start_time"))
    end_ok = is_valid_time(raw.get("end_time"))
    if not start_ok:
        errors.append("Invalid time format: start_time must be in HH:mm format")
    if not end_ok:
        errors.append("Invalid time format: end_time must be in HH:mm format")

    if start_ok and end_ok:
        hours = shift_duration_hours(raw["start_time"], raw["end_time"])
        if hours not in LEGAL_SHIFT_DURATIONS:
            errors.append("Invalid shift duration: must be either 4, 10, or 12 hours")

    return ValidationResult.from_errors(errors)


def validate_shift_option(option) -> ValidationResult:
    hours = option.duration_hours
    if hours not in LEGAL_SHIFT_DURATIONS:
        return ValidationResult.from_errors(
            [f"Shift option {option.id} is {hours:g} hours; legal durations are 4, 10, or 12"]
        )
    return ValidationResult(is_valid=True)
