"""
Conflict detection for single assignments and whole rosters.

Hard conflicts (overlap, insufficient rest) always block. Soft conflicts
(weekly hours, pattern) block unless a manager explicitly overrides; this
module only reports, it never applies an override.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from datetime import timedelta
from typing import Callable, Dict, Iterable, List, Mapping

from dispatch_api.core.errors import DataSourceError
from dispatch_api.scheduling.enums import ConflictType
from dispatch_api.scheduling.patterns import consecutive_days_before, cycle_length
from dispatch_api.scheduling.rules import DEFAULT_RULES, SchedulingRules
from dispatch_api.scheduling.timeutil import overlaps, week_start
from dispatch_api.scheduling.types import (
    CandidateShift,
    ConflictCheckResult,
    ConflictResolution,
    Employee,
    IndividualShift,
    ScheduleConflict,
    ShiftConflict,
)

logger = logging.getLogger(__name__)

ShiftLoader = Callable[[str], Iterable[IndividualShift]]


def detect_conflicts(
    candidate: CandidateShift,
    employee: Employee,
    load_shifts: ShiftLoader,
    rules: SchedulingRules = DEFAULT_RULES,
) -> ConflictCheckResult:
    """
    Run every conflict check for `candidate` against the employee's stored shifts.

    `load_shifts(employee_id)` is the caller's data source and signals an
    unreachable store with DataSourceError. That failure comes back as
    `error` with no conflicts, so callers can tell "nothing found" apart
    from "could not look". Any other exception propagates.
    """
    try:
        stored = list(load_shifts(candidate.employee_id))
    except DataSourceError as exc:
        logger.warning("shift lookup failed for employee %s: %s", candidate.employee_id, exc)
        return ConflictCheckResult(conflicts=[], error=exc)

    existing = [
        s
        for s in stored
        if s.employee_id == candidate.employee_id
        and s.is_active
        and (candidate.exclude_shift_id is None or s.id != candidate.exclude_shift_id)
    ]

    conflicts: List[ShiftConflict] = []
    for check in (_check_overlap, _check_rest_period, _check_weekly_hours, _check_pattern):
        conflict = check(candidate, employee, existing, rules)
        if conflict is not None:
            conflicts.append(conflict)
    return ConflictCheckResult(conflicts=conflicts)


def _check_overlap(candidate, employee, existing, rules):
    hits = [s for s in existing if overlaps(candidate.start, candidate.end, *s.worked_interval())]
    if not hits:
        return None
    return ShiftConflict(
        type=ConflictType.overlap,
        message=f"Overlaps with {len(hits)} existing shift(s)",
        shift_ids=tuple(s.id for s in hits if s.id),
    )


def _check_rest_period(candidate, employee, existing, rules):
    rest_start = candidate.start - timedelta(hours=rules.min_rest_hours)
    hits = [s for s in existing if rest_start < s.worked_interval()[1] <= candidate.start]
    if not hits:
        return None
    return ShiftConflict(
        type=ConflictType.rest_period,
        message=f"Insufficient rest: less than {rules.min_rest_hours:g} hours since the previous shift",
        shift_ids=tuple(s.id for s in hits if s.id),
    )


def projected_weekly_hours(day, hours, shifts, rules: SchedulingRules = DEFAULT_RULES) -> float:
    """Hours already worked in the week containing `day`, plus `hours`."""
    week = week_start(day, rules.week_starts_on)
    worked = sum(s.worked_hours for s in shifts if s.is_active and week_start(s.date, rules.week_starts_on) == week)
    return worked + hours


def _check_weekly_hours(candidate, employee, existing, rules):
    week = week_start(candidate.start.date(), rules.week_starts_on)
    projected = projected_weekly_hours(candidate.start.date(), candidate.duration_hours, existing, rules)
    if projected <= employee.max_weekly_hours:
        return None
    return ShiftConflict(
        type=ConflictType.hours_exceeded,
        message=(
            f"Projected {projected:g} hours for week of {week.isoformat()} exceeds "
            f"cap of {employee.weekly_hours_cap:g} (+{employee.max_overtime_hours or 0:g} overtime)"
        ),
    )


def _check_pattern(candidate, employee, existing, rules):
    worked_days = {s.date for s in existing}
    day = candidate.start.date()
    run = consecutive_days_before(worked_days, day)
    limit = cycle_length(employee.shift_pattern)
    if run < limit:
        return None
    return ShiftConflict(
        type=ConflictType.pattern_violation,
        message=f"Would be consecutive day {run + 1}; pattern {employee.shift_pattern.value} allows {limit}",
    )


def resolve_conflicts(conflicts: Iterable[ShiftConflict]) -> ConflictResolution:
    conflicts = list(conflicts)
    if any(c.is_hard for c in conflicts):
        return ConflictResolution(
            can_proceed=False,
            requires_override=False,
            message="Cannot proceed due to hard conflicts (overlapping shifts or insufficient rest)",
        )
    if conflicts:
        return ConflictResolution(
            can_proceed=True,
            requires_override=True,
            message="Can proceed only with manager override (exceeds weekly hours or pattern violation)",
        )
    return ConflictResolution(can_proceed=True, requires_override=False, message="No conflicts detected")


def find_schedule_conflicts(
    shifts: Iterable[IndividualShift],
    employees: Mapping[str, Employee],
    rules: SchedulingRules = DEFAULT_RULES,
) -> List[ScheduleConflict]:
    """Scan a roster for overlaps, short rests, weekly overages and over-long runs."""
    by_emp: Dict[str, List[IndividualShift]] = defaultdict(list)
    for s in shifts:
        if s.is_active:
            by_emp[s.employee_id].append(s)

    found: List[ScheduleConflict] = []
    for eid in sorted(by_emp):
        emp_shifts = sorted(by_emp[eid], key=lambda s: s.worked_interval())
        employee = employees.get(eid)

        for prev, cur in zip(emp_shifts, emp_shifts[1:]):
            prev_end = prev.worked_interval()[1]
            cur_start = cur.worked_interval()[0]
            if cur_start < prev_end:
                found.append(
                    ScheduleConflict(ConflictType.overlap, eid, cur.date, f"Shift on {cur.date} overlaps the previous shift")
                )
            elif cur_start - prev_end < timedelta(hours=rules.min_rest_hours):
                found.append(
                    ScheduleConflict(
                        ConflictType.rest_period,
                        eid,
                        cur.date,
                        f"Less than {rules.min_rest_hours:g} hours of rest before the shift on {cur.date}",
                    )
                )

        if employee is None:
            continue

        weekly: Dict = defaultdict(float)
        for s in emp_shifts:
            week = week_start(s.date, rules.week_starts_on)
            before = weekly[week]
            weekly[week] += s.worked_hours
            if before <= employee.max_weekly_hours < weekly[week]:
                found.append(
                    ScheduleConflict(
                        ConflictType.hours_exceeded,
                        eid,
                        s.date,
                        f"Week of {week} reaches {weekly[week]:g} hours (limit {employee.max_weekly_hours:g})",
                    )
                )

        limit = cycle_length(employee.shift_pattern)
        worked_days = {s.date for s in emp_shifts}
        for day in sorted(worked_days):
            if consecutive_days_before(worked_days, day) == limit:
                found.append(
                    ScheduleConflict(
                        ConflictType.pattern_violation,
                        eid,
                        day,
                        f"{day} extends a run beyond {limit} consecutive days ({employee.shift_pattern.value})",
                    )
                )
    return found
