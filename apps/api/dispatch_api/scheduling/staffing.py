from __future__ import annotations

from datetime import date
from typing import Iterable, List, Sequence

from dispatch_api.scheduling.timeutil import day_of_week, overlaps
from dispatch_api.scheduling.types import IndividualShift, StaffingGap, StaffingReport, StaffingRequirement


def requirement_matches_day(req: StaffingRequirement, day: date) -> bool:
    if req.specific_date is not None:
        return req.specific_date == day
    if req.day_of_week is not None:
        return req.day_of_week == day_of_week(day)
    return True


def applicable_requirements(
    requirements: Iterable[StaffingRequirement],
    day: date,
    is_holiday: bool = False,
) -> List[StaffingRequirement]:
    """
    Requirements in force on `day`.

    On a holiday the holiday requirements replace the regular ones; if no
    holiday requirement matches the day, the regular ones still apply.
    """
    matching = [r for r in requirements if requirement_matches_day(r, day)]
    holiday = [r for r in matching if r.is_holiday]
    if is_holiday and holiday:
        return holiday
    return [r for r in matching if not r.is_holiday]


def shifts_in_window(req: StaffingRequirement, day: date, shifts: Iterable[IndividualShift]) -> List[IndividualShift]:
    """Active shifts whose scheduled interval intersects the requirement window on `day`."""
    req_start, req_end = req.interval_on(day)
    return [s for s in shifts if s.is_active and overlaps(req_start, req_end, *s.scheduled_interval())]


def measure_gap(req: StaffingRequirement, day: date, shifts: Sequence[IndividualShift]) -> StaffingGap:
    covering = shifts_in_window(req, day, shifts)
    return StaffingGap(
        requirement_id=req.id,
        required_count=req.min_total_staff,
        actual_count=len(covering),
        required_supervisors=req.min_supervisors,
        actual_supervisors=sum(1 for s in covering if s.is_supervisor),
    )


def validate_staffing(
    requirements: Iterable[StaffingRequirement],
    shifts: Iterable[IndividualShift],
    day: date,
) -> StaffingReport:
    """
    Check headcount and supervisor presence for every requirement on `day`.

    `requirements` should already be resolved for the date (see
    `applicable_requirements`); `shifts` may include the previous day's
    overnight shifts, which count where they cross into a window.
    """
    shifts = list(shifts)
    gaps: List[StaffingGap] = []
    errors: List[str] = []

    for req in requirements:
        gap = measure_gap(req, day, shifts)
        gaps.append(gap)
        if gap.shortfall:
            errors.append(
                f"Insufficient staffing during {req.label} on {day.isoformat()}: "
                f"{gap.actual_count} scheduled, minimum {gap.required_count} required"
            )
        if gap.missing_supervisor:
            errors.append(
                f"Missing supervisor during {req.label} on {day.isoformat()}: "
                f"{gap.actual_supervisors} scheduled, minimum {gap.required_supervisors} required"
            )

    return StaffingReport(gaps=gaps, is_valid=not errors, errors=errors)
