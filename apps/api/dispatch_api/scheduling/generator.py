"""
Greedy draft-schedule generator.

Walks the date range in order. For each applicable staffing requirement it
fills supervisor slots first, then remaining headcount, each time picking
the highest-scoring eligible (employee, shift option) pair. Requirements
that cannot be met are reported as unfilled rather than failing the run.

Dates are processed sequentially: an assignment on day N changes rest and
weekly-hour eligibility on day N+1.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import AbstractSet, Iterable, List, Mapping, Optional, Sequence, Tuple

from dispatch_api.scheduling.conflicts import detect_conflicts, projected_weekly_hours
from dispatch_api.scheduling.patterns import consecutive_days_after, consecutive_days_before, cycle_length
from dispatch_api.scheduling.rules import DEFAULT_RULES, SchedulingRules
from dispatch_api.scheduling.scoring import score_shift
from dispatch_api.scheduling.staffing import applicable_requirements, measure_gap
from dispatch_api.scheduling.time_off import blocks_availability
from dispatch_api.scheduling.timeutil import add_months, daterange, parse_date, window_minutes
from dispatch_api.scheduling.types import (
    CandidateShift,
    Employee,
    GenerationResult,
    Holiday,
    IndividualShift,
    ShiftOption,
    ShiftScore,
    StaffingRequirement,
    TimeOffRequest,
    UnfilledRequirement,
    ValidationResult,
)

logger = logging.getLogger(__name__)


def validate_generation_window(start, end, rules: SchedulingRules = DEFAULT_RULES) -> ValidationResult:
    errors: List[str] = []
    start_d = parse_date(start)
    end_d = parse_date(end)
    if start_d is None:
        errors.append("Invalid start_date: must be a valid YYYY-MM-DD date")
    if end_d is None:
        errors.append("Invalid end_date: must be a valid YYYY-MM-DD date")
    if start_d is not None and end_d is not None:
        if end_d < start_d:
            errors.append("end_date must be on or after start_date")
        elif end_d > add_months(start_d, rules.max_generation_months):
            errors.append(
                f"Schedule period {start_d.isoformat()} to {end_d.isoformat()} exceeds "
                f"the maximum of {rules.max_generation_months} months"
            )
    return ValidationResult.from_errors(errors)


def matching_shift_options(options: Iterable[ShiftOption], req: StaffingRequirement) -> List[ShiftOption]:
    """Options whose time interval covers the whole requirement window."""
    req_start, req_end = window_minutes(req.time_block_start, req.time_block_end)
    matched = []
    for option in options:
        opt_start, opt_end = window_minutes(option.start_time, option.end_time)
        if opt_start <= req_start and opt_end >= req_end:
            matched.append(option)
    return sorted(matched, key=lambda o: (o.start_time, o.id))


def available_employees(
    employees: Iterable[Employee],
    day: date,
    time_off: Iterable[TimeOffRequest],
    pending_blocks: bool = False,
) -> frozenset:
    """Ids of employees without blocking time off on `day`."""
    off = {r.employee_id for r in time_off if r.covers(day) and blocks_availability(r, pending_blocks)}
    return frozenset(e.id for e in employees if e.id not in off)


@dataclass(frozen=True)
class _DraftState:
    """Read-only view of everything assigned so far; each assignment yields a new state."""

    drafted: Tuple[IndividualShift, ...] = ()
    by_employee: Mapping[str, Tuple[IndividualShift, ...]] = field(default_factory=dict)

    def history(self, employee_id: str) -> Tuple[IndividualShift, ...]:
        return self.by_employee.get(employee_id, ())

    def around(self, day: date) -> List[IndividualShift]:
        """Shifts dated the day before or on `day` (overnight shifts spill forward)."""
        prev = day - timedelta(days=1)
        return [s for shifts in self.by_employee.values() for s in shifts if prev <= s.date <= day]

    def with_shift(self, shift: IndividualShift, drafted: bool = True) -> "_DraftState":
        by_employee = dict(self.by_employee)
        by_employee[shift.employee_id] = self.history(shift.employee_id) + (shift,)
        return _DraftState(
            drafted=self.drafted + (shift,) if drafted else self.drafted,
            by_employee=by_employee,
        )


def generate_schedule(
    start,
    end,
    employees: Sequence[Employee],
    shift_options: Sequence[ShiftOption],
    requirements: Sequence[StaffingRequirement],
    time_off: Sequence[TimeOffRequest] = (),
    existing_shifts: Sequence[IndividualShift] = (),
    holidays: Sequence[Holiday] = (),
    weights: Optional[Mapping[str, float]] = None,
    rules: SchedulingRules = DEFAULT_RULES,
) -> GenerationResult:
    """
    Build a draft schedule for [start, end].

    `existing_shifts` are already-stored shifts; they count toward coverage,
    rest and weekly hours but are not returned. Only the newly drafted
    shifts come back in `scheduled_shifts`.
    """
    window = validate_generation_window(start, end, rules)
    if not window.is_valid:
        logger.info("schedule generation rejected: %s", "; ".join(window.errors))
        return GenerationResult(errors=tuple(window.errors), status="rejected")

    start_d = parse_date(start)
    end_d = parse_date(end)
    roster = sorted(employees, key=lambda e: e.id)
    options = sorted(shift_options, key=lambda o: o.id)
    holiday_dates = {h.date for h in holidays}

    state = _DraftState()
    for s in sorted(existing_shifts, key=lambda s: (s.date, s.start_time, s.employee_id)):
        if s.is_active:
            state = state.with_shift(s, drafted=False)

    unfilled: List[UnfilledRequirement] = []
    for day in daterange(start_d, end_d):
        reqs = applicable_requirements(requirements, day, day in holiday_dates)
        reqs.sort(key=lambda r: (r.time_block_start, r.id))
        pool = available_employees(roster, day, time_off, rules.pending_time_off_blocks)
        # one shift per employee per day
        pool = pool - {s.employee_id for s in state.around(day) if s.date == day}

        for req in reqs:
            state, pool, gap = _fill_requirement(
                req, day, roster, options, state, pool, weights, rules, holiday_dates
            )
            if gap is not None:
                unfilled.append(gap)

    logger.info(
        "generated draft schedule %s..%s: %d shifts, %d unfilled requirements",
        start_d,
        end_d,
        len(state.drafted),
        len(unfilled),
    )
    return GenerationResult(scheduled_shifts=state.drafted, unfilled_requirements=tuple(unfilled))


def _fill_requirement(
    req: StaffingRequirement,
    day: date,
    roster: Sequence[Employee],
    all_options: Sequence[ShiftOption],
    state: _DraftState,
    pool: frozenset,
    weights: Optional[Mapping[str, float]],
    rules: SchedulingRules,
    holiday_dates: AbstractSet[date] = frozenset(),
) -> Tuple[_DraftState, frozenset, Optional[UnfilledRequirement]]:
    options = matching_shift_options(all_options, req)
    if not options:
        logger.warning("no shift option covers requirement %s (%s) on %s", req.id, req.label, day)

    gap = measure_gap(req, day, state.around(day))
    need_supervisors = max(0, req.min_supervisors - gap.actual_supervisors)
    need_total = max(0, req.min_total_staff - gap.actual_count)

    for supervisors_only in (True, False):
        remaining = need_supervisors if supervisors_only else need_total
        while remaining > 0 and options:
            pick = _best_candidate(
                day, roster, options, state, pool, supervisors_only, weights, rules, holiday_dates
            )
            if pick is None:
                break
            employee, option, _ = pick
            shift = _make_shift(employee, option, day, state, rules)
            state = state.with_shift(shift)
            pool = pool - {employee.id}
            remaining -= 1
            if supervisors_only:
                need_total = max(0, need_total - 1)

    final = measure_gap(req, day, state.around(day))
    if final.is_met:
        return state, pool, None

    supervisor_shortfall = max(0, final.required_supervisors - final.actual_supervisors)
    logger.warning(
        "unfilled requirement %s on %s: short %d staff, %d supervisors",
        req.id,
        day,
        final.shortfall,
        supervisor_shortfall,
    )
    return state, pool, UnfilledRequirement(
        date=day,
        requirement_id=req.id,
        shortfall=final.shortfall,
        supervisor_shortfall=supervisor_shortfall,
    )


def _best_candidate(
    day: date,
    roster: Sequence[Employee],
    options: Sequence[ShiftOption],
    state: _DraftState,
    pool: frozenset,
    supervisors_only: bool,
    weights: Optional[Mapping[str, float]],
    rules: SchedulingRules,
    holiday_dates: AbstractSet[date] = frozenset(),
) -> Optional[Tuple[Employee, ShiftOption, ShiftScore]]:
    ranked = []
    for employee in roster:
        if employee.id not in pool:
            continue
        if supervisors_only and not employee.is_supervisor:
            continue
        history = state.history(employee.id)
        for option in options:
            if not _is_eligible(employee, option, day, history, rules):
                continue
            scored = score_shift(employee, option, day, history, weights, rules, holiday_dates)
            ranked.append((-scored.score, employee.id, option.id, employee, option, scored))

    if not ranked:
        return None
    ranked.sort(key=lambda r: r[:3])
    _, _, _, employee, option, scored = ranked[0]
    return employee, option, scored


def _is_eligible(
    employee: Employee,
    option: ShiftOption,
    day: date,
    history: Tuple[IndividualShift, ...],
    rules: SchedulingRules,
) -> bool:
    if option.requires_supervisor and not employee.is_supervisor:
        return False
    start, end = option.interval_on(day)
    candidate = CandidateShift(employee_id=employee.id, shift_option_id=option.id, start=start, end=end)
    # Drafts never carry a conflict: soft ones would need a manager override.
    result = detect_conflicts(candidate, employee, lambda _eid: history, rules)
    if result.conflicts:
        return False

    # Stored shifts may sit later in the range than the day being filled.
    active = [s for s in history if s.is_active]
    rest_end = end + timedelta(hours=rules.min_rest_hours)
    if any(end <= s.worked_interval()[0] < rest_end for s in active):
        return False
    worked_days = {s.date for s in active}
    run = consecutive_days_before(worked_days, day) + 1 + consecutive_days_after(worked_days, day)
    return run <= cycle_length(employee.shift_pattern)


def _make_shift(
    employee: Employee,
    option: ShiftOption,
    day: date,
    state: _DraftState,
    rules: SchedulingRules,
) -> IndividualShift:
    projected = projected_weekly_hours(day, option.duration_hours, state.history(employee.id), rules)
    return IndividualShift(
        employee_id=employee.id,
        shift_option_id=option.id,
        date=day,
        start_time=option.start_time,
        end_time=option.end_time,
        is_overtime=projected > employee.weekly_hours_cap,
        is_supervisor=employee.is_supervisor or option.requires_supervisor,
    )
