"""
Desirability scoring for (employee, shift option, date) triples.

Each factor is normalized to [0, 1]; the score is their weighted sum.
Pure: same inputs always give the same score.
"""

from __future__ import annotations

from datetime import date, datetime, time
from typing import AbstractSet, Dict, Iterable, Mapping, Optional

from dispatch_api.scheduling.patterns import consecutive_days_before, cycle_length, expected_duration
from dispatch_api.scheduling.rules import DEFAULT_RULES, SchedulingRules
from dispatch_api.scheduling.timeutil import hours_between, week_start
from dispatch_api.scheduling.types import Employee, IndividualShift, ShiftOption, ShiftScore

DEFAULT_WEIGHTS: Dict[str, float] = {
    "preferred_category": 0.3,
    "time_since_last_shift": 0.25,
    "weekly_hours_balance": 0.2,
    "pattern_compliance": 0.15,
    "fairness": 0.1,
}

# Ceilings for the near-cap and over-cap bands.
_NEAR_CAP_CEILING = 0.45
_OVER_CAP_CEILING = 0.1

# Night shifts start before 06:00 or after 22:00. Each night or holiday
# shift already held costs 0.1, down to a floor of 0.5.
_NIGHT_STARTS_BEFORE = 6
_NIGHT_STARTS_AFTER = 22
_FAIRNESS_STEP = 0.1
_FAIRNESS_FLOOR = 0.5


def score_shift(
    employee: Employee,
    option: ShiftOption,
    day: date,
    history: Iterable[IndividualShift] = (),
    weights: Optional[Mapping[str, float]] = None,
    rules: SchedulingRules = DEFAULT_RULES,
    holidays: AbstractSet[date] = frozenset(),
) -> ShiftScore:
    """
    Score assigning `employee` to `option` on `day`.

    `history` is the employee's other shifts (stored plus already drafted);
    shifts for other employees and cancelled shifts are ignored. `weights`
    replaces DEFAULT_WEIGHTS entry by entry. `holidays` are the holiday
    dates known to the caller, used by the fairness factor.
    """
    w = dict(DEFAULT_WEIGHTS)
    if weights:
        w.update(weights)

    own = [s for s in history if s.employee_id == employee.id and s.is_active]
    start, _ = option.interval_on(day)

    factors = {
        "preferred_category": preferred_category_score(employee, option),
        "time_since_last_shift": time_since_last_shift_score(start, own, rules),
        "weekly_hours_balance": weekly_hours_balance_score(employee, option, day, own, rules),
        "pattern_compliance": pattern_compliance_score(employee, option, day, own),
        "fairness": fairness_score(option, day, own, holidays),
    }
    score = sum(w.get(name, 0.0) * value for name, value in factors.items())
    return ShiftScore(employee_id=employee.id, shift_option_id=option.id, score=round(score, 6), factors=factors)


def preferred_category_score(employee: Employee, option: ShiftOption) -> float:
    if employee.preferred_shift_category is None:
        return 0.0
    return 1.0 if employee.preferred_shift_category == option.category else 0.0


def time_since_last_shift_score(start: datetime, own: Iterable[IndividualShift], rules: SchedulingRules) -> float:
    ends = [s.worked_interval()[1] for s in own]
    prior = [e for e in ends if e <= start]
    if not prior:
        return 1.0
    gap = hours_between(max(prior), start)
    if gap < rules.min_rest_hours:
        return 0.0
    if gap >= rules.fully_rested_hours:
        return 1.0
    return (gap - rules.min_rest_hours) / (rules.fully_rested_hours - rules.min_rest_hours)


def weekly_hours_balance_score(
    employee: Employee,
    option: ShiftOption,
    day: date,
    own: Iterable[IndividualShift],
    rules: SchedulingRules,
) -> float:
    week = week_start(day, rules.week_starts_on)
    worked = sum(s.worked_hours for s in own if week_start(s.date, rules.week_starts_on) == week)
    projected = worked + option.duration_hours

    cap = employee.weekly_hours_cap
    low, high = (cap * f for f in rules.target_utilization)

    if projected > cap:
        overtime = employee.max_overtime_hours or 0
        if overtime <= 0 or projected > cap + overtime:
            return 0.0
        return _OVER_CAP_CEILING * (1 - (projected - cap) / overtime)
    if projected > high:
        return _OVER_CAP_CEILING + (_NEAR_CAP_CEILING - _OVER_CAP_CEILING) * (cap - projected) / (cap - high)
    if projected >= low:
        return 1.0
    return projected / low


def pattern_compliance_score(employee: Employee, option: ShiftOption, day: date, own: Iterable[IndividualShift]) -> float:
    """1 when the option's length is what the pattern expects next, 0 otherwise."""
    worked_days = {s.date for s in own}
    run = consecutive_days_before(worked_days, day)
    if run >= cycle_length(employee.shift_pattern):
        return 0.0
    return 1.0 if option.duration_hours == expected_duration(employee.shift_pattern, run) else 0.0


def fairness_score(
    option: ShiftOption,
    day: date,
    own: Iterable[IndividualShift],
    holidays: AbstractSet[date] = frozenset(),
) -> float:
    """Lower for employees who already hold more night or holiday shifts."""
    own = list(own)
    score = 1.0
    if _is_night(option.start_time):
        nights = sum(1 for s in own if _is_night(s.start_time))
        score *= max(_FAIRNESS_FLOOR, 1 - nights * _FAIRNESS_STEP)
    if day in holidays:
        worked = sum(1 for s in own if s.date in holidays)
        score *= max(_FAIRNESS_FLOOR, 1 - worked * _FAIRNESS_STEP)
    return score


def _is_night(start: time) -> bool:
    return start.hour < _NIGHT_STARTS_BEFORE or start.hour > _NIGHT_STARTS_AFTER
