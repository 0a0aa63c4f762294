"""Desirability scoring."""

from datetime import date

import pytest

from dispatch_api.scheduling.enums import Role, ShiftCategory, ShiftPattern
from dispatch_api.scheduling.rules import DEFAULT_RULES
from dispatch_api.scheduling.scoring import (
    DEFAULT_WEIGHTS,
    fairness_score,
    pattern_compliance_score,
    score_shift,
    time_since_last_shift_score,
    weekly_hours_balance_score,
)

FRIDAY = date(2025, 3, 7)


class TestScoreShift:

    @pytest.fixture
    def day_option(self, make_option):
        return make_option("opt-day", "09:00", "17:00", ShiftCategory.day)

    @pytest.fixture
    def night_option(self, make_option):
        return make_option("opt-grave", "23:00", "07:00", ShiftCategory.graveyard)

    def test_preferred_category_wins(self, make_employee, day_option, night_option):
        employee = make_employee(preferred=ShiftCategory.day)

        day_score = score_shift(employee, day_option, FRIDAY)
        night_score = score_shift(employee, night_option, FRIDAY)

        assert day_score.factors["preferred_category"] == 1.0
        assert night_score.factors["preferred_category"] == 0.0
        assert day_score.score - night_score.score == pytest.approx(DEFAULT_WEIGHTS["preferred_category"])

    def test_no_preference_is_neutral(self, make_employee, day_option, night_option):
        employee = make_employee(preferred=None)
        assert score_shift(employee, day_option, FRIDAY).score == score_shift(employee, night_option, FRIDAY).score

    def test_deterministic(self, make_employee, make_shift, day_option):
        employee = make_employee(preferred=ShiftCategory.day)
        history = [make_shift(day=date(2025, 3, 5))]

        first = score_shift(employee, day_option, FRIDAY, history)
        second = score_shift(employee, day_option, FRIDAY, list(history))

        assert first == second

    def test_other_employees_history_is_ignored(self, make_employee, make_shift, day_option):
        employee = make_employee("emp-a")
        history = [make_shift("emp-b", day=date(2025, 3, 6))]
        assert score_shift(employee, day_option, FRIDAY, history) == score_shift(employee, day_option, FRIDAY)

    def test_weight_override(self, make_employee, day_option):
        employee = make_employee(preferred=ShiftCategory.day)
        zeroed = {name: 0.0 for name in DEFAULT_WEIGHTS}

        assert score_shift(employee, day_option, FRIDAY, weights=zeroed).score == 0.0
        only_pref = dict(zeroed, preferred_category=1.0)
        assert score_shift(employee, day_option, FRIDAY, weights=only_pref).score == 1.0

    def test_factor_names(self, make_employee, day_option):
        scored = score_shift(make_employee(), day_option, FRIDAY)
        assert set(scored.factors) == set(DEFAULT_WEIGHTS)
        assert all(0.0 <= v <= 1.0 for v in scored.factors.values())


class TestTimeSinceLastShift:

    def test_no_prior_shift(self, at):
        assert time_since_last_shift_score(at("2025-03-04", "07:00"), [], DEFAULT_RULES) == 1.0

    @pytest.mark.parametrize(
        "start, expected",
        [
            ("2025-03-04 02:00", 0.0),  # 9h
            ("2025-03-04 03:00", 0.0),  # 10h, the minimum
            ("2025-03-04 10:00", 0.5),  # 17h
            ("2025-03-04 17:00", 1.0),  # 24h
            ("2025-03-05 17:00", 1.0),
        ],
    )
    def test_rest_ramp(self, make_shift, at, start, expected):
        history = [make_shift(day=date(2025, 3, 3), start="07:00", end="17:00")]
        day, hm = start.split()
        assert time_since_last_shift_score(at(day, hm), history, DEFAULT_RULES) == pytest.approx(expected)


class TestWeeklyHoursBalance:

    @pytest.fixture
    def ten_hours(self, make_option):
        return make_option("opt-ten", "07:00", "17:00")

    def _week(self, make_shift, spans):
        days = [date(2025, 3, 3), date(2025, 3, 4), date(2025, 3, 5), date(2025, 3, 6)]
        return [make_shift(day=d, start=s, end=e) for d, (s, e) in zip(days, spans)]

    def test_empty_week_scales_toward_band(self, make_employee, ten_hours):
        score = weekly_hours_balance_score(make_employee(cap=40), ten_hours, FRIDAY, [], DEFAULT_RULES)
        assert score == pytest.approx(10 / 30)

    def test_inside_target_band(self, make_employee, make_shift, ten_hours):
        own = self._week(make_shift, [("07:00", "17:00"), ("07:00", "19:00")])  # 22h -> 32h
        assert weekly_hours_balance_score(make_employee(cap=40), ten_hours, FRIDAY, own, DEFAULT_RULES) == 1.0

    def test_near_cap(self, make_employee, make_shift, ten_hours):
        own = self._week(make_shift, [("07:00", "17:00"), ("07:00", "17:00"), ("07:00", "15:00")])  # 28h -> 38h
        score = weekly_hours_balance_score(make_employee(cap=40), ten_hours, FRIDAY, own, DEFAULT_RULES)
        assert score == pytest.approx(0.275)

    def test_at_cap(self, make_employee, make_shift, ten_hours):
        own = self._week(make_shift, [("07:00", "17:00")] * 3)  # 30h -> 40h
        score = weekly_hours_balance_score(make_employee(cap=40), ten_hours, FRIDAY, own, DEFAULT_RULES)
        assert score == pytest.approx(0.1)

    def test_over_cap_within_overtime(self, make_employee, make_shift, ten_hours):
        own = self._week(make_shift, [("07:00", "17:00")] * 3 + [("07:00", "12:00")])  # 35h -> 45h
        score = weekly_hours_balance_score(make_employee(cap=40, overtime=8), ten_hours, FRIDAY, own, DEFAULT_RULES)
        assert score == pytest.approx(0.0375)

    def test_over_cap_without_overtime(self, make_employee, make_shift, ten_hours):
        own = self._week(make_shift, [("07:00", "17:00")] * 3 + [("07:00", "12:00")])
        assert weekly_hours_balance_score(make_employee(cap=40), ten_hours, FRIDAY, own, DEFAULT_RULES) == 0.0

    def test_balanced_beats_near_cap(self, make_employee, make_shift, ten_hours):
        employee = make_employee(cap=40)
        balanced = self._week(make_shift, [("07:00", "17:00"), ("07:00", "19:00")])
        loaded = self._week(make_shift, [("07:00", "17:00")] * 3)
        assert score_shift(employee, ten_hours, FRIDAY, balanced).score > score_shift(employee, ten_hours, FRIDAY, loaded).score


class TestPatternCompliance:

    def test_expected_length(self, make_employee, make_option):
        employee = make_employee(pattern=ShiftPattern.four_by_ten)
        assert pattern_compliance_score(employee, make_option(start="07:00", end="17:00"), FRIDAY, []) == 1.0
        assert pattern_compliance_score(employee, make_option(start="09:00", end="17:00"), FRIDAY, []) == 0.0

    def test_short_shift_closes_three_by_twelve(self, make_employee, make_option, make_shift):
        employee = make_employee(pattern=ShiftPattern.three_by_twelve_plus_four)
        own = [make_shift(day=date(2025, 3, d), start="07:00", end="19:00") for d in (4, 5, 6)]
        assert pattern_compliance_score(employee, make_option(start="07:00", end="11:00"), FRIDAY, own) == 1.0

    def test_run_exhausted(self, make_employee, make_option, make_shift):
        employee = make_employee(role=Role.supervisor)
        own = [make_shift(day=date(2025, 3, d)) for d in (3, 4, 5, 6)]
        assert pattern_compliance_score(employee, make_option(), FRIDAY, own) == 0.0


class TestFairness:

    @pytest.fixture
    def night_option(self, make_option):
        return make_option("opt-grave", "23:00", "07:00", ShiftCategory.graveyard)

    def _nights(self, make_shift, employee_id, count):
        return [make_shift(employee_id, date(2025, 2, d), "23:00", "07:00") for d in range(1, count + 1)]

    @pytest.mark.parametrize("held, expected", [(0, 1.0), (3, 0.7), (5, 0.5), (9, 0.5)])
    def test_night_shifts_already_held(self, make_shift, night_option, held, expected):
        own = self._nights(make_shift, "emp-a", held)
        assert fairness_score(night_option, FRIDAY, own) == pytest.approx(expected)

    def test_day_option_ignores_night_history(self, make_option, make_shift):
        own = self._nights(make_shift, "emp-a", 4)
        assert fairness_score(make_option(start="07:00", end="17:00"), FRIDAY, own) == 1.0

    def test_holiday_shifts_already_held(self, make_option, make_shift):
        holidays = {date(2025, 1, 1), date(2025, 1, 20), FRIDAY}
        own = [make_shift(day=date(2025, 1, 1)), make_shift(day=date(2025, 1, 20)), make_shift(day=date(2025, 2, 3))]
        option = make_option(start="07:00", end="17:00")

        assert fairness_score(option, FRIDAY, own, holidays) == pytest.approx(0.8)
        assert fairness_score(option, date(2025, 3, 10), own, holidays) == 1.0

    def test_spreads_night_shifts(self, make_employee, make_shift, night_option):
        rested = make_employee("emp-a")
        loaded = make_employee("emp-b")
        history = self._nights(make_shift, "emp-b", 4)

        fresh = score_shift(rested, night_option, FRIDAY, history)
        tired = score_shift(loaded, night_option, FRIDAY, history)

        assert fresh.factors["fairness"] == 1.0
        assert tired.factors["fairness"] == pytest.approx(0.6)
        assert fresh.score > tired.score
