"""Conflict detection for single candidates and whole rosters."""

from datetime import date

import pytest

from dispatch_api.core.errors import DataSourceError
from dispatch_api.scheduling.conflicts import detect_conflicts, find_schedule_conflicts, resolve_conflicts
from dispatch_api.scheduling.enums import ConflictType, ShiftStatus
from dispatch_api.scheduling.types import CandidateShift, ShiftConflict


def _types(result):
    return [c.type for c in result.conflicts]


class TestDetectConflicts:

    @pytest.fixture
    def employee(self, make_employee):
        return make_employee(cap=40)

    def _candidate(self, at, day, start, end_day, end, exclude=None):
        return CandidateShift(
            employee_id="emp-a",
            shift_option_id="opt",
            start=at(day, start),
            end=at(end_day, end),
            exclude_shift_id=exclude,
        )

    def test_exactly_minimum_rest_is_allowed(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, 3), start="07:00", end="17:00")]
        candidate = self._candidate(at, "2025-03-04", "03:00", "2025-03-04", "13:00")

        result = detect_conflicts(candidate, employee, lambda _: stored)

        assert result.error is None
        assert result.conflicts == []

    def test_one_minute_short_of_rest(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, 3), start="07:00", end="17:00")]
        candidate = self._candidate(at, "2025-03-04", "02:59", "2025-03-04", "12:59")

        result = detect_conflicts(candidate, employee, lambda _: stored)

        assert _types(result) == [ConflictType.rest_period]
        assert result.conflicts[0].is_hard

    def test_overlap(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, 3), start="07:00", end="17:00", id="s1")]
        candidate = self._candidate(at, "2025-03-03", "12:00", "2025-03-03", "22:00")

        result = detect_conflicts(candidate, employee, lambda _: stored)

        assert _types(result) == [ConflictType.overlap]
        assert result.conflicts[0].shift_ids == ("s1",)

    def test_excluded_shift_is_ignored(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, 3), start="07:00", end="17:00", id="s1")]
        candidate = self._candidate(at, "2025-03-03", "07:00", "2025-03-03", "17:00", exclude="s1")

        assert detect_conflicts(candidate, employee, lambda _: stored).conflicts == []

    def test_cancelled_shift_is_ignored(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, 3), status=ShiftStatus.cancelled)]
        candidate = self._candidate(at, "2025-03-03", "07:00", "2025-03-03", "17:00")

        assert detect_conflicts(candidate, employee, lambda _: stored).conflicts == []

    def _thirty_five_hours(self, make_shift):
        # week starting Sunday 2025-03-02
        return [
            make_shift(day=date(2025, 3, 2)),
            make_shift(day=date(2025, 3, 3)),
            make_shift(day=date(2025, 3, 4)),
            make_shift(day=date(2025, 3, 5), start="07:00", end="12:00"),
        ]

    @pytest.mark.parametrize("overtime", [0, None])
    def test_weekly_hours_without_overtime(self, make_employee, make_shift, at, overtime):
        employee = make_employee(cap=40, overtime=overtime)
        candidate = self._candidate(at, "2025-03-07", "07:00", "2025-03-07", "17:00")

        result = detect_conflicts(candidate, employee, lambda _: self._thirty_five_hours(make_shift))

        assert _types(result) == [ConflictType.hours_exceeded]
        assert not result.conflicts[0].is_hard

    def test_weekly_hours_within_overtime(self, make_employee, make_shift, at):
        employee = make_employee(cap=40, overtime=8)
        candidate = self._candidate(at, "2025-03-07", "07:00", "2025-03-07", "17:00")

        result = detect_conflicts(candidate, employee, lambda _: self._thirty_five_hours(make_shift))

        assert result.conflicts == []

    def test_previous_week_does_not_count(self, employee, make_shift, at):
        # Sunday 2025-03-09 starts a new week
        candidate = self._candidate(at, "2025-03-09", "07:00", "2025-03-09", "17:00")

        result = detect_conflicts(candidate, employee, lambda _: self._thirty_five_hours(make_shift))

        assert ConflictType.hours_exceeded not in _types(result)

    def test_run_longer_than_pattern(self, make_employee, make_shift, at):
        employee = make_employee(cap=60)
        stored = [make_shift(day=date(2025, 3, d)) for d in (3, 4, 5, 6)]
        candidate = self._candidate(at, "2025-03-07", "07:00", "2025-03-07", "17:00")

        result = detect_conflicts(candidate, employee, lambda _: stored)

        assert _types(result) == [ConflictType.pattern_violation]

    def test_all_checks_run(self, employee, make_shift, at):
        stored = [make_shift(day=date(2025, 3, d)) for d in (2, 3, 4, 5, 6)]
        candidate = self._candidate(at, "2025-03-06", "12:00", "2025-03-06", "22:00")

        result = detect_conflicts(candidate, employee, lambda _: stored)

        assert set(_types(result)) == {
            ConflictType.overlap,
            ConflictType.hours_exceeded,
            ConflictType.pattern_violation,
        }

    def test_loader_failure_is_not_reported_as_clean(self, employee, at):
        def broken(_):
            raise DataSourceError("database unavailable", operation="load shifts")

        candidate = self._candidate(at, "2025-03-03", "07:00", "2025-03-03", "17:00")
        result = detect_conflicts(candidate, employee, broken)

        assert result.conflicts == []
        assert isinstance(result.error, DataSourceError)

    def test_loader_bug_propagates(self, employee, at):
        def buggy(employee_id):
            return employee_id + 1

        candidate = self._candidate(at, "2025-03-03", "07:00", "2025-03-03", "17:00")
        with pytest.raises(TypeError):
            detect_conflicts(candidate, employee, buggy)


class TestResolveConflicts:

    def test_hard_conflict_blocks(self):
        resolution = resolve_conflicts(
            [
                ShiftConflict(ConflictType.hours_exceeded, "over"),
                ShiftConflict(ConflictType.rest_period, "tired"),
            ]
        )
        assert not resolution.can_proceed
        assert not resolution.requires_override
        assert resolution.message == "Cannot proceed due to hard conflicts (overlapping shifts or insufficient rest)"

    def test_soft_conflict_needs_override(self):
        resolution = resolve_conflicts([ShiftConflict(ConflictType.pattern_violation, "long run")])
        assert resolution.can_proceed
        assert resolution.requires_override

    def test_no_conflicts(self):
        resolution = resolve_conflicts([])
        assert resolution.can_proceed
        assert not resolution.requires_override
        assert resolution.message == "No conflicts detected"


class TestFindScheduleConflicts:

    def test_roster_scan(self, make_employee, make_shift):
        employees = {
            "emp-a": make_employee("emp-a", cap=60),
            "emp-b": make_employee("emp-b", cap=60),
        }
        shifts = [
            make_shift("emp-a", date(2025, 3, 3), "07:00", "17:00"),
            make_shift("emp-a", date(2025, 3, 4), "01:00", "11:00"),
            make_shift("emp-b", date(2025, 3, 3), "07:00", "17:00"),
            make_shift("emp-b", date(2025, 3, 3), "15:00", "23:00"),
        ]

        found = find_schedule_conflicts(shifts, employees)

        assert [(c.employee_id, c.type) for c in found] == [
            ("emp-a", ConflictType.rest_period),
            ("emp-b", ConflictType.overlap),
        ]

    def test_weekly_overage_and_long_run(self, make_employee, make_shift):
        employees = {"emp-a": make_employee("emp-a", cap=40)}
        shifts = [make_shift("emp-a", date(2025, 3, d)) for d in (2, 3, 4, 5, 6)]

        found = find_schedule_conflicts(shifts, employees)

        assert {(c.type, c.date) for c in found} == {
            (ConflictType.hours_exceeded, date(2025, 3, 6)),
            (ConflictType.pattern_violation, date(2025, 3, 6)),
        }

    def test_clean_roster(self, make_employee, make_shift):
        employees = {"emp-a": make_employee("emp-a")}
        shifts = [make_shift("emp-a", date(2025, 3, d)) for d in (3, 4)]
        assert find_schedule_conflicts(shifts, employees) == []
