"""Time-off request validation and conflict lookup."""

from datetime import date, time

import pytest

from dispatch_api.scheduling.enums import TimeOffStatus
from dispatch_api.scheduling.time_off import (
    blocks_availability,
    check_time_off_conflicts,
    validate_time_off_request,
)
from dispatch_api.scheduling.types import ShiftAssignment


class TestValidateTimeOffRequest:

    def _payload(self, **overrides):
        payload = {
            "start_date": "2025-03-10",
            "end_date": "2025-03-12",
            "type": "vacation",
            "status": "pending",
        }
        payload.update(overrides)
        return payload

    def test_valid_request(self):
        result = validate_time_off_request(self._payload())
        assert result.is_valid
        assert result.errors == []

    def test_single_day_request_is_valid(self):
        result = validate_time_off_request(self._payload(end_date="2025-03-10"))
        assert result.is_valid

    def test_impossible_calendar_date(self):
        result = validate_time_off_request(self._payload(start_date="2024-13-45"))
        assert not result.is_valid
        assert "Invalid date format: start_date must be YYYY-MM-DD" in result.errors

    def test_wrong_date_shape(self):
        result = validate_time_off_request(self._payload(end_date="03/12/2025"))
        assert result.errors == ["Invalid date format: end_date must be YYYY-MM-DD"]

    def test_end_before_start(self):
        result = validate_time_off_request(self._payload(start_date="2025-03-12", end_date="2025-03-10"))
        assert result.errors == ["End date must be on or after start date"]

    def test_unknown_type_and_status_reported_together(self):
        result = validate_time_off_request(self._payload(type="holiday", status="maybe"))
        assert not result.is_valid
        assert result.errors == ["Invalid time off type", "Invalid status"]

    def test_missing_fields_never_raise(self):
        result = validate_time_off_request({})
        assert not result.is_valid
        assert len(result.errors) == 4

    @pytest.mark.parametrize("bad", [["vacation"], {"value": "vacation"}, 3])
    def test_non_string_type_and_status_are_reported(self, bad):
        result = validate_time_off_request(self._payload(type=bad, status=bad))
        assert result.errors == ["Invalid time off type", "Invalid status"]


class TestCheckTimeOffConflicts:

    def _assignment(self, employee_id, day):
        return ShiftAssignment(employee_id=employee_id, date=day, start_time=time(7), end_time=time(17))

    def test_returns_same_employee_assignments_inside_range(self, make_time_off):
        request = make_time_off(start=date(2025, 3, 10), end=date(2025, 3, 12))
        assignments = [
            self._assignment("emp-a", date(2025, 3, 9)),
            self._assignment("emp-a", date(2025, 3, 10)),
            self._assignment("emp-b", date(2025, 3, 11)),
            self._assignment("emp-a", date(2025, 3, 12)),
            self._assignment("emp-a", date(2025, 3, 13)),
        ]

        conflicts = check_time_off_conflicts(request, assignments)

        assert [a.date for a in conflicts] == [date(2025, 3, 10), date(2025, 3, 12)]
        assert all(a.employee_id == "emp-a" for a in conflicts)

    def test_no_assignments_no_conflicts(self, make_time_off):
        assert check_time_off_conflicts(make_time_off(), []) == []


class TestBlocksAvailability:

    @pytest.mark.parametrize(
        "status, pending_blocks, expected",
        [
            (TimeOffStatus.approved, False, True),
            (TimeOffStatus.pending, False, False),
            (TimeOffStatus.pending, True, True),
            (TimeOffStatus.rejected, True, False),
        ],
    )
    def test_status_policy(self, make_time_off, status, pending_blocks, expected):
        assert blocks_availability(make_time_off(status=status), pending_blocks) is expected
