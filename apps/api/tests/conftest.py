import os

# Must be set before dispatch_api.core.config is imported.
os.environ["DATABASE_URL"] = "sqlite://"
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import date, datetime, time

import pytest

from dispatch_api.scheduling.enums import (
    Role,
    ShiftCategory,
    ShiftPattern,
    ShiftStatus,
    TimeOffStatus,
    TimeOffType,
)
from dispatch_api.scheduling.types import (
    Employee,
    IndividualShift,
    ShiftOption,
    StaffingRequirement,
    TimeOffRequest,
)


def hhmm(value: str) -> time:
    hh, mm = value.split(":")
    return time(int(hh), int(mm))


@pytest.fixture
def make_employee():
    def _make(
        id="emp-a",
        role=Role.dispatcher,
        pattern=ShiftPattern.four_by_ten,
        cap=40,
        overtime=None,
        preferred=None,
    ):
        return Employee(
            id=id,
            name=id.upper(),
            role=role,
            shift_pattern=pattern,
            weekly_hours_cap=cap,
            preferred_shift_category=preferred,
            max_overtime_hours=overtime,
        )

    return _make


@pytest.fixture
def make_option():
    def _make(id="opt-day", start="07:00", end="17:00", category=ShiftCategory.day, requires_supervisor=False):
        return ShiftOption(
            id=id,
            name=id,
            start_time=hhmm(start),
            end_time=hhmm(end),
            category=category,
            requires_supervisor=requires_supervisor,
        )

    return _make


@pytest.fixture
def make_shift():
    def _make(
        employee_id="emp-a",
        day=date(2025, 3, 3),
        start="07:00",
        end="17:00",
        id=None,
        status=ShiftStatus.scheduled,
        is_supervisor=False,
        option_id="opt-day",
    ):
        return IndividualShift(
            id=id,
            employee_id=employee_id,
            shift_option_id=option_id,
            date=day,
            start_time=hhmm(start),
            end_time=hhmm(end),
            status=status,
            is_supervisor=is_supervisor,
        )

    return _make


@pytest.fixture
def make_requirement():
    def _make(
        id="req-1",
        start="09:00",
        end="17:00",
        total=1,
        supervisors=0,
        day_of_week=None,
        specific_date=None,
        is_holiday=False,
    ):
        return StaffingRequirement(
            id=id,
            time_block_start=hhmm(start),
            time_block_end=hhmm(end),
            min_total_staff=total,
            min_supervisors=supervisors,
            day_of_week=day_of_week,
            specific_date=specific_date,
            is_holiday=is_holiday,
        )

    return _make


@pytest.fixture
def make_time_off():
    def _make(employee_id="emp-a", start=date(2025, 3, 3), end=date(2025, 3, 3), status=TimeOffStatus.approved):
        return TimeOffRequest(
            employee_id=employee_id,
            start_date=start,
            end_date=end,
            type=TimeOffType.vacation,
            status=status,
        )

    return _make


@pytest.fixture
def at():
    """datetime on a given ISO date and HH:MM"""

    def _at(day: str, hm: str) -> datetime:
        return datetime.combine(date.fromisoformat(day), hhmm(hm))

    return _at
