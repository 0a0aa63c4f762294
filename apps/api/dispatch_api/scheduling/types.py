"""
Snapshot types for the scheduling core.

Decoupled from the SQLAlchemy models: callers load rows and hand these in,
the core never reaches back into storage.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Dict, List, Optional, Tuple

from dispatch_api.scheduling.enums import (
    ConflictType,
    Role,
    ShiftCategory,
    ShiftPattern,
    ShiftStatus,
    TimeOffStatus,
    TimeOffType,
)
from dispatch_api.scheduling.timeutil import hours_between, interval_on, window_minutes


@dataclass(frozen=True)
class Employee:
    id: str
    name: str
    role: Role
    shift_pattern: ShiftPattern
    weekly_hours_cap: float
    preferred_shift_category: Optional[ShiftCategory] = None
    max_overtime_hours: Optional[float] = None  # None: no overtime allowed

    def __post_init__(self):
        if self.weekly_hours_cap <= 0:
            raise ValueError(f"weekly_hours_cap must be > 0 (employee {self.id})")

    @property
    def is_supervisor(self) -> bool:
        return self.role.is_supervisor

    @property
    def max_weekly_hours(self) -> float:
        return self.weekly_hours_cap + (self.max_overtime_hours or 0)


@dataclass(frozen=True)
class ShiftOption:
    id: str
    name: str
    start_time: time
    end_time: time
    category: ShiftCategory
    requires_supervisor: bool = False

    @property
    def duration_hours(self) -> float:
        s, e = window_minutes(self.start_time, self.end_time)
        return (e - s) / 60.0

    def interval_on(self, day: date) -> Tuple[datetime, datetime]:
        return interval_on(day, self.start_time, self.end_time)


@dataclass(frozen=True)
class StaffingRequirement:
    id: str
    time_block_start: time
    time_block_end: time
    min_total_staff: int
    min_supervisors: int = 0
    day_of_week: Optional[int] = None  # 0=Sun ... 6=Sat; None = every day
    specific_date: Optional[date] = None
    is_holiday: bool = False
    name: str = ""

    def interval_on(self, day: date) -> Tuple[datetime, datetime]:
        return interval_on(day, self.time_block_start, self.time_block_end)

    @property
    def label(self) -> str:
        return f"{self.time_block_start:%H:%M}-{self.time_block_end:%H:%M}"


@dataclass(frozen=True)
class IndividualShift:
    employee_id: str
    shift_option_id: str
    date: date
    start_time: time
    end_time: time
    status: ShiftStatus = ShiftStatus.scheduled
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None
    is_overtime: bool = False
    is_supervisor: bool = False
    id: Optional[str] = None

    def scheduled_interval(self) -> Tuple[datetime, datetime]:
        return interval_on(self.date, self.start_time, self.end_time)

    def worked_interval(self) -> Tuple[datetime, datetime]:
        """Realized times when both are recorded, otherwise the template times."""
        if self.actual_start_time is not None and self.actual_end_time is not None:
            return self.actual_start_time, self.actual_end_time
        return self.scheduled_interval()

    @property
    def worked_hours(self) -> float:
        start, end = self.worked_interval()
        return hours_between(start, end)

    @property
    def is_active(self) -> bool:
        return self.status != ShiftStatus.cancelled

    def as_assignment(self) -> "ShiftAssignment":
        return ShiftAssignment(
            employee_id=self.employee_id,
            date=self.date,
            start_time=self.start_time,
            end_time=self.end_time,
            is_supervisor=self.is_supervisor,
        )


@dataclass(frozen=True)
class ShiftAssignment:
    employee_id: str
    date: date
    start_time: time
    end_time: time
    is_supervisor: bool = False


@dataclass(frozen=True)
class TimeOffRequest:
    employee_id: str
    start_date: date
    end_date: date
    type: TimeOffType
    status: TimeOffStatus
    id: Optional[str] = None

    def covers(self, day: date) -> bool:
        return self.start_date <= day <= self.end_date


@dataclass(frozen=True)
class Holiday:
    date: date
    name: str = ""


@dataclass(frozen=True)
class CandidateShift:
    """A proposed assignment handed to the conflict detector."""

    employee_id: str
    shift_option_id: str
    start: datetime
    end: datetime
    exclude_shift_id: Optional[str] = None

    @property
    def duration_hours(self) -> float:
        return hours_between(self.start, self.end)


@dataclass(frozen=True)
class ValidationResult:
    is_valid: bool
    errors: List[str] = field(default_factory=list)

    @classmethod
    def from_errors(cls, errors: List[str]) -> "ValidationResult":
        return cls(is_valid=not errors, errors=list(errors))


@dataclass(frozen=True)
class ShiftConflict:
    type: ConflictType
    message: str
    shift_ids: Tuple[str, ...] = ()

    @property
    def is_hard(self) -> bool:
        return self.type.is_hard


@dataclass(frozen=True)
class ConflictCheckResult:
    conflicts: List[ShiftConflict] = field(default_factory=list)
    error: Optional[Exception] = None


@dataclass(frozen=True)
class ConflictResolution:
    can_proceed: bool
    requires_override: bool
    message: str


@dataclass(frozen=True)
class ScheduleConflict:
    type: ConflictType
    employee_id: str
    date: date
    message: str


@dataclass(frozen=True)
class StaffingGap:
    requirement_id: str
    required_count: int
    actual_count: int
    required_supervisors: int
    actual_supervisors: int

    @property
    def missing_supervisor(self) -> bool:
        return self.required_supervisors > 0 and self.actual_supervisors < self.required_supervisors

    @property
    def shortfall(self) -> int:
        return max(0, self.required_count - self.actual_count)

    @property
    def is_met(self) -> bool:
        return self.shortfall == 0 and not self.missing_supervisor


@dataclass(frozen=True)
class StaffingReport:
    gaps: List[StaffingGap]
    is_valid: bool
    errors: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class ShiftScore:
    employee_id: str
    shift_option_id: str
    score: float
    factors: Dict[str, float]


@dataclass(frozen=True)
class UnfilledRequirement:
    date: date
    requirement_id: str
    shortfall: int
    supervisor_shortfall: int = 0


@dataclass(frozen=True)
class GenerationResult:
    scheduled_shifts: Tuple[IndividualShift, ...] = ()
    unfilled_requirements: Tuple[UnfilledRequirement, ...] = ()
    errors: Tuple[str, ...] = ()
    status: str = "draft"

    @property
    def is_valid(self) -> bool:
        return not self.errors
