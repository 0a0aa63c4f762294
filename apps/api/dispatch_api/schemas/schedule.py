from datetime import date, datetime, time
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel

from dispatch_api.scheduling.enums import ConflictType, ShiftStatus
from dispatch_api.scheduling import types as t


class ScheduleGenerateRequest(BaseModel):
    # Raw strings; the window validator reports malformed dates.
    start_date: str
    end_date: str
    commit: bool = False


class ShiftOut(BaseModel):
    individual_shift_id: Optional[str] = None
    employee_id: str
    shift_option_id: str
    date: date
    start_time: time
    end_time: time
    status: ShiftStatus
    is_overtime: bool
    is_supervisor: bool

    @classmethod
    def from_shift(cls, s: t.IndividualShift) -> "ShiftOut":
        return cls(
            individual_shift_id=s.id,
            employee_id=s.employee_id,
            shift_option_id=s.shift_option_id,
            date=s.date,
            start_time=s.start_time,
            end_time=s.end_time,
            status=s.status,
            is_overtime=s.is_overtime,
            is_supervisor=s.is_supervisor,
        )


class UnfilledRequirementOut(BaseModel):
    date: date
    requirement_id: str
    shortfall: int
    supervisor_shortfall: int


class ScheduleGenerateResponse(BaseModel):
    status: str
    schedule_period_id: Optional[str] = None
    shifts: List[ShiftOut]
    unfilled_requirements: List[UnfilledRequirementOut]


class ShiftCheckRequest(BaseModel):
    employee_id: UUID
    shift_option_id: UUID
    date: date
    exclude_shift_id: Optional[UUID] = None


class ShiftConflictOut(BaseModel):
    type: ConflictType
    message: str
    is_hard: bool
    shift_ids: List[str] = []


class ShiftCheckResponse(BaseModel):
    conflicts: List[ShiftConflictOut]
    can_proceed: bool
    requires_override: bool
    message: str


class ShiftCreateRequest(ShiftCheckRequest):
    schedule_period_id: Optional[UUID] = None
    override: bool = False


class ShiftStatusUpdate(BaseModel):
    status: ShiftStatus
    actual_start_time: Optional[datetime] = None
    actual_end_time: Optional[datetime] = None


class StaffingGapOut(BaseModel):
    requirement_id: str
    required_count: int
    actual_count: int
    required_supervisors: int
    actual_supervisors: int
    missing_supervisor: bool


class StaffingReportOut(BaseModel):
    day: date
    is_valid: bool
    errors: List[str]
    gaps: List[StaffingGapOut]


class ScheduleConflictOut(BaseModel):
    type: ConflictType
    employee_id: str
    date: date
    message: str


class ScheduleConflictsOut(BaseModel):
    schedule_period_id: str
    conflicts: List[ScheduleConflictOut]
    counts: Dict[str, int]
