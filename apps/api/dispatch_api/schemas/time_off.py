from datetime import date
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel


class TimeOffValidateRequest(BaseModel):
    employee_id: Optional[UUID] = None
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    type: Optional[str] = None
    status: Optional[str] = None


class ConflictingShiftOut(BaseModel):
    individual_shift_id: Optional[str] = None
    date: date
    shift_option_id: str


class TimeOffValidateResponse(BaseModel):
    is_valid: bool
    errors: List[str]
    conflicting_shifts: List[ConflictingShiftOut] = []
