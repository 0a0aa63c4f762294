from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from dispatch_api.core.database import get_db
from dispatch_api.scheduling.enums import TimeOffStatus, TimeOffType
from dispatch_api.scheduling.time_off import check_time_off_conflicts, validate_time_off_request
from dispatch_api.scheduling.timeutil import parse_date
from dispatch_api.scheduling.types import TimeOffRequest
from dispatch_api.schemas.time_off import ConflictingShiftOut, TimeOffValidateRequest, TimeOffValidateResponse
from dispatch_api.services import data_access

router = APIRouter()


@router.post("/validate", response_model=TimeOffValidateResponse)
def validate_time_off(req: TimeOffValidateRequest, db: Session = Depends(get_db)):
    """
    Validate a time-off request and list the employee's shifts it would collide with.

    Conflicts are only looked up when the request itself is valid and names an employee.
    """
    result = validate_time_off_request(req.model_dump())
    if not result.is_valid or req.employee_id is None:
        return TimeOffValidateResponse(is_valid=result.is_valid, errors=result.errors)

    request = TimeOffRequest(
        employee_id=str(req.employee_id),
        start_date=parse_date(req.start_date),
        end_date=parse_date(req.end_date),
        type=TimeOffType(req.type),
        status=TimeOffStatus(req.status),
    )
    stored = data_access.load_shifts(db, request.start_date, request.end_date, employee_id=req.employee_id)
    conflicts = check_time_off_conflicts(request, [s for s in stored if s.is_active])

    return TimeOffValidateResponse(
        is_valid=True,
        errors=[],
        conflicting_shifts=[
            ConflictingShiftOut(individual_shift_id=s.id, date=s.date, shift_option_id=s.shift_option_id)
            for s in conflicts
        ],
    )
