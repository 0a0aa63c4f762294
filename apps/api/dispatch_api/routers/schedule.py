from collections import Counter
from datetime import date, datetime, timedelta
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import select
from sqlalchemy.orm import Session

from dispatch_api.core.config import settings
from dispatch_api.core.database import get_db
from dispatch_api.models.employee import Employee as EmployeeRow
from dispatch_api.models.individual_shift import IndividualShift as IndividualShiftRow
from dispatch_api.models.schedule_period import SchedulePeriod
from dispatch_api.routers.auth import CurrentUser, get_current_user, require_role
from dispatch_api.scheduling.conflicts import (
    detect_conflicts,
    find_schedule_conflicts,
    projected_weekly_hours,
    resolve_conflicts,
)
from dispatch_api.scheduling.enums import Role, can_transition
from dispatch_api.scheduling.generator import validate_generation_window
from dispatch_api.scheduling.staffing import applicable_requirements, validate_staffing
from dispatch_api.scheduling.timeutil import interval_on, parse_date
from dispatch_api.scheduling.types import CandidateShift
from dispatch_api.schemas.schedule import (
    ScheduleConflictOut,
    ScheduleConflictsOut,
    ScheduleGenerateRequest,
    ScheduleGenerateResponse,
    ShiftCheckRequest,
    ShiftCheckResponse,
    ShiftConflictOut,
    ShiftCreateRequest,
    ShiftOut,
    ShiftStatusUpdate,
    StaffingGapOut,
    StaffingReportOut,
    UnfilledRequirementOut,
)
from dispatch_api.services import data_access
from dispatch_api.services.schedule_generator import generate_period

router = APIRouter()


@router.post("/generate", response_model=ScheduleGenerateResponse)
def generate_schedule(
    req: ScheduleGenerateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_role(Role.supervisor)),
):
    rules = settings.scheduling_rules()
    window = validate_generation_window(req.start_date, req.end_date, rules)
    if not window.is_valid:
        raise HTTPException(status_code=400, detail=window.errors)

    result, period_id = generate_period(
        db,
        start=parse_date(req.start_date),
        end=parse_date(req.end_date),
        commit=req.commit,
        rules=rules,
    )

    return ScheduleGenerateResponse(
        status=result.status,
        schedule_period_id=str(period_id) if period_id else None,
        shifts=[ShiftOut.from_shift(s) for s in result.scheduled_shifts],
        unfilled_requirements=[
            UnfilledRequirementOut(
                date=u.date,
                requirement_id=u.requirement_id,
                shortfall=u.shortfall,
                supervisor_shortfall=u.supervisor_shortfall,
            )
            for u in result.unfilled_requirements
        ],
    )


@router.get("/{period_id}")
def get_schedule(period_id: UUID, db: Session = Depends(get_db)):
    period = _get_period(db, period_id)

    rows = db.execute(
        select(IndividualShiftRow, EmployeeRow.name)
        .join(EmployeeRow, EmployeeRow.employee_id == IndividualShiftRow.employee_id)
        .where(IndividualShiftRow.schedule_period_id == period_id)
        .order_by(IndividualShiftRow.date, IndividualShiftRow.start_time, EmployeeRow.name)
    ).all()

    return {
        "period": {
            "schedule_period_id": str(period.schedule_period_id),
            "start_date": period.start_date,
            "end_date": period.end_date,
            "is_published": period.is_published,
        },
        "shifts": [
            {**ShiftOut.from_shift(data_access.to_shift(shift)).model_dump(), "employee_name": name}
            for shift, name in rows
        ],
    }


@router.get("/{period_id}/staffing", response_model=StaffingReportOut)
def get_staffing_report(
    period_id: UUID,
    day: date = Query(..., description="YYYY-MM-DD"),
    db: Session = Depends(get_db),
):
    """Headcount and supervisor coverage for every requirement in force on `day`."""
    period = _get_period(db, period_id)
    if not (period.start_date <= day <= period.end_date):
        raise HTTPException(status_code=400, detail="day is outside the schedule period")

    holidays = data_access.load_holidays(db, day, day)
    requirements = applicable_requirements(data_access.load_requirements(db), day, is_holiday=bool(holidays))
    # previous day included for overnight shifts crossing into the morning
    shifts = data_access.load_shifts(db, day - timedelta(days=1), day)

    report = validate_staffing(requirements, shifts, day)
    return StaffingReportOut(
        day=day,
        is_valid=report.is_valid,
        errors=report.errors,
        gaps=[
            StaffingGapOut(
                requirement_id=g.requirement_id,
                required_count=g.required_count,
                actual_count=g.actual_count,
                required_supervisors=g.required_supervisors,
                actual_supervisors=g.actual_supervisors,
                missing_supervisor=g.missing_supervisor,
            )
            for g in report.gaps
        ],
    )


@router.get("/{period_id}/conflicts", response_model=ScheduleConflictsOut)
def get_schedule_conflicts(period_id: UUID, db: Session = Depends(get_db)):
    period = _get_period(db, period_id)
    shifts = data_access.load_shifts(db, period.start_date, period.end_date, schedule_period_id=period_id)
    employees = data_access.load_employees(db)

    found = find_schedule_conflicts(shifts, employees, settings.scheduling_rules())
    return ScheduleConflictsOut(
        schedule_period_id=str(period_id),
        conflicts=[
            ScheduleConflictOut(type=c.type, employee_id=c.employee_id, date=c.date, message=c.message) for c in found
        ],
        counts=dict(Counter(c.type.value for c in found)),
    )


@router.post("/shifts/check", response_model=ShiftCheckResponse)
def check_shift(req: ShiftCheckRequest, db: Session = Depends(get_db)):
    """Conflict report for a proposed assignment; nothing is written."""
    _, _, result, resolution = _check_candidate(req, db)
    return _check_response(result.conflicts, resolution)


@router.post("/shifts", status_code=201)
def create_shift(
    req: ShiftCreateRequest,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_role(Role.supervisor)),
):
    """Manually assign a shift. Soft conflicts need `override` from a manager."""
    if req.schedule_period_id is not None:
        _get_period(db, req.schedule_period_id)

    employee, option, result, resolution = _check_candidate(req, db)

    if not resolution.can_proceed:
        raise HTTPException(status_code=409, detail=_check_response(result.conflicts, resolution).model_dump(mode="json"))
    if resolution.requires_override:
        if not req.override:
            raise HTTPException(
                status_code=409, detail=_check_response(result.conflicts, resolution).model_dump(mode="json")
            )
        if not user.role.at_least(Role.manager):
            raise HTTPException(status_code=403, detail="Only a manager can override scheduling conflicts")

    rules = settings.scheduling_rules()
    history = [
        s
        for s in data_access.employee_shift_loader(db, req.date)(employee.id)
        if req.exclude_shift_id is None or s.id != str(req.exclude_shift_id)
    ]
    projected = projected_weekly_hours(req.date, option.duration_hours, history, rules)

    shift = IndividualShiftRow(
        schedule_period_id=req.schedule_period_id,
        employee_id=req.employee_id,
        shift_option_id=req.shift_option_id,
        date=req.date,
        start_time=option.start_time,
        end_time=option.end_time,
        is_overtime=projected > employee.weekly_hours_cap,
        is_supervisor=employee.is_supervisor or option.requires_supervisor,
    )
    db.add(shift)
    db.commit()
    db.refresh(shift)

    return {
        "individual_shift_id": str(shift.individual_shift_id),
        "employee_id": str(shift.employee_id),
        "overridden": [c.type.value for c in result.conflicts],
    }


@router.patch("/shifts/{shift_id}/status")
def update_shift_status(
    shift_id: UUID,
    req: ShiftStatusUpdate,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(get_current_user),
):
    shift = db.get(IndividualShiftRow, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")

    if not can_transition(shift.status, req.status):
        raise HTTPException(
            status_code=409,
            detail=f"Cannot change shift status from {shift.status.value} to {req.status.value}",
        )

    shift.status = req.status
    if req.actual_start_time is not None:
        shift.actual_start_time = req.actual_start_time
    if req.actual_end_time is not None:
        shift.actual_end_time = req.actual_end_time
    db.commit()
    db.refresh(shift)

    return {"individual_shift_id": str(shift.individual_shift_id), "status": shift.status.value}


@router.delete("/shifts/{shift_id}")
def delete_shift(
    shift_id: UUID,
    db: Session = Depends(get_db),
    user: CurrentUser = Depends(require_role(Role.supervisor)),
):
    """Delete a shift that has not started yet."""
    shift = db.get(IndividualShiftRow, shift_id)
    if not shift:
        raise HTTPException(status_code=404, detail="Shift not found")

    start, _ = interval_on(shift.date, shift.start_time, shift.end_time)
    if datetime.now() >= start:
        raise HTTPException(status_code=409, detail="Cannot delete a shift that has already started")

    shift_id_str = str(shift.individual_shift_id)
    db.delete(shift)
    db.commit()

    return {"deleted": True, "individual_shift_id": shift_id_str}


# ========== Helpers ==========
def _get_period(db: Session, period_id: UUID) -> SchedulePeriod:
    period = db.get(SchedulePeriod, period_id)
    if not period:
        raise HTTPException(status_code=404, detail="Schedule period not found")
    return period


def _check_candidate(req: ShiftCheckRequest, db: Session):
    employee = data_access.load_employee(db, req.employee_id)
    if employee is None:
        raise HTTPException(status_code=404, detail="Employee not found")
    option = data_access.load_shift_option(db, req.shift_option_id)
    if option is None:
        raise HTTPException(status_code=404, detail="Shift option not found")

    start, end = option.interval_on(req.date)
    candidate = CandidateShift(
        employee_id=employee.id,
        shift_option_id=option.id,
        start=start,
        end=end,
        exclude_shift_id=str(req.exclude_shift_id) if req.exclude_shift_id else None,
    )
    result = detect_conflicts(
        candidate,
        employee,
        data_access.employee_shift_loader(db, req.date),
        settings.scheduling_rules(),
    )
    if result.error is not None:
        raise HTTPException(status_code=503, detail="Could not load existing shifts; conflicts were not checked")

    return employee, option, result, resolve_conflicts(result.conflicts)


def _check_response(conflicts, resolution) -> ShiftCheckResponse:
    return ShiftCheckResponse(
        conflicts=[
            ShiftConflictOut(type=c.type, message=c.message, is_hard=c.is_hard, shift_ids=list(c.shift_ids))
            for c in conflicts
        ],
        can_proceed=resolution.can_proceed,
        requires_override=resolution.requires_override,
        message=resolution.message,
    )
