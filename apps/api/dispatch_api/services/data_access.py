"""
ORM rows -> scheduling snapshot types.

Every read goes through `_reading` so storage failures surface as
DataSourceError instead of leaking SQLAlchemy exceptions to callers.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from datetime import date, timedelta
from typing import Callable, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import and_, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dispatch_api.core.errors import DataSourceError
from dispatch_api.models.employee import Employee as EmployeeRow
from dispatch_api.models.holiday import Holiday as HolidayRow
from dispatch_api.models.individual_shift import IndividualShift as IndividualShiftRow
from dispatch_api.models.shift_option import ShiftOption as ShiftOptionRow
from dispatch_api.models.staffing_requirement import StaffingRequirement as StaffingRequirementRow
from dispatch_api.models.time_off import TimeOffRequest as TimeOffRow
from dispatch_api.scheduling import types as t

logger = logging.getLogger(__name__)


@contextmanager
def _reading(operation: str):
    try:
        yield
    except SQLAlchemyError as exc:
        logger.error("data source failure during %s: %s", operation, exc)
        raise DataSourceError(f"Could not {operation}", operation=operation) from exc


# ========== Row converters ==========
def to_employee(row: EmployeeRow) -> t.Employee:
    return t.Employee(
        id=str(row.employee_id),
        name=row.name,
        role=row.role,
        shift_pattern=row.shift_pattern,
        weekly_hours_cap=float(row.weekly_hours_cap),
        preferred_shift_category=row.preferred_shift_category,
        max_overtime_hours=float(row.max_overtime_hours) if row.max_overtime_hours is not None else None,
    )


def to_shift_option(row: ShiftOptionRow) -> t.ShiftOption:
    return t.ShiftOption(
        id=str(row.shift_option_id),
        name=row.name,
        start_time=row.start_time,
        end_time=row.end_time,
        category=row.category,
        requires_supervisor=bool(row.requires_supervisor),
    )


def to_requirement(row: StaffingRequirementRow) -> t.StaffingRequirement:
    return t.StaffingRequirement(
        id=str(row.staffing_requirement_id),
        name=row.name or "",
        time_block_start=row.time_block_start,
        time_block_end=row.time_block_end,
        min_total_staff=int(row.min_total_staff),
        min_supervisors=int(row.min_supervisors or 0),
        day_of_week=row.day_of_week,
        specific_date=row.specific_date,
        is_holiday=bool(row.is_holiday),
    )


def to_shift(row: IndividualShiftRow) -> t.IndividualShift:
    return t.IndividualShift(
        id=str(row.individual_shift_id),
        employee_id=str(row.employee_id),
        shift_option_id=str(row.shift_option_id),
        date=row.date,
        start_time=row.start_time,
        end_time=row.end_time,
        status=row.status,
        actual_start_time=row.actual_start_time,
        actual_end_time=row.actual_end_time,
        is_overtime=bool(row.is_overtime),
        is_supervisor=bool(row.is_supervisor),
    )


def to_time_off(row: TimeOffRow) -> t.TimeOffRequest:
    return t.TimeOffRequest(
        id=str(row.time_off_id),
        employee_id=str(row.employee_id),
        start_date=row.start_date,
        end_date=row.end_date,
        type=row.type,
        status=row.status,
    )


# ========== Loaders ==========
def load_employees(db: Session) -> Dict[str, t.Employee]:
    with _reading("load employees"):
        rows = db.execute(select(EmployeeRow).where(EmployeeRow.is_active == True)).scalars().all()  # noqa: E712
    return {str(r.employee_id): to_employee(r) for r in rows}


def load_employee(db: Session, employee_id: UUID) -> Optional[t.Employee]:
    with _reading("load employee"):
        row = db.get(EmployeeRow, employee_id)
    if row is None or not row.is_active:
        return None
    return to_employee(row)


def load_shift_options(db: Session) -> List[t.ShiftOption]:
    with _reading("load shift options"):
        rows = db.execute(select(ShiftOptionRow).where(ShiftOptionRow.active == True)).scalars().all()  # noqa: E712
    return [to_shift_option(r) for r in rows]


def load_shift_option(db: Session, shift_option_id: UUID) -> Optional[t.ShiftOption]:
    with _reading("load shift option"):
        row = db.get(ShiftOptionRow, shift_option_id)
    return to_shift_option(row) if row is not None else None


def load_requirements(db: Session) -> List[t.StaffingRequirement]:
    with _reading("load staffing requirements"):
        rows = (
            db.execute(select(StaffingRequirementRow).where(StaffingRequirementRow.active == True))  # noqa: E712
            .scalars()
            .all()
        )
    return [to_requirement(r) for r in rows]


def load_holidays(db: Session, start: date, end: date) -> List[t.Holiday]:
    with _reading("load holidays"):
        rows = (
            db.execute(select(HolidayRow).where(and_(HolidayRow.date >= start, HolidayRow.date <= end)))
            .scalars()
            .all()
        )
    return [t.Holiday(date=r.date, name=r.name or "") for r in rows]


def load_time_off(db: Session, start: date, end: date) -> List[t.TimeOffRequest]:
    with _reading("load time off"):
        rows = (
            db.execute(select(TimeOffRow).where(and_(TimeOffRow.end_date >= start, TimeOffRow.start_date <= end)))
            .scalars()
            .all()
        )
    return [to_time_off(r) for r in rows]


def load_shifts(
    db: Session,
    start: date,
    end: date,
    employee_id: Optional[UUID] = None,
    schedule_period_id: Optional[UUID] = None,
) -> List[t.IndividualShift]:
    """Stored shifts dated within [start, end], optionally narrowed to one employee or period."""
    clauses = [IndividualShiftRow.date >= start, IndividualShiftRow.date <= end]
    if employee_id is not None:
        clauses.append(IndividualShiftRow.employee_id == employee_id)
    if schedule_period_id is not None:
        clauses.append(IndividualShiftRow.schedule_period_id == schedule_period_id)
    with _reading("load shifts"):
        rows = (
            db.execute(
                select(IndividualShiftRow)
                .where(and_(*clauses))
                .order_by(IndividualShiftRow.date, IndividualShiftRow.start_time)
            )
            .scalars()
            .all()
        )
    return [to_shift(r) for r in rows]


def employee_shift_loader(db: Session, around: date, days: int = 7) -> Callable[[str], Iterable[t.IndividualShift]]:
    """
    Loader for the conflict detector: one employee's stored shifts near `around`.

    The window covers the whole week on either side so weekly-hour and
    consecutive-day checks see every relevant shift.
    """
    start = around - timedelta(days=days)
    end = around + timedelta(days=days)

    def load(employee_id: str) -> List[t.IndividualShift]:
        return load_shifts(db, start, end, employee_id=UUID(employee_id))

    return load
