"""
Load a snapshot, run the draft generator, and optionally persist the draft.
"""

from __future__ import annotations

import logging
from datetime import date, timedelta
from typing import Optional, Tuple
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from dispatch_api.core.errors import DataSourceError
from dispatch_api.models.individual_shift import IndividualShift as IndividualShiftRow
from dispatch_api.models.schedule_period import SchedulePeriod
from dispatch_api.scheduling.generator import generate_schedule
from dispatch_api.scheduling.rules import DEFAULT_RULES, SchedulingRules
from dispatch_api.scheduling.types import GenerationResult
from dispatch_api.services import data_access

logger = logging.getLogger(__name__)

# Stored history before the window that still affects rest, weekly hours and runs.
HISTORY_DAYS = 7


def generate_period(
    db: Session,
    start: date,
    end: date,
    commit: bool = False,
    rules: SchedulingRules = DEFAULT_RULES,
) -> Tuple[GenerationResult, Optional[UUID]]:
    """
    Generate a draft for [start, end].

    Returns the generator result and, when `commit` is set and the window
    was accepted, the id of the unpublished schedule period holding it.
    """
    employees = data_access.load_employees(db)
    options = data_access.load_shift_options(db)
    requirements = data_access.load_requirements(db)
    holidays = data_access.load_holidays(db, start, end)
    time_off = data_access.load_time_off(db, start, end)
    existing = data_access.load_shifts(db, start - timedelta(days=HISTORY_DAYS), end)

    logger.info(
        "generating %s..%s: %d employees, %d options, %d requirements, %d stored shifts",
        start,
        end,
        len(employees),
        len(options),
        len(requirements),
        len(existing),
    )

    result = generate_schedule(
        start,
        end,
        employees=list(employees.values()),
        shift_options=options,
        requirements=requirements,
        time_off=time_off,
        existing_shifts=existing,
        holidays=holidays,
        rules=rules,
    )
    if not result.is_valid or not commit:
        return result, None

    return result, _persist_draft(db, start, end, result)


def _persist_draft(db: Session, start: date, end: date, result: GenerationResult) -> UUID:
    try:
        period = SchedulePeriod(start_date=start, end_date=end, is_published=False)
        db.add(period)
        db.flush()

        for s in result.scheduled_shifts:
            db.add(
                IndividualShiftRow(
                    schedule_period_id=period.schedule_period_id,
                    employee_id=UUID(s.employee_id),
                    shift_option_id=UUID(s.shift_option_id),
                    date=s.date,
                    start_time=s.start_time,
                    end_time=s.end_time,
                    status=s.status,
                    is_overtime=s.is_overtime,
                    is_supervisor=s.is_supervisor,
                )
            )
        db.commit()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("failed to persist draft %s..%s: %s", start, end, exc)
        raise DataSourceError("Could not save generated schedule", operation="persist draft") from exc

    logger.info("saved draft period %s with %d shifts", period.schedule_period_id, len(result.scheduled_shifts))
    return period.schedule_period_id
