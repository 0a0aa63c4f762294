import uuid
from sqlalchemy import Boolean, Column, Date, Enum, ForeignKey, Time
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from dispatch_api.core.database import Base
from dispatch_api.scheduling.enums import ShiftStatus

from dispatch_api.models.schedule_period import SchedulePeriod  # noqa: F401
from dispatch_api.models.employee import Employee  # noqa: F401
from dispatch_api.models.shift_option import ShiftOption  # noqa: F401


class IndividualShift(Base):
    __tablename__ = "individual_shifts"

    individual_shift_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    schedule_period_id = Column(
        UUID(as_uuid=True), ForeignKey("schedule_periods.schedule_period_id", ondelete="CASCADE"), nullable=True, index=True
    )
    employee_id = Column(UUID(as_uuid=True), ForeignKey("employees.employee_id", ondelete="CASCADE"), nullable=False, index=True)
    shift_option_id = Column(UUID(as_uuid=True), ForeignKey("shift_options.shift_option_id"), nullable=False)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(Enum(ShiftStatus, name="shift_status"), nullable=False, default=ShiftStatus.scheduled)
    actual_start_time = Column(DateTime, nullable=True)
    actual_end_time = Column(DateTime, nullable=True)

    is_overtime = Column(Boolean, nullable=False, default=False)
    is_supervisor = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
