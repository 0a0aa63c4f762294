import uuid
from sqlalchemy import Column, Date, String, DateTime, Enum, ForeignKey
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from dispatch_api.core.database import Base
from dispatch_api.scheduling.enums import TimeOffStatus, TimeOffType

class TimeOffRequest(Base):
    __tablename__ = "time_off_requests"

    time_off_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    employee_id = Column(
        UUID(as_uuid=True),
        ForeignKey("employees.employee_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    type = Column(Enum(TimeOffType, name="time_off_type"), nullable=False)
    status = Column(Enum(TimeOffStatus, name="time_off_status"), nullable=False, default=TimeOffStatus.pending)

    note = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
