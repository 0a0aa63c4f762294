import uuid
from sqlalchemy import Column, Integer, Text, Time, Boolean, Date, DateTime, CheckConstraint
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from dispatch_api.core.database import Base

class StaffingRequirement(Base):
    __tablename__ = "staffing_requirements"
    __table_args__ = (
        CheckConstraint("min_total_staff >= 0", name="ck_staffing_min_total_nonneg"),
        CheckConstraint("min_supervisors >= 0", name="ck_staffing_min_supervisors_nonneg"),
    )

    staffing_requirement_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(Text, nullable=False, default="")
    time_block_start = Column(Time, nullable=False)
    time_block_end = Column(Time, nullable=False)
    min_total_staff = Column(Integer, nullable=False)
    min_supervisors = Column(Integer, nullable=False, default=0)

    day_of_week = Column(Integer, nullable=True)  # 0=Sun ... 6=Sat; NULL = every day
    specific_date = Column(Date, nullable=True)
    is_holiday = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
