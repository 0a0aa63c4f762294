import uuid
from sqlalchemy import Column, Date, Boolean
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func
from sqlalchemy.sql.sqltypes import DateTime

from dispatch_api.core.database import Base


class SchedulePeriod(Base):
    __tablename__ = "schedule_periods"

    schedule_period_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_published = Column(Boolean, nullable=False, default=False)

    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
