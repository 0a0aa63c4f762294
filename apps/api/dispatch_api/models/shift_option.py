import uuid
from sqlalchemy import Column, Text, Time, Boolean, DateTime, Enum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from dispatch_api.core.database import Base
from dispatch_api.scheduling.enums import ShiftCategory

class ShiftOption(Base):
    __tablename__ = "shift_options"

    shift_option_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(Text, nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)  # earlier than start_time: crosses midnight
    category = Column(Enum(ShiftCategory, name="shift_category"), nullable=False)
    requires_supervisor = Column(Boolean, nullable=False, default=False)
    active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
