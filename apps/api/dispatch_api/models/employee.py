import uuid
from sqlalchemy import Column, String, Boolean, DateTime, Enum, Float
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.sql import func

from dispatch_api.core.database import Base
from dispatch_api.scheduling.enums import Role, ShiftCategory, ShiftPattern

class Employee(Base):
    __tablename__ = "employees"

    employee_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)

    name = Column(String, nullable=False)
    role = Column(Enum(Role, name="employee_role"), nullable=False, default=Role.dispatcher)
    shift_pattern = Column(Enum(ShiftPattern, name="shift_pattern"), nullable=False)
    preferred_shift_category = Column(Enum(ShiftCategory, name="shift_category"), nullable=True)

    weekly_hours_cap = Column(Float, nullable=False, default=40)
    max_overtime_hours = Column(Float, nullable=True)  # NULL: no overtime allowed

    is_active = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
