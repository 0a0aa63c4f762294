import uuid
from sqlalchemy import Column, Date, Text
from sqlalchemy.dialects.postgresql import UUID

from dispatch_api.core.database import Base

class Holiday(Base):
    __tablename__ = "holidays"

    holiday_id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    date = Column(Date, nullable=False, unique=True)
    name = Column(Text, nullable=False, default="")
