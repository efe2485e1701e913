import uuid
from datetime import datetime, timezone
from sqlalchemy import Column, String, Numeric, Integer, DateTime, Text
from sqlalchemy.dialects.postgresql import UUID
from .base import Base


def _utcnow():
    return datetime.now(timezone.utc)


class Property(Base):
    __tablename__ = "properties"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text)
    location = Column(String(255), nullable=False)
    price_min = Column(Numeric(14, 2), nullable=False)  # base currency units (INR)
    price_max = Column(Numeric(14, 2))
    bedrooms_min = Column(Integer, nullable=False)
    bedrooms_max = Column(Integer)
    ai_overview = Column(Text)
    created_at = Column(DateTime(timezone=True), default=_utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=_utcnow, onupdate=_utcnow, nullable=False)

    # Columns a caller may change through update_by_id
    UPDATABLE_FIELDS = (
        "title",
        "description",
        "location",
        "price_min",
        "price_max",
        "bedrooms_min",
        "bedrooms_max",
        "ai_overview",
    )

