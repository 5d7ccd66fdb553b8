"""Delivery schedule model."""

import enum
import uuid
from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Integer, Text
from sqlalchemy import Enum as SQLEnum
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database.base import Base


class DeliveryStatus(enum.StrEnum):
    SCHEDULED = "scheduled"
    IN_TRANSIT = "in_transit"
    DELIVERED = "delivered"
    FAILED = "failed"
    CANCELLED = "cancelled"


class DeliverySchedule(Base):
    __tablename__ = "delivery_schedules"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    scheduled_date = Column(DateTime(timezone=True), nullable=False)
    delivery_address = Column(Text, default="")
    delivery_status = Column(
        SQLEnum(DeliveryStatus, values_callable=lambda e: [s.value for s in e], native_enum=False, length=20),
        default=DeliveryStatus.SCHEDULED,
        nullable=False,
    )
    notes = Column(Text, default="")
    actual_delivery_time = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    job = relationship("Job", back_populates="delivery_schedules")
