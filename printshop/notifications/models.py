"""Notification preference and delivery log models."""

import uuid
from datetime import UTC, datetime

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database.base import Base


class NotificationPreference(Base):
    """Per-customer channel and topic switches. Created lazily with defaults."""

    __tablename__ = "notification_preferences"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    customer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    email_notifications = Column(Boolean, nullable=False, default=True)
    sms_notifications = Column(Boolean, nullable=False, default=False)
    job_status_updates = Column(Boolean, nullable=False, default=True)
    delivery_updates = Column(Boolean, nullable=False, default=True)
    promotional_messages = Column(Boolean, nullable=False, default=False)
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    customer = relationship("Customer", back_populates="notification_preference")


class NotificationLog(Base):
    """Append-only record of every channel delivery attempt."""

    __tablename__ = "notifications_log"

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid.uuid4)
    # Customer UUID as text, or "admin" for internal broadcasts
    customer_id = Column(String(64), nullable=False, index=True)
    notification_type = Column(String(10), nullable=False)  # email / sms
    notification_event = Column(String(50), nullable=False)
    recipient_email = Column(String(255), nullable=True)
    recipient_phone = Column(String(50), nullable=True)
    subject = Column(String(500), nullable=True)
    message = Column(Text, default="")
    status = Column(String(10), nullable=False)  # sent / failed
    external_id = Column(String(255), nullable=True)
    error_message = Column(Text, nullable=True)
    job_id = Column(Integer, nullable=True)
    delivery_schedule_id = Column(String(64), nullable=True)
    sent_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
    )

    __table_args__ = (
        Index("idx_notif_log_job", "job_id"),
        Index("idx_notif_log_sent", "sent_at"),
    )
