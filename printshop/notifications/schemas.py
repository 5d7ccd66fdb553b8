"""Notification request/response schemas."""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field


class NotificationRequest(BaseModel):
    type: Literal["email", "sms", "both"] = "both"
    customer_id: str = Field(..., min_length=1)
    job_id: int | None = None
    delivery_schedule_id: str | None = None
    event: str = Field(..., min_length=1, max_length=50)
    subject: str | None = Field(None, max_length=500)
    message: str = Field(..., min_length=1)
    custom_data: Any = None


class PreferencesUpdate(BaseModel):
    email_notifications: bool | None = None
    sms_notifications: bool | None = None
    job_status_updates: bool | None = None
    delivery_updates: bool | None = None
    promotional_messages: bool | None = None


class PreferencesResponse(BaseModel):
    email_notifications: bool
    sms_notifications: bool
    job_status_updates: bool
    delivery_updates: bool
    promotional_messages: bool

    model_config = {"from_attributes": True}


class NotificationLogResponse(BaseModel):
    id: str
    customer_id: str
    notification_type: str
    notification_event: str
    recipient_email: str | None
    recipient_phone: str | None
    subject: str | None
    message: str | None
    status: str
    external_id: str | None
    error_message: str | None
    job_id: int | None
    delivery_schedule_id: str | None
    sent_at: datetime | None

    @classmethod
    def from_log(cls, log) -> "NotificationLogResponse":
        return cls(
            id=str(log.id),
            customer_id=log.customer_id,
            notification_type=log.notification_type,
            notification_event=log.notification_event,
            recipient_email=log.recipient_email,
            recipient_phone=log.recipient_phone,
            subject=log.subject,
            message=log.message,
            status=log.status,
            external_id=log.external_id,
            error_message=log.error_message,
            job_id=log.job_id,
            delivery_schedule_id=log.delivery_schedule_id,
            sent_at=log.sent_at,
        )
