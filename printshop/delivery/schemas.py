"""Delivery request/response schemas."""

from datetime import datetime

from pydantic import BaseModel

from .models import DeliveryStatus


class DeliveryScheduleRequest(BaseModel):
    scheduled_date: datetime
    delivery_address: str = ""
    notes: str = ""


class DeliveryStatusUpdate(BaseModel):
    delivery_status: DeliveryStatus


class DeliveryScheduleResponse(BaseModel):
    id: str
    job_id: int
    scheduled_date: datetime
    delivery_address: str | None
    delivery_status: DeliveryStatus
    notes: str | None
    actual_delivery_time: datetime | None

    @classmethod
    def from_schedule(cls, schedule) -> "DeliveryScheduleResponse":
        return cls(
            id=str(schedule.id),
            job_id=schedule.job_id,
            scheduled_date=schedule.scheduled_date,
            delivery_address=schedule.delivery_address,
            delivery_status=schedule.delivery_status,
            notes=schedule.notes,
            actual_delivery_time=schedule.actual_delivery_time,
        )
