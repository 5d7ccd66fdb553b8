"""Job request/response schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class JobFileIn(BaseModel):
    file_path: str = Field(..., min_length=1, max_length=500)
    description: str = ""


class JobSubmitRequest(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str = ""
    service_id: int | None = None
    customer_id: str | None = None  # required when staff submit on a customer's behalf
    delivery_method: str = Field("Collection", max_length=50)
    delivery_address: str = ""
    quantity: int = Field(1, ge=1)
    due_date: datetime | None = None
    files: list[JobFileIn] = []
    finishing_options: list[str] = []


class JobResponse(BaseModel):
    id: int
    title: str | None
    description: str | None
    service_id: int | None
    customer_id: str
    current_status: int
    status: str | None
    delivery_method: str | None
    delivery_address: str | None
    quantity: int | None
    tracking_code: str
    due_date: datetime | None
    actual_completion: datetime | None
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_job(cls, job) -> "JobResponse":
        return cls(
            id=job.id,
            title=job.title,
            description=job.description,
            service_id=job.service_id,
            customer_id=str(job.customer_id),
            current_status=job.current_status,
            status=job.status,
            delivery_method=job.delivery_method,
            delivery_address=job.delivery_address,
            quantity=job.quantity,
            tracking_code=job.tracking_code,
            due_date=job.due_date,
            actual_completion=job.actual_completion,
            created_at=job.created_at,
            updated_at=job.updated_at,
        )
