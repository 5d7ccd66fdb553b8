"""Delivery scheduling routes (staff only)."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database import get_db
from ..dependencies import require_staff
from ..jobs.service import get_job
from .schemas import DeliveryScheduleRequest, DeliveryScheduleResponse, DeliveryStatusUpdate
from .service import get_schedule, list_schedules_for_job, schedule_and_notify, update_status_and_notify

router = APIRouter(tags=["delivery"])


@router.post("/jobs/{job_id}/deliveries")
def create_delivery(
    job_id: int,
    payload: DeliveryScheduleRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    job = get_job(db, job_id)
    if job is None:
        return JSONResponse({"error": "Job not found"}, status_code=404)
    schedule = schedule_and_notify(
        db,
        job,
        payload.scheduled_date,
        delivery_address=payload.delivery_address,
        notes=payload.notes,
    )
    return JSONResponse(
        {"ok": True, "delivery": DeliveryScheduleResponse.from_schedule(schedule).model_dump(mode="json")},
        status_code=201,
    )


@router.get("/jobs/{job_id}/deliveries")
def job_deliveries(
    job_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    schedules = list_schedules_for_job(db, job_id)
    return JSONResponse(
        {"deliveries": [DeliveryScheduleResponse.from_schedule(s).model_dump(mode="json") for s in schedules]}
    )


@router.patch("/deliveries/{schedule_id}")
def change_delivery_status(
    schedule_id: str,
    payload: DeliveryStatusUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    schedule = get_schedule(db, schedule_id)
    if schedule is None:
        return JSONResponse({"error": "Delivery schedule not found"}, status_code=404)
    schedule = update_status_and_notify(db, schedule, payload.delivery_status)
    return JSONResponse({"ok": True, "delivery": DeliveryScheduleResponse.from_schedule(schedule).model_dump(mode="json")})
