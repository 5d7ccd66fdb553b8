"""Delivery scheduling and status updates, with customer notifications."""

import logging
from datetime import UTC, datetime

from sqlalchemy.orm import Session

from ..customers.service import to_uuid
from ..jobs.models import Job
from ..notifications.service import DispatchResult, dispatch_safely
from .models import DeliverySchedule, DeliveryStatus

logger = logging.getLogger(__name__)

# delivery status -> (event, message template); statuses absent here send nothing
_STATUS_MESSAGES: dict[DeliveryStatus, tuple[str, str]] = {
    DeliveryStatus.IN_TRANSIT: (
        "delivery_status_update",
        'Your delivery for "{title}" ({code}) is now in transit.',
    ),
    DeliveryStatus.DELIVERED: (
        "delivery_completed",
        'Your order "{title}" ({code}) has been successfully delivered.',
    ),
    DeliveryStatus.FAILED: (
        "delivery_status_update",
        'Delivery attempt for "{title}" ({code}) failed. We will contact you to reschedule.',
    ),
    DeliveryStatus.CANCELLED: (
        "delivery_status_update",
        'Delivery for "{title}" ({code}) has been cancelled. Please contact us for more information.',
    ),
}


def get_schedule(db: Session, schedule_id: str) -> DeliverySchedule | None:
    uid = to_uuid(schedule_id)
    if uid is None:
        return None
    return db.query(DeliverySchedule).filter(DeliverySchedule.id == uid).first()


def list_schedules_for_job(db: Session, job_id: int) -> list[DeliverySchedule]:
    return (
        db.query(DeliverySchedule)
        .filter(DeliverySchedule.job_id == job_id)
        .order_by(DeliverySchedule.scheduled_date.asc())
        .all()
    )


def schedule_delivery(
    db: Session,
    job: Job,
    scheduled_date: datetime,
    delivery_address: str = "",
    notes: str = "",
) -> DeliverySchedule:
    schedule = DeliverySchedule(
        job_id=job.id,
        scheduled_date=scheduled_date,
        delivery_address=delivery_address or job.delivery_address or "",
        notes=notes,
        delivery_status=DeliveryStatus.SCHEDULED,
    )
    db.add(schedule)
    db.flush()
    logger.info("Delivery %s scheduled for job %s on %s", schedule.id, job.id, scheduled_date.isoformat())
    return schedule


def update_delivery_status(db: Session, schedule: DeliverySchedule, new_status: DeliveryStatus) -> DeliverySchedule:
    schedule.delivery_status = new_status
    if new_status == DeliveryStatus.DELIVERED:
        schedule.actual_delivery_time = datetime.now(UTC)
    db.flush()
    logger.info("Delivery %s marked %s", schedule.id, new_status.value)
    return schedule


def notify_delivery_scheduled(db: Session, schedule: DeliverySchedule) -> DispatchResult | None:
    job = schedule.job
    title = job.title or f"Job #{job.id}"
    when = schedule.scheduled_date.strftime("%d %b %Y %H:%M")
    return dispatch_safely(
        db,
        str(job.customer_id),
        "delivery_scheduled",
        f'Your print job "{title}" has been scheduled for delivery on {when}.',
        subject=f"Delivery Scheduled - {title}",
        job_id=job.id,
        delivery_schedule_id=str(schedule.id),
    )


def notify_delivery_status(db: Session, schedule: DeliverySchedule) -> DispatchResult | None:
    entry = _STATUS_MESSAGES.get(DeliveryStatus(schedule.delivery_status))
    if entry is None:
        return None
    event, template = entry
    job = schedule.job
    title = job.title or f"Job #{job.id}"
    subject = f"Delivery Completed - {title}" if event == "delivery_completed" else "Delivery Status Update"
    return dispatch_safely(
        db,
        str(job.customer_id),
        event,
        template.format(title=title, code=job.tracking_code),
        subject=subject,
        job_id=job.id,
        delivery_schedule_id=str(schedule.id),
    )


def schedule_and_notify(db: Session, job: Job, scheduled_date: datetime, **fields) -> DeliverySchedule:
    schedule = schedule_delivery(db, job, scheduled_date, **fields)
    db.commit()
    notify_delivery_scheduled(db, schedule)
    return schedule


def update_status_and_notify(db: Session, schedule: DeliverySchedule, new_status: DeliveryStatus) -> DeliverySchedule:
    update_delivery_status(db, schedule, new_status)
    db.commit()
    notify_delivery_status(db, schedule)
    return schedule
