"""Job lifecycle: submission, forward status progression, cancellation, tracking.

Status changes are committed before any customer notification goes out, and a
failed notification never undoes a committed transition.
"""

import enum
import logging
import secrets
from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from ..config import settings
from ..notifications.service import notify_job_submitted, notify_status_update
from ..workflow.models import CANCELLED_SEQUENCE, WorkflowStatus
from ..workflow.service import (
    compute_next_status,
    get_cancelled_status,
    get_final_status,
    get_initial_status,
    get_status,
    list_active_statuses,
)
from .models import Job, JobFile, JobFinishingOption, JobHistory

logger = logging.getLogger(__name__)


class TransitionOutcome(enum.StrEnum):
    ADVANCED = "advanced"
    CANCELLED = "cancelled"
    FINAL_STAGE = "final_stage"
    REJECTED = "rejected"
    NO_STATUS = "no_status"


@dataclass
class TransitionResult:
    outcome: TransitionOutcome
    job: Job
    status: WorkflowStatus | None = None
    message: str = ""

    @property
    def changed(self) -> bool:
        return self.outcome in (TransitionOutcome.ADVANCED, TransitionOutcome.CANCELLED)


def generate_tracking_code() -> str:
    return f"PS{datetime.now(UTC):%y%m%d}{secrets.token_hex(3).upper()}"


# ── Queries ────────────────────────────────────────────────────────────


def get_job(db: Session, job_id: int) -> Job | None:
    return db.get(Job, job_id)


def get_job_by_tracking_code(db: Session, tracking_code: str) -> Job | None:
    code = (tracking_code or "").strip().upper()
    if not code:
        return None
    return db.query(Job).filter(Job.tracking_code == code).first()


def list_jobs(
    db: Session,
    *,
    status: str | None = None,
    customer_id: UUID | None = None,
    limit: int = 50,
    offset: int = 0,
) -> list[Job]:
    query = db.query(Job)
    if status:
        query = query.filter(Job.status == status)
    if customer_id is not None:
        query = query.filter(Job.customer_id == customer_id)
    return query.order_by(Job.created_at.desc(), Job.id.desc()).offset(offset).limit(limit).all()


# ── Submission ─────────────────────────────────────────────────────────


def submit_job(
    db: Session,
    customer_id: UUID,
    *,
    title: str,
    description: str = "",
    service_id: int | None = None,
    delivery_method: str = "Collection",
    delivery_address: str = "",
    quantity: int = 1,
    due_date: datetime | None = None,
    files: list[dict] | None = None,
    finishing_options: list[str] | None = None,
    created_by: UUID | None = None,
) -> Job:
    """Create a job at the first workflow stage and record its initial history row."""
    initial = get_initial_status(db)

    job = Job(
        title=title,
        description=description,
        service_id=service_id,
        customer_id=customer_id,
        current_status=initial.id,
        status=initial.name,
        delivery_method=delivery_method,
        delivery_address=delivery_address,
        quantity=quantity,
        due_date=due_date,
        tracking_code=generate_tracking_code(),
        created_by=created_by,
    )
    for f in files or []:
        job.files.append(JobFile(file_path=f["file_path"], description=f.get("description", "")))
    for name in finishing_options or []:
        job.finishing_options.append(JobFinishingOption(name=name))
    job.history.append(JobHistory(status_id=initial.id, changed_by=created_by))

    db.add(job)
    db.flush()
    logger.info("Job %s submitted (%s) at status %s", job.id, job.tracking_code, initial.name)
    return job


# ── Transitions ────────────────────────────────────────────────────────


def _apply_status(db: Session, job: Job, expected_status_id: int, new_status: WorkflowStatus, changed_by) -> bool:
    """Compare-and-swap the job's status. Returns False if another writer got there first."""
    now = datetime.now(UTC)
    values = {
        Job.current_status: new_status.id,
        Job.status: new_status.name,
        Job.updated_at: now,
    }
    final = get_final_status(list_active_statuses(db))
    if final is not None and final.id == new_status.id:
        values[Job.actual_completion] = now

    updated = (
        db.query(Job)
        .filter(Job.id == job.id, Job.current_status == expected_status_id)
        .update(values, synchronize_session=False)
    )
    if not updated:
        return False

    db.add(JobHistory(job_id=job.id, status_id=new_status.id, changed_by=changed_by))
    db.flush()
    db.refresh(job)
    return True


def advance_job(db: Session, job: Job, changed_by: UUID | None = None) -> TransitionResult:
    """Move the job exactly one stage forward in the workflow sequence."""
    statuses = list_active_statuses(db)
    current = get_status(db, job.current_status)

    if current is None:
        return TransitionResult(TransitionOutcome.NO_STATUS, job, None, "Current workflow status could not be resolved")
    if current.is_cancelled_sentinel:
        return TransitionResult(TransitionOutcome.REJECTED, job, current, "Job has been cancelled")
    if not current.is_active:
        return TransitionResult(TransitionOutcome.NO_STATUS, job, current, f"Status {current.name} is no longer active")

    next_status = compute_next_status(statuses, current.id)
    if next_status is None:
        return TransitionResult(TransitionOutcome.FINAL_STAGE, job, current, "Job is already at the final stage")

    if not _apply_status(db, job, current.id, next_status, changed_by):
        return TransitionResult(TransitionOutcome.REJECTED, job, current, "Job status was changed by another request")

    logger.info("Job %s advanced %s -> %s", job.id, current.name, next_status.name)
    return TransitionResult(TransitionOutcome.ADVANCED, job, next_status, f"Status updated to {next_status.name}")


def cancel_job(db: Session, job: Job, changed_by: UUID | None = None) -> TransitionResult:
    """Jump to the Cancelled sentinel while the job is still in an early stage."""
    current = get_status(db, job.current_status)
    if current is None:
        return TransitionResult(TransitionOutcome.NO_STATUS, job, None, "Current workflow status could not be resolved")
    if current.is_cancelled_sentinel:
        return TransitionResult(TransitionOutcome.REJECTED, job, current, "Job is already cancelled")

    final = get_final_status(list_active_statuses(db))
    if final is not None and final.id == current.id:
        return TransitionResult(TransitionOutcome.REJECTED, job, current, "A completed job cannot be cancelled")
    if current.name not in settings.cancellable_statuses:
        return TransitionResult(
            TransitionOutcome.REJECTED,
            job,
            current,
            f"Too late to cancel: job is already {current.name}",
        )

    cancelled = get_cancelled_status(db)
    if not _apply_status(db, job, current.id, cancelled, changed_by):
        return TransitionResult(TransitionOutcome.REJECTED, job, current, "Job status was changed by another request")

    logger.info("Job %s cancelled from %s", job.id, current.name)
    return TransitionResult(TransitionOutcome.CANCELLED, job, cancelled, "Job cancelled")


def advance_and_notify(db: Session, job: Job, changed_by: UUID | None = None) -> TransitionResult:
    result = advance_job(db, job, changed_by)
    if result.changed:
        db.commit()
        notify_status_update(db, job, result.status.name)
    return result


def cancel_and_notify(db: Session, job: Job, changed_by: UUID | None = None) -> TransitionResult:
    result = cancel_job(db, job, changed_by)
    if result.changed:
        db.commit()
        notify_status_update(db, job, result.status.name)
    return result


def submit_and_notify(db: Session, customer_id: UUID, **fields) -> Job:
    job = submit_job(db, customer_id, **fields)
    db.commit()
    notify_job_submitted(db, job)
    return job


# ── Deletion ───────────────────────────────────────────────────────────


def delete_job(db: Session, job_id: int) -> bool:
    """Delete a job together with its schedules, files, finishing options and history."""
    job = db.get(Job, job_id)
    if job is None:
        return False
    db.delete(job)
    db.flush()
    logger.info("Job %s deleted", job_id)
    return True


# ── Public tracking ────────────────────────────────────────────────────


def tracking_summary(db: Session, job: Job) -> dict:
    """Unauthenticated view of a job's progress."""
    statuses = [s for s in list_active_statuses(db) if s.sequence > 0]
    current = get_status(db, job.current_status)
    cancelled = current is not None and current.is_cancelled_sentinel

    steps = [
        {
            "name": s.name,
            "sequence": s.sequence,
            "reached": bool(current) and not cancelled and s.sequence <= current.sequence,
        }
        for s in statuses
    ]
    return {
        "tracking_code": job.tracking_code,
        "title": job.title,
        "status": current.name if current else job.status,
        "cancelled": cancelled,
        "delivery_method": job.delivery_method,
        "created_at": job.created_at.isoformat() if job.created_at else None,
        "updated_at": job.updated_at.isoformat() if job.updated_at else None,
        "actual_completion": job.actual_completion.isoformat() if job.actual_completion else None,
        "steps": steps,
    }


# ── Dashboard ──────────────────────────────────────────────────────────


def workflow_stats(db: Session) -> dict:
    """Job counts bucketed by workflow position."""
    counts = (
        db.query(WorkflowStatus.name, WorkflowStatus.sequence, func.count(Job.id))
        .join(Job, Job.current_status == WorkflowStatus.id)
        .group_by(WorkflowStatus.id, WorkflowStatus.name, WorkflowStatus.sequence)
        .all()
    )
    total = db.query(Job).count()

    pending = completed = cancelled = 0
    for name, sequence, count in counts:
        if sequence == CANCELLED_SEQUENCE:
            cancelled += count
        elif name in settings.pending_statuses:
            pending += count
        elif name in settings.completed_statuses:
            completed += count

    return {
        "total_jobs": total,
        "pending_jobs": pending,
        "active_jobs": total - pending - completed - cancelled,
        "completed_jobs": completed,
        "cancelled_jobs": cancelled,
    }
