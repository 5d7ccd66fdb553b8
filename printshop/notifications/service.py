"""Notification dispatch: preference-gated email/SMS fan-out with per-attempt logging.

Every channel attempt writes exactly one ``NotificationLog`` row, whether the
provider accepted the message or not. Provider errors are collected per
channel and never stop the sibling channel. Log writes are best-effort: a
failure there is reported to the log stream and otherwise ignored.
"""

import logging
from dataclasses import dataclass, field
from typing import Literal

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..auth.service import list_admin_users
from ..config import settings
from ..customers.models import Customer
from ..customers.service import get_customer
from ..integrations.email_provider import send_email
from ..integrations.sms_gateway import normalize_phone, send_sms
from ..jobs.models import Job
from ..workflow.models import CANCELLED_SEQUENCE
from ..workflow.service import get_status, list_active_statuses
from .models import NotificationLog, NotificationPreference
from .rendering import ProgressStep, render_job_progress_email, render_plain_email

logger = logging.getLogger(__name__)

ADMIN_RECIPIENT = "admin"

JOB_EVENTS = frozenset({"job_submitted", "status_updated", "admin_job_submitted"})
DELIVERY_EVENTS = frozenset({"delivery_scheduled", "delivery_completed", "delivery_status_update"})
# Events whose email carries the job progress card and tracking QR code
RICH_EMAIL_EVENTS = frozenset({"job_submitted", "status_updated"})

ChannelChoice = Literal["email", "sms", "both"]

PREFERENCE_FIELDS = (
    "email_notifications",
    "sms_notifications",
    "job_status_updates",
    "delivery_updates",
    "promotional_messages",
)


@dataclass
class DispatchResult:
    email_sent: bool = False
    sms_sent: bool = False
    errors: list[str] = field(default_factory=list)
    customer_name: str | None = None
    admin_notifications_sent: int | None = None

    @property
    def success(self) -> bool:
        return self.email_sent or self.sms_sent

    def to_dict(self) -> dict:
        data: dict = {
            "success": self.success,
            "email_sent": self.email_sent,
            "sms_sent": self.sms_sent,
        }
        if self.errors:
            data["errors"] = list(self.errors)
        if self.customer_name is not None:
            data["customer_name"] = self.customer_name
        if self.admin_notifications_sent is not None:
            data["admin_notifications_sent"] = self.admin_notifications_sent
        return data


# ── Preferences ────────────────────────────────────────────────────────


def get_or_create_preferences(db: Session, customer: Customer) -> NotificationPreference:
    """Load the customer's preferences, creating the default row on first access."""
    prefs = db.query(NotificationPreference).filter(NotificationPreference.customer_id == customer.id).first()
    if prefs is None:
        prefs = NotificationPreference(
            customer_id=customer.id,
            email_notifications=True,
            sms_notifications=False,
            job_status_updates=True,
            delivery_updates=True,
            promotional_messages=False,
        )
        db.add(prefs)
        db.flush()
    return prefs


def update_preferences(db: Session, customer: Customer, **changes: bool) -> NotificationPreference:
    prefs = get_or_create_preferences(db, customer)
    for name, value in changes.items():
        if name not in PREFERENCE_FIELDS:
            raise ValueError(f"Unknown preference: {name}")
        if value is not None:
            setattr(prefs, name, bool(value))
    db.flush()
    return prefs


# ── Eligibility ────────────────────────────────────────────────────────


def classify_event(event: str) -> tuple[bool, bool]:
    """Return (is_job_event, is_delivery_event)."""
    return event in JOB_EVENTS, event in DELIVERY_EVENTS


def channel_eligibility(prefs: NotificationPreference, event: str) -> tuple[bool, bool]:
    """Return (email_eligible, sms_eligible). Unknown events disable both channels."""
    is_job, is_delivery = classify_event(event)
    topic_enabled = (is_job and bool(prefs.job_status_updates)) or (is_delivery and bool(prefs.delivery_updates))
    return bool(prefs.email_notifications) and topic_enabled, bool(prefs.sms_notifications) and topic_enabled


def _wants(channels: ChannelChoice, channel: str) -> bool:
    return channels == "both" or channels == channel


# ── Logging ────────────────────────────────────────────────────────────


def _record_attempt(db: Session, **fields) -> None:
    """Append one log row and commit it on its own. Never raises."""
    try:
        db.add(NotificationLog(**fields))
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.warning(
            "Failed to write notification log (%s/%s for %s)",
            fields.get("notification_type"),
            fields.get("notification_event"),
            fields.get("customer_id"),
            exc_info=True,
        )


# ── Rendering ──────────────────────────────────────────────────────────


def _progress_steps(db: Session, current_sequence: int) -> list[ProgressStep]:
    return [
        ProgressStep(name=s.name, reached=s.sequence <= current_sequence)
        for s in list_active_statuses(db)
        if s.sequence > CANCELLED_SEQUENCE
    ]


def _build_email_html(db: Session, event: str, subject: str, message: str, job_id: int | None) -> str:
    """Rich job card for job submissions and status updates, plain body otherwise."""
    if event in RICH_EMAIL_EVENTS and job_id is not None:
        try:
            job = db.get(Job, job_id)
            if job is None:
                raise LookupError(f"job {job_id} not found")
            status = get_status(db, job.current_status)
            status_name = status.name if status else (job.status or "Unknown")
            steps = [] if status is None or status.is_cancelled_sentinel else _progress_steps(db, status.sequence)
            return render_job_progress_email(
                subject,
                message,
                job_title=job.title or f"Job #{job.id}",
                tracking_code=job.tracking_code,
                status_name=status_name,
                steps=steps,
            )
        except Exception:
            logger.warning("Job details unavailable for job %s, sending plain email", job_id, exc_info=True)
    return render_plain_email(subject, message)


# ── Dispatch ───────────────────────────────────────────────────────────


def _broadcast_to_admins(
    db: Session,
    event: str,
    subject: str,
    message: str,
    job_id: int | None,
    delivery_schedule_id: str | None,
) -> DispatchResult:
    result = DispatchResult(admin_notifications_sent=0)
    html = render_plain_email(subject, message)

    for admin in list_admin_users(db):
        try:
            external_id = send_email(admin.email, subject, html)
        except Exception as e:
            result.errors.append(f"Email failed for {admin.email}: {e}")
            logger.warning("Admin alert to %s failed: %s", admin.email, e)
            _record_attempt(
                db,
                customer_id=ADMIN_RECIPIENT,
                notification_type="email",
                notification_event=event,
                recipient_email=admin.email,
                subject=subject,
                message=message,
                status="failed",
                error_message=str(e),
                job_id=job_id,
                delivery_schedule_id=delivery_schedule_id,
            )
            continue

        result.email_sent = True
        result.admin_notifications_sent += 1
        _record_attempt(
            db,
            customer_id=ADMIN_RECIPIENT,
            notification_type="email",
            notification_event=event,
            recipient_email=admin.email,
            subject=subject,
            message=message,
            status="sent",
            external_id=external_id,
            job_id=job_id,
            delivery_schedule_id=delivery_schedule_id,
        )

    logger.info("Admin broadcast %s: %d sent, %d failed", event, result.admin_notifications_sent, len(result.errors))
    return result


def dispatch(
    db: Session,
    customer_id: str,
    event: str,
    message: str,
    *,
    subject: str | None = None,
    job_id: int | None = None,
    delivery_schedule_id: str | None = None,
    channels: ChannelChoice = "both",
) -> DispatchResult:
    """Deliver ``message`` to a customer over every enabled, requested channel.

    ``customer_id == "admin"`` broadcasts the email variant to all active
    administrators without preference gating. A missing contact value or a
    disabled preference skips the channel silently.
    """
    subject = subject or f"Notification from {settings.company_name}"
    schedule_ref = str(delivery_schedule_id) if delivery_schedule_id is not None else None
    logger.info("Processing notification: channels=%s customer=%s event=%s", channels, customer_id, event)

    if str(customer_id) == ADMIN_RECIPIENT:
        return _broadcast_to_admins(db, event, subject, message, job_id, schedule_ref)

    customer = get_customer(db, customer_id)
    if customer is None:
        logger.warning("Notification skipped: customer %s not found", customer_id)
        return DispatchResult(errors=["Customer not found"])

    prefs = get_or_create_preferences(db, customer)
    email_eligible, sms_eligible = channel_eligibility(prefs, event)
    result = DispatchResult(customer_name=customer.name)
    log_customer = str(customer.id)

    if _wants(channels, "email") and email_eligible and customer.email:
        try:
            html = _build_email_html(db, event, subject, message, job_id)
            external_id = send_email(customer.email, subject, html)
        except Exception as e:
            result.errors.append(f"Email failed: {e}")
            logger.warning("Email to customer %s failed: %s", log_customer, e)
            _record_attempt(
                db,
                customer_id=log_customer,
                notification_type="email",
                notification_event=event,
                recipient_email=customer.email,
                subject=subject,
                message=message,
                status="failed",
                error_message=str(e),
                job_id=job_id,
                delivery_schedule_id=schedule_ref,
            )
        else:
            result.email_sent = True
            logger.info("Email sent to customer %s (id=%s)", log_customer, external_id)
            _record_attempt(
                db,
                customer_id=log_customer,
                notification_type="email",
                notification_event=event,
                recipient_email=customer.email,
                subject=subject,
                message=message,
                status="sent",
                external_id=external_id,
                job_id=job_id,
                delivery_schedule_id=schedule_ref,
            )

    if _wants(channels, "sms") and sms_eligible and customer.phone:
        phone = normalize_phone(customer.phone)
        try:
            external_id = send_sms(customer.phone, message)
        except Exception as e:
            result.errors.append(f"SMS failed: {e}")
            logger.warning("SMS to customer %s failed: %s", log_customer, e)
            _record_attempt(
                db,
                customer_id=log_customer,
                notification_type="sms",
                notification_event=event,
                recipient_phone=phone,
                message=message,
                status="failed",
                error_message=str(e),
                job_id=job_id,
                delivery_schedule_id=schedule_ref,
            )
        else:
            result.sms_sent = True
            logger.info("SMS sent to customer %s (id=%s)", log_customer, external_id)
            _record_attempt(
                db,
                customer_id=log_customer,
                notification_type="sms",
                notification_event=event,
                recipient_phone=phone,
                message=message,
                status="sent",
                external_id=external_id,
                job_id=job_id,
                delivery_schedule_id=schedule_ref,
            )

    return result


def dispatch_safely(db: Session, customer_id: str, event: str, message: str, **options) -> DispatchResult | None:
    """``dispatch`` for side-effect callers: errors are logged, never raised."""
    try:
        return dispatch(db, customer_id, event, message, **options)
    except Exception:
        db.rollback()
        logger.exception("Notification dispatch failed for %s (%s)", customer_id, event)
        return None


# ── Event messages ─────────────────────────────────────────────────────


def notify_job_submitted(db: Session, job: Job) -> DispatchResult | None:
    title = job.title or f"Job #{job.id}"
    customer_result = dispatch_safely(
        db,
        str(job.customer_id),
        "job_submitted",
        f'Your print job "{title}" has been submitted successfully. '
        f"We'll notify you when it's ready for pickup or delivery. Tracking code: {job.tracking_code}",
        subject=f"Job Submitted Successfully - {title}",
        job_id=job.id,
    )
    dispatch_safely(
        db,
        ADMIN_RECIPIENT,
        "admin_job_submitted",
        f'A new print job "{title}" ({job.tracking_code}) has been submitted.',
        subject=f"New Job Submitted - {title}",
        job_id=job.id,
        channels="email",
    )
    return customer_result


def notify_status_update(db: Session, job: Job, status_name: str) -> DispatchResult | None:
    title = job.title or f"Job #{job.id}"
    return dispatch_safely(
        db,
        str(job.customer_id),
        "status_updated",
        f'Your print job "{title}" status has been updated to: {status_name}',
        subject=f"Job Status Update - {title}",
        job_id=job.id,
    )


def list_logs(
    db: Session,
    *,
    customer_id: str | None = None,
    status: str | None = None,
    job_id: int | None = None,
    limit: int = 100,
    offset: int = 0,
) -> list[NotificationLog]:
    query = db.query(NotificationLog)
    if customer_id:
        query = query.filter(NotificationLog.customer_id == customer_id)
    if status:
        query = query.filter(NotificationLog.status == status)
    if job_id is not None:
        query = query.filter(NotificationLog.job_id == job_id)
    return query.order_by(NotificationLog.sent_at.desc()).offset(offset).limit(limit).all()
