"""Workflow state store access.

Read-only helpers over the ordered ``workflow_status`` table. Lookups fail
closed: an unreachable store yields an empty sequence so callers simply offer
no status transitions.
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .models import CANCELLED_SEQUENCE, WorkflowStatus

logger = logging.getLogger(__name__)

DEFAULT_STATUSES: list[tuple[str, str, int]] = [
    ("Pending", "Job received, awaiting processing", 1),
    ("Received", "Job confirmed and files received", 2),
    ("Processing", "Preparing files for printing", 3),
    ("Printing", "Currently being printed", 4),
    ("Finishing", "Adding finishing touches", 5),
    ("Waiting for Collection", "Ready for customer pickup", 6),
    ("Out for Delivery", "Being delivered to customer", 7),
    ("Completed", "Job completed successfully", 8),
    ("Cancelled", "Job was cancelled", CANCELLED_SEQUENCE),
]


class WorkflowConfigurationError(Exception):
    """The configured workflow is missing a status the lifecycle depends on."""

    pass


def list_active_statuses(db: Session) -> list[WorkflowStatus]:
    """Active statuses ascending by sequence, or [] if the store is unreachable."""
    try:
        return (
            db.query(WorkflowStatus)
            .filter(WorkflowStatus.is_active == True)  # noqa: E712
            .order_by(WorkflowStatus.sequence.asc(), WorkflowStatus.id.asc())
            .all()
        )
    except SQLAlchemyError:
        logger.warning("Workflow status store unreachable, treating sequence as empty", exc_info=True)
        db.rollback()
        return []


def get_status(db: Session, status_id: int | None) -> WorkflowStatus | None:
    if status_id is None:
        return None
    return db.get(WorkflowStatus, status_id)


def get_cancelled_status(db: Session) -> WorkflowStatus:
    """Resolve the Cancelled sentinel. Raises if the workflow does not define one."""
    status = (
        db.query(WorkflowStatus)
        .filter(
            WorkflowStatus.sequence == CANCELLED_SEQUENCE,
            WorkflowStatus.is_active == True,  # noqa: E712
        )
        .first()
    )
    if status is None:
        raise WorkflowConfigurationError("No Cancelled status (sequence 0) is configured")
    return status


def get_initial_status(db: Session) -> WorkflowStatus:
    """Lowest-sequence active status, where newly submitted jobs start."""
    progression = [s for s in list_active_statuses(db) if s.sequence > CANCELLED_SEQUENCE]
    if not progression:
        raise WorkflowConfigurationError("No active workflow statuses are configured")
    return progression[0]


def get_final_status(statuses: list[WorkflowStatus]) -> WorkflowStatus | None:
    progression = [s for s in statuses if s.sequence > CANCELLED_SEQUENCE]
    return progression[-1] if progression else None


def compute_next_status(statuses: list[WorkflowStatus], current_status_id: int | None) -> WorkflowStatus | None:
    """Return the status one step after ``current_status_id``, or None.

    None means either the current status is unknown (no fallback is guessed),
    the job sits on the Cancelled sentinel, or it is already at the final
    stage. Gaps in the sequence also end progression.
    """
    current = next((s for s in statuses if s.id == current_status_id), None)
    if current is None or current.sequence == CANCELLED_SEQUENCE:
        return None

    target = current.sequence + 1
    for status in statuses:
        if status.sequence > CANCELLED_SEQUENCE and status.sequence == target:
            return status
    return None


def seed_default_statuses(db: Session) -> int:
    """Insert the default print workflow when the table is empty. Returns rows added."""
    if db.query(WorkflowStatus).first() is not None:
        return 0

    for name, description, sequence in DEFAULT_STATUSES:
        db.add(WorkflowStatus(name=name, description=description, sequence=sequence, is_active=True))
    db.flush()
    logger.info("Seeded %d default workflow statuses", len(DEFAULT_STATUSES))
    return len(DEFAULT_STATUSES)
