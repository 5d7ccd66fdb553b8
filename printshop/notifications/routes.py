"""Notification routes: outbound send, customer preferences, delivery log."""

import logging

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.models import User
from ..customers.models import Customer
from ..database import get_db
from ..dependencies import get_current_customer, require_admin
from .schemas import NotificationLogResponse, NotificationRequest, PreferencesResponse, PreferencesUpdate
from .service import dispatch, get_or_create_preferences, list_logs, update_preferences

logger = logging.getLogger(__name__)

router = APIRouter(tags=["notifications"])


@router.post("/notifications/send")
def send_notification(
    payload: NotificationRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    try:
        result = dispatch(
            db,
            payload.customer_id,
            payload.event,
            payload.message,
            subject=payload.subject,
            job_id=payload.job_id,
            delivery_schedule_id=payload.delivery_schedule_id,
            channels=payload.type,
        )
        db.commit()
    except Exception as e:
        db.rollback()
        logger.exception("Notification error")
        return JSONResponse({"error": str(e)}, status_code=500)
    return JSONResponse(result.to_dict())


@router.get("/notifications/preferences", response_model=PreferencesResponse)
def read_preferences(
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    prefs = get_or_create_preferences(db, customer)
    db.commit()
    return prefs


@router.put("/notifications/preferences", response_model=PreferencesResponse)
def save_preferences(
    payload: PreferencesUpdate,
    db: Session = Depends(get_db),
    customer: Customer = Depends(get_current_customer),
):
    prefs = update_preferences(db, customer, **payload.model_dump(exclude_none=True))
    db.commit()
    return prefs


@router.get("/notifications/logs")
def notification_logs(
    customer_id: str | None = Query(None),
    status: str | None = Query(None, pattern="^(sent|failed)$"),
    job_id: int | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    logs = list_logs(db, customer_id=customer_id, status=status, job_id=job_id, limit=limit, offset=offset)
    return JSONResponse({"logs": [NotificationLogResponse.from_log(entry).model_dump(mode="json") for entry in logs]})
