"""Public job tracking (no authentication)."""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..database import get_db
from ..rate_limit import TRACKING_RATE_LIMIT, limiter
from .service import get_job_by_tracking_code, tracking_summary

router = APIRouter(tags=["tracking"])


@router.get("/track/{tracking_code}")
@limiter.limit(TRACKING_RATE_LIMIT)
def track_job(request: Request, tracking_code: str, db: Session = Depends(get_db)):
    job = get_job_by_tracking_code(db, tracking_code)
    if job is None:
        return JSONResponse({"error": "Tracking code not found"}, status_code=404)
    return JSONResponse(tracking_summary(db, job))
