"""Job routes: submission, listing, status transitions, deletion."""

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.models import User
from ..customers.models import Customer
from ..customers.service import get_customer
from ..database import get_db
from ..dependencies import PermissionDenied, get_current_user, require_admin, require_staff
from .models import Job
from .schemas import JobResponse, JobSubmitRequest
from .service import (
    TransitionOutcome,
    TransitionResult,
    advance_and_notify,
    cancel_and_notify,
    delete_job,
    get_job,
    list_jobs,
    submit_and_notify,
    workflow_stats,
)

router = APIRouter(tags=["jobs"])

_OUTCOME_STATUS_CODES = {
    TransitionOutcome.ADVANCED: 200,
    TransitionOutcome.CANCELLED: 200,
    TransitionOutcome.FINAL_STAGE: 200,
    TransitionOutcome.REJECTED: 409,
    TransitionOutcome.NO_STATUS: 409,
}


def _customer_for(db: Session, user: User) -> Customer | None:
    return db.query(Customer).filter(Customer.user_id == user.id).first()


def _visible_job(db: Session, job_id: int, user: User) -> Job | None:
    """Staff see every job, customers only their own."""
    job = get_job(db, job_id)
    if job is None:
        return None
    if user.is_staff:
        return job
    customer = _customer_for(db, user)
    if customer is None or customer.id != job.customer_id:
        return None
    return job


def _transition_response(result: TransitionResult) -> JSONResponse:
    body = {
        "ok": result.outcome != TransitionOutcome.REJECTED and result.outcome != TransitionOutcome.NO_STATUS,
        "outcome": result.outcome.value,
        "changed": result.changed,
        "message": result.message,
        "job": JobResponse.from_job(result.job).model_dump(mode="json"),
    }
    if not body["ok"]:
        body["error"] = result.message
    return JSONResponse(body, status_code=_OUTCOME_STATUS_CODES[result.outcome])


@router.post("/jobs")
def create_job(
    payload: JobSubmitRequest,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.is_staff:
        customer = get_customer(db, payload.customer_id)
        if customer is None:
            return JSONResponse({"error": "Customer not found"}, status_code=404)
    else:
        customer = _customer_for(db, user)
        if customer is None:
            raise PermissionDenied()

    job = submit_and_notify(
        db,
        customer.id,
        title=payload.title,
        description=payload.description,
        service_id=payload.service_id,
        delivery_method=payload.delivery_method,
        delivery_address=payload.delivery_address,
        quantity=payload.quantity,
        due_date=payload.due_date,
        files=[f.model_dump() for f in payload.files],
        finishing_options=payload.finishing_options,
        created_by=user.id,
    )
    return JSONResponse({"ok": True, "job": JobResponse.from_job(job).model_dump(mode="json")}, status_code=201)


@router.get("/jobs")
def get_jobs(
    status: str | None = Query(None),
    customer_id: str | None = Query(None),
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    if user.is_staff:
        customer = get_customer(db, customer_id) if customer_id else None
        if customer_id and customer is None:
            return JSONResponse({"jobs": []})
        owner = customer.id if customer else None
    else:
        customer = _customer_for(db, user)
        if customer is None:
            raise PermissionDenied()
        owner = customer.id

    jobs = list_jobs(db, status=status, customer_id=owner, limit=limit, offset=offset)
    return JSONResponse({"jobs": [JobResponse.from_job(j).model_dump(mode="json") for j in jobs]})


@router.get("/jobs/stats")
def job_stats(
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    return JSONResponse(workflow_stats(db))


@router.get("/jobs/{job_id}")
def get_job_detail(
    job_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    job = _visible_job(db, job_id, user)
    if job is None:
        return JSONResponse({"error": "Job not found"}, status_code=404)
    return JobResponse.from_job(job).model_dump(mode="json")


@router.post("/jobs/{job_id}/advance")
def advance(
    job_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    job = get_job(db, job_id)
    if job is None:
        return JSONResponse({"error": "Job not found"}, status_code=404)
    return _transition_response(advance_and_notify(db, job, changed_by=user.id))


@router.post("/jobs/{job_id}/cancel")
def cancel(
    job_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    job = _visible_job(db, job_id, user)
    if job is None:
        return JSONResponse({"error": "Job not found"}, status_code=404)
    return _transition_response(cancel_and_notify(db, job, changed_by=user.id))


@router.delete("/jobs/{job_id}")
def remove_job(
    job_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    if not delete_job(db, job_id):
        return JSONResponse({"error": "Job not found"}, status_code=404)
    db.commit()
    return JSONResponse({"ok": True})
