"""Workflow status routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database import get_db
from ..dependencies import get_current_user
from .schemas import WorkflowStatusResponse
from .service import list_active_statuses

router = APIRouter(tags=["workflow"])


@router.get("/workflow/statuses", response_model=list[WorkflowStatusResponse])
def list_statuses(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_active_statuses(db)
