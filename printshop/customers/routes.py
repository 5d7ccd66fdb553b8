"""Customer routes."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from ..auth.models import User
from ..database import get_db
from ..dependencies import require_staff
from .schemas import CustomerCreateRequest, CustomerResponse
from .service import create_customer, get_customer

router = APIRouter(tags=["customers"])


@router.post("/customers")
def add_customer(
    payload: CustomerCreateRequest,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    customer = create_customer(db, payload.name, payload.email, payload.phone, payload.address)
    db.commit()
    return JSONResponse(
        {"ok": True, "customer": CustomerResponse.from_customer(customer).model_dump()},
        status_code=201,
    )


@router.get("/customers/{customer_id}")
def customer_detail(
    customer_id: str,
    db: Session = Depends(get_db),
    user: User = Depends(require_staff),
):
    customer = get_customer(db, customer_id)
    if customer is None:
        return JSONResponse({"error": "Customer not found"}, status_code=404)
    return CustomerResponse.from_customer(customer).model_dump()
