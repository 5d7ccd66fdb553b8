"""Customer lookups."""

from uuid import UUID

from sqlalchemy.orm import Session

from .models import Customer


def to_uuid(value) -> UUID | None:
    """Convert string to UUID, returning None on failure."""
    if isinstance(value, UUID):
        return value
    if not value:
        return None
    try:
        return UUID(str(value))
    except (ValueError, AttributeError):
        return None


def get_customer(db: Session, customer_id) -> Customer | None:
    uid = to_uuid(customer_id)
    if uid is None:
        return None
    return db.query(Customer).filter(Customer.id == uid).first()


def create_customer(
    db: Session,
    name: str,
    email: str = "",
    phone: str = "",
    address: str = "",
    user_id: UUID | None = None,
) -> Customer:
    customer = Customer(name=name, email=email, phone=phone, address=address, user_id=user_id)
    db.add(customer)
    db.flush()
    customer.customer_display_id = f"CUST-{customer.id.hex[:8].upper()}"
    db.flush()
    return customer
