"""Shared FastAPI dependencies."""

from uuid import UUID

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from .auth.models import User, UserRole
from .customers.models import Customer
from .database import get_db


class AuthRequired(Exception):
    """Raised when user is not authenticated. Handled by exception handler in main.py."""

    pass


class PermissionDenied(Exception):
    """Raised when an authenticated user lacks the required role."""

    pass


def get_current_user(request: Request, db: Session = Depends(get_db)) -> User:
    """Get the authenticated user from the session cookie."""
    user_id_str = request.session.get("user_id")
    if not user_id_str:
        raise AuthRequired()
    try:
        user_id = UUID(user_id_str)
    except (ValueError, AttributeError):
        request.session.clear()
        raise AuthRequired()
    user = db.query(User).filter(User.id == user_id).first()
    if not user or not user.is_active:
        request.session.clear()
        raise AuthRequired()
    return user


def require_staff(user: User = Depends(get_current_user)) -> User:
    if not user.is_staff:
        raise PermissionDenied()
    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    if user.role != UserRole.ADMIN:
        raise PermissionDenied()
    return user


def get_current_customer(user: User = Depends(get_current_user), db: Session = Depends(get_db)) -> Customer:
    """Customer profile linked to the logged-in account."""
    customer = db.query(Customer).filter(Customer.user_id == user.id).first()
    if not customer:
        raise PermissionDenied()
    return customer
