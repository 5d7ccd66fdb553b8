"""Authentication service: password hashing, login, admin bootstrap."""

import bcrypt
from sqlalchemy.orm import Session

from ..config import settings
from .models import User, UserRole


def hash_password(password: str) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt()).decode()


def verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def get_user_by_email(db: Session, email: str) -> User | None:
    return db.query(User).filter(User.email == email.strip().lower()).first()


def authenticate_user(db: Session, email: str, password: str) -> User | None:
    """Verify credentials and return the active user, or None if invalid."""
    user = get_user_by_email(db, email)
    if not user or not user.is_active or not verify_password(password, user.password_hash):
        return None
    return user


def create_user(db: Session, email: str, password: str, name: str = "", role: UserRole = UserRole.CUSTOMER) -> User:
    user = User(
        email=email.strip().lower(),
        name=name,
        password_hash=hash_password(password),
        role=role,
    )
    db.add(user)
    db.flush()
    return user


def list_admin_users(db: Session) -> list[User]:
    """Active administrators, the recipients of internal broadcast alerts."""
    return (
        db.query(User)
        .filter(User.role == UserRole.ADMIN, User.is_active == True)  # noqa: E712
        .order_by(User.created_at.asc())
        .all()
    )


def ensure_admin_user(db: Session) -> None:
    """Create the bootstrap admin from env vars if it doesn't exist yet."""
    if not settings.admin_email or not settings.admin_password:
        return

    if get_user_by_email(db, settings.admin_email):
        return

    create_user(db, settings.admin_email, settings.admin_password, settings.admin_name, UserRole.ADMIN)
