"""Shared test fixtures."""

import uuid

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from printshop.auth.models import User, UserRole
from printshop.customers.models import Customer
from printshop.database.base import Base
from printshop.delivery.models import DeliverySchedule
from printshop.jobs.models import Job, JobFile, JobFinishingOption, JobHistory
from printshop.notifications.models import NotificationLog, NotificationPreference
from printshop.workflow.models import WorkflowStatus
from printshop.workflow.service import seed_default_statuses

# Models must be imported so Base.metadata.create_all() sees all tables.
_ALL_MODELS = [
    User,
    Customer,
    WorkflowStatus,
    Job,
    JobFile,
    JobFinishingOption,
    JobHistory,
    DeliverySchedule,
    NotificationLog,
    NotificationPreference,
]


@pytest.fixture
def db_session():
    """Create an in-memory SQLite database for testing."""
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    TestSession = sessionmaker(bind=engine)
    session = TestSession()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def workflow(db_session):
    """Default print workflow keyed by status name."""
    seed_default_statuses(db_session)
    db_session.commit()
    return {s.name: s for s in db_session.query(WorkflowStatus).all()}


@pytest.fixture
def admin_user(db_session):
    user = User(
        id=uuid.uuid4(),
        email="admin@printshop.test",
        name="Admin",
        password_hash="$2b$12$fakehash",
        role=UserRole.ADMIN,
    )
    db_session.add(user)
    db_session.commit()
    return user


@pytest.fixture
def test_customer(db_session):
    customer = Customer(
        id=uuid.uuid4(),
        customer_display_id="CUST-0001",
        name="Aminata Kamara",
        email="aminata@example.com",
        phone="076123456",
    )
    db_session.add(customer)
    db_session.commit()
    return customer


def make_job(db_session, customer, status, title="Business Cards", tracking_code=None):
    job = Job(
        title=title,
        customer_id=customer.id,
        current_status=status.id,
        status=status.name,
        tracking_code=tracking_code or f"PS{uuid.uuid4().hex[:8].upper()}",
    )
    db_session.add(job)
    db_session.commit()
    return job


@pytest.fixture
def test_job(db_session, test_customer, workflow):
    """A job sitting at Received."""
    return make_job(db_session, test_customer, workflow["Received"], tracking_code="PS260101ABCDEF")
