"""Print job models and their dependent rows."""

from datetime import UTC, datetime

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text
from sqlalchemy.dialects.postgresql import UUID
from sqlalchemy.orm import relationship

from ..database.base import Base


class Job(Base):
    __tablename__ = "jobs"

    id = Column(Integer, primary_key=True, autoincrement=True)
    title = Column(String(255), default="")
    description = Column(Text, default="")
    service_id = Column(Integer, nullable=True)
    customer_id = Column(
        UUID(as_uuid=True),
        ForeignKey("customers.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )

    # Workflow position; ``status`` mirrors the status name for cheap filtering
    current_status = Column(Integer, ForeignKey("workflow_status.id"), nullable=False)
    status = Column(String(100), default="")

    delivery_method = Column(String(50), default="Collection")
    delivery_address = Column(Text, default="")
    quantity = Column(Integer, default=1)
    tracking_code = Column(String(32), unique=True, nullable=False, index=True)

    due_date = Column(DateTime(timezone=True), nullable=True)
    actual_completion = Column(DateTime(timezone=True), nullable=True)
    created_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)

    created_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))
    updated_at = Column(
        DateTime(timezone=True),
        default=lambda: datetime.now(UTC),
        onupdate=lambda: datetime.now(UTC),
    )

    customer = relationship("Customer", back_populates="jobs")
    workflow_status = relationship("WorkflowStatus")
    files = relationship("JobFile", back_populates="job", cascade="all, delete-orphan")
    finishing_options = relationship("JobFinishingOption", back_populates="job", cascade="all, delete-orphan")
    history = relationship(
        "JobHistory",
        back_populates="job",
        cascade="all, delete-orphan",
        order_by="JobHistory.id",
    )
    delivery_schedules = relationship("DeliverySchedule", back_populates="job", cascade="all, delete-orphan")

    __table_args__ = (
        Index("idx_jobs_status", "status"),
        Index("idx_jobs_created", "created_at"),
    )


class JobFile(Base):
    __tablename__ = "job_files"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    file_path = Column(String(500), nullable=False)
    description = Column(Text, default="")
    uploaded_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    job = relationship("Job", back_populates="files")


class JobFinishingOption(Base):
    __tablename__ = "job_finishing_options"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    name = Column(String(100), nullable=False)

    job = relationship("Job", back_populates="finishing_options")


class JobHistory(Base):
    """One row per status the job entered."""

    __tablename__ = "job_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    job_id = Column(Integer, ForeignKey("jobs.id", ondelete="CASCADE"), nullable=False, index=True)
    status_id = Column(Integer, ForeignKey("workflow_status.id"), nullable=False)
    changed_by = Column(UUID(as_uuid=True), ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    changed_at = Column(DateTime(timezone=True), default=lambda: datetime.now(UTC))

    job = relationship("Job", back_populates="history")
