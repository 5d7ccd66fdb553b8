"""Workflow status model."""

from sqlalchemy import Boolean, Column, Integer, String, Text

from ..database.base import Base

# Sequence reserved for the out-of-band Cancelled status
CANCELLED_SEQUENCE = 0


class WorkflowStatus(Base):
    """An administrator-defined stage a print job moves through.

    Active statuses are totally ordered by ``sequence``. The single status with
    ``sequence == 0`` is the Cancelled sentinel and never takes part in forward
    progression.
    """

    __tablename__ = "workflow_status"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(Text, default="")
    sequence = Column(Integer, nullable=False, index=True)
    is_active = Column(Boolean, default=True, nullable=False)

    @property
    def is_cancelled_sentinel(self) -> bool:
        return self.sequence == CANCELLED_SEQUENCE

    def __repr__(self) -> str:
        return f"<WorkflowStatus {self.name!r} seq={self.sequence}>"
