"""Workflow status response schema."""

from pydantic import BaseModel


class WorkflowStatusResponse(BaseModel):
    id: int
    name: str
    description: str | None = ""
    sequence: int
    is_active: bool

    model_config = {"from_attributes": True}
