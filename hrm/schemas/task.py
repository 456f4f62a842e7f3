"""Task API schemas."""

from datetime import date
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from hrm.application.dtos.task import TaskInput, TaskPatch
from hrm.domain.entities.task import LABEL_MAX_LENGTH
from hrm.domain.enums import TaskStatus


def supplied(model: BaseModel, exclude: set[str] | None = None) -> dict[str, Any]:
    """Return only the fields the client sent; explicit null stays None."""
    skip = exclude or set()
    return {name: getattr(model, name) for name in model.model_fields_set if name not in skip}


class TaskItemRequest(BaseModel):
    """One task in a case's task list. Omit id for a new task."""

    id: str | None = None
    label: str | None = Field(default=None, max_length=LABEL_MAX_LENGTH)
    description: str | None = None
    due_date: date | None = None
    completed_date: date | None = None
    status: TaskStatus | None = None
    assignee_id: str | None = None
    notes: str | None = None

    def to_input(self) -> TaskInput:
        return TaskInput(id=self.id, **supplied(self, {"id"}))


class TaskPatchRequest(BaseModel):
    """Request body for PATCH /tasks/{task_id}. Absent fields are left unchanged."""

    label: str | None = Field(default=None, max_length=LABEL_MAX_LENGTH)
    description: str | None = None
    due_date: date | None = None
    completed_date: date | None = None
    status: TaskStatus | None = None
    assignee_id: str | None = None
    notes: str | None = None

    def to_patch(self) -> TaskPatch:
        return TaskPatch(**supplied(self))


class TaskCompleteRequest(BaseModel):
    """Request body for POST /tasks/{task_id}/complete."""

    completion_date: date | None = None


class TaskResponse(BaseModel):
    """Task response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    case_id: str
    label: str
    description: str | None
    due_date: date | None
    completed_date: date | None
    status: TaskStatus
    assignee_id: str | None
    notes: str | None
    position: int
