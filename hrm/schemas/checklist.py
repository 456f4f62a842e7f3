"""Checklist template API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from hrm.application.dtos.template import TemplateItem
from hrm.domain.entities.task import LABEL_MAX_LENGTH
from hrm.domain.enums import CaseKind


class TemplateItemSchema(BaseModel):
    """One default task in a checklist template."""

    model_config = ConfigDict(from_attributes=True)

    label: str = Field(..., min_length=1, max_length=LABEL_MAX_LENGTH)
    description: str | None = None
    due_in_days: int | None = Field(default=None, ge=0)
    assignee_id: str | None = None
    category: str | None = None
    priority: str | None = None

    def to_item(self) -> TemplateItem:
        return TemplateItem(**self.model_dump())


class ChecklistCreateRequest(BaseModel):
    """Request body for creating a checklist template."""

    name: str = Field(..., min_length=1, max_length=255)
    kind: CaseKind
    description: str | None = None
    items: list[TemplateItemSchema] = Field(default_factory=list)


class ChecklistUpdateRequest(BaseModel):
    """Request body for updating a checklist template (partial)."""

    name: str | None = Field(default=None, min_length=1, max_length=255)
    description: str | None = None
    items: list[TemplateItemSchema] | None = None
    active: bool | None = None


class ChecklistResponse(BaseModel):
    """Checklist template response."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    name: str
    kind: CaseKind
    description: str | None
    items: list[TemplateItemSchema]
    active: bool
    created_at: datetime | None
    updated_at: datetime | None
