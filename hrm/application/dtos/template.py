"""DTOs for task templates and stored checklists."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, timedelta

from hrm.domain.enums import CaseKind


@dataclass(frozen=True)
class TemplateItem:
    """One default task definition applied at case creation.

    due_in_days is an offset from the case start date (None = no due date).
    """

    label: str
    description: str | None = None
    due_in_days: int | None = None
    assignee_id: str | None = None
    category: str | None = None
    priority: str | None = None

    def due_date_from(self, start: date) -> date | None:
        """Return the due date for a case starting on start."""
        if self.due_in_days is None:
            return None
        return start + timedelta(days=self.due_in_days)

    def notes(self) -> str | None:
        """Return the task notes line carrying priority and category, if any."""
        parts = []
        if self.priority:
            parts.append(f"Priority: {self.priority}")
        if self.category:
            parts.append(f"Category: {self.category}")
        return ", ".join(parts) or None


@dataclass(frozen=True)
class ChecklistTemplateResult:
    """Stored checklist template (tenant-managed default task set)."""

    id: str
    tenant_id: str
    name: str
    kind: CaseKind
    description: str | None
    items: list[TemplateItem] = field(default_factory=list)
    active: bool = True
    created_at: datetime | None = None
    updated_at: datetime | None = None
