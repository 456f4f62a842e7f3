"""DTOs for checklist tasks."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any

from hrm.application.dtos.patch import UNSET, Unset, supplied_fields
from hrm.domain.entities.task import TaskEntity
from hrm.domain.enums import TaskStatus


@dataclass(frozen=True)
class TaskResult:
    """Task read-model returned by the lifecycle service."""

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

    @classmethod
    def from_entity(cls, task: TaskEntity) -> TaskResult:
        """Build from a persisted TaskEntity (id and case_id set)."""
        return cls(
            id=task.id or "",
            case_id=task.case_id or "",
            label=task.label,
            description=task.description,
            due_date=task.due_date,
            completed_date=task.completed_date,
            status=task.status,
            assignee_id=task.assignee_id,
            notes=task.notes,
            position=task.position,
        )


@dataclass(frozen=True)
class TaskInput:
    """One task in a caller-supplied task list (create or reconcile).

    id None means "new task"; an id must belong to the case being updated.
    Fields left UNSET keep the existing value on update.
    """

    label: str | None | Unset = UNSET
    id: str | None = None
    description: str | None | Unset = UNSET
    due_date: date | None | Unset = UNSET
    completed_date: date | None | Unset = UNSET
    status: TaskStatus | str | None | Unset = UNSET
    assignee_id: str | None | Unset = UNSET
    notes: str | None | Unset = UNSET

    def changes(self) -> dict[str, Any]:
        """Return supplied fields (excluding id)."""
        return supplied_fields(self, exclude=frozenset({"id"}))


@dataclass(frozen=True)
class TaskPatch:
    """Partial update for a single task. UNSET = not supplied; None = clear."""

    label: str | None | Unset = UNSET
    description: str | None | Unset = UNSET
    due_date: date | None | Unset = UNSET
    completed_date: date | None | Unset = UNSET
    status: TaskStatus | str | None | Unset = UNSET
    assignee_id: str | None | Unset = UNSET
    notes: str | None | Unset = UNSET

    def changes(self) -> dict[str, Any]:
        """Return supplied fields."""
        return supplied_fields(self)
