"""Task domain entity.

A task is one checklist item of an onboarding or offboarding case. The
case owns its tasks; a task never outlives or moves between cases.
"""

from dataclasses import dataclass, fields
from datetime import date
from typing import Any, ClassVar, Mapping

from hrm.domain.enums import TaskStatus
from hrm.domain.exceptions import ValidationException

LABEL_MAX_LENGTH = 255


@dataclass
class TaskEntity:
    """Domain entity for a checklist task.

    Invariant: a completion date implies status completed, and a completed
    task always carries a completion date. Validation runs on construction.
    """

    id: str | None
    case_id: str | None
    label: str
    description: str | None = None
    due_date: date | None = None
    completed_date: date | None = None
    status: TaskStatus = TaskStatus.PENDING
    assignee_id: str | None = None
    notes: str | None = None
    position: int = 0

    MUTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "label",
            "description",
            "due_date",
            "completed_date",
            "status",
            "assignee_id",
            "notes",
        }
    )

    def __post_init__(self) -> None:
        self.status = self._coerce_status(self.status)
        self.label = self._clean_label(self.label)
        if self.completed_date is not None and self.status != TaskStatus.COMPLETED:
            raise ValidationException(
                "completed_date can only be set on a completed task",
                field="completed_date",
            )

    @staticmethod
    def _clean_label(label: str | None) -> str:
        value = (label or "").strip()
        if not value:
            raise ValidationException("Task label is required", field="label")
        if len(value) > LABEL_MAX_LENGTH:
            raise ValidationException(
                f"Task label must be at most {LABEL_MAX_LENGTH} characters",
                field="label",
            )
        return value

    @staticmethod
    def _coerce_status(status: TaskStatus | str) -> TaskStatus:
        try:
            return TaskStatus(status)
        except ValueError as e:
            raise ValidationException(
                f"Invalid task status: {status!r}", field="status"
            ) from e

    @property
    def is_completed(self) -> bool:
        """Return whether the task is completed."""
        return self.status == TaskStatus.COMPLETED

    def apply_changes(
        self, changes: Mapping[str, Any], today: date
    ) -> dict[str, tuple[Any, Any]]:
        """Apply a partial update and return {field: (old, new)} for changed fields.

        Only keys present in ``changes`` are touched; a key mapped to None
        clears the field. Status and completion date are kept consistent:
        a completion date forces status completed, a non-completed status
        clears the completion date, and completing without a date stamps
        ``today``. Raises ValidationException (entity unchanged) on bad input.
        """
        unknown = set(changes) - self.MUTABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Unknown task fields: {', '.join(sorted(unknown))}", field="task"
            )
        proposed = {name: getattr(self, name) for name in self.MUTABLE_FIELDS}
        proposed.update(changes)
        proposed["label"] = self._clean_label(proposed["label"])
        status = self._coerce_status(proposed["status"])

        if "completed_date" in changes and changes["completed_date"] is not None:
            if "status" in changes and status != TaskStatus.COMPLETED:
                raise ValidationException(
                    "completed_date conflicts with a non-completed status",
                    field="completed_date",
                )
            status = TaskStatus.COMPLETED
        elif "status" in changes and status != TaskStatus.COMPLETED:
            proposed["completed_date"] = None
        if status == TaskStatus.COMPLETED and proposed["completed_date"] is None:
            proposed["completed_date"] = today
        proposed["status"] = status

        diff: dict[str, tuple[Any, Any]] = {}
        for name, new in proposed.items():
            old = getattr(self, name)
            if old != new:
                diff[name] = (old, new)
                setattr(self, name, new)
        return diff

    def mark_complete(self, completion_date: date) -> bool:
        """Complete the task. Idempotent: returns False when already completed."""
        if self.is_completed:
            return False
        self.status = TaskStatus.COMPLETED
        self.completed_date = completion_date
        return True

    def snapshot(self) -> dict[str, Any]:
        """Return a JSON-friendly dict of the task (for audit diffs)."""
        data: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, TaskStatus):
                value = value.value
            data[f.name] = value
        return data
