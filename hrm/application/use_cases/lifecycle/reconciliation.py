"""Task-list reconciliation: diff an incoming task list against a case's tasks.

The planner is pure. It validates the whole incoming list and computes the
deletes, updates and creates before anything is written, so the caller can
apply the plan inside one transaction or reject it untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Sequence

from hrm.application.dtos.task import TaskInput
from hrm.domain.entities.task import TaskEntity
from hrm.domain.exceptions import ValidationException


@dataclass(frozen=True)
class TaskUpdate:
    """An existing task whose fields or position change."""

    task: TaskEntity
    diff: dict[str, tuple[Any, Any]]


@dataclass(frozen=True)
class TaskReconciliationPlan:
    """Result of planning: what to delete, update and create, and the final order."""

    to_delete: frozenset[str] = frozenset()
    to_update: list[TaskUpdate] = field(default_factory=list)
    to_create: list[TaskEntity] = field(default_factory=list)
    ordered: list[TaskEntity] = field(default_factory=list)
    newly_completed: list[TaskEntity] = field(default_factory=list)

    @property
    def is_noop(self) -> bool:
        return not (self.to_delete or self.to_update or self.to_create)


def _field_error(index: int, exc: ValidationException) -> ValidationException:
    name = exc.details.get("field") or "task"
    return ValidationException(exc.message, field=f"tasks[{index}].{name}")


def plan_task_reconciliation(
    case_id: str,
    existing: Sequence[TaskEntity],
    incoming: Sequence[TaskInput],
    today: date,
) -> TaskReconciliationPlan:
    """Plan reconciliation of a case's tasks against an incoming list.

    Existing tasks whose id is absent from incoming are deleted; incoming
    items with a known id are updated in place; items without an id are
    created. Positions follow the incoming order. Updates that change
    nothing are left out, so applying the same list twice is a no-op.

    Raises:
        ValidationException: If an incoming id is duplicated, does not belong
            to this case, or an item fails task validation.
    """
    by_id = {t.id: t for t in existing if t.id}
    seen: set[str] = set()
    for index, item in enumerate(incoming):
        if item.id is None:
            continue
        if item.id in seen:
            raise ValidationException(
                f"Task {item.id} appears more than once", field=f"tasks[{index}].id"
            )
        if item.id not in by_id:
            raise ValidationException(
                f"Task {item.id} does not belong to case {case_id}",
                field=f"tasks[{index}].id",
            )
        seen.add(item.id)

    to_delete = frozenset(by_id) - seen

    to_update: list[TaskUpdate] = []
    to_create: list[TaskEntity] = []
    ordered: list[TaskEntity] = []
    newly_completed: list[TaskEntity] = []
    for position, item in enumerate(incoming):
        try:
            if item.id is None:
                task = _new_task(case_id, item, position, today)
                to_create.append(task)
                if task.is_completed:
                    newly_completed.append(task)
            else:
                current = by_id[item.id]
                task = replace(current)
                diff = task.apply_changes(item.changes(), today)
                if task.position != position:
                    diff["position"] = (task.position, position)
                    task.position = position
                if diff:
                    to_update.append(TaskUpdate(task=task, diff=diff))
                    if task.is_completed and not current.is_completed:
                        newly_completed.append(task)
        except ValidationException as e:
            raise _field_error(position, e) from e
        ordered.append(task)

    return TaskReconciliationPlan(
        to_delete=to_delete,
        to_update=to_update,
        to_create=to_create,
        ordered=ordered,
        newly_completed=newly_completed,
    )


def _new_task(case_id: str, item: TaskInput, position: int, today: date) -> TaskEntity:
    changes = item.changes()
    task = TaskEntity(
        id=None,
        case_id=case_id,
        label=changes.pop("label", None),
        position=position,
    )
    task.apply_changes(changes, today)
    return task
