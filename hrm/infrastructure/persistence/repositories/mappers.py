"""ORM row to domain entity mapping shared by case and task repositories."""

from hrm.domain.entities.case import CaseEntity
from hrm.domain.entities.task import TaskEntity
from hrm.infrastructure.persistence.models.case import LifecycleCase
from hrm.infrastructure.persistence.models.task import LifecycleTask


def task_to_entity(row: LifecycleTask) -> TaskEntity:
    """Map LifecycleTask ORM to TaskEntity."""
    return TaskEntity(
        id=row.id,
        case_id=row.case_id,
        label=row.label,
        description=row.description,
        due_date=row.due_date,
        completed_date=row.completed_date,
        status=row.status,
        assignee_id=row.assignee_id,
        notes=row.notes,
        position=row.position,
    )


def case_to_entity(row: LifecycleCase, *, with_tasks: bool = True) -> CaseEntity:
    """Map LifecycleCase ORM (tasks loaded when with_tasks) to CaseEntity."""
    tasks = (
        [task_to_entity(t) for t in sorted(row.tasks, key=lambda t: t.position)]
        if with_tasks
        else []
    )
    return CaseEntity(
        id=row.id,
        tenant_id=row.tenant_id,
        kind=row.kind,
        subject_id=row.subject_id,
        start_date=row.start_date,
        expected_completion_date=row.expected_completion_date,
        status=row.status,
        actual_completion_date=row.actual_completion_date,
        notes=row.notes,
        last_working_date=row.last_working_date,
        reason=row.reason,
        exit_interview_date=row.exit_interview_date,
        version=row.version,
        tasks=tasks,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def apply_task_fields(row: LifecycleTask, task: TaskEntity) -> None:
    """Copy mutable task fields and position from entity to ORM row."""
    row.label = task.label
    row.description = task.description
    row.due_date = task.due_date
    row.completed_date = task.completed_date
    row.status = task.status.value
    row.assignee_id = task.assignee_id
    row.notes = task.notes
    row.position = task.position


def new_task_row(case_id: str | None, task: TaskEntity) -> LifecycleTask:
    """Build a LifecycleTask row from an unsaved entity."""
    row = LifecycleTask()
    if case_id is not None:
        row.case_id = case_id
    apply_task_fields(row, task)
    return row
