"""Lifecycle operations: start, update/reconcile, complete, cancel and delete cases and their tasks.

Every operation takes tenant_id and actor_id explicitly and asks the
authorization gate before touching data. Persistence happens through the
repository ports; the caller owns the transaction (one per request).
Notifications and audit entries are best-effort: a failing sink is logged
and never undoes the case change.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import replace
from datetime import date, datetime, timedelta
from typing import Any

from hrm.application.dtos.case import CaseDates, CasePatch, CaseResult
from hrm.application.dtos.events import AuditEntry, LifecycleEvent
from hrm.application.dtos.subject import SubjectRecord
from hrm.application.dtos.task import TaskInput, TaskPatch, TaskResult
from hrm.application.dtos.template import TemplateItem
from hrm.application.interfaces.repositories import (
    ICaseRepository,
    IChecklistRepository,
    ITaskRepository,
)
from hrm.application.interfaces.services import (
    IAuditSink,
    IAuthorizationGate,
    INotificationSink,
    ISubjectResolver,
)
from hrm.application.services.task_templates import DefaultTaskTemplates
from hrm.application.use_cases.lifecycle.reconciliation import (
    TaskReconciliationPlan,
    plan_task_reconciliation,
)
from hrm.domain.entities.case import CaseEntity
from hrm.domain.entities.task import TaskEntity
from hrm.domain.enums import CaseKind, CaseStatus, LifecycleEventType
from hrm.domain.exceptions import (
    AuthorizationException,
    DuplicateOpenCaseException,
    ResourceNotFoundException,
    ValidationException,
)
from hrm.shared.enums import AuditAction
from hrm.shared.telemetry.logging import get_logger
from hrm.shared.utils.datetime import utc_now

logger = get_logger(__name__)

WIZARD_NOTES = "Created via onboarding wizard"


class LifecycleService:
    """Orchestrates case and task operations for onboarding and offboarding."""

    def __init__(
        self,
        case_repo: ICaseRepository,
        task_repo: ITaskRepository,
        subject_resolver: ISubjectResolver,
        authorization: IAuthorizationGate,
        notifier: INotificationSink,
        audit: IAuditSink,
        *,
        checklist_repo: IChecklistRepository | None = None,
        templates: DefaultTaskTemplates | None = None,
        enforce_single_open_case: bool = True,
        default_expected_completion_days: int = 30,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.case_repo = case_repo
        self.task_repo = task_repo
        self.subject_resolver = subject_resolver
        self.authorization = authorization
        self.notifier = notifier
        self.audit = audit
        self.checklist_repo = checklist_repo
        self.templates = templates or DefaultTaskTemplates()
        self.enforce_single_open_case = enforce_single_open_case
        self.default_expected_completion_days = default_expected_completion_days
        self._clock = clock

    def _today(self) -> date:
        return self._clock().date()

    async def _authorize(
        self, tenant_id: str, actor_id: str, action: str, kind: CaseKind | str
    ) -> None:
        resource = kind.value if isinstance(kind, CaseKind) else kind
        if not await self.authorization.can_perform(tenant_id, actor_id, action, resource):
            logger.info(
                "Permission denied: actor=%s tenant=%s %s:%s",
                actor_id,
                tenant_id,
                resource,
                action,
            )
            raise AuthorizationException(resource=resource, action=action)

    async def _resolve_subject(self, tenant_id: str, subject_id: str) -> SubjectRecord:
        subject = await self.subject_resolver.resolve_subject(tenant_id, subject_id)
        if subject is None:
            raise ValidationException(
                f"Subject not found: {subject_id}", field="subject_id"
            )
        return subject

    async def _load_case(
        self,
        tenant_id: str,
        case_id: str,
        kind: CaseKind | None = None,
        *,
        for_update: bool = False,
    ) -> CaseEntity:
        if for_update:
            case = await self.case_repo.get_case_for_update(tenant_id, case_id, kind)
        else:
            case = await self.case_repo.get_case(tenant_id, case_id, kind)
        if case is None:
            raise ResourceNotFoundException("case", case_id)
        return case

    async def _publish(
        self,
        case: CaseEntity,
        event: LifecycleEventType,
        actor_id: str,
        task_id: str | None = None,
    ) -> None:
        try:
            await self.notifier.publish(
                LifecycleEvent(
                    tenant_id=case.tenant_id,
                    case_id=case.id or "",
                    kind=case.kind,
                    event=event,
                    timestamp=self._clock(),
                    subject_id=case.subject_id,
                    task_id=task_id,
                    actor_id=actor_id,
                )
            )
        except Exception:
            logger.warning(
                "Lifecycle notification %s failed for case %s",
                event.value,
                case.id,
                exc_info=True,
            )

    async def _record(
        self,
        tenant_id: str,
        actor_id: str,
        action: AuditAction,
        resource_type: str,
        resource_id: str,
        old_values: dict[str, Any] | None,
        new_values: dict[str, Any] | None,
    ) -> None:
        try:
            await self.audit.record(
                AuditEntry(
                    tenant_id=tenant_id,
                    actor_id=actor_id,
                    action=action,
                    resource_type=resource_type,
                    resource_id=resource_id,
                    timestamp=self._clock(),
                    old_values=old_values,
                    new_values=new_values,
                )
            )
        except Exception:
            logger.warning(
                "Audit write failed for %s %s (%s)",
                resource_type,
                resource_id,
                action.value,
                exc_info=True,
            )

    # Case creation

    async def _create_case(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        subject: SubjectRecord,
        dates: CaseDates,
        tasks: Sequence[TaskInput],
        *,
        notes: str | None = None,
        reason: str | None = None,
        initial_status: CaseStatus = CaseStatus.PENDING,
    ) -> CaseResult:
        if self.enforce_single_open_case:
            open_case = await self.case_repo.find_open_case(tenant_id, subject.id, kind)
            if open_case is not None:
                raise DuplicateOpenCaseException(subject.id, kind.value, open_case.id or "")

        task_entities: list[TaskEntity] = []
        for position, item in enumerate(tasks):
            try:
                task_entities.append(
                    TaskEntity(
                        id=None,
                        case_id=None,
                        label=item.label or "",
                        description=item.description or None,
                        due_date=item.due_date or None,
                        assignee_id=item.assignee_id or None,
                        notes=item.notes or None,
                        position=position,
                    )
                )
            except ValidationException as e:
                raise ValidationException(
                    e.message, field=f"tasks[{position}].{e.details.get('field', 'label')}"
                ) from e

        case = CaseEntity(
            id=None,
            tenant_id=tenant_id,
            kind=kind,
            subject_id=subject.id,
            start_date=dates.start_date,
            expected_completion_date=dates.expected_completion_date,
            notes=notes,
            last_working_date=dates.last_working_date,
            reason=reason,
            exit_interview_date=dates.exit_interview_date,
            tasks=task_entities,
        )
        case.transition_to(initial_status, self._today())

        created = await self.case_repo.create_case(case)
        logger.info(
            "Started %s case %s for subject %s with %d tasks",
            kind.value,
            created.id,
            subject.id,
            len(created.tasks),
        )
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.CREATED,
            "case",
            created.id or "",
            None,
            created.snapshot(include_tasks=True),
        )
        await self._publish(created, LifecycleEventType.CREATED, actor_id)
        return CaseResult.from_entity(created)

    async def start_case(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        subject_id: str,
        dates: CaseDates,
        default_tasks: Sequence[TaskInput] = (),
        *,
        notes: str | None = None,
        reason: str | None = None,
        initial_status: CaseStatus = CaseStatus.PENDING,
    ) -> CaseResult:
        """Create a case and its tasks (all pending) in one repository call.

        Raises:
            AuthorizationException: If actor may not create cases of kind.
            ValidationException: If subject is unknown or input is invalid.
            DuplicateOpenCaseException: If enforcement is on and subject already
                has an open case of kind.
        """
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "create", kind)
        subject = await self._resolve_subject(tenant_id, subject_id)
        return await self._create_case(
            tenant_id,
            actor_id,
            kind,
            subject,
            dates,
            default_tasks,
            notes=notes,
            reason=reason,
            initial_status=initial_status,
        )

    async def _default_template(
        self, tenant_id: str, kind: CaseKind, subject: SubjectRecord
    ) -> list[TemplateItem]:
        if self.checklist_repo is not None:
            stored = await self.checklist_repo.get_active_template(tenant_id, kind)
            if stored is not None and stored.items:
                return list(stored.items)
        return self.templates.for_subject(kind, subject)

    @staticmethod
    def _tasks_from_template(
        template: Sequence[TemplateItem], start: date
    ) -> list[TaskInput]:
        return [
            TaskInput(
                label=item.label,
                description=item.description,
                due_date=item.due_date_from(start),
                assignee_id=item.assignee_id,
                notes=item.notes(),
            )
            for item in template
        ]

    async def initialize_with_defaults(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        subject_id: str,
        template: Sequence[TemplateItem] | None = None,
        *,
        dates: CaseDates | None = None,
        notes: str | None = None,
        reason: str | None = None,
    ) -> CaseResult:
        """Start a case from a template (caller-supplied, stored, or built-in).

        Without dates the case starts today and is expected to finish after
        the configured number of days. Task due dates are the start date plus
        each item's offset.
        """
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "create", kind)
        subject = await self._resolve_subject(tenant_id, subject_id)
        if dates is None:
            start = self._today()
            dates = CaseDates(
                start_date=start,
                expected_completion_date=start
                + timedelta(days=self.default_expected_completion_days),
            )
        if template is None:
            template = await self._default_template(tenant_id, kind, subject)
        if notes is None:
            notes = f"{kind.value.capitalize()} initiated for {subject.name or 'employee'}"
        return await self._create_case(
            tenant_id,
            actor_id,
            kind,
            subject,
            dates,
            self._tasks_from_template(template, dates.start_date),
            notes=notes,
            reason=reason,
        )

    async def complete_wizard(
        self, tenant_id: str, actor_id: str, subject_id: str
    ) -> CaseResult:
        """Final wizard step: create an in-progress onboarding case with the wizard task list.

        A subject who is not active yet (a new hire) is activated in the same
        transaction as the case creation.
        """
        await self._authorize(tenant_id, actor_id, "create", CaseKind.ONBOARDING)
        subject = await self._resolve_subject(tenant_id, subject_id)
        start = self._today()
        dates = CaseDates(
            start_date=start,
            expected_completion_date=start
            + timedelta(days=self.default_expected_completion_days),
        )
        result = await self._create_case(
            tenant_id,
            actor_id,
            CaseKind.ONBOARDING,
            subject,
            dates,
            self._tasks_from_template(self.templates.wizard_tasks(), start),
            notes=WIZARD_NOTES,
            initial_status=CaseStatus.IN_PROGRESS,
        )
        if not subject.is_active:
            if not await self.subject_resolver.activate_subject(tenant_id, subject.id):
                raise ValidationException(
                    f"Subject not found: {subject_id}", field="subject_id"
                )
            logger.info("Activated subject %s via onboarding wizard", subject.id)
            await self._record(
                tenant_id,
                actor_id,
                AuditAction.UPDATED,
                "employee",
                subject.id,
                {"is_active": False},
                {"is_active": True},
            )
        return result

    # Queries

    async def get_case(
        self, tenant_id: str, actor_id: str, kind: CaseKind, case_id: str
    ) -> CaseResult:
        """Return case with tasks; raise ResourceNotFoundException if absent."""
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "read", kind)
        case = await self._load_case(tenant_id, case_id, kind)
        return CaseResult.from_entity(case)

    async def list_cases(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        *,
        status: CaseStatus | None = None,
        subject_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[CaseResult]:
        """Return cases of kind (newest first), optionally filtered by status or subject."""
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "read", kind)
        cases = await self.case_repo.list_cases(
            tenant_id,
            kind,
            status=CaseStatus(status) if status else None,
            subject_id=subject_id,
            skip=skip,
            limit=limit,
        )
        return [CaseResult.from_entity(c) for c in cases]

    # Case updates

    async def _apply_plan(
        self, case: CaseEntity, plan: TaskReconciliationPlan
    ) -> dict[int, TaskEntity]:
        """Write the plan (deletes first) and return created tasks keyed by id() of the planned entity."""
        if plan.to_delete:
            await self.task_repo.delete_tasks(case.id or "", set(plan.to_delete))
        for update in plan.to_update:
            await self.task_repo.save_task(update.task)
        persisted: dict[int, TaskEntity] = {}
        for task in plan.to_create:
            persisted[id(task)] = await self.task_repo.create_task(case.id or "", task)
        case.tasks = [persisted.get(id(t), t) for t in plan.ordered]
        return persisted

    async def update_case(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        case_id: str,
        patch: CasePatch | None = None,
        tasks: Sequence[TaskInput] | None = None,
    ) -> CaseResult:
        """Apply a patch to the case and reconcile its task list atomically.

        tasks=None leaves the task set untouched; an empty list deletes all
        tasks. The case row is locked before its tasks are read.

        Raises:
            ResourceNotFoundException: If the case does not exist.
            InvalidStateException: If the patch requests a disallowed transition.
            ValidationException: If patch or task list is invalid.
        """
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "update", kind)
        case = await self._load_case(tenant_id, case_id, kind, for_update=True)
        today = self._today()
        before = case.snapshot(include_tasks=True)
        was_completed = case.status == CaseStatus.COMPLETED

        plan = (
            plan_task_reconciliation(case.id or "", case.tasks, tasks, today)
            if tasks is not None
            else TaskReconciliationPlan(ordered=list(case.tasks))
        )
        diff = case.apply_changes(patch.changes(), today) if patch is not None else {}

        if not diff and plan.is_noop:
            return CaseResult.from_entity(case)

        created = await self._apply_plan(case, plan)
        saved = await self.case_repo.save_case(case)
        saved.tasks = case.tasks
        logger.info(
            "Updated %s case %s: fields=%s deleted=%d updated=%d created=%d",
            kind.value,
            case_id,
            sorted(diff),
            len(plan.to_delete),
            len(plan.to_update),
            len(plan.to_create),
        )
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.UPDATED if diff else AuditAction.TASKS_RECONCILED,
            "case",
            case_id,
            before,
            saved.snapshot(include_tasks=True),
        )
        for task in plan.newly_completed:
            task_id = created.get(id(task), task).id
            await self._publish(saved, LifecycleEventType.TASK_COMPLETED, actor_id, task_id)
        if saved.status == CaseStatus.COMPLETED and not was_completed:
            await self._publish(saved, LifecycleEventType.CASE_COMPLETED, actor_id)
        return CaseResult.from_entity(saved)

    async def reconcile(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        case_id: str,
        incoming_tasks: Sequence[TaskInput],
    ) -> CaseResult:
        """Reconcile the case's tasks with incoming_tasks (no change to case fields)."""
        return await self.update_case(
            tenant_id, actor_id, kind, case_id, patch=None, tasks=incoming_tasks
        )

    async def complete_case(
        self,
        tenant_id: str,
        actor_id: str,
        kind: CaseKind,
        case_id: str,
        actual_completion_date: date | None = None,
    ) -> CaseResult:
        """Complete the case. Idempotent when already completed; pending tasks do not block."""
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "complete", kind)
        case = await self._load_case(tenant_id, case_id, kind, for_update=True)
        before_status = case.status.value
        if not case.complete(actual_completion_date or self._today()):
            return CaseResult.from_entity(case)
        saved = await self.case_repo.save_case(case)
        saved.tasks = case.tasks
        logger.info("Completed %s case %s", kind.value, case_id)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.STATUS_CHANGED,
            "case",
            case_id,
            {"status": before_status, "actual_completion_date": None},
            {
                "status": saved.status.value,
                "actual_completion_date": saved.actual_completion_date.isoformat()
                if saved.actual_completion_date
                else None,
            },
        )
        await self._publish(saved, LifecycleEventType.CASE_COMPLETED, actor_id)
        return CaseResult.from_entity(saved)

    async def cancel_case(
        self, tenant_id: str, actor_id: str, kind: CaseKind, case_id: str
    ) -> CaseResult:
        """Cancel a pending or in-progress case; raise InvalidStateException from completed."""
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "cancel", kind)
        case = await self._load_case(tenant_id, case_id, kind, for_update=True)
        before_status = case.status.value
        if not case.cancel():
            return CaseResult.from_entity(case)
        saved = await self.case_repo.save_case(case)
        saved.tasks = case.tasks
        logger.info("Cancelled %s case %s", kind.value, case_id)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.STATUS_CHANGED,
            "case",
            case_id,
            {"status": before_status},
            {"status": saved.status.value},
        )
        return CaseResult.from_entity(saved)

    async def delete_case(
        self, tenant_id: str, actor_id: str, kind: CaseKind, case_id: str
    ) -> None:
        """Hard-delete the case and all of its tasks."""
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "delete", kind)
        case = await self._load_case(tenant_id, case_id, kind, for_update=True)
        before = case.snapshot(include_tasks=True)
        if not await self.case_repo.delete_case(tenant_id, case_id):
            raise ResourceNotFoundException("case", case_id)
        logger.info("Deleted %s case %s (%d tasks)", kind.value, case_id, len(case.tasks))
        await self._record(
            tenant_id, actor_id, AuditAction.DELETED, "case", case_id, before, None
        )

    # Task operations

    async def _authorize_any_kind(self, tenant_id: str, actor_id: str, action: str) -> None:
        """Pass when actor may perform action on at least one case kind."""
        for kind in CaseKind:
            if await self.authorization.can_perform(tenant_id, actor_id, action, kind.value):
                return
        logger.info(
            "Permission denied: actor=%s tenant=%s case:%s", actor_id, tenant_id, action
        )
        raise AuthorizationException(resource="case", action=action)

    async def _load_task(
        self, tenant_id: str, actor_id: str, task_id: str, action: str
    ) -> tuple[CaseEntity, TaskEntity]:
        """Return (case, task) for a task in tenant; the case is locked for writes.

        The permission check runs before the lock is taken. An unknown id is
        only reported to actors allowed to perform action on some case kind.
        """
        found = await self.task_repo.get_task(tenant_id, task_id)
        if found is None or found.case_id is None:
            await self._authorize_any_kind(tenant_id, actor_id, action)
            raise ResourceNotFoundException("task", task_id)
        case = await self._load_case(tenant_id, found.case_id)
        await self._authorize(tenant_id, actor_id, action, case.kind)
        if action != "read":
            case = await self._load_case(tenant_id, found.case_id, case.kind, for_update=True)
        task = case.task_by_id(task_id)
        if task is None:
            raise ResourceNotFoundException("task", task_id)
        return case, task

    async def get_task(self, tenant_id: str, actor_id: str, task_id: str) -> TaskResult:
        """Return task by id; raise ResourceNotFoundException if absent."""
        _, task = await self._load_task(tenant_id, actor_id, task_id, "read")
        return TaskResult.from_entity(task)

    async def add_task(
        self,
        tenant_id: str,
        actor_id: str,
        case_id: str,
        item: TaskInput,
        *,
        kind: CaseKind | None = None,
    ) -> TaskResult:
        """Append a new pending task to the case (scoped to kind when given).

        Raises:
            AuthorizationException: If actor may not update cases of the kind.
            ValidationException: If case_id does not name a case (of kind) in
                tenant, or the task input is invalid.
        """
        if kind is None:
            parent = await self.case_repo.get_case(tenant_id, case_id)
            if parent is None:
                await self._authorize_any_kind(tenant_id, actor_id, "update")
                raise ValidationException(f"Case not found: {case_id}", field="case_id")
            kind = parent.kind
        kind = CaseKind(kind)
        await self._authorize(tenant_id, actor_id, "update", kind)
        case = await self.case_repo.get_case_for_update(tenant_id, case_id, kind)
        if case is None:
            raise ValidationException(f"Case not found: {case_id}", field="case_id")
        position = max((t.position for t in case.tasks), default=-1) + 1
        try:
            task = TaskEntity(
                id=None,
                case_id=case.id,
                label=item.label or "",
                description=item.description or None,
                due_date=item.due_date or None,
                assignee_id=item.assignee_id or None,
                notes=item.notes or None,
                position=position,
            )
        except ValidationException as e:
            raise ValidationException(e.message, field=e.details.get("field")) from e
        created = await self.task_repo.create_task(case.id or "", task)
        logger.info("Added task %s to case %s", created.id, case_id)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.CREATED,
            "task",
            created.id or "",
            None,
            created.snapshot(),
        )
        return TaskResult.from_entity(created)

    async def update_task(
        self, tenant_id: str, actor_id: str, task_id: str, patch: TaskPatch
    ) -> TaskResult:
        """Partially update a task; publishes task_completed when it becomes completed."""
        case, current = await self._load_task(tenant_id, actor_id, task_id, "update")
        task = replace(current)
        diff = task.apply_changes(patch.changes(), self._today())
        if not diff:
            return TaskResult.from_entity(task)
        saved = await self.task_repo.save_task(task)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.UPDATED,
            "task",
            task_id,
            current.snapshot(),
            saved.snapshot(),
        )
        if saved.is_completed and not current.is_completed:
            await self._publish(case, LifecycleEventType.TASK_COMPLETED, actor_id, task_id)
        return TaskResult.from_entity(saved)

    async def complete_task(
        self,
        tenant_id: str,
        actor_id: str,
        task_id: str,
        completion_date: date | None = None,
    ) -> TaskResult:
        """Mark task completed. Idempotent; the event is published on first completion only."""
        case, current = await self._load_task(tenant_id, actor_id, task_id, "update")
        task = replace(current)
        if not task.mark_complete(completion_date or self._today()):
            return TaskResult.from_entity(task)
        saved = await self.task_repo.save_task(task)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.STATUS_CHANGED,
            "task",
            task_id,
            current.snapshot(),
            saved.snapshot(),
        )
        await self._publish(case, LifecycleEventType.TASK_COMPLETED, actor_id, task_id)
        return TaskResult.from_entity(saved)

    async def delete_task(self, tenant_id: str, actor_id: str, task_id: str) -> None:
        """Remove a task from its case."""
        _, task = await self._load_task(tenant_id, actor_id, task_id, "update")
        if not await self.task_repo.delete_task(task_id):
            raise ResourceNotFoundException("task", task_id)
        logger.info("Deleted task %s from case %s", task_id, task.case_id)
        await self._record(
            tenant_id,
            actor_id,
            AuditAction.DELETED,
            "task",
            task_id,
            task.snapshot(),
            None,
        )
