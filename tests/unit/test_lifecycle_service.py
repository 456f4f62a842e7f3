"""LifecycleService unit tests over in-memory repositories (tests/fakes.py)."""

import logging
from datetime import date, timedelta

import pytest

from hrm.application.dtos.case import CaseDates, CasePatch
from hrm.application.dtos.task import TaskInput, TaskPatch
from hrm.application.dtos.template import TemplateItem
from hrm.application.use_cases.lifecycle import LifecycleService
from hrm.application.use_cases.lifecycle.case_operations import WIZARD_NOTES
from hrm.domain.enums import CaseKind, CaseStatus, TaskStatus
from hrm.domain.exceptions import (
    AuthorizationException,
    DuplicateOpenCaseException,
    InvalidStateException,
    ResourceNotFoundException,
    ValidationException,
)
from hrm.shared.enums import AuditAction
from tests.fakes import (
    FIXED_NOW,
    FakeCaseRepository,
    FakeGate,
    FakeTaskRepository,
    RecordingAudit,
    RecordingNotifier,
)

T = "t1"
ACTOR = "actor-1"
TODAY = FIXED_NOW.date()
ONB = CaseKind.ONBOARDING
OFFB = CaseKind.OFFBOARDING


def _dates(start: date = TODAY) -> CaseDates:
    return CaseDates(start_date=start, expected_completion_date=start + timedelta(days=30))


def _off_dates() -> CaseDates:
    return CaseDates(
        start_date=TODAY,
        expected_completion_date=TODAY + timedelta(days=14),
        last_working_date=TODAY + timedelta(days=10),
    )


async def _start(service: LifecycleService, subject_id: str = "emp-2", labels=("A", "B", "C")):
    return await service.start_case(
        T, ACTOR, ONB, subject_id, _dates(), [TaskInput(label=label) for label in labels]
    )


# Creation


async def test_start_case_creates_all_tasks_pending(service, audit, notifier) -> None:
    """Tasks are created pending in order, whatever status the input carried."""
    case = await service.start_case(
        T,
        ACTOR,
        ONB,
        "emp-2",
        _dates(),
        [
            TaskInput(label="IT setup", due_date=TODAY + timedelta(days=1)),
            TaskInput(label="Badge", status="completed"),
        ],
    )

    assert case.status == CaseStatus.PENDING
    assert case.version == 1
    assert [t.label for t in case.tasks] == ["IT setup", "Badge"]
    assert [t.position for t in case.tasks] == [0, 1]
    assert all(t.status == TaskStatus.PENDING for t in case.tasks)
    assert all(t.case_id == case.id for t in case.tasks)
    assert [e.action for e in audit.entries] == [AuditAction.CREATED]
    assert notifier.kinds() == ["created"]
    assert notifier.events[0].case_id == case.id
    assert notifier.events[0].subject_id == "emp-2"


async def test_start_case_unknown_subject_is_validation_error(service, store) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.start_case(T, ACTOR, ONB, "nobody", _dates(), [])
    assert exc_info.value.details["field"] == "subject_id"
    assert store.cases == {}


async def test_start_case_subject_from_other_tenant_rejected(service) -> None:
    with pytest.raises(ValidationException):
        await service.start_case(T, ACTOR, ONB, "emp-x", _dates(), [])


async def test_start_case_invalid_task_reports_index(service, store) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.start_case(
            T, ACTOR, ONB, "emp-2", _dates(), [TaskInput(label="ok"), TaskInput(label=" ")]
        )
    assert exc_info.value.details["field"] == "tasks[1].label"
    assert store.cases == {}


async def test_start_offboarding_requires_reason(service) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.start_case(T, ACTOR, OFFB, "emp-2", _off_dates(), [])
    assert exc_info.value.details["field"] == "reason"


async def test_start_offboarding_with_reason(service) -> None:
    case = await service.start_case(
        T, ACTOR, OFFB, "emp-2", _off_dates(), [], reason="Resignation"
    )
    assert case.kind == OFFB
    assert case.reason == "Resignation"
    assert case.last_working_date == TODAY + timedelta(days=10)


async def test_start_case_denied_creates_nothing(service, gate, store, audit) -> None:
    gate.denied.add(("create", "onboarding"))
    with pytest.raises(AuthorizationException) as exc_info:
        await _start(service)
    assert exc_info.value.details == {"resource": "onboarding", "action": "create"}
    assert store.cases == {}
    assert audit.entries == []
    assert gate.calls[-1] == (T, ACTOR, "create", "onboarding")


async def test_second_open_case_for_subject_rejected(service) -> None:
    first = await _start(service)
    with pytest.raises(DuplicateOpenCaseException) as exc_info:
        await _start(service)
    assert exc_info.value.details["open_case_id"] == first.id


async def test_open_case_of_other_kind_does_not_block(service) -> None:
    await _start(service)
    case = await service.start_case(
        T, ACTOR, OFFB, "emp-2", _off_dates(), [], reason="Relocation"
    )
    assert case.kind == OFFB


async def test_new_case_allowed_after_cancel(service) -> None:
    first = await _start(service)
    await service.cancel_case(T, ACTOR, ONB, first.id)
    second = await _start(service)
    assert second.id != first.id


async def test_duplicate_allowed_when_enforcement_off(store, subjects, gate, notifier, audit) -> None:
    service = LifecycleService(
        FakeCaseRepository(store),
        FakeTaskRepository(store),
        subjects,
        gate,
        notifier,
        audit,
        enforce_single_open_case=False,
        clock=lambda: FIXED_NOW,
    )
    await _start(service)
    await _start(service)
    assert len(store.cases) == 2


# Defaults, wizard


async def test_template_of_n_items_yields_n_pending_tasks(service) -> None:
    template = [TemplateItem("One", due_in_days=1), TemplateItem("Two"), TemplateItem("Three", due_in_days=7)]
    case = await service.initialize_with_defaults(T, ACTOR, ONB, "emp-2", template)
    assert len(case.tasks) == 3
    assert all(t.status == TaskStatus.PENDING for t in case.tasks)
    assert [t.due_date for t in case.tasks] == [
        TODAY + timedelta(days=1),
        None,
        TODAY + timedelta(days=7),
    ]


async def test_initialize_with_defaults_then_complete_with_pending_task(service, notifier) -> None:
    """Completing a case does not require its tasks to be completed."""
    case = await service.initialize_with_defaults(
        T, ACTOR, ONB, "emp-2", [TemplateItem("IT setup", due_in_days=1)]
    )
    assert case.status == CaseStatus.PENDING
    assert case.start_date == TODAY
    assert case.expected_completion_date == TODAY + timedelta(days=30)
    assert case.tasks[0].due_date == TODAY + timedelta(days=1)

    completed = await service.complete_case(T, ACTOR, ONB, case.id)

    assert completed.status == CaseStatus.COMPLETED
    assert completed.actual_completion_date == TODAY
    assert completed.tasks[0].status == TaskStatus.PENDING
    assert notifier.kinds() == ["created", "case_completed"]


async def test_defaults_use_builtin_template_for_subject(service) -> None:
    """emp-1 is a Software Engineer in Engineering: common + technical + department tasks."""
    case = await service.initialize_with_defaults(T, ACTOR, ONB, "emp-1")
    labels = [t.label for t in case.tasks]
    assert labels[0] == "Complete HR documentation"
    assert "Development environment setup" in labels
    assert labels[-1] == "Project management tools setup"
    assert len(labels) == 12
    assert case.tasks[0].notes == "Priority: high, Category: documentation"
    assert case.tasks[0].due_date == TODAY + timedelta(days=3)
    assert case.notes == "Onboarding initiated for Ada Lovelace"


async def test_defaults_prefer_stored_active_checklist(service, checklists) -> None:
    await checklists.create_template(
        T, "Lean onboarding", ONB, None, [TemplateItem("Sign contract", due_in_days=0)]
    )
    case = await service.initialize_with_defaults(T, ACTOR, ONB, "emp-1")
    assert [t.label for t in case.tasks] == ["Sign contract"]
    assert case.tasks[0].due_date == TODAY


async def test_offboarding_defaults(service) -> None:
    case = await service.initialize_with_defaults(
        T, ACTOR, OFFB, "emp-2", dates=_off_dates(), reason="Resignation"
    )
    assert [t.label for t in case.tasks][:2] == ["Knowledge transfer", "Return company assets"]
    assert case.notes == "Offboarding initiated for Grace Hopper"


async def test_complete_wizard_creates_in_progress_case(service, notifier) -> None:
    case = await service.complete_wizard(T, ACTOR, "emp-3")
    assert case.kind == ONB
    assert case.status == CaseStatus.IN_PROGRESS
    assert case.notes == WIZARD_NOTES
    assert len(case.tasks) == 5
    assert case.tasks[1].due_date == TODAY + timedelta(days=1)
    assert notifier.kinds() == ["created"]


async def test_complete_wizard_activates_new_hire(service, subjects, audit) -> None:
    """An inactive new hire finishes the wizard and becomes active."""
    case = await service.complete_wizard(T, ACTOR, "emp-new")

    assert case.status == CaseStatus.IN_PROGRESS
    assert case.subject_id == "emp-new"
    assert subjects.activated == ["emp-new"]
    assert subjects.subjects[(T, "emp-new")].is_active
    entry = audit.entries[-1]
    assert (entry.resource_type, entry.resource_id) == ("employee", "emp-new")
    assert entry.new_values == {"is_active": True}


async def test_complete_wizard_leaves_active_subject_alone(service, subjects) -> None:
    await service.complete_wizard(T, ACTOR, "emp-3")
    assert subjects.activated == []


async def test_inactive_subject_can_be_onboarded_directly(service, subjects) -> None:
    case = await service.start_case(T, ACTOR, ONB, "emp-new", _dates())
    assert case.subject_id == "emp-new"
    assert subjects.activated == []


# Queries


async def test_get_case_wrong_kind_or_tenant_not_found(service) -> None:
    case = await _start(service)
    with pytest.raises(ResourceNotFoundException):
        await service.get_case(T, ACTOR, OFFB, case.id)
    with pytest.raises(ResourceNotFoundException):
        await service.get_case("t2", ACTOR, ONB, case.id)


async def test_list_cases_newest_first_with_status_filter(service) -> None:
    first = await _start(service, "emp-2")
    second = await _start(service, "emp-3")
    await service.cancel_case(T, ACTOR, ONB, first.id)

    all_cases = await service.list_cases(T, ACTOR, ONB)
    cancelled = await service.list_cases(T, ACTOR, ONB, status=CaseStatus.CANCELLED)

    assert [c.id for c in all_cases] == [second.id, first.id]
    assert [c.id for c in cancelled] == [first.id]


async def test_read_denied(service, gate) -> None:
    gate.denied.add(("read", "offboarding"))
    with pytest.raises(AuthorizationException):
        await service.list_cases(T, ACTOR, OFFB)


# Update and reconcile


async def test_reconcile_empty_list_deletes_all_tasks(service) -> None:
    case = await _start(service)
    result = await service.reconcile(T, ACTOR, ONB, case.id, [])
    assert result.tasks == []
    assert (await service.get_case(T, ACTOR, ONB, case.id)).tasks == []


async def test_reconcile_twice_with_returned_ids_is_noop(service, audit) -> None:
    case = await _start(service)
    first = await service.reconcile(
        T,
        ACTOR,
        ONB,
        case.id,
        [TaskInput(id=case.tasks[2].id, label="C"), TaskInput(label="D")],
    )
    entries = len(audit.entries)

    echo = [TaskInput(id=t.id, label=t.label) for t in first.tasks]
    second = await service.reconcile(T, ACTOR, ONB, case.id, echo)

    assert [t.label for t in first.tasks] == ["C", "D"]
    assert second.version == first.version
    assert [t.id for t in second.tasks] == [t.id for t in first.tasks]
    assert len(audit.entries) == entries


async def test_reconcile_rejects_task_of_another_case(service, store) -> None:
    case = await _start(service, "emp-2")
    other = await _start(service, "emp-3")
    with pytest.raises(ValidationException) as exc_info:
        await service.reconcile(
            T, ACTOR, ONB, case.id, [TaskInput(id=other.tasks[0].id, label="stolen")]
        )
    assert exc_info.value.details["field"] == "tasks[0].id"
    assert [t.label for t in store.cases[other.id].tasks] == ["A", "B", "C"]
    assert len(store.cases[case.id].tasks) == 3


async def test_update_case_locks_row(service, store) -> None:
    case = await _start(service)
    await service.update_case(T, ACTOR, ONB, case.id, CasePatch(notes="Remote start"))
    assert store.locked == [case.id]


async def test_update_case_patch_bumps_version_and_audits(service, audit) -> None:
    case = await _start(service)
    updated = await service.update_case(
        T, ACTOR, ONB, case.id, CasePatch(status="in_progress", notes="Remote start")
    )
    assert updated.status == CaseStatus.IN_PROGRESS
    assert updated.notes == "Remote start"
    assert updated.version == 2
    entry = audit.entries[-1]
    assert entry.action == AuditAction.UPDATED
    assert entry.old_values["status"] == "pending"
    assert entry.new_values["status"] == "in_progress"


async def test_completed_to_in_progress_rejected_case_unchanged(service) -> None:
    case = await _start(service)
    done = await service.complete_case(T, ACTOR, ONB, case.id)

    with pytest.raises(InvalidStateException) as exc_info:
        await service.update_case(
            T, ACTOR, ONB, case.id, CasePatch(status="in_progress", notes="reopen")
        )

    assert exc_info.value.details["current_status"] == "completed"
    after = await service.get_case(T, ACTOR, ONB, case.id)
    assert after.status == CaseStatus.COMPLETED
    assert after.notes is None
    assert after.version == done.version


async def test_update_with_invalid_task_list_applies_nothing(service) -> None:
    case = await _start(service)
    with pytest.raises(ValidationException):
        await service.update_case(
            T,
            ACTOR,
            ONB,
            case.id,
            CasePatch(notes="changed"),
            [TaskInput(id=case.tasks[0].id), TaskInput(id=case.tasks[0].id)],
        )
    after = await service.get_case(T, ACTOR, ONB, case.id)
    assert after.notes is None
    assert len(after.tasks) == 3
    assert after.version == 1


async def test_update_case_publishes_completion_events(service, notifier) -> None:
    case = await _start(service)
    a, b, _ = case.tasks
    result = await service.update_case(
        T,
        ACTOR,
        ONB,
        case.id,
        CasePatch(status="completed"),
        [
            TaskInput(id=a.id, status="completed"),
            TaskInput(id=b.id),
            TaskInput(label="Farewell lunch", completed_date=TODAY),
        ],
    )

    assert result.status == CaseStatus.COMPLETED
    assert len(result.tasks) == 3
    new_task = result.tasks[2]
    assert new_task.id is not None and new_task.status == TaskStatus.COMPLETED
    task_events = [e.task_id for e in notifier.events if e.event.value == "task_completed"]
    assert task_events == [a.id, new_task.id]
    assert notifier.kinds()[-1] == "case_completed"


async def test_update_case_missing_case_not_found(service) -> None:
    with pytest.raises(ResourceNotFoundException):
        await service.update_case(T, ACTOR, ONB, "missing", CasePatch(notes="x"))


# Complete, cancel, delete


async def test_complete_case_idempotent(service, notifier, audit) -> None:
    case = await _start(service)
    first = await service.complete_case(T, ACTOR, ONB, case.id, date(2025, 3, 20))
    second = await service.complete_case(T, ACTOR, ONB, case.id)
    assert first.actual_completion_date == date(2025, 3, 20)
    assert second.actual_completion_date == date(2025, 3, 20)
    assert notifier.kinds().count("case_completed") == 1
    assert [e.action for e in audit.entries].count(AuditAction.STATUS_CHANGED) == 1


async def test_complete_cancelled_case_rejected(service) -> None:
    case = await _start(service)
    await service.cancel_case(T, ACTOR, ONB, case.id)
    with pytest.raises(InvalidStateException):
        await service.complete_case(T, ACTOR, ONB, case.id)


async def test_cancel_completed_case_rejected(service) -> None:
    case = await _start(service)
    await service.complete_case(T, ACTOR, ONB, case.id)
    with pytest.raises(InvalidStateException):
        await service.cancel_case(T, ACTOR, ONB, case.id)


async def test_cancel_is_idempotent_and_publishes_nothing(service, notifier) -> None:
    case = await _start(service)
    await service.cancel_case(T, ACTOR, ONB, case.id)
    again = await service.cancel_case(T, ACTOR, ONB, case.id)
    assert again.status == CaseStatus.CANCELLED
    assert notifier.kinds() == ["created"]


async def test_delete_case_removes_tasks(service, audit) -> None:
    case = await _start(service)
    await service.delete_case(T, ACTOR, ONB, case.id)

    for task in case.tasks:
        with pytest.raises(ResourceNotFoundException):
            await service.get_task(T, ACTOR, task.id)
    with pytest.raises(ResourceNotFoundException):
        await service.get_case(T, ACTOR, ONB, case.id)
    assert audit.entries[-1].action == AuditAction.DELETED
    assert len(audit.entries[-1].old_values["tasks"]) == 3


# Task operations


async def test_add_task_appends_at_end(service) -> None:
    case = await _start(service)
    task = await service.add_task(T, ACTOR, case.id, TaskInput(label="Parking permit"))
    assert task.position == 3
    assert task.status == TaskStatus.PENDING
    after = await service.get_case(T, ACTOR, ONB, case.id)
    assert after.tasks[-1].id == task.id


async def test_add_task_with_wrong_kind_rejects_parent(service) -> None:
    case = await _start(service)
    with pytest.raises(ValidationException) as exc_info:
        await service.add_task(T, ACTOR, case.id, TaskInput(label="x"), kind=OFFB)
    assert exc_info.value.details["field"] == "case_id"


async def test_add_task_to_unknown_case_is_validation_error(service, store) -> None:
    with pytest.raises(ValidationException) as exc_info:
        await service.add_task(T, ACTOR, "no-such-case", TaskInput(label="x"))
    assert exc_info.value.details["field"] == "case_id"
    assert store.locked == []


async def test_add_task_denied_before_case_is_locked(service, store, gate) -> None:
    case = await _start(service)
    gate.denied.add(("update", "onboarding"))
    with pytest.raises(AuthorizationException):
        await service.add_task(T, ACTOR, case.id, TaskInput(label="x"), kind=ONB)
    assert store.locked == []


async def test_unknown_task_hidden_from_actor_without_access(service, gate) -> None:
    gate.denied.update({("update", "onboarding"), ("update", "offboarding")})
    with pytest.raises(AuthorizationException):
        await service.delete_task(T, ACTOR, "no-such-task")


async def test_task_write_denied_before_case_is_locked(service, store, gate) -> None:
    case = await _start(service)
    gate.denied.add(("update", "onboarding"))
    with pytest.raises(AuthorizationException):
        await service.update_task(T, ACTOR, case.tasks[0].id, TaskPatch(notes="x"))
    assert store.locked == []


async def test_update_task_completing_publishes_once(service, notifier) -> None:
    case = await _start(service)
    task_id = case.tasks[0].id
    updated = await service.update_task(T, ACTOR, task_id, TaskPatch(status="completed"))
    again = await service.update_task(T, ACTOR, task_id, TaskPatch(notes="done"))
    assert updated.completed_date == TODAY
    assert again.status == TaskStatus.COMPLETED
    assert notifier.kinds().count("task_completed") == 1


async def test_update_task_none_clears_field(service) -> None:
    case = await service.start_case(
        T, ACTOR, ONB, "emp-2", _dates(), [TaskInput(label="A", notes="bring ID")]
    )
    task = await service.update_task(T, ACTOR, case.tasks[0].id, TaskPatch(notes=None))
    assert task.notes is None
    assert task.label == "A"


async def test_complete_task_idempotent(service, notifier) -> None:
    case = await _start(service)
    task_id = case.tasks[1].id
    first = await service.complete_task(T, ACTOR, task_id, date(2025, 3, 4))
    second = await service.complete_task(T, ACTOR, task_id)
    assert first.completed_date == date(2025, 3, 4)
    assert second.completed_date == date(2025, 3, 4)
    completed = [e for e in notifier.events if e.event.value == "task_completed"]
    assert [e.task_id for e in completed] == [task_id]


async def test_delete_task_then_get_not_found(service) -> None:
    case = await _start(service)
    task_id = case.tasks[0].id
    await service.delete_task(T, ACTOR, task_id)
    with pytest.raises(ResourceNotFoundException):
        await service.get_task(T, ACTOR, task_id)
    assert len((await service.get_case(T, ACTOR, ONB, case.id)).tasks) == 2


async def test_task_of_other_tenant_not_found(service) -> None:
    case = await _start(service)
    with pytest.raises(ResourceNotFoundException):
        await service.get_task("t2", ACTOR, case.tasks[0].id)


async def test_task_update_denied_by_case_kind(service, gate) -> None:
    case = await _start(service)
    gate.denied.add(("update", "onboarding"))
    with pytest.raises(AuthorizationException):
        await service.complete_task(T, ACTOR, case.tasks[0].id)


# Best-effort side effects


async def test_failing_notifier_does_not_undo_case(store, subjects, gate, audit, caplog) -> None:
    service = LifecycleService(
        FakeCaseRepository(store),
        FakeTaskRepository(store),
        subjects,
        gate,
        RecordingNotifier(fail=True),
        audit,
        clock=lambda: FIXED_NOW,
    )
    with caplog.at_level(logging.WARNING):
        case = await _start(service)
    assert case.id in store.cases
    assert "notification" in caplog.text


async def test_failing_audit_does_not_undo_case(store, subjects, notifier) -> None:
    service = LifecycleService(
        FakeCaseRepository(store),
        FakeTaskRepository(store),
        subjects,
        FakeGate(),
        notifier,
        RecordingAudit(fail=True),
        clock=lambda: FIXED_NOW,
    )
    case = await _start(service)
    completed = await service.complete_case(T, ACTOR, ONB, case.id)
    assert completed.status == CaseStatus.COMPLETED
    assert notifier.kinds() == ["created", "case_completed"]
