"""plan_task_reconciliation: pure diff of an incoming task list against a case's tasks."""

from datetime import date

import pytest

from hrm.application.dtos.task import TaskInput
from hrm.application.use_cases.lifecycle import plan_task_reconciliation
from hrm.domain.entities.task import TaskEntity
from hrm.domain.enums import TaskStatus
from hrm.domain.exceptions import ValidationException

TODAY = date(2025, 3, 3)


def _existing() -> list[TaskEntity]:
    return [
        TaskEntity(id="a", case_id="c1", label="A", position=0),
        TaskEntity(id="b", case_id="c1", label="B", position=1),
        TaskEntity(id="c", case_id="c1", label="C", position=2),
    ]


def test_unlisted_tasks_are_deleted_and_new_ones_created() -> None:
    """Incoming [a (renamed), new] deletes b and c, updates a, creates one task."""
    plan = plan_task_reconciliation(
        "c1",
        _existing(),
        [TaskInput(id="a", label="A2"), TaskInput(label="New")],
        TODAY,
    )
    assert plan.to_delete == frozenset({"b", "c"})
    assert [u.task.id for u in plan.to_update] == ["a"]
    assert plan.to_update[0].diff == {"label": ("A", "A2")}
    assert [t.label for t in plan.to_create] == ["New"]
    assert [t.label for t in plan.ordered] == ["A2", "New"]
    assert [t.position for t in plan.ordered] == [0, 1]


def test_same_list_twice_is_noop() -> None:
    """Echoing the current list (ids, same order) changes nothing."""
    existing = _existing()
    incoming = [TaskInput(id=t.id, label=t.label) for t in existing]
    plan = plan_task_reconciliation("c1", existing, incoming, TODAY)
    assert plan.is_noop
    assert [t.id for t in plan.ordered] == ["a", "b", "c"]


def test_reorder_updates_positions_only() -> None:
    plan = plan_task_reconciliation(
        "c1", _existing(), [TaskInput(id="c"), TaskInput(id="a"), TaskInput(id="b")], TODAY
    )
    assert not plan.to_delete and not plan.to_create
    assert {u.task.id: u.diff for u in plan.to_update} == {
        "c": {"position": (2, 0)},
        "a": {"position": (0, 1)},
        "b": {"position": (1, 2)},
    }


def test_empty_list_deletes_everything() -> None:
    plan = plan_task_reconciliation("c1", _existing(), [], TODAY)
    assert plan.to_delete == frozenset({"a", "b", "c"})
    assert plan.ordered == []


def test_foreign_id_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        plan_task_reconciliation("c1", _existing(), [TaskInput(id="zzz", label="X")], TODAY)
    assert exc_info.value.details["field"] == "tasks[0].id"


def test_duplicate_id_rejected() -> None:
    with pytest.raises(ValidationException) as exc_info:
        plan_task_reconciliation(
            "c1", _existing(), [TaskInput(id="a"), TaskInput(id="a")], TODAY
        )
    assert exc_info.value.details["field"] == "tasks[1].id"


def test_new_task_without_label_rejected_with_index() -> None:
    with pytest.raises(ValidationException) as exc_info:
        plan_task_reconciliation("c1", _existing(), [TaskInput(id="a"), TaskInput()], TODAY)
    assert exc_info.value.details["field"] == "tasks[1].label"


def test_existing_entities_are_not_mutated() -> None:
    existing = _existing()
    plan_task_reconciliation("c1", existing, [TaskInput(id="b", label="Changed")], TODAY)
    assert existing[1].label == "B"
    assert existing[1].position == 1


def test_newly_completed_tasks_are_reported() -> None:
    """Completing an existing task or creating a completed one marks it newly completed."""
    existing = _existing()
    existing[2] = TaskEntity(
        id="c",
        case_id="c1",
        label="C",
        position=2,
        status=TaskStatus.COMPLETED,
        completed_date=date(2025, 3, 1),
    )
    plan = plan_task_reconciliation(
        "c1",
        existing,
        [
            TaskInput(id="a", status="completed"),
            TaskInput(id="b"),
            TaskInput(id="c"),
            TaskInput(label="Done already", completed_date=date(2025, 3, 2)),
        ],
        TODAY,
    )
    assert [t.label for t in plan.newly_completed] == ["A", "Done already"]
    assert plan.newly_completed[0].completed_date == TODAY
    assert plan.newly_completed[1].status == TaskStatus.COMPLETED
