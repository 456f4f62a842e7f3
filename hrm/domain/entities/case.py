"""Case domain entity (onboarding or offboarding).

A case is the lifecycle record for one subject and the atomic unit for
task-list reconciliation. Onboarding and offboarding cases share one shape;
offboarding additionally records last working date, reason and exit
interview date.
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, ClassVar, Mapping

from hrm.domain.entities.task import TaskEntity
from hrm.domain.enums import CaseKind, CaseStatus
from hrm.domain.exceptions import InvalidStateException, ValidationException

_ALLOWED_TRANSITIONS: dict[CaseStatus, frozenset[CaseStatus]] = {
    CaseStatus.PENDING: frozenset(
        {CaseStatus.IN_PROGRESS, CaseStatus.COMPLETED, CaseStatus.CANCELLED}
    ),
    CaseStatus.IN_PROGRESS: frozenset({CaseStatus.COMPLETED, CaseStatus.CANCELLED}),
    CaseStatus.COMPLETED: frozenset(),
    CaseStatus.CANCELLED: frozenset(),
}


@dataclass
class CaseEntity:
    """Domain entity for an onboarding/offboarding case and its tasks.

    Status changes go through transition_to/complete/cancel, which reject
    moves not in the state machine and leave the entity unmodified.
    """

    id: str | None
    tenant_id: str
    kind: CaseKind
    subject_id: str
    start_date: date
    expected_completion_date: date | None = None
    status: CaseStatus = CaseStatus.PENDING
    actual_completion_date: date | None = None
    notes: str | None = None
    last_working_date: date | None = None
    reason: str | None = None
    exit_interview_date: date | None = None
    version: int = 1
    tasks: list[TaskEntity] = field(default_factory=list)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    MUTABLE_FIELDS: ClassVar[frozenset[str]] = frozenset(
        {
            "start_date",
            "expected_completion_date",
            "actual_completion_date",
            "status",
            "notes",
            "last_working_date",
            "reason",
            "exit_interview_date",
        }
    )
    _OFFBOARDING_ONLY: ClassVar[tuple[str, ...]] = (
        "last_working_date",
        "reason",
        "exit_interview_date",
    )

    def __post_init__(self) -> None:
        try:
            self.kind = CaseKind(self.kind)
        except ValueError as e:
            raise ValidationException(f"Invalid case kind: {self.kind!r}", field="kind") from e
        self.status = self._coerce_status(self.status)
        self.validate()

    @staticmethod
    def _coerce_status(status: CaseStatus | str) -> CaseStatus:
        try:
            return CaseStatus(status)
        except ValueError as e:
            raise ValidationException(
                f"Invalid case status: {status!r}", field="status"
            ) from e

    def validate(self) -> None:
        """Validate case business rules. Raises ValidationException if invalid."""
        self._validate_values(self._current_values())

    def _current_values(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in self.MUTABLE_FIELDS}

    def _validate_values(self, values: Mapping[str, Any]) -> None:
        errors: list[dict[str, Any]] = []
        if not self.tenant_id:
            errors.append({"field": "tenant_id", "message": "Case must belong to a tenant"})
        if not self.subject_id:
            errors.append({"field": "subject_id", "message": "Subject is required"})
        if values["start_date"] is None:
            errors.append({"field": "start_date", "message": "Start date is required"})
        expected = values["expected_completion_date"]
        if expected is not None and values["start_date"] is not None and expected < values["start_date"]:
            errors.append(
                {
                    "field": "expected_completion_date",
                    "message": "Expected completion date cannot precede the start date",
                }
            )
        if self.kind == CaseKind.OFFBOARDING:
            if values["last_working_date"] is None:
                errors.append(
                    {"field": "last_working_date", "message": "Last working date is required"}
                )
            if not (values["reason"] or "").strip():
                errors.append({"field": "reason", "message": "Reason is required"})
        else:
            for name in self._OFFBOARDING_ONLY:
                if values[name] is not None:
                    errors.append(
                        {"field": name, "message": "Only offboarding cases record this field"}
                    )
        if errors:
            raise ValidationException(
                errors[0]["message"], field=errors[0]["field"], errors=errors
            )

    def is_open(self) -> bool:
        """Return whether the case is in a non-terminal status."""
        return not self.status.is_terminal

    def can_transition_to(self, target: CaseStatus) -> bool:
        """Return whether the state machine allows moving to target (same status counts)."""
        return target == self.status or target in _ALLOWED_TRANSITIONS[self.status]

    def _check_transition(self, target: CaseStatus) -> None:
        if not self.can_transition_to(target):
            raise InvalidStateException(
                "case", self.id or "", self.status.value, target.value
            )

    def transition_to(self, target: CaseStatus | str, today: date | None = None) -> bool:
        """Move to target status. Returns False when already there.

        Entering completed stamps actual_completion_date with ``today`` when
        it is not already set.
        """
        target = self._coerce_status(target)
        self._check_transition(target)
        if target == self.status:
            return False
        self.status = target
        if target == CaseStatus.COMPLETED and self.actual_completion_date is None:
            self.actual_completion_date = today
        return True

    def complete(self, completion_date: date) -> bool:
        """Complete the case. Idempotent when already completed; rejected from cancelled."""
        if self.status == CaseStatus.COMPLETED:
            return False
        self._check_transition(CaseStatus.COMPLETED)
        self.status = CaseStatus.COMPLETED
        self.actual_completion_date = completion_date
        return True

    def cancel(self) -> bool:
        """Cancel the case. Idempotent when already cancelled; rejected from completed."""
        return self.transition_to(CaseStatus.CANCELLED)

    def apply_changes(
        self, changes: Mapping[str, Any], today: date
    ) -> dict[str, tuple[Any, Any]]:
        """Apply a partial update to the case's own fields.

        Only keys present in ``changes`` are touched. The status transition
        and the resulting field values are validated before anything is
        assigned, so a rejected patch leaves the case unmodified. Returns
        {field: (old, new)} for changed fields.
        """
        unknown = set(changes) - self.MUTABLE_FIELDS
        if unknown:
            raise ValidationException(
                f"Unknown case fields: {', '.join(sorted(unknown))}", field="case"
            )
        proposed = self._current_values()
        proposed.update(changes)
        target = self._coerce_status(proposed["status"])
        self._check_transition(target)
        if target == CaseStatus.COMPLETED and proposed["actual_completion_date"] is None:
            if target == self.status:
                raise ValidationException(
                    "A completed case must keep its completion date",
                    field="actual_completion_date",
                )
            proposed["actual_completion_date"] = today
        proposed["status"] = target
        self._validate_values(proposed)

        diff: dict[str, tuple[Any, Any]] = {}
        for name, new in proposed.items():
            old = getattr(self, name)
            if old != new:
                diff[name] = (old, new)
                setattr(self, name, new)
        return diff

    def task_by_id(self, task_id: str) -> TaskEntity | None:
        """Return the owned task with the given id, or None."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def snapshot(self, *, include_tasks: bool = False) -> dict[str, Any]:
        """Return a JSON-friendly dict of the case (for audit diffs)."""
        data: dict[str, Any] = {
            "id": self.id,
            "kind": self.kind.value,
            "subject_id": self.subject_id,
            "version": self.version,
        }
        for name in sorted(self.MUTABLE_FIELDS):
            value = getattr(self, name)
            if isinstance(value, date):
                value = value.isoformat()
            elif isinstance(value, CaseStatus):
                value = value.value
            data[name] = value
        if include_tasks:
            data["tasks"] = [t.snapshot() for t in self.tasks]
        return data
