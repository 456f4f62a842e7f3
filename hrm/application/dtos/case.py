"""DTOs for onboarding/offboarding cases."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

from hrm.application.dtos.patch import UNSET, Unset, supplied_fields
from hrm.application.dtos.task import TaskResult
from hrm.domain.entities.case import CaseEntity
from hrm.domain.enums import CaseKind, CaseStatus


@dataclass(frozen=True)
class CaseDates:
    """Dates supplied when a case is started.

    start_date is the onboarding start or the offboarding initiation date.
    """

    start_date: date
    expected_completion_date: date | None = None
    last_working_date: date | None = None
    exit_interview_date: date | None = None


@dataclass(frozen=True)
class CasePatch:
    """Partial update of a case's own fields. UNSET = not supplied; None = clear.

    start_date and status cannot be cleared; None for them is rejected on apply.
    """

    start_date: date | None | Unset = UNSET
    expected_completion_date: date | None | Unset = UNSET
    actual_completion_date: date | None | Unset = UNSET
    status: CaseStatus | str | None | Unset = UNSET
    notes: str | None | Unset = UNSET
    last_working_date: date | None | Unset = UNSET
    reason: str | None | Unset = UNSET
    exit_interview_date: date | None | Unset = UNSET

    def changes(self) -> dict[str, Any]:
        """Return supplied fields."""
        return supplied_fields(self)


@dataclass(frozen=True)
class CaseResult:
    """Case read-model with its ordered tasks."""

    id: str
    tenant_id: str
    kind: CaseKind
    subject_id: str
    status: CaseStatus
    start_date: date
    expected_completion_date: date | None
    actual_completion_date: date | None
    notes: str | None
    last_working_date: date | None
    reason: str | None
    exit_interview_date: date | None
    version: int
    tasks: list[TaskResult]
    created_at: datetime | None
    updated_at: datetime | None

    @classmethod
    def from_entity(cls, case: CaseEntity) -> CaseResult:
        """Build from a persisted CaseEntity."""
        return cls(
            id=case.id or "",
            tenant_id=case.tenant_id,
            kind=case.kind,
            subject_id=case.subject_id,
            status=case.status,
            start_date=case.start_date,
            expected_completion_date=case.expected_completion_date,
            actual_completion_date=case.actual_completion_date,
            notes=case.notes,
            last_working_date=case.last_working_date,
            reason=case.reason,
            exit_interview_date=case.exit_interview_date,
            version=case.version,
            tasks=[TaskResult.from_entity(t) for t in case.tasks],
            created_at=case.created_at,
            updated_at=case.updated_at,
        )
