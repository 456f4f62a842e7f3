"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

from hrm.domain.enums import CaseKind, CaseStatus

if TYPE_CHECKING:
    from hrm.application.dtos.template import ChecklistTemplateResult, TemplateItem
    from hrm.domain.entities.case import CaseEntity
    from hrm.domain.entities.task import TaskEntity


# Case repository interface
class ICaseRepository(Protocol):
    """Protocol for lifecycle case persistence (DIP)."""

    async def create_case(self, case: CaseEntity) -> CaseEntity:
        """Persist case and all of its tasks in one flush; return it with ids set."""

    async def get_case(
        self, tenant_id: str, case_id: str, kind: CaseKind | None = None
    ) -> CaseEntity | None:
        """Return case with its tasks ordered by position, or None."""

    async def get_case_for_update(
        self, tenant_id: str, case_id: str, kind: CaseKind | None = None
    ) -> CaseEntity | None:
        """Return case with tasks, holding a row lock until the transaction ends."""

    async def find_open_case(
        self, tenant_id: str, subject_id: str, kind: CaseKind
    ) -> CaseEntity | None:
        """Return the subject's open (pending or in_progress) case of kind, if any."""

    async def list_cases(
        self,
        tenant_id: str,
        kind: CaseKind,
        status: CaseStatus | None = None,
        subject_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[CaseEntity]:
        """Return cases of kind in tenant (newest first), optionally filtered."""

    async def save_case(self, case: CaseEntity) -> CaseEntity:
        """Persist the case's own fields and bump its version."""

    async def delete_case(self, tenant_id: str, case_id: str) -> bool:
        """Hard-delete case and its tasks. Return True if deleted."""


# Task repository interface
class ITaskRepository(Protocol):
    """Protocol for checklist task persistence (DIP)."""

    async def create_task(self, case_id: str, task: TaskEntity) -> TaskEntity:
        """Insert task under case; return it with id set."""

    async def get_task(self, tenant_id: str, task_id: str) -> TaskEntity | None:
        """Return task by id when its case belongs to tenant, else None."""

    async def save_task(self, task: TaskEntity) -> TaskEntity:
        """Persist task fields and position."""

    async def delete_task(self, task_id: str) -> bool:
        """Delete one task. Return True if deleted."""

    async def delete_tasks(self, case_id: str, task_ids: set[str]) -> int:
        """Delete the given tasks of case; return number deleted."""


# Checklist template repository interface
class IChecklistRepository(Protocol):
    """Protocol for stored checklist templates (DIP)."""

    async def list_templates(
        self, tenant_id: str, kind: CaseKind | None = None
    ) -> list[ChecklistTemplateResult]:
        """Return tenant templates, optionally for one case kind."""

    async def get_template(
        self, tenant_id: str, template_id: str
    ) -> ChecklistTemplateResult | None:
        """Return template by id in tenant, or None."""

    async def get_active_template(
        self, tenant_id: str, kind: CaseKind
    ) -> ChecklistTemplateResult | None:
        """Return the most recently updated active template for kind, or None."""

    async def create_template(
        self,
        tenant_id: str,
        name: str,
        kind: CaseKind,
        description: str | None,
        items: list[TemplateItem],
        active: bool = True,
    ) -> ChecklistTemplateResult:
        """Create template."""

    async def update_template(
        self, tenant_id: str, template_id: str, changes: dict[str, Any]
    ) -> ChecklistTemplateResult | None:
        """Apply changes (name, description, items, active); None if not found."""

    async def delete_template(self, tenant_id: str, template_id: str) -> bool:
        """Delete template. Return True if deleted."""
