"""Checklist template operations: tenant-managed default task lists per case kind."""

from __future__ import annotations

from typing import Any, Sequence

from hrm.application.dtos.patch import UNSET
from hrm.application.dtos.template import ChecklistTemplateResult, TemplateItem
from hrm.application.interfaces.repositories import IChecklistRepository
from hrm.application.interfaces.services import IAuthorizationGate
from hrm.domain.entities.task import LABEL_MAX_LENGTH
from hrm.domain.enums import CaseKind
from hrm.domain.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from hrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

NAME_MAX_LENGTH = 255
RESOURCE = "checklist"


def _clean_name(name: str | None) -> str:
    value = (name or "").strip()
    if not value:
        raise ValidationException("Checklist name is required", field="name")
    if len(value) > NAME_MAX_LENGTH:
        raise ValidationException(
            f"Checklist name must be at most {NAME_MAX_LENGTH} characters", field="name"
        )
    return value


def _validate_items(items: Sequence[TemplateItem]) -> list[TemplateItem]:
    errors = []
    for index, item in enumerate(items):
        label = (item.label or "").strip()
        if not label:
            errors.append({"field": f"items[{index}].label", "message": "Label is required"})
        elif len(label) > LABEL_MAX_LENGTH:
            errors.append(
                {
                    "field": f"items[{index}].label",
                    "message": f"Label must be at most {LABEL_MAX_LENGTH} characters",
                }
            )
        if item.due_in_days is not None and item.due_in_days < 0:
            errors.append(
                {"field": f"items[{index}].due_in_days", "message": "Must not be negative"}
            )
    if errors:
        raise ValidationException(errors[0]["message"], field=errors[0]["field"], errors=errors)
    return list(items)


class ChecklistService:
    """CRUD for stored checklist templates, gated on the checklist resource."""

    def __init__(
        self, checklist_repo: IChecklistRepository, authorization: IAuthorizationGate
    ) -> None:
        self.checklist_repo = checklist_repo
        self.authorization = authorization

    async def _authorize(self, tenant_id: str, actor_id: str, action: str) -> None:
        if not await self.authorization.can_perform(tenant_id, actor_id, action, RESOURCE):
            raise AuthorizationException(resource=RESOURCE, action=action)

    async def list_checklists(
        self, tenant_id: str, actor_id: str, kind: CaseKind | None = None
    ) -> list[ChecklistTemplateResult]:
        """Return the tenant's checklists, optionally for one kind."""
        await self._authorize(tenant_id, actor_id, "read")
        return await self.checklist_repo.list_templates(
            tenant_id, CaseKind(kind) if kind else None
        )

    async def get_checklist(
        self, tenant_id: str, actor_id: str, checklist_id: str
    ) -> ChecklistTemplateResult:
        await self._authorize(tenant_id, actor_id, "read")
        checklist = await self.checklist_repo.get_template(tenant_id, checklist_id)
        if checklist is None:
            raise ResourceNotFoundException("checklist", checklist_id)
        return checklist

    async def create_checklist(
        self,
        tenant_id: str,
        actor_id: str,
        name: str,
        kind: CaseKind,
        description: str | None = None,
        items: Sequence[TemplateItem] = (),
    ) -> ChecklistTemplateResult:
        """Create an active checklist template."""
        await self._authorize(tenant_id, actor_id, "create")
        try:
            kind = CaseKind(kind)
        except ValueError as e:
            raise ValidationException(f"Invalid checklist kind: {kind!r}", field="kind") from e
        created = await self.checklist_repo.create_template(
            tenant_id,
            _clean_name(name),
            kind,
            description,
            _validate_items(items),
            active=True,
        )
        logger.info("Created %s checklist %s", kind.value, created.id)
        return created

    async def update_checklist(
        self,
        tenant_id: str,
        actor_id: str,
        checklist_id: str,
        *,
        name: Any = UNSET,
        description: Any = UNSET,
        items: Any = UNSET,
        active: Any = UNSET,
    ) -> ChecklistTemplateResult:
        """Update name, description, items or active flag (only supplied fields)."""
        await self._authorize(tenant_id, actor_id, "update")
        changes: dict[str, Any] = {}
        if name is not UNSET:
            changes["name"] = _clean_name(name)
        if description is not UNSET:
            changes["description"] = description
        if items is not UNSET:
            changes["items"] = _validate_items(items or [])
        if active is not UNSET:
            changes["active"] = bool(active)
        updated = await self.checklist_repo.update_template(tenant_id, checklist_id, changes)
        if updated is None:
            raise ResourceNotFoundException("checklist", checklist_id)
        return updated

    async def delete_checklist(self, tenant_id: str, actor_id: str, checklist_id: str) -> None:
        await self._authorize(tenant_id, actor_id, "delete")
        if not await self.checklist_repo.delete_template(tenant_id, checklist_id):
            raise ResourceNotFoundException("checklist", checklist_id)
        logger.info("Deleted checklist %s", checklist_id)

    async def get_active_template(
        self, tenant_id: str, actor_id: str, kind: CaseKind
    ) -> list[TemplateItem]:
        """Return items of the active template for kind (empty when none is stored)."""
        await self._authorize(tenant_id, actor_id, "read")
        template = await self.checklist_repo.get_active_template(tenant_id, CaseKind(kind))
        return list(template.items) if template else []
