"""Checklist template repository. Implements IChecklistRepository."""

from __future__ import annotations

from typing import Any

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.dtos.template import ChecklistTemplateResult, TemplateItem
from hrm.domain.enums import CaseKind
from hrm.infrastructure.persistence.models.checklist import ChecklistTemplate
from hrm.infrastructure.persistence.repositories.base import BaseRepository

_ITEM_KEYS = ("label", "description", "due_in_days", "assignee_id", "category", "priority")


def _item_to_dict(item: TemplateItem) -> dict[str, Any]:
    return {key: getattr(item, key) for key in _ITEM_KEYS if getattr(item, key) is not None}


def _item_from_dict(data: dict[str, Any]) -> TemplateItem:
    return TemplateItem(**{key: data.get(key) for key in _ITEM_KEYS if key in data})


def _to_result(row: ChecklistTemplate) -> ChecklistTemplateResult:
    """Map ChecklistTemplate ORM to ChecklistTemplateResult DTO."""
    return ChecklistTemplateResult(
        id=row.id,
        tenant_id=row.tenant_id,
        name=row.name,
        kind=CaseKind(row.kind),
        description=row.description,
        items=[_item_from_dict(i) for i in row.items or []],
        active=row.active,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


class ChecklistRepository(BaseRepository[ChecklistTemplate]):
    """Checklist template repository (tenant-scoped)."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, ChecklistTemplate)

    async def _get_row(self, tenant_id: str, template_id: str) -> ChecklistTemplate | None:
        row = await self.get_by_id(template_id)
        if row is None or row.tenant_id != tenant_id:
            return None
        return row

    async def list_templates(
        self, tenant_id: str, kind: CaseKind | None = None
    ) -> list[ChecklistTemplateResult]:
        stmt = select(ChecklistTemplate).where(ChecklistTemplate.tenant_id == tenant_id)
        if kind is not None:
            stmt = stmt.where(ChecklistTemplate.kind == CaseKind(kind).value)
        stmt = stmt.order_by(ChecklistTemplate.name)
        async with self._guard("list_templates", tenant_id=tenant_id):
            result = await self.db.execute(stmt)
            rows = list(result.scalars().all())
        return [_to_result(r) for r in rows]

    async def get_template(
        self, tenant_id: str, template_id: str
    ) -> ChecklistTemplateResult | None:
        row = await self._get_row(tenant_id, template_id)
        return _to_result(row) if row else None

    async def get_active_template(
        self, tenant_id: str, kind: CaseKind
    ) -> ChecklistTemplateResult | None:
        stmt = (
            select(ChecklistTemplate)
            .where(
                ChecklistTemplate.tenant_id == tenant_id,
                ChecklistTemplate.kind == CaseKind(kind).value,
                ChecklistTemplate.active.is_(True),
            )
            .order_by(ChecklistTemplate.updated_at.desc())
            .limit(1)
        )
        async with self._guard("get_active_template", tenant_id=tenant_id, kind=kind):
            result = await self.db.execute(stmt)
            row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def create_template(
        self,
        tenant_id: str,
        name: str,
        kind: CaseKind,
        description: str | None,
        items: list[TemplateItem],
        active: bool = True,
    ) -> ChecklistTemplateResult:
        row = ChecklistTemplate(
            tenant_id=tenant_id,
            name=name,
            kind=CaseKind(kind).value,
            description=description,
            items=[_item_to_dict(i) for i in items],
            active=active,
        )
        return _to_result(await self.create(row))

    async def update_template(
        self, tenant_id: str, template_id: str, changes: dict[str, Any]
    ) -> ChecklistTemplateResult | None:
        row = await self._get_row(tenant_id, template_id)
        if row is None:
            return None
        for key, value in changes.items():
            if key == "items":
                value = [_item_to_dict(i) for i in value]
            setattr(row, key, value)
        return _to_result(await self.update(row))

    async def delete_template(self, tenant_id: str, template_id: str) -> bool:
        row = await self._get_row(tenant_id, template_id)
        if row is None:
            return False
        await self.delete(row)
        return True
