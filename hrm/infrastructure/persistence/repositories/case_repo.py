"""Case repository. Implements ICaseRepository over lifecycle_case and lifecycle_task."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from hrm.domain.entities.case import CaseEntity
from hrm.domain.enums import CaseKind, CaseStatus
from hrm.domain.exceptions import ResourceNotFoundException
from hrm.infrastructure.persistence.models.case import LifecycleCase
from hrm.infrastructure.persistence.repositories.base import BaseRepository
from hrm.infrastructure.persistence.repositories.mappers import case_to_entity, new_task_row


class CaseRepository(BaseRepository[LifecycleCase]):
    """Lifecycle case repository. Tasks are loaded with selectinload, ordered by position."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, LifecycleCase)

    def _case_query(
        self, tenant_id: str, case_id: str, kind: CaseKind | None
    ) -> Select[tuple[LifecycleCase]]:
        stmt = (
            select(LifecycleCase)
            .where(LifecycleCase.id == case_id, LifecycleCase.tenant_id == tenant_id)
            .options(selectinload(LifecycleCase.tasks))
            .execution_options(populate_existing=True)
        )
        if kind is not None:
            stmt = stmt.where(LifecycleCase.kind == CaseKind(kind).value)
        return stmt

    async def create_case(self, case: CaseEntity) -> CaseEntity:
        """Insert case and its tasks in one flush."""
        row = LifecycleCase(
            tenant_id=case.tenant_id,
            kind=case.kind.value,
            subject_id=case.subject_id,
            status=case.status.value,
            start_date=case.start_date,
            expected_completion_date=case.expected_completion_date,
            actual_completion_date=case.actual_completion_date,
            notes=case.notes,
            last_working_date=case.last_working_date,
            reason=case.reason,
            exit_interview_date=case.exit_interview_date,
            version=1,
        )
        row.tasks = [new_task_row(None, t) for t in case.tasks]
        async with self._guard(
            "create_case", tenant_id=case.tenant_id, subject_id=case.subject_id
        ):
            self.db.add(row)
            await self.db.flush()
        return case_to_entity(row)

    async def get_case(
        self, tenant_id: str, case_id: str, kind: CaseKind | None = None
    ) -> CaseEntity | None:
        async with self._guard("get_case", tenant_id=tenant_id, case_id=case_id):
            result = await self.db.execute(self._case_query(tenant_id, case_id, kind))
            row = result.scalar_one_or_none()
        return case_to_entity(row) if row else None

    async def get_case_for_update(
        self, tenant_id: str, case_id: str, kind: CaseKind | None = None
    ) -> CaseEntity | None:
        """Load case with SELECT ... FOR UPDATE; tasks are read after the lock is held."""
        async with self._guard("get_case_for_update", tenant_id=tenant_id, case_id=case_id):
            result = await self.db.execute(
                self._case_query(tenant_id, case_id, kind).with_for_update()
            )
            row = result.scalar_one_or_none()
        return case_to_entity(row) if row else None

    async def find_open_case(
        self, tenant_id: str, subject_id: str, kind: CaseKind
    ) -> CaseEntity | None:
        stmt = (
            select(LifecycleCase)
            .where(
                LifecycleCase.tenant_id == tenant_id,
                LifecycleCase.subject_id == subject_id,
                LifecycleCase.kind == CaseKind(kind).value,
                LifecycleCase.status.in_(CaseStatus.open_values()),
            )
            .order_by(LifecycleCase.created_at.desc())
            .limit(1)
        )
        async with self._guard("find_open_case", tenant_id=tenant_id, subject_id=subject_id):
            result = await self.db.execute(stmt)
            row = result.scalar_one_or_none()
        return case_to_entity(row, with_tasks=False) if row else None

    async def list_cases(
        self,
        tenant_id: str,
        kind: CaseKind,
        status: CaseStatus | None = None,
        subject_id: str | None = None,
        skip: int = 0,
        limit: int = 100,
    ) -> list[CaseEntity]:
        """Return cases of kind (newest first) with tasks."""
        stmt = (
            select(LifecycleCase)
            .where(
                LifecycleCase.tenant_id == tenant_id,
                LifecycleCase.kind == CaseKind(kind).value,
            )
            .options(selectinload(LifecycleCase.tasks))
        )
        if status is not None:
            stmt = stmt.where(LifecycleCase.status == CaseStatus(status).value)
        if subject_id is not None:
            stmt = stmt.where(LifecycleCase.subject_id == subject_id)
        stmt = (
            stmt.order_by(LifecycleCase.created_at.desc(), LifecycleCase.id)
            .offset(skip)
            .limit(limit)
        )
        async with self._guard("list_cases", tenant_id=tenant_id, kind=kind):
            result = await self.db.execute(stmt)
            rows = list(result.scalars().all())
        return [case_to_entity(r) for r in rows]

    async def save_case(self, case: CaseEntity) -> CaseEntity:
        """Write the case's own fields and bump version. Tasks are written by TaskRepository."""
        async with self._guard("save_case", tenant_id=case.tenant_id, case_id=case.id):
            row = await self.db.get(LifecycleCase, case.id)
            if row is None or row.tenant_id != case.tenant_id:
                raise ResourceNotFoundException("case", case.id or "")
            row.status = case.status.value
            row.start_date = case.start_date
            row.expected_completion_date = case.expected_completion_date
            row.actual_completion_date = case.actual_completion_date
            row.notes = case.notes
            row.last_working_date = case.last_working_date
            row.reason = case.reason
            row.exit_interview_date = case.exit_interview_date
            row.version = row.version + 1
            await self.db.flush()
        return replace(
            case, version=row.version, updated_at=row.updated_at, tasks=list(case.tasks)
        )

    async def delete_case(self, tenant_id: str, case_id: str) -> bool:
        """Delete case row; tasks go with it (ON DELETE CASCADE)."""
        stmt = delete(LifecycleCase).where(
            LifecycleCase.id == case_id, LifecycleCase.tenant_id == tenant_id
        )
        async with self._guard("delete_case", tenant_id=tenant_id, case_id=case_id):
            result = await self.db.execute(stmt)
        return (result.rowcount or 0) > 0
