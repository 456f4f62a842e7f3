"""Task repository. Implements ITaskRepository over lifecycle_task."""

from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.domain.entities.task import TaskEntity
from hrm.domain.exceptions import ResourceNotFoundException
from hrm.infrastructure.persistence.models.case import LifecycleCase
from hrm.infrastructure.persistence.models.task import LifecycleTask
from hrm.infrastructure.persistence.repositories.base import BaseRepository
from hrm.infrastructure.persistence.repositories.mappers import (
    apply_task_fields,
    new_task_row,
    task_to_entity,
)


class TaskRepository(BaseRepository[LifecycleTask]):
    """Task repository; tenant scoping goes through the owning case."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, LifecycleTask)

    async def create_task(self, case_id: str, task: TaskEntity) -> TaskEntity:
        row = new_task_row(case_id, task)
        async with self._guard("create_task", case_id=case_id):
            self.db.add(row)
            await self.db.flush()
        return task_to_entity(row)

    async def get_task(self, tenant_id: str, task_id: str) -> TaskEntity | None:
        stmt = (
            select(LifecycleTask)
            .join(LifecycleCase, LifecycleTask.case_id == LifecycleCase.id)
            .where(LifecycleTask.id == task_id, LifecycleCase.tenant_id == tenant_id)
        )
        async with self._guard("get_task", tenant_id=tenant_id, task_id=task_id):
            result = await self.db.execute(stmt)
            row = result.scalar_one_or_none()
        return task_to_entity(row) if row else None

    async def save_task(self, task: TaskEntity) -> TaskEntity:
        async with self._guard("save_task", task_id=task.id, case_id=task.case_id):
            row = await self.get_by_id(task.id or "")
            if row is None:
                raise ResourceNotFoundException("task", task.id or "")
            apply_task_fields(row, task)
            await self.db.flush()
        return task_to_entity(row)

    async def delete_task(self, task_id: str) -> bool:
        async with self._guard("delete_task", task_id=task_id):
            result = await self.db.execute(
                delete(LifecycleTask).where(LifecycleTask.id == task_id)
            )
        return (result.rowcount or 0) > 0

    async def delete_tasks(self, case_id: str, task_ids: set[str]) -> int:
        """Delete the given tasks of one case (ids of other cases are ignored)."""
        if not task_ids:
            return 0
        stmt = delete(LifecycleTask).where(
            LifecycleTask.case_id == case_id, LifecycleTask.id.in_(task_ids)
        )
        async with self._guard("delete_tasks", case_id=case_id, count=len(task_ids)):
            result = await self.db.execute(stmt)
        return result.rowcount or 0
