"""Audit log repository. Append-only."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.dtos.events import AuditEntry
from hrm.infrastructure.persistence.models.audit_log import AuditLog
from hrm.infrastructure.persistence.repositories.base import BaseRepository


class AuditLogRepository(BaseRepository[AuditLog]):
    """Append-only audit log repository. No update/delete."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AuditLog)

    async def append(self, entry: AuditEntry) -> None:
        """Append one audit log entry."""
        row = AuditLog(
            tenant_id=entry.tenant_id,
            actor_id=entry.actor_id,
            actor_type=entry.actor_type.value,
            action=entry.action.value,
            resource_type=entry.resource_type,
            resource_id=entry.resource_id,
            old_values=entry.old_values,
            new_values=entry.new_values,
            audit_metadata=entry.metadata or None,
            timestamp=entry.timestamp,
        )
        async with self._guard("append_audit", resource_id=entry.resource_id):
            self.db.add(row)
            await self.db.flush()
