"""Audit sink: appends lifecycle diffs to audit_log (implements IAuditSink)."""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.dtos.events import AuditEntry
from hrm.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository


class AuditLogSink:
    """Writes each entry inside a SAVEPOINT so a failed insert leaves the request transaction usable.

    Errors still propagate to the caller, which logs and continues.
    """

    def __init__(self, db: AsyncSession) -> None:
        self.db = db
        self.repo = AuditLogRepository(db)

    async def record(self, entry: AuditEntry) -> None:
        async with self.db.begin_nested():
            await self.repo.append(entry)
