"""Resolves case subjects from the employee table (implements ISubjectResolver)."""

from __future__ import annotations

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.dtos.subject import SubjectRecord
from hrm.domain.exceptions import PersistenceException
from hrm.infrastructure.persistence.models.employee import Employee
from hrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlSubjectResolver:
    """Looks up non-deleted employees in the tenant, active or not yet onboarded."""

    def __init__(self, db: AsyncSession) -> None:
        self.db = db

    async def resolve_subject(
        self, tenant_id: str, subject_id: str
    ) -> SubjectRecord | None:
        query = select(Employee).where(
            Employee.id == subject_id,
            Employee.tenant_id == tenant_id,
            Employee.deleted_at.is_(None),
        )
        result = await self.db.execute(query)
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return SubjectRecord(
            id=row.id,
            tenant_id=row.tenant_id,
            name=row.name,
            email=row.email,
            department=row.department,
            designation=row.designation,
            is_active=row.is_active,
        )

    async def activate_subject(self, tenant_id: str, subject_id: str) -> bool:
        """Mark the employee active in the current transaction. Return False if not found."""
        stmt = (
            update(Employee)
            .where(
                Employee.id == subject_id,
                Employee.tenant_id == tenant_id,
                Employee.deleted_at.is_(None),
            )
            .values(is_active=True)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            logger.error(
                "Persistence failure in activate_subject (tenant_id=%s, subject_id=%s)",
                tenant_id,
                subject_id,
                exc_info=True,
            )
            raise PersistenceException("activate_subject") from e
        return (result.rowcount or 0) > 0
