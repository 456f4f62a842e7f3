"""Shared ports: permission gate and sinks, one set per session."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.services.authorization_service import AuthorizationService
from hrm.infrastructure.persistence.database import get_db, get_db_transactional
from hrm.infrastructure.services import (
    AuditLogSink,
    LogOnlyNotificationSink,
    PermissionResolver,
    SqlSubjectResolver,
)


async def get_authorization_service(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> AuthorizationService:
    """Role-based permission gate (reads actor roles)."""
    return AuthorizationService(PermissionResolver(db))


async def get_authorization_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> AuthorizationService:
    """Permission gate sharing the write transaction's session."""
    return AuthorizationService(PermissionResolver(db))


def get_notification_sink() -> LogOnlyNotificationSink:
    """Notification sink (log-only; swap for a broker-backed sink in deployment)."""
    return LogOnlyNotificationSink()


def build_subject_resolver(db: AsyncSession) -> SqlSubjectResolver:
    return SqlSubjectResolver(db)


def build_audit_sink(db: AsyncSession) -> AuditLogSink:
    return AuditLogSink(db)
