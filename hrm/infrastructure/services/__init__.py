"""Infrastructure services: sinks and resolvers backing the application ports."""

from hrm.infrastructure.services.audit_sink import AuditLogSink
from hrm.infrastructure.services.notification_sink import LogOnlyNotificationSink
from hrm.infrastructure.services.permission_resolver import (
    ROLE_PERMISSIONS,
    PermissionResolver,
)
from hrm.infrastructure.services.subject_resolver import SqlSubjectResolver

__all__ = [
    "AuditLogSink",
    "LogOnlyNotificationSink",
    "PermissionResolver",
    "ROLE_PERMISSIONS",
    "SqlSubjectResolver",
]
