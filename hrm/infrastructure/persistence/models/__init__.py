"""Persistence models: ORM entities and mixins."""

from hrm.infrastructure.persistence.models.actor_role import ActorRole
from hrm.infrastructure.persistence.models.audit_log import AuditLog
from hrm.infrastructure.persistence.models.case import LifecycleCase
from hrm.infrastructure.persistence.models.checklist import ChecklistTemplate
from hrm.infrastructure.persistence.models.employee import Employee
from hrm.infrastructure.persistence.models.mixins import (
    CuidMixin,
    MultiTenantModel,
    SoftDeleteMixin,
    TenantMixin,
    TimestampMixin,
    VersionedMixin,
)
from hrm.infrastructure.persistence.models.task import LifecycleTask

__all__ = [
    "ActorRole",
    "AuditLog",
    "ChecklistTemplate",
    "CuidMixin",
    "Employee",
    "LifecycleCase",
    "LifecycleTask",
    "MultiTenantModel",
    "SoftDeleteMixin",
    "TenantMixin",
    "TimestampMixin",
    "VersionedMixin",
]
