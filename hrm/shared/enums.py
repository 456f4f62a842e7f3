"""Shared enumerations for the HRM lifecycle service.

Cross-cutting enums used by application and infrastructure (audit, actor
type). Lifecycle enums (case kind and status) live in hrm.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class ActorType(_ValuesMixin, str, Enum):
    """Actor type for audit tracking (who performed the action)."""

    USER = "user"
    SYSTEM = "system"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types recorded for lifecycle mutations."""

    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"
    STATUS_CHANGED = "status_changed"
    TASKS_RECONCILED = "tasks_reconciled"
