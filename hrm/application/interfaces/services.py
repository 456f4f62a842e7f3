"""Service interfaces (ports) for the application layer.

Protocols define contracts for collaborators of the lifecycle core (DIP).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from hrm.application.dtos.events import AuditEntry, LifecycleEvent
    from hrm.application.dtos.subject import SubjectRecord


# Subject resolver interface
class ISubjectResolver(Protocol):
    """Protocol for looking up the employee a case is about."""

    async def resolve_subject(
        self, tenant_id: str, subject_id: str
    ) -> SubjectRecord | None:
        """Return the subject in tenant (active or not yet onboarded), or None when unknown."""

    async def activate_subject(self, tenant_id: str, subject_id: str) -> bool:
        """Mark the subject active; False when it no longer exists."""


# Permission resolver interface
class IPermissionResolver(Protocol):
    """Protocol for resolving an actor's permission codes."""

    async def get_actor_permissions(self, actor_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes (e.g. onboarding:create, checklist:read)."""


# Authorization gate interface
class IAuthorizationGate(Protocol):
    """Protocol for yes/no permission decisions per actor, action and resource."""

    async def can_perform(
        self, tenant_id: str, actor_id: str, action: str, resource: str
    ) -> bool:
        """Return True if actor may perform action on resource."""


# Notification sink interface
class INotificationSink(Protocol):
    """Protocol for publishing lifecycle events (at-most-once; delivery is the sink's concern)."""

    async def publish(self, event: LifecycleEvent) -> None:
        """Publish one event."""


# Audit sink interface
class IAuditSink(Protocol):
    """Protocol for recording before/after diffs of mutating operations."""

    async def record(self, entry: AuditEntry) -> None:
        """Append one audit entry."""
