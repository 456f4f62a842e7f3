"""Resolves actor permissions from DB role assignments (implements IPermissionResolver)."""

from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.infrastructure.persistence.models.actor_role import ActorRole

_CASE_ACTIONS = ("create", "read", "update", "complete", "cancel")

ROLE_PERMISSIONS: dict[str, frozenset[str]] = {
    "hr_admin": frozenset({"*:*"}),
    "hr_manager": frozenset(
        {f"{resource}:{action}" for resource in ("onboarding", "offboarding") for action in _CASE_ACTIONS}
        | {"checklist:read"}
    ),
    "employee": frozenset({"onboarding:read", "offboarding:read", "checklist:read"}),
}


class PermissionResolver:
    """Resolves actor permissions by expanding actor_role codes through ROLE_PERMISSIONS."""

    def __init__(
        self,
        db: AsyncSession,
        role_permissions: dict[str, frozenset[str]] | None = None,
    ) -> None:
        self.db = db
        self.role_permissions = role_permissions or ROLE_PERMISSIONS

    async def get_actor_permissions(self, actor_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes for actor in tenant (unknown role codes grant nothing)."""
        query = select(ActorRole.role_code).where(
            ActorRole.actor_id == actor_id,
            ActorRole.tenant_id == tenant_id,
        )
        result = await self.db.execute(query)
        permissions: set[str] = set()
        for (role_code,) in result.fetchall():
            permissions |= self.role_permissions.get(role_code, frozenset())
        return permissions
