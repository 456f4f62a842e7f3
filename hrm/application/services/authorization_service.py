"""Authorization service: permission checks on top of an IPermissionResolver."""

from __future__ import annotations

from hrm.application.interfaces.services import IPermissionResolver
from hrm.domain.exceptions import AuthorizationException


class AuthorizationService:
    """Centralized permission checking (implements IAuthorizationGate)."""

    def __init__(self, permission_resolver: IPermissionResolver) -> None:
        self.permission_resolver = permission_resolver

    async def get_actor_permissions(self, actor_id: str, tenant_id: str) -> set[str]:
        """Return set of permission codes (e.g. onboarding:create, checklist:read)."""
        return await self.permission_resolver.get_actor_permissions(actor_id, tenant_id)

    async def can_perform(
        self, tenant_id: str, actor_id: str, action: str, resource: str
    ) -> bool:
        """Return True if actor has resource:action or resource:* or *:*."""
        if not actor_id:
            return False
        permissions = await self.get_actor_permissions(actor_id, tenant_id)
        code = f"{resource}:{action}"
        if code in permissions:
            return True
        if f"{resource}:*" in permissions or "*:*" in permissions:
            return True
        return False

    async def require_permission(
        self, tenant_id: str, actor_id: str, action: str, resource: str
    ) -> None:
        """Raise AuthorizationException if actor lacks permission."""
        if not await self.can_perform(tenant_id, actor_id, action, resource):
            raise AuthorizationException(resource=resource, action=action)
