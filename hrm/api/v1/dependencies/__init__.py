"""FastAPI dependencies (composition root for the v1 API)."""

from hrm.api.v1.dependencies.checklist import (
    get_checklist_service,
    get_checklist_service_for_write,
)
from hrm.api.v1.dependencies.lifecycle import (
    get_bulk_onboarding_use_case,
    get_lifecycle_service,
    get_lifecycle_service_for_write,
)
from hrm.api.v1.dependencies.request import get_actor_id, get_tenant_id

__all__ = [
    "get_actor_id",
    "get_bulk_onboarding_use_case",
    "get_checklist_service",
    "get_checklist_service_for_write",
    "get_lifecycle_service",
    "get_lifecycle_service_for_write",
    "get_tenant_id",
]
