"""Request context dependencies: tenant and actor from headers."""

from fastapi import HTTPException, Request

from hrm.core.config import get_settings
from hrm.core.header_validation import HEADER_ID_MAX_LENGTH, is_valid_header_id


def _required_header_id(request: Request, name: str, label: str) -> str:
    value = request.headers.get(name)
    if not value:
        raise HTTPException(
            status_code=400,
            detail=f"Missing required header: {name}",
        )
    if not is_valid_header_id(value):
        raise HTTPException(
            status_code=400,
            detail=(
                f"Invalid {label} format (use alphanumeric, hyphen, underscore; "
                f"max {HEADER_ID_MAX_LENGTH} characters)"
            ),
        )
    return value


async def get_tenant_id(request: Request) -> str:
    """Tenant id from the tenant header (every query is scoped by it)."""
    return _required_header_id(request, get_settings().tenant_header_name, "tenant ID")


async def get_actor_id(request: Request) -> str:
    """Id of the user performing the request, checked against their roles per operation."""
    return _required_header_id(request, get_settings().actor_header_name, "actor ID")
