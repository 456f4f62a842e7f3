"""Checklist template API (tenant-managed default task sets)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from hrm.api.v1.dependencies import (
    get_actor_id,
    get_checklist_service,
    get_checklist_service_for_write,
    get_tenant_id,
)
from hrm.application.use_cases.checklists import ChecklistService
from hrm.domain.enums import CaseKind
from hrm.schemas.checklist import (
    ChecklistCreateRequest,
    ChecklistResponse,
    ChecklistUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=list[ChecklistResponse])
async def list_checklists(
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[ChecklistService, Depends(get_checklist_service)],
    kind: CaseKind | None = None,
):
    """List checklist templates, optionally for one case kind."""
    checklists = await service.list_checklists(tenant_id, actor_id, kind)
    return [ChecklistResponse.model_validate(c) for c in checklists]


@router.post("", response_model=ChecklistResponse, status_code=201)
async def create_checklist(
    body: ChecklistCreateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[ChecklistService, Depends(get_checklist_service_for_write)],
):
    """Create a checklist template (active by default)."""
    checklist = await service.create_checklist(
        tenant_id,
        actor_id,
        body.name,
        body.kind,
        description=body.description,
        items=[i.to_item() for i in body.items],
    )
    return ChecklistResponse.model_validate(checklist)


@router.get("/{checklist_id}", response_model=ChecklistResponse)
async def get_checklist(
    checklist_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[ChecklistService, Depends(get_checklist_service)],
):
    """Get checklist template by id."""
    checklist = await service.get_checklist(tenant_id, actor_id, checklist_id)
    return ChecklistResponse.model_validate(checklist)


@router.put("/{checklist_id}", response_model=ChecklistResponse)
async def update_checklist(
    checklist_id: str,
    body: ChecklistUpdateRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[ChecklistService, Depends(get_checklist_service_for_write)],
):
    """Update checklist template (partial)."""
    changes = {name: getattr(body, name) for name in body.model_fields_set}
    if body.items is not None:
        changes["items"] = [i.to_item() for i in body.items]
    checklist = await service.update_checklist(tenant_id, actor_id, checklist_id, **changes)
    return ChecklistResponse.model_validate(checklist)


@router.delete("/{checklist_id}", status_code=204)
async def delete_checklist(
    checklist_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[ChecklistService, Depends(get_checklist_service_for_write)],
) -> Response:
    """Delete checklist template."""
    await service.delete_checklist(tenant_id, actor_id, checklist_id)
    return Response(status_code=204)
