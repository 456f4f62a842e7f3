"""Task API: single-task operations addressed by task id."""

from typing import Annotated

from fastapi import APIRouter, Depends, Response

from hrm.api.v1.dependencies import (
    get_actor_id,
    get_lifecycle_service,
    get_lifecycle_service_for_write,
    get_tenant_id,
)
from hrm.application.use_cases.lifecycle import LifecycleService
from hrm.schemas.task import TaskCompleteRequest, TaskPatchRequest, TaskResponse

router = APIRouter()


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[LifecycleService, Depends(get_lifecycle_service)],
):
    """Get task by id (tenant-scoped through its case)."""
    task = await service.get_task(tenant_id, actor_id, task_id)
    return TaskResponse.model_validate(task)


@router.patch("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskPatchRequest,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[LifecycleService, Depends(get_lifecycle_service_for_write)],
):
    """Partially update a task; absent fields are left unchanged, null clears."""
    task = await service.update_task(tenant_id, actor_id, task_id, body.to_patch())
    return TaskResponse.model_validate(task)


@router.post("/{task_id}/complete", response_model=TaskResponse)
async def complete_task(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[LifecycleService, Depends(get_lifecycle_service_for_write)],
    body: TaskCompleteRequest | None = None,
):
    """Mark task completed (idempotent); completion date defaults to today."""
    task = await service.complete_task(
        tenant_id,
        actor_id,
        task_id,
        completion_date=body.completion_date if body else None,
    )
    return TaskResponse.model_validate(task)


@router.delete("/{task_id}", status_code=204)
async def delete_task(
    task_id: str,
    tenant_id: Annotated[str, Depends(get_tenant_id)],
    actor_id: Annotated[str, Depends(get_actor_id)],
    service: Annotated[LifecycleService, Depends(get_lifecycle_service_for_write)],
) -> Response:
    """Remove task from its case."""
    await service.delete_task(tenant_id, actor_id, task_id)
    return Response(status_code=204)
