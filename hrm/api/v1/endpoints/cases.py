"""Onboarding/offboarding case API: thin routes delegating to LifecycleService.

Static onboarding routes are declared before the /{kind}/{case_id} routes so
they are matched first.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Response

from hrm.api.v1.dependencies import (
    get_actor_id,
    get_bulk_onboarding_use_case,
    get_lifecycle_service,
    get_lifecycle_service_for_write,
    get_tenant_id,
)
from hrm.application.use_cases.lifecycle import BulkOnboardingUseCase, LifecycleService
from hrm.domain.enums import CaseKind, CaseStatus
from hrm.schemas.case import (
    BulkOnboardingRequest,
    BulkOnboardingResponse,
    CaseCompleteRequest,
    CaseCreateRequest,
    CaseDefaultsRequest,
    CaseResponse,
    CaseUpdateRequest,
    TaskReconcileRequest,
)
from hrm.schemas.task import TaskItemRequest, TaskResponse

router = APIRouter()

TenantId = Annotated[str, Depends(get_tenant_id)]
ActorId = Annotated[str, Depends(get_actor_id)]
ReadService = Annotated[LifecycleService, Depends(get_lifecycle_service)]
WriteService = Annotated[LifecycleService, Depends(get_lifecycle_service_for_write)]


@router.post("/onboarding/bulk", response_model=BulkOnboardingResponse)
async def bulk_onboard(
    body: BulkOnboardingRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    bulk_uc: Annotated[BulkOnboardingUseCase, Depends(get_bulk_onboarding_use_case)],
):
    """Start onboarding for many subjects; failures are reported per subject."""
    report = await bulk_uc.execute(
        tenant_id,
        actor_id,
        body.subject_ids,
        template=[i.to_item() for i in body.template] if body.template is not None else None,
    )
    return BulkOnboardingResponse.model_validate(report)


@router.post(
    "/onboarding/wizard/{subject_id}/complete",
    response_model=CaseResponse,
    status_code=201,
)
async def complete_onboarding_wizard(
    subject_id: str,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Final wizard step: create an in-progress onboarding case with the wizard tasks."""
    case = await service.complete_wizard(tenant_id, actor_id, subject_id)
    return CaseResponse.model_validate(case)


@router.post("/{kind}", response_model=CaseResponse, status_code=201)
async def start_case(
    kind: CaseKind,
    body: CaseCreateRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Start a case with an explicit task list (tasks are created pending)."""
    case = await service.start_case(
        tenant_id,
        actor_id,
        kind,
        body.subject_id,
        body.dates(),
        body.task_inputs(),
        notes=body.notes,
        reason=body.reason,
    )
    return CaseResponse.model_validate(case)


@router.post("/{kind}/defaults", response_model=CaseResponse, status_code=201)
async def start_case_with_defaults(
    kind: CaseKind,
    body: CaseDefaultsRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Start a case from the stored or built-in default template for the subject."""
    case = await service.initialize_with_defaults(
        tenant_id,
        actor_id,
        kind,
        body.subject_id,
        [i.to_item() for i in body.template] if body.template is not None else None,
        dates=body.dates(),
        notes=body.notes,
        reason=body.reason,
    )
    return CaseResponse.model_validate(case)


@router.get("/{kind}", response_model=list[CaseResponse])
async def list_cases(
    kind: CaseKind,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: ReadService,
    status: CaseStatus | None = None,
    subject_id: str | None = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=1000),
):
    """List cases of kind for tenant (newest first, paginated)."""
    cases = await service.list_cases(
        tenant_id,
        actor_id,
        kind,
        status=status,
        subject_id=subject_id,
        skip=skip,
        limit=limit,
    )
    return [CaseResponse.model_validate(c) for c in cases]


@router.get("/{kind}/{case_id}", response_model=CaseResponse)
async def get_case(
    kind: CaseKind,
    case_id: str,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: ReadService,
):
    """Get case with its ordered tasks."""
    case = await service.get_case(tenant_id, actor_id, kind, case_id)
    return CaseResponse.model_validate(case)


@router.put("/{kind}/{case_id}", response_model=CaseResponse)
async def update_case(
    kind: CaseKind,
    case_id: str,
    body: CaseUpdateRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Update case fields and, when tasks is present, reconcile the task list."""
    case = await service.update_case(
        tenant_id,
        actor_id,
        kind,
        case_id,
        patch=body.to_patch(),
        tasks=body.task_inputs(),
    )
    return CaseResponse.model_validate(case)


@router.put("/{kind}/{case_id}/tasks", response_model=CaseResponse)
async def reconcile_tasks(
    kind: CaseKind,
    case_id: str,
    body: TaskReconcileRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Replace the case's task list: unlisted tasks are deleted, new ones created."""
    case = await service.reconcile(
        tenant_id, actor_id, kind, case_id, [t.to_input() for t in body.tasks]
    )
    return CaseResponse.model_validate(case)


@router.post("/{kind}/{case_id}/tasks", response_model=TaskResponse, status_code=201)
async def add_task(
    kind: CaseKind,
    case_id: str,
    body: TaskItemRequest,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Append a pending task to the case."""
    task = await service.add_task(tenant_id, actor_id, case_id, body.to_input(), kind=kind)
    return TaskResponse.model_validate(task)


@router.post("/{kind}/{case_id}/complete", response_model=CaseResponse)
async def complete_case(
    kind: CaseKind,
    case_id: str,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
    body: CaseCompleteRequest | None = None,
):
    """Complete the case (idempotent); completion date defaults to today."""
    case = await service.complete_case(
        tenant_id,
        actor_id,
        kind,
        case_id,
        actual_completion_date=body.actual_completion_date if body else None,
    )
    return CaseResponse.model_validate(case)


@router.post("/{kind}/{case_id}/cancel", response_model=CaseResponse)
async def cancel_case(
    kind: CaseKind,
    case_id: str,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
):
    """Cancel a pending or in-progress case."""
    case = await service.cancel_case(tenant_id, actor_id, kind, case_id)
    return CaseResponse.model_validate(case)


@router.delete("/{kind}/{case_id}", status_code=204)
async def delete_case(
    kind: CaseKind,
    case_id: str,
    tenant_id: TenantId,
    actor_id: ActorId,
    service: WriteService,
) -> Response:
    """Delete the case and all of its tasks."""
    await service.delete_case(tenant_id, actor_id, kind, case_id)
    return Response(status_code=204)
