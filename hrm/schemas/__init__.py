"""Pydantic request/response schemas for the API."""

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
from hrm.schemas.checklist import (
    ChecklistCreateRequest,
    ChecklistResponse,
    ChecklistUpdateRequest,
    TemplateItemSchema,
)
from hrm.schemas.health import HealthResponse, ReadinessErrorResponse, ReadinessResponse
from hrm.schemas.task import (
    TaskCompleteRequest,
    TaskItemRequest,
    TaskPatchRequest,
    TaskResponse,
)

__all__ = [
    "BulkOnboardingRequest",
    "BulkOnboardingResponse",
    "CaseCompleteRequest",
    "CaseCreateRequest",
    "CaseDefaultsRequest",
    "CaseResponse",
    "CaseUpdateRequest",
    "ChecklistCreateRequest",
    "ChecklistResponse",
    "ChecklistUpdateRequest",
    "HealthResponse",
    "ReadinessErrorResponse",
    "ReadinessResponse",
    "TaskCompleteRequest",
    "TaskItemRequest",
    "TaskPatchRequest",
    "TaskReconcileRequest",
    "TaskResponse",
    "TemplateItemSchema",
]
