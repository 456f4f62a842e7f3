"""Onboarding/offboarding case API schemas."""

from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field

from hrm.application.dtos.case import CaseDates, CasePatch
from hrm.application.dtos.task import TaskInput
from hrm.domain.enums import CaseKind, CaseStatus
from hrm.schemas.checklist import TemplateItemSchema
from hrm.schemas.task import TaskItemRequest, TaskResponse, supplied


class CaseCreateRequest(BaseModel):
    """Request body for starting a case with an explicit task list."""

    subject_id: str = Field(..., min_length=1)
    start_date: date
    expected_completion_date: date | None = None
    last_working_date: date | None = None
    exit_interview_date: date | None = None
    reason: str | None = None
    notes: str | None = None
    tasks: list[TaskItemRequest] = Field(default_factory=list)

    def dates(self) -> CaseDates:
        return CaseDates(
            start_date=self.start_date,
            expected_completion_date=self.expected_completion_date,
            last_working_date=self.last_working_date,
            exit_interview_date=self.exit_interview_date,
        )

    def task_inputs(self) -> list[TaskInput]:
        return [t.to_input() for t in self.tasks]


class CaseDefaultsRequest(BaseModel):
    """Request body for starting a case from the default template.

    Without start_date the case starts today. template overrides the stored
    or built-in default task set.
    """

    subject_id: str = Field(..., min_length=1)
    start_date: date | None = None
    expected_completion_date: date | None = None
    last_working_date: date | None = None
    exit_interview_date: date | None = None
    reason: str | None = None
    notes: str | None = None
    template: list[TemplateItemSchema] | None = None

    def dates(self) -> CaseDates | None:
        if self.start_date is None:
            return None
        return CaseDates(
            start_date=self.start_date,
            expected_completion_date=self.expected_completion_date,
            last_working_date=self.last_working_date,
            exit_interview_date=self.exit_interview_date,
        )


class CaseUpdateRequest(BaseModel):
    """Request body for PUT on a case: partial field update plus optional task list.

    Omitting tasks leaves the task set untouched; an empty list removes all tasks.
    """

    start_date: date | None = None
    expected_completion_date: date | None = None
    actual_completion_date: date | None = None
    status: CaseStatus | None = None
    notes: str | None = None
    last_working_date: date | None = None
    reason: str | None = None
    exit_interview_date: date | None = None
    tasks: list[TaskItemRequest] | None = None

    def to_patch(self) -> CasePatch:
        return CasePatch(**supplied(self, {"tasks"}))

    def task_inputs(self) -> list[TaskInput] | None:
        if "tasks" not in self.model_fields_set or self.tasks is None:
            return None
        return [t.to_input() for t in self.tasks]


class TaskReconcileRequest(BaseModel):
    """Request body for replacing a case's task list."""

    tasks: list[TaskItemRequest]


class CaseCompleteRequest(BaseModel):
    """Request body for completing a case."""

    actual_completion_date: date | None = None


class CaseResponse(BaseModel):
    """Case response with ordered tasks."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    tenant_id: str
    kind: CaseKind
    subject_id: str
    status: CaseStatus
    start_date: date
    expected_completion_date: date | None
    actual_completion_date: date | None
    notes: str | None
    last_working_date: date | None
    reason: str | None
    exit_interview_date: date | None
    version: int
    tasks: list[TaskResponse]
    created_at: datetime | None
    updated_at: datetime | None


class BulkOnboardingRequest(BaseModel):
    """Request body for onboarding many subjects at once."""

    subject_ids: list[str] = Field(..., min_length=1)
    template: list[TemplateItemSchema] | None = None


class BulkOnboardingSuccessResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject_id: str
    case_id: str
    task_count: int


class BulkOnboardingFailureResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    subject_id: str
    error_code: str
    message: str


class BulkOnboardingResponse(BaseModel):
    """Per-subject outcome of a bulk onboarding run."""

    model_config = ConfigDict(from_attributes=True)

    total: int
    succeeded: int
    failed: int
    successes: list[BulkOnboardingSuccessResponse]
    failures: list[BulkOnboardingFailureResponse]
