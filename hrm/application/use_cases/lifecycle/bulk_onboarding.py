"""Bulk onboarding: start onboarding cases for many subjects, isolating failures per subject."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from contextlib import AbstractAsyncContextManager
from typing import Any

from hrm.application.dtos.bulk import (
    BulkOnboardingFailure,
    BulkOnboardingReport,
    BulkOnboardingSuccess,
)
from hrm.application.dtos.template import TemplateItem
from hrm.application.use_cases.lifecycle.case_operations import LifecycleService
from hrm.domain.enums import CaseKind
from hrm.domain.exceptions import HrmException, ValidationException
from hrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

TransactionScope = Callable[[], AbstractAsyncContextManager[Any]]


class BulkOnboardingUseCase:
    """Runs initialize_with_defaults per subject, each inside its own transaction scope.

    transaction_scope returns an async context manager that commits on exit
    and rolls back when an exception leaves it (a SAVEPOINT in production),
    so a failing subject leaves no partial writes and does not affect others.
    """

    def __init__(
        self,
        lifecycle: LifecycleService,
        transaction_scope: TransactionScope,
        *,
        max_subjects: int = 200,
    ) -> None:
        self.lifecycle = lifecycle
        self.transaction_scope = transaction_scope
        self.max_subjects = max_subjects

    async def execute(
        self,
        tenant_id: str,
        actor_id: str,
        subject_ids: Sequence[str],
        template: Sequence[TemplateItem] | None = None,
    ) -> BulkOnboardingReport:
        """Onboard each subject; return per-subject successes and failures.

        Raises:
            ValidationException: If subject_ids is empty or exceeds the limit.
        """
        unique_ids = list(dict.fromkeys(s.strip() for s in subject_ids if s and s.strip()))
        if not unique_ids:
            raise ValidationException("At least one subject is required", field="subject_ids")
        if len(unique_ids) > self.max_subjects:
            raise ValidationException(
                f"At most {self.max_subjects} subjects per bulk request",
                field="subject_ids",
            )

        successes: list[BulkOnboardingSuccess] = []
        failures: list[BulkOnboardingFailure] = []
        for subject_id in unique_ids:
            try:
                async with self.transaction_scope():
                    case = await self.lifecycle.initialize_with_defaults(
                        tenant_id,
                        actor_id,
                        CaseKind.ONBOARDING,
                        subject_id,
                        template,
                    )
            except HrmException as e:
                logger.info(
                    "Bulk onboarding skipped subject %s: %s", subject_id, e.error_code
                )
                failures.append(
                    BulkOnboardingFailure(
                        subject_id=subject_id,
                        error_code=e.error_code,
                        message=e.message,
                    )
                )
                continue
            successes.append(
                BulkOnboardingSuccess(
                    subject_id=subject_id, case_id=case.id, task_count=len(case.tasks)
                )
            )

        logger.info(
            "Bulk onboarding for tenant %s: %d succeeded, %d failed",
            tenant_id,
            len(successes),
            len(failures),
        )
        return BulkOnboardingReport(successes=successes, failures=failures)
