"""Lifecycle (case, task, bulk onboarding) dependencies."""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.services.authorization_service import AuthorizationService
from hrm.application.use_cases.lifecycle import BulkOnboardingUseCase, LifecycleService
from hrm.core.config import get_settings
from hrm.infrastructure.persistence.database import get_db, get_db_transactional
from hrm.infrastructure.persistence.repositories import (
    CaseRepository,
    ChecklistRepository,
    TaskRepository,
)
from hrm.infrastructure.services import LogOnlyNotificationSink

from . import common


def _build_lifecycle_service(
    db: AsyncSession,
    authorization: AuthorizationService,
    notifier: LogOnlyNotificationSink,
) -> LifecycleService:
    settings = get_settings()
    return LifecycleService(
        case_repo=CaseRepository(db),
        task_repo=TaskRepository(db),
        subject_resolver=common.build_subject_resolver(db),
        authorization=authorization,
        notifier=notifier,
        audit=common.build_audit_sink(db),
        checklist_repo=ChecklistRepository(db),
        enforce_single_open_case=settings.enforce_single_open_case_per_subject,
        default_expected_completion_days=settings.default_expected_completion_days,
    )


async def get_lifecycle_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    authorization: Annotated[
        AuthorizationService, Depends(common.get_authorization_service)
    ],
    notifier: Annotated[LogOnlyNotificationSink, Depends(common.get_notification_sink)],
) -> LifecycleService:
    """Lifecycle service for read operations."""
    return _build_lifecycle_service(db, authorization, notifier)


async def get_lifecycle_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[
        AuthorizationService, Depends(common.get_authorization_service_for_write)
    ],
    notifier: Annotated[LogOnlyNotificationSink, Depends(common.get_notification_sink)],
) -> LifecycleService:
    """Lifecycle service for create/update/delete (one transaction per request)."""
    return _build_lifecycle_service(db, authorization, notifier)


async def get_bulk_onboarding_use_case(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    lifecycle: Annotated[LifecycleService, Depends(get_lifecycle_service_for_write)],
) -> BulkOnboardingUseCase:
    """Bulk onboarding; each subject runs in its own SAVEPOINT of the request transaction."""
    return BulkOnboardingUseCase(
        lifecycle=lifecycle,
        transaction_scope=db.begin_nested,
        max_subjects=get_settings().bulk_max_subjects,
    )
