"""Onboarding/offboarding lifecycle use cases."""

from hrm.application.use_cases.lifecycle.bulk_onboarding import BulkOnboardingUseCase
from hrm.application.use_cases.lifecycle.case_operations import LifecycleService
from hrm.application.use_cases.lifecycle.reconciliation import (
    TaskReconciliationPlan,
    plan_task_reconciliation,
)

__all__ = [
    "BulkOnboardingUseCase",
    "LifecycleService",
    "TaskReconciliationPlan",
    "plan_task_reconciliation",
]
