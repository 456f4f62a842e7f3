"""DTOs for bulk onboarding results."""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class BulkOnboardingSuccess:
    """One subject onboarded successfully."""

    subject_id: str
    case_id: str
    task_count: int


@dataclass(frozen=True)
class BulkOnboardingFailure:
    """One subject that could not be onboarded, with the reason."""

    subject_id: str
    error_code: str
    message: str


@dataclass(frozen=True)
class BulkOnboardingReport:
    """Per-subject outcome of a bulk onboarding run (partial success expected)."""

    successes: list[BulkOnboardingSuccess] = field(default_factory=list)
    failures: list[BulkOnboardingFailure] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.successes) + len(self.failures)

    @property
    def succeeded(self) -> int:
        return len(self.successes)

    @property
    def failed(self) -> int:
        return len(self.failures)
