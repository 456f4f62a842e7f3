"""Domain enumerations for the lifecycle service.

Enums represent fixed sets of domain values (case kind, case and task status).
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class CaseKind(_ValuesMixin, str, Enum):
    """Kind of lifecycle case. Both kinds share one table and shape."""

    ONBOARDING = "onboarding"
    OFFBOARDING = "offboarding"


class CaseStatus(_ValuesMixin, str, Enum):
    """Case lifecycle status.

    pending -> in_progress -> completed, with cancelled reachable from
    pending or in_progress. completed and cancelled are terminal.
    """

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    CANCELLED = "cancelled"

    @property
    def is_terminal(self) -> bool:
        """Return whether no further transition is allowed."""
        return self in (CaseStatus.COMPLETED, CaseStatus.CANCELLED)

    @classmethod
    def open_values(cls) -> list[str]:
        """Return the non-terminal status values."""
        return [s.value for s in cls if not s.is_terminal]


class TaskStatus(_ValuesMixin, str, Enum):
    """Checklist task status. Tasks have no cancelled state; removal stands in for it."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class LifecycleEventType(_ValuesMixin, str, Enum):
    """Domain events published to the notification sink."""

    CREATED = "created"
    TASK_COMPLETED = "task_completed"
    CASE_COMPLETED = "case_completed"
