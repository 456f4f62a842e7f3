"""Domain entities."""

from hrm.domain.entities.case import CaseEntity
from hrm.domain.entities.task import TaskEntity

__all__ = ["CaseEntity", "TaskEntity"]
