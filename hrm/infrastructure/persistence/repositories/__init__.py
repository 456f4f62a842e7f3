"""SQLAlchemy repositories implementing the application ports."""

from hrm.infrastructure.persistence.repositories.audit_log_repo import AuditLogRepository
from hrm.infrastructure.persistence.repositories.case_repo import CaseRepository
from hrm.infrastructure.persistence.repositories.checklist_repo import ChecklistRepository
from hrm.infrastructure.persistence.repositories.task_repo import TaskRepository

__all__ = [
    "AuditLogRepository",
    "CaseRepository",
    "ChecklistRepository",
    "TaskRepository",
]
