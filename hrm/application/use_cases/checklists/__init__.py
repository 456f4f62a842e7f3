"""Checklist template use cases."""

from hrm.application.use_cases.checklists.checklist_operations import ChecklistService

__all__ = ["ChecklistService"]
