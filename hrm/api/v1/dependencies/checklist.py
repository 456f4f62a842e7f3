"""Checklist template dependencies."""

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.services.authorization_service import AuthorizationService
from hrm.application.use_cases.checklists import ChecklistService
from hrm.infrastructure.persistence.database import get_db, get_db_transactional
from hrm.infrastructure.persistence.repositories import ChecklistRepository

from . import common


async def get_checklist_service(
    db: Annotated[AsyncSession, Depends(get_db)],
    authorization: Annotated[
        AuthorizationService, Depends(common.get_authorization_service)
    ],
) -> ChecklistService:
    """Checklist service for read operations."""
    return ChecklistService(ChecklistRepository(db), authorization)


async def get_checklist_service_for_write(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
    authorization: Annotated[
        AuthorizationService, Depends(common.get_authorization_service_for_write)
    ],
) -> ChecklistService:
    """Checklist service for create/update/delete."""
    return ChecklistService(ChecklistRepository(db), authorization)
