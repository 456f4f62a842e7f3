"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. All routes
use dependencies from hrm.api.v1.dependencies (no manual repo/service construction).
"""

from fastapi import APIRouter

from hrm.api.v1.endpoints import cases, checklists, health, tasks

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(cases.router, prefix="/cases", tags=["cases"])
api_router.include_router(tasks.router, prefix="/tasks", tags=["tasks"])
api_router.include_router(checklists.router, prefix="/checklists", tags=["checklists"])
