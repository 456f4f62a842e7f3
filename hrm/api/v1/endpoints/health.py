"""Health check endpoint. No auth; used for liveness and readiness checks."""

from fastapi import APIRouter
from fastapi.responses import JSONResponse

from hrm.infrastructure.persistence.database import check_database
from hrm.schemas.health import (
    HealthResponse,
    ReadinessErrorResponse,
    ReadinessResponse,
)

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    """Return simple ok status for liveness."""
    return HealthResponse()


@router.get(
    "/ready",
    response_model=ReadinessResponse,
    responses={503: {"description": "Database not configured or unreachable", "model": ReadinessErrorResponse}},
)
async def readiness_check() -> ReadinessResponse | JSONResponse:
    """Return 200 when the database answers; 503 otherwise."""
    problem = await check_database()
    if problem is None:
        return ReadinessResponse()
    return JSONResponse(
        status_code=503,
        content=ReadinessErrorResponse(message=problem).model_dump(),
    )
