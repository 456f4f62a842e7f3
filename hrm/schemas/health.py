"""Liveness and readiness response bodies."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """GET /health: the process is up."""

    status: str = Field(default="ok", description="Service status")


class ReadinessResponse(BaseModel):
    """GET /health/ready: the database answered SELECT 1."""

    status: str = Field(default="ok", description="Readiness status")
    database: str = Field(default="ok", description="Database check result")


class ReadinessErrorResponse(BaseModel):
    """GET /health/ready (503): DATABASE_URL missing or the database is down."""

    status: str = Field(default="not_ready", description="Readiness status")
    database: str = Field(default="unavailable", description="Database check result")
    message: str = Field(..., description="Why the database check failed")
