"""Application lifespan: startup and shutdown.

Single place for startup/shutdown logic (SRP). Used by main.py; no
business logic here, only logging setup and DB engine dispose.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI

from hrm.core.config import get_settings
from hrm.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Run startup then yield; on exit dispose the SQL engine."""
    settings = get_settings()

    # ---- Startup ----
    setup_logging()
    if not settings.database_url:
        logger.warning("DATABASE_URL is not set; case endpoints will return 503")
    logger.info("%s %s started", settings.app_name, settings.app_version)

    yield

    # ---- Shutdown ----
    from hrm.infrastructure.persistence.database import dispose_engine

    await dispose_engine()
    logger.info("SQL engine disposed")
