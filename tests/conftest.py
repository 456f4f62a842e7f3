"""Pytest configuration and fixtures for the lifecycle service.

Uses hrm.main:app for HTTP tests and hrm.infrastructure.persistence.database
for DB-dependent fixtures. Unit fixtures wire LifecycleService to the
in-memory fakes in tests/fakes.py.
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.application.use_cases.lifecycle import LifecycleService
from hrm.infrastructure.persistence import database
from hrm.main import app
from tests.fakes import (
    FIXED_NOW,
    FakeCaseRepository,
    FakeChecklistRepository,
    FakeGate,
    FakeSubjectResolver,
    FakeTaskRepository,
    InMemoryStore,
    RecordingAudit,
    RecordingNotifier,
    make_subject,
)

TENANT = "t1"
ACTOR = "actor-1"


@pytest.fixture
async def client() -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI)."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac


@pytest.fixture
async def db_session() -> AsyncSession:
    """Database session for repository/integration tests. Rolls back after test.

    Requires DATABASE_URL with the schema migrated. Skips (pytest.skip) when
    Postgres is not configured. Use @pytest.mark.requires_db to mark tests
    that need this fixture; run without DB via: pytest -m 'not requires_db'.
    """
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        pytest.skip(
            "Postgres not configured: set DATABASE_URL, then run: alembic upgrade head"
        )
    async with database.AsyncSessionLocal() as session:
        yield session
        await session.rollback()


@pytest.fixture
def store() -> InMemoryStore:
    return InMemoryStore()


@pytest.fixture
def subjects() -> FakeSubjectResolver:
    return FakeSubjectResolver(
        make_subject("emp-1", designation="Software Engineer", department="Engineering"),
        make_subject("emp-2", name="Grace Hopper"),
        make_subject("emp-3", name="Alan Turing"),
        make_subject("emp-new", name="Katherine Johnson", is_active=False),
        make_subject("emp-x", tenant_id="t2", name="Other Tenant"),
    )


@pytest.fixture
def gate() -> FakeGate:
    return FakeGate()


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def audit() -> RecordingAudit:
    return RecordingAudit()


@pytest.fixture
def checklists() -> FakeChecklistRepository:
    return FakeChecklistRepository()


@pytest.fixture
def service(store, subjects, gate, notifier, audit, checklists) -> LifecycleService:
    """LifecycleService over in-memory repos with a fixed clock (today = 2025-03-03)."""
    return LifecycleService(
        case_repo=FakeCaseRepository(store),
        task_repo=FakeTaskRepository(store),
        subject_resolver=subjects,
        authorization=gate,
        notifier=notifier,
        audit=audit,
        checklist_repo=checklists,
        clock=lambda: FIXED_NOW,
    )
