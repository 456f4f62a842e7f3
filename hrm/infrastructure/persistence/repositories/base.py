"""Base repository: generic CRUD plus SQLAlchemyError translation."""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from hrm.domain.exceptions import PersistenceException
from hrm.infrastructure.persistence.database import Base
from hrm.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with get_by_id, create, update and delete.

    Database errors are logged with the operation context and re-raised as
    PersistenceException, so callers never see driver detail.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    @asynccontextmanager
    async def _guard(self, operation: str, **context: Any) -> AsyncIterator[None]:
        """Translate SQLAlchemyError raised inside the block into PersistenceException."""
        try:
            yield
        except SQLAlchemyError as e:
            logger.error(
                "Persistence failure in %s (%s)",
                operation,
                ", ".join(f"{k}={v}" for k, v in context.items()),
                exc_info=True,
            )
            raise PersistenceException(operation) from e

    async def get_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single record by primary key, or None."""
        model: Any = self.model
        async with self._guard("get_by_id", model=self.model.__name__, id=entity_id):
            result = await self.db.execute(select(self.model).where(model.id == entity_id))
            return result.scalar_one_or_none()

    async def create(self, obj: ModelType) -> ModelType:
        """Persist a new record and return it with server defaults loaded."""
        async with self._guard("create", model=self.model.__name__):
            self.db.add(obj)
            await self.db.flush()
            await self.db.refresh(obj)
        return obj

    async def update(self, obj: ModelType) -> ModelType:
        """Flush changes of an attached record and reload it."""
        async with self._guard("update", model=self.model.__name__):
            await self.db.flush()
            await self.db.refresh(obj)
        return obj

    async def delete(self, obj: ModelType) -> None:
        """Delete the record."""
        async with self._guard("delete", model=self.model.__name__):
            await self.db.delete(obj)
            await self.db.flush()
