"""Base repository: shared session handling, insert and error translation."""

from typing import Any, Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.domain.exceptions import PersistenceException
from docflow.infrastructure.persistence.database import Base
from docflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """Base repository with ORM lookup by id and insert.

    Subclasses map ORM rows to DTOs or entities (_to_result / _to_entity) so
    callers never see ORM instances.
    """

    def __init__(self, db: AsyncSession, model: type[ModelType]) -> None:
        self.db = db
        self.model = model

    async def _get_orm_by_id(self, entity_id: str) -> ModelType | None:
        """Return a single row by primary key (refreshed from the database), or None."""
        model: Any = self.model
        result = await self.db.execute(
            select(self.model)
            .where(model.id == entity_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _insert(self, obj: ModelType) -> ModelType:
        """Persist a new row and load server defaults."""
        self.db.add(obj)
        await self._flush()
        await self.db.refresh(obj)
        return obj

    async def _flush(self) -> None:
        """Flush pending writes; storage errors become PersistenceException."""
        try:
            await self.db.flush()
        except SQLAlchemyError as e:
            logger.error("Flush failed for %s: %s", self.model.__name__, e)
            raise PersistenceException(
                f"Could not write {self.model.__tablename__}"
            ) from e
