"""SQLAlchemy unit of work: one AsyncSession shared by every repository."""

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.domain.exceptions import ConcurrencyConflictException, PersistenceException
from docflow.infrastructure.persistence.repositories import (
    AssignmentRepository,
    CategoryRepository,
    CommentRepository,
    DepartmentRepository,
    DocumentRepository,
    DocumentVersionRepository,
    PendingEffectRepository,
    WorkflowHistoryRepository,
)
from docflow.shared.telemetry.logging import get_logger

logger = get_logger(__name__)


class SqlAlchemyUnitOfWork:
    """Implements IUnitOfWork over a request-scoped AsyncSession."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session
        self.documents = DocumentRepository(session)
        self.versions = DocumentVersionRepository(session)
        self.assignments = AssignmentRepository(session)
        self.history = WorkflowHistoryRepository(session)
        self.comments = CommentRepository(session)
        self.categories = CategoryRepository(session)
        self.departments = DepartmentRepository(session)
        self.effects = PendingEffectRepository(session)

    async def begin(self) -> None:
        # Reads before begin() autobegin a transaction; reuse it.
        if not self.session.in_transaction():
            await self.session.begin()

    async def commit(self) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            # Unique partial indexes (current version, active assignment) lost a race.
            await self.session.rollback()
            logger.warning("Commit rejected by a uniqueness constraint: %s", e.orig)
            raise ConcurrencyConflictException("commit", resource_type="transaction") from e
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error("Commit failed: %s", e)
            raise PersistenceException("Could not commit transaction") from e

    async def rollback(self) -> None:
        await self.session.rollback()
