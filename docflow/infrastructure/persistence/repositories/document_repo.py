"""Document repository: entity mapping, optimistic-lock writes and role-scoped listing."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Any

from sqlalchemy import and_, false, func, or_, select, true, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import TERMINAL_STATUSES, RoleLevel, WorkflowLevel
from docflow.domain.exceptions import ConcurrencyConflictException, PersistenceException
from docflow.infrastructure.persistence.models.document import Document
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc

if TYPE_CHECKING:
    from docflow.application.dtos.document import DocumentListFilter
    from docflow.domain.value_objects.core import IdentityContext

_TERMINAL_CODES = tuple(s.value for s in TERMINAL_STATUSES)


def _to_entity(row: Document) -> DocumentEntity:
    return DocumentEntity(
        id=row.id,
        document_number=row.document_number,
        title=row.title,
        description=row.description,
        category_id=row.category_id,
        status=row.status,
        workflow_level=row.workflow_level,
        priority=row.priority,
        created_by=row.created_by,
        current_handler_id=row.current_handler_id,
        department_id=row.department_id,
        due_date=ensure_utc(row.due_date),
        file_name=row.file_name,
        file_path=row.file_path,
        file_size=row.file_size,
        created_at=ensure_utc(row.created_at),
        updated_at=ensure_utc(row.updated_at),
        completed_at=ensure_utc(row.completed_at),
        row_version=row.row_version,
    )


def _mutable_values(document: DocumentEntity) -> dict[str, Any]:
    return {
        "title": document.title,
        "description": document.description,
        "category_id": document.category_id,
        "status": document.status.value,
        "workflow_level": int(document.workflow_level),
        "priority": int(document.priority),
        "current_handler_id": document.current_handler_id,
        "due_date": document.due_date,
        "file_name": document.file_name,
        "file_path": document.file_path,
        "file_size": document.file_size,
        "completed_at": document.completed_at,
    }


def visibility_clause(identity: IdentityContext) -> Any:
    """SQL filter for documents an identity may list.

    Admin: all. Manager: own department. Vice-manager: own department and
    (own, handled, or past author level). Assistant: own or handled.
    """
    if identity.is_admin:
        return true()
    participant = or_(
        Document.created_by == identity.actor_id,
        Document.current_handler_id == identity.actor_id,
    )
    if identity.department_id is None:
        same_department = false()
    else:
        same_department = Document.department_id == identity.department_id
    if identity.role_level >= RoleLevel.MANAGER:
        return same_department
    if identity.role_level >= RoleLevel.VICE_MANAGER:
        return and_(
            same_department,
            or_(participant, Document.workflow_level >= WorkflowLevel.VICE_MANAGER_REVIEW),
        )
    return participant


def _filter_clauses(filters: DocumentListFilter) -> list[Any]:
    clauses: list[Any] = []
    if filters.search:
        pattern = f"%{filters.search}%"
        clauses.append(
            or_(
                Document.title.ilike(pattern),
                Document.document_number.ilike(pattern),
                Document.description.ilike(pattern),
            )
        )
    if filters.status is not None:
        clauses.append(Document.status == filters.status.value)
    if filters.category_id:
        clauses.append(Document.category_id == filters.category_id)
    if filters.priority is not None:
        clauses.append(Document.priority == int(filters.priority))
    if filters.created_from is not None:
        clauses.append(Document.created_at >= filters.created_from)
    if filters.created_to is not None:
        clauses.append(Document.created_at <= filters.created_to)
    return clauses


def _order_by(filters: DocumentListFilter) -> list[Any]:
    column = {
        "title": Document.title,
        "priority": Document.priority,
        "created_at": Document.created_at,
    }[filters.sort_by]
    primary = column.desc() if filters.sort_desc else column.asc()
    if filters.sort_by == "created_at":
        return [primary, Document.id]
    return [primary, Document.created_at.desc(), Document.id]


class DocumentRepository(BaseRepository[Document]):
    """Implements IDocumentRepository over SQLAlchemy."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Document)

    async def get_by_id(self, document_id: str) -> DocumentEntity | None:
        row = await self._get_orm_by_id(document_id)
        return _to_entity(row) if row else None

    async def add(self, document: DocumentEntity) -> DocumentEntity:
        """Insert; a duplicate document_number surfaces as ConcurrencyConflictException."""
        row = Document(
            id=document.id,
            document_number=document.document_number,
            created_by=document.created_by,
            department_id=document.department_id,
            row_version=1,
            **_mutable_values(document),
        )
        self.db.add(row)
        try:
            await self.db.flush()
        except IntegrityError as e:
            raise ConcurrencyConflictException(
                document.document_number, resource_type="document_number"
            ) from e
        except SQLAlchemyError as e:
            raise PersistenceException("Could not write document") from e
        await self.db.refresh(row)
        return _to_entity(row)

    async def update(self, document: DocumentEntity) -> DocumentEntity:
        """Conditional write on row_version; bumps it by one."""
        stmt = (
            update(Document)
            .where(
                Document.id == document.id,
                Document.row_version == document.row_version,
            )
            .values(
                row_version=Document.row_version + 1,
                updated_at=func.now(),
                **_mutable_values(document),
            )
            .execution_options(synchronize_session=False)
        )
        try:
            result = await self.db.execute(stmt)
        except SQLAlchemyError as e:
            raise PersistenceException("Could not update document") from e
        if result.rowcount != 1:
            raise ConcurrencyConflictException(document.id)
        refreshed = await self._get_orm_by_id(document.id)
        if refreshed is None:
            raise ConcurrencyConflictException(document.id)
        return _to_entity(refreshed)

    async def get_last_number_with_prefix(self, day_prefix: str) -> str | None:
        result = await self.db.execute(
            select(Document.document_number)
            .where(Document.document_number.like(f"{day_prefix}%"))
            .order_by(
                func.length(Document.document_number).desc(),
                Document.document_number.desc(),
            )
            .limit(1)
        )
        return result.scalar_one_or_none()

    async def _list_where(self, *clauses: Any) -> list[DocumentEntity]:
        result = await self.db.execute(
            select(Document).where(*clauses).order_by(Document.created_at.desc())
        )
        return [_to_entity(r) for r in result.scalars().all()]

    async def list_by_creator(self, user_id: str) -> list[DocumentEntity]:
        return await self._list_where(Document.created_by == user_id)

    async def list_by_handler(self, user_id: str) -> list[DocumentEntity]:
        return await self._list_where(Document.current_handler_id == user_id)

    async def list_by_department(self, department_id: str) -> list[DocumentEntity]:
        return await self._list_where(Document.department_id == department_id)

    async def list_visible(
        self, identity: IdentityContext, filters: DocumentListFilter
    ) -> tuple[list[DocumentEntity], int]:
        where = [visibility_clause(identity), *_filter_clauses(filters)]
        total = (
            await self.db.execute(select(func.count(Document.id)).where(*where))
        ).scalar_one()
        result = await self.db.execute(
            select(Document)
            .where(*where)
            .order_by(*_order_by(filters))
            .offset((filters.page - 1) * filters.page_size)
            .limit(filters.page_size)
        )
        return [_to_entity(r) for r in result.scalars().all()], int(total or 0)

    async def count_visible(
        self,
        identity: IdentityContext,
        *,
        created_from: datetime | None = None,
        overdue_at: datetime | None = None,
    ) -> int:
        where = [visibility_clause(identity)]
        if created_from is not None:
            where.append(Document.created_at >= created_from)
        if overdue_at is not None:
            where.append(Document.due_date.is_not(None))
            where.append(Document.due_date < overdue_at)
            where.append(Document.status.not_in(_TERMINAL_CODES))
        result = await self.db.execute(select(func.count(Document.id)).where(*where))
        return int(result.scalar_one() or 0)

    async def count_visible_by_status(self, identity: IdentityContext) -> dict[str, int]:
        result = await self.db.execute(
            select(Document.status, func.count(Document.id))
            .where(visibility_clause(identity))
            .group_by(Document.status)
        )
        return {status: int(count) for status, count in result.all()}
