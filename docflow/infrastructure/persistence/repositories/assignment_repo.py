"""Document assignment repository."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.document import AssignmentCreate, AssignmentResult
from docflow.infrastructure.persistence.models.document import DocumentAssignment
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc


def _to_result(row: DocumentAssignment) -> AssignmentResult:
    return AssignmentResult(
        id=row.id,
        document_id=row.document_id,
        assigned_to=row.assigned_to,
        assigned_by=row.assigned_by,
        workflow_level=row.workflow_level,
        is_active=row.is_active,
        assigned_at=ensure_utc(row.assigned_at),
        due_date=ensure_utc(row.due_date),
        completed_at=ensure_utc(row.completed_at),
    )


class AssignmentRepository(BaseRepository[DocumentAssignment]):
    """Assignment rows. The partial unique index keeps at most one active per document."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentAssignment)

    async def get_active_for_document(self, document_id: str) -> AssignmentResult | None:
        result = await self.db.execute(
            select(DocumentAssignment).where(
                DocumentAssignment.document_id == document_id,
                DocumentAssignment.is_active.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_active_for_user(self, user_id: str) -> list[AssignmentResult]:
        result = await self.db.execute(
            select(DocumentAssignment)
            .where(
                DocumentAssignment.assigned_to == user_id,
                DocumentAssignment.is_active.is_(True),
            )
            .order_by(DocumentAssignment.assigned_at.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def count_active_for_user(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count(DocumentAssignment.id)).where(
                DocumentAssignment.assigned_to == user_id,
                DocumentAssignment.is_active.is_(True),
            )
        )
        return int(result.scalar_one() or 0)

    async def list_for_document(self, document_id: str) -> list[AssignmentResult]:
        result = await self.db.execute(
            select(DocumentAssignment)
            .where(DocumentAssignment.document_id == document_id)
            .order_by(DocumentAssignment.assigned_at.desc())
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def deactivate_active(self, document_id: str, completed_at: datetime) -> int:
        result = await self.db.execute(
            update(DocumentAssignment)
            .where(
                DocumentAssignment.document_id == document_id,
                DocumentAssignment.is_active.is_(True),
            )
            .values(is_active=False, completed_at=completed_at)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def add(self, data: AssignmentCreate) -> AssignmentResult:
        row = await self._insert(
            DocumentAssignment(
                document_id=data.document_id,
                assigned_to=data.assigned_to,
                assigned_by=data.assigned_by,
                workflow_level=data.workflow_level,
                is_active=True,
                due_date=data.due_date,
            )
        )
        return _to_result(row)
