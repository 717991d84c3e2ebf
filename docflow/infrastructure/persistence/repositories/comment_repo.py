"""Document comment repository."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.document import CommentCreate, CommentResult
from docflow.infrastructure.persistence.models.document import DocumentComment
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc


def _to_result(row: DocumentComment) -> CommentResult:
    return CommentResult(
        id=row.id,
        document_id=row.document_id,
        user_id=row.user_id,
        text=row.text,
        parent_comment_id=row.parent_comment_id,
        created_at=ensure_utc(row.created_at),
    )


class CommentRepository(BaseRepository[DocumentComment]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentComment)

    async def get_by_id(self, comment_id: str) -> CommentResult | None:
        row = await self._get_orm_by_id(comment_id)
        return _to_result(row) if row else None

    async def add(self, data: CommentCreate) -> CommentResult:
        row = await self._insert(
            DocumentComment(
                document_id=data.document_id,
                user_id=data.user_id,
                text=data.text,
                parent_comment_id=data.parent_comment_id,
            )
        )
        return _to_result(row)

    async def list_for_document(self, document_id: str) -> list[CommentResult]:
        result = await self.db.execute(
            select(DocumentComment)
            .where(DocumentComment.document_id == document_id)
            .order_by(DocumentComment.created_at.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]
