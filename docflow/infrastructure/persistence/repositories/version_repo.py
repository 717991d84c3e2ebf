"""Document version repository."""

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.document import DocumentVersionCreate, DocumentVersionResult
from docflow.infrastructure.persistence.models.document import DocumentVersion
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc


def _to_result(row: DocumentVersion) -> DocumentVersionResult:
    return DocumentVersionResult(
        id=row.id,
        document_id=row.document_id,
        version_number=row.version_number,
        file_name=row.file_name,
        file_path=row.file_path,
        file_size=row.file_size,
        created_by=row.created_by,
        change_description=row.change_description,
        is_current=row.is_current,
        created_at=ensure_utc(row.created_at),
    )


class DocumentVersionRepository(BaseRepository[DocumentVersion]):
    """Version chain per document. Rows are never deleted; only is_current flips."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentVersion)

    async def get_by_id(self, version_id: str) -> DocumentVersionResult | None:
        row = await self._get_orm_by_id(version_id)
        return _to_result(row) if row else None

    async def get_current(self, document_id: str) -> DocumentVersionResult | None:
        result = await self.db.execute(
            select(DocumentVersion).where(
                DocumentVersion.document_id == document_id,
                DocumentVersion.is_current.is_(True),
            )
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def list_for_document(self, document_id: str) -> list[DocumentVersionResult]:
        result = await self.db.execute(
            select(DocumentVersion)
            .where(DocumentVersion.document_id == document_id)
            .order_by(DocumentVersion.version_number.desc())
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def get_max_version_number(self, document_id: str) -> int:
        result = await self.db.execute(
            select(func.max(DocumentVersion.version_number)).where(
                DocumentVersion.document_id == document_id
            )
        )
        return int(result.scalar_one_or_none() or 0)

    async def clear_current(self, document_id: str) -> int:
        # Runs before the new current row is inserted (ux_document_version_current).
        result = await self.db.execute(
            update(DocumentVersion)
            .where(
                DocumentVersion.document_id == document_id,
                DocumentVersion.is_current.is_(True),
            )
            .values(is_current=False)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)

    async def add(self, data: DocumentVersionCreate) -> DocumentVersionResult:
        row = await self._insert(
            DocumentVersion(
                document_id=data.document_id,
                version_number=data.version_number,
                file_name=data.file_name,
                file_path=data.file_path,
                file_size=data.file_size,
                created_by=data.created_by,
                change_description=data.change_description,
                is_current=data.is_current,
            )
        )
        return _to_result(row)
