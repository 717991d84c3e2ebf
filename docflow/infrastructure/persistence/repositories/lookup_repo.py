"""Category and department lookup repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.document import CategoryResult
from docflow.infrastructure.persistence.models.lookup import Department, DocumentCategory
from docflow.infrastructure.persistence.repositories.base import BaseRepository


def _to_result(row: DocumentCategory) -> CategoryResult:
    return CategoryResult(
        id=row.id,
        name=row.name,
        code=row.code,
        description=row.description,
        is_active=row.is_active,
    )


class CategoryRepository(BaseRepository[DocumentCategory]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, DocumentCategory)

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        row = await self._get_orm_by_id(category_id)
        return _to_result(row) if row else None

    async def list_active(self) -> list[CategoryResult]:
        result = await self.db.execute(
            select(DocumentCategory)
            .where(DocumentCategory.is_active.is_(True))
            .order_by(DocumentCategory.name.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]


class DepartmentRepository(BaseRepository[Department]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Department)

    async def get_code(self, department_id: str) -> str | None:
        result = await self.db.execute(
            select(Department.code).where(Department.id == department_id)
        )
        return result.scalar_one_or_none()
