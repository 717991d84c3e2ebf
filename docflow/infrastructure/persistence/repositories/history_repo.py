"""Workflow history repository (append and read only)."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.document import WorkflowHistoryCreate, WorkflowHistoryResult
from docflow.infrastructure.persistence.models.workflow_history import WorkflowHistory
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc


def _to_result(row: WorkflowHistory) -> WorkflowHistoryResult:
    return WorkflowHistoryResult(
        id=row.id,
        document_id=row.document_id,
        action_code=row.action_code,
        from_user_id=row.from_user_id,
        to_user_id=row.to_user_id,
        previous_status=row.previous_status,
        new_status=row.new_status,
        from_workflow_level=row.from_workflow_level,
        to_workflow_level=row.to_workflow_level,
        comments=row.comments,
        created_at=ensure_utc(row.created_at),
    )


class WorkflowHistoryRepository(BaseRepository[WorkflowHistory]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, WorkflowHistory)

    async def append(self, data: WorkflowHistoryCreate) -> WorkflowHistoryResult:
        row = await self._insert(
            WorkflowHistory(
                document_id=data.document_id,
                action_code=data.action_code,
                from_user_id=data.from_user_id,
                to_user_id=data.to_user_id,
                previous_status=data.previous_status,
                new_status=data.new_status,
                from_workflow_level=data.from_workflow_level,
                to_workflow_level=data.to_workflow_level,
                comments=data.comments,
            )
        )
        return _to_result(row)

    async def list_for_document(self, document_id: str) -> list[WorkflowHistoryResult]:
        result = await self.db.execute(
            select(WorkflowHistory)
            .where(WorkflowHistory.document_id == document_id)
            .order_by(WorkflowHistory.sequence.asc())
        )
        return [_to_result(r) for r in result.scalars().all()]
