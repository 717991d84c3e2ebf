"""Maintains the single active handoff record per document."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING

from docflow.application.dtos.document import AssignmentCreate, AssignmentResult

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IAssignmentRepository


class AssignmentTracker:
    """Deactivate-then-insert keeps at most one active assignment per document."""

    def __init__(self, assignment_repo: IAssignmentRepository) -> None:
        self._assignments = assignment_repo

    async def reassign(
        self,
        document_id: str,
        new_assignee_id: str,
        assigned_by: str,
        workflow_level: int,
        now: datetime,
        due_date: datetime | None = None,
    ) -> AssignmentResult:
        """Close every active assignment of the document and open one for new_assignee_id."""
        await self._assignments.deactivate_active(document_id, now)
        return await self._assignments.add(
            AssignmentCreate(
                document_id=document_id,
                assigned_to=new_assignee_id,
                assigned_by=assigned_by,
                workflow_level=int(workflow_level),
                due_date=due_date,
            )
        )

    async def close_active(self, document_id: str, now: datetime) -> int:
        """Close the active assignment without replacement (terminal verbs)."""
        return await self._assignments.deactivate_active(document_id, now)

    async def active_for_document(self, document_id: str) -> AssignmentResult | None:
        return await self._assignments.get_active_for_document(document_id)

    async def active_for_user(self, user_id: str) -> list[AssignmentResult]:
        return await self._assignments.list_active_for_user(user_id)
