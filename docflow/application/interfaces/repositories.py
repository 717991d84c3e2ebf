"""Repository interfaces (ports) for the application layer.

Protocols define contracts that infrastructure implementations must fulfill (DIP).
All types reference domain entities or application DTOs only; no infrastructure imports.
"""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from docflow.application.dtos.document import (
        AssignmentCreate,
        AssignmentResult,
        CategoryResult,
        CommentCreate,
        CommentResult,
        DocumentListFilter,
        DocumentVersionCreate,
        DocumentVersionResult,
        WorkflowHistoryCreate,
        WorkflowHistoryResult,
    )
    from docflow.application.dtos.effect import (
        AuditRequest,
        NotificationRequest,
        NotificationResult,
        PendingEffectCreate,
        PendingEffectResult,
    )
    from docflow.domain.entities.document import DocumentEntity
    from docflow.domain.value_objects.core import IdentityContext


class IDocumentRepository(Protocol):
    """Protocol for document persistence and the document lookup surface."""

    async def get_by_id(self, document_id: str) -> DocumentEntity | None:
        """Return the document or None."""

    async def add(self, document: DocumentEntity) -> DocumentEntity:
        """Insert a new document; returns it with server timestamps and row_version."""

    async def update(self, document: DocumentEntity) -> DocumentEntity:
        """Write all mutable fields if the stored row_version equals document.row_version.

        Returns the document with row_version incremented. Raises
        ConcurrencyConflictException when another writer got there first.
        """

    async def get_last_number_with_prefix(self, day_prefix: str) -> str | None:
        """Return the highest document_number starting with day_prefix, or None."""

    async def list_by_creator(self, user_id: str) -> list[DocumentEntity]:
        """Documents created by the user (newest first)."""

    async def list_by_handler(self, user_id: str) -> list[DocumentEntity]:
        """Documents currently handled by the user (newest first)."""

    async def list_by_department(self, department_id: str) -> list[DocumentEntity]:
        """Documents of a department (newest first)."""

    async def list_visible(
        self, identity: IdentityContext, filters: DocumentListFilter
    ) -> tuple[list[DocumentEntity], int]:
        """Return one page of documents visible to identity and the total count."""

    async def count_visible(
        self,
        identity: IdentityContext,
        *,
        created_from: datetime | None = None,
        overdue_at: datetime | None = None,
    ) -> int:
        """Count visible documents, optionally created since a date or overdue at a time."""

    async def count_visible_by_status(self, identity: IdentityContext) -> dict[str, int]:
        """Count visible documents grouped by status code."""


class IDocumentVersionRepository(Protocol):
    """Protocol for the append-only version chain."""

    async def get_by_id(self, version_id: str) -> DocumentVersionResult | None:
        """Return a version or None."""

    async def get_current(self, document_id: str) -> DocumentVersionResult | None:
        """Return the version flagged current, or None when the document has none."""

    async def list_for_document(self, document_id: str) -> list[DocumentVersionResult]:
        """All versions of a document, newest first."""

    async def get_max_version_number(self, document_id: str) -> int:
        """Highest version number for the document (0 when none)."""

    async def clear_current(self, document_id: str) -> int:
        """Set is_current=False on every version of the document. Returns rows changed."""

    async def add(self, data: DocumentVersionCreate) -> DocumentVersionResult:
        """Insert a version row."""


class IAssignmentRepository(Protocol):
    """Protocol for assignment rows (at most one active per document)."""

    async def get_active_for_document(self, document_id: str) -> AssignmentResult | None:
        """Return the active assignment of a document, or None."""

    async def list_active_for_user(self, user_id: str) -> list[AssignmentResult]:
        """Active assignments where the user is the assignee (oldest first)."""

    async def count_active_for_user(self, user_id: str) -> int:
        """Number of active assignments for the user."""

    async def list_for_document(self, document_id: str) -> list[AssignmentResult]:
        """All assignments of a document, newest first."""

    async def deactivate_active(self, document_id: str, completed_at: datetime) -> int:
        """Deactivate every active assignment of the document. Returns rows changed."""

    async def add(self, data: AssignmentCreate) -> AssignmentResult:
        """Insert an active assignment."""


class IWorkflowHistoryRepository(Protocol):
    """Protocol for the append-only workflow history."""

    async def append(self, data: WorkflowHistoryCreate) -> WorkflowHistoryResult:
        """Append one entry."""

    async def list_for_document(self, document_id: str) -> list[WorkflowHistoryResult]:
        """History of a document in chronological order."""


class ICommentRepository(Protocol):
    """Protocol for document comments."""

    async def get_by_id(self, comment_id: str) -> CommentResult | None:
        """Return a comment or None."""

    async def add(self, data: CommentCreate) -> CommentResult:
        """Insert a comment."""

    async def list_for_document(self, document_id: str) -> list[CommentResult]:
        """All comments of a document (any order; threading is done by the caller)."""


class ICategoryRepository(Protocol):
    """Protocol for document category lookups."""

    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        """Return a category or None."""

    async def list_active(self) -> list[CategoryResult]:
        """Active categories ordered by name."""


class IDepartmentRepository(Protocol):
    """Protocol for department lookups."""

    async def get_code(self, department_id: str) -> str | None:
        """Return the department code, or None when unknown."""


class IPendingEffectRepository(Protocol):
    """Protocol for the side-effect outbox."""

    async def add(self, data: PendingEffectCreate) -> PendingEffectResult:
        """Insert a pending effect."""

    async def list_pending(self, limit: int) -> list[PendingEffectResult]:
        """Pending effects, oldest first (no locks taken)."""

    async def claim(self, effect_id: str) -> PendingEffectResult | None:
        """Lock a still-pending effect for this transaction; None if taken or no longer pending."""

    async def mark_delivered(self, effect_id: str, delivered_at: datetime) -> bool:
        """Mark a pending effect delivered. False when it was no longer pending."""

    async def record_failure(self, effect_id: str, error: str, *, give_up: bool) -> bool:
        """Increment attempts and store the error; mark failed when give_up is True."""


class INotificationRepository(Protocol):
    """Protocol for stored user notifications."""

    async def create(self, data: NotificationRequest) -> NotificationResult:
        """Insert an unread notification."""

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> list[NotificationResult]:
        """Notifications for the user, newest first."""

    async def count_unread(self, user_id: str) -> int:
        """Number of unread notifications for the user."""

    async def mark_read(self, notification_id: str, user_id: str, read_at: datetime) -> bool:
        """Mark one of the user's notifications read. False when not found."""

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        """Mark all unread notifications of the user read. Returns rows changed."""


class IAuditLogRepository(Protocol):
    """Protocol for the append-only audit log."""

    async def create(self, data: AuditRequest) -> str:
        """Insert an audit row; returns its id."""


class IUnitOfWork(Protocol):
    """One atomic unit of work over the shared store.

    Repositories share the unit's transaction. Writes happen only between
    begin() and commit()/rollback().
    """

    documents: IDocumentRepository
    versions: IDocumentVersionRepository
    assignments: IAssignmentRepository
    history: IWorkflowHistoryRepository
    comments: ICommentRepository
    categories: ICategoryRepository
    departments: IDepartmentRepository
    effects: IPendingEffectRepository

    async def begin(self) -> None:
        """Open a transaction."""

    async def commit(self) -> None:
        """Commit the open transaction. Raises PersistenceException on storage failure."""

    async def rollback(self) -> None:
        """Discard every write since begin()."""
