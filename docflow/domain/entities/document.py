"""Document domain entity.

Represents a document moving through the approval chain, independent of
persistence. Transition methods enforce the status/workflow-level table;
who may call them is decided by PermissionEvaluator.
"""

from dataclasses import dataclass, field
from datetime import datetime

from docflow.domain.enums import (
    DocumentPriority,
    DocumentStatus,
    WorkflowLevel,
)
from docflow.domain.exceptions import (
    InvalidStateTransitionException,
    ValidationException,
)

# Workflow levels a document may sit at for each status.
_LEVELS_BY_STATUS: dict[DocumentStatus, frozenset[int]] = {
    DocumentStatus.DRAFT: frozenset({WorkflowLevel.AUTHOR}),
    DocumentStatus.REVISION_REQUESTED: frozenset({WorkflowLevel.AUTHOR}),
    DocumentStatus.PENDING: frozenset({WorkflowLevel.VICE_MANAGER_REVIEW}),
    DocumentStatus.IN_REVIEW: frozenset({WorkflowLevel.MANAGER_REVIEW}),
    DocumentStatus.APPROVED: frozenset(
        {WorkflowLevel.VICE_MANAGER_REVIEW, WorkflowLevel.MANAGER_REVIEW}
    ),
    DocumentStatus.REJECTED: frozenset(
        {WorkflowLevel.VICE_MANAGER_REVIEW, WorkflowLevel.MANAGER_REVIEW}
    ),
    DocumentStatus.COMPLETED: frozenset(
        {WorkflowLevel.VICE_MANAGER_REVIEW, WorkflowLevel.MANAGER_REVIEW}
    ),
}

TITLE_MAX_LENGTH = 500


@dataclass
class DocumentEntity:
    """Domain entity for a workflow document.

    References to users, category and department are plain ids; lookups are
    resolved by repositories. row_version is the optimistic-lock counter the
    entity was loaded at; repositories compare it on write.
    """

    id: str
    document_number: str
    title: str
    created_by: str
    category_id: str
    department_id: str | None
    status: DocumentStatus = DocumentStatus.DRAFT
    workflow_level: int = WorkflowLevel.AUTHOR
    current_handler_id: str | None = None
    description: str | None = None
    priority: DocumentPriority = DocumentPriority.MEDIUM
    due_date: datetime | None = None
    file_name: str | None = None
    file_path: str | None = None
    file_size: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    row_version: int = field(default=1)

    def __post_init__(self) -> None:
        self.status = DocumentStatus(self.status)
        self.priority = DocumentPriority(self.priority)
        self.validate()

    def validate(self) -> None:
        """Validate document business rules. Raises ValidationException if invalid."""
        if not self.id:
            raise ValidationException("Document ID is required", field="id")
        if not self.document_number:
            raise ValidationException(
                "Document number is required", field="document_number"
            )
        if not self.title or not self.title.strip():
            raise ValidationException("Title is required", field="title")
        if len(self.title) > TITLE_MAX_LENGTH:
            raise ValidationException(
                f"Title must not exceed {TITLE_MAX_LENGTH} characters", field="title"
            )
        if not self.created_by:
            raise ValidationException("Document must have a creator", field="created_by")
        if self.workflow_level not in _LEVELS_BY_STATUS[self.status]:
            raise ValidationException(
                f"Workflow level {self.workflow_level} is inconsistent with status {self.status.value}",
                field="workflow_level",
            )

    @property
    def is_editable(self) -> bool:
        return self.status.is_editable

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def is_overdue(self, now: datetime) -> bool:
        """Return whether the due date has passed and the document is still open."""
        return (
            self.due_date is not None
            and not self.is_terminal
            and self.due_date < now
        )

    def _require(self, allowed: frozenset[DocumentStatus], action: str) -> None:
        if self.status not in allowed:
            raise InvalidStateTransitionException(self.id, self.status.value, action)

    def mark_submitted(self, to_user_id: str) -> None:
        """Move an editable document to PENDING at vice-manager level."""
        self._require(
            frozenset({DocumentStatus.DRAFT, DocumentStatus.REVISION_REQUESTED}),
            "submit",
        )
        self.status = DocumentStatus.PENDING
        self.workflow_level = WorkflowLevel.VICE_MANAGER_REVIEW
        self.current_handler_id = to_user_id

    def mark_forwarded(self, next_level_user_id: str) -> None:
        """Forward a reviewed document to manager level (IN_REVIEW)."""
        self._require(
            frozenset({DocumentStatus.PENDING, DocumentStatus.IN_REVIEW}), "approve"
        )
        self.status = DocumentStatus.IN_REVIEW
        self.workflow_level = WorkflowLevel.MANAGER_REVIEW
        self.current_handler_id = next_level_user_id

    def mark_approved(self, now: datetime) -> None:
        """Final approval. Workflow level is kept at the approver's level."""
        self._require(
            frozenset({DocumentStatus.PENDING, DocumentStatus.IN_REVIEW}), "approve"
        )
        self.status = DocumentStatus.APPROVED
        self.completed_at = now

    def mark_rejected(self, now: datetime) -> None:
        """Reject: terminal, no one handles the document any more."""
        self._require(
            frozenset({DocumentStatus.PENDING, DocumentStatus.IN_REVIEW}), "reject"
        )
        self.status = DocumentStatus.REJECTED
        self.current_handler_id = None
        self.completed_at = now

    def mark_revision_requested(self, send_back_to_user_id: str) -> None:
        """Send the document back to author level for rework."""
        self._require(
            frozenset({DocumentStatus.PENDING, DocumentStatus.IN_REVIEW}),
            "request revision on",
        )
        self.status = DocumentStatus.REVISION_REQUESTED
        self.workflow_level = WorkflowLevel.AUTHOR
        self.current_handler_id = send_back_to_user_id

    def set_current_file(self, file_name: str, file_path: str, file_size: int) -> None:
        """Point the denormalized current-file fields at a new version."""
        self.file_name = file_name
        self.file_path = file_path
        self.file_size = file_size
