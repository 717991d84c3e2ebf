"""DTOs for workflow verbs: commands in, WorkflowResult out."""

from dataclasses import dataclass
from datetime import datetime

from docflow.domain.entities.document import DocumentEntity
from docflow.domain.exceptions import BusinessRuleException


@dataclass(frozen=True)
class SubmitCommand:
    document_id: str
    to_user_id: str
    comments: str | None = None
    due_date: datetime | None = None


@dataclass(frozen=True)
class ApproveCommand:
    document_id: str
    send_to_next_level: bool = False
    next_level_user_id: str | None = None
    comments: str | None = None
    due_date: datetime | None = None

    @property
    def forwards(self) -> bool:
        """Forwarding needs both the flag and a target user."""
        return self.send_to_next_level and bool(self.next_level_user_id)


@dataclass(frozen=True)
class RejectCommand:
    document_id: str
    comments: str


@dataclass(frozen=True)
class RequestRevisionCommand:
    document_id: str
    send_back_to_user_id: str
    comments: str


@dataclass(frozen=True)
class NewVersionCommand:
    document_id: str
    file_name: str
    content: bytes
    change_description: str | None = None


@dataclass(frozen=True)
class WorkflowResult:
    """Outcome of a workflow operation.

    Exactly one of document/error is set. error holds the business-rule
    exception (validation, not found, permission, state) after rollback.
    """

    document: DocumentEntity | None = None
    error: BusinessRuleException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, document: DocumentEntity) -> "WorkflowResult":
        return cls(document=document)

    @classmethod
    def failure(cls, error: BusinessRuleException) -> "WorkflowResult":
        return cls(error=error)

    def unwrap(self) -> DocumentEntity:
        """Return the document or raise the recorded business error."""
        if self.error is not None:
            raise self.error
        assert self.document is not None
        return self.document
