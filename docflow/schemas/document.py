"""Document API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from docflow.application.dtos.document import DocumentSummary
from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import DocumentPriority, DocumentStatus
from docflow.shared.utils.datetime import utc_now


class DocumentResponse(BaseModel):
    """Document summary (lists, create and workflow responses)."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    document_number: str
    title: str
    description: str | None = None
    category_id: str
    status: DocumentStatus
    workflow_level: int
    priority: DocumentPriority
    created_by: str
    current_handler_id: str | None = None
    department_id: str | None = None
    due_date: datetime | None = None
    file_name: str | None = None
    file_size: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None
    completed_at: datetime | None = None
    is_overdue: bool = False

    @classmethod
    def from_entity(cls, document: DocumentEntity) -> "DocumentResponse":
        """Build from a domain entity (overdue is evaluated now)."""
        return cls.model_validate(DocumentSummary.from_entity(document, utc_now()))


class DocumentPageResponse(BaseModel):
    """One page of documents."""

    items: list[DocumentResponse]
    total: int
    page: int
    page_size: int
    total_pages: int


class DocumentUpdate(BaseModel):
    """Request body for PATCH document.

    Omitted fields stay unchanged; an explicit null due_date clears it.
    """

    title: str | None = Field(default=None, min_length=1, max_length=500)
    description: str | None = None
    category_id: str | None = None
    priority: DocumentPriority | None = None
    due_date: datetime | None = None


class CapabilitiesResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    can_view: bool
    can_edit: bool
    can_submit: bool
    can_approve: bool
    can_reject: bool
    can_request_revision: bool


class DocumentVersionItem(BaseModel):
    """Document version in the version chain."""

    model_config = ConfigDict(from_attributes=True)

    id: str
    document_id: str
    version_number: int
    file_name: str
    file_size: int
    created_by: str
    change_description: str | None = None
    is_current: bool
    created_at: datetime | None = None


class WorkflowHistoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    action_code: str
    from_user_id: str
    to_user_id: str | None = None
    previous_status: str | None = None
    new_status: str
    from_workflow_level: int | None = None
    to_workflow_level: int
    comments: str | None = None
    created_at: datetime | None = None


class AssignmentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    assigned_to: str
    assigned_by: str
    workflow_level: int
    is_active: bool
    assigned_at: datetime | None = None
    due_date: datetime | None = None
    completed_at: datetime | None = None


class CommentCreateRequest(BaseModel):
    """Request body for POST /documents/{id}/comments."""

    text: str = Field(..., min_length=1, max_length=4000)
    parent_comment_id: str | None = None


class CommentItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    document_id: str
    user_id: str
    text: str
    parent_comment_id: str | None = None
    created_at: datetime | None = None


class CommentThreadItem(BaseModel):
    """Top-level comment and its replies (oldest first)."""

    model_config = ConfigDict(from_attributes=True)

    comment: CommentItem
    replies: list[CommentItem] = Field(default_factory=list)


class DocumentDetailResponse(BaseModel):
    """Document with versions, history, comments, active assignment and capabilities."""

    model_config = ConfigDict(from_attributes=True)

    summary: DocumentResponse
    capabilities: CapabilitiesResponse
    versions: list[DocumentVersionItem] = Field(default_factory=list)
    history: list[WorkflowHistoryItem] = Field(default_factory=list)
    comments: list[CommentThreadItem] = Field(default_factory=list)
    active_assignment: AssignmentItem | None = None


class CategoryItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    code: str
    description: str | None = None
    is_active: bool


class DashboardStatsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_documents: int
    pending_assignments: int
    created_this_month: int
    overdue: int
    by_status: dict[str, int]
