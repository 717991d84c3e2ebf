"""DTOs for document use cases (no dependency on ORM)."""

from dataclasses import dataclass, field
from datetime import datetime

from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import DocumentPriority, DocumentStatus


@dataclass(frozen=True)
class StoredFile:
    """Result of saving bytes through the file store."""

    file_name: str
    file_path: str
    file_size: int


@dataclass(frozen=True)
class DocumentVersionCreate:
    """Input for inserting a version row (VersionManager builds this)."""

    document_id: str
    version_number: int
    file_name: str
    file_path: str
    file_size: int
    created_by: str
    change_description: str
    is_current: bool = True


@dataclass(frozen=True)
class DocumentVersionResult:
    """Version read-model."""

    id: str
    document_id: str
    version_number: int
    file_name: str
    file_path: str
    file_size: int
    created_by: str
    change_description: str | None
    is_current: bool
    created_at: datetime | None


@dataclass(frozen=True)
class AssignmentCreate:
    """Input for inserting an active assignment (AssignmentTracker builds this)."""

    document_id: str
    assigned_to: str
    assigned_by: str
    workflow_level: int
    due_date: datetime | None = None


@dataclass(frozen=True)
class AssignmentResult:
    """Assignment read-model."""

    id: str
    document_id: str
    assigned_to: str
    assigned_by: str
    workflow_level: int
    is_active: bool
    assigned_at: datetime | None
    due_date: datetime | None = None
    completed_at: datetime | None = None


@dataclass(frozen=True)
class WorkflowHistoryCreate:
    """Input for appending a workflow history entry."""

    document_id: str
    action_code: str
    from_user_id: str
    to_user_id: str | None
    previous_status: str | None
    new_status: str
    from_workflow_level: int | None
    to_workflow_level: int
    comments: str | None = None


@dataclass(frozen=True)
class WorkflowHistoryResult:
    """Workflow history read-model (immutable once written)."""

    id: str
    document_id: str
    action_code: str
    from_user_id: str
    to_user_id: str | None
    previous_status: str | None
    new_status: str
    from_workflow_level: int | None
    to_workflow_level: int
    comments: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class CommentCreate:
    """Input for inserting a comment."""

    document_id: str
    user_id: str
    text: str
    parent_comment_id: str | None = None


@dataclass(frozen=True)
class CommentResult:
    """Comment read-model."""

    id: str
    document_id: str
    user_id: str
    text: str
    parent_comment_id: str | None
    created_at: datetime | None


@dataclass(frozen=True)
class CommentThread:
    """Top-level comment with its replies (oldest first)."""

    comment: CommentResult
    replies: tuple[CommentResult, ...] = ()


@dataclass(frozen=True)
class CategoryResult:
    """Document category lookup row."""

    id: str
    name: str
    code: str
    description: str | None
    is_active: bool


@dataclass(frozen=True)
class DocumentCapabilities:
    """What the current actor may do with a document."""

    can_view: bool
    can_edit: bool
    can_submit: bool
    can_approve: bool
    can_reject: bool
    can_request_revision: bool


@dataclass(frozen=True)
class DocumentSummary:
    """Document read-model used in lists and as the head of the detail view."""

    id: str
    document_number: str
    title: str
    description: str | None
    category_id: str
    status: DocumentStatus
    workflow_level: int
    priority: DocumentPriority
    created_by: str
    current_handler_id: str | None
    department_id: str | None
    due_date: datetime | None
    file_name: str | None
    file_size: int | None
    created_at: datetime | None
    updated_at: datetime | None
    completed_at: datetime | None
    is_overdue: bool = False

    @classmethod
    def from_entity(cls, doc: DocumentEntity, now: datetime) -> "DocumentSummary":
        return cls(
            id=doc.id,
            document_number=doc.document_number,
            title=doc.title,
            description=doc.description,
            category_id=doc.category_id,
            status=doc.status,
            workflow_level=int(doc.workflow_level),
            priority=doc.priority,
            created_by=doc.created_by,
            current_handler_id=doc.current_handler_id,
            department_id=doc.department_id,
            due_date=doc.due_date,
            file_name=doc.file_name,
            file_size=doc.file_size,
            created_at=doc.created_at,
            updated_at=doc.updated_at,
            completed_at=doc.completed_at,
            is_overdue=doc.is_overdue(now),
        )


@dataclass(frozen=True)
class DocumentDetail:
    """Full document view: a summary plus its chain, comments and capabilities."""

    summary: DocumentSummary
    capabilities: DocumentCapabilities
    versions: tuple[DocumentVersionResult, ...] = ()
    history: tuple[WorkflowHistoryResult, ...] = ()
    comments: tuple[CommentThread, ...] = ()
    active_assignment: AssignmentResult | None = None


@dataclass(frozen=True)
class DocumentFieldsUpdate:
    """Draft edits; None leaves a field unchanged. clear_due_date removes the due date."""

    title: str | None = None
    description: str | None = None
    category_id: str | None = None
    priority: DocumentPriority | None = None
    due_date: datetime | None = None
    clear_due_date: bool = False


@dataclass(frozen=True)
class DocumentListFilter:
    """Listing filters, sort and paging (role visibility is applied by the repository)."""

    search: str | None = None
    status: DocumentStatus | None = None
    category_id: str | None = None
    priority: DocumentPriority | None = None
    created_from: datetime | None = None
    created_to: datetime | None = None
    sort_by: str = "created_at"
    sort_desc: bool = True
    page: int = 1
    page_size: int = 20


@dataclass(frozen=True)
class DocumentPage:
    """One page of document summaries."""

    items: tuple[DocumentSummary, ...]
    total: int
    page: int
    page_size: int

    @property
    def total_pages(self) -> int:
        if self.page_size <= 0:
            return 0
        return (self.total + self.page_size - 1) // self.page_size


@dataclass(frozen=True)
class DashboardStats:
    """Counts shown on the user's dashboard."""

    total_documents: int
    pending_assignments: int
    created_this_month: int
    overdue: int
    by_status: dict[str, int] = field(default_factory=dict)


@dataclass(frozen=True)
class FileDownload:
    """Bytes and headers for a document or version download."""

    content: bytes
    file_name: str
    content_type: str
