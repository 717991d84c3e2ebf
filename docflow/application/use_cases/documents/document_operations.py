"""Document operations around the workflow: create, edit drafts, and query."""

from __future__ import annotations

import os
from collections.abc import Callable
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from docflow.application.dtos.document import (
    CategoryResult,
    CommentResult,
    CommentThread,
    DashboardStats,
    DocumentDetail,
    DocumentFieldsUpdate,
    DocumentListFilter,
    DocumentPage,
    DocumentSummary,
    FileDownload,
    StoredFile,
    WorkflowHistoryCreate,
)
from docflow.application.dtos.effect import AuditRequest, PendingEffectCreate
from docflow.application.services.document_number import DocumentNumberGenerator
from docflow.application.services.permission_evaluator import PermissionEvaluator
from docflow.application.services.version_manager import VersionManager
from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import DocumentPriority, DocumentStatus, WorkflowAction
from docflow.domain.exceptions import (
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from docflow.shared.enums import AuditAction
from docflow.shared.telemetry.logging import get_logger
from docflow.shared.telemetry.tracing import traced
from docflow.shared.utils.datetime import start_of_month, utc_now
from docflow.shared.utils.generators import generate_cuid

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IUnitOfWork
    from docflow.application.interfaces.services import IFileStore
    from docflow.domain.value_objects.core import IdentityContext

logger = get_logger(__name__)

DOCUMENTS_FOLDER = "documents"
SORT_FIELDS = frozenset({"title", "created_at", "priority"})
MAX_PAGE_SIZE = 100

_CONTENT_TYPES: dict[str, str] = {
    ".pdf": "application/pdf",
    ".doc": "application/msword",
    ".docx": "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    ".xls": "application/vnd.ms-excel",
    ".xlsx": "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    ".ppt": "application/vnd.ms-powerpoint",
    ".pptx": "application/vnd.openxmlformats-officedocument.presentationml.presentation",
}


def content_type_for(file_name: str) -> str:
    """Content type by extension; octet-stream for anything unknown."""
    ext = os.path.splitext(file_name or "")[1].lower()
    return _CONTENT_TYPES.get(ext, "application/octet-stream")


def build_comment_threads(comments: list[CommentResult]) -> tuple[CommentThread, ...]:
    """Top-level comments newest first, each with replies oldest first."""
    replies: dict[str, list[CommentResult]] = {}
    top_level: list[CommentResult] = []
    for comment in comments:
        if comment.parent_comment_id:
            replies.setdefault(comment.parent_comment_id, []).append(comment)
        else:
            top_level.append(comment)

    def _ts(c: CommentResult) -> datetime:
        return c.created_at or datetime.min.replace(tzinfo=UTC)

    top_level.sort(key=_ts, reverse=True)
    return tuple(
        CommentThread(
            comment=c,
            replies=tuple(sorted(replies.get(c.id, []), key=_ts)),
        )
        for c in top_level
    )


def normalize_list_filter(filters: DocumentListFilter) -> DocumentListFilter:
    """Validate sort field and clamp paging. Raises ValidationException on unknown sort."""
    sort_by = (filters.sort_by or "created_at").lower()
    if sort_by not in SORT_FIELDS:
        raise ValidationException(
            f"sort_by must be one of {sorted(SORT_FIELDS)}", field="sort_by"
        )
    if filters.created_from and filters.created_to and filters.created_from > filters.created_to:
        raise ValidationException(
            "created_from must not be after created_to", field="created_from"
        )
    search = (filters.search or "").strip() or None
    return replace(
        filters,
        search=search,
        sort_by=sort_by,
        page=max(1, filters.page),
        page_size=min(max(1, filters.page_size), MAX_PAGE_SIZE),
    )


class DocumentCreationService:
    """Creates a document in DRAFT with version 1 and a CREATE history entry."""

    def __init__(
        self,
        uow: IUnitOfWork,
        file_store: IFileStore,
        *,
        number_prefix: str = "DOC",
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self._file_store = file_store
        self._numbers = DocumentNumberGenerator(
            uow.documents, uow.departments, prefix=number_prefix
        )
        self._versions = VersionManager(uow.versions)
        self._clock = clock

    @traced("documents.create")
    async def create_document(
        self,
        identity: IdentityContext,
        *,
        title: str,
        category_id: str,
        file_name: str,
        content: bytes,
        description: str | None = None,
        priority: DocumentPriority = DocumentPriority.MEDIUM,
        due_date: datetime | None = None,
    ) -> DocumentEntity:
        """Store the file and insert document, version 1 and history in one transaction."""
        title = (title or "").strip()
        if not title:
            raise ValidationException("Title is required", field="title")
        if not content:
            raise ValidationException("File is empty", field="file")

        stored: StoredFile | None = None
        await self.uow.begin()
        try:
            category = await self.uow.categories.get_by_id(category_id)
            if category is None or not category.is_active:
                raise ResourceNotFoundException("category", category_id)
            now = self._clock()
            number = await self._numbers.next_number(identity.department_id, now)
            stored = await self._file_store.save(content, file_name, DOCUMENTS_FOLDER)
            document = await self.uow.documents.add(
                DocumentEntity(
                    id=generate_cuid(),
                    document_number=number.value,
                    title=title,
                    description=(description or "").strip() or None,
                    category_id=category_id,
                    created_by=identity.actor_id,
                    department_id=identity.department_id,
                    current_handler_id=identity.actor_id,
                    priority=priority,
                    due_date=due_date,
                    file_name=stored.file_name,
                    file_path=stored.file_path,
                    file_size=stored.file_size,
                )
            )
            await self._versions.create_version(document, stored, identity.actor_id)
            await self.uow.history.append(
                WorkflowHistoryCreate(
                    document_id=document.id,
                    action_code=WorkflowAction.CREATE.value,
                    from_user_id=identity.actor_id,
                    to_user_id=identity.actor_id,
                    previous_status=None,
                    new_status=document.status.value,
                    from_workflow_level=None,
                    to_workflow_level=int(document.workflow_level),
                    comments="Document created",
                )
            )
            await self.uow.effects.add(
                PendingEffectCreate.audit(
                    AuditRequest(
                        actor_id=identity.actor_id,
                        action_type=AuditAction.CREATE.value,
                        entity_type="document",
                        entity_id=document.id,
                        description=f"{document.document_number}: created '{document.title}'",
                        new_values={"title": document.title, "category_id": category_id},
                    )
                )
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            if stored is not None:
                await self._remove_orphan(stored)
            raise
        logger.info(
            "Document %s created by %s as %s",
            document.id,
            identity.actor_id,
            document.document_number,
        )
        return document

    async def _remove_orphan(self, stored: StoredFile) -> None:
        try:
            await self._file_store.delete(stored.file_path)
        except Exception:
            logger.exception("Could not remove orphaned file %s", stored.file_path)


class DocumentEditService:
    """Edits draft fields; only the creator while the document is editable."""

    def __init__(
        self,
        uow: IUnitOfWork,
        *,
        permissions: PermissionEvaluator | None = None,
    ) -> None:
        self.uow = uow
        self._permissions = permissions or PermissionEvaluator()

    @traced("documents.update")
    async def update_document(
        self,
        identity: IdentityContext,
        document_id: str,
        changes: DocumentFieldsUpdate,
    ) -> DocumentEntity:
        await self.uow.begin()
        try:
            document = await self.uow.documents.get_by_id(document_id)
            if document is None:
                raise ResourceNotFoundException("document", document_id)
            self._permissions.require_creator(document, identity, "edit")
            if not document.is_editable:
                raise InvalidStateTransitionException(
                    document.id, document.status.value, "edit"
                )
            old_title = document.title
            if changes.title is not None:
                title = changes.title.strip()
                if not title:
                    raise ValidationException("Title is required", field="title")
                document.title = title
            if changes.description is not None:
                document.description = changes.description.strip() or None
            if changes.category_id is not None and changes.category_id != document.category_id:
                category = await self.uow.categories.get_by_id(changes.category_id)
                if category is None or not category.is_active:
                    raise ResourceNotFoundException("category", changes.category_id)
                document.category_id = changes.category_id
            if changes.priority is not None:
                document.priority = DocumentPriority(changes.priority)
            if changes.clear_due_date:
                document.due_date = None
            elif changes.due_date is not None:
                document.due_date = changes.due_date
            document.validate()
            document = await self.uow.documents.update(document)
            await self.uow.effects.add(
                PendingEffectCreate.audit(
                    AuditRequest(
                        actor_id=identity.actor_id,
                        action_type=AuditAction.UPDATE.value,
                        entity_type="document",
                        entity_id=document.id,
                        description=f"{document.document_number}: draft updated",
                        old_values={"title": old_title},
                        new_values={"title": document.title},
                    )
                )
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise
        return document


class DocumentQueryService:
    """Read side: detail, role-filtered listing, dashboard, categories and downloads."""

    def __init__(
        self,
        uow: IUnitOfWork,
        file_store: IFileStore | None = None,
        *,
        permissions: PermissionEvaluator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self._file_store = file_store
        self._permissions = permissions or PermissionEvaluator()
        self._clock = clock

    async def _get_visible(self, identity: IdentityContext, document_id: str) -> DocumentEntity:
        document = await self.uow.documents.get_by_id(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        self._permissions.require_view(document, identity)
        return document

    async def get_document(self, identity: IdentityContext, document_id: str) -> DocumentSummary:
        document = await self._get_visible(identity, document_id)
        return DocumentSummary.from_entity(document, self._clock())

    @traced("documents.detail")
    async def get_document_detail(
        self, identity: IdentityContext, document_id: str
    ) -> DocumentDetail:
        """Summary plus versions, history, threaded comments, active assignment and capabilities."""
        document = await self._get_visible(identity, document_id)
        versions = await self.uow.versions.list_for_document(document_id)
        history = await self.uow.history.list_for_document(document_id)
        comments = await self.uow.comments.list_for_document(document_id)
        active = await self.uow.assignments.get_active_for_document(document_id)
        return DocumentDetail(
            summary=DocumentSummary.from_entity(document, self._clock()),
            capabilities=self._permissions.capabilities(document, identity),
            versions=tuple(versions),
            history=tuple(history),
            comments=build_comment_threads(comments),
            active_assignment=active,
        )

    async def list_versions(self, identity: IdentityContext, document_id: str):
        await self._get_visible(identity, document_id)
        return await self.uow.versions.list_for_document(document_id)

    async def list_history(self, identity: IdentityContext, document_id: str):
        await self._get_visible(identity, document_id)
        return await self.uow.history.list_for_document(document_id)

    @traced("documents.list")
    async def list_documents(
        self, identity: IdentityContext, filters: DocumentListFilter
    ) -> DocumentPage:
        filters = normalize_list_filter(filters)
        documents, total = await self.uow.documents.list_visible(identity, filters)
        now = self._clock()
        return DocumentPage(
            items=tuple(DocumentSummary.from_entity(d, now) for d in documents),
            total=total,
            page=filters.page,
            page_size=filters.page_size,
        )

    async def list_pending_for_user(self, identity: IdentityContext) -> list[DocumentSummary]:
        """Documents with an active assignment to the caller, oldest assignment first."""
        now = self._clock()
        summaries: list[DocumentSummary] = []
        for assignment in await self.uow.assignments.list_active_for_user(identity.actor_id):
            document = await self.uow.documents.get_by_id(assignment.document_id)
            if document is not None:
                summaries.append(DocumentSummary.from_entity(document, now))
        return summaries

    async def get_dashboard_stats(self, identity: IdentityContext) -> DashboardStats:
        now = self._clock()
        by_status = await self.uow.documents.count_visible_by_status(identity)
        return DashboardStats(
            total_documents=sum(by_status.values()),
            pending_assignments=await self.uow.assignments.count_active_for_user(
                identity.actor_id
            ),
            created_this_month=await self.uow.documents.count_visible(
                identity, created_from=start_of_month(now)
            ),
            overdue=await self.uow.documents.count_visible(identity, overdue_at=now),
            by_status={status: by_status.get(status, 0) for status in DocumentStatus.values()},
        )

    async def list_categories(self) -> list[CategoryResult]:
        return await self.uow.categories.list_active()

    @traced("documents.download")
    async def download_file(
        self,
        identity: IdentityContext,
        document_id: str,
        version_id: str | None = None,
    ) -> FileDownload:
        """Current file of the document, or a specific version of it."""
        document = await self._get_visible(identity, document_id)
        if version_id:
            version = await self.uow.versions.get_by_id(version_id)
            if version is None or version.document_id != document.id:
                raise ResourceNotFoundException("version", version_id)
            file_name, file_path = version.file_name, version.file_path
        else:
            if not document.file_path:
                raise ResourceNotFoundException("file", document.id)
            file_name, file_path = document.file_name or "document", document.file_path
        if self._file_store is None:
            raise RuntimeError("DocumentQueryService.download_file requires a file store")
        content = await self._file_store.read(file_path)
        return FileDownload(
            content=content,
            file_name=file_name,
            content_type=content_type_for(file_name),
        )
