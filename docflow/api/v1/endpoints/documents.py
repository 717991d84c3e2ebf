"""Document API: thin routes delegating to the document use cases and WorkflowEngine."""

from datetime import datetime
from typing import Annotated
from urllib.parse import quote

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import Response

from docflow.api.v1.dependencies import (
    get_comment_service,
    get_document_creation_service,
    get_document_edit_service,
    get_document_query_service,
    get_identity,
    get_workflow_engine,
)
from docflow.application.dtos.document import DocumentFieldsUpdate, DocumentListFilter
from docflow.application.dtos.workflow import NewVersionCommand
from docflow.application.use_cases.documents import (
    CommentService,
    DocumentCreationService,
    DocumentEditService,
    DocumentQueryService,
)
from docflow.application.use_cases.workflow import WorkflowEngine
from docflow.core.limiter import limit_upload, limit_writes
from docflow.domain.enums import DocumentPriority, DocumentStatus
from docflow.domain.value_objects.core import IdentityContext
from docflow.schemas.document import (
    CommentCreateRequest,
    CommentItem,
    CommentThreadItem,
    DocumentDetailResponse,
    DocumentPageResponse,
    DocumentResponse,
    DocumentUpdate,
    DocumentVersionItem,
    WorkflowHistoryItem,
)

router = APIRouter()


@router.post("", response_model=DocumentResponse, status_code=201)
@limit_upload
async def create_document(
    request: Request,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    title: str = Form(..., max_length=500),
    category_id: str = Form(...),
    file: UploadFile = File(...),
    description: str | None = Form(None),
    priority: int = Form(int(DocumentPriority.MEDIUM), ge=1, le=3),
    due_date: datetime | None = Form(None),
    creation_svc: DocumentCreationService = Depends(get_document_creation_service),
):
    """Create a draft document with its first file version."""
    content = await file.read()
    document = await creation_svc.create_document(
        identity,
        title=title,
        category_id=category_id,
        file_name=file.filename or "",
        content=content,
        description=description,
        priority=DocumentPriority(priority),
        due_date=due_date,
    )
    return DocumentResponse.from_entity(document)


@router.get("", response_model=DocumentPageResponse)
async def list_documents(
    identity: Annotated[IdentityContext, Depends(get_identity)],
    search: str | None = Query(None, max_length=200),
    status: DocumentStatus | None = None,
    category_id: str | None = None,
    priority: int | None = Query(None, ge=1, le=3),
    created_from: datetime | None = None,
    created_to: datetime | None = None,
    sort_by: str = Query("created_at", pattern="^(title|created_at|priority)$"),
    sort_desc: bool = True,
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """List documents visible to the caller's role, filtered, sorted and paged."""
    result = await query_svc.list_documents(
        identity,
        DocumentListFilter(
            search=search,
            status=status,
            category_id=category_id,
            priority=DocumentPriority(priority) if priority is not None else None,
            created_from=created_from,
            created_to=created_to,
            sort_by=sort_by,
            sort_desc=sort_desc,
            page=page,
            page_size=page_size,
        ),
    )
    return DocumentPageResponse(
        items=[DocumentResponse.model_validate(i) for i in result.items],
        total=result.total,
        page=result.page,
        page_size=result.page_size,
        total_pages=result.total_pages,
    )


@router.get("/pending", response_model=list[DocumentResponse])
async def list_pending_documents(
    identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Documents waiting on the caller (active assignments). Defined before /{document_id}."""
    items = await query_svc.list_pending_for_user(identity)
    return [DocumentResponse.model_validate(i) for i in items]


@router.get("/{document_id}", response_model=DocumentDetailResponse)
async def get_document(
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Document with versions, history, threaded comments and the caller's capabilities."""
    detail = await query_svc.get_document_detail(identity, document_id)
    return DocumentDetailResponse.model_validate(detail)


@router.patch("/{document_id}", response_model=DocumentResponse)
@limit_writes
async def update_document(
    request: Request,
    document_id: str,
    body: DocumentUpdate,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    edit_svc: DocumentEditService = Depends(get_document_edit_service),
):
    """Edit draft fields (creator only, while Draft or Revision Requested)."""
    document = await edit_svc.update_document(
        identity,
        document_id,
        DocumentFieldsUpdate(
            title=body.title,
            description=body.description,
            category_id=body.category_id,
            priority=body.priority,
            due_date=body.due_date,
            clear_due_date="due_date" in body.model_fields_set and body.due_date is None,
        ),
    )
    return DocumentResponse.from_entity(document)


@router.get("/{document_id}/versions", response_model=list[DocumentVersionItem])
async def list_versions(
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Version chain, newest first."""
    versions = await query_svc.list_versions(identity, document_id)
    return [DocumentVersionItem.model_validate(v) for v in versions]


@router.post("/{document_id}/versions", response_model=DocumentResponse, status_code=201)
@limit_upload
async def upload_version(
    request: Request,
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    file: UploadFile = File(...),
    change_description: str | None = Form(None, max_length=1000),
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    """Upload a new file version; it becomes the document's current file."""
    content = await file.read()
    result = await engine.create_version(
        identity,
        NewVersionCommand(
            document_id=document_id,
            file_name=file.filename or "",
            content=content,
            change_description=change_description,
        ),
    )
    return DocumentResponse.from_entity(result.unwrap())


@router.get("/{document_id}/history", response_model=list[WorkflowHistoryItem])
async def list_history(
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Workflow history in chronological order."""
    history = await query_svc.list_history(identity, document_id)
    return [WorkflowHistoryItem.model_validate(h) for h in history]


@router.get("/{document_id}/download")
async def download_document(
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    version_id: str | None = None,
    query_svc: DocumentQueryService = Depends(get_document_query_service),
):
    """Download the current file, or a given version with ?version_id=."""
    download = await query_svc.download_file(identity, document_id, version_id)
    return Response(
        content=download.content,
        media_type=download.content_type,
        headers={
            "Content-Disposition": (
                f"attachment; filename*=UTF-8''{quote(download.file_name)}"
            )
        },
    )


@router.get("/{document_id}/comments", response_model=list[CommentThreadItem])
async def list_comments(
    document_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    comment_svc: CommentService = Depends(get_comment_service),
):
    """Comment threads: top-level newest first, replies oldest first."""
    threads = await comment_svc.list_comments(identity, document_id)
    return [CommentThreadItem.model_validate(t) for t in threads]


@router.post("/{document_id}/comments", response_model=CommentItem, status_code=201)
@limit_writes
async def add_comment(
    request: Request,
    document_id: str,
    body: CommentCreateRequest,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    comment_svc: CommentService = Depends(get_comment_service),
):
    """Comment on a document, or reply to a top-level comment."""
    comment = await comment_svc.add_comment(
        identity, document_id, body.text, body.parent_comment_id
    )
    return CommentItem.model_validate(comment)
