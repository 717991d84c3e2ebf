"""Workflow API: the four review verbs, each a single WorkflowEngine call.

Business failures come back in WorkflowResult; unwrap() re-raises them so the
registered exception handlers map them to 400/403/404/409.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from docflow.api.v1.dependencies import get_identity, get_workflow_engine
from docflow.application.dtos.workflow import (
    ApproveCommand,
    RejectCommand,
    RequestRevisionCommand,
    SubmitCommand,
)
from docflow.application.use_cases.workflow import WorkflowEngine
from docflow.core.limiter import limit_writes
from docflow.domain.value_objects.core import IdentityContext
from docflow.schemas.document import DocumentResponse
from docflow.schemas.workflow import (
    ApproveRequest,
    RejectRequest,
    RequestRevisionRequest,
    SubmitRequest,
)

router = APIRouter()


@router.post("/{document_id}/submit", response_model=DocumentResponse)
@limit_writes
async def submit_document(
    request: Request,
    document_id: str,
    body: SubmitRequest,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    """Send a draft (or revised) document to a vice-manager for review."""
    result = await engine.submit(
        identity,
        SubmitCommand(
            document_id=document_id,
            to_user_id=body.to_user_id,
            comments=body.comments,
            due_date=body.due_date,
        ),
    )
    return DocumentResponse.from_entity(result.unwrap())


@router.post("/{document_id}/approve", response_model=DocumentResponse)
@limit_writes
async def approve_document(
    request: Request,
    document_id: str,
    body: ApproveRequest,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    """Approve: forward to a manager, or approve finally."""
    result = await engine.approve(
        identity,
        ApproveCommand(
            document_id=document_id,
            send_to_next_level=body.send_to_next_level,
            next_level_user_id=body.next_level_user_id,
            comments=body.comments,
            due_date=body.due_date,
        ),
    )
    return DocumentResponse.from_entity(result.unwrap())


@router.post("/{document_id}/reject", response_model=DocumentResponse)
@limit_writes
async def reject_document(
    request: Request,
    document_id: str,
    body: RejectRequest,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    """Reject with a reason; the document becomes terminal."""
    result = await engine.reject(
        identity, RejectCommand(document_id=document_id, comments=body.comments)
    )
    return DocumentResponse.from_entity(result.unwrap())


@router.post("/{document_id}/request-revision", response_model=DocumentResponse)
@limit_writes
async def request_revision(
    request: Request,
    document_id: str,
    body: RequestRevisionRequest,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    engine: WorkflowEngine = Depends(get_workflow_engine),
):
    """Send the document back to a user for changes."""
    result = await engine.request_revision(
        identity,
        RequestRevisionCommand(
            document_id=document_id,
            send_back_to_user_id=body.send_back_to_user_id,
            comments=body.comments,
        ),
    )
    return DocumentResponse.from_entity(result.unwrap())
