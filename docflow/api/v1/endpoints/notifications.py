"""Notification inbox API (the caller's own notifications only)."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request

from docflow.api.v1.dependencies import get_identity, get_notification_inbox
from docflow.application.use_cases.notifications import NotificationInboxService
from docflow.core.limiter import limit_writes
from docflow.domain.value_objects.core import IdentityContext
from docflow.schemas.notification import (
    MarkAllReadResponse,
    NotificationItem,
    UnreadCountResponse,
)

router = APIRouter()


@router.get("", response_model=list[NotificationItem])
async def list_notifications(
    identity: Annotated[IdentityContext, Depends(get_identity)],
    unread_only: bool = False,
    skip: int = Query(0, ge=0),
    limit: int = Query(50, ge=1, le=200),
    inbox: NotificationInboxService = Depends(get_notification_inbox),
):
    """Newest first."""
    items = await inbox.list_notifications(
        identity, unread_only=unread_only, skip=skip, limit=limit
    )
    return [NotificationItem.model_validate(n) for n in items]


@router.get("/unread-count", response_model=UnreadCountResponse)
async def unread_count(
    identity: Annotated[IdentityContext, Depends(get_identity)],
    inbox: NotificationInboxService = Depends(get_notification_inbox),
):
    return UnreadCountResponse(unread=await inbox.unread_count(identity))


@router.post("/read-all", response_model=MarkAllReadResponse)
@limit_writes
async def mark_all_read(
    request: Request,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    inbox: NotificationInboxService = Depends(get_notification_inbox),
):
    return MarkAllReadResponse(updated=await inbox.mark_all_read(identity))


@router.post("/{notification_id}/read", status_code=204)
@limit_writes
async def mark_read(
    request: Request,
    notification_id: str,
    identity: Annotated[IdentityContext, Depends(get_identity)],
    inbox: NotificationInboxService = Depends(get_notification_inbox),
):
    """Mark one notification read (404 when it is not the caller's)."""
    await inbox.mark_read(identity, notification_id)
