"""Notification API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class NotificationItem(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    type_code: str
    title: str
    message: str
    document_id: str | None = None
    is_read: bool
    created_at: datetime | None = None
    read_at: datetime | None = None


class UnreadCountResponse(BaseModel):
    unread: int


class MarkAllReadResponse(BaseModel):
    updated: int
