"""Workflow action request schemas."""

from datetime import datetime

from pydantic import BaseModel, Field


class SubmitRequest(BaseModel):
    """Request body for POST /documents/{id}/submit."""

    to_user_id: str = Field(..., min_length=1, description="Vice-manager reviewing the document")
    comments: str | None = Field(default=None, max_length=4000)
    due_date: datetime | None = None


class ApproveRequest(BaseModel):
    """Request body for POST /documents/{id}/approve.

    With send_to_next_level the document goes to next_level_user_id at manager
    level (next_level_user_id is then required); otherwise the approval is final.
    """

    send_to_next_level: bool = False
    next_level_user_id: str | None = None
    comments: str | None = Field(default=None, max_length=4000)
    due_date: datetime | None = None


class RejectRequest(BaseModel):
    """Request body for POST /documents/{id}/reject."""

    comments: str = Field(..., min_length=1, max_length=4000)


class RequestRevisionRequest(BaseModel):
    """Request body for POST /documents/{id}/request-revision."""

    send_back_to_user_id: str = Field(..., min_length=1)
    comments: str = Field(..., min_length=1, max_length=4000)
