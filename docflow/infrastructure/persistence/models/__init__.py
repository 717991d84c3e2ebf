"""ORM models. Importing this package registers every table on Base.metadata."""

from docflow.infrastructure.persistence.models.document import (
    Document,
    DocumentAssignment,
    DocumentComment,
    DocumentVersion,
)
from docflow.infrastructure.persistence.models.effects import (
    AuditLog,
    Notification,
    PendingEffect,
)
from docflow.infrastructure.persistence.models.lookup import Department, DocumentCategory
from docflow.infrastructure.persistence.models.workflow_history import WorkflowHistory

__all__ = [
    "AuditLog",
    "Department",
    "Document",
    "DocumentAssignment",
    "DocumentCategory",
    "DocumentComment",
    "DocumentVersion",
    "Notification",
    "PendingEffect",
    "WorkflowHistory",
]
