"""SQLAlchemy repositories. Each maps ORM rows to domain entities or application DTOs."""

from docflow.infrastructure.persistence.repositories.assignment_repo import AssignmentRepository
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.infrastructure.persistence.repositories.comment_repo import CommentRepository
from docflow.infrastructure.persistence.repositories.document_repo import DocumentRepository
from docflow.infrastructure.persistence.repositories.effect_repo import PendingEffectRepository
from docflow.infrastructure.persistence.repositories.history_repo import (
    WorkflowHistoryRepository,
)
from docflow.infrastructure.persistence.repositories.lookup_repo import (
    CategoryRepository,
    DepartmentRepository,
)
from docflow.infrastructure.persistence.repositories.notification_repo import (
    AuditLogRepository,
    NotificationRepository,
)
from docflow.infrastructure.persistence.repositories.version_repo import (
    DocumentVersionRepository,
)

__all__ = [
    "AssignmentRepository",
    "AuditLogRepository",
    "BaseRepository",
    "CategoryRepository",
    "CommentRepository",
    "DepartmentRepository",
    "DocumentRepository",
    "DocumentVersionRepository",
    "NotificationRepository",
    "PendingEffectRepository",
    "WorkflowHistoryRepository",
]
