"""Ports: repository and service protocols implemented by infrastructure."""

from docflow.application.interfaces.repositories import (
    IAssignmentRepository,
    IAuditLogRepository,
    ICategoryRepository,
    ICommentRepository,
    IDepartmentRepository,
    IDocumentRepository,
    IDocumentVersionRepository,
    INotificationRepository,
    IPendingEffectRepository,
    IUnitOfWork,
    IWorkflowHistoryRepository,
)
from docflow.application.interfaces.services import IAuditSink, IFileStore, INotifier

__all__ = [
    "IAssignmentRepository",
    "IAuditLogRepository",
    "IAuditSink",
    "ICategoryRepository",
    "ICommentRepository",
    "IDepartmentRepository",
    "IDocumentRepository",
    "IDocumentVersionRepository",
    "IFileStore",
    "INotificationRepository",
    "INotifier",
    "IPendingEffectRepository",
    "IUnitOfWork",
    "IWorkflowHistoryRepository",
]
