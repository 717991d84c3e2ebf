"""Document, workflow and notification dependencies (composition root).

Routes depend only on these builders, never on repositories directly. The
request-scoped session comes from get_db; use cases open their own
transaction through the unit of work.
"""

from __future__ import annotations

from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.services import PermissionEvaluator
from docflow.application.use_cases.documents import (
    CommentService,
    DocumentCreationService,
    DocumentEditService,
    DocumentQueryService,
)
from docflow.application.use_cases.notifications import NotificationInboxService
from docflow.application.use_cases.workflow import WorkflowEngine
from docflow.core.config import get_settings
from docflow.infrastructure.external.storage.factory import StorageFactory
from docflow.infrastructure.external.storage.protocol import StorageProtocol
from docflow.infrastructure.persistence.database import get_db, get_db_transactional
from docflow.infrastructure.persistence.repositories import NotificationRepository
from docflow.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork

_permissions = PermissionEvaluator()


def get_file_store() -> StorageProtocol:
    """File store built from settings (composition root)."""
    return StorageFactory.create_storage_service()


async def get_unit_of_work(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SqlAlchemyUnitOfWork:
    """Unit of work over the request session."""
    return SqlAlchemyUnitOfWork(db)


async def get_workflow_engine(
    uow: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
    file_store: Annotated[StorageProtocol, Depends(get_file_store)],
) -> WorkflowEngine:
    """Build WorkflowEngine for submit/approve/reject/request-revision/new version."""
    return WorkflowEngine(uow, file_store, permissions=_permissions)


async def get_document_creation_service(
    uow: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
    file_store: Annotated[StorageProtocol, Depends(get_file_store)],
) -> DocumentCreationService:
    """Build DocumentCreationService (file store + unit of work + number prefix)."""
    return DocumentCreationService(
        uow, file_store, number_prefix=get_settings().document_number_prefix
    )


async def get_document_edit_service(
    uow: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
) -> DocumentEditService:
    return DocumentEditService(uow, permissions=_permissions)


async def get_document_query_service(
    uow: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
    file_store: Annotated[StorageProtocol, Depends(get_file_store)],
) -> DocumentQueryService:
    """Build DocumentQueryService for detail, listing, dashboard and download."""
    return DocumentQueryService(uow, file_store, permissions=_permissions)


async def get_comment_service(
    uow: Annotated[SqlAlchemyUnitOfWork, Depends(get_unit_of_work)],
) -> CommentService:
    return CommentService(uow, permissions=_permissions)


async def get_notification_inbox(
    db: Annotated[AsyncSession, Depends(get_db_transactional)],
) -> NotificationInboxService:
    """Inbox over a transactional session (mark-read commits with the request)."""
    return NotificationInboxService(NotificationRepository(db))
