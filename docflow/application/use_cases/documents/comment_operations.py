"""Comments on documents: one level of replies, creator notified of others' comments."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docflow.application.dtos.document import CommentCreate, CommentResult, CommentThread
from docflow.application.dtos.effect import (
    AuditRequest,
    NotificationRequest,
    PendingEffectCreate,
)
from docflow.application.services.permission_evaluator import PermissionEvaluator
from docflow.application.use_cases.documents.document_operations import (
    build_comment_threads,
)
from docflow.domain.exceptions import ResourceNotFoundException, ValidationException
from docflow.shared.enums import AuditAction, NotificationType

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IUnitOfWork
    from docflow.domain.entities.document import DocumentEntity
    from docflow.domain.value_objects.core import IdentityContext

COMMENT_MAX_LENGTH = 4000


class CommentService:
    """Adds and lists comments; anyone who can view a document may comment on it."""

    def __init__(
        self,
        uow: IUnitOfWork,
        *,
        permissions: PermissionEvaluator | None = None,
    ) -> None:
        self.uow = uow
        self._permissions = permissions or PermissionEvaluator()

    async def _get_visible(self, identity: IdentityContext, document_id: str) -> DocumentEntity:
        document = await self.uow.documents.get_by_id(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        self._permissions.require_view(document, identity)
        return document

    async def add_comment(
        self,
        identity: IdentityContext,
        document_id: str,
        text: str,
        parent_comment_id: str | None = None,
    ) -> CommentResult:
        text = (text or "").strip()
        if not text:
            raise ValidationException("Comment text is required", field="text")
        if len(text) > COMMENT_MAX_LENGTH:
            raise ValidationException(
                f"Comment must not exceed {COMMENT_MAX_LENGTH} characters", field="text"
            )
        await self.uow.begin()
        try:
            document = await self._get_visible(identity, document_id)
            if parent_comment_id:
                parent = await self.uow.comments.get_by_id(parent_comment_id)
                if parent is None or parent.document_id != document.id:
                    raise ResourceNotFoundException("comment", parent_comment_id)
                if parent.parent_comment_id:
                    raise ValidationException(
                        "Replies to replies are not supported", field="parent_comment_id"
                    )
            comment = await self.uow.comments.add(
                CommentCreate(
                    document_id=document.id,
                    user_id=identity.actor_id,
                    text=text,
                    parent_comment_id=parent_comment_id,
                )
            )
            if document.created_by != identity.actor_id:
                await self.uow.effects.add(
                    PendingEffectCreate.notification(
                        NotificationRequest(
                            user_id=document.created_by,
                            type_code=NotificationType.NEW_COMMENT.value,
                            title="New comment",
                            message=f"New comment on '{document.title}' ({document.document_number}).",
                            document_id=document.id,
                        )
                    )
                )
            await self.uow.effects.add(
                PendingEffectCreate.audit(
                    AuditRequest(
                        actor_id=identity.actor_id,
                        action_type=AuditAction.COMMENT_CREATE.value,
                        entity_type="comment",
                        entity_id=comment.id,
                        description=f"Comment on {document.document_number}",
                    )
                )
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise
        return comment

    async def list_comments(
        self, identity: IdentityContext, document_id: str
    ) -> tuple[CommentThread, ...]:
        await self._get_visible(identity, document_id)
        return build_comment_threads(await self.uow.comments.list_for_document(document_id))
