"""Decides what an identity may do with a document.

Stateless: every answer is a function of the document fields and the
identity. Department scoping applies to visibility only; action gating is
handler identity plus role level.
"""

from __future__ import annotations

from docflow.application.dtos.document import DocumentCapabilities
from docflow.domain.entities.document import DocumentEntity
from docflow.domain.exceptions import PermissionDeniedException
from docflow.domain.value_objects.core import IdentityContext


class PermissionEvaluator:
    """Predicate set over (document, identity)."""

    def can_view(self, document: DocumentEntity, identity: IdentityContext) -> bool:
        if identity.is_admin:
            return True
        if document.department_id != identity.department_id:
            return False
        return identity.is_reviewer or self._is_participant(document, identity)

    def can_edit(self, document: DocumentEntity, identity: IdentityContext) -> bool:
        return document.is_editable and document.created_by == identity.actor_id

    def can_submit(self, document: DocumentEntity, identity: IdentityContext) -> bool:
        return self.can_edit(document, identity)

    def can_review(self, document: DocumentEntity, identity: IdentityContext) -> bool:
        """Shared rule for approve, reject and request revision."""
        return (
            document.current_handler_id is not None
            and document.current_handler_id == identity.actor_id
            and identity.is_reviewer
        )

    can_approve = can_review
    can_reject = can_review
    can_request_revision = can_review

    def capabilities(
        self, document: DocumentEntity, identity: IdentityContext
    ) -> DocumentCapabilities:
        review = self.can_review(document, identity)
        return DocumentCapabilities(
            can_view=self.can_view(document, identity),
            can_edit=self.can_edit(document, identity),
            can_submit=self.can_submit(document, identity),
            can_approve=review,
            can_reject=review,
            can_request_revision=review,
        )

    def require_view(self, document: DocumentEntity, identity: IdentityContext) -> None:
        if not self.can_view(document, identity):
            raise PermissionDeniedException("view", document.id)

    def require_creator(
        self, document: DocumentEntity, identity: IdentityContext, action: str
    ) -> None:
        """Ownership check for creator-only verbs (submit, edit)."""
        if document.created_by != identity.actor_id:
            raise PermissionDeniedException(
                action, document.id, reason="only the creator may do this"
            )

    def require_review(
        self, document: DocumentEntity, identity: IdentityContext, action: str
    ) -> None:
        if document.current_handler_id != identity.actor_id:
            raise PermissionDeniedException(
                action, document.id, reason="not the current handler"
            )
        if not identity.is_reviewer:
            raise PermissionDeniedException(
                action, document.id, reason="role level too low"
            )

    @staticmethod
    def _is_participant(document: DocumentEntity, identity: IdentityContext) -> bool:
        return identity.actor_id in (document.created_by, document.current_handler_id)
