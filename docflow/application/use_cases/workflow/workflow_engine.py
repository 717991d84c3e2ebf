"""Workflow engine: Submit / Approve / Reject / RequestRevision / CreateVersion.

Each verb runs as one unit of work: the document update (conditional on its
row_version), assignment handoff, version flip, history entry and outbox
rows commit together. Business-rule failures come back as WorkflowResult
errors after rollback; concurrency and persistence failures raise.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from datetime import datetime
from typing import TYPE_CHECKING

from docflow.application.dtos.effect import (
    AuditRequest,
    NotificationRequest,
    PendingEffectCreate,
)
from docflow.application.dtos.document import WorkflowHistoryCreate
from docflow.application.dtos.workflow import (
    ApproveCommand,
    NewVersionCommand,
    RejectCommand,
    RequestRevisionCommand,
    SubmitCommand,
    WorkflowResult,
)
from docflow.application.services.assignment_tracker import AssignmentTracker
from docflow.application.services.permission_evaluator import PermissionEvaluator
from docflow.application.services.version_manager import VersionManager
from docflow.domain.enums import DocumentStatus, WorkflowAction
from docflow.domain.exceptions import (
    BusinessRuleException,
    InvalidStateTransitionException,
    ResourceNotFoundException,
    ValidationException,
)
from docflow.shared.enums import AuditAction, NotificationType
from docflow.shared.telemetry.logging import get_logger
from docflow.shared.telemetry.tracing import add_span_attributes, traced
from docflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from docflow.application.dtos.document import StoredFile
    from docflow.application.interfaces.repositories import IUnitOfWork
    from docflow.application.interfaces.services import IFileStore
    from docflow.domain.entities.document import DocumentEntity
    from docflow.domain.value_objects.core import IdentityContext

logger = get_logger(__name__)

DOCUMENTS_FOLDER = "documents"
DEFAULT_SUBMIT_COMMENT = "Submitted for approval"
DEFAULT_APPROVE_COMMENT = "Approved"


def _required_text(value: str | None, field: str, message: str) -> str:
    text = (value or "").strip()
    if not text:
        raise ValidationException(message, field=field)
    return text


class WorkflowEngine:
    """Runs workflow verbs against one unit of work."""

    def __init__(
        self,
        uow: IUnitOfWork,
        file_store: IFileStore | None = None,
        *,
        permissions: PermissionEvaluator | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self._file_store = file_store
        self._permissions = permissions or PermissionEvaluator()
        self._versions = VersionManager(uow.versions)
        self._assignments = AssignmentTracker(uow.assignments)
        self._clock = clock

    # ---- public verbs ----

    @traced("workflow.submit")
    async def submit(
        self, identity: IdentityContext, command: SubmitCommand
    ) -> WorkflowResult:
        return await self._run(
            WorkflowAction.SUBMIT, command.document_id, lambda: self._submit(identity, command)
        )

    @traced("workflow.approve")
    async def approve(
        self, identity: IdentityContext, command: ApproveCommand
    ) -> WorkflowResult:
        return await self._run(
            WorkflowAction.APPROVE, command.document_id, lambda: self._approve(identity, command)
        )

    @traced("workflow.reject")
    async def reject(
        self, identity: IdentityContext, command: RejectCommand
    ) -> WorkflowResult:
        return await self._run(
            WorkflowAction.REJECT, command.document_id, lambda: self._reject(identity, command)
        )

    @traced("workflow.request_revision")
    async def request_revision(
        self, identity: IdentityContext, command: RequestRevisionCommand
    ) -> WorkflowResult:
        return await self._run(
            WorkflowAction.REQUEST_REVISION,
            command.document_id,
            lambda: self._request_revision(identity, command),
        )

    @traced("workflow.create_version")
    async def create_version(
        self, identity: IdentityContext, command: NewVersionCommand
    ) -> WorkflowResult:
        stored: list[StoredFile] = []
        return await self._run(
            WorkflowAction.EDIT,
            command.document_id,
            lambda: self._create_version(identity, command, stored),
            on_abort=lambda: self._discard_files(stored),
        )

    # ---- transaction boundary ----

    async def _run(
        self,
        action: WorkflowAction,
        document_id: str,
        operation: Callable[[], Awaitable[DocumentEntity]],
        on_abort: Callable[[], Awaitable[None]] | None = None,
    ) -> WorkflowResult:
        add_span_attributes(**{"workflow.action": action.value, "document.id": document_id})
        await self.uow.begin()
        try:
            document = await operation()
            await self.uow.commit()
        except BusinessRuleException as e:
            await self.uow.rollback()
            if on_abort is not None:
                await on_abort()
            logger.info(
                "Workflow %s on document %s refused: %s",
                action.value,
                document_id,
                e.error_code,
            )
            return WorkflowResult.failure(e)
        except Exception:
            await self.uow.rollback()
            if on_abort is not None:
                await on_abort()
            logger.warning(
                "Workflow %s on document %s aborted", action.value, document_id
            )
            raise
        logger.info(
            "Workflow %s on document %s: status=%s level=%s",
            action.value,
            document_id,
            document.status.value,
            int(document.workflow_level),
        )
        return WorkflowResult.success(document)

    async def _load(self, document_id: str) -> DocumentEntity:
        document = await self.uow.documents.get_by_id(document_id)
        if document is None:
            raise ResourceNotFoundException("document", document_id)
        return document

    @staticmethod
    def _require_under_review(document: DocumentEntity, action: str) -> None:
        if not document.status.is_under_review:
            raise InvalidStateTransitionException(
                document.id, document.status.value, action
            )

    # ---- verbs ----

    async def _submit(
        self, identity: IdentityContext, command: SubmitCommand
    ) -> DocumentEntity:
        document = await self._load(command.document_id)
        self._permissions.require_creator(document, identity, "submit")
        if not document.is_editable:
            raise InvalidStateTransitionException(
                document.id, document.status.value, "submit"
            )
        to_user_id = _required_text(
            command.to_user_id, "to_user_id", "A reviewer must be selected"
        )
        now = self._clock()
        previous_status, previous_level = document.status, int(document.workflow_level)

        document.mark_submitted(to_user_id)
        document = await self.uow.documents.update(document)
        await self._assignments.reassign(
            document.id,
            to_user_id,
            identity.actor_id,
            document.workflow_level,
            now,
            due_date=command.due_date or document.due_date,
        )
        await self._append_history(
            document,
            WorkflowAction.SUBMIT,
            identity.actor_id,
            to_user_id,
            previous_status,
            previous_level,
            (command.comments or "").strip() or DEFAULT_SUBMIT_COMMENT,
        )
        await self._notify(
            to_user_id,
            NotificationType.DOC_ASSIGNED,
            "New document for approval",
            f"Document '{document.title}' ({document.document_number}) needs your approval.",
            document.id,
        )
        await self._audit(
            identity, AuditAction.SUBMIT, document, f"Submitted to {to_user_id}"
        )
        return document

    async def _approve(
        self, identity: IdentityContext, command: ApproveCommand
    ) -> DocumentEntity:
        document = await self._load(command.document_id)
        self._permissions.require_review(document, identity, "approve")
        self._require_under_review(document, "approve")
        if command.send_to_next_level and not (command.next_level_user_id or "").strip():
            raise ValidationException(
                "A next-level user is required when forwarding",
                field="next_level_user_id",
            )
        now = self._clock()
        previous_status, previous_level = document.status, int(document.workflow_level)
        comments = (command.comments or "").strip() or DEFAULT_APPROVE_COMMENT

        if command.forwards:
            next_user_id = command.next_level_user_id.strip()
            document.mark_forwarded(next_user_id)
            document = await self.uow.documents.update(document)
            await self._assignments.reassign(
                document.id,
                next_user_id,
                identity.actor_id,
                document.workflow_level,
                now,
                due_date=command.due_date or document.due_date,
            )
            await self._append_history(
                document,
                WorkflowAction.APPROVE,
                identity.actor_id,
                next_user_id,
                previous_status,
                previous_level,
                comments,
            )
            await self._notify(
                next_user_id,
                NotificationType.DOC_ASSIGNED,
                "Document forwarded for approval",
                f"Document '{document.title}' ({document.document_number}) was approved "
                "at the previous level and needs your approval.",
                document.id,
            )
            description = f"Approved and forwarded to {next_user_id}"
        else:
            document.mark_approved(now)
            document = await self.uow.documents.update(document)
            await self._assignments.close_active(document.id, now)
            await self._append_history(
                document,
                WorkflowAction.APPROVE,
                identity.actor_id,
                None,
                previous_status,
                previous_level,
                comments,
            )
            await self._notify(
                document.created_by,
                NotificationType.DOC_APPROVED,
                "Document approved",
                f"Your document '{document.title}' ({document.document_number}) was approved.",
                document.id,
            )
            description = "Final approval"
        await self._audit(identity, AuditAction.APPROVE, document, description)
        return document

    async def _reject(
        self, identity: IdentityContext, command: RejectCommand
    ) -> DocumentEntity:
        document = await self._load(command.document_id)
        self._permissions.require_review(document, identity, "reject")
        self._require_under_review(document, "reject")
        reason = _required_text(
            command.comments, "comments", "A reason is required to reject a document"
        )
        now = self._clock()
        previous_status, previous_level = document.status, int(document.workflow_level)

        document.mark_rejected(now)
        document = await self.uow.documents.update(document)
        await self._assignments.close_active(document.id, now)
        await self._append_history(
            document,
            WorkflowAction.REJECT,
            identity.actor_id,
            document.created_by,
            previous_status,
            previous_level,
            reason,
        )
        await self._notify(
            document.created_by,
            NotificationType.DOC_REJECTED,
            "Document rejected",
            f"Your document '{document.title}' ({document.document_number}) was rejected. "
            f"Reason: {reason}",
            document.id,
        )
        await self._audit(identity, AuditAction.REJECT, document, f"Rejected: {reason}")
        return document

    async def _request_revision(
        self, identity: IdentityContext, command: RequestRevisionCommand
    ) -> DocumentEntity:
        document = await self._load(command.document_id)
        self._permissions.require_review(document, identity, "request revision")
        self._require_under_review(document, "request revision on")
        send_back_to = _required_text(
            command.send_back_to_user_id,
            "send_back_to_user_id",
            "A user to send the document back to is required",
        )
        comments = _required_text(
            command.comments, "comments", "Revision comments are required"
        )
        now = self._clock()
        previous_status, previous_level = document.status, int(document.workflow_level)

        document.mark_revision_requested(send_back_to)
        document = await self.uow.documents.update(document)
        await self._assignments.reassign(
            document.id, send_back_to, identity.actor_id, document.workflow_level, now
        )
        await self._append_history(
            document,
            WorkflowAction.REQUEST_REVISION,
            identity.actor_id,
            send_back_to,
            previous_status,
            previous_level,
            comments,
        )
        await self._notify(
            send_back_to,
            NotificationType.DOC_REVISION_REQUESTED,
            "Revision requested",
            f"Document '{document.title}' ({document.document_number}) needs revision: {comments}",
            document.id,
        )
        await self._audit(
            identity,
            AuditAction.REQUEST_REVISION,
            document,
            f"Revision requested, sent back to {send_back_to}",
        )
        return document

    async def _create_version(
        self,
        identity: IdentityContext,
        command: NewVersionCommand,
        stored: list[StoredFile],
    ) -> DocumentEntity:
        document = await self._load(command.document_id)
        self._permissions.require_view(document, identity)
        if not command.content:
            raise ValidationException("File is empty", field="file")
        if self._file_store is None:
            raise RuntimeError("WorkflowEngine.create_version requires a file store")
        saved = await self._file_store.save(
            command.content, command.file_name, DOCUMENTS_FOLDER
        )
        stored.append(saved)
        version = await self._versions.create_version(
            document, saved, identity.actor_id, command.change_description
        )
        document = await self.uow.documents.update(document)
        await self._audit(
            identity,
            AuditAction.VERSION_CREATE,
            document,
            f"Version {version.version_number} uploaded: {version.change_description}",
            new_values={"version_number": version.version_number, "file_name": saved.file_name},
        )
        return document

    async def _discard_files(self, stored: list[StoredFile]) -> None:
        """Remove files written by an aborted operation."""
        if self._file_store is None:
            return
        for item in stored:
            try:
                await self._file_store.delete(item.file_path)
            except Exception:
                logger.exception("Could not remove orphaned file %s", item.file_path)

    # ---- history and outbox ----

    async def _append_history(
        self,
        document: DocumentEntity,
        action: WorkflowAction,
        from_user_id: str,
        to_user_id: str | None,
        previous_status: DocumentStatus | None,
        previous_level: int | None,
        comments: str | None,
    ) -> None:
        await self.uow.history.append(
            WorkflowHistoryCreate(
                document_id=document.id,
                action_code=action.value,
                from_user_id=from_user_id,
                to_user_id=to_user_id,
                previous_status=previous_status.value if previous_status else None,
                new_status=document.status.value,
                from_workflow_level=previous_level,
                to_workflow_level=int(document.workflow_level),
                comments=comments,
            )
        )

    async def _notify(
        self,
        user_id: str,
        type_code: NotificationType,
        title: str,
        message: str,
        document_id: str,
    ) -> None:
        await self.uow.effects.add(
            PendingEffectCreate.notification(
                NotificationRequest(
                    user_id=user_id,
                    type_code=type_code.value,
                    title=title,
                    message=message,
                    document_id=document_id,
                )
            )
        )

    async def _audit(
        self,
        identity: IdentityContext,
        action: AuditAction,
        document: DocumentEntity,
        description: str,
        new_values: dict | None = None,
    ) -> None:
        await self.uow.effects.add(
            PendingEffectCreate.audit(
                AuditRequest(
                    actor_id=identity.actor_id,
                    action_type=action.value,
                    entity_type="document",
                    entity_id=document.id,
                    description=f"{document.document_number}: {description}",
                    new_values=new_values or {"status": document.status.value},
                )
            )
        )
