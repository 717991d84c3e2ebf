"""PermissionEvaluator, VersionManager, AssignmentTracker and DocumentNumberGenerator."""

from datetime import UTC, datetime

import pytest

from docflow.application.dtos.document import StoredFile
from docflow.application.services import (
    AssignmentTracker,
    DocumentNumberGenerator,
    PermissionEvaluator,
    VersionManager,
)
from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import DocumentStatus, WorkflowLevel
from docflow.domain.exceptions import ConcurrencyConflictException, PermissionDeniedException
from docflow.domain.value_objects.core import IdentityContext


def _document(**overrides) -> DocumentEntity:
    values = dict(
        id="doc-1",
        document_number="DOC-FIN-20260316-0001",
        title="Contract",
        created_by="author-1",
        category_id="cat-1",
        department_id="dept-1",
        current_handler_id="author-1",
    )
    values.update(overrides)
    return DocumentEntity(**values)


def _pending(handler: str = "vice-1") -> DocumentEntity:
    return _document(
        status=DocumentStatus.PENDING,
        workflow_level=WorkflowLevel.VICE_MANAGER_REVIEW,
        current_handler_id=handler,
    )


class TestPermissionEvaluator:
    permissions = PermissionEvaluator()

    def test_view_rules(self, author, other_author, vice, manager, admin, foreign_vice) -> None:
        draft = _document()
        assert self.permissions.can_view(draft, author)
        assert not self.permissions.can_view(draft, other_author)
        assert self.permissions.can_view(draft, vice)
        assert self.permissions.can_view(draft, manager)
        assert self.permissions.can_view(draft, admin)
        assert not self.permissions.can_view(draft, foreign_vice)

    def test_assistant_handler_can_view(self, other_author) -> None:
        assert self.permissions.can_view(_document(current_handler_id="author-2"), other_author)

    def test_department_must_match_exactly(self) -> None:
        loner = IdentityContext(actor_id="author-1", role_level=1, department_id=None)
        assert not self.permissions.can_view(_document(), loner)
        orphan = _document(department_id=None)
        assert self.permissions.can_view(orphan, loner)

    def test_edit_only_creator_in_editable_status(self, author, manager) -> None:
        assert self.permissions.can_edit(_document(), author)
        assert self.permissions.can_edit(
            _document(status=DocumentStatus.REVISION_REQUESTED), author
        )
        assert not self.permissions.can_edit(_document(), manager)
        assert not self.permissions.can_edit(_pending(), author)
        assert self.permissions.can_submit(_document(), author)

    def test_review_requires_handler_and_level(self, vice, manager, other_author) -> None:
        assert self.permissions.can_review(_pending("vice-1"), vice)
        assert not self.permissions.can_review(_pending("vice-1"), manager)
        assert not self.permissions.can_review(_pending("author-2"), other_author)
        assert not self.permissions.can_review(_document(current_handler_id=None), vice)

    def test_capabilities(self, vice) -> None:
        caps = self.permissions.capabilities(_pending("vice-1"), vice)
        assert caps.can_view and caps.can_approve and caps.can_reject and caps.can_request_revision
        assert not caps.can_edit and not caps.can_submit

    def test_require_helpers_raise(self, other_author, foreign_vice, manager) -> None:
        with pytest.raises(PermissionDeniedException):
            self.permissions.require_view(_document(), foreign_vice)
        with pytest.raises(PermissionDeniedException, match="only the creator"):
            self.permissions.require_creator(_document(), other_author, "submit")
        with pytest.raises(PermissionDeniedException, match="not the current handler"):
            self.permissions.require_review(_pending("vice-1"), manager, "approve")


class TestVersionManager:
    async def test_numbers_increase_and_one_is_current(self, uow, store, seed_document) -> None:
        doc = seed_document()
        manager = VersionManager(uow.versions)
        for n in (2, 3):
            version = await manager.create_version(
                doc, StoredFile(f"v{n}.pdf", f"documents/v{n}.pdf", n), "author-1"
            )
            assert version.version_number == n
        assert [v.version_number for v in store.current_versions(doc.id)] == [3]
        assert [v.version_number for v in await manager.list_versions(doc.id)] == [3, 2, 1]
        assert (await manager.get_current(doc.id)).file_path == "documents/v3.pdf"
        assert doc.file_path == "documents/v3.pdf"

    async def test_first_version_description(self, uow) -> None:
        doc = _document(id="fresh")
        version = await VersionManager(uow.versions).create_version(
            doc, StoredFile("a.pdf", "documents/a.pdf", 1), "author-1"
        )
        assert version.version_number == 1
        assert version.change_description == "Initial version"


class TestAssignmentTracker:
    async def test_reassign_keeps_single_active(self, uow, store, now) -> None:
        tracker = AssignmentTracker(uow.assignments)
        await tracker.reassign("doc-1", "vice-1", "author-1", 2, now)
        await tracker.reassign("doc-1", "mgr-1", "vice-1", 3, now)

        assert [a.assigned_to for a in store.active_assignments("doc-1")] == ["mgr-1"]
        closed = [a for a in store.assignments.values() if not a.is_active]
        assert [(a.assigned_to, a.completed_at) for a in closed] == [("vice-1", now)]
        assert (await tracker.active_for_document("doc-1")).workflow_level == 3
        assert [a.document_id for a in await tracker.active_for_user("mgr-1")] == ["doc-1"]

    async def test_close_active(self, uow, store, now) -> None:
        tracker = AssignmentTracker(uow.assignments)
        await tracker.reassign("doc-1", "vice-1", "author-1", 2, now)
        assert await tracker.close_active("doc-1", now) == 1
        assert await tracker.close_active("doc-1", now) == 0
        assert store.active_assignments("doc-1") == []


class TestDocumentNumberGenerator:
    async def test_first_number_of_the_day(self, uow) -> None:
        generator = DocumentNumberGenerator(uow.documents, uow.departments)
        number = await generator.next_number("dept-1", datetime(2026, 3, 16, 9, tzinfo=UTC))
        assert number.value == "DOC-FIN-20260316-0001"

    async def test_continues_after_last_issued(self, uow, seed_document) -> None:
        seed_document()
        seed_document()
        generator = DocumentNumberGenerator(uow.documents, uow.departments)
        number = await generator.next_number("dept-1", datetime(2026, 3, 16, 18, tzinfo=UTC))
        assert number.sequence == 3

    async def test_sequence_resets_per_day_and_department(self, uow, seed_document) -> None:
        seed_document()
        generator = DocumentNumberGenerator(uow.documents, uow.departments, prefix="rec")
        next_day = await generator.next_number("dept-1", datetime(2026, 3, 17, tzinfo=UTC))
        other_dept = await generator.next_number("dept-2", datetime(2026, 3, 16, tzinfo=UTC))
        unknown = await generator.next_number("dept-x", datetime(2026, 3, 16, tzinfo=UTC))
        assert next_day.value == "REC-FIN-20260317-0001"
        assert other_dept.value == "REC-HR-20260316-0001"
        assert unknown.value == "REC-20260316-0001"

    async def test_sequence_past_four_digits(self, uow, store, seed_document) -> None:
        doc = seed_document()
        store.documents[doc.id].document_number = "DOC-FIN-20260316-9999"
        generator = DocumentNumberGenerator(uow.documents, uow.departments)
        number = await generator.next_number("dept-1", datetime(2026, 3, 16, tzinfo=UTC))
        assert number.value == "DOC-FIN-20260316-10000"

    async def test_duplicate_number_insert_is_a_conflict(self, uow, seed_document) -> None:
        doc = seed_document()
        with pytest.raises(ConcurrencyConflictException):
            await uow.documents.add(_document(id="doc-new", document_number=doc.document_number))
