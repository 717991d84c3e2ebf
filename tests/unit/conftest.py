"""In-memory fakes for the application ports, exposed as fixtures.

One InMemoryStore plays the database. Each FakeUnitOfWork gets its own
repository set over that store and an undo log, so several units of work
can interleave on the same rows the way concurrent requests do. Document
reads yield to the event loop after reading, so asyncio.gather interleaves
loads before writes.
"""

from __future__ import annotations

import asyncio
import copy
import itertools
from dataclasses import replace
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from docflow.application.dtos.document import (
    AssignmentCreate,
    AssignmentResult,
    CategoryResult,
    CommentCreate,
    CommentResult,
    DocumentListFilter,
    DocumentVersionCreate,
    DocumentVersionResult,
    StoredFile,
    WorkflowHistoryCreate,
    WorkflowHistoryResult,
)
from docflow.application.dtos.effect import (
    AuditRequest,
    NotificationRequest,
    NotificationResult,
    PendingEffectCreate,
    PendingEffectResult,
)
from docflow.application.use_cases.documents import (
    CommentService,
    DocumentCreationService,
    DocumentEditService,
    DocumentQueryService,
)
from docflow.application.use_cases.workflow import WorkflowEngine
from docflow.domain.entities.document import DocumentEntity
from docflow.domain.enums import (
    TERMINAL_STATUSES,
    DocumentPriority,
    DocumentStatus,
    RoleLevel,
    WorkflowLevel,
)
from docflow.domain.exceptions import (
    ConcurrencyConflictException,
    PersistenceException,
    ValidationException,
)
from docflow.domain.value_objects.core import IdentityContext
from docflow.infrastructure.exceptions import StorageNotFoundError, StorageUploadError
from docflow.shared.enums import EffectStatus

NOW = datetime(2026, 3, 16, 10, 0, tzinfo=UTC)


class InMemoryStore:
    """Tables as dicts keyed by id; insertion order doubles as creation order."""

    def __init__(self) -> None:
        self.documents: dict[str, DocumentEntity] = {}
        self.versions: dict[str, DocumentVersionResult] = {}
        self.assignments: dict[str, AssignmentResult] = {}
        self.history: dict[str, WorkflowHistoryResult] = {}
        self.comments: dict[str, CommentResult] = {}
        self.categories: dict[str, CategoryResult] = {}
        self.departments: dict[str, str] = {}
        self.effects: dict[str, PendingEffectResult] = {}
        self.notifications: dict[str, NotificationResult] = {}
        self.audit_rows: list[AuditRequest] = []
        self.effect_locks: dict[str, Any] = {}
        self._ids = itertools.count(1)
        self._ticks = itertools.count(1)

    def next_id(self, prefix: str) -> str:
        return f"{prefix}-{next(self._ids)}"

    def tick(self) -> datetime:
        """Strictly increasing timestamps after NOW."""
        return NOW + timedelta(seconds=next(self._ticks))

    def release_locks(self, owner) -> None:
        for effect_id in [k for k, v in self.effect_locks.items() if v is owner]:
            del self.effect_locks[effect_id]

    # ---- test helpers ----

    def effects_of_kind(self, kind: str) -> list[PendingEffectResult]:
        return [e for e in self.effects.values() if e.kind.value == kind]

    def active_assignments(self, document_id: str) -> list[AssignmentResult]:
        return [
            a for a in self.assignments.values() if a.document_id == document_id and a.is_active
        ]

    def current_versions(self, document_id: str) -> list[DocumentVersionResult]:
        return [
            v for v in self.versions.values() if v.document_id == document_id and v.is_current
        ]

    def history_for(self, document_id: str) -> list[WorkflowHistoryResult]:
        return [h for h in self.history.values() if h.document_id == document_id]


def is_visible(document: DocumentEntity, identity: IdentityContext) -> bool:
    """Listing visibility, same rule as the SQL visibility clause."""
    if identity.is_admin:
        return True
    participant = identity.actor_id in (document.created_by, document.current_handler_id)
    same_department = (
        identity.department_id is not None
        and document.department_id == identity.department_id
    )
    if identity.role_level >= RoleLevel.MANAGER:
        return same_department
    if identity.role_level >= RoleLevel.VICE_MANAGER:
        return same_department and (
            participant or document.workflow_level >= WorkflowLevel.VICE_MANAGER_REVIEW
        )
    return participant


def _matches(document: DocumentEntity, filters: DocumentListFilter) -> bool:
    if filters.search:
        needle = filters.search.lower()
        haystacks = (document.title, document.document_number, document.description or "")
        if not any(needle in h.lower() for h in haystacks):
            return False
    if filters.status is not None and document.status != filters.status:
        return False
    if filters.category_id and document.category_id != filters.category_id:
        return False
    if filters.priority is not None and document.priority != filters.priority:
        return False
    if filters.created_from is not None and document.created_at < filters.created_from:
        return False
    if filters.created_to is not None and document.created_at > filters.created_to:
        return False
    return True


class _FakeRepository:
    def __init__(self, store: InMemoryStore, uow: FakeUnitOfWork) -> None:
        self.store = store
        self.uow = uow


class FakeDocumentRepository(_FakeRepository):
    async def get_by_id(self, document_id: str) -> DocumentEntity | None:
        document = self.store.documents.get(document_id)
        loaded = copy.deepcopy(document) if document is not None else None
        # Yield after reading so concurrent callers load the same row_version.
        await asyncio.sleep(0)
        return loaded

    async def add(self, document: DocumentEntity) -> DocumentEntity:
        if any(
            d.document_number == document.document_number
            for d in self.store.documents.values()
        ):
            raise ConcurrencyConflictException(document.document_number, "document_number")
        stored = copy.deepcopy(document)
        stored.created_at = stored.created_at or self.store.tick()
        stored.updated_at = stored.created_at
        stored.row_version = 1
        self.store.documents[stored.id] = stored
        self.uow.log(lambda: self.store.documents.pop(stored.id, None))
        return copy.deepcopy(stored)

    async def update(self, document: DocumentEntity) -> DocumentEntity:
        previous = self.store.documents.get(document.id)
        if previous is None or previous.row_version != document.row_version:
            raise ConcurrencyConflictException(document.id)
        stored = copy.deepcopy(document)
        stored.row_version = previous.row_version + 1
        stored.updated_at = self.store.tick()
        self.store.documents[stored.id] = stored

        def _undo() -> None:
            self.store.documents[previous.id] = previous

        self.uow.log(_undo)
        return copy.deepcopy(stored)

    async def get_last_number_with_prefix(self, day_prefix: str) -> str | None:
        numbers = [
            d.document_number
            for d in self.store.documents.values()
            if d.document_number.startswith(day_prefix)
        ]
        if not numbers:
            return None
        return max(numbers, key=lambda n: (len(n), n))

    def _newest_first(self, documents) -> list[DocumentEntity]:
        return [
            copy.deepcopy(d)
            for d in sorted(documents, key=lambda d: d.created_at, reverse=True)
        ]

    async def list_by_creator(self, user_id: str) -> list[DocumentEntity]:
        return self._newest_first(
            d for d in self.store.documents.values() if d.created_by == user_id
        )

    async def list_by_handler(self, user_id: str) -> list[DocumentEntity]:
        return self._newest_first(
            d for d in self.store.documents.values() if d.current_handler_id == user_id
        )

    async def list_by_department(self, department_id: str) -> list[DocumentEntity]:
        return self._newest_first(
            d for d in self.store.documents.values() if d.department_id == department_id
        )

    async def list_visible(
        self, identity: IdentityContext, filters: DocumentListFilter
    ) -> tuple[list[DocumentEntity], int]:
        rows = [
            d
            for d in self.store.documents.values()
            if is_visible(d, identity) and _matches(d, filters)
        ]
        key = {
            "title": lambda d: d.title,
            "priority": lambda d: int(d.priority),
            "created_at": lambda d: d.created_at,
        }[filters.sort_by]
        rows.sort(key=key, reverse=filters.sort_desc)
        start = (filters.page - 1) * filters.page_size
        page = rows[start : start + filters.page_size]
        return [copy.deepcopy(d) for d in page], len(rows)

    async def count_visible(
        self,
        identity: IdentityContext,
        *,
        created_from: datetime | None = None,
        overdue_at: datetime | None = None,
    ) -> int:
        count = 0
        for d in self.store.documents.values():
            if not is_visible(d, identity):
                continue
            if created_from is not None and d.created_at < created_from:
                continue
            if overdue_at is not None and not (
                d.due_date is not None
                and d.due_date < overdue_at
                and d.status not in TERMINAL_STATUSES
            ):
                continue
            count += 1
        return count

    async def count_visible_by_status(self, identity: IdentityContext) -> dict[str, int]:
        counts: dict[str, int] = {}
        for d in self.store.documents.values():
            if is_visible(d, identity):
                counts[d.status.value] = counts.get(d.status.value, 0) + 1
        return counts


class FakeVersionRepository(_FakeRepository):
    async def get_by_id(self, version_id: str) -> DocumentVersionResult | None:
        return self.store.versions.get(version_id)

    async def get_current(self, document_id: str) -> DocumentVersionResult | None:
        current = self.store.current_versions(document_id)
        return current[0] if current else None

    async def list_for_document(self, document_id: str) -> list[DocumentVersionResult]:
        return sorted(
            (v for v in self.store.versions.values() if v.document_id == document_id),
            key=lambda v: v.version_number,
            reverse=True,
        )

    async def get_max_version_number(self, document_id: str) -> int:
        return max(
            (v.version_number for v in self.store.versions.values() if v.document_id == document_id),
            default=0,
        )

    async def clear_current(self, document_id: str) -> int:
        changed = self.store.current_versions(document_id)
        for version in changed:
            self.store.versions[version.id] = replace(version, is_current=False)

        def _undo() -> None:
            for version in changed:
                self.store.versions[version.id] = version

        self.uow.log(_undo)
        return len(changed)

    async def add(self, data: DocumentVersionCreate) -> DocumentVersionResult:
        if data.is_current and self.store.current_versions(data.document_id):
            raise ConcurrencyConflictException(data.document_id, "document_version")
        version = DocumentVersionResult(
            id=self.store.next_id("ver"),
            document_id=data.document_id,
            version_number=data.version_number,
            file_name=data.file_name,
            file_path=data.file_path,
            file_size=data.file_size,
            created_by=data.created_by,
            change_description=data.change_description,
            is_current=data.is_current,
            created_at=self.store.tick(),
        )
        self.store.versions[version.id] = version
        self.uow.log(lambda: self.store.versions.pop(version.id, None))
        return version


class FakeAssignmentRepository(_FakeRepository):
    async def get_active_for_document(self, document_id: str) -> AssignmentResult | None:
        active = self.store.active_assignments(document_id)
        return active[0] if active else None

    async def list_active_for_user(self, user_id: str) -> list[AssignmentResult]:
        return [
            a for a in self.store.assignments.values() if a.assigned_to == user_id and a.is_active
        ]

    async def count_active_for_user(self, user_id: str) -> int:
        return len(await self.list_active_for_user(user_id))

    async def list_for_document(self, document_id: str) -> list[AssignmentResult]:
        return list(
            reversed([a for a in self.store.assignments.values() if a.document_id == document_id])
        )

    async def deactivate_active(self, document_id: str, completed_at: datetime) -> int:
        changed = self.store.active_assignments(document_id)
        for assignment in changed:
            self.store.assignments[assignment.id] = replace(
                assignment, is_active=False, completed_at=completed_at
            )

        def _undo() -> None:
            for assignment in changed:
                self.store.assignments[assignment.id] = assignment

        self.uow.log(_undo)
        return len(changed)

    async def add(self, data: AssignmentCreate) -> AssignmentResult:
        if self.store.active_assignments(data.document_id):
            raise ConcurrencyConflictException(data.document_id, "document_assignment")
        assignment = AssignmentResult(
            id=self.store.next_id("asg"),
            document_id=data.document_id,
            assigned_to=data.assigned_to,
            assigned_by=data.assigned_by,
            workflow_level=data.workflow_level,
            is_active=True,
            assigned_at=self.store.tick(),
            due_date=data.due_date,
        )
        self.store.assignments[assignment.id] = assignment
        self.uow.log(lambda: self.store.assignments.pop(assignment.id, None))
        return assignment


class FakeHistoryRepository(_FakeRepository):
    async def append(self, data: WorkflowHistoryCreate) -> WorkflowHistoryResult:
        entry = WorkflowHistoryResult(
            id=self.store.next_id("hist"),
            document_id=data.document_id,
            action_code=data.action_code,
            from_user_id=data.from_user_id,
            to_user_id=data.to_user_id,
            previous_status=data.previous_status,
            new_status=data.new_status,
            from_workflow_level=data.from_workflow_level,
            to_workflow_level=data.to_workflow_level,
            comments=data.comments,
            created_at=self.store.tick(),
        )
        self.store.history[entry.id] = entry
        self.uow.log(lambda: self.store.history.pop(entry.id, None))
        return entry

    async def list_for_document(self, document_id: str) -> list[WorkflowHistoryResult]:
        return self.store.history_for(document_id)


class FakeCommentRepository(_FakeRepository):
    async def get_by_id(self, comment_id: str) -> CommentResult | None:
        return self.store.comments.get(comment_id)

    async def add(self, data: CommentCreate) -> CommentResult:
        comment = CommentResult(
            id=self.store.next_id("cmt"),
            document_id=data.document_id,
            user_id=data.user_id,
            text=data.text,
            parent_comment_id=data.parent_comment_id,
            created_at=self.store.tick(),
        )
        self.store.comments[comment.id] = comment
        self.uow.log(lambda: self.store.comments.pop(comment.id, None))
        return comment

    async def list_for_document(self, document_id: str) -> list[CommentResult]:
        return [c for c in self.store.comments.values() if c.document_id == document_id]


class FakeCategoryRepository(_FakeRepository):
    async def get_by_id(self, category_id: str) -> CategoryResult | None:
        return self.store.categories.get(category_id)

    async def list_active(self) -> list[CategoryResult]:
        return sorted(
            (c for c in self.store.categories.values() if c.is_active), key=lambda c: c.name
        )


class FakeDepartmentRepository(_FakeRepository):
    async def get_code(self, department_id: str) -> str | None:
        return self.store.departments.get(department_id)


class FakeEffectRepository(_FakeRepository):
    async def add(self, data: PendingEffectCreate) -> PendingEffectResult:
        effect = PendingEffectResult(
            id=self.store.next_id("eff"),
            kind=data.kind,
            payload=dict(data.payload),
            status=EffectStatus.PENDING,
            attempts=0,
            last_error=None,
            created_at=self.store.tick(),
        )
        self.store.effects[effect.id] = effect
        self.uow.log(lambda: self.store.effects.pop(effect.id, None))
        return effect

    async def list_pending(self, limit: int) -> list[PendingEffectResult]:
        pending = [e for e in self.store.effects.values() if e.status == EffectStatus.PENDING]
        return pending[:limit]

    async def claim(self, effect_id: str) -> PendingEffectResult | None:
        # Row lock held by another unit of work until it commits or rolls back.
        holder = self.store.effect_locks.get(effect_id)
        if holder is not None and holder is not self.uow:
            return None
        effect = self.store.effects.get(effect_id)
        if effect is None or effect.status != EffectStatus.PENDING:
            return None
        self.store.effect_locks[effect_id] = self.uow
        return effect

    async def mark_delivered(self, effect_id: str, delivered_at: datetime) -> bool:
        previous = self.store.effects[effect_id]
        if previous.status != EffectStatus.PENDING:
            return False
        self.store.effects[effect_id] = replace(
            previous,
            status=EffectStatus.DELIVERED,
            attempts=previous.attempts + 1,
            last_error=None,
            delivered_at=delivered_at,
        )
        self.uow.log(lambda: self.store.effects.__setitem__(effect_id, previous))
        return True

    async def record_failure(self, effect_id: str, error: str, *, give_up: bool) -> bool:
        previous = self.store.effects[effect_id]
        if previous.status != EffectStatus.PENDING:
            return False
        self.store.effects[effect_id] = replace(
            previous,
            status=EffectStatus.FAILED if give_up else previous.status,
            attempts=previous.attempts + 1,
            last_error=error,
        )
        self.uow.log(lambda: self.store.effects.__setitem__(effect_id, previous))
        return True


class FakeUnitOfWork:
    """IUnitOfWork over InMemoryStore with an undo log per transaction."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store
        self.documents = FakeDocumentRepository(store, self)
        self.versions = FakeVersionRepository(store, self)
        self.assignments = FakeAssignmentRepository(store, self)
        self.history = FakeHistoryRepository(store, self)
        self.comments = FakeCommentRepository(store, self)
        self.categories = FakeCategoryRepository(store, self)
        self.departments = FakeDepartmentRepository(store, self)
        self.effects = FakeEffectRepository(store, self)
        self.begins = 0
        self.commits = 0
        self.rollbacks = 0
        self.fail_commit = False
        self._undo: list[Any] = []

    def log(self, undo) -> None:
        self._undo.append(undo)

    async def begin(self) -> None:
        self.begins += 1

    async def commit(self) -> None:
        if self.fail_commit:
            raise PersistenceException("Could not commit transaction")
        self.commits += 1
        self._undo.clear()
        self.store.release_locks(self)

    async def rollback(self) -> None:
        self.rollbacks += 1
        while self._undo:
            self._undo.pop()()
        self.store.release_locks(self)


class FakeNotificationRepository:
    """INotificationRepository backed by InMemoryStore.notifications."""

    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def create(self, data: NotificationRequest) -> NotificationResult:
        notification = NotificationResult(
            id=self.store.next_id("ntf"),
            user_id=data.user_id,
            type_code=data.type_code,
            title=data.title,
            message=data.message,
            document_id=data.document_id,
            is_read=False,
            created_at=self.store.tick(),
        )
        self.store.notifications[notification.id] = notification
        return notification

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> list[NotificationResult]:
        rows = [
            n
            for n in reversed(self.store.notifications.values())
            if n.user_id == user_id and not (unread_only and n.is_read)
        ]
        return rows[skip : skip + limit]

    async def count_unread(self, user_id: str) -> int:
        return sum(
            1 for n in self.store.notifications.values() if n.user_id == user_id and not n.is_read
        )

    async def mark_read(self, notification_id: str, user_id: str, read_at: datetime) -> bool:
        notification = self.store.notifications.get(notification_id)
        if notification is None or notification.user_id != user_id:
            return False
        self.store.notifications[notification_id] = replace(
            notification, is_read=True, read_at=notification.read_at or read_at
        )
        return True

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        changed = 0
        for n in list(self.store.notifications.values()):
            if n.user_id == user_id and not n.is_read:
                self.store.notifications[n.id] = replace(n, is_read=True, read_at=read_at)
                changed += 1
        return changed


class FakeAuditLogRepository:
    def __init__(self, store: InMemoryStore) -> None:
        self.store = store

    async def create(self, data: AuditRequest) -> str:
        self.store.audit_rows.append(data)
        return self.store.next_id("audit")


class FakeFileStore:
    """IFileStore keeping bytes in a dict keyed by relative path."""

    def __init__(self) -> None:
        self.files: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_save = False
        self._ids = itertools.count(1)

    async def save(self, data, file_name: str, folder: str) -> StoredFile:
        content = data if isinstance(data, bytes) else data.read()
        if not content:
            raise ValidationException("File is empty", field="file")
        path = f"{folder}/{next(self._ids)}-{file_name}"
        if self.fail_save:
            raise StorageUploadError(path, "disk full")
        self.files[path] = content
        return StoredFile(file_name=file_name, file_path=path, file_size=len(content))

    async def read(self, file_path: str) -> bytes:
        if file_path not in self.files:
            raise StorageNotFoundError(file_path)
        return self.files[file_path]

    async def delete(self, file_path: str) -> bool:
        self.deleted.append(file_path)
        return self.files.pop(file_path, None) is not None


class FakeNotifier:
    """INotifier recording calls; raises while failures remain."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Any]] = []
        self.failures = 0

    async def notify(self, user_id, type_code, title, message, document_id=None) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("notifier unavailable")
        self.calls.append(
            {
                "user_id": user_id,
                "type_code": type_code,
                "title": title,
                "message": message,
                "document_id": document_id,
            }
        )


class FakeAuditSink:
    """IAuditSink recording calls; raises while failures remain."""

    def __init__(self) -> None:
        self.records: list[dict[str, Any]] = []
        self.failures = 0

    async def record(
        self,
        actor_id,
        action_type,
        entity_type,
        entity_id,
        description,
        old_values=None,
        new_values=None,
    ) -> None:
        if self.failures > 0:
            self.failures -= 1
            raise RuntimeError("audit sink unavailable")
        self.records.append(
            {
                "actor_id": actor_id,
                "action_type": action_type,
                "entity_type": entity_type,
                "entity_id": entity_id,
                "description": description,
            }
        )


# ---- fixtures ----


@pytest.fixture
def store() -> InMemoryStore:
    store = InMemoryStore()
    store.departments.update({"dept-1": "FIN", "dept-2": "HR"})
    store.categories.update(
        {
            "cat-1": CategoryResult(
                id="cat-1", name="Contract", code="CONTRACT", description=None, is_active=True
            ),
            "cat-2": CategoryResult(
                id="cat-2", name="Memo", code="MEMO", description=None, is_active=True
            ),
            "cat-old": CategoryResult(
                id="cat-old", name="Archive", code="ARCHIVE", description=None, is_active=False
            ),
        }
    )
    return store


@pytest.fixture
def uow(store: InMemoryStore) -> FakeUnitOfWork:
    return FakeUnitOfWork(store)


@pytest.fixture
def uow_factory(store: InMemoryStore):
    """New unit of work over the shared store (one per simulated request)."""
    return lambda: FakeUnitOfWork(store)


@pytest.fixture
def file_store() -> FakeFileStore:
    return FakeFileStore()


@pytest.fixture
def notifier() -> FakeNotifier:
    return FakeNotifier()


@pytest.fixture
def audit_sink() -> FakeAuditSink:
    return FakeAuditSink()


@pytest.fixture
def notification_repo(store: InMemoryStore) -> FakeNotificationRepository:
    return FakeNotificationRepository(store)


@pytest.fixture
def audit_repo(store: InMemoryStore) -> FakeAuditLogRepository:
    return FakeAuditLogRepository(store)


@pytest.fixture
def now() -> datetime:
    return NOW


@pytest.fixture
def clock():
    return lambda: NOW


@pytest.fixture
def author() -> IdentityContext:
    return IdentityContext(actor_id="author-1", role_level=RoleLevel.ASSISTANT, department_id="dept-1")


@pytest.fixture
def other_author() -> IdentityContext:
    return IdentityContext(actor_id="author-2", role_level=RoleLevel.ASSISTANT, department_id="dept-1")


@pytest.fixture
def vice() -> IdentityContext:
    return IdentityContext(actor_id="vice-1", role_level=RoleLevel.VICE_MANAGER, department_id="dept-1")


@pytest.fixture
def manager() -> IdentityContext:
    return IdentityContext(actor_id="mgr-1", role_level=RoleLevel.MANAGER, department_id="dept-1")


@pytest.fixture
def admin() -> IdentityContext:
    return IdentityContext(actor_id="admin-1", role_level=RoleLevel.ADMIN, department_id=None)


@pytest.fixture
def foreign_vice() -> IdentityContext:
    return IdentityContext(actor_id="vice-9", role_level=RoleLevel.VICE_MANAGER, department_id="dept-2")


@pytest.fixture
def seed_document(store: InMemoryStore):
    """Insert a committed document (with version 1 and, when handled, an active assignment)."""

    def _seed(
        *,
        status: DocumentStatus = DocumentStatus.DRAFT,
        workflow_level: int = WorkflowLevel.AUTHOR,
        created_by: str = "author-1",
        handler: str | None = "author-1",
        department_id: str | None = "dept-1",
        title: str = "Supplier contract",
        priority: DocumentPriority = DocumentPriority.MEDIUM,
        due_date: datetime | None = None,
        created_at: datetime | None = None,
        category_id: str = "cat-1",
    ) -> DocumentEntity:
        document_id = store.next_id("doc")
        document = DocumentEntity(
            id=document_id,
            document_number=f"DOC-FIN-20260316-{len(store.documents) + 1:04d}",
            title=title,
            created_by=created_by,
            category_id=category_id,
            department_id=department_id,
            status=status,
            workflow_level=workflow_level,
            current_handler_id=handler,
            priority=priority,
            due_date=due_date,
            file_name="contract.pdf",
            file_path=f"documents/seed-{document_id}.pdf",
            file_size=4,
            created_at=created_at or store.tick(),
        )
        store.documents[document.id] = document
        version = DocumentVersionResult(
            id=store.next_id("ver"),
            document_id=document.id,
            version_number=1,
            file_name="contract.pdf",
            file_path=document.file_path,
            file_size=4,
            created_by=created_by,
            change_description="Initial version",
            is_current=True,
            created_at=document.created_at,
        )
        store.versions[version.id] = version
        if status.is_under_review and handler:
            assignment = AssignmentResult(
                id=store.next_id("asg"),
                document_id=document.id,
                assigned_to=handler,
                assigned_by=created_by,
                workflow_level=int(workflow_level),
                is_active=True,
                assigned_at=document.created_at,
            )
            store.assignments[assignment.id] = assignment
        return copy.deepcopy(document)

    return _seed


@pytest.fixture
def engine(uow: FakeUnitOfWork, file_store: FakeFileStore, clock) -> WorkflowEngine:
    return WorkflowEngine(uow, file_store, clock=clock)


@pytest.fixture
def engine_factory(uow_factory, file_store: FakeFileStore, clock):
    """WorkflowEngine over a fresh unit of work (concurrent request simulation)."""
    return lambda: WorkflowEngine(uow_factory(), file_store, clock=clock)


@pytest.fixture
def creation_service(uow: FakeUnitOfWork, file_store: FakeFileStore, clock) -> DocumentCreationService:
    return DocumentCreationService(uow, file_store, clock=clock)


@pytest.fixture
def edit_service(uow: FakeUnitOfWork) -> DocumentEditService:
    return DocumentEditService(uow)


@pytest.fixture
def query_service(uow: FakeUnitOfWork, file_store: FakeFileStore, clock) -> DocumentQueryService:
    return DocumentQueryService(uow, file_store, clock=clock)


@pytest.fixture
def comment_service(uow: FakeUnitOfWork) -> CommentService:
    return CommentService(uow)
