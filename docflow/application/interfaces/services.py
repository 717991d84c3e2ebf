"""Service interfaces (ports) for collaborators outside the workflow core."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, BinaryIO, Protocol

if TYPE_CHECKING:
    from docflow.application.dtos.document import StoredFile


class IFileStore(Protocol):
    """Physical byte storage for document files."""

    async def save(self, data: bytes | BinaryIO, file_name: str, folder: str) -> StoredFile:
        """Store bytes under a logical folder. Raises StorageException on failure."""

    async def read(self, file_path: str) -> bytes:
        """Return stored bytes. Raises StorageNotFoundException when missing."""

    async def delete(self, file_path: str) -> bool:
        """Remove a stored file; False when it did not exist."""


class INotifier(Protocol):
    """Delivers a notification to a user (best effort)."""

    async def notify(
        self,
        user_id: str,
        type_code: str,
        title: str,
        message: str,
        document_id: str | None = None,
    ) -> None:
        """Deliver one notification. Raise to have the dispatcher retry."""


class IAuditSink(Protocol):
    """Persists audit records (best effort)."""

    async def record(
        self,
        actor_id: str,
        action_type: str,
        entity_type: str,
        entity_id: str,
        description: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        """Record one audit entry. Raise to have the dispatcher retry."""
