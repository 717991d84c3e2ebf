"""Maintains a document's version chain and its single current pointer.

Runs inside the caller's unit of work: the flip of the old current version
and the insert of the new one commit together or not at all.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from docflow.application.dtos.document import (
    DocumentVersionCreate,
    DocumentVersionResult,
    StoredFile,
)
from docflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IDocumentVersionRepository
    from docflow.domain.entities.document import DocumentEntity

logger = get_logger(__name__)

INITIAL_VERSION_DESCRIPTION = "Initial version"


class VersionManager:
    """Appends versions; numbers are max+1 and never reused."""

    def __init__(self, version_repo: IDocumentVersionRepository) -> None:
        self._versions = version_repo

    async def create_version(
        self,
        document: DocumentEntity,
        stored: StoredFile,
        created_by: str,
        change_description: str | None = None,
    ) -> DocumentVersionResult:
        """Insert the next version as current and repoint the document's file fields.

        The caller persists the document afterwards (same transaction).
        """
        next_number = await self._versions.get_max_version_number(document.id) + 1
        description = (change_description or "").strip() or (
            INITIAL_VERSION_DESCRIPTION if next_number == 1 else f"Version {next_number}"
        )
        await self._versions.clear_current(document.id)
        version = await self._versions.add(
            DocumentVersionCreate(
                document_id=document.id,
                version_number=next_number,
                file_name=stored.file_name,
                file_path=stored.file_path,
                file_size=stored.file_size,
                created_by=created_by,
                change_description=description,
                is_current=True,
            )
        )
        document.set_current_file(stored.file_name, stored.file_path, stored.file_size)
        logger.debug(
            "Document %s now at version %d", document.id, version.version_number
        )
        return version

    async def get_current(self, document_id: str) -> DocumentVersionResult | None:
        return await self._versions.get_current(document_id)

    async def list_versions(self, document_id: str) -> list[DocumentVersionResult]:
        return await self._versions.list_for_document(document_id)
