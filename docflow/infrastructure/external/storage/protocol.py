"""Storage service protocol (DIP). Implementation: LocalStorageService."""

from typing import BinaryIO, Protocol

from docflow.application.dtos.document import StoredFile


class StorageProtocol(Protocol):
    """Protocol for document file backends; satisfies IFileStore."""

    async def save(self, data: bytes | BinaryIO, file_name: str, folder: str) -> StoredFile:
        """Validate and store bytes under folder. Returns the stored path and size."""
        ...

    async def read(self, file_path: str) -> bytes:
        """Return file content."""
        ...

    async def delete(self, file_path: str) -> bool:
        """Delete file. Returns True if deleted, False if not found."""
        ...

    async def exists(self, file_path: str) -> bool:
        """Return True if file exists."""
        ...
