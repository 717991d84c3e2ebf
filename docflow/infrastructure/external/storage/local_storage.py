"""Local filesystem storage with upload validation, path checks and atomic writes."""

from __future__ import annotations

import os
import re
import tempfile
from pathlib import Path, PurePath
from typing import BinaryIO

import aiofiles
import aiofiles.os

from docflow.application.dtos.document import StoredFile
from docflow.domain.exceptions import ValidationException
from docflow.infrastructure.exceptions import (
    StorageDeleteError,
    StorageDownloadError,
    StorageNotFoundError,
    StoragePermissionError,
    StorageUploadError,
)
from docflow.shared.telemetry.logging import get_logger
from docflow.shared.utils.datetime import utc_now
from docflow.shared.utils.generators import generate_stored_name

logger = get_logger(__name__)

_UNSAFE_NAME_CHARS = re.compile(r"[^\w.\- ]+")
_FOLDER_PATTERN = re.compile(r"^[a-z0-9_\-]+$")


def sanitize_file_name(file_name: str) -> str:
    """Strip directories and unsafe characters from a client-supplied file name."""
    base = PurePath(file_name.replace("\\", "/")).name.strip()
    cleaned = _UNSAFE_NAME_CHARS.sub("_", base).strip(". ")
    return cleaned[:255] or "file"


class LocalStorageService:
    """Local filesystem storage with atomic writes and path traversal protection.

    Files land in ``<root>/<folder>/<YYYYMM>/<unique><ext>``; the original
    name is kept only in the database. Writes use temp file + rename.
    """

    CHUNK_SIZE = 64 * 1024  # 64KB

    def __init__(
        self,
        storage_root: str,
        *,
        max_upload_size: int,
        allowed_extensions: frozenset[str] | set[str] | None = None,
    ) -> None:
        """Initialize local storage.

        Args:
            storage_root: Base directory for all files.
            max_upload_size: Largest accepted payload in bytes.
            allowed_extensions: Lower-case extensions with leading dot; None accepts any.
        """
        self.storage_root = Path(storage_root).resolve()
        self.max_upload_size = max_upload_size
        self.allowed_extensions = (
            frozenset(e.lower() for e in allowed_extensions) if allowed_extensions else None
        )
        self.storage_root.mkdir(parents=True, exist_ok=True, mode=0o750)

    def _get_full_path(self, file_path: str) -> Path:
        """Resolve and validate path under storage_root. Raises StoragePermissionError if traversal."""
        full_path = (self.storage_root / file_path).resolve()
        try:
            full_path.relative_to(self.storage_root)
        except ValueError as e:
            raise StoragePermissionError(file_path, "path_validation") from e
        return full_path

    def _validate(self, content: bytes, file_name: str) -> str:
        """Check name, size and extension; return the lower-case extension."""
        if not file_name or not file_name.strip():
            raise ValidationException("File name is required", field="file")
        if not content:
            raise ValidationException("File is empty", field="file")
        if len(content) > self.max_upload_size:
            raise ValidationException(
                f"File exceeds the maximum size of {self.max_upload_size} bytes",
                field="file",
            )
        extension = PurePath(file_name).suffix.lower()
        if self.allowed_extensions is not None and extension not in self.allowed_extensions:
            raise ValidationException(
                f"File type '{extension or 'none'}' is not allowed", field="file"
            )
        return extension

    async def save(self, data: bytes | BinaryIO, file_name: str, folder: str) -> StoredFile:
        """Validate and write bytes atomically. Returns the relative stored path."""
        content = data if isinstance(data, bytes) else data.read()
        extension = self._validate(content, file_name)
        if not _FOLDER_PATTERN.match(folder):
            raise StoragePermissionError(folder, "folder_validation")

        relative = f"{folder}/{utc_now():%Y%m}/{generate_stored_name(extension)}"
        target_path = self._get_full_path(relative)
        try:
            target_path.parent.mkdir(parents=True, exist_ok=True, mode=0o750)
            temp_fd, temp_path = tempfile.mkstemp(
                dir=target_path.parent,
                prefix=".tmp_",
                suffix=target_path.suffix,
            )
            os.close(temp_fd)
            try:
                async with aiofiles.open(temp_path, "wb") as f:
                    await f.write(content)
                os.chmod(temp_path, 0o640)
                os.rename(temp_path, target_path)
            finally:
                if Path(temp_path).exists():
                    os.unlink(temp_path)
        except OSError as e:
            raise StorageUploadError(relative, str(e)) from e

        logger.debug("Stored %s (%d bytes) as %s", file_name, len(content), relative)
        return StoredFile(
            file_name=sanitize_file_name(file_name),
            file_path=relative,
            file_size=len(content),
        )

    async def read(self, file_path: str) -> bytes:
        """Return the whole file."""
        full_path = self._get_full_path(file_path)
        if not full_path.is_file():
            raise StorageNotFoundError(file_path)
        try:
            async with aiofiles.open(full_path, "rb") as f:
                return await f.read()
        except OSError as e:
            raise StorageDownloadError(file_path, str(e)) from e

    async def delete(self, file_path: str) -> bool:
        """Delete file and empty month folders. Returns True if deleted."""
        full_path = self._get_full_path(file_path)
        if not full_path.exists():
            return False
        try:
            await aiofiles.os.remove(full_path)
        except OSError as e:
            raise StorageDeleteError(file_path, str(e)) from e
        parent = full_path.parent
        while parent != self.storage_root:
            try:
                if any(parent.iterdir()):
                    break
                parent.rmdir()
                parent = parent.parent
            except OSError:
                break
        return True

    async def exists(self, file_path: str) -> bool:
        """Return True if file exists."""
        try:
            return self._get_full_path(file_path).is_file()
        except StoragePermissionError:
            return False
