"""Infrastructure exceptions for storage operations.

Storage errors extend DocflowException so presentation can map them
to HTTP responses consistently.
"""

from docflow.domain.exceptions import DocflowException


class StorageException(DocflowException):
    """Base exception for storage operations."""


class StorageNotFoundError(StorageException):
    """File not found in storage."""

    def __init__(self, file_path: str) -> None:
        super().__init__(
            f"File not found: {file_path}",
            "STORAGE_NOT_FOUND",
            {"file_path": file_path},
        )


class StorageUploadError(StorageException):
    """File write failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to store file: {file_path}",
            "STORAGE_UPLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDownloadError(StorageException):
    """File read failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to read file: {file_path}",
            "STORAGE_DOWNLOAD_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StorageDeleteError(StorageException):
    """File deletion failed."""

    def __init__(self, file_path: str, reason: str) -> None:
        super().__init__(
            f"Failed to delete file: {file_path}",
            "STORAGE_DELETE_ERROR",
            {"file_path": file_path, "reason": reason},
        )


class StoragePermissionError(StorageException):
    """Path escapes the storage root."""

    def __init__(self, file_path: str, operation: str) -> None:
        super().__init__(
            f"Permission denied for {operation} on {file_path}",
            "STORAGE_PERMISSION_ERROR",
            {"file_path": file_path, "operation": operation},
        )
