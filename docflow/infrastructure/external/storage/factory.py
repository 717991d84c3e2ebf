"""Storage service factory: creates the file store backend from settings."""

from __future__ import annotations

from typing import TYPE_CHECKING

from docflow.infrastructure.external.storage.protocol import StorageProtocol

if TYPE_CHECKING:
    from docflow.core.config import Settings


class StorageFactory:
    """Factory for storage service instances based on configuration."""

    @staticmethod
    def create_storage_service(settings: "Settings | None" = None) -> StorageProtocol:
        """Create storage service from settings.

        Args:
            settings: Application settings; if None, uses get_settings().

        Returns:
            LocalStorageService.

        Raises:
            ValueError: Unknown backend or missing required config.
        """
        from docflow.core.config import get_settings

        s = settings or get_settings()
        backend = s.storage_backend.lower()

        if backend == "local":
            from docflow.infrastructure.external.storage.local_storage import (
                LocalStorageService,
            )

            if not s.storage_root:
                raise ValueError("STORAGE_ROOT required for local backend")
            return LocalStorageService(
                storage_root=s.storage_root,
                max_upload_size=s.max_upload_size,
                allowed_extensions=s.allowed_extension_set,
            )
        raise ValueError(f"Unknown storage backend: {backend}. Supported: 'local'")
