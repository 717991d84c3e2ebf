"""Storage: local filesystem backend for document files.

StorageFactory creates the backend from docflow.core.config. Implementations
follow StorageProtocol (save, read, delete, exists).
"""

from docflow.infrastructure.external.storage.factory import StorageFactory
from docflow.infrastructure.external.storage.protocol import StorageProtocol

__all__ = [
    "StorageFactory",
    "StorageProtocol",
]
