"""Domain entities.

Pure domain models; no ORM or persistence concerns.
"""

from docflow.domain.entities.document import DocumentEntity

__all__ = ["DocumentEntity"]
