"""Document use cases: create, edit drafts, query and comment."""

from docflow.application.use_cases.documents.comment_operations import CommentService
from docflow.application.use_cases.documents.document_operations import (
    DocumentCreationService,
    DocumentEditService,
    DocumentQueryService,
)

__all__ = [
    "CommentService",
    "DocumentCreationService",
    "DocumentEditService",
    "DocumentQueryService",
]
