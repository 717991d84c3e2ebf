"""Presentation-layer dependency injection (composition root).

Routes import dependencies from here only.
"""

from docflow.api.v1.dependencies.auth import (
    get_identity,
    get_identity_optional,
    identity_from_claims,
)
from docflow.api.v1.dependencies.document import (
    get_comment_service,
    get_document_creation_service,
    get_document_edit_service,
    get_document_query_service,
    get_file_store,
    get_notification_inbox,
    get_unit_of_work,
    get_workflow_engine,
)

__all__ = [
    "get_comment_service",
    "get_document_creation_service",
    "get_document_edit_service",
    "get_document_query_service",
    "get_file_store",
    "get_identity",
    "get_identity_optional",
    "get_notification_inbox",
    "get_unit_of_work",
    "get_workflow_engine",
    "identity_from_claims",
]
