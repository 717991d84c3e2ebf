"""Domain enumerations for the document workflow.

Status codes, role levels, workflow actions and priorities. Values match
what is persisted and returned by the API.
"""

from enum import Enum, IntEnum


class DocumentStatus(str, Enum):
    """Document lifecycle status.

    DRAFT and REVISION_REQUESTED are editable by the creator; APPROVED,
    REJECTED and COMPLETED are terminal.
    """

    DRAFT = "DRAFT"
    PENDING = "PENDING"
    IN_REVIEW = "IN_REVIEW"
    REVISION_REQUESTED = "REVISION_REQUESTED"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    COMPLETED = "COMPLETED"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid status values as strings."""
        return [status.value for status in cls]

    @property
    def is_editable(self) -> bool:
        return self in EDITABLE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES

    @property
    def is_under_review(self) -> bool:
        return self in REVIEW_STATUSES


EDITABLE_STATUSES = frozenset({DocumentStatus.DRAFT, DocumentStatus.REVISION_REQUESTED})
REVIEW_STATUSES = frozenset({DocumentStatus.PENDING, DocumentStatus.IN_REVIEW})
TERMINAL_STATUSES = frozenset(
    {DocumentStatus.APPROVED, DocumentStatus.REJECTED, DocumentStatus.COMPLETED}
)


class RoleLevel(IntEnum):
    """Ordinal authority of a user. Permission checks compare levels numerically."""

    ASSISTANT = 1
    VICE_MANAGER = 2
    MANAGER = 3
    ADMIN = 4


# Minimum role level allowed to approve, reject or send back a document.
REVIEWER_MIN_LEVEL = RoleLevel.VICE_MANAGER


class WorkflowLevel(IntEnum):
    """Position of a document in the author → vice-manager → manager chain."""

    AUTHOR = 1
    VICE_MANAGER_REVIEW = 2
    MANAGER_REVIEW = 3


class WorkflowAction(str, Enum):
    """Action codes written to workflow history."""

    CREATE = "CREATE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_REVISION = "REQUEST_REVISION"
    EDIT = "EDIT"
    FORWARD = "FORWARD"
    COMPLETE = "COMPLETE"

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid action codes as strings."""
        return [action.value for action in cls]


class DocumentPriority(IntEnum):
    """Document priority; lower value sorts first."""

    HIGH = 1
    MEDIUM = 2
    LOW = 3
