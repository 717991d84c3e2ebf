"""Shared enumerations for docflow.

Cross-cutting enums used by application and infrastructure (notifications,
audit, outbox). Workflow enums (status, role level, action) live in
docflow.domain.enums.
"""

from enum import Enum


class _ValuesMixin:
    """Mixin that adds a values() classmethod to str Enums."""

    @classmethod
    def values(cls) -> list[str]:
        """Return all valid values as strings."""
        return [member.value for member in cls]


class NotificationType(_ValuesMixin, str, Enum):
    """Notification type codes delivered to users."""

    DOC_ASSIGNED = "DOC_ASSIGNED"
    DOC_APPROVED = "DOC_APPROVED"
    DOC_REJECTED = "DOC_REJECTED"
    DOC_REVISION_REQUESTED = "DOC_REVISION_REQUESTED"
    NEW_COMMENT = "NEW_COMMENT"
    DEADLINE_REMINDER = "DEADLINE_REMINDER"
    DOC_OVERDUE = "DOC_OVERDUE"


class AuditAction(_ValuesMixin, str, Enum):
    """Audit action types recorded in the audit log."""

    CREATE = "CREATE"
    UPDATE = "UPDATE"
    DELETE = "DELETE"
    SUBMIT = "SUBMIT"
    APPROVE = "APPROVE"
    REJECT = "REJECT"
    REQUEST_REVISION = "REQUEST_REVISION"
    VERSION_CREATE = "VERSION_CREATE"
    COMMENT_CREATE = "COMMENT_CREATE"
    ASSIGNMENT_CREATE = "ASSIGNMENT_CREATE"


class EffectKind(_ValuesMixin, str, Enum):
    """Kind of side effect stored in the outbox."""

    NOTIFICATION = "notification"
    AUDIT = "audit"


class EffectStatus(_ValuesMixin, str, Enum):
    """Delivery status of an outbox entry."""

    PENDING = "pending"
    DELIVERED = "delivered"
    FAILED = "failed"
