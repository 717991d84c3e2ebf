"""Domain exceptions for docflow.

Defines domain-level exceptions that represent business rule violations.
These exceptions are independent of infrastructure concerns. The workflow
engine converts the business-rule subset into typed results; the
presentation layer maps the rest to HTTP responses in exception handlers.
"""

from typing import Any


class DocflowException(Exception):
    """Base exception for all docflow application errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. field, resource_id).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serialize for API error bodies."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class BusinessRuleException(DocflowException):
    """Expected business-rule failure. Recovered as a typed negative result."""


class ValidationException(BusinessRuleException):
    """Raised when input validation fails (missing target user, empty comments, bad value)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        """Initialize with message and optional field name.

        Args:
            message: Description of the validation failure.
            field: Optional field or attribute that failed validation.
        """
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class ResourceNotFoundException(BusinessRuleException):
    """Raised when a document, version, comment or lookup row does not exist."""

    def __init__(self, resource_type: str, resource_id: str) -> None:
        """Initialize with resource type and id.

        Args:
            resource_type: Type of resource (e.g. 'document', 'version').
            resource_id: The ID that was not found.
        """
        super().__init__(
            f"{resource_type} not found: {resource_id}",
            "RESOURCE_NOT_FOUND",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PermissionDeniedException(BusinessRuleException):
    """Raised when the actor fails an ownership or role-level check."""

    def __init__(
        self,
        action: str,
        document_id: str | None = None,
        reason: str | None = None,
    ) -> None:
        """Initialize with the attempted action.

        Args:
            action: Action that was attempted (e.g. 'approve', 'view').
            document_id: Optional document the action targeted.
            reason: Optional short reason (e.g. 'not the current handler').
        """
        message = f"Permission denied: {action}"
        if reason:
            message = f"{message} ({reason})"
        details: dict[str, Any] = {"action": action}
        if document_id:
            details["document_id"] = document_id
        if reason:
            details["reason"] = reason
        super().__init__(message, "PERMISSION_DENIED", details)


class InvalidStateTransitionException(BusinessRuleException):
    """Raised when the actor is authorized but the document status does not allow the verb."""

    def __init__(self, document_id: str, current_status: str, action: str) -> None:
        super().__init__(
            f"Cannot {action} a document in status {current_status}",
            "INVALID_STATE_TRANSITION",
            {
                "document_id": document_id,
                "current_status": current_status,
                "action": action,
            },
        )


class ConcurrencyConflictException(DocflowException):
    """Raised when a concurrent request changed the document first (optimistic lock)."""

    def __init__(self, resource_id: str, resource_type: str = "document") -> None:
        super().__init__(
            f"{resource_type} was updated by another request; retry.",
            "CONCURRENCY_CONFLICT",
            {"resource_type": resource_type, "resource_id": resource_id},
        )


class PersistenceException(DocflowException):
    """Raised when the transaction cannot be committed for storage reasons."""

    def __init__(self, message: str = "Persistence failure") -> None:
        super().__init__(message, "PERSISTENCE_ERROR")


class SqlNotConfiguredException(DocflowException):
    """Raised when an operation requires Postgres but the backend is not configured."""

    def __init__(self) -> None:
        super().__init__(
            message="This operation requires a SQL database that is not configured.",
            error_code="SERVICE_UNAVAILABLE",
        )


class AuthenticationException(DocflowException):
    """Raised when the bearer token is missing, invalid or lacks identity claims."""

    def __init__(self, message: str = "Authentication failed") -> None:
        super().__init__(message, "AUTHENTICATION_ERROR")
