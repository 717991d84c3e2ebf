"""Infrastructure implementations of application service interfaces."""

from docflow.infrastructure.services.audit_sink import DatabaseAuditSink
from docflow.infrastructure.services.notification_service import (
    DatabaseNotifier,
    LogOnlyNotifier,
)

__all__ = [
    "DatabaseAuditSink",
    "DatabaseNotifier",
    "LogOnlyNotifier",
]
