"""DTOs for the side-effect outbox, notifications and audit records."""

from dataclasses import asdict, dataclass
from datetime import datetime
from typing import Any

from docflow.shared.enums import EffectKind, EffectStatus


@dataclass(frozen=True)
class NotificationRequest:
    """Intent to notify one user."""

    user_id: str
    type_code: str
    title: str
    message: str
    document_id: str | None = None

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AuditRequest:
    """Intent to write one audit record."""

    actor_id: str
    action_type: str
    entity_type: str
    entity_id: str
    description: str
    old_values: dict[str, Any] | None = None
    new_values: dict[str, Any] | None = None

    def to_payload(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class PendingEffectCreate:
    """Outbox row written inside the workflow transaction."""

    kind: EffectKind
    payload: dict[str, Any]

    @classmethod
    def notification(cls, request: NotificationRequest) -> "PendingEffectCreate":
        return cls(kind=EffectKind.NOTIFICATION, payload=request.to_payload())

    @classmethod
    def audit(cls, request: AuditRequest) -> "PendingEffectCreate":
        return cls(kind=EffectKind.AUDIT, payload=request.to_payload())


@dataclass(frozen=True)
class PendingEffectResult:
    """Outbox read-model."""

    id: str
    kind: EffectKind
    payload: dict[str, Any]
    status: EffectStatus
    attempts: int
    last_error: str | None
    created_at: datetime | None
    delivered_at: datetime | None = None


@dataclass(frozen=True)
class NotificationResult:
    """Stored notification read-model."""

    id: str
    user_id: str
    type_code: str
    title: str
    message: str
    document_id: str | None
    is_read: bool
    created_at: datetime | None
    read_at: datetime | None = None


@dataclass(frozen=True)
class DispatchReport:
    """Counts from one dispatcher pass."""

    delivered: int = 0
    retried: int = 0
    failed: int = 0
    # Listed but already claimed or finished by another dispatcher.
    skipped: int = 0

    @property
    def processed(self) -> int:
        return self.delivered + self.retried + self.failed
