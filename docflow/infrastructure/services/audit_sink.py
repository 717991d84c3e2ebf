"""Audit sink writing to the append-only audit_log table."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from docflow.application.dtos.effect import AuditRequest
from docflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IAuditLogRepository

logger = get_logger(__name__)


class DatabaseAuditSink:
    """IAuditSink implementation over IAuditLogRepository."""

    def __init__(self, audit_repo: IAuditLogRepository) -> None:
        self._repo = audit_repo

    async def record(
        self,
        actor_id: str,
        action_type: str,
        entity_type: str,
        entity_id: str,
        description: str,
        old_values: dict[str, Any] | None = None,
        new_values: dict[str, Any] | None = None,
    ) -> None:
        audit_id = await self._repo.create(
            AuditRequest(
                actor_id=actor_id,
                action_type=action_type,
                entity_type=entity_type,
                entity_id=entity_id,
                description=description,
                old_values=old_values,
                new_values=new_values,
            )
        )
        logger.debug(
            "Audit %s recorded: %s %s/%s by %s",
            audit_id,
            action_type,
            entity_type,
            entity_id,
            actor_id,
        )
