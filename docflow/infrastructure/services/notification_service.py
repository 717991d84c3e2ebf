"""Notifiers: database-backed inbox writer and a log-only fallback."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from docflow.application.dtos.effect import NotificationRequest
from docflow.shared.telemetry.logging import get_logger

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import INotificationRepository

logger = get_logger(__name__)


class DatabaseNotifier:
    """INotifier implementation that stores an unread notification row.

    Shares the dispatcher's session, so the row and the outbox delivery mark
    commit together.
    """

    def __init__(self, notification_repo: INotificationRepository) -> None:
        self._repo = notification_repo

    async def notify(
        self,
        user_id: str,
        type_code: str,
        title: str,
        message: str,
        document_id: str | None = None,
    ) -> None:
        if not user_id:
            raise ValueError("Notification recipient is required")
        await self._repo.create(
            NotificationRequest(
                user_id=user_id,
                type_code=type_code,
                title=title,
                message=message,
                document_id=document_id,
            )
        )


class LogOnlyNotifier:
    """INotifier implementation that logs instead of storing or sending."""

    async def notify(
        self,
        user_id: str,
        type_code: str,
        title: str,
        message: str,
        document_id: str | None = None,
    ) -> None:
        logger.info(
            "Notify %s: %s (type=%s, document=%s)",
            user_id,
            (title or "")[:80],
            type_code,
            document_id,
        )
        if logger.isEnabledFor(logging.DEBUG):
            logger.debug("Notification body (first 500 chars): %s", (message or "")[:500])
