"""User notification inbox: list, unread count, mark read."""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from docflow.application.dtos.effect import NotificationResult
from docflow.domain.exceptions import ResourceNotFoundException
from docflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import INotificationRepository
    from docflow.domain.value_objects.core import IdentityContext


class NotificationInboxService:
    """Reads and acknowledges the caller's own notifications."""

    def __init__(
        self,
        notification_repo: INotificationRepository,
        *,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self._notifications = notification_repo
        self._clock = clock

    async def list_notifications(
        self,
        identity: IdentityContext,
        *,
        unread_only: bool = False,
        skip: int = 0,
        limit: int = 50,
    ) -> list[NotificationResult]:
        return await self._notifications.list_for_user(
            identity.actor_id,
            unread_only=unread_only,
            skip=max(0, skip),
            limit=min(max(1, limit), 200),
        )

    async def unread_count(self, identity: IdentityContext) -> int:
        return await self._notifications.count_unread(identity.actor_id)

    async def mark_read(self, identity: IdentityContext, notification_id: str) -> None:
        found = await self._notifications.mark_read(
            notification_id, identity.actor_id, self._clock()
        )
        if not found:
            raise ResourceNotFoundException("notification", notification_id)

    async def mark_all_read(self, identity: IdentityContext) -> int:
        return await self._notifications.mark_all_read(identity.actor_id, self._clock())
