"""Notification and audit log repositories."""

from datetime import datetime

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.effect import AuditRequest, NotificationRequest, NotificationResult
from docflow.infrastructure.persistence.models.effects import AuditLog, Notification
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.utils.datetime import ensure_utc


def _to_result(row: Notification) -> NotificationResult:
    return NotificationResult(
        id=row.id,
        user_id=row.user_id,
        type_code=row.type_code,
        title=row.title,
        message=row.message,
        document_id=row.document_id,
        is_read=row.is_read,
        created_at=ensure_utc(row.created_at),
        read_at=ensure_utc(row.read_at),
    )


class NotificationRepository(BaseRepository[Notification]):
    """Per-user inbox. Every query is scoped by user_id."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, Notification)

    async def create(self, data: NotificationRequest) -> NotificationResult:
        row = await self._insert(
            Notification(
                user_id=data.user_id,
                type_code=data.type_code,
                title=data.title,
                message=data.message,
                document_id=data.document_id,
                is_read=False,
            )
        )
        return _to_result(row)

    async def list_for_user(
        self, user_id: str, *, unread_only: bool = False, skip: int = 0, limit: int = 50
    ) -> list[NotificationResult]:
        stmt = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            stmt = stmt.where(Notification.is_read.is_(False))
        result = await self.db.execute(
            stmt.order_by(Notification.created_at.desc()).offset(skip).limit(limit)
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def count_unread(self, user_id: str) -> int:
        result = await self.db.execute(
            select(func.count(Notification.id)).where(
                Notification.user_id == user_id,
                Notification.is_read.is_(False),
            )
        )
        return int(result.scalar_one() or 0)

    async def mark_read(self, notification_id: str, user_id: str, read_at: datetime) -> bool:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.id == notification_id, Notification.user_id == user_id)
            .values(is_read=True, read_at=func.coalesce(Notification.read_at, read_at))
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    async def mark_all_read(self, user_id: str, read_at: datetime) -> int:
        result = await self.db.execute(
            update(Notification)
            .where(Notification.user_id == user_id, Notification.is_read.is_(False))
            .values(is_read=True, read_at=read_at)
            .execution_options(synchronize_session=False)
        )
        return int(result.rowcount or 0)


class AuditLogRepository(BaseRepository[AuditLog]):
    """Append-only audit log."""

    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, AuditLog)

    async def create(self, data: AuditRequest) -> str:
        row = await self._insert(
            AuditLog(
                actor_id=data.actor_id,
                action_type=data.action_type,
                entity_type=data.entity_type,
                entity_id=data.entity_id,
                description=data.description,
                old_values=data.old_values,
                new_values=data.new_values,
            )
        )
        return row.id
