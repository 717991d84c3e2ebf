"""Outbox repository for pending side effects."""

from datetime import datetime

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from docflow.application.dtos.effect import PendingEffectCreate, PendingEffectResult
from docflow.infrastructure.persistence.models.effects import PendingEffect
from docflow.infrastructure.persistence.repositories.base import BaseRepository
from docflow.shared.enums import EffectKind, EffectStatus
from docflow.shared.utils.datetime import ensure_utc

# Stored error text is truncated to keep rows small.
_MAX_ERROR_LENGTH = 2000


def _to_result(row: PendingEffect) -> PendingEffectResult:
    return PendingEffectResult(
        id=row.id,
        kind=EffectKind(row.kind),
        payload=dict(row.payload or {}),
        status=EffectStatus(row.status),
        attempts=row.attempts,
        last_error=row.last_error,
        created_at=ensure_utc(row.created_at),
        delivered_at=ensure_utc(row.delivered_at),
    )


class PendingEffectRepository(BaseRepository[PendingEffect]):
    def __init__(self, db: AsyncSession) -> None:
        super().__init__(db, PendingEffect)

    async def add(self, data: PendingEffectCreate) -> PendingEffectResult:
        row = await self._insert(
            PendingEffect(
                kind=data.kind.value,
                payload=data.payload,
                status=EffectStatus.PENDING.value,
                attempts=0,
            )
        )
        return _to_result(row)

    async def list_pending(self, limit: int) -> list[PendingEffectResult]:
        """Oldest pending effects. Unlocked snapshot; claim() takes the row lock."""
        result = await self.db.execute(
            select(PendingEffect)
            .where(PendingEffect.status == EffectStatus.PENDING.value)
            .order_by(PendingEffect.created_at.asc())
            .limit(limit)
        )
        return [_to_result(r) for r in result.scalars().all()]

    async def claim(self, effect_id: str) -> PendingEffectResult | None:
        """Lock one still-pending effect until the transaction ends.

        Returns None when the row is already locked by another dispatcher or
        is no longer pending.
        """
        result = await self.db.execute(
            select(PendingEffect)
            .where(
                PendingEffect.id == effect_id,
                PendingEffect.status == EffectStatus.PENDING.value,
            )
            .with_for_update(skip_locked=True)
            .execution_options(populate_existing=True)
        )
        row = result.scalar_one_or_none()
        return _to_result(row) if row else None

    async def mark_delivered(self, effect_id: str, delivered_at: datetime) -> bool:
        result = await self.db.execute(
            update(PendingEffect)
            .where(
                PendingEffect.id == effect_id,
                PendingEffect.status == EffectStatus.PENDING.value,
            )
            .values(
                status=EffectStatus.DELIVERED.value,
                delivered_at=delivered_at,
                attempts=PendingEffect.attempts + 1,
                last_error=None,
            )
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1

    async def record_failure(self, effect_id: str, error: str, *, give_up: bool) -> bool:
        values: dict[str, object] = {
            "attempts": PendingEffect.attempts + 1,
            "last_error": error[:_MAX_ERROR_LENGTH],
        }
        if give_up:
            values["status"] = EffectStatus.FAILED.value
        result = await self.db.execute(
            update(PendingEffect)
            .where(
                PendingEffect.id == effect_id,
                PendingEffect.status == EffectStatus.PENDING.value,
            )
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        return (result.rowcount or 0) == 1
