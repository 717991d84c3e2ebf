"""Delivers outbox entries (notifications, audit records) written by workflow transactions.

Each entry is handled in its own transaction. A failed delivery increments
the attempt counter and leaves the entry pending until max_attempts, after
which it is marked failed. Workflow state is never touched here.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import datetime
from typing import TYPE_CHECKING

from docflow.application.dtos.effect import DispatchReport, PendingEffectResult
from docflow.shared.enums import EffectKind
from docflow.shared.telemetry.logging import get_logger
from docflow.shared.telemetry.tracing import traced
from docflow.shared.utils.datetime import utc_now

if TYPE_CHECKING:
    from docflow.application.interfaces.repositories import IUnitOfWork
    from docflow.application.interfaces.services import IAuditSink, INotifier

logger = get_logger(__name__)

_ERROR_MAX_LENGTH = 1000


class EffectDispatcher:
    """Drains pending effects through the notifier and audit sink."""

    def __init__(
        self,
        uow: IUnitOfWork,
        notifier: INotifier,
        audit_sink: IAuditSink,
        *,
        max_attempts: int = 5,
        clock: Callable[[], datetime] = utc_now,
    ) -> None:
        self.uow = uow
        self._notifier = notifier
        self._audit_sink = audit_sink
        self._max_attempts = max_attempts
        self._clock = clock

    @traced("effects.dispatch_pending")
    async def dispatch_pending(self, batch_size: int = 100) -> DispatchReport:
        """Deliver up to batch_size pending effects, oldest first.

        The listing takes no locks. Each effect is claimed (row lock, still
        pending) inside its own transaction, so concurrent dispatchers never
        deliver the same effect from one listing.
        """
        await self.uow.begin()
        try:
            effects = await self.uow.effects.list_pending(batch_size)
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise
        counts = {"delivered": 0, "retry": 0, "failed": 0, "skipped": 0}
        for effect in effects:
            counts[await self._dispatch_one(effect.id)] += 1
        if effects:
            logger.info(
                "Dispatched %d effect(s): delivered=%d retry=%d failed=%d skipped=%d",
                len(effects),
                counts["delivered"],
                counts["retry"],
                counts["failed"],
                counts["skipped"],
            )
        return DispatchReport(
            delivered=counts["delivered"],
            retried=counts["retry"],
            failed=counts["failed"],
            skipped=counts["skipped"],
        )

    async def _dispatch_one(self, effect_id: str) -> str:
        await self.uow.begin()
        effect: PendingEffectResult | None = None
        try:
            effect = await self.uow.effects.claim(effect_id)
            if effect is None:
                await self.uow.rollback()
                logger.debug("Effect %s taken by another dispatcher; skipped", effect_id)
                return "skipped"
            await self._deliver(effect)
            await self.uow.effects.mark_delivered(effect.id, self._clock())
            await self.uow.commit()
            return "delivered"
        except Exception as e:
            await self.uow.rollback()
            if effect is None:
                raise
            give_up = effect.attempts + 1 >= self._max_attempts
            logger.warning(
                "Effect %s (%s) delivery failed on attempt %d%s: %s",
                effect.id,
                effect.kind.value,
                effect.attempts + 1,
                "; giving up" if give_up else "",
                e,
            )
            await self._record_failure(effect, e, give_up)
            return "failed" if give_up else "retry"

    async def _record_failure(
        self, effect: PendingEffectResult, error: Exception, give_up: bool
    ) -> None:
        await self.uow.begin()
        try:
            await self.uow.effects.record_failure(
                effect.id, str(error)[:_ERROR_MAX_LENGTH] or type(error).__name__, give_up=give_up
            )
            await self.uow.commit()
        except Exception:
            await self.uow.rollback()
            raise

    async def _deliver(self, effect: PendingEffectResult) -> None:
        payload = dict(effect.payload)
        if effect.kind == EffectKind.NOTIFICATION:
            await self._notifier.notify(
                user_id=payload["user_id"],
                type_code=payload["type_code"],
                title=payload["title"],
                message=payload["message"],
                document_id=payload.get("document_id"),
            )
        elif effect.kind == EffectKind.AUDIT:
            await self._audit_sink.record(
                actor_id=payload["actor_id"],
                action_type=payload["action_type"],
                entity_type=payload["entity_type"],
                entity_id=payload["entity_id"],
                description=payload["description"],
                old_values=payload.get("old_values"),
                new_values=payload.get("new_values"),
            )
        else:
            raise ValueError(f"Unknown effect kind: {effect.kind!r}")
