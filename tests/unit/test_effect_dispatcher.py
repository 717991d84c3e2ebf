"""EffectDispatcher: at-least-once delivery of outbox rows with bounded retries."""

from docflow.application.dtos.effect import (
    AuditRequest,
    NotificationRequest,
    PendingEffectCreate,
)
from docflow.application.dtos.workflow import SubmitCommand
from docflow.application.use_cases.effects import EffectDispatcher
from docflow.shared.enums import EffectStatus


async def _queue(uow, *requests) -> None:
    await uow.begin()
    for request in requests:
        if isinstance(request, NotificationRequest):
            await uow.effects.add(PendingEffectCreate.notification(request))
        else:
            await uow.effects.add(PendingEffectCreate.audit(request))
    await uow.commit()


_NOTE = NotificationRequest(
    user_id="vice-1",
    type_code="DOC_ASSIGNED",
    title="New document for approval",
    message="Document 'X' needs your approval.",
    document_id="doc-1",
)
_AUDIT = AuditRequest(
    actor_id="author-1",
    action_type="SUBMIT",
    entity_type="document",
    entity_id="doc-1",
    description="DOC-1: submitted",
)


class TestDispatchPending:
    async def test_delivers_notifications_and_audit(
        self, uow, store, notifier, audit_sink, clock
    ) -> None:
        await _queue(uow, _NOTE, _AUDIT)
        dispatcher = EffectDispatcher(uow, notifier, audit_sink, clock=clock)

        report = await dispatcher.dispatch_pending()

        assert (report.delivered, report.retried, report.failed) == (2, 0, 0)
        assert notifier.calls[0]["user_id"] == "vice-1"
        assert notifier.calls[0]["document_id"] == "doc-1"
        assert audit_sink.records[0]["action_type"] == "SUBMIT"
        assert all(e.status == EffectStatus.DELIVERED for e in store.effects.values())
        assert all(e.delivered_at == clock() for e in store.effects.values())

    async def test_failure_is_retried_on_next_pass(
        self, uow, store, notifier, audit_sink
    ) -> None:
        await _queue(uow, _NOTE)
        notifier.failures = 1
        dispatcher = EffectDispatcher(uow, notifier, audit_sink, max_attempts=3)

        first = await dispatcher.dispatch_pending()
        (effect,) = store.effects.values()
        assert (first.retried, effect.status, effect.attempts) == (1, EffectStatus.PENDING, 1)
        assert effect.last_error == "notifier unavailable"

        second = await dispatcher.dispatch_pending()
        (effect,) = store.effects.values()
        assert second.delivered == 1
        assert effect.status == EffectStatus.DELIVERED
        assert effect.attempts == 2
        assert effect.last_error is None
        assert len(notifier.calls) == 1

    async def test_gives_up_after_max_attempts(self, uow, store, notifier, audit_sink) -> None:
        await _queue(uow, _AUDIT)
        audit_sink.failures = 10
        dispatcher = EffectDispatcher(uow, notifier, audit_sink, max_attempts=2)

        await dispatcher.dispatch_pending()
        report = await dispatcher.dispatch_pending()
        (effect,) = store.effects.values()
        assert report.failed == 1
        assert effect.status == EffectStatus.FAILED
        assert effect.attempts == 2

        assert (await dispatcher.dispatch_pending()).processed == 0

    async def test_batch_size_limits_one_pass(self, uow, notifier, audit_sink) -> None:
        await _queue(uow, _NOTE, _NOTE, _NOTE)
        dispatcher = EffectDispatcher(uow, notifier, audit_sink)
        assert (await dispatcher.dispatch_pending(batch_size=2)).delivered == 2
        assert (await dispatcher.dispatch_pending(batch_size=2)).delivered == 1

    async def test_failed_delivery_never_touches_workflow_state(
        self, engine, uow, store, seed_document, notifier, audit_sink, author
    ) -> None:
        doc = seed_document()
        result = await engine.submit(
            author, SubmitCommand(document_id=doc.id, to_user_id="vice-1")
        )
        notifier.failures = 5
        audit_sink.failures = 5
        report = await EffectDispatcher(uow, notifier, audit_sink).dispatch_pending()

        assert report.retried == 2
        stored = store.documents[doc.id]
        assert stored.status == result.document.status
        assert stored.row_version == result.document.row_version


class RacingNotifier:
    """Runs another dispatcher pass while the first delivery is in flight."""

    def __init__(self, inner, other: EffectDispatcher | None = None) -> None:
        self.inner = inner
        self.other = other
        self.other_report = None

    async def notify(self, **kwargs) -> None:
        if self.other is not None:
            other, self.other = self.other, None
            self.other_report = await other.dispatch_pending()
        await self.inner.notify(**kwargs)


class TestConcurrentDispatchers:
    async def test_effect_listed_by_both_is_delivered_once(
        self, uow, uow_factory, store, notifier, audit_sink
    ) -> None:
        await _queue(uow, _NOTE, _NOTE)
        second = EffectDispatcher(uow_factory(), notifier, audit_sink)
        racing = RacingNotifier(notifier, other=second)
        first = EffectDispatcher(uow_factory(), racing, audit_sink)

        report = await first.dispatch_pending()

        # The second pass skipped the row the first had claimed and took the other one.
        assert (racing.other_report.delivered, racing.other_report.skipped) == (1, 1)
        assert (report.delivered, report.skipped) == (1, 1)
        assert len(notifier.calls) == 2
        assert all(e.status == EffectStatus.DELIVERED for e in store.effects.values())
        assert all(e.attempts == 1 for e in store.effects.values())
        assert store.effect_locks == {}

    async def test_stale_listing_does_not_redeliver(
        self, uow, uow_factory, store, notifier, audit_sink
    ) -> None:
        await _queue(uow, _NOTE)
        stale_uow = uow_factory()
        (listed,) = await stale_uow.effects.list_pending(10)

        await EffectDispatcher(uow_factory(), notifier, audit_sink).dispatch_pending()

        assert await stale_uow.effects.claim(listed.id) is None
        assert await stale_uow.effects.mark_delivered(listed.id, listed.created_at) is False
        assert len(notifier.calls) == 1
