"""Deliver pending outbox effects (notifications, audit records).

Usage:
    python -m scripts.dispatch_effects [--loop SECONDS]
Without --loop, drains the outbox once (batch by batch) and exits; with it,
keeps polling every SECONDS. Requires Postgres.
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path

from dotenv import load_dotenv

import docflow.infrastructure.persistence.database as database
from docflow.application.dtos.effect import DispatchReport
from docflow.application.use_cases.effects import EffectDispatcher
from docflow.core.config import get_settings
from docflow.infrastructure.persistence.repositories import (
    AuditLogRepository,
    NotificationRepository,
)
from docflow.infrastructure.persistence.unit_of_work import SqlAlchemyUnitOfWork
from docflow.infrastructure.services import (
    DatabaseAuditSink,
    DatabaseNotifier,
    LogOnlyNotifier,
)
from docflow.shared.telemetry.logging import get_logger, setup_logging

logger = get_logger(__name__)


async def drain_once() -> DispatchReport:
    """Run batches until a pass delivers or retries nothing new."""
    settings = get_settings()
    delivered = retried = failed = skipped = 0
    while True:
        async with database.AsyncSessionLocal() as session:
            notifier = (
                DatabaseNotifier(NotificationRepository(session))
                if settings.notifier_backend == "database"
                else LogOnlyNotifier()
            )
            dispatcher = EffectDispatcher(
                SqlAlchemyUnitOfWork(session),
                notifier,
                DatabaseAuditSink(AuditLogRepository(session)),
                max_attempts=settings.effect_max_attempts,
            )
            report = await dispatcher.dispatch_pending(settings.effect_batch_size)
        delivered += report.delivered
        retried += report.retried
        failed += report.failed
        skipped += report.skipped
        # Retried effects stay pending; stop instead of spinning on them.
        if report.processed < settings.effect_batch_size or report.delivered == 0:
            break
    return DispatchReport(
        delivered=delivered, retried=retried, failed=failed, skipped=skipped
    )


async def main() -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--loop", type=float, default=None, metavar="SECONDS")
    args = parser.parse_args()

    load_dotenv(Path(__file__).resolve().parent.parent / ".env", override=False)
    setup_logging()
    database._ensure_engine()
    if database.AsyncSessionLocal is None:
        print("AsyncSessionLocal not configured", file=sys.stderr)
        sys.exit(1)

    try:
        while True:
            report = await drain_once()
            print(
                f"Delivered {report.delivered}, retry {report.retried}, "
                f"failed {report.failed}, skipped {report.skipped}"
            )
            if args.loop is None:
                break
            await asyncio.sleep(args.loop)
    finally:
        await database.engine.dispose()


if __name__ == "__main__":
    asyncio.run(main())
