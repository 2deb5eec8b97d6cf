"""Best-effort notification delivery.

Services record NotificationEvents in a per-request NotificationOutbox
while they work. Once the triggering transaction has committed, the
route hands the drained events to NotificationDispatcher as a background
task. The dispatcher writes each notification in its own session and
transaction; a failure is logged and never reaches the caller or undoes
the write that triggered it.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

import structlog
from sqlalchemy.exc import OperationalError
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from caseflow.db.repositories import NotificationRepo
from caseflow.db.session import get_session
from caseflow.models.database import NotificationRow

if TYPE_CHECKING:
    from fastapi import BackgroundTasks
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

    from caseflow.models.domain import NotificationEvent

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class NotificationOutbox:
    """Collects notification events raised while handling one request."""

    def __init__(self) -> None:
        self._events: list[NotificationEvent] = []

    def emit(self, event: NotificationEvent) -> None:
        self._events.append(event)

    def drain(self) -> list[NotificationEvent]:
        """Return the pending events and forget them."""
        events, self._events = self._events, []
        return events

    def __len__(self) -> int:
        return len(self._events)


class NotificationDispatcher:
    """Persists notification events outside the request transaction."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]) -> None:
        self._session_factory = session_factory

    async def deliver(self, events: Sequence[NotificationEvent]) -> int:
        """Write each event as a notification row. Returns how many succeeded."""
        delivered = 0
        for event in events:
            try:
                await self._write(event)
            except Exception:
                logger.exception(
                    "notification_delivery_failed",
                    user_id=event.user_id,
                    notification_type=str(event.type),
                )
                continue

            delivered += 1
            logger.debug(
                "notification_delivered",
                user_id=event.user_id,
                notification_type=str(event.type),
            )

        return delivered

    @retry(
        retry=retry_if_exception_type(OperationalError),
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=0.1, min=0.1, max=1),
        reraise=True,
    )
    async def _write(self, event: NotificationEvent) -> None:
        """Persist one event in its own transaction, retrying transient DB errors."""
        async with get_session(self._session_factory) as session:
            await NotificationRepo(session).create(
                NotificationRow(
                    user_id=event.user_id,
                    title=event.title,
                    message=event.message,
                    type=event.type,
                )
            )

    def schedule(self, background_tasks: BackgroundTasks, outbox: NotificationOutbox) -> None:
        """Queue delivery of the outbox's events to run after the response."""
        events = outbox.drain()
        if events:
            background_tasks.add_task(self.deliver, events)
