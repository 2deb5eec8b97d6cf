"""Tests for the notification outbox and dispatcher.

The dispatcher is exercised against a mocked session factory: each
event gets its own session, transient database errors are retried,
and any other failure is logged and skipped.
"""

from unittest.mock import AsyncMock, MagicMock

from fastapi import BackgroundTasks
from sqlalchemy.exc import OperationalError

from caseflow.models.domain import NotificationEvent, NotificationType
from caseflow.services.notifications.dispatcher import NotificationDispatcher, NotificationOutbox


def _event(user_id: str = "client-1", **overrides: object) -> NotificationEvent:
    defaults: dict[str, object] = {
        "user_id": user_id,
        "title": "Case Filed Successfully",
        "message": 'Your case "Smith vs Jones" has been filed.',
        "type": NotificationType.CASE_FILED,
    }
    defaults.update(overrides)
    return NotificationEvent(**defaults)  # type: ignore[arg-type]


def _mock_session_factory() -> tuple[MagicMock, AsyncMock]:
    session = AsyncMock()
    session.add = MagicMock()
    factory = MagicMock(return_value=session)
    return factory, session


# ===================================================================
# NotificationOutbox
# ===================================================================


class TestOutbox:
    def test_drain_returns_events_in_order_and_empties(self):
        outbox = NotificationOutbox()
        first, second = _event("a"), _event("b")
        outbox.emit(first)
        outbox.emit(second)

        assert len(outbox) == 2
        assert outbox.drain() == [first, second]
        assert len(outbox) == 0
        assert outbox.drain() == []


# ===================================================================
# NotificationDispatcher
# ===================================================================


class TestDeliver:
    async def test_each_event_in_its_own_transaction(self):
        factory, session = _mock_session_factory()

        delivered = await NotificationDispatcher(factory).deliver([_event("a"), _event("b")])

        assert delivered == 2
        assert factory.call_count == 2
        assert session.commit.await_count == 2
        written = [call.args[0] for call in session.add.call_args_list]
        assert [row.user_id for row in written] == ["a", "b"]
        assert written[0].type == NotificationType.CASE_FILED

    async def test_failure_is_skipped_not_raised(self):
        factory, session = _mock_session_factory()
        session.flush.side_effect = [RuntimeError("disk full"), None]

        delivered = await NotificationDispatcher(factory).deliver([_event("a"), _event("b")])

        assert delivered == 1
        session.rollback.assert_awaited_once()

    async def test_transient_error_is_retried(self):
        factory, session = _mock_session_factory()
        session.flush.side_effect = [
            OperationalError("INSERT", {}, Exception("connection reset")),
            None,
        ]

        delivered = await NotificationDispatcher(factory).deliver([_event()])

        assert delivered == 1
        assert session.flush.await_count == 2

    async def test_persistent_transient_error_gives_up(self):
        factory, session = _mock_session_factory()
        session.flush.side_effect = OperationalError("INSERT", {}, Exception("down"))

        delivered = await NotificationDispatcher(factory).deliver([_event()])

        assert delivered == 0
        assert session.flush.await_count == 3


class TestSchedule:
    def test_no_events_schedules_nothing(self):
        factory, _ = _mock_session_factory()
        tasks = BackgroundTasks()

        NotificationDispatcher(factory).schedule(tasks, NotificationOutbox())

        assert tasks.tasks == []

    def test_events_are_handed_to_background_task(self):
        factory, _ = _mock_session_factory()
        dispatcher = NotificationDispatcher(factory)
        outbox = NotificationOutbox()
        event = _event()
        outbox.emit(event)
        tasks = BackgroundTasks()

        dispatcher.schedule(tasks, outbox)

        assert len(tasks.tasks) == 1
        assert tasks.tasks[0].args == ([event],)
        assert len(outbox) == 0
