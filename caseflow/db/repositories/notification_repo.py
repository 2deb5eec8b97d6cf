"""Repository for notification CRUD operations."""

from sqlalchemy import CursorResult, delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from caseflow.models.database import NotificationRow


class NotificationRepo:
    """Async repository for user notifications."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def create(self, notification: NotificationRow) -> NotificationRow:
        self._session.add(notification)
        await self._session.flush()
        return notification

    async def get_by_id(self, notification_id: str) -> NotificationRow | None:
        stmt = select(NotificationRow).where(NotificationRow.id == notification_id)
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_user(self, user_id: str, *, limit: int = 100) -> list[NotificationRow]:
        """Notifications addressed to the user, newest first."""
        stmt = (
            select(NotificationRow)
            .where(NotificationRow.user_id == user_id)
            .order_by(NotificationRow.created_at.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return list(result.scalars().all())

    async def mark_read(self, notification_id: str) -> bool:
        stmt = (
            update(NotificationRow)
            .where(NotificationRow.id == notification_id)
            .values(is_read=True)
        )
        cursor: CursorResult[tuple[()]] = await self._session.execute(stmt)  # type: ignore[assignment]
        return cursor.rowcount > 0

    async def delete_for_user(self, user_id: str, notification_ids: list[str]) -> int:
        """Delete the given notifications, skipping any the user does not own.

        Returns the number of rows deleted.
        """
        if not notification_ids:
            return 0

        stmt = (
            delete(NotificationRow)
            .where(NotificationRow.user_id == user_id)
            .where(NotificationRow.id.in_(notification_ids))
        )
        cursor: CursorResult[tuple[()]] = await self._session.execute(stmt)  # type: ignore[assignment]
        return cursor.rowcount

    async def delete(self, notification_id: str) -> bool:
        cursor: CursorResult[tuple[()]] = await self._session.execute(  # type: ignore[assignment]
            delete(NotificationRow).where(NotificationRow.id == notification_id)
        )
        return cursor.rowcount > 0
