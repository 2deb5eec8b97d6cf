"""A user's own notification feed: list, mark read, delete."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from caseflow.core.exceptions import AuthorizationError, NotFoundError
from caseflow.db.repositories import NotificationRepo

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

    from caseflow.models.database import NotificationRow
    from caseflow.models.domain import Actor

logger: structlog.stdlib.BoundLogger = structlog.get_logger()


class NotificationInbox:
    """Reads and edits notifications addressed to the caller."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session
        self._notifications = NotificationRepo(session)

    async def list(self, actor: Actor) -> list[NotificationRow]:
        return await self._notifications.list_for_user(actor.id)

    async def mark_read(self, actor: Actor, notification_id: str) -> NotificationRow:
        notification = await self._require_owned(actor, notification_id)
        await self._notifications.mark_read(notification_id)
        notification.is_read = True
        await self._session.commit()
        return notification

    async def delete(self, actor: Actor, notification_id: str) -> None:
        await self._require_owned(actor, notification_id)
        await self._notifications.delete(notification_id)
        await self._session.commit()

    async def bulk_delete(self, actor: Actor, notification_ids: list[str]) -> int:
        """Delete the caller's notifications among notification_ids.

        Ids that do not exist or belong to someone else are ignored.
        """
        deleted = await self._notifications.delete_for_user(actor.id, notification_ids)
        await self._session.commit()
        logger.info(
            "notifications_bulk_deleted",
            user_id=actor.id,
            requested=len(notification_ids),
            deleted=deleted,
        )
        return deleted

    async def _require_owned(self, actor: Actor, notification_id: str) -> NotificationRow:
        notification = await self._notifications.get_by_id(notification_id)
        if notification is None:
            raise NotFoundError(
                "Notification not found", details={"notification_id": notification_id}
            )
        if notification.user_id != actor.id:
            raise AuthorizationError("Not authorized to modify this notification")
        return notification
