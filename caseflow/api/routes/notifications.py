"""Notification feed endpoints. Callers only ever see their own notifications.

GET    /notifications               - the caller's feed, newest first
PUT    /notifications/read/{id}     - mark one notification read
DELETE /notifications/{id}          - delete one notification
POST   /notifications/bulk-delete   - delete several of the caller's notifications
"""

from fastapi import APIRouter, Depends

from caseflow.api.dependencies import get_current_actor, get_notification_inbox
from caseflow.models.domain import Actor
from caseflow.models.requests import BulkDeleteNotificationsRequest
from caseflow.models.responses import BulkDeleteResponse, MessageResponse, NotificationResponse
from caseflow.services.notifications.inbox import NotificationInbox

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("", response_model=list[NotificationResponse])
async def list_notifications(
    actor: Actor = Depends(get_current_actor),
    inbox: NotificationInbox = Depends(get_notification_inbox),
) -> list[NotificationResponse]:
    notifications = await inbox.list(actor)
    return [NotificationResponse.from_row(n) for n in notifications]


@router.put("/read/{notification_id}", response_model=NotificationResponse)
async def mark_notification_read(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    inbox: NotificationInbox = Depends(get_notification_inbox),
) -> NotificationResponse:
    notification = await inbox.mark_read(actor, notification_id)
    return NotificationResponse.from_row(notification)


@router.post("/bulk-delete", response_model=BulkDeleteResponse)
async def bulk_delete_notifications(
    body: BulkDeleteNotificationsRequest,
    actor: Actor = Depends(get_current_actor),
    inbox: NotificationInbox = Depends(get_notification_inbox),
) -> BulkDeleteResponse:
    deleted = await inbox.bulk_delete(actor, body.ids)
    return BulkDeleteResponse(
        message=f"{deleted} notification(s) deleted successfully",
        deleted_count=deleted,
    )


@router.delete("/{notification_id}", response_model=MessageResponse)
async def delete_notification(
    notification_id: str,
    actor: Actor = Depends(get_current_actor),
    inbox: NotificationInbox = Depends(get_notification_inbox),
) -> MessageResponse:
    await inbox.delete(actor, notification_id)
    return MessageResponse(message="Notification deleted successfully")
