"""
Notification API endpoints.

Serves each signed-in viewer their relevant notifications and lets faculty
and admins send them.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status

from common.utils import success_response, UnauthorizedException

from campverse.dependencies import (
    get_notification_registry,
    require_admin,
    require_sender,
    require_viewer,
)
from campverse.schemas.notifications import (
    AlertItem,
    NotificationCreateRequest,
    NotificationsResponse,
    UnreadCountResponse,
)
from campverse.services.notifications import (
    AuthenticationRequiredError,
    NotificationRouter,
    QueuedAlertSink,
)
from campverse.types import Viewer


router = APIRouter(prefix="/notifications", tags=["Notifications"])


async def _router_for(viewer: Viewer) -> NotificationRouter:
    registry = get_notification_registry()
    return await registry.get_or_login(viewer)


def _pending_alerts(notification_router: NotificationRouter) -> list:
    sink = notification_router.alert_sink
    if not isinstance(sink, QueuedAlertSink):
        return []
    return [AlertItem(**alert) for alert in sink.drain()]


def _state(notification_router: NotificationRouter, alerts: list) -> dict:
    return NotificationsResponse(
        notifications=notification_router.notifications,
        unreadCount=notification_router.unread_count,
        storage=notification_router.active_strategy,
        alerts=alerts,
        error=notification_router.error,
    ).model_dump(mode="json", exclude_none=True)


# =============================================================================
# Reading
# =============================================================================

@router.get("")
async def get_notifications(
    viewer: Annotated[Viewer, Depends(require_viewer)]
):
    """
    Get the notifications relevant to the current viewer.

    The first call after sign-in also returns the login alert when there
    are unread notifications.

    Returns:
        Notifications (newest first), unread count, storage in use, alerts
    """
    notification_router = await _router_for(viewer)
    return success_response(_state(notification_router, _pending_alerts(notification_router)))


@router.get("/all")
async def get_all_notifications(
    viewer: Annotated[Viewer, Depends(require_sender)]
):
    """
    Get every notification, unfiltered (faculty and admins only).

    Returns:
        All notifications, newest first
    """
    notification_router = await _router_for(viewer)
    notifications = [n.model_dump(mode="json", exclude_none=True) for n in notification_router.all_notifications]

    return success_response({
        "notifications": notifications,
        "count": len(notifications),
    })


@router.get("/count")
async def get_unread_count(
    viewer: Annotated[Viewer, Depends(require_viewer)]
):
    """
    Get count of unread notifications.

    Returns:
        Object with unread count
    """
    notification_router = await _router_for(viewer)
    return success_response(UnreadCountResponse(unread=notification_router.unread_count).model_dump())


# =============================================================================
# Writing
# =============================================================================

@router.post("", status_code=status.HTTP_201_CREATED)
async def send_notification(
    body: NotificationCreateRequest,
    viewer: Annotated[Viewer, Depends(require_sender)]
):
    """
    Send a notification (faculty and admins only).

    Returns:
        The stored notification and the storage it went to
    """
    notification_router = await _router_for(viewer)

    try:
        notification = await notification_router.send_notification(body)
    except AuthenticationRequiredError as e:
        raise UnauthorizedException(message=str(e), code="AUTH_REQUIRED")

    data = {
        "notification": notification.model_dump(mode="json", exclude_none=True),
        "storage": notification_router.active_strategy,
    }
    if notification_router.error:
        data["error"] = notification_router.error

    return success_response(data, message="Notification sent")


@router.post("/{notification_id}/read")
async def mark_as_read(
    notification_id: str,
    viewer: Annotated[Viewer, Depends(require_viewer)]
):
    """
    Mark a notification as read.

    Args:
        notification_id: ID of the notification to mark as read
    """
    notification_router = await _router_for(viewer)
    await notification_router.mark_as_read(notification_id)

    return success_response(
        {"unread": notification_router.unread_count},
        message="Notification marked as read",
    )


@router.post("/read-all")
async def mark_all_as_read(
    viewer: Annotated[Viewer, Depends(require_viewer)]
):
    """Mark every notification the viewer can see as read."""
    notification_router = await _router_for(viewer)
    count = len(notification_router.notifications)
    await notification_router.mark_all_as_read()

    return success_response({
        "message": f"Marked {count} notifications as read",
        "count": count,
        "unread": notification_router.unread_count,
    })


@router.delete("/{notification_id}")
async def delete_notification(
    notification_id: str,
    viewer: Annotated[Viewer, Depends(require_admin)]
):
    """
    Delete a notification (admins only).

    Args:
        notification_id: ID of the notification to delete
    """
    notification_router = await _router_for(viewer)
    await notification_router.delete_notification(notification_id)

    return success_response(message="Notification deleted")


# =============================================================================
# Session
# =============================================================================

@router.post("/session/logout")
async def logout(
    viewer: Annotated[Viewer, Depends(require_viewer)]
):
    """Stop the viewer's notification session and reset its login alert."""
    registry = get_notification_registry()
    ended = registry.logout(viewer.uid)

    return success_response({"loggedOut": ended})
