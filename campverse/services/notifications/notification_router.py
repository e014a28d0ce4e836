"""
Notification router.

Keeps one viewer's notification lists current, decides which notifications
the viewer sees, tracks read state, and writes through the remote store
with a fallback to local storage.
"""

import logging
import secrets
import string
import time
from datetime import date
from typing import Any, Callable, Dict, List, Optional, Union

from campverse.schemas.notifications import Notification, NotificationContent, PostedBy
from campverse.services.notifications.alerts import AlertSink, LoggingAlertSink
from campverse.services.notifications.errors import AuthenticationRequiredError, StoreError
from campverse.services.notifications.relevance import (
    count_unread,
    filter_relevant,
    is_expired,
    sort_newest_first,
)
from campverse.services.notifications.session import LoginSession
from campverse.services.notifications.stores import (
    LOCAL,
    REMOTE,
    NotificationStore,
    Subscription,
)
from campverse.types import Viewer

logger = logging.getLogger(__name__)

_BASE36 = string.digits + string.ascii_lowercase


def now_ms() -> int:
    """Current time in epoch milliseconds."""
    return int(time.time() * 1000)


def generate_notification_id(created_at: int) -> str:
    """Generate a local notification ID: notif_<epochMillis>_<9 base36 chars>."""
    suffix = "".join(secrets.choice(_BASE36) for _ in range(9))
    return f"notif_{created_at}_{suffix}"


class NotificationRouter:
    """
    Notification state for one viewer session.

    State:
    - all_notifications: every notification, newest first (admin view)
    - notifications: the subset relevant to the viewer, newest first
    - unread_count: unread entries in `notifications`
    - active_strategy: "remote" or "local", which store reads and writes use

    The strategy starts as "remote" when a remote store is available and
    switches to "local" for the rest of the session after a remote failure.
    """

    def __init__(
        self,
        local_store: NotificationStore,
        remote_store: Optional[NotificationStore] = None,
        viewer: Optional[Viewer] = None,
        session: Optional[LoginSession] = None,
        alert_sink: Optional[AlertSink] = None,
        allow_remote: bool = True,
        expiry_filter: bool = False,
        clock: Callable[[], int] = now_ms,
        today: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize NotificationRouter.

        Args:
            local_store: Durable local store, always available
            remote_store: Realtime store, None when not configured
            viewer: Signed-in viewer, if any
            session: Login state shared with the auth collaborator
            alert_sink: Where login alerts go
            allow_remote: False in local-only environments
            expiry_filter: Drop notifications whose expiresAt has passed
            clock: Epoch-milliseconds source
            today: Date source for year-of-study matching
        """
        self._local = local_store
        self._remote = remote_store
        self._allow_remote = allow_remote
        self._expiry_filter = expiry_filter
        self._clock = clock
        self._today = today or date.today

        self.viewer = viewer
        self.session = session or LoginSession()
        self.alert_sink = alert_sink or LoggingAlertSink()

        self.all_notifications: List[Notification] = []
        self.notifications: List[Notification] = []
        self.unread_count = 0
        self.loading = False
        self.error: Optional[str] = None
        self.active_strategy = REMOTE if self.remote_available else LOCAL

        self._subscription: Optional[Subscription] = None

    # ─────────────────────────────────────────────────────────────
    # Strategy
    # ─────────────────────────────────────────────────────────────

    @property
    def remote_available(self) -> bool:
        return self._remote is not None and self._allow_remote

    def _uses_remote(self) -> bool:
        return self.remote_available and self.active_strategy == REMOTE

    def _switch_to_local(self) -> None:
        if self.active_strategy != LOCAL:
            logger.warning("Switching notifications to local storage for this session")
        self.active_strategy = LOCAL
        self._close_subscription()

    def _close_subscription(self) -> None:
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    # ─────────────────────────────────────────────────────────────
    # Relevance pipeline
    # ─────────────────────────────────────────────────────────────

    def process_notifications(self, raw: List[Notification]) -> None:
        """
        Recompute every derived list from a raw notification list.

        Sorts newest first, keeps the unfiltered copy for the admin view,
        filters for the viewer, counts unread, and raises the login alert
        the first time this login has unread notifications.
        """
        notifications = sort_newest_first(raw)
        if self._expiry_filter:
            now = self._clock()
            notifications = [n for n in notifications if not is_expired(n, now)]

        self.all_notifications = notifications

        if self.viewer is None:
            self.notifications = []
            self.unread_count = 0
        else:
            self.notifications = filter_relevant(notifications, self.viewer, self._today())
            self.unread_count = count_unread(self.notifications)

            if self.session.claim_login_alert(self.unread_count):
                self._emit_login_alert(self.unread_count)

        self.error = None

    def _emit_login_alert(self, unread: int) -> None:
        plural = "s" if unread > 1 else ""
        try:
            self.alert_sink.notify(
                f"You have {unread} new notification{plural}!",
                "Open the notification bell to view them.",
            )
        except Exception as e:
            logger.error(f"Failed to deliver login alert: {e}")

    def _clear(self) -> None:
        self.all_notifications = []
        self.notifications = []
        self.unread_count = 0

    # ─────────────────────────────────────────────────────────────
    # Reading
    # ─────────────────────────────────────────────────────────────

    async def _on_snapshot(self, notifications: List[Notification]) -> None:
        if notifications:
            self.process_notifications(notifications)
        else:
            self._clear()
            self.error = None
        self.loading = False

    async def _on_remote_error(self, error: StoreError) -> None:
        logger.error(f"Error fetching notifications from Firebase: {error}")
        self._switch_to_local()
        await self._fetch_local()

    async def _fetch_local(self) -> None:
        self.loading = True
        self.process_notifications(await self._local.list())
        self.loading = False

    async def fetch_notifications(self) -> None:
        """
        Load notifications and keep them current.

        With the remote strategy this subscribes to the live feed; otherwise,
        or if subscribing fails, it reads local storage once. Safe to call
        repeatedly: any previous subscription is closed first.
        """
        self.loading = True
        self.error = None
        self._close_subscription()

        if self._uses_remote():
            try:
                self._subscription = await self._remote.subscribe(
                    self._on_snapshot,
                    self._on_remote_error,
                )
                return
            except StoreError as e:
                logger.error(f"Error subscribing to Firebase notifications: {e}")
                self._switch_to_local()

        logger.info("Using local storage for notifications")
        await self._fetch_local()

    async def refresh(self) -> None:
        """
        Re-read local storage when the session is on the local strategy.

        Local storage has no change feed and is shared with other sessions,
        so their writes only show up on the next read. The remote feed keeps
        itself current; nothing happens then.
        """
        if not self._uses_remote():
            await self._fetch_local()

    # ─────────────────────────────────────────────────────────────
    # Writing
    # ─────────────────────────────────────────────────────────────

    def _build_notification(self, data: Union[NotificationContent, Dict[str, Any]]) -> Notification:
        content = data if isinstance(data, NotificationContent) else NotificationContent.model_validate(data)
        created_at = self._clock()
        viewer = self.viewer

        return Notification(
            **content.model_dump(exclude_none=True),
            id=generate_notification_id(created_at),
            postedBy=PostedBy(
                name=viewer.name or "Admin",
                role=viewer.role or "admin",
                collegeId=viewer.college_id or "admin",
            ),
            createdAt=created_at,
            isRead=False,
        )

    async def send_notification(
        self,
        data: Union[NotificationContent, Dict[str, Any]],
    ) -> Notification:
        """
        Create and store a notification from the current viewer.

        Tries the remote store first; on failure switches the session to
        local storage and writes there instead. The viewer's lists reflect
        the new notification when this returns.

        Args:
            data: Title, message, urgency, category, audience, optional expiry

        Returns:
            The stored notification

        Raises:
            AuthenticationRequiredError: If no viewer is signed in
        """
        if self.viewer is None:
            raise AuthenticationRequiredError()

        notification = self._build_notification(data)
        self.error = None

        if self._uses_remote():
            try:
                stored = await self._remote.append(notification)
                logger.info(f"Notification {stored.id} sent via Firebase")
                others = [n for n in self.all_notifications if n.id != stored.id]
                self.process_notifications([stored, *others])
                return stored
            except StoreError as e:
                logger.warning(f"Firebase push failed: {e}")
                self._switch_to_local()

        try:
            stored = await self._local.append(notification)
        except StoreError as e:
            self.error = str(e)
            return notification

        self.process_notifications(await self._local.list())
        return stored

    async def delete_notification(self, notification_id: str) -> None:
        """Hard-delete a notification from the active store."""
        if self._uses_remote():
            try:
                await self._remote.remove(notification_id)
                # The live feed refreshes the lists
                return
            except StoreError as e:
                logger.warning(f"Firebase delete failed: {e}")
                self._switch_to_local()

        try:
            await self._local.remove(notification_id)
        except StoreError as e:
            self.error = str(e)
            return

        self.process_notifications(await self._local.list())

    async def mark_as_read(self, notification_id: str) -> None:
        """Mark one notification read. Marking it again is a no-op."""
        if self._uses_remote():
            try:
                await self._remote.set_read(notification_id)
            except StoreError as e:
                logger.error(f"Error marking notification as read: {e}")
            return

        try:
            await self._local.set_read(notification_id)
        except StoreError as e:
            self.error = str(e)
            return

        self.process_notifications(await self._local.list())

    async def mark_all_as_read(self) -> None:
        """
        Mark everything the viewer can see as read.

        Remote writes go one id at a time with no rollback; local storage
        marks its whole list in one write.
        """
        if self._uses_remote():
            try:
                await self._remote.set_all_read([n.id for n in self.notifications])
            except StoreError as e:
                logger.error(f"Error marking all as read: {e}")
            return

        try:
            await self._local.set_all_read()
        except StoreError as e:
            self.error = str(e)
            return

        self.process_notifications(await self._local.list())

    # ─────────────────────────────────────────────────────────────
    # Session lifecycle
    # ─────────────────────────────────────────────────────────────

    async def login(self, viewer: Viewer) -> None:
        """Attach a viewer, reset per-login state, and start fetching."""
        self.viewer = viewer
        self.session.reset_login_state()
        await self.fetch_notifications()

    def close(self) -> None:
        """Stop listening for updates. Outstanding writes still complete."""
        self._close_subscription()

    def logout(self) -> None:
        """Stop listening and forget the viewer and their lists."""
        self.close()
        self.viewer = None
        self._clear()
        self.loading = False
