"""
Notification stores.

Two interchangeable backends behind one contract:

- RemoteNotificationStore: Firebase Realtime Database, live updates
- LocalNotificationStore: JSON list in durable local storage

The router picks one through a single "active strategy" cell and falls back
from remote to local when the remote store fails.
"""

import asyncio
import json
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, Dict, List, Optional

from pydantic import ValidationError

from common.database import LocalStorage, RealtimeDatabase
from campverse.schemas.notifications import Notification
from campverse.services.notifications.errors import StoreError

logger = logging.getLogger(__name__)

REMOTE = "remote"
LOCAL = "local"

NOTIFICATIONS_STORAGE_KEY = "campverse_notifications"

SnapshotHandler = Callable[[List[Notification]], Awaitable[None]]
ErrorHandler = Callable[[StoreError], Awaitable[None]]


# ─────────────────────────────────────────────────────────────────
# Encoding
# ─────────────────────────────────────────────────────────────────

def encode_notification(notification: Notification, include_id: bool = True) -> Dict[str, Any]:
    """Serialize a notification to a JSON-compatible dict."""
    exclude = None if include_id else {"id"}
    return notification.model_dump(mode="json", exclude=exclude, exclude_none=True)


def decode_notification(data: Any, notification_id: Optional[str] = None) -> Optional[Notification]:
    """
    Parse one stored entry.

    Args:
        data: Stored value
        notification_id: Store key, used as the id when given

    Returns:
        Notification, or None if the entry is malformed
    """
    if not isinstance(data, dict):
        return None
    if notification_id is not None:
        data = {**data, "id": notification_id}
    try:
        return Notification.model_validate(data)
    except ValidationError as e:
        logger.warning(f"Skipping malformed notification {data.get('id')}: {e.error_count()} errors")
        return None


def decode_snapshot(snapshot: Any) -> List[Notification]:
    """Flatten a keyed Realtime Database snapshot into notifications."""
    if not snapshot:
        return []
    if not isinstance(snapshot, dict):
        logger.warning(f"Unexpected notifications snapshot type: {type(snapshot).__name__}")
        return []

    notifications = []
    for key, value in snapshot.items():
        notification = decode_notification(value, notification_id=key)
        if notification is not None:
            notifications.append(notification)
    return notifications


def encode_notification_list(notifications: List[Notification]) -> str:
    return json.dumps([encode_notification(n) for n in notifications])


def decode_notification_list(raw: Optional[str]) -> List[Notification]:
    """Parse the local JSON list. Missing or corrupt data decodes to []."""
    if not raw:
        return []
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        logger.error(f"Error reading notifications from local storage: {e}")
        return []
    if not isinstance(data, list):
        logger.error("Local notifications value is not a list; ignoring it")
        return []

    notifications = []
    for item in data:
        notification = decode_notification(item)
        if notification is not None:
            notifications.append(notification)
    return notifications


# ─────────────────────────────────────────────────────────────────
# Store contract
# ─────────────────────────────────────────────────────────────────

class Subscription(ABC):
    """Handle for a live notification feed."""

    @abstractmethod
    def close(self) -> None:
        """Stop delivering snapshots. In-flight writes are not affected."""
        pass

    @property
    @abstractmethod
    def closed(self) -> bool:
        pass


class NotificationStore(ABC):
    """Contract shared by the remote and local notification stores."""

    kind: str

    @abstractmethod
    async def list(self) -> List[Notification]:
        """Read every notification this store serves."""
        pass

    @abstractmethod
    async def append(self, notification: Notification) -> Notification:
        """
        Persist a new notification.

        Returns:
            The stored notification (its id may be reassigned by the store)
        """
        pass

    @abstractmethod
    async def set_read(self, notification_id: str) -> None:
        """Mark one notification read."""
        pass

    @abstractmethod
    async def set_all_read(self, notification_ids: Optional[List[str]] = None) -> None:
        """
        Mark notifications read.

        Args:
            notification_ids: Ids to mark; None marks every stored notification
        """
        pass

    @abstractmethod
    async def remove(self, notification_id: str) -> None:
        """Hard-delete a notification."""
        pass

    @abstractmethod
    async def subscribe(
        self,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> Subscription:
        """
        Deliver the current list now and again whenever it changes.

        Raises:
            StoreError: If the first snapshot cannot be read
        """
        pass


# ─────────────────────────────────────────────────────────────────
# Remote store (Firebase Realtime Database)
# ─────────────────────────────────────────────────────────────────

def _close_registration(registration) -> None:
    try:
        registration.close()
    except Exception as e:
        logger.warning(f"Error closing notifications listener: {e}")


class RemoteSubscription(Subscription):
    """
    Wraps a firebase_admin ListenerRegistration.

    ListenerRegistration.close() joins the SDK listener thread, so when an
    event loop is running the close happens in a worker thread; `closing`
    holds that future.
    """

    def __init__(self):
        self._registration = None
        self._closed = False
        self.closing: Optional[asyncio.Future] = None

    def attach(self, registration) -> None:
        self._registration = registration
        if self._closed:
            self._release()

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._release()

    def _release(self) -> None:
        registration, self._registration = self._registration, None
        if registration is None:
            return
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            _close_registration(registration)
            return
        self.closing = loop.run_in_executor(None, _close_registration, registration)


class RemoteNotificationStore(NotificationStore):
    """
    Notifications under a Realtime Database path.

    Entries are stored without their id; the push key is the id. The
    firebase_admin SDK is blocking, so calls run in worker threads and
    listener events are handed back to the event loop.
    """

    kind = REMOTE

    def __init__(
        self,
        database: RealtimeDatabase,
        path: str = "notifications",
        limit: int = 100,
    ):
        """
        Initialize RemoteNotificationStore.

        Args:
            database: Connected RealtimeDatabase
            path: Collection path
            limit: Number of most recent notifications to serve
        """
        self._database = database
        self._path = path
        self._limit = limit

    def _ref(self):
        return self._database.reference(self._path)

    def _read_recent(self) -> List[Notification]:
        """Blocking read of the most recent notifications by createdAt."""
        snapshot = self._ref().order_by_child("createdAt").limit_to_last(self._limit).get()
        return decode_snapshot(snapshot)

    async def list(self) -> List[Notification]:
        try:
            return await asyncio.to_thread(self._read_recent)
        except Exception as e:
            raise StoreError(REMOTE, "read", e) from e

    async def append(self, notification: Notification) -> Notification:
        data = encode_notification(notification, include_id=False)
        try:
            new_ref = await asyncio.to_thread(self._ref().push, data)
        except Exception as e:
            raise StoreError(REMOTE, "push", e) from e

        logger.info(f"Pushed notification {new_ref.key} to {self._path}")
        return notification.model_copy(update={"id": new_ref.key})

    async def set_read(self, notification_id: str) -> None:
        try:
            ref = self._ref().child(notification_id).child("isRead")
            await asyncio.to_thread(ref.set, True)
        except Exception as e:
            raise StoreError(REMOTE, "set isRead", e) from e

    async def set_all_read(self, notification_ids: Optional[List[str]] = None) -> None:
        if notification_ids is None:
            notification_ids = [n.id for n in await self.list()]

        # One write per id; earlier writes stay applied if a later one fails
        for notification_id in notification_ids:
            await self.set_read(notification_id)

    async def remove(self, notification_id: str) -> None:
        try:
            await asyncio.to_thread(self._ref().child(notification_id).delete)
        except Exception as e:
            raise StoreError(REMOTE, "delete", e) from e

        logger.info(f"Deleted notification {notification_id} from {self._path}")

    async def subscribe(
        self,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> Subscription:
        loop = asyncio.get_running_loop()
        subscription = RemoteSubscription()

        initial = await self.list()
        await on_snapshot(initial)

        def _dispatch(coro) -> None:
            try:
                asyncio.run_coroutine_threadsafe(coro, loop)
            except RuntimeError:
                # Loop already closed; nothing left to notify
                coro.close()

        def _on_event(event) -> None:
            # Runs on the SDK listener thread
            if subscription.closed:
                return
            try:
                notifications = self._read_recent()
            except Exception as e:
                _dispatch(_deliver_error(StoreError(REMOTE, "listen", e)))
                return
            _dispatch(_deliver(notifications))

        async def _deliver(notifications: List[Notification]) -> None:
            if not subscription.closed:
                await on_snapshot(notifications)

        async def _deliver_error(error: StoreError) -> None:
            if not subscription.closed:
                await on_error(error)

        try:
            registration = await asyncio.to_thread(self._ref().listen, _on_event)
        except Exception as e:
            raise StoreError(REMOTE, "listen", e) from e

        subscription.attach(registration)
        logger.info(f"Listening for notifications at {self._path} (last {self._limit})")
        return subscription


# ─────────────────────────────────────────────────────────────────
# Local store (durable JSON list)
# ─────────────────────────────────────────────────────────────────

class LocalSubscription(Subscription):
    """The local store has no change feed; closing only flips the flag."""

    def __init__(self):
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        self._closed = True


class LocalNotificationStore(NotificationStore):
    """
    The whole notification list as one JSON array under a fixed key.

    Read state lives on the shared record, so every viewer using the same
    storage directory sees the same isRead values.
    """

    kind = LOCAL

    def __init__(self, storage: LocalStorage, key: str = NOTIFICATIONS_STORAGE_KEY):
        self._storage = storage
        self._key = key

    def read_all(self) -> List[Notification]:
        """Decode the stored list; unreadable data counts as empty."""
        try:
            raw = self._storage.get_item(self._key)
        except OSError as e:
            logger.error(f"Error reading notifications from local storage: {e}")
            return []
        return decode_notification_list(raw)

    def write_all(self, notifications: List[Notification]) -> None:
        """
        Encode and store the whole list.

        Raises:
            StoreError: If the list cannot be written
        """
        try:
            self._storage.set_item(self._key, encode_notification_list(notifications))
        except (OSError, TypeError, ValueError) as e:
            logger.error(f"Error saving notifications to local storage: {e}")
            raise StoreError(LOCAL, "write", e) from e

    async def list(self) -> List[Notification]:
        return self.read_all()

    async def append(self, notification: Notification) -> Notification:
        self.write_all([notification, *self.read_all()])
        logger.info(f"Saved notification {notification.id} to local storage")
        return notification

    async def set_read(self, notification_id: str) -> None:
        updated = [
            n.model_copy(update={"isRead": True}) if n.id == notification_id else n
            for n in self.read_all()
        ]
        self.write_all(updated)

    async def set_all_read(self, notification_ids: Optional[List[str]] = None) -> None:
        targets = set(notification_ids) if notification_ids is not None else None
        updated = [
            n.model_copy(update={"isRead": True}) if targets is None or n.id in targets else n
            for n in self.read_all()
        ]
        self.write_all(updated)

    async def remove(self, notification_id: str) -> None:
        self.write_all([n for n in self.read_all() if n.id != notification_id])
        logger.info(f"Deleted notification {notification_id} from local storage")

    async def subscribe(
        self,
        on_snapshot: SnapshotHandler,
        on_error: ErrorHandler,
    ) -> Subscription:
        await on_snapshot(self.read_all())
        return LocalSubscription()
