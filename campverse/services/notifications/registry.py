"""
Per-viewer notification router registry.

The HTTP layer serves many viewers from one process; each signed-in viewer
gets their own router, login session and alert queue, all sharing the same
two stores.
"""

import logging
from dataclasses import replace
from typing import Callable, Dict, Optional

from campverse.services.notifications.alerts import QueuedAlertSink
from campverse.services.notifications.notification_router import NotificationRouter, now_ms
from campverse.services.notifications.session import LoginSession
from campverse.services.notifications.stores import NotificationStore
from campverse.types import Viewer

logger = logging.getLogger(__name__)


class NotificationRouterRegistry:
    """
    Creates, reuses and tears down one NotificationRouter per viewer.

    At most `max_routers` sessions are kept; starting one more logs out the
    viewer who was served least recently.
    """

    def __init__(
        self,
        local_store: NotificationStore,
        remote_store: Optional[NotificationStore] = None,
        allow_remote: bool = True,
        expiry_filter: bool = False,
        clock: Callable[[], int] = now_ms,
        max_routers: int = 1000,
    ):
        self._local_store = local_store
        self._remote_store = remote_store
        self._allow_remote = allow_remote
        self._expiry_filter = expiry_filter
        self._clock = clock
        self._max_routers = max_routers
        self._routers: Dict[str, NotificationRouter] = {}

    def __len__(self) -> int:
        return len(self._routers)

    def get(self, uid: str) -> Optional[NotificationRouter]:
        return self._routers.get(uid)

    async def get_or_login(self, viewer: Viewer) -> NotificationRouter:
        """
        Return the viewer's router, logging them in on first use.

        A returning viewer's lists are brought up to date: re-read from
        local storage on the local strategy, and recomputed if their claims
        (role, college ID, section) changed since login.
        """
        router = self._routers.pop(viewer.uid, None)
        if router is not None:
            # Reinserting keeps the dict ordered least recently used first
            self._routers[viewer.uid] = router
            if router.viewer != viewer:
                router.viewer = replace(viewer)
                router.process_notifications(router.all_notifications)
            await router.refresh()
            return router

        while len(self._routers) >= self._max_routers:
            self._evict_oldest()

        router = NotificationRouter(
            local_store=self._local_store,
            remote_store=self._remote_store,
            session=LoginSession(),
            alert_sink=QueuedAlertSink(),
            allow_remote=self._allow_remote,
            expiry_filter=self._expiry_filter,
            clock=self._clock,
        )
        self._routers[viewer.uid] = router
        await router.login(replace(viewer))
        logger.info(f"Started notification session for {viewer.uid} ({viewer.role})")
        return router

    def _evict_oldest(self) -> None:
        uid = next(iter(self._routers))
        self.logout(uid)
        logger.info(f"Evicted notification session for {uid} (limit {self._max_routers})")

    def logout(self, uid: str) -> bool:
        """
        End a viewer's session.

        Returns:
            True if a session existed
        """
        router = self._routers.pop(uid, None)
        if router is None:
            return False
        router.logout()
        logger.info(f"Ended notification session for {uid}")
        return True

    def close_all(self) -> None:
        for uid in list(self._routers):
            self.logout(uid)
