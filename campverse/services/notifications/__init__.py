"""
Notification services: audience targeting, read tracking, dual-store delivery.
"""

from campverse.services.notifications.errors import (
    NotificationError,
    AuthenticationRequiredError,
    StoreError,
)
from campverse.services.notifications.identifiers import (
    derive_branch,
    derive_year,
    derive_section,
)
from campverse.services.notifications.relevance import is_relevant
from campverse.services.notifications.stores import (
    LOCAL,
    REMOTE,
    NotificationStore,
    RemoteNotificationStore,
    LocalNotificationStore,
)
from campverse.services.notifications.alerts import AlertSink, QueuedAlertSink, LoggingAlertSink
from campverse.services.notifications.session import LoginSession
from campverse.services.notifications.notification_router import NotificationRouter
from campverse.services.notifications.registry import NotificationRouterRegistry

__all__ = [
    "NotificationError",
    "AuthenticationRequiredError",
    "StoreError",
    "derive_branch",
    "derive_year",
    "derive_section",
    "is_relevant",
    "LOCAL",
    "REMOTE",
    "NotificationStore",
    "RemoteNotificationStore",
    "LocalNotificationStore",
    "AlertSink",
    "QueuedAlertSink",
    "LoggingAlertSink",
    "LoginSession",
    "NotificationRouter",
    "NotificationRouterRegistry",
]
