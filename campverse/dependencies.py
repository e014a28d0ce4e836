"""
FastAPI dependencies for CampVerse.

Provides dependency injection for all services.
"""

import logging
from typing import Annotated, Any, Dict, Optional

from fastapi import Depends

from common.auth import AuthProvider, FirebaseAuth
from common.auth.dependencies import create_auth_dependency, create_optional_auth_dependency
from common.database import LocalStorage, RealtimeDatabase
from common.utils.exceptions import (
    ForbiddenException,
    ServiceUnavailableException,
    UnauthorizedException,
)

from campverse.config import Settings
from campverse.services.chatbot import AssistantClient, ChatSessionRegistry
from campverse.services.notifications import (
    LocalNotificationStore,
    NotificationRouterRegistry,
    RemoteNotificationStore,
)
from campverse.types import Viewer

logger = logging.getLogger(__name__)

SENDER_ROLES = ("admin", "faculty")


# ─────────────────────────────────────────────────────────────────
# Global service instances
# ─────────────────────────────────────────────────────────────────

# Auth
_auth_provider: Optional[AuthProvider] = None

# Notifications
_notification_registry: Optional[NotificationRouterRegistry] = None

# Assistant
_chat_registry: Optional[ChatSessionRegistry] = None


# ─────────────────────────────────────────────────────────────────
# Initialization functions
# ─────────────────────────────────────────────────────────────────

def init_auth_services(settings: Settings) -> None:
    """Initialize auth services."""
    global _auth_provider

    _auth_provider = FirebaseAuth(
        credentials_path=settings.FIREBASE_CREDENTIALS_PATH,
        project_id=settings.FIREBASE_PROJECT_ID,
        database_url=settings.FIREBASE_DATABASE_URL,
    )


def init_notification_services(
    settings: Settings,
    realtime_db: Optional[RealtimeDatabase] = None,
    storage: Optional[LocalStorage] = None,
) -> None:
    """
    Initialize notification services.

    Args:
        settings: Application settings
        realtime_db: Connected Realtime Database, None for local-only
        storage: Local storage (defaults to LOCAL_STORAGE_DIR)
    """
    global _notification_registry

    local_store = LocalNotificationStore(
        storage or LocalStorage(settings.LOCAL_STORAGE_DIR),
        key=settings.NOTIFICATIONS_STORAGE_KEY,
    )

    remote_store = None
    if realtime_db is not None and realtime_db.is_connected:
        remote_store = RemoteNotificationStore(
            realtime_db,
            path=settings.NOTIFICATIONS_PATH,
            limit=settings.NOTIFICATION_FETCH_LIMIT,
        )

    _notification_registry = NotificationRouterRegistry(
        local_store=local_store,
        remote_store=remote_store,
        allow_remote=settings.allows_remote_store(),
        expiry_filter=settings.NOTIFICATION_EXPIRY_FILTER,
        max_routers=settings.NOTIFICATION_MAX_SESSIONS,
    )
    logger.info(
        f"Notification services ready (remote={'on' if remote_store and settings.allows_remote_store() else 'off'})"
    )


def init_chatbot_services(settings: Settings) -> None:
    """Initialize assistant services."""
    global _chat_registry

    client = None
    if settings.ASSISTANT_API_URL:
        client = AssistantClient(
            base_url=settings.ASSISTANT_API_URL,
            timeout=settings.ASSISTANT_TIMEOUT_SECONDS,
        )

    _chat_registry = ChatSessionRegistry(
        client=client,
        history_limit=settings.ASSISTANT_HISTORY_LIMIT,
    )


def init_all_services(
    settings: Settings,
    realtime_db: Optional[RealtimeDatabase] = None,
) -> None:
    """
    Initialize all services at application startup.

    Args:
        settings: Application settings
        realtime_db: Connected Realtime Database, None for local-only
    """
    init_auth_services(settings)

    if settings.FEATURE_NOTIFICATIONS:
        init_notification_services(settings, realtime_db)
    else:
        logger.info("Notifications disabled by FEATURE_NOTIFICATIONS")

    if settings.FEATURE_AI_CHATBOT:
        init_chatbot_services(settings)
    else:
        logger.info("Assistant disabled by FEATURE_AI_CHATBOT")


def shutdown_services() -> None:
    """Close live notification listeners and drop service instances."""
    global _auth_provider, _notification_registry, _chat_registry

    if _notification_registry is not None:
        _notification_registry.close_all()

    _auth_provider = None
    _notification_registry = None
    _chat_registry = None


# ─────────────────────────────────────────────────────────────────
# Service getters
# ─────────────────────────────────────────────────────────────────

def get_auth_provider() -> AuthProvider:
    """Get auth provider instance."""
    if _auth_provider is None:
        raise RuntimeError("Auth services not initialized.")
    return _auth_provider


def get_notification_registry() -> NotificationRouterRegistry:
    """Get notification router registry."""
    if _notification_registry is None:
        raise ServiceUnavailableException(
            message="Notifications are not available",
            code="NOTIFICATIONS_DISABLED",
        )
    return _notification_registry


def get_chat_registry() -> ChatSessionRegistry:
    """Get chat session registry."""
    if _chat_registry is None:
        raise ServiceUnavailableException(
            message="Assistant is not available",
            code="CHATBOT_DISABLED",
        )
    return _chat_registry


# ─────────────────────────────────────────────────────────────────
# Auth dependencies
# ─────────────────────────────────────────────────────────────────

get_current_claims = create_auth_dependency(lambda: get_auth_provider())
get_optional_claims = create_optional_auth_dependency(lambda: get_auth_provider())


async def require_viewer(
    claims: Annotated[Dict[str, Any], Depends(get_current_claims)]
) -> Viewer:
    """Dependency that requires a signed-in viewer."""
    try:
        return Viewer.from_claims(claims)
    except ValueError as e:
        logger.warning(f"Rejected token for {claims.get('uid')}: {e}")
        raise UnauthorizedException(message=str(e), code="INVALID_TOKEN")


async def optional_viewer(
    claims: Annotated[Optional[Dict[str, Any]], Depends(get_optional_claims)]
) -> Optional[Viewer]:
    """Dependency that returns the viewer if signed in, None for guests."""
    if not claims:
        return None
    try:
        return Viewer.from_claims(claims)
    except ValueError as e:
        logger.warning(f"Treating token for {claims.get('uid')} as guest: {e}")
        return None


async def require_sender(
    viewer: Annotated[Viewer, Depends(require_viewer)]
) -> Viewer:
    """Dependency that requires a viewer allowed to send notifications."""
    if viewer.role not in SENDER_ROLES:
        raise ForbiddenException(
            message="Only faculty and admins can send notifications",
            code="SENDER_ROLE_REQUIRED",
        )
    return viewer


async def require_admin(
    viewer: Annotated[Viewer, Depends(require_viewer)]
) -> Viewer:
    """Dependency that requires an admin viewer."""
    if viewer.role != "admin":
        raise ForbiddenException(
            message="Admin access required",
            code="ADMIN_REQUIRED",
        )
    return viewer
