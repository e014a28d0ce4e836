"""
CampVerse application settings.

Extends the base settings with notification and assistant configuration.
"""

from typing import Optional
from common.config import BaseAppSettings


class Settings(BaseAppSettings):
    """CampVerse-specific settings."""

    # ==========================================================================
    # Notifications
    # ==========================================================================
    # Realtime Database path holding the notification entries
    NOTIFICATIONS_PATH: str = "notifications"

    # Live subscription window (most recent N by createdAt)
    NOTIFICATION_FETCH_LIMIT: int = 100

    # Local storage key for the fallback notification list
    NOTIFICATIONS_STORAGE_KEY: str = "campverse_notifications"

    # Drop notifications whose expiresAt has passed (off: expiresAt is informational)
    NOTIFICATION_EXPIRY_FILTER: bool = False

    # Signed-in viewers with a live notification session; the least recently
    # served one is logged out beyond this
    NOTIFICATION_MAX_SESSIONS: int = 1000

    # ==========================================================================
    # Assistant
    # ==========================================================================
    ASSISTANT_API_URL: Optional[str] = None  # e.g. http://localhost:5000/api
    ASSISTANT_TIMEOUT_SECONDS: float = 30.0
    ASSISTANT_HISTORY_LIMIT: int = 10

    # ==========================================================================
    # Feature Flags
    # ==========================================================================
    FEATURE_NOTIFICATIONS: bool = True
    FEATURE_AI_CHATBOT: bool = True

    def allows_remote_store(self) -> bool:
        """Remote notification storage is used unless running local-only."""
        return self.has_firebase_database() and not self.is_local()


# Global settings instance
settings = Settings()
