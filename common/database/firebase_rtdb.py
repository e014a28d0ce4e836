"""
Firebase Realtime Database connection manager.

Wraps firebase_admin.db so application code can ask for references by path
without caring how the Firebase app was initialized.

Example:
    from common.database import RealtimeDatabase

    rtdb = RealtimeDatabase()
    rtdb.connect(
        database_url="https://campverse-demo-default-rtdb.firebaseio.com",
        credentials_path="serviceAccount.json",
    )

    notifications = rtdb.reference("notifications")

Singleton access:
    from common.database import set_realtime_database, get_realtime_database
"""

import logging
from typing import Any, Dict, Optional

import firebase_admin
from firebase_admin import db

from common.firebase_app import get_firebase_app

logger = logging.getLogger(__name__)

# ─────────────────────────────────────────────────────────────────
# Singleton instance
# ─────────────────────────────────────────────────────────────────

_realtime_database: Optional["RealtimeDatabase"] = None


class RealtimeDatabase:
    """Firebase Realtime Database connection manager."""

    def __init__(self):
        self._app: Optional[firebase_admin.App] = None
        self._database_url: Optional[str] = None

    def connect(
        self,
        database_url: str,
        credentials_path: Optional[str] = None,
        credentials_dict: Optional[Dict[str, Any]] = None,
        project_id: Optional[str] = None,
    ) -> None:
        """
        Initialize the Firebase app (if needed) and bind to a database URL.

        Args:
            database_url: Realtime Database URL
            credentials_path: Path to service account JSON file
            credentials_dict: Service account credentials as dict
            project_id: Firebase project ID
        """
        logger.info(f"Connecting to Firebase Realtime Database: {database_url}")

        try:
            self._app = get_firebase_app(
                credentials_path=credentials_path,
                credentials_dict=credentials_dict,
                project_id=project_id,
                database_url=database_url,
            )
            self._database_url = database_url
            logger.info("Connected to Firebase Realtime Database")
        except Exception as e:
            logger.error(f"Failed to connect to Firebase Realtime Database: {e}")
            raise

    def disconnect(self) -> None:
        """Forget the bound app. The Firebase app itself stays alive for auth."""
        if self._app:
            logger.info(f"Disconnecting from Firebase Realtime Database: {self._database_url}")
            self._app = None
            self._database_url = None

    @property
    def is_connected(self) -> bool:
        """Check if a database URL is bound."""
        return self._app is not None

    @property
    def database_url(self) -> Optional[str]:
        """Get the bound database URL."""
        return self._database_url

    def reference(self, path: str = "/") -> db.Reference:
        """
        Get a database reference for a path.

        Args:
            path: Slash-separated database path

        Returns:
            firebase_admin.db.Reference
        """
        if not self._app:
            logger.error("Attempted to get reference without database connection")
            raise RuntimeError("Realtime Database not connected")
        logger.debug(f"Getting reference: {path}")
        return db.reference(path, app=self._app, url=self._database_url)


# ─────────────────────────────────────────────────────────────────
# Singleton initialization and getters
# ─────────────────────────────────────────────────────────────────

def set_realtime_database(database: Optional["RealtimeDatabase"]) -> None:
    """
    Set (or clear) the Realtime Database singleton.

    Args:
        database: RealtimeDatabase instance, or None when running local-only
    """
    global _realtime_database
    _realtime_database = database
    logger.info("Realtime Database singleton set")


def get_realtime_database() -> Optional["RealtimeDatabase"]:
    """
    Get the Realtime Database singleton.

    Returns:
        RealtimeDatabase instance, or None when no remote database is configured
    """
    return _realtime_database
