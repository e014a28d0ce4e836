"""
Database module - Firebase Realtime Database access and durable local storage.

Usage:
    from common.database import RealtimeDatabase, LocalStorage

    rtdb = RealtimeDatabase()
    rtdb.connect(database_url, credentials_path)
    set_realtime_database(rtdb)

    storage = LocalStorage(".campverse_storage")
"""

from common.database.firebase_rtdb import (
    RealtimeDatabase,
    # Singleton management
    set_realtime_database,
    get_realtime_database,
)
from common.database.local_storage import LocalStorage

__all__ = [
    "RealtimeDatabase",
    "LocalStorage",
    # Singleton management
    "set_realtime_database",
    "get_realtime_database",
]
