"""
CampVerse API Routers.

All routers are imported here for easy access.
"""

from campverse.routers.notifications import router as notifications_router
from campverse.routers.chatbot import router as chatbot_router

__all__ = [
    "notifications_router",
    "chatbot_router",
]
