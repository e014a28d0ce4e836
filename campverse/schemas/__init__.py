"""
Pydantic schemas for request/response validation and stored documents.
"""

from campverse.schemas.notifications import (
    TargetAudience,
    PostedBy,
    NotificationContent,
    Notification,
    NotificationCreateRequest,
    AlertItem,
    NotificationsResponse,
    UnreadCountResponse,
)
from campverse.schemas.chatbot import (
    ChatMessageRequest,
    SuggestionItem,
    ChatMessageItem,
    ChatSessionResponse,
)

__all__ = [
    # Notifications
    "TargetAudience",
    "PostedBy",
    "NotificationContent",
    "Notification",
    "NotificationCreateRequest",
    "AlertItem",
    "NotificationsResponse",
    "UnreadCountResponse",
    # Chatbot
    "ChatMessageRequest",
    "SuggestionItem",
    "ChatMessageItem",
    "ChatSessionResponse",
]
