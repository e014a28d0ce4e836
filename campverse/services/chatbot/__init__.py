"""
Assistant chat services.
"""

from campverse.services.chatbot.assistant_client import AssistantClient, AssistantUnavailableError
from campverse.services.chatbot.responder import KeywordResponder
from campverse.services.chatbot.chat_session import ChatSession, ChatSessionRegistry

__all__ = [
    "AssistantClient",
    "AssistantUnavailableError",
    "KeywordResponder",
    "ChatSession",
    "ChatSessionRegistry",
]
