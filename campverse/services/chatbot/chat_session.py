"""
Assistant chat sessions.

A ChatSession holds one conversation with the assistant: the message
history, whether a reply is pending, and the quick-reply suggestions shown
under the input box.
"""

import logging
import secrets
import time
from datetime import datetime, timezone
from typing import Dict, List, Optional

from common.utils.exceptions import ValidationException
from campverse.services.chatbot.assistant_client import AssistantClient, AssistantUnavailableError
from campverse.services.chatbot.responder import KeywordResponder
from campverse.services.notifications.identifiers import derive_branch, derive_year
from campverse.types import AssistantReply, ChatMessage, Suggestion, Viewer

logger = logging.getLogger(__name__)

ERROR_REPLY = "Sorry, I encountered an error. Please try again."

INITIAL_SUGGESTIONS = [
    "Show me around the dashboard",
    "Help with assignments",
    "Where is my schedule?",
    "How to pay fees?",
]


def generate_session_id() -> str:
    """Generate a chat session ID: chat_<epochMillis>_<hex>."""
    return f"chat_{int(time.time() * 1000)}_{secrets.token_hex(4)}"


class ChatSession:
    """
    One assistant conversation.

    Replies come from the assistant endpoint when one is configured; if it
    is missing or unreachable, the keyword responder answers instead.
    """

    def __init__(
        self,
        viewer: Optional[Viewer] = None,
        client: Optional[AssistantClient] = None,
        responder: Optional[KeywordResponder] = None,
        session_id: Optional[str] = None,
        history_limit: int = 10,
    ):
        """
        Initialize ChatSession.

        Args:
            viewer: Signed-in viewer, None for guests
            client: Assistant endpoint client, None to answer offline only
            responder: Offline responder
            session_id: Existing session ID to resume
            history_limit: Number of recent messages sent as context
        """
        self.viewer = viewer
        self.session_id = session_id or generate_session_id()
        self._client = client
        self._responder = responder or KeywordResponder()
        self._history_limit = history_limit

        self.messages: List[ChatMessage] = []
        self.is_typing = False
        self.is_open = False
        self.suggestions: List[Suggestion] = self._initial_suggestions()

    @staticmethod
    def _initial_suggestions() -> List[Suggestion]:
        return [Suggestion(id=str(i), text=text) for i, text in enumerate(INITIAL_SUGGESTIONS, start=1)]

    # ─────────────────────────────────────────────────────────────
    # Context
    # ─────────────────────────────────────────────────────────────

    @property
    def user_role(self) -> str:
        return self.viewer.role if self.viewer else "guest"

    def user_details(self) -> Dict[str, str]:
        if self.viewer is None:
            return {}
        details = {
            "name": self.viewer.name,
            "rollNumber": self.viewer.college_id,
            "department": derive_branch(self.viewer.college_id),
            "year": derive_year(self.viewer.college_id),
        }
        return {key: value for key, value in details.items() if value}

    def conversation_history(self) -> List[Dict[str, str]]:
        """Recent messages as {role, content}, oldest first."""
        recent = self.messages[-self._history_limit:] if self._history_limit > 0 else []
        return [
            {"role": "assistant" if m.is_bot else "user", "content": m.content}
            for m in recent
        ]

    # ─────────────────────────────────────────────────────────────
    # Messages
    # ─────────────────────────────────────────────────────────────

    def _add_message(self, content: str, is_bot: bool, metadata: Optional[Dict] = None) -> ChatMessage:
        message = ChatMessage(
            id=f"{'bot' if is_bot else 'user'}_{int(time.time() * 1000)}_{secrets.token_hex(3)}",
            content=content,
            is_bot=is_bot,
            timestamp=datetime.now(timezone.utc),
            metadata=metadata or {},
        )
        self.messages.append(message)
        return message

    async def _get_reply(self, text: str, history: List[Dict[str, str]]) -> AssistantReply:
        if self._client is None:
            return self._responder.respond(text)

        try:
            return await self._client.send_message(
                message=text,
                session_id=self.session_id,
                user_role=self.user_role,
                user_id=self.viewer.uid if self.viewer else None,
                user_details=self.user_details(),
                conversation_history=history,
            )
        except AssistantUnavailableError as e:
            logger.warning(f"Assistant unavailable, answering offline: {e}")
            return self._responder.respond(text)

    async def send_message(self, text: str) -> ChatMessage:
        """
        Send a user message and record the assistant's reply.

        Args:
            text: Message text

        Returns:
            The bot message that was added

        Raises:
            ValidationException: If the message is empty
        """
        text = (text or "").strip()
        if not text:
            raise ValidationException("Message is required", code="EMPTY_MESSAGE")

        history = self.conversation_history()
        self._add_message(text, is_bot=False)
        self.is_typing = True

        try:
            reply = await self._get_reply(text, history)
            metadata = dict(reply.metadata)
            if reply.navigation_target:
                metadata["navigationTarget"] = reply.navigation_target
            if reply.suggestions:
                self.suggestions = reply.suggestions
                metadata["suggestions"] = [s.to_dict() for s in reply.suggestions]
            return self._add_message(reply.content, is_bot=True, metadata=metadata)
        except Exception as e:
            logger.error(f"Error getting assistant response: {e}")
            return self._add_message(ERROR_REPLY, is_bot=True)
        finally:
            self.is_typing = False

    async def select_suggestion(self, suggestion: Suggestion) -> ChatMessage:
        """Send a suggestion's text as if the user had typed it."""
        return await self.send_message(suggestion.text)

    # ─────────────────────────────────────────────────────────────
    # Window state
    # ─────────────────────────────────────────────────────────────

    def toggle(self) -> bool:
        self.is_open = not self.is_open
        return self.is_open

    def close(self) -> None:
        self.is_open = False

    def reset(self) -> None:
        """Clear the conversation and restore the initial suggestions."""
        self.messages = []
        self.is_typing = False
        self.suggestions = self._initial_suggestions()

    def to_dict(self) -> Dict:
        return {
            "sessionId": self.session_id,
            "messages": [m.to_dict() for m in self.messages],
            "suggestions": [s.to_dict() for s in self.suggestions],
            "isTyping": self.is_typing,
        }


class ChatSessionRegistry:
    """
    Keeps chat sessions for signed-in viewers (by uid) and guests (by session ID).
    """

    def __init__(
        self,
        client: Optional[AssistantClient] = None,
        history_limit: int = 10,
        max_sessions: int = 1000,
    ):
        self._client = client
        self._history_limit = history_limit
        self._max_sessions = max_sessions
        self._sessions: Dict[str, ChatSession] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def _key(viewer: Optional[Viewer], session_id: Optional[str]) -> Optional[str]:
        if viewer is not None:
            return f"user:{viewer.uid}"
        if session_id:
            return f"guest:{session_id}"
        return None

    def get(self, viewer: Optional[Viewer], session_id: Optional[str] = None) -> Optional[ChatSession]:
        key = self._key(viewer, session_id)
        return self._sessions.get(key) if key else None

    def get_or_create(self, viewer: Optional[Viewer], session_id: Optional[str] = None) -> ChatSession:
        existing = self.get(viewer, session_id)
        if existing is not None:
            return existing

        session = ChatSession(
            viewer=viewer,
            client=self._client,
            session_id=session_id if viewer is None else None,
            history_limit=self._history_limit,
        )

        if len(self._sessions) >= self._max_sessions:
            # Dicts keep insertion order: drop the oldest session
            oldest = next(iter(self._sessions))
            del self._sessions[oldest]

        key = self._key(viewer, session.session_id)
        self._sessions[key] = session
        logger.info(f"Created chat session {session.session_id} ({session.user_role})")
        return session

    def end(self, viewer: Optional[Viewer], session_id: Optional[str] = None) -> bool:
        key = self._key(viewer, session_id)
        if key and key in self._sessions:
            del self._sessions[key]
            return True
        return False
