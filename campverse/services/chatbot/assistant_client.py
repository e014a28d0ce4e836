"""
HTTP client for the assistant endpoint.

The language backend is opaque: this client posts the message with the
session context and parses the reply envelope.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from campverse.types import AssistantReply, Suggestion

logger = logging.getLogger(__name__)


class AssistantUnavailableError(Exception):
    """The assistant endpoint could not produce a reply."""


class AssistantClient:
    """
    Posts chat messages to `<base_url>/chatbot/message`.

    Request body:
        {message, sessionId, userId, userRole, userDetails, conversationHistory}

    Response body:
        {success, response: {content, suggestions, navigationTarget, metadata}}
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize AssistantClient.

        Args:
            base_url: API base URL, e.g. http://localhost:5000/api
            timeout: Request timeout in seconds
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    async def send_message(
        self,
        message: str,
        session_id: str,
        user_role: str,
        user_id: Optional[str] = None,
        user_details: Optional[Dict[str, Any]] = None,
        conversation_history: Optional[List[Dict[str, str]]] = None,
    ) -> AssistantReply:
        """
        Send a message and return the assistant's reply.

        Raises:
            AssistantUnavailableError: On transport errors, non-2xx status,
                or a reply without content
        """
        payload = {
            "message": message,
            "sessionId": session_id,
            "userId": user_id,
            "userRole": user_role,
            "userDetails": user_details or {},
            "conversationHistory": conversation_history or [],
        }

        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    f"{self._base_url}/chatbot/message",
                    json=payload,
                )
        except httpx.HTTPError as e:
            logger.error(f"Assistant request error: {e}")
            raise AssistantUnavailableError(f"Failed to reach assistant: {e}") from e

        if response.status_code >= 400:
            logger.error(f"Assistant API error: {response.status_code}")
            raise AssistantUnavailableError(f"Assistant returned {response.status_code}")

        try:
            body = response.json()
        except ValueError as e:
            raise AssistantUnavailableError("Assistant returned invalid JSON") from e

        return self._parse_reply(body)

    @staticmethod
    def _parse_reply(body: Any) -> AssistantReply:
        reply = body.get("response") if isinstance(body, dict) else None
        if not isinstance(reply, dict) or not reply.get("content"):
            raise AssistantUnavailableError("Assistant reply has no content")

        suggestions = []
        for i, item in enumerate(reply.get("suggestions") or [], start=1):
            if isinstance(item, dict) and item.get("text"):
                suggestions.append(Suggestion(
                    id=str(item.get("id") or i),
                    text=item["text"],
                    category=item.get("category"),
                ))

        navigation_target = reply.get("navigationTarget")
        if not isinstance(navigation_target, dict):
            navigation_target = None

        return AssistantReply(
            content=reply["content"],
            suggestions=suggestions,
            navigation_target=navigation_target,
            metadata=reply.get("metadata") or {},
        )
