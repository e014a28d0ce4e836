"""
Pydantic models for the assistant chat endpoints.
"""

from typing import Optional, List, Dict, Any
from pydantic import BaseModel, Field


# =============================================================================
# Request Schemas
# =============================================================================

class ChatMessageRequest(BaseModel):
    """POST /api/chatbot/message request."""
    message: str = Field(..., min_length=1, max_length=2000)
    sessionId: Optional[str] = None


# =============================================================================
# Response Schemas
# =============================================================================

class SuggestionItem(BaseModel):
    id: str
    text: str
    category: Optional[str] = None


class ChatMessageItem(BaseModel):
    id: str
    content: str
    isBot: bool
    timestamp: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class ChatSessionResponse(BaseModel):
    """Session state returned by the chat endpoints."""
    sessionId: str
    messages: List[ChatMessageItem]
    suggestions: List[SuggestionItem]
    isTyping: bool
