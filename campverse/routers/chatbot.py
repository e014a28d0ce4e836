"""
Assistant chat endpoints.

Open to guests; signed-in viewers get their role and college details sent
along as context.
"""

from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query

from common.utils import success_response

from campverse.dependencies import get_chat_registry, optional_viewer
from campverse.schemas.chatbot import ChatMessageRequest, ChatMessageItem, ChatSessionResponse
from campverse.services.chatbot import ChatSession
from campverse.types import Viewer


router = APIRouter(prefix="/chatbot", tags=["Assistant"])


def _session_state(session: ChatSession) -> dict:
    return ChatSessionResponse(**session.to_dict()).model_dump(exclude_none=True)


@router.post("/message")
async def send_message(
    body: ChatMessageRequest,
    viewer: Annotated[Optional[Viewer], Depends(optional_viewer)]
):
    """
    Send a message to the assistant.

    Guests pass the sessionId from the previous reply to keep their
    conversation going.

    Returns:
        The bot reply and the updated session
    """
    registry = get_chat_registry()
    session = registry.get_or_create(viewer, body.sessionId)

    reply = await session.send_message(body.message)

    return success_response({
        "reply": ChatMessageItem(**reply.to_dict()).model_dump(),
        "session": _session_state(session),
    })


@router.get("/session")
async def get_session(
    viewer: Annotated[Optional[Viewer], Depends(optional_viewer)],
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
):
    """Get the current conversation, starting one if needed."""
    registry = get_chat_registry()
    session = registry.get_or_create(viewer, session_id)

    return success_response(_session_state(session))


@router.delete("/session")
async def end_session(
    viewer: Annotated[Optional[Viewer], Depends(optional_viewer)],
    session_id: Optional[str] = Query(default=None, alias="sessionId"),
):
    """End the current conversation."""
    registry = get_chat_registry()
    ended = registry.end(viewer, session_id)

    return success_response({"ended": ended})
