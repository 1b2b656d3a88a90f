from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field

from app.collections.chat_session import (
    delete_chat_session,
    get_chat_session_from_id,
    get_chat_sessions_from_user_id,
    save_chat_session,
)
from app.core.security import get_current_user_id
from app.models.chat_session import (
    DEFAULT_CHAT_TITLE,
    ChatSession,
    ChatTurn,
    ImagePart,
    Part,
    Role,
    TextPart,
    derive_title,
    history_from_chat_turns,
    parse_data_url,
)
from app.services.capabilities import CapabilityService, get_capability_service
from app.services.fallbacks import CHAT_FALLBACK_TEXT

router = APIRouter(prefix="/chats", tags=["Chat"])


class CreateChatRequest(BaseModel):
    title: Optional[str] = None


class SaveChatRequest(BaseModel):
    title: Optional[str] = None
    messages: List[ChatTurn] = Field(default_factory=list)


class SendMessageRequest(BaseModel):
    content: str = ""
    image: Optional[str] = Field(
        default=None, description="Data URL of an image to send with the message."
    )
    language: Optional[str] = None


class SendMessageResponse(BaseModel):
    reply: ChatTurn
    session: ChatSession
    fallback: bool = False


def _now() -> float:
    return datetime.now().timestamp()


@router.post("/", response_model=ChatSession, status_code=status.HTTP_201_CREATED)
async def create_chat_session(
    request: CreateChatRequest,
    user_id: str = Depends(get_current_user_id),
):
    """
    Creates a new, empty chat session for the authenticated user.
    """
    chat = ChatSession(user_id=user_id, title=request.title or DEFAULT_CHAT_TITLE)
    return await save_chat_session(chat)


@router.get("/", response_model=List[ChatSession])
async def get_user_chat_sessions(user_id: str = Depends(get_current_user_id)):
    """
    Get all chat sessions of the authenticated user, most recently updated first.
    """
    return await get_chat_sessions_from_user_id(user_id)


@router.get("/{chat_id}", response_model=ChatSession)
async def get_chat_session(chat_id: str, user_id: str = Depends(get_current_user_id)):
    return await get_chat_session_from_id(chat_id, user_id)


@router.put("/{chat_id}", response_model=ChatSession)
async def save_user_chat_session(
    chat_id: str,
    request: SaveChatRequest,
    user_id: str = Depends(get_current_user_id),
):
    """
    Create or replace a session. Concurrent saves are last-write-wins.
    """
    try:
        existing = await get_chat_session_from_id(chat_id, user_id)
    except HTTPException as e:
        if e.status_code != status.HTTP_404_NOT_FOUND:
            raise
        existing = None

    if request.title:
        title = request.title
    elif existing is not None:
        title = existing.title
    else:
        first_user_message = next(
            (m for m in request.messages if m.role == Role.USER), None
        )
        title = derive_title(first_user_message.content if first_user_message else "")

    chat = ChatSession(
        id=chat_id,
        user_id=user_id,
        title=title,
        messages=request.messages,
        updated_at=_now(),
    )
    return await save_chat_session(chat)


@router.post("/{chat_id}/messages", response_model=SendMessageResponse)
async def send_chat_message(
    chat_id: str,
    request: SendMessageRequest,
    user_id: str = Depends(get_current_user_id),
    service: CapabilityService = Depends(get_capability_service),
):
    """
    Send a farmer message to the assistant and persist the exchange.

    The user turn is always stored. The model turn is stored only when the
    assistant answered; otherwise a fallback reply is returned unsaved.
    """
    chat = await get_chat_session_from_id(chat_id, user_id)

    inline = parse_data_url(request.image) if request.image else None
    if not request.content.strip() and inline is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Message must contain text or an image",
        )

    parts: List[Part] = []
    if request.content:
        parts.append(TextPart(text=request.content))
    if inline is not None:
        parts.append(ImagePart(inline_data=inline))

    session = service.create_chat_session(
        request.language, history=history_from_chat_turns(chat.messages)
    )

    user_turn = ChatTurn(role=Role.USER, content=request.content, image=request.image)
    if not chat.messages:
        chat.title = derive_title(request.content)
    chat.messages.append(user_turn)

    result = await service.chat_turn(session, parts)
    if result.ok:
        reply = ChatTurn(role=Role.MODEL, content=result.value)
        chat.messages.append(reply)
    else:
        reply = ChatTurn(role=Role.MODEL, content=result.or_else(lambda: CHAT_FALLBACK_TEXT))

    chat.updated_at = _now()
    saved = await save_chat_session(chat)
    return SendMessageResponse(reply=reply, session=saved, fallback=not result.ok)


@router.delete("/{chat_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user_chat_session(
    chat_id: str, user_id: str = Depends(get_current_user_id)
):
    """
    Deletes a chat session. Only its owner may delete it.
    """
    await delete_chat_session(chat_id=chat_id, user_id=user_id)
    return
