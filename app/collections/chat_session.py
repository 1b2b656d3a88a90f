from typing import List

from fastapi import HTTPException
from motor.motor_asyncio import AsyncIOMotorCollection

from app.core.mongodb import get_chat_session_collection
from app.models.chat_session import ChatSession


async def get_chat_sessions_from_user_id(user_id: str) -> List[ChatSession]:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    try:
        chats = chat_collection.find({"user_id": user_id}).sort("updated_at", -1)
        return [ChatSession.model_validate(chat) async for chat in chats]
    except Exception as e:
        raise HTTPException(
            status_code=500, detail=str(e) + " - get_chat_sessions_from_user_id"
        )


async def get_chat_session_from_id(chat_id: str, user_id: str) -> ChatSession:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    try:
        response = await chat_collection.find_one({"_id": chat_id})
        if not response:
            raise HTTPException(
                status_code=404,
                detail=f"ChatSession {chat_id} not found - get_chat_session_from_id",
            )
        chat = ChatSession.model_validate(response)
        if chat.user_id != user_id:
            raise HTTPException(
                status_code=403,
                detail="User does not have access to this chat session",
            )
        return chat
    except HTTPException:
        raise
    except Exception as e:
        raise HTTPException(status_code=500, detail=str(e))


async def save_chat_session(chat: ChatSession) -> ChatSession:
    """Upsert by id. Concurrent saves of one session: last write wins."""
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    try:
        payload = chat.model_dump(mode="json", exclude_none=True, by_alias=True)
        await chat_collection.replace_one({"_id": chat.id}, payload, upsert=True)
        response = await chat_collection.find_one({"_id": chat.id})
        return ChatSession.model_validate(response)
    except Exception:
        raise HTTPException(status_code=500, detail="Internal Server Error")


async def delete_chat_session(chat_id: str, user_id: str) -> bool:
    chat_collection: AsyncIOMotorCollection = get_chat_session_collection()
    try:
        chat_session = await chat_collection.find_one({"_id": chat_id})
        if not chat_session:
            raise HTTPException(
                status_code=404,
                detail=f"ChatSession {chat_id} not found.",
            )
        if chat_session.get("user_id") != user_id:
            raise HTTPException(
                status_code=403,
                detail=f"User {user_id} is not authorized to delete ChatSession {chat_id}.",
            )
        await chat_collection.delete_one({"_id": chat_id})
        return True
    except HTTPException:
        raise
    except Exception:
        raise HTTPException(status_code=500, detail="Internal Server Error")
