import logging
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorCollection, AsyncIOMotorDatabase

from app.core.config import settings

logger = logging.getLogger(__name__)

CHAT_SESSION_COLLECTION = "chat_session"

_client: Optional[AsyncIOMotorClient] = None


def _database() -> AsyncIOMotorDatabase:
    # Connects lazily so chat routes work even if the lifespan hook did not run.
    global _client
    if _client is None:
        mongo_uri = settings.MONGO_DIRECT_URI or settings.MONGO_URI
        _client = AsyncIOMotorClient(mongo_uri, uuidRepresentation="standard")
        logger.info("Connected to MongoDB database %s", settings.MONGO_DB_NAME)
    return _client[settings.MONGO_DB_NAME]


async def init_mongo_client() -> None:
    _database()


async def close_mongo_client() -> None:
    global _client
    if _client is not None:
        _client.close()
        _client = None


def get_chat_session_collection() -> AsyncIOMotorCollection:
    return _database()[CHAT_SESSION_COLLECTION]
