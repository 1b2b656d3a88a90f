import logging
from contextlib import asynccontextmanager

from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.api.rest_routes.ai import router as ai_router
from app.api.rest_routes.chat import router as chat_router
from app.api.rest_routes.proxy import router as proxy_router
from app.core.config import settings
from app.core.mongodb import close_mongo_client, init_mongo_client

load_dotenv()

logging.basicConfig(
    level=settings.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    if not settings.GEMINI_API_KEY:
        logger.error("GEMINI_API_KEY is missing, model calls will fail")
    await init_mongo_client()
    yield
    await close_mongo_client()


app = FastAPI(lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(ai_router)
app.include_router(proxy_router)
app.include_router(chat_router)


@app.get("/")
async def root():
    return {"message": "Welcome to Kisan Setu AI!"}
