import os

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    GEMINI_API_KEY: str = os.environ.get(
        "GEMINI_API_KEY", os.environ.get("VITE_GEMINI_API_KEY", "")
    )
    GEMINI_MODEL: str = "gemini-2.5-flash"
    MODEL_TIMEOUT_SECONDS: float = 60.0
    BACKEND_BASE_URL: str = os.environ.get("BACKEND_BASE_URL", "")
    NEWS_PROXY_URL: str = os.environ.get("NEWS_PROXY_URL", "")
    PROXY_TIMEOUT_SECONDS: float = 10.0
    JWT_SECRET_KEY: str = os.environ.get("JWT_SECRET_KEY", "")
    MONGO_URI: str = os.environ.get("MONGO_URI", "")
    MONGO_DIRECT_URI: str = os.environ.get("MONGO_DIRECT_URI", "")
    MONGO_DB_NAME: str = "main"
    LOG_LEVEL: str = "INFO"


settings = Settings()
