from __future__ import annotations

import os
from functools import lru_cache
from pydantic import Field, AnyHttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    # App
    APP_NAME: str = "MoodMate API"
    ENV: str = Field(default=os.getenv("ENV", "local"))
    DEBUG: bool = Field(default=os.getenv("DEBUG", "false").lower() == "true")
    LOG_FORMAT: str = Field(default=os.getenv("LOG_FORMAT", "console"))  # "console" | "json"
    ALLOWED_ORIGINS: str | None = None  # comma-separated
    DEV_BYPASS_AUTH: bool = False

    # Gemini / LLM
    GEMINI_API_KEY: str | None = None
    GEMINI_MODEL: str = "gemini-2.5-flash"
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta"
    GEMINI_TEMPERATURE: float = 0.8
    GEMINI_MAX_OUTPUT_TOKENS: int = 1000
    GEMINI_TIMEOUT_S: float = 25.0

    # Classifier / prompt context
    HISTORY_WINDOW: int = 5

    # External content
    NEWSAPI_KEY: str | None = None
    NEWS_TIMEOUT_S: float = 8.0
    SPOTIFY_CLIENT_ID: str | None = None
    SPOTIFY_CLIENT_SECRET: str | None = None
    MUSIC_TRIGGER_ENABLED: bool = True

    # Supabase
    SUPABASE_URL: AnyHttpUrl | None = None
    SUPABASE_SERVICE_ROLE: str | None = None
    SUPABASE_ANON_KEY: str | None = None
    SUPABASE_SCHEMA: str = "public"
    SUPABASE_TIMEOUT_S: float = 15.0

    # Chat log persistence
    CHATLOG_TABLE: str = "ChatLog"
    CHATLOG_BLOCKING: bool = False  # await the insert instead of backgrounding it
    PERSIST_ON_MISSING_KEY: bool = False
    REQUIRE_USER_ID_FOR_PERSISTENCE: bool = True

    model_config = SettingsConfigDict(
        env_file=(".env.backend", ".env.local", ".env"),
        env_file_encoding="utf-8",
        case_sensitive=True,
        extra="ignore",
    )

    def allowed_origins(self) -> list[str]:
        origins = ["http://localhost:3000", "http://localhost:3001"]
        if self.ALLOWED_ORIGINS:
            origins.extend(o.strip() for o in self.ALLOWED_ORIGINS.split(",") if o.strip())
        return origins


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """
    Cached Settings instance. Call anywhere; tests clear it with
    `get_settings.cache_clear()` after changing env.
    """
    return Settings()
