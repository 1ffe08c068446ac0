"""Centralised settings for speech_intent, loaded from env / .env."""

from __future__ import annotations

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class SpeechIntentSettings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="SPEECH_INTENT_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # --- general ---
    app_name: str = "speech-intent"
    env: str = "development"  # development / production
    debug: bool = False
    log_level: str = "INFO"

    # --- HTTP ---
    host: str = "0.0.0.0"
    port: int = 3000
    cors_origins: list[str] = Field(default_factory=lambda: ["*"])

    # --- database (any SQLAlchemy async URL, e.g. postgresql+asyncpg://...) ---
    database_url: str = Field(min_length=1)

    # --- language model ---
    llm_provider: str = "gemini"  # gemini (google-genai SDK) / litellm
    gemini_api_key: str = Field(min_length=1)
    model: str = "gemini-1.5-flash"  # litellm wants a prefixed id, e.g. gemini/gemini-1.5-flash
    max_tokens: int = 1024
    temperature: float = 0.2

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache
def get_settings() -> SpeechIntentSettings:
    return SpeechIntentSettings()
