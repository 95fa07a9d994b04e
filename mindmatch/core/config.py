"""
Configuration module - loads all env vars using pydantic-settings.
This is the SINGLE SOURCE OF TRUTH for all config values.
"""

from functools import lru_cache
from pydantic_settings import BaseSettings, SettingsConfigDict


# Hosts used by the sample .env files; treated as "not configured"
PLACEHOLDER_MARKERS = ("placeholder", "xyzcompany")


class Settings(BaseSettings):
    # Relational store (Supabase Postgres or any Postgres URL).
    # Empty or placeholder => in-memory mock backend.
    database_url: str = ""
    db_pool_size: int = 5
    db_max_overflow: int = 10

    # Text generation (OpenAI-compatible)
    openai_api_key: str = ""
    openai_base_url: str = "https://api.openai.com/v1"
    openai_model: str = "gpt-4"

    # Sentiment analysis (HuggingFace inference API)
    huggingface_api_key: str = ""
    huggingface_model_url: str = (
        "https://api-inference.huggingface.co/models/"
        "cardiffnlp/twitter-roberta-base-sentiment-latest"
    )
    http_timeout_seconds: float = 30.0

    # JWT sessions
    jwt_secret_key: str = "change-this-secret"
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 1440
    bcrypt_rounds: int = 12

    # App
    debug: bool = False
    log_level: str = "INFO"

    @property
    def use_mock_backend(self) -> bool:
        """True when no live database connection string is configured."""
        url = self.database_url.strip()
        if not url:
            return True
        return any(marker in url for marker in PLACEHOLDER_MARKERS)

    # Pydantic v2 config
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )


@lru_cache()
def get_settings() -> Settings:
    return Settings()
