"""
Mood Sense Configuration
========================
All environment variables in one place. Pydantic Settings validates
types at startup so a bad port or temperature fails fast.

Two settings classes live here:

  Settings        : the insight relay (Groq credentials, model params,
                    listening address, logging).
  ClientSettings  : the journal client (relay URL, local data directory).
                    Read with the MOODSENSE_ prefix so the two never clash.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Relay settings, loaded from environment variables or a .env file."""

    # --- Groq completion API ---
    # Required. The relay refuses to start without it.
    groq_api_key: str = ""
    groq_api_url: str = "https://api.groq.com/openai/v1/chat/completions"
    groq_model: str = "mixtral-8x7b-32768"
    completion_temperature: float = 0.7
    completion_max_tokens: int = 1024
    # None means whatever httpx applies by default
    completion_timeout_seconds: Optional[float] = None

    # --- Server ---
    host: str = "0.0.0.0"
    port: int = 3001

    # --- App settings ---
    environment: str = "development"  # development | staging | production
    log_level: str = "INFO"
    cors_origins: list[str] = ["*"]

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


class ClientSettings(BaseSettings):
    """Journal client settings. Every variable is prefixed MOODSENSE_."""

    api_base_url: str = "http://localhost:3001"
    data_dir: Path = Path("~/.moodsense")
    request_timeout_seconds: Optional[float] = None

    model_config = SettingsConfigDict(
        env_prefix="MOODSENSE_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


@lru_cache
def get_settings() -> Settings:
    return Settings()


@lru_cache
def get_client_settings() -> ClientSettings:
    return ClientSettings()
