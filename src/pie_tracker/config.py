"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    pie_store_backend: str = "supabase"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    pie_table: str = "apple_pies"
    pie_store_base_url: str | None = None
    pie_store_timeout_seconds: float = 15
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )
