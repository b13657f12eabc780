"""Application configuration."""

import os
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

DEFAULT_CATALOG_PATH = Path(__file__).resolve().parent / "data" / "foods.json"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    store_backend: str = "file"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    store_table: str = "documents"
    store_namespace: str = "foodlens"
    data_dir: Path = Path(".foodlens")
    catalog_path: Path = DEFAULT_CATALOG_PATH
    timezone: str = "UTC"
    openai_api_key: str
    openai_model: str = "gpt-5.2"
    openai_reasoning_effort: str = "low"
    openai_store: bool = False
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_timezone(raw: str | None) -> ZoneInfo:
    """Return the configured zone, falling back to UTC for unknown names."""
    if not raw or not raw.strip():
        return ZoneInfo("UTC")
    try:
        return ZoneInfo(raw.strip())
    except (ZoneInfoNotFoundError, ValueError):
        return ZoneInfo("UTC")
