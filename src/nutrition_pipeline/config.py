"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    supabase_url: str
    supabase_service_key: str
    hook_token: str
    app_url: str = "http://localhost:3000"
    qstash_url: str = "https://qstash.upstash.io"
    qstash_token: str | None = None
    qstash_current_signing_key: str | None = None
    qstash_next_signing_key: str | None = None
    fdc_api_key: str | None = None
    fdc_base_url: str = "https://api.nal.usda.gov/fdc/v1"
    fdc_page_size: int = 5
    fdc_data_types: str = "Foundation,SR Legacy"
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o-mini"
    primary_locale: str = "en"
    translation_locales: str = "bg"
    cleanup_batch_size: int = 100
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_locales(raw: str | None, exclude: str | None = None) -> list[str]:
    """Parse a comma separated locale list, dropping blanks and duplicates."""
    if raw is None:
        return []
    locales: list[str] = []
    for chunk in raw.split(","):
        value = chunk.strip().lower()
        if not value or value == exclude or value in locales:
            continue
        locales.append(value)
    return locales


def parse_data_types(raw: str | None) -> list[str]:
    """Parse the FDC dataset filter into a list of dataset names."""
    if raw is None:
        return []
    return [chunk.strip() for chunk in raw.split(",") if chunk.strip()]
