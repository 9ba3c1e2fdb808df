"""Application configuration via pydantic-settings.

Loads all settings from environment variables (or .env file).
The settings object is built once per process and injected into routes
with ``Depends(get_settings)``; nothing below the HTTP layer reads it.
"""

from __future__ import annotations

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Central configuration for the Deel gateway."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # --- Deel API ---
    deel_access_token: str = ""
    deel_api_url: str = "https://api.deel.com/v1"

    # --- Deel webhooks ---
    deel_webhook_signing_key: str = ""
    deel_signature_header: str = "x-deel-signature"

    # --- Application ---
    log_level: str = "INFO"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached application settings singleton."""
    return Settings()
