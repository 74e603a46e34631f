"""
Application settings - pydantic-settings configuration.

This module defines application configuration using pydantic-settings
for environment variable loading with validation and defaults.
"""

from functools import lru_cache
from pathlib import Path
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict

# Structure: src/config/settings.py -> src/public/ (shipped as package data)
_DEFAULT_PUBLIC_DIR = Path(__file__).resolve().parent.parent / "public"


class Settings(BaseSettings):
    """Application settings with environment variable support."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # Server bind address
    host: str = "0.0.0.0"
    port: int = 3000

    # Public URL the verification links point at
    base_url: str = "http://localhost:3000"
    app_name: str = "TinakAward"

    # Verification settings
    token_ttl_seconds: int = 3600  # Verification link validity window
    reaper_interval_seconds: int = 300  # Expired-record sweep period, 0 disables

    # Mail settings
    email_backend: Literal["console", "smtp"] = "console"
    mail_from: str = '"TinakAward Support" <support@tinakaward.com>'
    smtp_host: str = "smtp.ethereal.email"
    smtp_port: int = 587
    smtp_username: str | None = None
    smtp_password: str | None = None
    smtp_starttls: bool = True

    # Static files and logging
    public_dir: Path = _DEFAULT_PUBLIC_DIR
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
