"""Centralized library settings using pydantic-settings.

All environment variable reads are consolidated here. Import `get_settings`
from this module rather than reading os.environ directly. Settings only
affect logging; rule results never depend on them.
"""

from functools import lru_cache
from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Library settings loaded from environment variables.

    All env vars are prefixed with NELSONRULES_ (case-insensitive).
    """

    model_config = SettingsConfigDict(
        env_prefix="NELSONRULES_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Logging
    log_format: Literal["console", "json"] = "console"
    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Return the cached settings singleton."""
    return Settings()
