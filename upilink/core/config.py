"""Application configuration via pydantic settings."""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="UPILINK_",
        extra="ignore",
    )

    app_name: str = "upi-link-service"
    app_version: str = "1.0.0"
    app_env: str = "development"

    api_key: Optional[str] = None
    log_level: str = "INFO"
    log_json: bool = True

    default_currency: str = "INR"
    name_max_length: int = Field(default=40, ge=1, le=99)
    note_max_length: int = Field(default=40, ge=1, le=99)
    default_note: Optional[str] = None

    # Delay before scanning is re-armed after an invalid code.
    scan_debounce_seconds: float = Field(default=0.5, ge=0)


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
