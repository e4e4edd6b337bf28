"""Typed settings configuration - single source of truth."""

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Engine settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    # Money
    default_currency: str = "USD"
    currency_symbol: str = "$"

    # Calendar (0=Monday ... 6=Sunday, same numbering as the calendar module)
    calendar_first_weekday: int = Field(default=6, ge=0, le=6)

    # Query pipeline
    group_order_default: Literal["first_seen", "alphabetical"] = "first_seen"


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
