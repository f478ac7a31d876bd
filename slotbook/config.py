"""
Application configuration using pydantic-settings.
All config is validated at startup - fail fast if anything is missing.
"""
from pydantic_settings import BaseSettings
from pydantic import Field
from functools import lru_cache
from typing import Literal


class Settings(BaseSettings):
    # Application
    app_env: str = "development"
    app_host: str = "0.0.0.0"
    app_port: int = 8000
    app_base_url: str = "http://localhost:8000"
    log_level: str = "INFO"
    allowed_origins: str = ""  # Comma-separated CORS origins (auto-includes localhost in dev)

    # Database
    database_url: str
    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Sentry
    sentry_dsn: str = ""

    # Slot computation
    slot_step_minutes: int = Field(default=15, gt=0)
    apply_break_windows: bool = True
    # merge: override boundaries apply one by one, missing ones come from the weekly row
    # strict: an override row alone defines the day, a missing boundary means closed
    partial_override_policy: Literal["merge", "strict"] = "merge"

    # Availability search (storefront filtering)
    availability_probe_duration_minutes: int = Field(default=30, gt=0)
    availability_default_window_minutes: int = Field(default=120, gt=0)

    # Booking commit
    booking_max_attempts: int = Field(default=3, ge=1)

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"


@lru_cache()
def get_settings() -> Settings:
    return Settings()
