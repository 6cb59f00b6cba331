"""Application configuration."""

import os
from pathlib import Path
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from hydration_tracker.domain.intake import (
    DAILY_GOAL_ML,
    GLASS_SIZE_ML,
    OVERFLOW_ALLOWANCE_ML,
    IntakeLimits,
)

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    glass_size_ml: int = Field(default=GLASS_SIZE_ML, gt=0)
    daily_goal_ml: int = Field(default=DAILY_GOAL_ML, gt=0)
    overflow_allowance_ml: int = Field(default=OVERFLOW_ALLOWANCE_ML, ge=0)
    timezone: str | None = None
    storage_backend: Literal["file", "supabase", "memory"] = "file"
    data_path: Path = Path("data/intake.json")
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    supabase_table: str = "kv_store"
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_prefix="HYDRATION_",
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )

    def limits(self) -> IntakeLimits:
        """Return the intake limits configured for this deployment."""
        return IntakeLimits(
            glass_size_ml=self.glass_size_ml,
            daily_goal_ml=self.daily_goal_ml,
            overflow_allowance_ml=self.overflow_allowance_ml,
        )
