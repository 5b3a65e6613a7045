"""
Configuration Module

Settings for the academic records core using Pydantic Settings.
Supports environment variables (REGISTRAR_ prefix), .env files, and
explicit overrides.
"""

from functools import lru_cache
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Academic records configuration settings."""

    model_config = SettingsConfigDict(
        env_prefix="REGISTRAR_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Environment
    environment: Literal["development", "staging", "production"] = "development"
    debug: bool = Field(default=True, description="Enable debug mode")

    # Identifiers
    first_generated_id: int = Field(
        default=1, ge=1, description="First id issued to professors and students"
    )

    # Grading
    grade_scale_min: float = Field(default=0.0, description="Lowest accepted grade scale")
    grade_scale_max: float = Field(default=100.0, description="Highest accepted grade scale")

    # Logging
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "text"

    @model_validator(mode="after")
    def check_grade_bounds(self) -> "Settings":
        """Grade bounds must form a non-empty range."""
        if self.grade_scale_max <= self.grade_scale_min:
            raise ValueError("grade_scale_max must be greater than grade_scale_min")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Returns:
        Settings: Application settings
    """
    return Settings()
