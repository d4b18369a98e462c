"""
Application settings and configuration management using Pydantic Settings.
"""
from datetime import time
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    # Application Settings
    app_name: str = Field(default="Private Dining Service", description="Application name")
    app_env: str = Field(default="development", description="Environment (development, staging, production)")
    debug: bool = Field(default=False, description="Debug mode")
    log_level: str = Field(default="INFO", description="Logging level")
    api_prefix: str = Field(default="/v1", description="Prefix for all API routes")

    # Database Configuration
    database_url: str = Field(
        default="sqlite:///./private_dining.db",
        description="Database connection URL"
    )

    # Space defaults, used when a space does not override them
    space_default_operating_start: time = Field(default=time(9, 0), description="Default opening time (HH:MM)")
    space_default_operating_end: time = Field(default=time(22, 0), description="Default closing time (HH:MM)")
    space_default_slot_minutes: int = Field(default=60, gt=0, description="Default reservation slot length")

    # Occupancy analytics
    analytics_slot_minutes: int = Field(default=60, gt=0, description="Width of report time slots")
    analytics_max_range_days: int = Field(default=31, ge=1, description="Longest allowed report window")
    analytics_cache_ttl_minutes: int = Field(default=10, ge=0, description="Report cache time to live")
    analytics_cache_max_size: int = Field(default=500, ge=1, description="Maximum cached reports")
    report_default_page_size: int = Field(default=10, ge=1, description="Default number of spaces per page")

    # Seed data loaded at startup into an empty database
    seed_file_path: Optional[str] = Field(default=None, description="Path to JSON seed file")

    # CORS Settings
    cors_origins: str = Field(default="*", description="Allowed CORS origins (comma-separated)")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level is one of the allowed values."""
        allowed_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v_upper = v.upper()
        if v_upper not in allowed_levels:
            raise ValueError(f"log_level must be one of {allowed_levels}")
        return v_upper

    @field_validator("app_env")
    @classmethod
    def validate_app_env(cls, v: str) -> str:
        """Validate environment is one of the allowed values."""
        allowed_envs = ["development", "staging", "production"]
        v_lower = v.lower()
        if v_lower not in allowed_envs:
            raise ValueError(f"app_env must be one of {allowed_envs}")
        return v_lower

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS origins from comma-separated string to list."""
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.app_env == "development"


# Global settings instance
settings = Settings()
