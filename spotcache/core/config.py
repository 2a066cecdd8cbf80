"""
SpotCache Configuration

Configuration management with environment variable support.
Cache TTLs and the sweep interval are read once at startup.
"""

from functools import lru_cache

from dotenv import load_dotenv
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

# Load environment variables from .env file
load_dotenv()


class Settings(BaseSettings):
    """Cache settings with validation and defaults."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=True, extra="ignore"
    )

    # Environment settings
    ENVIRONMENT: str = Field(
        default="development", description="Application environment"
    )

    # Logging configuration
    LOG_LEVEL: str = Field(default="INFO", description="Logging level")
    LOG_FORMAT: str = Field(
        default="console", description="Log renderer: 'json' or 'console'"
    )

    # Namespace TTLs
    SPOT_CACHE_TTL_SECONDS: int = Field(
        default=1800, ge=1, le=86400, description="Single spot cache TTL (30 min)"
    )
    AREA_CACHE_TTL_SECONDS: int = Field(
        default=900, ge=1, le=86400, description="Area query cache TTL (15 min)"
    )
    MEDIA_CACHE_TTL_SECONDS: int = Field(
        default=3600, ge=1, le=86400, description="Spot media cache TTL (60 min)"
    )

    # Store configuration
    CACHE_SWEEP_INTERVAL_SECONDS: float = Field(
        default=300, gt=0, le=86400, description="Expired entry sweep interval"
    )
    CACHE_SHARD_COUNT: int = Field(
        default=16, ge=1, le=1024, description="Number of lock-striped shards"
    )

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("LOG_FORMAT")
    @classmethod
    def validate_log_format(cls, v: str) -> str:
        """Validate log renderer."""
        if v.lower() not in ("json", "console"):
            raise ValueError("LOG_FORMAT must be 'json' or 'console'")
        return v.lower()


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Create global settings instance
settings = get_settings()
