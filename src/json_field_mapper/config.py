"""Centralized configuration for json-field-mapper using Pydantic Settings."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide settings loaded from ``JSON_FIELD_*`` environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="JSON_FIELD_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        validate_default=True,
        extra="ignore",
    )

    log_level: str = Field(default="info", description="Logging level")
    log_json: bool = Field(default=True, description="Emit structured JSON logs")
    max_depth: int = Field(
        default=1000,
        ge=1,
        description="Maximum object nesting accepted inside a json field",
    )
    tracing_enabled: bool = Field(default=True, description="Record a span per parsed json field")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return the cached settings instance."""
    return Settings()
