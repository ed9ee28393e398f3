"""Application configuration using pydantic-settings."""
from functools import lru_cache
from typing import Literal

from pydantic import AliasChoices, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )

    # Upstream RMS API (the frontend build reads NEXT_PUBLIC_API_URL)
    api_base_url: str = Field(
        default="http://localhost:4000",
        validation_alias=AliasChoices("api_base_url", "API_BASE_URL", "NEXT_PUBLIC_API_URL"),
    )
    http_timeout: float = 10.0

    # Durable scope
    redis_url: str = "redis://localhost:6379"
    redis_enabled: bool = True
    # Seconds; bounds every connect and command so a hung server cannot stall requests
    redis_socket_timeout: float = Field(default=0.5, gt=0)

    # Host probes
    interactive_host: bool = True
    display_mode: Literal["browser", "standalone", "minimal-ui", "fullscreen"] = "browser"
    navigator_standalone: bool = False

    # Never block first paint longer than this
    branding_gate_timeout: float = Field(default=3.0, gt=0)

    log_level: str = "INFO"

    @field_validator("api_base_url", mode="before")
    @classmethod
    def normalize_api_base_url(cls, v: str) -> str:
        """Strip whitespace and any trailing slash."""
        if isinstance(v, str):
            return v.strip().rstrip("/")
        return v


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
