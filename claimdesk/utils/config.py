"""
Configuration management using pydantic-settings.

Loads settings from CLAIMDESK_* environment variables and .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_STORAGE_PATH = Path(__file__).parent.parent.parent / "data" / "claimdesk.db"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="CLAIMDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Storage
    storage_path: Path = Field(
        default=DEFAULT_STORAGE_PATH,
        description="SQLite file backing the durable key-value storage",
    )
    storage_key: str = Field(
        default="claims",
        description="Key under which the serialized claim collection is kept",
    )

    # Claim processing
    processing_delay_seconds: float = Field(
        default=2.0,
        ge=0.0,
        description="Simulated latency before a claim decision is returned",
    )
    approval_rate: float = Field(
        default=0.7,
        ge=0.0,
        le=1.0,
        description="Share of low/medium risk claims approved automatically",
    )

    # Server Configuration
    host: str = Field(default="0.0.0.0", description="Server host")
    port: int = Field(default=8000, description="Server port")
    debug: bool = Field(default=False, description="Enable debug mode")
    log_level: str = Field(default="INFO", description="Root log level")


@lru_cache
def get_settings() -> Settings:
    """
    Get cached settings instance.

    Uses LRU cache to avoid re-reading environment on every call.
    """
    return Settings()
