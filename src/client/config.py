"""Client configuration using Pydantic Settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class ClientSettings(BaseSettings):
    """Settings for the API client, read from ``GIVETRACK_*`` variables."""

    model_config = SettingsConfigDict(
        env_prefix="GIVETRACK_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    api_base_url: str = Field(default="http://localhost:8000")
    timeout: float = Field(default=10.0, gt=0)
    storage_path: Path = Field(
        default=Path.home() / ".givetrack" / "storage.json",
        description="JSON file holding durable client preferences",
    )


@lru_cache
def get_client_settings() -> ClientSettings:
    """Get cached client settings instance."""
    return ClientSettings()
