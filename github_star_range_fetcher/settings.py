"""Application settings loaded from environment variables and .env file."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import (
    DEFAULT_CHUNK_CAPACITY,
    DEFAULT_CHUNK_SIZE,
    MAX_ATTEMPTS,
    PAGE_SIZE,
    RETRY_DELAY,
    SUCCESS_DELAY,
)


class Settings(BaseSettings):
    """Settings for star-range collection.

    `min_stars` / `max_stars` are the run inputs; the CLI flags override them.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    github_token: str | None = None

    min_stars: int | None = None
    max_stars: int | None = None

    chunk_size: int = DEFAULT_CHUNK_SIZE
    chunk_capacity: int = DEFAULT_CHUNK_CAPACITY
    page_size: int = PAGE_SIZE

    max_attempts: int = MAX_ATTEMPTS
    retry_delay: float = RETRY_DELAY
    success_delay: float = SUCCESS_DELAY


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
