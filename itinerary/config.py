"""Service settings, read from ITINERARY_* environment variables or .env."""

from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_prefix="ITINERARY_", env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    # Owner recorded when an upload does not name one
    default_user_id: str = "anonymous"

    max_upload_bytes: int = 5 * 1024 * 1024

    log_level: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    return Settings()
