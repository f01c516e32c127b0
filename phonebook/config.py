"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - Every setting has a default: the service runs out-of-the-box on a laptop

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Only the file path is configured: KeyValueStore owns the SQLAlchemy URL
"""

from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Embedded store
    store_path: str = "db/records.sqlite3"

    # Storage worker
    worker_inbox_size: int = Field(1024, ge=1)
    request_timeout_seconds: float = Field(5.0, gt=0)

    # HTTP
    host: str = "127.0.0.1"
    port: int = 8088

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("store_path")
    @classmethod
    def reject_blank_store_path(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("store_path cannot be empty")
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
