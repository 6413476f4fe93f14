"""Application configuration."""

import os

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")

METRIC_MAX = 2_147_483_647
STORAGE_BACKENDS = frozenset({"memory", "sql", "supabase"})


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    storage_backend: str = "memory"
    database_url: str = "sqlite:///food_logs.db"
    supabase_url: str | None = None
    supabase_service_key: str | None = None
    export_dir: str | None = None
    export_batch_size: int = Field(default=1000, gt=0)
    log_level: str = "INFO"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def normalize_backend(raw: str) -> str:
    """Return the canonical storage backend name or raise ValueError."""
    backend = raw.strip().lower()
    if backend not in STORAGE_BACKENDS:
        allowed = ", ".join(sorted(STORAGE_BACKENDS))
        raise ValueError(f"Unknown storage backend {raw!r}; expected one of {allowed}")
    return backend
