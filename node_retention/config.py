"""Retention Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - get_settings() is cached (lru_cache) — single instance per process
    - retention_disabled is read once and threaded into strategies at
      construction, never consulted as module state during evaluation

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all settings: works out-of-the-box
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Retention settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Global switch: when true, idle nodes are never evaluated for termination.
    retention_disabled: bool = False

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        """Accept any casing; anything but "json" means human-readable text."""
        if isinstance(v, str):
            v = v.strip().lower()
            return v if v == "json" else "text"
        return v


@lru_cache
def get_settings() -> Settings:
    return Settings()
