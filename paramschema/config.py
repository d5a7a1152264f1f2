"""Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - Every setting can be overridden with a PARAMSCHEMA_* environment variable
    - get_settings() is cached (lru_cache) — single instance per process
    - No setting changes a validation outcome except reject_required_defaults,
      which only acts at schema build time

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support (ADR: developer UX)
    - Defaults provided for everything: the library works with zero configuration
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """paramschema settings from environment variables."""

    model_config = SettingsConfigDict(
        env_prefix="PARAMSCHEMA_", env_file=".env", case_sensitive=False,
        extra="ignore",
    )

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"

    @field_validator("log_format", mode="before")
    @classmethod
    def normalize_log_format(cls, v: str) -> str:
        """Accept JSON/Text in any case; anything but "json" means human-readable."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    # Schema building
    # ADR: off by default — a required param's default is merely unreachable
    reject_required_defaults: bool = False

    # Validation
    # Suppresses per-parameter diagnostics in the shell; outcomes are unchanged
    quiet_validation: bool = False


@lru_cache
def get_settings() -> Settings:
    return Settings()
