"""Application Configuration: environment-driven settings via pydantic-settings.

Invariants:
    - No secrets are configured here; API keys are generated at runtime
    - get_settings() is cached (lru_cache): single instance per process

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for every setting: the mirror runs with no environment at all
"""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from reflect_mirror.core.domain_types import Cluster


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    app_name: str = "Reflect API Mirror"
    app_version: str = "1.0.0"

    # API
    cors_origins: list[str] = ["http://localhost:3000"]

    # Transactions
    default_cluster: Cluster = Cluster.MAINNET

    # Integrations
    api_key_prefix: str = "rfl_"
    max_whitelist_batch: int = Field(100, ge=1, le=100)
    max_whitelisted_users: int = Field(10_000, ge=1)
    # Idempotency-Key results kept for replay; oldest evicted first
    idempotency_cache_size: int = Field(1024, ge=1)

    # Read routes
    max_history_days: int = Field(365, ge=1, le=365)

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
