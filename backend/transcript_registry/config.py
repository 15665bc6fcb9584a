"""Application Configuration — environment-driven settings via pydantic-settings.

Invariants:
    - All secrets and identities come from environment variables (never hardcoded)
    - get_settings() is cached (lru_cache) — single instance per process
    - registry_* values only SEED a fresh registry; a restored snapshot wins

Design Decisions:
    - pydantic-settings over raw os.environ: validation, type coercion, .env file support
    - Defaults provided for all non-secret settings: works out-of-the-box with docker-compose
    - ledger_url unset → in-memory ledger (local development, tests)
"""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from transcript_registry.core.domain_types import (
    DEFAULT_ISSUANCE_FEE, DEFAULT_MAX_TRANSCRIPTS,
)


class Settings(BaseSettings):
    """Application settings from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)

    # Database
    database_url: str = (
        "postgresql+asyncpg://registry:registry@db:5432/registry"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def convert_postgres_url(cls, v: str) -> str:
        """Hosted Postgres hands out postgresql:// but asyncpg needs postgresql+asyncpg://."""
        if isinstance(v, str) and v.startswith("postgresql://"):
            return v.replace("postgresql://", "postgresql+asyncpg://", 1)
        return v

    database_pool_size: int = 20
    database_max_overflow: int = 10

    # Registry bootstrap
    registry_admin: str | None = None
    registry_issuers: list[str] = []
    registry_fee_recipient: str | None = None
    registry_issuance_fee: int = DEFAULT_ISSUANCE_FEE
    registry_max_transcripts: int = DEFAULT_MAX_TRANSCRIPTS

    # Ledger gateway
    ledger_url: str | None = None
    ledger_timeout_seconds: float = 10.0

    # API
    cors_origins: list[str] = ["http://localhost:5173"]

    # Observability
    log_level: str = "INFO"
    log_format: str = "json"


@lru_cache
def get_settings() -> Settings:
    return Settings()
