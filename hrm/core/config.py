"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. Cross-field constraints are validated at load time.
"""

from functools import lru_cache

from pydantic import model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env.

    Only database_url is needed to serve requests; everything else has a
    working default.
    """

    # App
    app_name: str = "hrm-lifecycle"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database (SQLAlchemy async + Alembic). Empty means not configured.
    database_url: str = ""
    database_echo: bool = False
    # Optional pool/driver overrides (None = use defaults in database.py)
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Request headers
    tenant_header_name: str = "X-Tenant-ID"
    actor_header_name: str = "X-Actor-ID"
    request_id_header: str = "X-Request-ID"

    # Lifecycle rules
    # Reject a second open case of the same kind for one subject.
    enforce_single_open_case_per_subject: bool = True
    default_expected_completion_days: int = 30
    bulk_max_subjects: int = 200

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_lifecycle_limits(self) -> "Settings":
        """Validate lifecycle limits are positive."""
        if self.default_expected_completion_days < 1:
            raise ValueError(
                "DEFAULT_EXPECTED_COMPLETION_DAYS must be at least 1, "
                f"got: {self.default_expected_completion_days}"
            )
        if self.bulk_max_subjects < 1:
            raise ValueError(
                f"BULK_MAX_SUBJECTS must be at least 1, got: {self.bulk_max_subjects}"
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Return cached application settings (single instance per process).

    Validation runs on first call, not at import time. In tests, call
    get_settings.cache_clear() before overriding env vars so the next
    get_settings() uses the new values.
    """
    return Settings()
