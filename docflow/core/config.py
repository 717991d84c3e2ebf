"""Application configuration (settings and environment).

Single source of truth for all configuration. Uses pydantic-settings
with .env support. SECRET_KEY is always required; DATABASE_URL is required
when the postgres backend is selected.
"""

from functools import lru_cache

from pydantic import SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment and .env."""

    # App
    app_name: str = "docflow"
    app_version: str = "1.0.0"
    debug: bool = False

    # Database: "postgres" (SQLAlchemy + asyncpg) or "none" (engine not created)
    database_backend: str = "postgres"
    database_url: str = ""
    database_echo: bool = False
    db_pool_size: int | None = None
    db_max_overflow: int | None = None
    db_command_timeout: int | None = None

    # Security (tokens are issued elsewhere; docflow only verifies them)
    secret_key: SecretStr = SecretStr("")
    algorithm: str = "HS256"

    # CORS
    allowed_origins: str = "http://localhost:3000,http://localhost:8080"

    # Storage
    storage_backend: str = "local"
    storage_root: str = "./storage"
    max_upload_size: int = 50 * 1024 * 1024  # 50MB
    allowed_extensions: str = ".pdf,.doc,.docx,.xls,.xlsx,.ppt,.pptx,.txt,.png,.jpg,.jpeg"

    # Documents
    document_number_prefix: str = "DOC"

    # Outbox dispatch
    effect_max_attempts: int = 5
    effect_batch_size: int = 100
    # Notifier used by the dispatcher: "database" or "log"
    notifier_backend: str = "database"

    # OpenTelemetry
    telemetry_enabled: bool = False
    telemetry_exporter: str = "console"
    telemetry_otlp_endpoint: str | None = None
    telemetry_sample_rate: float = 1.0
    telemetry_environment: str = "development"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        case_sensitive=False,
    )

    @model_validator(mode="after")
    def validate_required(self) -> "Settings":
        """Validate required env for the selected backends."""
        if self.database_backend == "postgres":
            if not self.database_url:
                raise ValueError(
                    "DATABASE_URL is required when database_backend is 'postgres'. "
                    "Set in environment or .env file."
                )
        elif self.database_backend != "none":
            raise ValueError(
                f"database_backend must be 'postgres' or 'none', got: {self.database_backend!r}"
            )
        if not self.secret_key.get_secret_value():
            raise ValueError(
                "SECRET_KEY is required. Generate with: openssl rand -hex 32."
            )
        if self.storage_backend != "local":
            raise ValueError(
                f"storage_backend must be 'local', got: {self.storage_backend!r}"
            )
        if self.notifier_backend not in ("database", "log"):
            raise ValueError(
                f"notifier_backend must be 'database' or 'log', got: {self.notifier_backend!r}"
            )
        if self.effect_max_attempts < 1:
            raise ValueError("EFFECT_MAX_ATTEMPTS must be >= 1")
        return self

    @property
    def allowed_extension_set(self) -> frozenset[str]:
        """Lowercased allowed file extensions (with leading dot)."""
        items = (e.strip().lower() for e in self.allowed_extensions.split(","))
        return frozenset(e if e.startswith(".") else f".{e}" for e in items if e)


@lru_cache
def get_settings() -> Settings:
    """Return cached settings (env read once per process; tests call cache_clear())."""
    return Settings()
