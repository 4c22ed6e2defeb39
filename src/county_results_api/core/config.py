"""Application configuration via Pydantic Settings.

All configuration is loaded from environment variables following 12-factor principles.
"""

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/91.0.4472.124 Safari/537.36"
)


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./county_results.db",
        description="Async SQLAlchemy connection string for county links and results collections",
    )
    results_store_backend: str = Field(
        default="sql",
        description="Results store implementation: 'sql' (database tables) or 'memory'",
    )

    @field_validator("results_store_backend")
    @classmethod
    def validate_results_store_backend(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in ("sql", "memory"):
            msg = f"Invalid results_store_backend: {v!r} (expected 'sql' or 'memory')"
            raise ValueError(msg)
        return v

    # Fetching
    fetch_timeout: float = Field(
        default=30.0,
        description="HTTP timeout in seconds for downloading county result sources",
        gt=0,
    )
    fetch_user_agent: str = Field(
        default=DEFAULT_USER_AGENT,
        description="User-Agent header sent to county result sources",
    )
    scratch_dir: str | None = Field(
        default=None,
        description="Parent directory for per-parser scratch directories (system temp dir when unset)",
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level",
    )
    log_dir: str | None = Field(
        default=None,
        description="Directory for log files (enables file logging with 24h rotation when set)",
    )

    # CORS
    cors_origins: str = Field(
        default="http://localhost:5173",
        description="Comma-separated list of allowed CORS origins",
    )

    # API
    api_v1_prefix: str = Field(
        default="/api/v1",
        description="API version prefix",
    )

    @property
    def cors_origin_list(self) -> list[str]:
        """Parse CORS origins string into a list."""
        if not self.cors_origins.strip():
            return []
        return [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def get_settings() -> Settings:
    """Create and return application settings."""
    return Settings()
