"""Application settings and configuration.

This module defines all configuration options for the Moments Archive service.
Settings are loaded from environment variables with sensible defaults.
"""

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Moments Archive", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")

    # Curator authentication (shared secret sent in the x-admin-password header)
    admin_password: str | None = Field(default=None, alias="ADMIN_PASSWORD")

    # Database configuration
    database_url: str = Field(default="sqlite:///./moments.db", alias="DATABASE_URL")
    test_database_url: str | None = Field(default=None, alias="TEST_DATABASE_URL")
    use_testing_database: bool = Field(default=False, alias="USE_TEST_DATABASE")
    sql_debug: bool = Field(default=False, alias="SQL_DEBUG")

    # Rate limiting. The memory backend is per-process and forgets on restart.
    rate_limit_backend: str = Field(default="memory", alias="RATE_LIMIT_BACKEND")
    redis_url: str = Field(default="redis://localhost:6379", alias="REDIS_URL")
    rate_limit_hourly_default: int = Field(default=3, alias="RATE_LIMIT_HOURLY_DEFAULT")
    rate_limit_daily_default: int = Field(default=10, alias="RATE_LIMIT_DAILY_DEFAULT")
    submission_hourly_limit: int = Field(default=3, alias="SUBMISSION_HOURLY_LIMIT")
    submission_daily_limit: int = Field(default=10, alias="SUBMISSION_DAILY_LIMIT")
    upload_hourly_limit: int = Field(default=3, alias="UPLOAD_HOURLY_LIMIT")
    upload_daily_limit: int = Field(default=10, alias="UPLOAD_DAILY_LIMIT")

    # Outbound HTTP (color extraction)
    http_timeout_seconds: float = Field(default=10.0, alias="HTTP_TIMEOUT_SECONDS")
    fallback_color: str = Field(default="#1a1a1a", alias="FALLBACK_COLOR")

    # Curation
    slug_max_attempts: int = Field(default=1000, alias="SLUG_MAX_ATTEMPTS")
    related_limit: int = Field(default=3, alias="RELATED_LIMIT")

    # Media storage
    media_root: str = Field(default="./media", alias="MEDIA_ROOT")
    media_base_url: str = Field(default="http://localhost:8000/media", alias="MEDIA_BASE_URL")
    max_upload_bytes: int = Field(default=10 * 1024 * 1024, alias="MAX_UPLOAD_BYTES")

    # CORS configuration for web frontend access
    cors_origins: list[str] = Field(
        default=["*"],
        alias="CORS_ORIGINS",
    )
    cors_allow_credentials: bool = Field(default=True, alias="CORS_ALLOW_CREDENTIALS")
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PATCH", "DELETE", "OPTIONS"],
        alias="CORS_ALLOW_METHODS",
    )
    cors_allow_headers: list[str] = Field(
        default=["*"],
        alias="CORS_ALLOW_HEADERS",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @property
    def effective_database_url(self) -> str:
        """Return the database URL respecting testing overrides."""
        if self.use_testing_database and self.test_database_url:
            return self.test_database_url
        return self.database_url

    @property
    def rate_limit_policies(self) -> dict[str, tuple[int, int]]:
        """Return configured `(hourly, daily)` ceilings keyed by namespace."""
        return {
            "submission": (self.submission_hourly_limit, self.submission_daily_limit),
            "upload": (self.upload_hourly_limit, self.upload_daily_limit),
        }


settings = Settings()
