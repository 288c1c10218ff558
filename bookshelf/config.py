"""
Application Configuration Module

This module uses Pydantic Settings for type-safe configuration management.

Every value can be overridden with an environment variable of the same name
(case-insensitive) or through a local .env file.

PATTERN: Settings Singleton
===========================
A single Settings instance is cached using @lru_cache, so the .env file is
read once and every module shares the same configuration.

Usage:
    from bookshelf.config import get_settings

    settings = get_settings()
    print(settings.app_name)
"""

from functools import lru_cache
from typing import List

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    SECURITY NOTE:
    ==============
    - secret_key signs the bearer tokens; placeholder values and keys shorter
      than 32 characters are rejected at startup.
    """

    # -------------------------------------------------------------------------
    # Application Settings
    # -------------------------------------------------------------------------
    app_name: str = Field(
        default="Bookshelf API",
        description="Application name displayed in docs and logs"
    )
    debug: bool = Field(
        default=False,
        description="Enable debug mode (detailed errors, SQL echo, auto-reload)"
    )
    environment: str = Field(
        default="development",
        description="Environment: development, staging, production"
    )
    host: str = Field(
        default="0.0.0.0",
        description="Host to bind the server to"
    )
    port: int = Field(
        default=4000,
        description="Port to bind the server to"
    )

    # -------------------------------------------------------------------------
    # Database Settings
    # -------------------------------------------------------------------------
    database_url: str = Field(
        default="sqlite:///./bookshelf.db",
        description="SQLAlchemy connection URL"
    )
    db_pool_size: int = Field(
        default=5,
        description="Number of permanent database connections (ignored for SQLite)"
    )
    db_max_overflow: int = Field(
        default=10,
        description="Maximum additional connections during high load (ignored for SQLite)"
    )
    auto_create_tables: bool = Field(
        default=True,
        description="Create missing tables at startup (use Alembic in production)"
    )

    # -------------------------------------------------------------------------
    # Security Settings
    # -------------------------------------------------------------------------
    secret_key: str = Field(
        default="REPLACE_WITH_YOUR_GENERATED_SECRET_KEY",
        description="Secret key used to sign bearer tokens"
    )
    access_token_expire_hours: int = Field(
        default=24,
        ge=1,
        description="Lifetime of a login token in hours"
    )
    allowed_origins: str = Field(
        default="*",
        description="Comma-separated list of allowed CORS origins"
    )

    # -------------------------------------------------------------------------
    # Images
    # -------------------------------------------------------------------------
    public_base_url: str = Field(
        default="http://localhost:4000",
        description="Absolute base URL used to build image links in responses"
    )
    upload_dir: str = Field(
        default="uploads",
        description="Directory where compressed cover images are written and served from"
    )
    image_quality: int = Field(
        default=80,
        ge=1,
        le=100,
        description="WebP quality used when compressing uploaded images"
    )

    # -------------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------------
    min_grade: int = Field(
        default=0,
        description="Lowest grade a user may give a book"
    )
    max_grade: int = Field(
        default=5,
        description="Highest grade a user may give a book"
    )
    best_rating_limit: int = Field(
        default=3,
        ge=1,
        description="Number of books returned by the best-rating endpoint"
    )

    # -------------------------------------------------------------------------
    # Rate Limiting Settings
    # -------------------------------------------------------------------------
    rate_limit_enabled: bool = Field(
        default=True,
        description="Enable request rate limiting"
    )
    rate_limit_default: str = Field(
        default="100/minute",
        description="Default limit for read endpoints"
    )
    rate_limit_write: str = Field(
        default="30/minute",
        description="Limit for create/update/delete/rate endpoints"
    )
    rate_limit_auth: str = Field(
        default="10/minute",
        description="Limit for signup and login"
    )
    trust_proxy_headers: bool = Field(
        default=False,
        description="Key rate limits on X-Forwarded-For (only behind a trusted reverse proxy)"
    )

    # -------------------------------------------------------------------------
    # Logging Settings
    # -------------------------------------------------------------------------
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # -------------------------------------------------------------------------
    # Computed Properties
    # -------------------------------------------------------------------------
    @property
    def allowed_origins_list(self) -> List[str]:
        """Parse comma-separated CORS origins into a list."""
        return [origin.strip() for origin in self.allowed_origins.split(",")]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_sqlite(self) -> bool:
        """SQLite needs different engine arguments than server databases."""
        return self.database_url.startswith("sqlite")

    # -------------------------------------------------------------------------
    # Validators
    # -------------------------------------------------------------------------
    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """
        Validate that log_level is a valid Python logging level.

        Raises:
            ValueError: If log level is invalid
        """
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        if v.upper() not in valid_levels:
            raise ValueError(f"log_level must be one of {valid_levels}")
        return v.upper()

    @field_validator("secret_key")
    @classmethod
    def validate_secret_key(cls, v: str) -> str:
        """
        Validate that secret_key is not a placeholder value.

        The application will fail to start if SECRET_KEY is not properly set.

        Raises:
            ValueError: If secret key is a placeholder or too short
        """
        placeholder_indicators = [
            "REPLACE_WITH",
            "change-me",
            "your-secret",
            "generate-with",
        ]

        for indicator in placeholder_indicators:
            if indicator.lower() in v.lower():
                raise ValueError(
                    "SECRET_KEY contains a placeholder value. "
                    "Generate a secure key with: openssl rand -hex 32"
                )

        if len(v) < 32:
            raise ValueError(
                "SECRET_KEY must be at least 32 characters long. "
                "Generate a secure key with: openssl rand -hex 32"
            )

        return v

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment is a known value."""
        valid_envs = {"development", "staging", "production"}
        if v.lower() not in valid_envs:
            raise ValueError(f"environment must be one of {valid_envs}")
        return v.lower()

    @field_validator("public_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        return v.rstrip("/")

    @model_validator(mode="after")
    def validate_grade_range(self) -> "Settings":
        if self.min_grade > self.max_grade:
            raise ValueError("min_grade must not be greater than max_grade")
        return self


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    First call creates the Settings instance, loads .env and validates it;
    later calls return the cached instance.

    Returns:
        Cached Settings instance
    """
    return Settings()
