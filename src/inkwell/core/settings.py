"""Application settings and configuration.

This module defines all configuration options for the Inkwell blog service.
Settings are loaded from environment variables with sensible defaults.
"""

from typing import Annotated
from urllib.parse import quote

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

PRODUCTION = "production"
DEVELOPMENT = "development"


class ConfigurationError(RuntimeError):
    """Raised when required configuration values are missing or inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files.
    """

    # Application metadata
    app_name: str = Field(default="Inkwell", alias="APP_NAME")
    app_version: str = Field(default="0.1.0", alias="APP_VERSION")
    environment: str = Field(default=DEVELOPMENT, alias="APP_ENV")
    port: int = Field(default=3000, alias="PORT")

    # Database configuration; DATABASE_URL wins over the discrete DB_* values
    database_url: str | None = Field(default=None, alias="DATABASE_URL")
    db_host: str | None = Field(default=None, alias="DB_HOST")
    db_port: int = Field(default=5432, alias="DB_PORT")
    db_name: str | None = Field(default=None, alias="DB_NAME")
    db_user: str | None = Field(default=None, alias="DB_USER")
    db_password: str | None = Field(default=None, alias="DB_PASSWORD")
    db_sslmode: str | None = Field(default=None, alias="DB_SSLMODE")
    sql_debug: bool | None = Field(default=None, alias="SQL_DEBUG")

    # Connection pool shared by all requests
    db_pool_max: int = Field(default=5, ge=1, alias="DB_POOL_MAX")
    db_pool_min: int = Field(default=0, ge=0, alias="DB_POOL_MIN")
    db_pool_acquire_timeout: float = Field(default=30.0, alias="DB_POOL_ACQUIRE_TIMEOUT")
    db_pool_idle_timeout: int = Field(default=10, alias="DB_POOL_IDLE_TIMEOUT")
    verify_schema_on_startup: bool = Field(default=True, alias="VERIFY_SCHEMA_ON_STARTUP")

    # Identity verification
    secret_key: str = Field(default="change-me", alias="SECRET_KEY")
    jwt_algorithm: str = Field(default="HS256", alias="JWT_ALGORITHM")
    jwt_audience: str | None = Field(default=None, alias="JWT_AUDIENCE")
    access_token_expire_minutes: int = Field(default=60, alias="ACCESS_TOKEN_EXPIRE_MINUTES")
    auth_required: bool = Field(default=False, alias="AUTH_REQUIRED")

    # Uploads
    max_file_size: int = Field(default=5 * 1024 + 1024, alias="MAX_FILE_SIZE")
    upload_dir: str = Field(default="./uploads", alias="UPLOAD_DIR")
    upload_url_prefix: str = Field(default="/uploads", alias="UPLOAD_URL_PREFIX")

    # Post queries
    pagination_default_limit: int = Field(default=10, ge=1, alias="PAGINATION_DEFAULT_LIMIT")
    pagination_max_limit: int = Field(default=100, ge=1, alias="PAGINATION_MAX_LIMIT")
    recent_posts_limit: int = Field(default=5, ge=1, alias="RECENT_POSTS_LIMIT")

    # CORS configuration for the single-page client
    cors_origins: Annotated[list[str], NoDecode] = Field(
        default=["http://localhost:4200"],
        alias="CORS_ORIGIN",
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("cors_origins", mode="before")
    @classmethod
    def _split_origins(cls, value: object) -> object:
        if isinstance(value, str):
            return [origin.strip() for origin in value.split(",") if origin.strip()]
        return value

    @field_validator("environment")
    @classmethod
    def _normalize_environment(cls, value: str) -> str:
        return value.strip().lower()

    @property
    def is_production(self) -> bool:
        """Return True when running with production semantics."""
        return self.environment == PRODUCTION

    @property
    def sql_echo(self) -> bool:
        """Return whether SQL statements should be logged.

        Production is always silent; elsewhere SQL_DEBUG decides and defaults
        to verbose in development.
        """
        if self.is_production:
            return False
        if self.sql_debug is not None:
            return self.sql_debug
        return self.environment == DEVELOPMENT

    @property
    def effective_sslmode(self) -> str | None:
        """Return the SSL mode to request from the database server."""
        if self.is_production:
            return "require"
        return self.db_sslmode

    @property
    def effective_database_url(self) -> str:
        """Return the database URL, assembling it from DB_* values if needed.

        Returns:
            SQLAlchemy database URL

        Raises:
            ConfigurationError: If neither DATABASE_URL nor the required DB_*
                values are configured
        """
        if self.database_url:
            return self.database_url

        missing = [
            name
            for name, value in (
                ("DB_HOST", self.db_host),
                ("DB_NAME", self.db_name),
                ("DB_USER", self.db_user),
            )
            if not value
        ]
        if missing:
            raise ConfigurationError(
                "Missing required database configuration: " + ", ".join(missing)
            )

        credentials = quote(self.db_user or "", safe="")
        if self.db_password:
            credentials += ":" + quote(self.db_password, safe="")
        url = (
            f"postgresql+psycopg://{credentials}@{self.db_host}:{self.db_port}/{self.db_name}"
        )
        sslmode = self.effective_sslmode
        if sslmode:
            url += f"?sslmode={sslmode}"
        return url

    @property
    def database_url_sync(self) -> str:
        """Return a URL usable by synchronous tooling such as Alembic."""
        url = self.effective_database_url
        if url.startswith("postgresql+asyncpg"):
            return url.replace("postgresql+asyncpg", "postgresql+psycopg", 1)
        return url


settings = Settings()
