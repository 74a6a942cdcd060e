"""Configuration management for Rollcall.

Settings are loaded with Pydantic Settings from environment variables and
``.env`` files once at startup and are immutable afterwards. The database
backend (SQLite or PostgreSQL) is chosen here from the environment, so the
rest of the application only ever sees a ready-made SQLAlchemy URL.
"""

from functools import lru_cache
from ipaddress import ip_network
from pathlib import Path
from typing import Literal

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import ArgumentError

DEFAULT_CSP_POLICY = "; ".join(
    [
        "default-src 'self'",
        "script-src 'self'",
        "style-src 'self' 'unsafe-inline'",
        "img-src 'self' data:",
        "font-src 'self'",
        "connect-src 'self'",
        "frame-ancestors 'none'",
        "base-uri 'self'",
        "form-action 'self'",
    ]
)

DEFAULT_PERMISSIONS_POLICY = ", ".join(
    ["camera=()", "microphone=()", "geolocation=()", "payment=()", "usb=()"]
)

_POSTGRES_SCHEMES = {"postgres", "postgresql", "postgresql+psycopg2", "postgresql+psycopg"}
_SQLITE_SCHEMES = {"sqlite", "sqlite+pysqlite", "sqlite+aiosqlite"}


class Settings(BaseSettings):
    """Application configuration settings.

    Most settings use the ``ROLLCALL_`` prefix. Database connection settings
    also accept the deployment-level names (``DATABASE_URL``,
    ``DATABASE_HOST``, ...) injected by the hosting environment.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="ROLLCALL_",
        case_sensitive=False,
        extra="ignore",
        populate_by_name=True,
    )

    # Application Settings
    app_name: str = "Rollcall"
    app_version: str = "0.1.0"
    api_title: str = "Groups API"
    environment: Literal["development", "production", "testing"] = Field(
        default="development",
        validation_alias=AliasChoices("ROLLCALL_ENVIRONMENT", "NODE_ENV"),
    )
    debug: bool = False

    # Server Settings
    host: str = "0.0.0.0"
    port: int = 3000
    workers: int = 1

    # Logging Settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "console"] = "json"

    # CORS Settings
    cors_origins: list[str] = Field(
        default=["http://localhost:3000", "http://localhost:3001"]
    )
    cors_allow_credentials: bool = True
    cors_allow_methods: list[str] = Field(
        default=["GET", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]
    )
    cors_allow_headers: list[str] = Field(
        default=["Content-Type", "Authorization", "Cookie"]
    )
    cors_max_age: int = 86400

    # Session Cookie Settings
    session_cookie_name: str = "token"
    session_cookie_max_age: int | None = None

    # Rate Limiting Settings
    rate_limit_enabled: bool = True
    rate_limit_requests: int = 100
    rate_limit_window_seconds: int = 15 * 60
    # "METHOD /path" -> (max requests, window seconds)
    rate_limit_endpoints: dict[str, tuple[int, int]] = Field(
        default={"POST /users": (5, 15 * 60)}
    )
    # Peers allowed to set X-Forwarded-For / X-Real-IP (addresses or CIDRs)
    trusted_proxies: list[str] = Field(default=[])

    # Security Header Settings
    security_headers_enabled: bool = True
    hsts_max_age: int = 31536000
    csp_policy: str = DEFAULT_CSP_POLICY
    permissions_policy: str = DEFAULT_PERMISSIONS_POLICY

    # Database Settings
    database_url: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_URL", "DATABASE_URL"),
    )
    database_host: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_HOST", "DATABASE_HOST"),
    )
    database_port: int = Field(
        default=5432,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_PORT", "DATABASE_PORT"),
    )
    database_name: str = Field(
        default="rollcall",
        validation_alias=AliasChoices("ROLLCALL_DATABASE_NAME", "DATABASE_NAME"),
    )
    database_username: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_USERNAME", "DATABASE_USERNAME"),
    )
    database_password: str | None = Field(
        default=None,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_PASSWORD", "DATABASE_PASSWORD"),
    )
    database_ssl: bool = Field(
        default=False,
        validation_alias=AliasChoices("ROLLCALL_DATABASE_SSL", "DATABASE_SSL"),
    )
    database_max_connections: int = Field(
        default=10,
        validation_alias=AliasChoices(
            "ROLLCALL_DATABASE_MAX_CONNECTIONS", "DATABASE_MAX_CONNECTIONS"
        ),
    )
    db_max_overflow: int = 10
    db_pool_timeout: int = 30
    db_pool_recycle: int = 3600
    db_echo: bool = False
    sqlite_path: str = "./data/db.sqlite"

    @field_validator("environment", mode="before")
    @classmethod
    def normalize_environment(cls, v: str) -> str:
        """Accept the short ``test``/``dev``/``prod`` spellings used by NODE_ENV."""
        if isinstance(v, str):
            v = v.strip().lower()
            return {"test": "testing", "dev": "development", "prod": "production"}.get(v, v)
        return v

    @field_validator(
        "cors_origins", "cors_allow_methods", "cors_allow_headers", "trusted_proxies", mode="before"
    )
    @classmethod
    def parse_comma_separated(cls, v: str | list[str]) -> list[str]:
        """Parse list settings from a comma-separated string or list."""
        if isinstance(v, str):
            return [item.strip() for item in v.split(",") if item.strip()]
        return v

    @field_validator("trusted_proxies")
    @classmethod
    def validate_trusted_proxies(cls, v: list[str]) -> list[str]:
        """Reject entries that are not IP addresses or CIDR networks."""
        for entry in v:
            ip_network(entry, strict=False)
        return v

    @field_validator("database_url")
    @classmethod
    def validate_database_url(cls, v: str | None) -> str | None:
        """Only PostgreSQL and SQLite URLs can be served by the async drivers."""
        if not v:
            return v
        try:
            drivername = make_url(v).drivername
        except ArgumentError as e:
            raise ValueError(f"Invalid DATABASE_URL: {e}") from e
        if drivername not in _POSTGRES_SCHEMES | _SQLITE_SCHEMES | {"postgresql+asyncpg"}:
            raise ValueError(
                f"Unsupported DATABASE_URL scheme '{drivername}'; "
                "use postgresql:// or sqlite://"
            )
        return v

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def is_development(self) -> bool:
        """Check if running in development environment."""
        return self.environment == "development"

    @property
    def is_testing(self) -> bool:
        """Check if running in testing environment."""
        return self.environment == "testing"

    @property
    def uses_postgres(self) -> bool:
        """Whether the environment asks for PostgreSQL.

        A database URL decides by its scheme. Without one, PostgreSQL is
        selected when a host is configured or when running in production.
        Everything else runs on SQLite.
        """
        if self.database_url:
            return make_url(self.database_url).drivername not in _SQLITE_SCHEMES
        return bool(self.database_host or self.is_production)

    @property
    def database_backend(self) -> str:
        """Name of the selected database backend (``postgresql`` or ``sqlite``)."""
        return self.sqlalchemy_url.get_backend_name()

    @property
    def sqlalchemy_url(self) -> URL:
        """Build the async SQLAlchemy URL for the selected backend."""
        if self.database_url:
            url = make_url(self.database_url)
            if url.drivername in _POSTGRES_SCHEMES:
                url = url.set(drivername="postgresql+asyncpg")
            elif url.drivername in _SQLITE_SCHEMES:
                url = url.set(drivername="sqlite+aiosqlite")
            return url

        if self.uses_postgres:
            return URL.create(
                drivername="postgresql+asyncpg",
                username=self.database_username,
                password=self.database_password,
                host=self.database_host or "localhost",
                port=self.database_port,
                database=self.database_name,
            )

        return URL.create(drivername="sqlite+aiosqlite", database=self.sqlite_path)

    @property
    def sqlite_file(self) -> Path | None:
        """Path of the SQLite database file, or None for other backends."""
        url = self.sqlalchemy_url
        if url.get_backend_name() != "sqlite" or not url.database:
            return None
        if url.database == ":memory:":
            return None
        return Path(url.database)

    @model_validator(mode="after")
    def validate_sqlite_workers(self) -> "Settings":
        """Validate that SQLite is not used with multiple workers."""
        if self.workers > 1 and not self.uses_postgres:
            raise ValueError(
                "SQLite does not support multiple worker processes. "
                f"Requested {self.workers} workers, but SQLite requires workers=1. "
                "Either use --workers 1 or configure PostgreSQL."
            )
        return self


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance.

    Returns:
        Settings: Cached application settings instance.
    """
    return Settings()
