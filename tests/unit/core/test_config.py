"""Unit tests for settings and database backend selection."""

import os
from pathlib import Path
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from rollcall.core.config import Settings, get_settings

DATABASE_ENV = [
    "DATABASE_URL",
    "DATABASE_HOST",
    "DATABASE_PORT",
    "DATABASE_NAME",
    "DATABASE_USERNAME",
    "DATABASE_PASSWORD",
    "DATABASE_SSL",
    "DATABASE_MAX_CONNECTIONS",
    "NODE_ENV",
    "ROLLCALL_ENVIRONMENT",
    "ROLLCALL_DATABASE_URL",
    "ROLLCALL_DATABASE_HOST",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in DATABASE_ENV:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def make_settings(**kwargs) -> Settings:
    return Settings(_env_file=None, **kwargs)


def test_settings_defaults():
    settings = make_settings()

    assert settings.app_name == "Rollcall"
    assert settings.api_title == "Groups API"
    assert settings.environment == "development"
    assert settings.port == 3000
    assert settings.session_cookie_name == "token"
    assert settings.rate_limit_requests == 100
    assert settings.rate_limit_window_seconds == 900
    assert settings.trusted_proxies == []
    assert settings.rate_limit_endpoints == {"POST /users": (5, 900)}
    assert settings.is_development is True


def test_sqlite_is_default_backend():
    settings = make_settings()

    assert settings.uses_postgres is False
    assert settings.database_backend == "sqlite"
    assert settings.sqlalchemy_url.drivername == "sqlite+aiosqlite"
    assert settings.sqlite_file == Path("./data/db.sqlite")


def test_custom_sqlite_path():
    settings = make_settings(sqlite_path="/tmp/rollcall-test/app.db")

    assert settings.sqlite_file == Path("/tmp/rollcall-test/app.db")


def test_database_url_selects_postgres_with_async_driver():
    with patch.dict(os.environ, {"DATABASE_URL": "postgres://u:p@db.internal:5433/app"}):
        settings = make_settings()

    url = settings.sqlalchemy_url
    assert settings.uses_postgres is True
    assert settings.database_backend == "postgresql"
    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "db.internal"
    assert url.port == 5433
    assert url.database == "app"
    assert settings.sqlite_file is None


def test_database_host_builds_postgres_url():
    env = {
        "DATABASE_HOST": "pg.example.net",
        "DATABASE_PORT": "6543",
        "DATABASE_NAME": "groups",
        "DATABASE_USERNAME": "svc",
        "DATABASE_PASSWORD": "s3cret",
        "DATABASE_SSL": "true",
        "DATABASE_MAX_CONNECTIONS": "25",
    }
    with patch.dict(os.environ, env):
        settings = make_settings()

    url = settings.sqlalchemy_url
    assert url.drivername == "postgresql+asyncpg"
    assert url.host == "pg.example.net"
    assert url.port == 6543
    assert url.database == "groups"
    assert url.username == "svc"
    assert url.password == "s3cret"
    assert settings.database_ssl is True
    assert settings.database_max_connections == 25
    assert "s3cret" not in url.render_as_string(hide_password=True)


def test_production_defaults_to_postgres():
    with patch.dict(os.environ, {"NODE_ENV": "production"}):
        settings = make_settings()

    assert settings.is_production is True
    assert settings.database_backend == "postgresql"
    assert settings.sqlalchemy_url.host == "localhost"


@pytest.mark.parametrize(
    ("value", "expected"),
    [("test", "testing"), ("dev", "development"), ("prod", "production"), ("Testing", "testing")],
)
def test_environment_short_names(value, expected):
    with patch.dict(os.environ, {"NODE_ENV": value}):
        assert make_settings().environment == expected


def test_sqlite_database_url_gets_async_driver():
    settings = make_settings(database_url="sqlite:///data/custom.db")

    assert settings.uses_postgres is False
    assert settings.database_backend == "sqlite"
    assert settings.sqlalchemy_url.drivername == "sqlite+aiosqlite"
    assert settings.sqlite_file == Path("data/custom.db")


def test_in_memory_sqlite_database_url():
    settings = make_settings(database_url="sqlite+aiosqlite:///:memory:")

    assert settings.database_backend == "sqlite"
    assert settings.sqlite_file is None


@pytest.mark.parametrize("url", ["mysql://u:p@db/app", "not a url"])
def test_unsupported_database_url_is_rejected(url):
    with pytest.raises(ValidationError, match="DATABASE_URL"):
        make_settings(database_url=url)


def test_trusted_proxies_from_comma_separated_string():
    settings = make_settings(trusted_proxies="10.0.0.1, 172.16.0.0/12")

    assert settings.trusted_proxies == ["10.0.0.1", "172.16.0.0/12"]


def test_invalid_trusted_proxy_is_rejected():
    with pytest.raises(ValidationError):
        make_settings(trusted_proxies=["proxy.internal"])


def test_cors_origins_from_comma_separated_string():
    settings = make_settings(cors_origins="http://a.example, http://b.example")

    assert settings.cors_origins == ["http://a.example", "http://b.example"]


def test_sqlite_rejects_multiple_workers():
    with pytest.raises(ValidationError):
        make_settings(workers=4)


def test_postgres_allows_multiple_workers():
    settings = make_settings(workers=4, database_host="pg")

    assert settings.workers == 4


def test_get_settings_is_cached():
    assert get_settings() is get_settings()
