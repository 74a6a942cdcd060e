"""Command-line interface for Rollcall.

This module provides the CLI commands for running and managing
the Rollcall application.
"""

import asyncio
from typing import NoReturn

import click

from rollcall import __version__
from rollcall.core.config import get_settings
from rollcall.core.logging import configure_logging, get_logger


@click.group()
@click.version_option(version=__version__, prog_name="Rollcall")
def cli() -> None:
    """Rollcall - account-owned groups of people behind a cookie session."""


@cli.command()
@click.option("--host", type=str, default=None, help="Host to bind to (overrides config)")
@click.option("--port", type=int, default=None, help="Port to bind to (overrides config)")
@click.option(
    "--workers",
    type=int,
    default=None,
    help="Number of worker processes (overrides config)",
)
@click.option(
    "--reload",
    is_flag=True,
    default=False,
    help="Enable auto-reload for development",
)
def serve(host: str | None, port: int | None, workers: int | None, reload: bool) -> None:
    """Start the Rollcall server."""
    import uvicorn

    settings = get_settings()

    bind_host = host or settings.host
    bind_port = port or settings.port
    bind_workers = workers or settings.workers

    configure_logging(settings)

    logger = get_logger(__name__)
    logger.info(
        "Starting Rollcall server",
        host=bind_host,
        port=bind_port,
        workers=bind_workers,
        reload=reload,
        environment=settings.environment,
        database=settings.database_backend,
    )

    uvicorn.run(
        "rollcall.infrastructure.api.app:app",
        host=bind_host,
        port=bind_port,
        workers=1 if reload else bind_workers,
        reload=reload,
        log_level=settings.log_level.lower(),
        access_log=True,
        server_header=False,
    )


@cli.command()
def init_db() -> None:
    """Create all database tables on the selected backend.

    Safe to run repeatedly: existing tables are left untouched.
    """
    from rollcall.infrastructure.persistence.database import (
        get_db_manager,
        init_database,
    )

    settings = get_settings()
    configure_logging(settings)

    async def initialize():
        try:
            await init_database()
            click.echo(f"Database initialized ({settings.database_backend}).")
        finally:
            await get_db_manager().disconnect()

    asyncio.run(initialize())


@cli.command()
@click.option(
    "--keep",
    type=click.IntRange(min=1),
    default=5,
    show_default=True,
    help="Number of backups to retain",
)
def backup(keep: int) -> None:
    """Back up the SQLite database with VACUUM INTO."""
    from rollcall.infrastructure.persistence.backup import BackupError, backup_sqlite
    from rollcall.infrastructure.persistence.database import get_db_manager

    settings = get_settings()
    configure_logging(settings)

    async def run_backup():
        db = get_db_manager()
        try:
            return await backup_sqlite(db, keep=keep)
        finally:
            await db.disconnect()

    try:
        target = asyncio.run(run_backup())
    except BackupError as e:
        raise click.ClickException(str(e)) from e

    click.echo(f"Backup written to {target}")


@cli.command()
def info() -> None:
    """Display Rollcall configuration."""
    settings = get_settings()

    if settings.database_backend == "sqlite":
        database = f"SQLite at {settings.sqlite_file}"
    else:
        database = settings.sqlalchemy_url.render_as_string(hide_password=True)

    click.echo(f"""
Rollcall v{settings.app_version}
{'=' * 40}

Configuration:
  Environment:  {settings.environment}
  Debug:        {settings.debug}

Server:
  Host:         {settings.host}
  Port:         {settings.port}
  Workers:      {settings.workers}

Database:
  Backend:      {settings.database_backend}
  Location:     {database}
  Echo:         {settings.db_echo}

Rate limiting:
  Enabled:      {settings.rate_limit_enabled}
  Default:      {settings.rate_limit_requests} per {settings.rate_limit_window_seconds}s
  Proxies:      {', '.join(settings.trusted_proxies) or 'none'}

Logging:
  Level:        {settings.log_level}
  Format:       {settings.log_format}
""")


def main() -> NoReturn:
    """Main entry point for the CLI.

    This function is called when the `rollcall` command is run
    or when using `python -m rollcall`.
    """
    cli()


if __name__ == "__main__":
    main()
