"""Online SQLite backups using ``VACUUM INTO``.

Backups are written next to the database under ``backups/`` with a UTC
timestamp in the file name, so sorting names sorts them by age.
"""

from datetime import datetime, timezone
from pathlib import Path

from sqlalchemy import text

from rollcall.core.logging import get_logger
from rollcall.infrastructure.persistence.database import DatabaseManager

logger = get_logger(__name__)

BACKUP_DIR_NAME = "backups"
DEFAULT_KEEP = 5


class BackupError(Exception):
    """Raised when a backup cannot be taken."""


def backup_dir_for(database_file: Path) -> Path:
    return database_file.parent / BACKUP_DIR_NAME


def backup_name(database_file: Path, now: datetime) -> str:
    return f"{database_file.stem}-{now:%Y%m%dT%H%M%S%f}Z{database_file.suffix or '.sqlite'}"


def prune_backups(directory: Path, pattern: str, keep: int) -> list[Path]:
    """Delete all but the newest ``keep`` backups matching ``pattern``.

    Returns:
        The deleted paths.
    """
    backups = sorted(directory.glob(pattern))
    stale = backups[:-keep] if keep > 0 else backups
    for path in stale:
        path.unlink()
        logger.info("Removed old backup", path=str(path))
    return stale


async def backup_sqlite(
    db: DatabaseManager,
    keep: int = DEFAULT_KEEP,
    now: datetime | None = None,
) -> Path:
    """Write a consistent copy of the SQLite database and prune old copies.

    Args:
        db: Database manager bound to a SQLite database.
        keep: Number of backups to retain, newest first.
        now: Timestamp for the file name, defaults to the current UTC time.

    Returns:
        Path of the new backup file.

    Raises:
        BackupError: If the database is not a file-backed SQLite database.
    """
    database_file = db.settings.sqlite_file
    if database_file is None:
        raise BackupError("Backups are only supported for SQLite databases")

    directory = backup_dir_for(database_file)
    directory.mkdir(parents=True, exist_ok=True)
    target = directory / backup_name(database_file, now or datetime.now(timezone.utc))
    if target.exists():
        raise BackupError(f"Backup file already exists: {target}")

    # VACUUM cannot run inside a transaction
    async with db.engine.connect() as conn:
        conn = await conn.execution_options(isolation_level="AUTOCOMMIT")
        await conn.execute(text("VACUUM INTO :target"), {"target": str(target)})

    logger.info("Database backup written", path=str(target))
    prune_backups(directory, f"{database_file.stem}-*{database_file.suffix or '.sqlite'}", keep)
    return target
