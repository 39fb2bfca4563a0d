"""
Versioned SQL migrations for the invoice database.

Migration files live next to this module and are named ``v001_initial.sql``,
``v002_...``. Each applied file is recorded in ``schema_migrations`` with a
checksum of its text so edits to an already-applied file show up in the logs.

A copy of an existing database file is taken before migrating. The copy is
removed when every pending migration applied cleanly and copied back over
the database file when one of them failed.
"""

import hashlib
import re
import shutil
import time
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

import aiosqlite

from src.config import get_logger, get_settings
from src.core.exceptions import ConfigurationError, DatabaseError

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent
MIGRATION_FILE = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = ("companies", "customers", "invoices", "invoice_items", "schema_migrations")

RECORD_MIGRATION_SQL = """
    INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
    VALUES (?, ?, ?, ?)
"""


@dataclass(frozen=True)
class MigrationInfo:
    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILE.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")

        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match.group(1),
            name=match.group(2),
            path=path,
            checksum=digest[:16],
        )

    @property
    def label(self) -> str:
        return f"v{self.version}_{self.name}"


@dataclass
class MigrationResult:
    """Outcome of one attempted migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum recorded when they ran."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        # Fresh database, v001 creates the table
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


def discover_migrations(directory: Path = MIGRATIONS_DIR) -> list[MigrationInfo]:
    """Migration files in ``directory`` ordered by version number."""
    found = []
    for path in directory.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it. Failures are returned, not raised."""
    started = time.perf_counter()
    logger.info("applying_migration", migration=migration.label)

    try:
        await conn.executescript(migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            RECORD_MIGRATION_SQL,
            (migration.version, migration.name, migration.checksum, _elapsed_ms(started)),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        await conn.rollback()
        logger.error("migration_failed", migration=migration.label, error=str(e))
        return MigrationResult(
            version=migration.version,
            name=migration.name,
            success=False,
            execution_time_ms=_elapsed_ms(started),
            error=str(e),
        )

    result = MigrationResult(
        version=migration.version,
        name=migration.name,
        success=True,
        execution_time_ms=_elapsed_ms(started),
    )
    logger.info(
        "migration_applied",
        migration=migration.label,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def create_backup(db_path: Path) -> Path:
    """Copy the database file to ``<name>.backup_<timestamp>.db``."""
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    backup_path = db_path.with_suffix(f".backup_{stamp}.db")
    shutil.copy2(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


def _restore_backup(backup_path: Path, db_path: Path) -> None:
    shutil.copy2(backup_path, db_path)
    logger.warning("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring the database schema up to date.

    Args:
        db_path: Database file; defaults to the configured storage path
        create_backup_before: Copy an existing database file aside first

    Returns:
        One result per migration that was applied, empty when up to date

    Raises:
        ConfigurationError: No migration files were found
        DatabaseError: A migration failed; the backup has been restored
    """
    db_path = Path(db_path or get_settings().storage.db_path)
    migrations = discover_migrations()
    if not migrations:
        raise ConfigurationError(f"No migration files found in {MIGRATIONS_DIR}")

    db_path.parent.mkdir(parents=True, exist_ok=True)
    backup_path = create_backup(db_path) if create_backup_before and db_path.exists() else None
    logger.info("initializing_database", db_path=str(db_path))

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("PRAGMA foreign_keys=ON")
            applied = await get_applied_migrations(conn)

            for migration in migrations:
                recorded = applied.get(migration.version)
                if recorded is not None:
                    if recorded != migration.checksum:
                        logger.warning("migration_checksum_changed", migration=migration.label)
                    continue

                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    raise DatabaseError(f"migration {migration.label}", result.error or "")
    except Exception:
        if backup_path is not None and backup_path.exists():
            _restore_backup(backup_path, db_path)
        raise

    if backup_path is not None:
        backup_path.unlink()
    return results


# Name used by the app lifespan and the tests
run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict:
    """Applied and pending versions plus any required table that is missing."""
    db_path = Path(db_path or get_settings().storage.db_path)
    versions = [m.version for m in discover_migrations()]

    if not db_path.exists():
        return {
            "exists": False,
            "applied_migrations": [],
            "pending_migrations": versions,
            "missing_tables": list(REQUIRED_TABLES),
        }

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)
        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}

    return {
        "exists": True,
        "applied_migrations": sorted(applied),
        "pending_migrations": [v for v in versions if v not in applied],
        "missing_tables": [t for t in REQUIRED_TABLES if t not in tables],
    }
