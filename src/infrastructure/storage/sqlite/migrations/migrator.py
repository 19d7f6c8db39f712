"""
Versioned schema migrations for the ERP database.

Migrations are ``vNNN_name.sql`` files next to this module, applied in version
order and recorded in ``schema_migrations`` with a content checksum. An
existing database is backed up through SQLite's online backup API first and
restored if initialization fails.

Run as ``cinnamon-erp-migrate`` or ``python -m
src.infrastructure.storage.sqlite.migrations.migrator``.
"""

import argparse
import asyncio
import hashlib
import re
import time
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any

import aiosqlite

from src.config import configure_logging, get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

MIGRATION_FILENAME = re.compile(r"v(\d+)_(.+)\.sql")

REQUIRED_TABLES = [
    "schema_migrations",
    "document_sequences",
    "purchase_invoices",
    "purchase_invoice_items",
    "purchase_invoice_advances",
    "sales_invoices",
    "sales_invoice_items",
    "payrolls",
    "payroll_items",
    "payroll_components",
]


@dataclass
class MigrationInfo:
    """A migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = MIGRATION_FILENAME.fullmatch(path.name)
        if not match:
            raise ValueError(f"Invalid migration filename: {path.name}")
        version, name = match.groups()
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(version=version, name=name, path=path, checksum=digest[:16])

    @property
    def sql(self) -> str:
        return self.path.read_text(encoding="utf-8")


@dataclass
class MigrationResult:
    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@asynccontextmanager
async def _open(db_path: Path) -> AsyncIterator[aiosqlite.Connection]:
    async with aiosqlite.connect(db_path) as conn:
        await conn.execute("PRAGMA journal_mode=WAL")
        await conn.execute("PRAGMA foreign_keys=ON")
        yield conn


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied versions mapped to the checksum they were applied with."""
    try:
        cursor = await conn.execute(
            "SELECT version, checksum FROM schema_migrations ORDER BY version"
        )
    except aiosqlite.OperationalError:
        # Fresh database, no tracking table yet
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied) if applied else None


def discover_migrations(migrations_dir: Path | None = None) -> list[MigrationInfo]:
    """Migration files in ``migrations_dir``, ordered by version."""
    found: list[MigrationInfo] = []
    for path in (migrations_dir or MIGRATIONS_DIR).glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


def _pending(
    migrations: list[MigrationInfo], applied: dict[str, str]
) -> list[MigrationInfo]:
    pending = []
    for migration in migrations:
        checksum = applied.get(migration.version)
        if checksum is None:
            pending.append(migration)
        elif checksum != migration.checksum:
            # Applied files are never re-run
            logger.warning("migration_checksum_changed", version=migration.version)
    return pending


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one migration script and record it in ``schema_migrations``."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript(migration.sql)
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations
                (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except (aiosqlite.Error, OSError) as e:
        await conn.rollback()
        logger.error("migration_failed", version=migration.version, error=str(e))
        return MigrationResult(
            migration.version, migration.name, False, elapsed_ms(), error=str(e)
        )

    result = MigrationResult(migration.version, migration.name, True, elapsed_ms())
    logger.info(
        "migration_applied",
        version=migration.version,
        execution_time_ms=result.execution_time_ms,
    )
    return result


async def _copy_database(source: Path, target: Path) -> None:
    # Online backup includes pages still sitting in the WAL file
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def create_backup(db_path: Path) -> Path:
    """Snapshot ``db_path`` to a timestamped file next to it."""
    backup_path = db_path.with_suffix(f".backup_{datetime.now():%Y%m%d_%H%M%S}.db")
    await _copy_database(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    await _copy_database(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
    migrations_dir: Path | None = None,
) -> list[MigrationResult]:
    """
    Bring the database schema up to date.

    Applies pending migrations in order and stops at the first failure.

    Args:
        db_path: Database file (default from settings)
        create_backup_before: Snapshot an existing database first
        migrations_dir: Where to look for vNNN_*.sql files

    Returns:
        One result per attempted migration; empty when already current
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = await create_backup(db_path)

    migrations = discover_migrations(migrations_dir)
    if not migrations:
        logger.warning("no_migrations_found")

    results: list[MigrationResult] = []
    try:
        async with _open(db_path) as conn:
            for migration in _pending(migrations, await get_applied_migrations(conn)):
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break
    except Exception as e:
        logger.error("database_initialization_failed", error=str(e))
        if backup_path:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path and all(r.success for r in results):
        backup_path.unlink()
        logger.info("backup_cleaned_up")

    return results


run_migrations = initialize_database


async def get_migration_status(db_path: Path | None = None) -> dict[str, Any]:
    """Current version with applied and pending migration versions."""
    db_path = db_path or get_settings().storage.db_path
    status: dict[str, Any] = {
        "exists": db_path.exists(),
        "current_version": None,
        "applied_migrations": [],
        "pending_migrations": [],
    }
    if not status["exists"]:
        return status

    discovered = discover_migrations()
    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    status.update(
        current_version=max(applied) if applied else None,
        applied_migrations=sorted(applied),
        pending_migrations=[m.version for m in _pending(discovered, applied)],
        total_migrations=len(discovered),
    )
    return status


async def verify_schema_integrity(db_path: Path | None = None) -> list[dict[str, Any]]:
    """Foreign key, page integrity and required-table checks, each PASS or FAIL."""
    db_path = db_path or get_settings().storage.db_path

    def check(name: str, ok: bool, **extra: Any) -> dict[str, Any]:
        return {"check": name, "status": "PASS" if ok else "FAIL", **extra}

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = await cursor.fetchall()

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        check("foreign_keys", not violations, violations=len(violations)),
        check("integrity", integrity == "ok", result=integrity),
        check("required_tables", not missing, missing=missing),
    ]


def _print_status(status: dict[str, Any]) -> None:
    print(f"Database exists:    {status['exists']}")
    print(f"Current version:    {status['current_version'] or 'N/A'}")
    print(f"Applied migrations: {', '.join(status['applied_migrations']) or '-'}")
    print(f"Pending migrations: {', '.join(status['pending_migrations']) or '-'}")


def _print_checks(checks: list[dict[str, Any]]) -> None:
    for item in checks:
        print(f"[{item['status']}] {item['check']}")
        if item["status"] == "FAIL":
            for key, value in item.items():
                if key not in ("check", "status"):
                    print(f"       {key}: {value}")


def _print_results(results: list[MigrationResult]) -> None:
    if not results:
        print("Schema is up to date")
    for result in results:
        label = "SUCCESS" if result.success else "FAILED"
        print(f"[{label}] v{result.version}: {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"         Error: {result.error}")


def main(argv: list[str] | None = None) -> int:
    """CLI entry point; returns a non-zero exit code on failure."""
    parser = argparse.ArgumentParser(description="Cinnamon ERP database migrator")
    parser.add_argument("--db-path", type=Path, help="Database path (default from settings)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--status", action="store_true", help="Show migration status")
    group.add_argument("--verify", action="store_true", help="Verify schema integrity")
    parser.add_argument("--no-backup", action="store_true", help="Skip backup before migrating")
    args = parser.parse_args(argv)

    configure_logging()

    if args.status:
        _print_status(asyncio.run(get_migration_status(args.db_path)))
        return 0

    if args.verify:
        checks = asyncio.run(verify_schema_integrity(args.db_path))
        _print_checks(checks)
        return 0 if all(c["status"] == "PASS" for c in checks) else 1

    results = asyncio.run(
        initialize_database(args.db_path, create_backup_before=not args.no_backup)
    )
    _print_results(results)
    return 0 if all(r.success for r in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
