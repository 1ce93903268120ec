"""
Versioned schema migrations for the diary database.

Migration files are named `v<NNN>_<name>.sql` and live next to this module.
Each one runs inside a single transaction together with its row in
`schema_migrations`, so a failing file leaves no partial schema behind.
An applied file whose checksum no longer matches is never re-run; later
migrations are held back until the mismatch is resolved.

Run as a module for a small CLI:

    python -m propdiary.infrastructure.storage.sqlite.migrations.migrator --status
"""

import argparse
import asyncio
import hashlib
import re
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from pathlib import Path

import aiosqlite

from propdiary.config import get_logger, get_settings

logger = get_logger(__name__)

MIGRATIONS_DIR = Path(__file__).parent

REQUIRED_TABLES = (
    "properties",
    "units",
    "tenancies",
    "overlay_documents",
    "schema_migrations",
)

_FILENAME = re.compile(r"v(?P<version>\d+)_(?P<name>\w+)\.sql")


@dataclass(frozen=True)
class MigrationInfo:
    """One migration file on disk."""

    version: str
    name: str
    path: Path
    checksum: str

    @classmethod
    def from_file(cls, path: Path) -> "MigrationInfo":
        match = _FILENAME.fullmatch(path.name)
        if match is None:
            raise ValueError(f"Invalid migration filename: {path.name}")
        digest = hashlib.sha256(path.read_bytes()).hexdigest()
        return cls(
            version=match["version"],
            name=match["name"],
            path=path,
            checksum=digest[:16],
        )


@dataclass
class MigrationResult:
    """Outcome of applying one migration."""

    version: str
    name: str
    success: bool
    execution_time_ms: int
    error: str | None = None


@dataclass
class MigrationStatus:
    """Applied and pending versions of a database file."""

    exists: bool
    current_version: str | None = None
    applied: list[str] = field(default_factory=list)
    pending: list[str] = field(default_factory=list)
    mismatched: list[str] = field(default_factory=list)


@dataclass
class SchemaCheck:
    """One integrity check over a migrated database."""

    check: str
    passed: bool
    detail: dict = field(default_factory=dict)


def discover_migrations() -> list[MigrationInfo]:
    """Migration files in version order; badly named files are skipped."""
    found = []
    for path in MIGRATIONS_DIR.glob("v*.sql"):
        try:
            found.append(MigrationInfo.from_file(path))
        except ValueError as e:
            logger.warning("skipping_invalid_migration", path=str(path), error=str(e))
    return sorted(found, key=lambda m: int(m.version))


async def get_applied_migrations(conn: aiosqlite.Connection) -> dict[str, str]:
    """Applied version -> recorded checksum; empty for a fresh database."""
    try:
        cursor = await conn.execute("SELECT version, checksum FROM schema_migrations")
    except aiosqlite.OperationalError:
        return {}
    return {version: checksum for version, checksum in await cursor.fetchall()}


async def get_current_version(conn: aiosqlite.Connection) -> str | None:
    applied = await get_applied_migrations(conn)
    return max(applied, key=int) if applied else None


def plan_migrations(
    discovered: list[MigrationInfo],
    applied: dict[str, str],
) -> tuple[list[MigrationInfo], list[str]]:
    """
    Split discovered files into those to run and mismatched versions.

    Nothing after the first mismatched version is planned.
    """
    pending: list[MigrationInfo] = []
    for migration in discovered:
        recorded = applied.get(migration.version)
        if recorded is None:
            pending.append(migration)
        elif recorded != migration.checksum:
            return pending, [migration.version]
    return pending, []


async def apply_migration(
    conn: aiosqlite.Connection,
    migration: MigrationInfo,
) -> MigrationResult:
    """Run one file and record it, all in one transaction."""
    logger.info("applying_migration", version=migration.version, name=migration.name)
    started = time.perf_counter()

    def elapsed_ms() -> int:
        return int((time.perf_counter() - started) * 1000)

    try:
        await conn.executescript("BEGIN;\n" + migration.path.read_text(encoding="utf-8"))
        await conn.execute(
            """
            INSERT OR REPLACE INTO schema_migrations (version, name, checksum, execution_time_ms)
            VALUES (?, ?, ?, ?)
            """,
            (migration.version, migration.name, migration.checksum, elapsed_ms()),
        )
        await conn.commit()
    except aiosqlite.Error as e:
        if conn.in_transaction:
            await conn.rollback()
        logger.error(
            "migration_failed",
            version=migration.version,
            name=migration.name,
            error=str(e),
        )
        return MigrationResult(migration.version, migration.name, False, elapsed_ms(), str(e))

    result = MigrationResult(migration.version, migration.name, True, elapsed_ms())
    logger.info(
        "migration_applied",
        version=migration.version,
        name=migration.name,
        execution_time_ms=result.execution_time_ms,
    )
    return result


def backup_path_for(db_path: Path, when: datetime | None = None) -> Path:
    """Backups sit in a `backups` folder next to the database."""
    stamp = (when or datetime.now(UTC)).strftime("%Y%m%dT%H%M%S")
    return db_path.parent / "backups" / f"{db_path.stem}-backup_{stamp}.db"


async def _copy_database(source: Path, target: Path) -> None:
    # SQLite's online backup includes pages still sitting in the WAL
    async with aiosqlite.connect(source) as src, aiosqlite.connect(target) as dst:
        await src.backup(dst)


async def create_backup(db_path: Path) -> Path:
    """Snapshot the database before migrating."""
    backup_path = backup_path_for(db_path)
    backup_path.parent.mkdir(parents=True, exist_ok=True)
    await _copy_database(db_path, backup_path)
    logger.info("database_backup_created", backup_path=str(backup_path))
    return backup_path


async def restore_backup(db_path: Path, backup_path: Path) -> None:
    await _copy_database(backup_path, db_path)
    logger.info("database_restored_from_backup", backup_path=str(backup_path))


async def initialize_database(
    db_path: Path | None = None,
    create_backup_before: bool = True,
) -> list[MigrationResult]:
    """
    Bring a database file up to the latest schema.

    Args:
        db_path: Database file (defaults to the configured one).
        create_backup_before: Snapshot an existing file first; the snapshot
            is restored if migrating fails and removed if it succeeds.

    Returns:
        Results for the migrations run now; empty when already current.
    """
    db_path = db_path or get_settings().storage.db_path
    db_path.parent.mkdir(parents=True, exist_ok=True)
    logger.info("initializing_database", db_path=str(db_path))

    discovered = discover_migrations()
    if not discovered:
        logger.warning("no_migrations_found", directory=str(MIGRATIONS_DIR))
        return []

    backup_path = None
    if create_backup_before and db_path.exists():
        backup_path = await create_backup(db_path)

    results: list[MigrationResult] = []
    try:
        async with aiosqlite.connect(db_path, isolation_level=None) as conn:
            await conn.execute("PRAGMA journal_mode=WAL")
            await conn.execute("PRAGMA foreign_keys=ON")

            pending, mismatched = plan_migrations(discovered, await get_applied_migrations(conn))
            if mismatched:
                logger.error("migration_checksum_changed", versions=mismatched)

            for migration in pending:
                result = await apply_migration(conn, migration)
                results.append(result)
                if not result.success:
                    break

    except (aiosqlite.Error, OSError) as e:
        logger.error("database_initialization_failed", db_path=str(db_path), error=str(e))
        if backup_path is not None:
            await restore_backup(db_path, backup_path)
        raise

    if backup_path is not None:
        if all(r.success for r in results):
            backup_path.unlink()
        else:
            await restore_backup(db_path, backup_path)
    return results


async def get_migration_status(db_path: Path | None = None) -> MigrationStatus:
    """Which versions are applied, pending or edited since they ran."""
    db_path = db_path or get_settings().storage.db_path
    discovered = discover_migrations()

    if not db_path.exists():
        return MigrationStatus(exists=False, pending=[m.version for m in discovered])

    async with aiosqlite.connect(db_path) as conn:
        applied = await get_applied_migrations(conn)

    pending, mismatched = plan_migrations(discovered, applied)
    return MigrationStatus(
        exists=True,
        current_version=max(applied, key=int) if applied else None,
        applied=sorted(applied, key=int),
        pending=[m.version for m in pending],
        mismatched=mismatched,
    )


async def verify_schema_integrity(db_path: Path | None = None) -> list[SchemaCheck]:
    """SQLite integrity, foreign key and required-table checks."""
    db_path = db_path or get_settings().storage.db_path

    async with aiosqlite.connect(db_path) as conn:
        cursor = await conn.execute("PRAGMA foreign_key_check")
        violations = len(await cursor.fetchall())

        cursor = await conn.execute("PRAGMA integrity_check")
        (integrity,) = await cursor.fetchone()

        cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
        tables = {name for (name,) in await cursor.fetchall()}

    missing = [t for t in REQUIRED_TABLES if t not in tables]
    return [
        SchemaCheck("foreign_keys", violations == 0, {"violations": violations}),
        SchemaCheck("integrity", integrity == "ok", {"result": integrity}),
        SchemaCheck("required_tables", not missing, {"missing": missing}),
    ]


async def _run_cli(args: argparse.Namespace) -> int:
    if args.status:
        status = await get_migration_status(args.db_path)
        print(f"Database exists:  {status.exists}")
        print(f"Current version:  {status.current_version or '-'}")
        print(f"Applied:          {', '.join(status.applied) or '-'}")
        print(f"Pending:          {', '.join(status.pending) or '-'}")
        if status.mismatched:
            print(f"Edited after run: {', '.join(status.mismatched)}")
        return 0

    if args.verify:
        checks = await verify_schema_integrity(args.db_path)
        for check in checks:
            print(f"[{'PASS' if check.passed else 'FAIL'}] {check.check} {check.detail}")
        return 0 if all(c.passed for c in checks) else 1

    results = await initialize_database(args.db_path, create_backup_before=not args.no_backup)
    if not results:
        print("Schema is up to date")
    for result in results:
        outcome = "OK" if result.success else "FAILED"
        print(f"[{outcome}] v{result.version} {result.name} ({result.execution_time_ms}ms)")
        if result.error:
            print(f"    {result.error}")
    return 0 if all(r.success for r in results) else 1


def main(argv: list[str] | None = None) -> int:
    """Command line entry point."""
    parser = argparse.ArgumentParser(description="Property Diary schema migrator")
    parser.add_argument("--db-path", type=Path, help="Database file (default from settings)")
    mode = parser.add_mutually_exclusive_group()
    mode.add_argument("--status", action="store_true", help="Show applied and pending versions")
    mode.add_argument("--verify", action="store_true", help="Run integrity checks")
    parser.add_argument("--no-backup", action="store_true", help="Skip the pre-migration snapshot")
    return asyncio.run(_run_cli(parser.parse_args(argv)))


if __name__ == "__main__":
    raise SystemExit(main())
