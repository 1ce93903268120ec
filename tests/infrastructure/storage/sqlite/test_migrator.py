"""Unit tests for database migrator."""

from pathlib import Path
from unittest.mock import patch

import aiosqlite
import pytest

from propdiary.infrastructure.storage.sqlite.migrations import migrator
from propdiary.infrastructure.storage.sqlite.migrations.migrator import (
    MigrationInfo,
    create_backup,
    discover_migrations,
    get_applied_migrations,
    get_current_version,
    get_migration_status,
    initialize_database,
    main,
    plan_migrations,
    restore_backup,
    verify_schema_integrity,
)


class TestMigrationInfo:
    """Tests for MigrationInfo dataclass."""

    def test_from_file_parses_filename(self, tmp_path: Path):
        migration_file = tmp_path / "v002_add_notes.sql"
        migration_file.write_text("SELECT 1;")

        info = MigrationInfo.from_file(migration_file)

        assert info.version == "002"
        assert info.name == "add_notes"
        assert len(info.checksum) == 16

    def test_different_content_different_checksum(self, tmp_path: Path):
        a = tmp_path / "v001_a.sql"
        b = tmp_path / "v002_b.sql"
        a.write_text("SELECT 1;")
        b.write_text("SELECT 2;")

        assert MigrationInfo.from_file(a).checksum != MigrationInfo.from_file(b).checksum

    def test_invalid_filename_raises(self, tmp_path: Path):
        bad = tmp_path / "initial.sql"
        bad.write_text("SELECT 1;")

        with pytest.raises(ValueError, match="Invalid migration filename"):
            MigrationInfo.from_file(bad)


class TestDiscoverMigrations:
    def test_ships_initial_schema(self):
        migrations = discover_migrations()
        assert migrations[0].version == "001"
        assert migrations[0].name == "initial"

    def test_sorted_and_skips_invalid(self, tmp_path: Path):
        (tmp_path / "v002_second.sql").write_text("SELECT 2;")
        (tmp_path / "v001_first.sql").write_text("SELECT 1;")
        (tmp_path / "vXYZ_bad.sql").write_text("SELECT 3;")

        with patch.object(migrator, "MIGRATIONS_DIR", tmp_path):
            versions = [m.version for m in discover_migrations()]

        assert versions == ["001", "002"]


class TestInitializeDatabase:
    """Tests for initialize_database()."""

    async def test_fresh_database(self, tmp_path: Path):
        db_path = tmp_path / "nested" / "fresh.db"

        results = await initialize_database(db_path, create_backup_before=False)

        assert db_path.exists()
        assert [r.version for r in results] == ["001"]
        assert all(r.success for r in results)

    async def test_second_run_is_noop(self, tmp_path: Path):
        db_path = tmp_path / "twice.db"
        await initialize_database(db_path, create_backup_before=False)

        results = await initialize_database(db_path)

        assert results == []
        assert list((tmp_path / "backups").glob("*.db")) == []

    async def test_records_applied_version(self, tmp_path: Path):
        db_path = tmp_path / "versions.db"
        await initialize_database(db_path, create_backup_before=False)

        async with aiosqlite.connect(db_path) as conn:
            assert await get_current_version(conn) == "001"
            applied = await get_applied_migrations(conn)

        assert applied["001"] == discover_migrations()[0].checksum

    async def test_changed_checksum_stops(self, tmp_path: Path):
        db_path = tmp_path / "edited.db"
        await initialize_database(db_path, create_backup_before=False)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("UPDATE schema_migrations SET checksum = 'tampered'")
            await conn.commit()

        assert await initialize_database(db_path, create_backup_before=False) == []

    async def test_failed_migration_reported(self, tmp_path: Path):
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "v001_broken.sql").write_text("CREATE TABLE (;")

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await initialize_database(tmp_path / "broken.db", create_backup_before=False)

        assert len(results) == 1
        assert results[0].success is False
        assert results[0].error


class TestApplyMigrationEmptyDb:
    async def test_applied_migrations_empty_without_table(self, tmp_path: Path):
        async with aiosqlite.connect(tmp_path / "empty.db") as conn:
            assert await get_applied_migrations(conn) == {}
            assert await get_current_version(conn) is None


class TestBackups:
    async def test_create_and_restore(self, tmp_path: Path):
        db_path = tmp_path / "data.db"
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("CREATE TABLE notes (body TEXT)")
            await conn.execute("INSERT INTO notes VALUES ('original')")
            await conn.commit()

        backup = await create_backup(db_path)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("UPDATE notes SET body = 'changed'")
            await conn.commit()
        await restore_backup(db_path, backup)

        assert backup.parent == tmp_path / "backups"
        assert "backup_" in backup.name
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT body FROM notes")
            assert (await cursor.fetchone())[0] == "original"


class TestStatusAndVerify:
    async def test_status_without_database(self, tmp_path: Path):
        status = await get_migration_status(tmp_path / "missing.db")

        assert status.exists is False
        assert status.pending == ["001"]

    async def test_status_after_migration(self, tmp_path: Path):
        db_path = tmp_path / "status.db"
        await initialize_database(db_path, create_backup_before=False)

        status = await get_migration_status(db_path)

        assert status.exists is True
        assert status.current_version == "001"
        assert status.applied == ["001"]
        assert status.pending == []

    async def test_verify_passes_on_migrated_db(self, tmp_path: Path):
        db_path = tmp_path / "verify.db"
        await initialize_database(db_path, create_backup_before=False)

        checks = {c.check: c for c in await verify_schema_integrity(db_path)}

        assert all(c.passed for c in checks.values())

    async def test_verify_reports_missing_tables(self, tmp_path: Path):
        db_path = tmp_path / "blank.db"
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("CREATE TABLE unrelated (id INTEGER)")
            await conn.commit()

        checks = {c.check: c for c in await verify_schema_integrity(db_path)}

        assert checks["required_tables"].passed is False
        assert "tenancies" in checks["required_tables"].detail["missing"]


class TestPlanMigrations:
    """Tests for plan_migrations()."""

    def _make_info(self, version: str, checksum: str = "c") -> MigrationInfo:
        return MigrationInfo(
            version=version, name="m", path=Path(f"v{version}_m.sql"), checksum=checksum
        )

    def test_pending_only(self):
        discovered = [self._make_info("001"), self._make_info("002")]

        pending, mismatched = plan_migrations(discovered, {"001": "c"})

        assert [m.version for m in pending] == ["002"]
        assert mismatched == []

    def test_mismatch_holds_back_later_versions(self):
        discovered = [self._make_info("001"), self._make_info("002"), self._make_info("003")]

        pending, mismatched = plan_migrations(discovered, {"001": "c", "002": "edited"})

        assert pending == []
        assert mismatched == ["002"]


class TestAtomicMigrations:
    """A failing file leaves nothing behind."""

    async def test_partial_file_rolled_back(self, tmp_path: Path):
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "v001_half.sql").write_text(
            "CREATE TABLE schema_migrations (version TEXT PRIMARY KEY, name TEXT,"
            " checksum TEXT, execution_time_ms INTEGER);\n"
            "CREATE TABLE half_done (id INTEGER);\n"
            "CREATE TABLE (;\n"
        )
        db_path = tmp_path / "half.db"

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await initialize_database(db_path, create_backup_before=False)

        assert results[0].success is False
        async with aiosqlite.connect(db_path) as conn:
            cursor = await conn.execute("SELECT name FROM sqlite_master WHERE type = 'table'")
            assert await cursor.fetchall() == []

    async def test_later_file_failure_keeps_earlier(self, tmp_path: Path):
        migrations_dir = tmp_path / "migrations"
        migrations_dir.mkdir()
        (migrations_dir / "v001_base.sql").write_text(
            "CREATE TABLE schema_migrations (version TEXT PRIMARY KEY, name TEXT,"
            " checksum TEXT, execution_time_ms INTEGER);\n"
        )
        (migrations_dir / "v002_broken.sql").write_text("CREATE TABLE (;")
        db_path = tmp_path / "two.db"

        with patch.object(migrator, "MIGRATIONS_DIR", migrations_dir):
            results = await initialize_database(db_path, create_backup_before=False)
            status = await get_migration_status(db_path)

        assert [r.success for r in results] == [True, False]
        assert status.applied == ["001"]
        assert status.pending == ["002"]


class TestStatusMismatch:
    async def test_edited_migration_reported(self, tmp_path: Path):
        db_path = tmp_path / "edited_status.db"
        await initialize_database(db_path, create_backup_before=False)
        async with aiosqlite.connect(db_path) as conn:
            await conn.execute("UPDATE schema_migrations SET checksum = 'tampered'")
            await conn.commit()

        status = await get_migration_status(db_path)

        assert status.mismatched == ["001"]


class TestMigratorCli:
    """Tests for the module entry point."""

    def test_migrate_then_status(self, tmp_path: Path, capsys: pytest.CaptureFixture[str]):
        db_path = tmp_path / "cli.db"

        assert main(["--db-path", str(db_path), "--no-backup"]) == 0
        assert main(["--db-path", str(db_path), "--status"]) == 0

        out = capsys.readouterr().out
        assert "[OK] v001 initial" in out
        assert "Current version:  001" in out

    def test_verify_fails_on_blank_database(self, tmp_path: Path):
        db_path = tmp_path / "cli_blank.db"
        db_path.touch()

        assert main(["--db-path", str(db_path), "--verify"]) == 1
