"""Tests for the SQL migration runner."""

from pathlib import Path

import pytest

from elastic_explorer.db import connect, migrate


@pytest.fixture
def conn(tmp_path: Path):
    c = connect(tmp_path / "test.db")
    yield c
    c.close()


@pytest.fixture
def migrations_dir(tmp_path: Path) -> Path:
    d = tmp_path / "migrations"
    d.mkdir()
    (d / "001_init.sql").write_text("CREATE TABLE a (id INTEGER PRIMARY KEY);")
    (d / "002_more.sql").write_text("CREATE TABLE b (id INTEGER PRIMARY KEY);")
    (d / "README.md").write_text("not a migration")
    return d


class TestDiscover:
    def test_bundled_migrations_found(self):
        versions = [v for v, _ in migrate._discover()]
        assert "001" in versions

    def test_ignores_non_matching(self, migrations_dir: Path):
        assert [v for v, _ in migrate._discover(migrations_dir)] == ["001", "002"]


class TestApply:
    def test_applies_pending(self, conn, migrations_dir):
        assert migrate.apply(conn, migrations_dir=migrations_dir) == ["001", "002"]
        tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert {"a", "b", "schema_migrations"} <= tables

    def test_second_apply_is_noop(self, conn, migrations_dir):
        migrate.apply(conn, migrations_dir=migrations_dir)
        assert migrate.apply(conn, migrations_dir=migrations_dir) == []

    def test_apply_specific_version(self, conn, migrations_dir):
        assert migrate.apply(conn, version="002", migrations_dir=migrations_dir) == ["002"]
        rows = {r["version"]: r["status"] for r in migrate.status(conn, migrations_dir)}
        assert rows == {"001": "pending", "002": "applied"}

    def test_dry_run_changes_nothing(self, conn, migrations_dir):
        assert migrate.apply(conn, dry_run=True, migrations_dir=migrations_dir) == ["001", "002"]
        rows = migrate.status(conn, migrations_dir)
        assert all(r["status"] == "pending" for r in rows)

    def test_failed_migration_rolls_back(self, conn, migrations_dir):
        (migrations_dir / "003_broken.sql").write_text(
            "CREATE TABLE c (id INTEGER); THIS IS NOT SQL;"
        )
        with pytest.raises(Exception):
            migrate.apply(conn, migrations_dir=migrations_dir)
        tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert "c" not in tables
        assert not conn.in_transaction

    def test_record_commits_with_migration(self, conn, migrations_dir):
        migrate._ensure_table(conn)
        conn.execute(
            "CREATE TRIGGER block_record BEFORE INSERT ON schema_migrations "
            "BEGIN SELECT RAISE(ABORT, 'record blocked'); END"
        )
        with pytest.raises(Exception, match="record blocked"):
            migrate.apply(conn, version="001", migrations_dir=migrations_dir)
        tables = {r["name"] for r in conn.execute("SELECT name FROM sqlite_master WHERE type='table'")}
        assert "a" not in tables
        assert not conn.in_transaction

    def test_filename_with_quote_recorded(self, conn, tmp_path):
        d = tmp_path / "quoted"
        d.mkdir()
        (d / "001_it's.sql").write_text("CREATE TABLE q (id INTEGER);")
        assert migrate.apply(conn, migrations_dir=d) == ["001"]
        row = conn.execute("SELECT filename, checksum FROM schema_migrations").fetchone()
        assert row["filename"] == "001_it's.sql"
        assert row["checksum"] == migrate._sha256(d / "001_it's.sql")

    def test_drift_detected(self, conn, migrations_dir):
        migrate.apply(conn, migrations_dir=migrations_dir)
        (migrations_dir / "001_init.sql").write_text("CREATE TABLE a (id INTEGER PRIMARY KEY, x TEXT);")
        rows = {r["version"]: r["status"] for r in migrate.status(conn, migrations_dir)}
        assert rows["001"] == "DRIFT"

    def test_bundled_schema(self, conn):
        migrate.apply(conn)
        cols = {r["name"] for r in conn.execute("PRAGMA table_info(endpoints)")}
        assert {"id", "name", "url", "insecure", "username", "password_encrypted"} <= cols


class TestMain:
    def test_status_and_apply(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("ELASTIC_EXPLORER_HOME", str(tmp_path / "home"))
        assert migrate.main(["status"]) == 0
        assert "pending" in capsys.readouterr().out
        assert migrate.main(["apply"]) == 0
        assert "Applied version 001" in capsys.readouterr().out

    def test_unknown_command(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setenv("ELASTIC_EXPLORER_HOME", str(tmp_path / "home"))
        assert migrate.main(["bogus"]) == 1
