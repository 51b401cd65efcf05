"""
Lightweight migration runner for ``elastic_explorer/migrations/*.sql``.

Usage:
    python -m elastic_explorer.db.migrate status        # show applied vs pending
    python -m elastic_explorer.db.migrate apply         # apply all pending
    python -m elastic_explorer.db.migrate apply 001     # apply specific version
    python -m elastic_explorer.db.migrate apply --dry-run

Plain SQL files tracked by SHA-256 checksum, each applied in its own transaction.
The legacy password columns are not handled here; see
``elastic_explorer.vault.legacy`` which needs the master key.
"""

from __future__ import annotations

import hashlib
import logging
import re
import sqlite3
import sys
from pathlib import Path

from elastic_explorer.db.connection import get_connection

logger = logging.getLogger(__name__)

# Default migration directory (can be overridden for tests)
MIGRATIONS_DIR = Path(__file__).resolve().parents[1] / "migrations"

# Pattern: 001_name.sql, 002b_name.sql, etc.
_MIGRATION_RE = re.compile(r"^(\d+[a-z]?)_.+\.sql$")


def _discover(migrations_dir: Path | None = None) -> list[tuple[str, Path]]:
    """Return sorted list of (version, path) for all .sql files."""
    d = migrations_dir or MIGRATIONS_DIR
    results: list[tuple[str, Path]] = []
    for f in sorted(d.glob("*.sql")):
        m = _MIGRATION_RE.match(f.name)
        if m:
            results.append((m.group(1), f))
    return results


def _sha256(path: Path) -> str:
    return hashlib.sha256(path.read_bytes()).hexdigest()


def _quote(value: str) -> str:
    """SQL string literal."""
    return "'" + value.replace("'", "''") + "'"


def _ensure_table(conn: sqlite3.Connection) -> None:
    """Create schema_migrations table if it doesn't exist."""
    conn.execute("""
        CREATE TABLE IF NOT EXISTS schema_migrations (
            version     TEXT PRIMARY KEY,
            filename    TEXT NOT NULL,
            applied_at  TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
            checksum    TEXT
        )
    """)


def _applied(conn: sqlite3.Connection) -> dict[str, dict]:
    """Return {version: {filename, applied_at, checksum}} for all applied migrations."""
    cur = conn.execute(
        "SELECT version, filename, applied_at, checksum FROM schema_migrations ORDER BY version"
    )
    return {r["version"]: dict(r) for r in cur.fetchall()}


def status(conn: sqlite3.Connection, migrations_dir: Path | None = None) -> list[dict]:
    """Return list of dicts with version, filename, status, checksum info."""
    all_files = _discover(migrations_dir)
    _ensure_table(conn)
    applied = _applied(conn)

    rows: list[dict] = []
    for version, path in all_files:
        file_checksum = _sha256(path)
        if version in applied:
            db_checksum = applied[version].get("checksum")
            drift = db_checksum and db_checksum != file_checksum
            rows.append({
                "version": version,
                "filename": path.name,
                "status": "DRIFT" if drift else "applied",
                "applied_at": applied[version]["applied_at"],
            })
        else:
            rows.append({
                "version": version,
                "filename": path.name,
                "status": "pending",
                "applied_at": None,
            })
    return rows


def apply(
    conn: sqlite3.Connection,
    version: str | None = None,
    dry_run: bool = False,
    migrations_dir: Path | None = None,
) -> list[str]:
    """Apply pending migrations. Returns list of applied version strings."""
    all_files = _discover(migrations_dir)
    _ensure_table(conn)
    applied = _applied(conn)

    to_apply = [
        (v, path)
        for v, path in all_files
        if v not in applied and (not version or v == version)
    ]
    if not to_apply:
        logger.debug("No pending migrations")
        return []

    applied_versions: list[str] = []
    for v, path in to_apply:
        checksum = _sha256(path)
        if dry_run:
            logger.info("[dry-run] Would apply %s (version %s)", path.name, v)
            applied_versions.append(v)
            continue

        sql = path.read_text()
        record = (
            "INSERT INTO schema_migrations (version, filename, checksum) "
            f"VALUES ({_quote(v)}, {_quote(path.name)}, {_quote(checksum)});"
        )
        try:
            # The bookkeeping row commits in the same transaction as the
            # migration itself.
            conn.executescript(f"BEGIN;\n{sql}\n{record}\nCOMMIT;")
        except sqlite3.Error:
            if conn.in_transaction:
                conn.execute("ROLLBACK")
            logger.error("Migration %s failed", path.name)
            raise
        logger.info("Applied %s (version %s)", path.name, v)
        applied_versions.append(v)

    return applied_versions


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = sys.argv[1:] if argv is None else argv
    with get_connection() as conn:
        if not args or args[0] == "status":
            rows = status(conn)
            if not rows:
                print("No migration files found.")
                return 0
            print(f"{'Version':<10} {'Filename':<45} {'Status':<10} {'Applied At'}")
            print("-" * 90)
            for r in rows:
                at = str(r["applied_at"])[:19] if r["applied_at"] else ""
                print(f"{r['version']:<10} {r['filename']:<45} {r['status']:<10} {at}")
            return 0

        if args[0] == "apply":
            dry_run = "--dry-run" in args
            version = next((a for a in args[1:] if a != "--dry-run"), None)
            done = apply(conn, version=version, dry_run=dry_run)
            prefix = "[dry-run] Would apply" if dry_run else "Applied"
            for v in done:
                print(f"{prefix} version {v}")
            if not done:
                print("Nothing to apply.")
            return 0

    print(f"Unknown command: {args[0]}", file=sys.stderr)
    print("Usage: python -m elastic_explorer.db.migrate [status|apply [VERSION] [--dry-run]]")
    return 1


if __name__ == "__main__":
    sys.exit(main())
