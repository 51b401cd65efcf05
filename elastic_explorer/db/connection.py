"""
SQLite connection factory.

Connections run in autocommit mode; multi-statement changes go through
``transaction()`` which issues BEGIN/COMMIT/ROLLBACK explicitly.

Usage:
    from elastic_explorer.db import get_connection, transaction

    with get_connection() as conn:
        with transaction(conn):
            conn.execute("UPDATE endpoints SET name = ? WHERE id = ?", ("prod", 1))
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from elastic_explorer.config import get_config

logger = logging.getLogger(__name__)


def connect(db_path: Path | str | None = None) -> sqlite3.Connection:
    """Open a connection to the local database, creating the file if missing."""
    if db_path is None:
        db_path = get_config().db_path
    if str(db_path) != ":memory:":
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    logger.info("Connecting to database: %s", db_path)
    conn = sqlite3.connect(str(db_path), isolation_level=None)
    conn.row_factory = sqlite3.Row
    return conn


@contextmanager
def get_connection(db_path: Path | str | None = None) -> Generator[sqlite3.Connection, None, None]:
    """Open a connection for the duration of a block, then close it."""
    conn = connect(db_path)
    try:
        yield conn
    finally:
        conn.close()


@contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Connection, None, None]:
    """Run a block in a transaction. On exception, the transaction is rolled back."""
    conn.execute("BEGIN")
    try:
        yield conn
    except BaseException:
        conn.execute("ROLLBACK")
        raise
    conn.execute("COMMIT")
