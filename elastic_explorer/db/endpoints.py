"""
Endpoint DAL — CRUD operations on the endpoints table.

Passwords pass through CredentialVault on the way in; rows come back as
Endpoint models carrying only the encrypted payload.
"""

from __future__ import annotations

import logging
import sqlite3
from datetime import UTC, datetime
from typing import Any

from elastic_explorer.vault.credentials import CredentialVault
from elastic_explorer.vault.models import Endpoint

logger = logging.getLogger(__name__)

_UPDATABLE = {"name", "url", "insecure", "username"}


def _parse_ts(value: Any) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    parsed = datetime.fromisoformat(str(value))
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed


def _row_to_endpoint(row: sqlite3.Row) -> Endpoint:
    return Endpoint(
        id=row["id"],
        name=row["name"],
        url=row["url"],
        insecure=bool(row["insecure"]),
        username=row["username"],
        password_encrypted=row["password_encrypted"],
        created_at=_parse_ts(row["created_at"]),
        updated_at=_parse_ts(row["updated_at"]),
    )


class EndpointStore:
    """SQLite-backed endpoint records."""

    def __init__(self, conn: sqlite3.Connection, vault: CredentialVault) -> None:
        self.conn = conn
        self.vault = vault

    def get(self, endpoint_id: int) -> Endpoint | None:
        row = self.conn.execute("SELECT * FROM endpoints WHERE id = ?", (endpoint_id,)).fetchone()
        return _row_to_endpoint(row) if row else None

    def list(self) -> list[Endpoint]:
        rows = self.conn.execute("SELECT * FROM endpoints ORDER BY name").fetchall()
        return [_row_to_endpoint(r) for r in rows]

    def insert(
        self,
        name: str,
        url: str,
        *,
        insecure: bool = False,
        username: str | None = None,
        password: str | None = None,
    ) -> int:
        """Create an endpoint. Returns its id."""
        cur = self.conn.execute(
            "INSERT INTO endpoints (name, url, insecure, username) VALUES (?, ?, ?, ?)",
            (name, url, insecure, username),
        )
        endpoint_id = int(cur.lastrowid)
        if password:
            self.conn.execute(
                "UPDATE endpoints SET password_encrypted = ? WHERE id = ?",
                (self.vault.store(endpoint_id, password), endpoint_id),
            )
        logger.info("Created endpoint: %s (id: %d)", name, endpoint_id)
        return endpoint_id

    def update(self, endpoint_id: int, **fields: Any) -> bool:
        """Update selected fields. ``password=""`` clears the stored password.

        Returns True if a row was updated.
        """
        assignments: list[str] = []
        params: list[Any] = []
        if "password" in fields:
            password = fields.pop("password")
            assignments.append("password_encrypted = ?")
            params.append(self.vault.store(endpoint_id, password) if password else None)
        unknown = set(fields) - _UPDATABLE
        if unknown:
            raise ValueError(f"Unknown endpoint fields: {sorted(unknown)}")
        for column, value in fields.items():
            assignments.append(f"{column} = ?")
            params.append(value)
        if not assignments:
            return False
        params.append(endpoint_id)
        cur = self.conn.execute(
            f"UPDATE endpoints SET {', '.join(assignments)} WHERE id = ?",
            params,
        )
        return cur.rowcount > 0

    def delete(self, endpoint_id: int) -> bool:
        """Delete an endpoint. Returns True if a row was deleted."""
        cur = self.conn.execute("DELETE FROM endpoints WHERE id = ?", (endpoint_id,))
        if cur.rowcount > 0:
            logger.info("Deleted endpoint: %d", endpoint_id)
            return True
        return False
