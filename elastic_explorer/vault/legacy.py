"""
One-time migration from the keychain + base64 fallback password scheme.

Older installs kept each endpoint password in the OS keychain (service
"elastic-explorer", user "endpoint-<id>") and also as base64 plaintext in
``endpoints.password_fallback``. This module re-encrypts whatever it can
recover into ``endpoints.password_encrypted`` and drops both legacy columns.

Safe to run on every startup: once the legacy columns are gone it returns
immediately.
"""

from __future__ import annotations

import base64
import binascii
import logging
import sqlite3
from dataclasses import dataclass, field

import keyring
from keyring.errors import KeyringError, PasswordDeleteError

from elastic_explorer.config import APP_NAME
from elastic_explorer.db.connection import transaction
from elastic_explorer.errors import SecretStoreError
from elastic_explorer.vault.credentials import CredentialVault
from elastic_explorer.vault.models import LegacyEndpointRecord

logger = logging.getLogger(__name__)

LEGACY_COLUMNS = ("password_keychain_id", "password_fallback")


def keychain_id_for(endpoint_id: int) -> str:
    """Keychain user name the old scheme used for an endpoint."""
    return f"endpoint-{endpoint_id}"


class KeyringSecretStore:
    """Thin wrapper over the ``keyring`` library for the old keychain entries."""

    def __init__(self, service: str = APP_NAME) -> None:
        self.service = service

    def get(self, keychain_id: str) -> str | None:
        """Return the stored secret, None if there is no entry."""
        try:
            return keyring.get_password(self.service, keychain_id)
        except KeyringError as e:
            raise SecretStoreError(f"Keychain lookup failed for {keychain_id}: {e}") from e

    def delete(self, keychain_id: str) -> None:
        try:
            keyring.delete_password(self.service, keychain_id)
        except PasswordDeleteError:
            pass
        except KeyringError as e:
            raise SecretStoreError(f"Keychain delete failed for {keychain_id}: {e}") from e


@dataclass
class MigrationReport:
    """What the legacy migration did, by endpoint id."""

    migrated: list[int] = field(default_factory=list)
    unrecoverable: list[int] = field(default_factory=list)
    skipped: bool = False


def decode_fallback(value: str | None) -> str | None:
    """Decode a base64 fallback password. None if it is missing or garbled."""
    if not value:
        return None
    try:
        return base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, ValueError):
        return None


class LegacyMigrator:
    """Moves legacy endpoint secrets into the encrypted column."""

    def __init__(
        self,
        conn: sqlite3.Connection,
        vault: CredentialVault,
        secret_store: KeyringSecretStore | None = None,
    ) -> None:
        self.conn = conn
        self.vault = vault
        self.secret_store = secret_store or KeyringSecretStore()

    def _columns(self) -> set[str]:
        return {row["name"] for row in self.conn.execute("PRAGMA table_info(endpoints)")}

    def needs_migration(self) -> bool:
        return any(col in self._columns() for col in LEGACY_COLUMNS)

    def resolve_plaintext(self, record: LegacyEndpointRecord) -> str | None:
        """Keychain first, then the base64 fallback column."""
        if record.password_keychain_id:
            try:
                password = self.secret_store.get(record.password_keychain_id)
            except SecretStoreError as e:
                logger.warning(
                    "Keychain unavailable for endpoint %s: %s. Trying fallback.", record.id, e
                )
            else:
                if password is not None:
                    return password
                logger.info("No keychain entry for endpoint %s. Trying fallback.", record.id)

        password = decode_fallback(record.password_fallback)
        if password is None and record.password_fallback:
            logger.error("Failed to decode fallback password for endpoint %s", record.id)
        return password

    def _legacy_records(self, columns: set[str]) -> list[LegacyEndpointRecord]:
        select = ["id", "name", "url", "insecure", "username"]
        select += [c for c in LEGACY_COLUMNS if c in columns]
        rows = self.conn.execute(f"SELECT {', '.join(select)} FROM endpoints").fetchall()
        return [LegacyEndpointRecord(**dict(row)) for row in rows]

    def run(self) -> MigrationReport:
        """Migrate legacy secrets and drop the legacy columns."""
        columns = self._columns()
        if not any(col in columns for col in LEGACY_COLUMNS):
            logger.debug("Legacy password migration skipped - columns already removed")
            return MigrationReport(skipped=True)

        logger.info("Migrating legacy endpoint passwords")
        report = MigrationReport()
        migrated_keychain_ids: list[str] = []

        with transaction(self.conn):
            if "password_encrypted" not in columns:
                self.conn.execute("ALTER TABLE endpoints ADD COLUMN password_encrypted TEXT")

            for record in self._legacy_records(columns):
                if not record.has_legacy_secret:
                    continue
                password = self.resolve_plaintext(record)
                if password is None:
                    logger.warning(
                        "Could not recover password for endpoint %s (%s); "
                        "it will have no password after migration",
                        record.id,
                        record.name,
                    )
                    report.unrecoverable.append(record.id)
                    continue
                self.conn.execute(
                    "UPDATE endpoints SET password_encrypted = ? WHERE id = ?",
                    (self.vault.store(record.id, password), record.id),
                )
                report.migrated.append(record.id)
                if record.password_keychain_id:
                    migrated_keychain_ids.append(record.password_keychain_id)

            self._rebuild_without_legacy_columns()

        for keychain_id in migrated_keychain_ids:
            try:
                self.secret_store.delete(keychain_id)
            except SecretStoreError as e:
                logger.debug("Leaving keychain entry %s in place: %s", keychain_id, e)

        logger.info(
            "Legacy password migration done: %d migrated, %d unrecoverable",
            len(report.migrated),
            len(report.unrecoverable),
        )
        return report

    def _rebuild_without_legacy_columns(self) -> None:
        self.conn.execute("""
            CREATE TABLE endpoints_new (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL,
                url TEXT NOT NULL,
                insecure BOOLEAN NOT NULL DEFAULT 0,
                username TEXT,
                password_encrypted TEXT,
                created_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
                updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP
            )
        """)
        self.conn.execute("""
            INSERT INTO endpoints_new
                (id, name, url, insecure, username, password_encrypted, created_at, updated_at)
            SELECT id, name, url, insecure, username, password_encrypted, created_at, updated_at
            FROM endpoints
        """)
        self.conn.execute("DROP TABLE endpoints")
        self.conn.execute("ALTER TABLE endpoints_new RENAME TO endpoints")
        self.conn.execute("CREATE INDEX IF NOT EXISTS idx_endpoints_name ON endpoints(name)")
        self.conn.execute("""
            CREATE TRIGGER IF NOT EXISTS update_endpoints_timestamp
            AFTER UPDATE ON endpoints
            BEGIN
                UPDATE endpoints SET updated_at = CURRENT_TIMESTAMP WHERE id = NEW.id;
            END
        """)
