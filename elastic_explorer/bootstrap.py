"""
Startup sequence.

Order matters: the legacy directory has to be moved before the key is
loaded (it may contain the key), and the key has to exist before legacy
passwords can be re-encrypted.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass

from elastic_explorer.config import ExplorerConfig, get_config
from elastic_explorer.db import connect, migrate
from elastic_explorer.db.endpoints import EndpointStore
from elastic_explorer.es.client import RemoteClient
from elastic_explorer.vault.credentials import CredentialVault
from elastic_explorer.vault.keys import KeyManager
from elastic_explorer.vault.legacy import KeyringSecretStore, LegacyMigrator, MigrationReport
from elastic_explorer.vault.models import Endpoint

logger = logging.getLogger(__name__)


@dataclass
class Runtime:
    """Everything a request handler needs, built once per process."""

    config: ExplorerConfig
    key: bytes
    conn: sqlite3.Connection
    vault: CredentialVault
    endpoints: EndpointStore
    legacy_report: MigrationReport

    def client_for(self, endpoint: Endpoint) -> RemoteClient:
        """Build a RemoteClient for an endpoint, with its password if we can decrypt it."""
        password = self.vault.reveal(endpoint)
        username = endpoint.username if password is not None else None
        return RemoteClient(
            endpoint.url,
            insecure=endpoint.insecure,
            username=username,
            password=password,
            timeout=self.config.remote.request_timeout,
        )

    def close(self) -> None:
        self.conn.close()


def bootstrap(
    config: ExplorerConfig | None = None,
    secret_store: KeyringSecretStore | None = None,
) -> Runtime:
    """Prepare directories, key, database and legacy data. ConfigError is fatal."""
    cfg = config or get_config()
    keys = KeyManager(cfg.key_path, legacy_dir=cfg.legacy_dir)

    keys.resolve_legacy_layout()
    if not cfg.app_dir.exists():
        cfg.app_dir.mkdir(parents=True, exist_ok=True)
        logger.info("Created data directory: %s", cfg.app_dir)

    key = keys.load_or_create_key()
    vault = CredentialVault(key)

    conn = connect(cfg.db_path)
    try:
        migrate.apply(conn)
        store = secret_store or KeyringSecretStore(cfg.remote.keyring_service)
        report = LegacyMigrator(conn, vault, store).run()
    except Exception:
        conn.close()
        raise

    return Runtime(
        config=cfg,
        key=key,
        conn=conn,
        vault=vault,
        endpoints=EndpointStore(conn, vault),
        legacy_report=report,
    )
