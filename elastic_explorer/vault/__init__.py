"""
Elastic Explorer Vault — endpoint passwords encrypted at rest with AES-256-GCM.

Public API:
    KeyManager(key_path).load_or_create_key()   → 32-byte master key
    CredentialVault(key).store(id, password)    → base64 payload
    CredentialVault(key).reveal(endpoint)       → password or None
    LegacyMigrator(conn, vault).run()           → migrate keychain/fallback passwords
"""

from __future__ import annotations

from elastic_explorer.vault.credentials import CredentialVault
from elastic_explorer.vault.crypto import decrypt, decrypt_text, encrypt
from elastic_explorer.vault.keys import KeyManager
from elastic_explorer.vault.legacy import KeyringSecretStore, LegacyMigrator, MigrationReport
from elastic_explorer.vault.models import Endpoint, LegacyEndpointRecord

__all__ = [
    "CredentialVault",
    "Endpoint",
    "KeyManager",
    "KeyringSecretStore",
    "LegacyEndpointRecord",
    "LegacyMigrator",
    "MigrationReport",
    "decrypt",
    "decrypt_text",
    "encrypt",
]
