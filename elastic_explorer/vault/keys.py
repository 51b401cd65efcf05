"""
Master key management.

The key is 32 random bytes stored hex encoded at <app_dir>/db.key (chmod 600).
It is loaded once at startup and handed to whoever needs it; nothing here
caches it at module level.
"""

from __future__ import annotations

import binascii
import logging
import os
import secrets
import stat
from pathlib import Path

from elastic_explorer.errors import ConfigError
from elastic_explorer.vault.crypto import KEY_SIZE
from elastic_explorer.vault.layout import RelocationStrategy, resolve_legacy_layout

logger = logging.getLogger(__name__)


class KeyManager:
    """Owns the key file location and the legacy data directory."""

    def __init__(self, key_path: Path | str, legacy_dir: Path | str | None = None) -> None:
        self.key_path = Path(key_path)
        self.legacy_dir = Path(legacy_dir) if legacy_dir is not None else None

    @property
    def app_dir(self) -> Path:
        return self.key_path.parent

    def load_or_create_key(self) -> bytes:
        """Read the key file, or generate and persist a new key if it is missing."""
        if self.key_path.exists():
            return self._load()
        return self._create()

    def _load(self) -> bytes:
        try:
            key_hex = self.key_path.read_text(encoding="ascii").strip()
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Failed to read encryption key at {self.key_path}: {e}") from e
        try:
            key = bytes.fromhex(key_hex)
        except ValueError as e:
            raise ConfigError(f"Encryption key at {self.key_path} is not valid hex") from e
        if len(key) != KEY_SIZE:
            raise ConfigError(
                f"Encryption key must be {KEY_SIZE} bytes, got {len(key)} ({self.key_path})"
            )
        return key

    def _create(self) -> bytes:
        self.key_path.parent.mkdir(parents=True, exist_ok=True)
        key = secrets.token_bytes(KEY_SIZE)
        self.key_path.write_text(binascii.hexlify(key).decode("ascii"), encoding="ascii")
        self._restrict_permissions()
        logger.info("Created encryption key: %s", self.key_path)
        return key

    def _restrict_permissions(self) -> None:
        if os.name != "posix":
            return
        try:
            self.key_path.chmod(stat.S_IRUSR | stat.S_IWUSR)  # 600
        except OSError as e:
            logger.warning("Could not restrict permissions on %s: %s", self.key_path, e)

    def resolve_legacy_layout(self, relocator: RelocationStrategy | None = None) -> bool:
        """Move a previous installation's directory into the current app dir."""
        if self.legacy_dir is None:
            return False
        return resolve_legacy_layout(self.legacy_dir, self.app_dir, relocator)
