"""
Centralized configuration for Elastic Explorer.

All configuration is loaded from environment variables with sensible defaults.
Paths resolve from the OS-specific application config directory.

Usage:
    from elastic_explorer.config import get_config
    cfg = get_config()
    print(cfg.key_path)      # ~/.config/elastic-explorer/db.key on Linux
    print(cfg.db_path)       # ~/.config/elastic-explorer/elastic-explorer.db
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from platformdirs import user_config_dir

APP_NAME = "elastic-explorer"
KEY_FILENAME = "db.key"
DB_FILENAME = "elastic-explorer.db"


def _default_app_dir() -> Path:
    return Path(user_config_dir(APP_NAME, appauthor=False))


def _default_legacy_dir() -> Path:
    return Path.home() / f".{APP_NAME}"


@dataclass(frozen=True)
class RemoteConfig:
    """Defaults for outbound Elasticsearch calls."""

    request_timeout: float = 30.0
    keyring_service: str = APP_NAME


@dataclass(frozen=True)
class ExplorerConfig:
    """Top-level Elastic Explorer configuration."""

    app_dir: Path = field(default_factory=_default_app_dir)
    legacy_dir: Path = field(default_factory=_default_legacy_dir)
    log_level: str = "WARNING"
    remote: RemoteConfig = field(default_factory=RemoteConfig)

    @property
    def key_path(self) -> Path:
        return self.app_dir / KEY_FILENAME

    @property
    def db_path(self) -> Path:
        return self.app_dir / DB_FILENAME


# Singleton
_config: ExplorerConfig | None = None


def get_config() -> ExplorerConfig:
    """Get or create the singleton config from environment variables."""
    global _config
    if _config is not None:
        return _config
    _config = _load_from_env()
    return _config


def _load_from_env() -> ExplorerConfig:
    """Load configuration from environment variables."""
    app_dir = Path(os.environ.get("ELASTIC_EXPLORER_HOME", _default_app_dir()))
    legacy_dir = Path(os.environ.get("ELASTIC_EXPLORER_LEGACY_DIR", _default_legacy_dir()))

    remote = RemoteConfig(
        request_timeout=float(os.environ.get("ELASTIC_EXPLORER_REQUEST_TIMEOUT", "30")),
        keyring_service=os.environ.get("ELASTIC_EXPLORER_KEYRING_SERVICE", APP_NAME),
    )

    return ExplorerConfig(
        app_dir=app_dir,
        legacy_dir=legacy_dir,
        log_level=os.environ.get("ELASTIC_EXPLORER_LOG_LEVEL", "WARNING").upper(),
        remote=remote,
    )


def reset_config() -> None:
    """Reset the singleton config (for testing)."""
    global _config
    _config = None
