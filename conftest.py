"""
Root-level shared test fixtures.

Inherited by the vault, db and es suites as well as tests/.
"""

from __future__ import annotations

import secrets
from pathlib import Path

import pytest

from elastic_explorer.config import ExplorerConfig, reset_config


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    """Remove env vars that leak between tests and reset the config singleton."""
    for key in [
        "ELASTIC_EXPLORER_HOME",
        "ELASTIC_EXPLORER_LEGACY_DIR",
        "ELASTIC_EXPLORER_REQUEST_TIMEOUT",
        "ELASTIC_EXPLORER_LOG_LEVEL",
        "ELASTIC_EXPLORER_KEYRING_SERVICE",
    ]:
        monkeypatch.delenv(key, raising=False)
    reset_config()
    yield
    reset_config()


@pytest.fixture
def master_key() -> bytes:
    return secrets.token_bytes(32)


@pytest.fixture
def explorer_config(tmp_path: Path) -> ExplorerConfig:
    """Config pointing at a temp app dir and a (missing) temp legacy dir."""
    return ExplorerConfig(app_dir=tmp_path / "app", legacy_dir=tmp_path / "legacy")
