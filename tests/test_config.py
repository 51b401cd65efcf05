"""Tests for elastic_explorer.config — environment-driven configuration."""

from pathlib import Path

from elastic_explorer.config import (
    APP_NAME,
    DB_FILENAME,
    KEY_FILENAME,
    ExplorerConfig,
    RemoteConfig,
    get_config,
    reset_config,
)


class TestRemoteConfig:
    def test_defaults(self):
        remote = RemoteConfig()
        assert remote.request_timeout == 30.0
        assert remote.keyring_service == APP_NAME


class TestExplorerConfig:
    def test_derived_paths(self, tmp_path):
        cfg = ExplorerConfig(app_dir=tmp_path)
        assert cfg.key_path == tmp_path / KEY_FILENAME
        assert cfg.db_path == tmp_path / DB_FILENAME

    def test_default_dirs(self):
        cfg = ExplorerConfig()
        assert cfg.app_dir.name == APP_NAME
        assert cfg.legacy_dir == Path.home() / ".elastic-explorer"
        assert cfg.app_dir != cfg.legacy_dir

    def test_default_log_level(self):
        assert ExplorerConfig().log_level == "WARNING"


class TestGetConfig:
    def test_singleton(self):
        assert get_config() is get_config()

    def test_reset(self):
        first = get_config()
        reset_config()
        assert get_config() is not first

    def test_env_overrides(self, monkeypatch, tmp_path):
        monkeypatch.setenv("ELASTIC_EXPLORER_HOME", str(tmp_path / "home"))
        monkeypatch.setenv("ELASTIC_EXPLORER_LEGACY_DIR", str(tmp_path / "old"))
        monkeypatch.setenv("ELASTIC_EXPLORER_REQUEST_TIMEOUT", "5")
        monkeypatch.setenv("ELASTIC_EXPLORER_LOG_LEVEL", "debug")
        monkeypatch.setenv("ELASTIC_EXPLORER_KEYRING_SERVICE", "es-test")

        cfg = get_config()
        assert cfg.app_dir == tmp_path / "home"
        assert cfg.legacy_dir == tmp_path / "old"
        assert cfg.key_path == tmp_path / "home" / "db.key"
        assert cfg.remote.request_timeout == 5.0
        assert cfg.remote.keyring_service == "es-test"
        assert cfg.log_level == "DEBUG"
