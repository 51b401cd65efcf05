"""Tests for master key management."""

import stat
from pathlib import Path

import pytest

from elastic_explorer.errors import ConfigError
from elastic_explorer.vault.keys import KeyManager


class TestLoadOrCreateKey:
    def test_creates_key(self, tmp_path: Path):
        manager = KeyManager(tmp_path / "app" / "db.key")
        key = manager.load_or_create_key()
        assert len(key) == 32
        assert manager.key_path.exists()

    def test_key_file_is_hex(self, tmp_path: Path):
        manager = KeyManager(tmp_path / "db.key")
        key = manager.load_or_create_key()
        content = manager.key_path.read_text()
        assert "\n" not in content
        assert bytes.fromhex(content) == key

    @pytest.mark.skipif(not hasattr(stat, "S_IRGRP"), reason="POSIX permissions only")
    def test_permissions(self, tmp_path: Path):
        manager = KeyManager(tmp_path / "db.key")
        manager.load_or_create_key()
        mode = manager.key_path.stat().st_mode
        assert mode & stat.S_IRGRP == 0  # No group read
        assert mode & stat.S_IROTH == 0  # No other read
        assert mode & stat.S_IRUSR

    def test_idempotent(self, tmp_path: Path):
        manager = KeyManager(tmp_path / "db.key")
        first = manager.load_or_create_key()
        second = manager.load_or_create_key()
        assert first == second

    def test_new_manager_reads_same_key(self, tmp_path: Path):
        first = KeyManager(tmp_path / "db.key").load_or_create_key()
        assert KeyManager(tmp_path / "db.key").load_or_create_key() == first

    def test_trailing_newline_tolerated(self, tmp_path: Path):
        key_path = tmp_path / "db.key"
        key_path.write_text("ab" * 32 + "\n")
        assert KeyManager(key_path).load_or_create_key() == bytes.fromhex("ab" * 32)

    @pytest.mark.parametrize("length", [31, 33, 16, 0])
    def test_wrong_length_rejected(self, tmp_path: Path, length: int):
        key_path = tmp_path / "db.key"
        key_path.write_text("00" * length)
        with pytest.raises(ConfigError, match="32 bytes"):
            KeyManager(key_path).load_or_create_key()

    def test_wrong_length_file_left_alone(self, tmp_path: Path):
        key_path = tmp_path / "db.key"
        key_path.write_text("00" * 31)
        with pytest.raises(ConfigError):
            KeyManager(key_path).load_or_create_key()
        assert key_path.read_text() == "00" * 31

    def test_not_hex_rejected(self, tmp_path: Path):
        key_path = tmp_path / "db.key"
        key_path.write_text("zz" * 32)
        with pytest.raises(ConfigError, match="hex"):
            KeyManager(key_path).load_or_create_key()


class TestLegacyLayout:
    def test_no_legacy_dir(self, tmp_path: Path):
        manager = KeyManager(tmp_path / "app" / "db.key", legacy_dir=tmp_path / "missing")
        assert manager.resolve_legacy_layout() is False

    def test_without_legacy_dir_configured(self, tmp_path: Path):
        assert KeyManager(tmp_path / "db.key").resolve_legacy_layout() is False

    def test_moves_legacy_key_before_load(self, tmp_path: Path):
        legacy = tmp_path / "legacy"
        legacy.mkdir()
        (legacy / "db.key").write_text("cd" * 32)

        manager = KeyManager(tmp_path / "app" / "db.key", legacy_dir=legacy)
        assert manager.resolve_legacy_layout() is True
        assert manager.load_or_create_key() == bytes.fromhex("cd" * 32)
        assert not legacy.exists()
