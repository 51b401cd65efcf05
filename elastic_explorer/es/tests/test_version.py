"""Tests for RemoteVersion parsing and ordering."""

import pytest

from elastic_explorer.errors import ProtocolError
from elastic_explorer.es.version import RemoteVersion


class TestParse:
    def test_7_17_0(self):
        assert RemoteVersion.parse("7.17.0") == RemoteVersion(7, 17, 0)

    def test_8_11_1(self):
        v = RemoteVersion.parse("8.11.1")
        assert (v.major, v.minor, v.patch) == (8, 11, 1)

    def test_extra_parts_ignored(self):
        assert RemoteVersion.parse("6.8.23.1") == RemoteVersion(6, 8, 23)

    @pytest.mark.parametrize("raw", ["7.17", "8", "", "a.b.c", "7.x.0", "7.17.0-SNAPSHOT", "-1.2.3"])
    def test_invalid(self, raw):
        with pytest.raises(ProtocolError):
            RemoteVersion.parse(raw)

    def test_str(self):
        assert str(RemoteVersion(8, 11, 1)) == "8.11.1"


class TestOrdering:
    def test_lexicographic(self):
        assert RemoteVersion(7, 17, 0) < RemoteVersion(8, 0, 0)
        assert RemoteVersion(7, 8, 0) > RemoteVersion(7, 7, 9)
        assert RemoteVersion(7, 10, 0) > RemoteVersion(7, 9, 0)

    def test_feature_level_ignores_patch(self):
        assert RemoteVersion(7, 8, 0).feature_level == RemoteVersion(7, 8, 5).feature_level
