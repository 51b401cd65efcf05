"""Elasticsearch version numbers."""

from __future__ import annotations

from dataclasses import dataclass

from elastic_explorer.errors import ProtocolError


@dataclass(frozen=True, order=True)
class RemoteVersion:
    """A ``major.minor.patch`` version. Orders lexicographically on the triple."""

    major: int
    minor: int
    patch: int = 0

    @classmethod
    def parse(cls, version_str: str) -> RemoteVersion:
        """Parse "7.17.0" or "8.11.1". Parts after the third are ignored.

        Raises ProtocolError on fewer than three parts or non-numeric parts.
        """
        parts = str(version_str).split(".")
        if len(parts) < 3:
            raise ProtocolError(f"Invalid version format: {version_str!r}")
        numbers: list[int] = []
        for label, part in zip(("major", "minor", "patch"), parts[:3]):
            if not (part.isascii() and part.isdigit()):
                raise ProtocolError(f"Invalid {label} version in {version_str!r}")
            numbers.append(int(part))
        return cls(*numbers)

    @property
    def feature_level(self) -> tuple[int, int]:
        """(major, minor), which is what capabilities are gated on."""
        return (self.major, self.minor)

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"
