"""Vault data models."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field


class Endpoint(BaseModel):
    """A registered Elasticsearch endpoint. Holds the password only in encrypted form."""

    id: int
    name: str
    url: str
    insecure: bool = False
    username: str | None = None
    password_encrypted: str | None = Field(default=None, repr=False)
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def has_password(self) -> bool:
        return bool(self.password_encrypted)


class LegacyEndpointRecord(BaseModel):
    """An endpoint row in the old keychain + base64 fallback schema."""

    id: int
    name: str
    url: str
    insecure: bool = False
    username: str | None = None
    password_keychain_id: str | None = None
    password_fallback: str | None = Field(default=None, repr=False)

    @property
    def has_legacy_secret(self) -> bool:
        return bool(self.password_keychain_id) or bool(self.password_fallback)
