"""
Endpoint password lifecycle: encrypt on write, decrypt on read.

A password that cannot be decrypted is treated exactly like a missing one
by callers. The difference only shows up in the logs.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Iterable
from dataclasses import dataclass

from elastic_explorer.errors import CryptoError
from elastic_explorer.vault.crypto import decrypt_text, encrypt
from elastic_explorer.vault.models import Endpoint

logger = logging.getLogger(__name__)


class _Outcome(enum.Enum):
    PRESENT = "present"
    ABSENT = "absent"
    UNDECRYPTABLE = "undecryptable"


@dataclass(frozen=True)
class _Reveal:
    outcome: _Outcome
    password: str | None = None


class CredentialVault:
    """Binds the master key to endpoint records."""

    def __init__(self, key: bytes) -> None:
        self._key = key

    def store(self, endpoint_id: int | None, plaintext_password: str) -> str:
        """Encrypt a password for an endpoint. The caller persists the payload."""
        payload = encrypt(plaintext_password, self._key)
        logger.debug("Encrypted password for endpoint %s", endpoint_id)
        return payload

    def reveal(self, endpoint: Endpoint) -> str | None:
        """Return the decrypted password, or None if there is none we can use."""
        result = self._reveal(endpoint)
        if result.outcome is _Outcome.ABSENT:
            logger.debug("No password configured for endpoint %s", endpoint.id)
        elif result.outcome is _Outcome.UNDECRYPTABLE:
            logger.warning(
                "Stored password for endpoint %s (%s) could not be decrypted; "
                "continuing without credentials",
                endpoint.id,
                endpoint.name,
            )
        return result.password

    def reveal_many(self, endpoints: Iterable[Endpoint]) -> dict[int, str | None]:
        """Reveal passwords for a batch of endpoints, keyed by endpoint id."""
        return {ep.id: self.reveal(ep) for ep in endpoints}

    def _reveal(self, endpoint: Endpoint) -> _Reveal:
        if not endpoint.password_encrypted:
            return _Reveal(_Outcome.ABSENT)
        try:
            password = decrypt_text(endpoint.password_encrypted, self._key)
        except CryptoError:
            return _Reveal(_Outcome.UNDECRYPTABLE)
        return _Reveal(_Outcome.PRESENT, password)
