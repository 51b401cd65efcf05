"""
Error taxonomy for Elastic Explorer.

ConfigError is fatal at startup. CryptoError is always recovered locally to
"no credential". Protocol, remote and unsupported errors surface to callers
with enough context (path, status, version) to act on.
"""

from __future__ import annotations


class ExplorerError(Exception):
    """Base class for all Elastic Explorer errors."""


class ConfigError(ExplorerError):
    """Invalid or missing key material or configuration."""


class CryptoError(ExplorerError):
    """Decryption or verification failed. Never says why."""


class SecretStoreError(ExplorerError):
    """The OS secret store could not be queried."""


class ProtocolError(ExplorerError):
    """The remote service answered with something we cannot interpret."""


class RemoteError(ExplorerError):
    """A remote call failed (transport, timeout, status or decoding)."""


class RemoteStatusError(RemoteError):
    """Non-2xx response. Carries the raw body for diagnostics."""

    def __init__(self, status_code: int, body: str, *, method: str = "", path: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.method = method
        self.path = path
        where = f" {method} {path}" if method else ""
        super().__init__(f"Elasticsearch error ({status_code}){where}: {body}")


class RemoteDecodeError(RemoteError):
    """A 2xx response whose body did not match the expected shape."""


class UnsupportedError(ExplorerError):
    """A capability is not available on the detected remote version."""

    def __init__(
        self,
        capability: str,
        minimum: str | None = None,
        *,
        removed_in: str | None = None,
    ) -> None:
        self.capability = capability
        self.minimum = minimum
        self.removed_in = removed_in
        if removed_in:
            msg = f"{capability} was removed in Elasticsearch {removed_in}"
        else:
            msg = f"{capability} requires Elasticsearch {minimum} or higher"
        super().__init__(msg)
