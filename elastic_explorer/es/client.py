"""
Async HTTP client for an Elasticsearch cluster.

Wraps httpx.AsyncClient with basic auth, an optional insecure-TLS mode and
version detection. Typed verbs decode the JSON body through a pydantic
TypeAdapter; raw verbs hand back (status, text) untouched for the console.

No retries: a failed call raises immediately and the caller decides.

Usage:
    async with RemoteClient("https://es.local:9200", username="elastic", password="pw") as es:
        version = await es.detect_version()
        health = await es.get("/_cluster/health")
"""

from __future__ import annotations

import logging
from typing import Any

import httpx
from pydantic import TypeAdapter, ValidationError

from elastic_explorer.errors import (
    ProtocolError,
    RemoteDecodeError,
    RemoteError,
    RemoteStatusError,
)
from elastic_explorer.es.gate import VersionGate
from elastic_explorer.es.version import RemoteVersion

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0

RAW_METHODS = ("GET", "POST", "PUT", "DELETE", "HEAD", "PATCH")

Body = dict[str, Any] | list[Any] | str | None


class RemoteClient:
    """Authenticated client for one Elasticsearch endpoint.

    Starts unversioned; the first successful detect_version() caches the
    cluster version for the lifetime of the instance. It is never refreshed,
    so a rolling upgrade mid-session is not noticed. Call detect_version()
    once per client, before issuing gated calls concurrently.
    """

    def __init__(
        self,
        base_url: str,
        *,
        insecure: bool = False,
        username: str | None = None,
        password: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self.insecure = insecure
        self.username = username
        self._version: RemoteVersion | None = None

        auth = None
        if username is not None and password is not None:
            auth = httpx.BasicAuth(username, password)
        if insecure:
            logger.warning("TLS certificate verification disabled for %s", self._base_url)

        self._client = httpx.AsyncClient(
            auth=auth,
            verify=not insecure,
            timeout=timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self._client.aclose()

    async def __aenter__(self) -> RemoteClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def version(self) -> RemoteVersion | None:
        """Cached cluster version, or None before detect_version()."""
        return self._version

    @property
    def gate(self) -> VersionGate:
        return VersionGate(self._version)

    def url_for(self, path: str) -> str:
        return f"{self._base_url}/{path.lstrip('/')}"

    # ── Version detection ──

    async def detect_version(self) -> RemoteVersion:
        """GET / and parse ``version.number``. Caches the result."""
        root = await self.get("/", dict[str, Any])
        version_info = root.get("version")
        number = version_info.get("number") if isinstance(version_info, dict) else None
        if not isinstance(number, str):
            raise ProtocolError(f"No version.number in root response from {self._base_url}")
        version = RemoteVersion.parse(number)
        logger.info("Detected Elasticsearch version: %s (%s)", version, self._base_url)
        self._version = version
        return version

    # ── Typed verbs ──

    async def get(self, path: str, response_type: Any = Any) -> Any:
        resp = await self._send("GET", path)
        return self._decode(resp, "GET", path, response_type)

    async def post(self, path: str, body: Body = None, response_type: Any = Any) -> Any:
        resp = await self._send("POST", path, body)
        return self._decode(resp, "POST", path, response_type)

    async def put(self, path: str, body: Body = None, response_type: Any = Any) -> Any:
        resp = await self._send("PUT", path, body)
        return self._decode(resp, "PUT", path, response_type)

    async def delete(self, path: str, response_type: Any = Any) -> Any:
        resp = await self._send("DELETE", path)
        return self._decode(resp, "DELETE", path, response_type)

    # ── Raw verbs ──

    async def get_raw(self, path: str) -> tuple[int, str]:
        return await self.request_raw("GET", path)

    async def post_raw(self, path: str, body: Body = None) -> tuple[int, str]:
        return await self.request_raw("POST", path, body)

    async def put_raw(self, path: str, body: Body = None) -> tuple[int, str]:
        return await self.request_raw("PUT", path, body)

    async def delete_raw(self, path: str) -> tuple[int, str]:
        return await self.request_raw("DELETE", path)

    async def request_raw(self, method: str, path: str, body: Body = None) -> tuple[int, str]:
        """Send any console method and return (status, body text) without interpreting it."""
        method = method.upper()
        if method not in RAW_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")
        resp = await self._send(method, path, body)
        return resp.status_code, resp.text

    # ── Internals ──

    async def _send(self, method: str, path: str, body: Body = None) -> httpx.Response:
        kwargs: dict[str, Any] = {}
        if isinstance(body, str):
            kwargs["content"] = body.encode("utf-8")
            kwargs["headers"] = {"Content-Type": "application/json"}
        elif body is not None:
            kwargs["json"] = body

        try:
            return await self._client.request(method, self.url_for(path), **kwargs)
        except httpx.TimeoutException as e:
            raise RemoteError(f"{method} {path} timed out") from e
        except httpx.HTTPError as e:
            raise RemoteError(f"Failed to send {method} request to {path}: {e}") from e

    def _decode(self, resp: httpx.Response, method: str, path: str, response_type: Any) -> Any:
        if not resp.is_success:
            raise RemoteStatusError(resp.status_code, resp.text, method=method, path=path)
        try:
            data = resp.json()
        except ValueError as e:
            raise RemoteDecodeError(f"Failed to parse response JSON from {method} {path}") from e
        if response_type is Any:
            return data
        try:
            return TypeAdapter(response_type).validate_python(data)
        except ValidationError as e:
            raise RemoteDecodeError(
                f"Unexpected response shape from {method} {path}: {e.error_count()} error(s)"
            ) from e
