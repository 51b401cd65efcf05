"""
Elasticsearch API calls used by the explorer.

Version-dependent calls pick their path through the client's VersionGate.
None of them trigger version detection; an undetected client gets each
capability's default assumption.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from elastic_explorer.es.client import RemoteClient


class ClusterHealth(BaseModel):
    """GET /_cluster/health (the fields we read)."""

    cluster_name: str
    status: str
    timed_out: bool = False
    number_of_nodes: int
    number_of_data_nodes: int
    active_primary_shards: int
    active_shards: int
    relocating_shards: int = 0
    initializing_shards: int = 0
    unassigned_shards: int = 0


class ExplorerApi:
    """Typed and gated Elasticsearch calls on top of a RemoteClient."""

    def __init__(self, client: RemoteClient) -> None:
        self.client = client

    async def cluster_health(self) -> ClusterHealth:
        return await self.client.get("/_cluster/health", ClusterHealth)

    async def search(self, indices: Sequence[str], query: dict[str, Any]) -> dict[str, Any]:
        """Query DSL search across ``indices`` (all indices when empty)."""
        path = f"/{','.join(indices)}/_search" if indices else "/_search"
        return await self.client.post(path, query, dict[str, Any])

    async def search_sql(self, query: str) -> dict[str, Any]:
        """SQL search (7.0+). Raises UnsupportedError on older clusters."""
        path = self.client.gate.path_for("sql")
        return await self.client.post(path, {"query": query}, dict[str, Any])

    async def get_index_templates(self) -> dict[str, Any]:
        """Composable templates on 7.8+, legacy templates before that."""
        return await self.client.get(self.client.gate.path_for("index_template_v2"), dict[str, Any])

    async def get_component_templates(self) -> dict[str, Any]:
        """Component templates (7.8+). Raises UnsupportedError on older clusters."""
        return await self.client.get(self.client.gate.path_for("component_templates"), dict[str, Any])

    async def get_data_streams(self) -> dict[str, Any]:
        """Data streams (7.9+). Raises UnsupportedError on older clusters."""
        return await self.client.get(self.client.gate.path_for("data_streams"), dict[str, Any])

    async def get_legacy_templates(self) -> dict[str, Any]:
        """Legacy ``/_template`` templates. Raises UnsupportedError on 9.0+."""
        return await self.client.get(self.client.gate.path_for("legacy_templates"), dict[str, Any])
