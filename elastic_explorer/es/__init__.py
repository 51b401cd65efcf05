"""Elasticsearch client, version detection and capability gating."""

from elastic_explorer.es.api import ClusterHealth, ExplorerApi
from elastic_explorer.es.client import RemoteClient
from elastic_explorer.es.gate import CAPABILITIES, Capability, VersionGate
from elastic_explorer.es.version import RemoteVersion

__all__ = [
    "CAPABILITIES",
    "Capability",
    "ClusterHealth",
    "ExplorerApi",
    "RemoteClient",
    "RemoteVersion",
    "VersionGate",
]
