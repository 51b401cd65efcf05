"""Elastic Explorer — credential vault and version-aware Elasticsearch client."""

__version__ = "0.1.0"
