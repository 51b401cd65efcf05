"""Local SQLite storage for Elastic Explorer."""

from elastic_explorer.db.connection import connect, get_connection, transaction

__all__ = ["connect", "get_connection", "transaction"]
