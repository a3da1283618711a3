"""
Infrastructure package for clientdb.

Centralizes database connectivity concerns (connection factory, dialects,
schema). Keep this layer focused on I/O and resource management, decoupled
from the repository operations.
"""

from clientdb.infrastructure.db_factory import (
    DBConnection,
    Dialect,
    build_dsn,
    connection,
    dialect_of,
    open_connection,
)
from clientdb.infrastructure.schema import drop_schema, ensure_schema

__all__ = [
    "DBConnection",
    "Dialect",
    "build_dsn",
    "connection",
    "dialect_of",
    "drop_schema",
    "ensure_schema",
    "open_connection",
]
