"""
clientdb - data access for Client records in a relational database.

Provides lookup, insert and delete of a single `Client` record type against
SQLite or PostgreSQL, with a distinct not-found error so callers can tell
absence apart from storage failures.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from clientdb.config import Settings, get_settings
from clientdb.domain import Client, ClientData, ClientNotFoundError
from clientdb.infrastructure import connection, ensure_schema
from clientdb.repository import delete_client, insert_client, select_client
from clientdb.utils.logging import configure_logging, get_logger

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Client",
    "ClientData",
    "ClientNotFoundError",
    # Operations
    "select_client",
    "insert_client",
    "delete_client",
    # Infrastructure
    "connection",
    "ensure_schema",
    # Logging
    "configure_logging",
    "get_logger",
]
