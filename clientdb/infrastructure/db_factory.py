"""
Database connection factory utilities for clientdb.

Opens SQLite or PostgreSQL connections from settings and hands them out through
a context manager that always closes them. Connection acquisition against
PostgreSQL retries transient failures using tenacity; statements executed on
the connection are never retried here.

The `Dialect` helper captures the few places where the two drivers differ
(parameter placeholder, how the generated id comes back).
"""

from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from enum import Enum
from typing import Generator, Optional, Union

import psycopg
from tenacity import retry, retry_if_exception_type, stop_after_attempt, wait_exponential

from clientdb.config import Settings, get_settings
from clientdb.utils.logging import get_logger

log = get_logger(__name__)

DBConnection = Union[sqlite3.Connection, psycopg.Connection]


class Dialect(str, Enum):
    """SQL flavour spoken by a connection."""

    SQLITE = "sqlite"
    POSTGRES = "postgres"

    @property
    def placeholder(self) -> str:
        """DB-API parameter marker: qmark for sqlite3, format for psycopg."""
        return "?" if self is Dialect.SQLITE else "%s"

    @property
    def supports_returning(self) -> bool:
        return self is Dialect.POSTGRES


def dialect_of(conn: DBConnection) -> Dialect:
    """
    Determine the dialect of an open connection.

    Raises
    ------
    TypeError
        If the connection comes from an unsupported driver.
    """
    if isinstance(conn, sqlite3.Connection):
        return Dialect.SQLITE
    if isinstance(conn, psycopg.Connection):
        return Dialect.POSTGRES
    raise TypeError(f"unsupported connection type: {type(conn).__name__}")


def build_dsn(settings: Optional[Settings] = None) -> str:
    """Compose a PostgreSQL DSN string from settings."""
    settings = settings or get_settings()
    return (
        f"postgresql://{settings.db_user}:{settings.db_password}"
        f"@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def describe_target(settings: Optional[Settings] = None) -> str:
    """Human-readable storage target, without credentials."""
    settings = settings or get_settings()
    if settings.db_backend == Dialect.SQLITE.value:
        return f"sqlite:{settings.db_path}"
    return (
        f"postgres:{settings.db_user}@{settings.db_host}:{settings.db_port}/{settings.db_name}"
    )


def connect_sqlite(path: str) -> sqlite3.Connection:
    """
    Open a SQLite database file, creating it if it does not exist.

    Parameters
    ----------
    path : str
        Filesystem path of the database (or ":memory:").
    """
    return sqlite3.connect(path)


@retry(
    stop=stop_after_attempt(3),
    wait=wait_exponential(multiplier=1, min=1, max=10),
    retry=retry_if_exception_type((psycopg.OperationalError, psycopg.InterfaceError)),
    reraise=True,
)
def connect_postgres(dsn: str, connect_timeout: int = 5) -> psycopg.Connection:
    """
    Acquire a PostgreSQL connection with automatic retry.

    Retries up to 3 times with exponential backoff for transient connection errors.

    Raises
    ------
    psycopg.OperationalError
        If connection fails after all retry attempts.
    """
    return psycopg.connect(dsn, connect_timeout=connect_timeout)


def open_connection(settings: Optional[Settings] = None) -> DBConnection:
    """
    Open a connection to the configured backend. The caller owns closing it;
    prefer `connection()` which does so automatically.
    """
    settings = settings or get_settings()
    log.debug("opening connection", extra={"target": describe_target(settings)})
    if settings.db_backend == Dialect.SQLITE.value:
        return connect_sqlite(settings.db_path)
    return connect_postgres(build_dsn(settings), connect_timeout=settings.db_connect_timeout)


@contextmanager
def connection(settings: Optional[Settings] = None) -> Generator[DBConnection, None, None]:
    """
    Context manager scoping one connection to a session.

    Example
    -------
        with connection() as conn:
            client = select_client(conn, 1)
    """
    conn = open_connection(settings)
    try:
        yield conn
    finally:
        conn.close()


__all__ = [
    "DBConnection",
    "Dialect",
    "build_dsn",
    "connect_postgres",
    "connect_sqlite",
    "connection",
    "describe_target",
    "dialect_of",
    "open_connection",
]
