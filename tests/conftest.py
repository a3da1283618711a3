"""
Pytest configuration for clientdb.

Provides fixtures for:
- SQLite fixture databases (empty schema and pre-seeded)
- PostgreSQL connection management for integration tests
- Settings isolation between tests
"""

from __future__ import annotations

import logging
import os
import sqlite3
from pathlib import Path
from typing import Generator

import psycopg
import pytest

from clientdb.config import Settings, get_settings
from clientdb.infrastructure.db_factory import build_dsn, connect_sqlite
from clientdb.infrastructure.schema import drop_schema, ensure_schema
from scripts.seed_data import _generate_clients, _load_into_db

SEEDED_ROWS = 5
SEED = 42


@pytest.fixture(autouse=True)
def _reset_settings_cache() -> Generator[None, None, None]:
    """
    Drop the cached Settings around every test so env overrides take effect.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def _restore_root_logging() -> Generator[None, None, None]:
    """
    CLI commands reconfigure the root logger; put the previous handlers back.
    """
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers = handlers
    root.setLevel(level)


@pytest.fixture
def sqlite_settings(tmp_path: Path) -> Settings:
    """
    Settings pointing at a fresh SQLite file inside the test's tmp dir.
    """
    return Settings(db_backend="sqlite", db_path=str(tmp_path / "demo.db"), log_level="DEBUG")


@pytest.fixture
def empty_db_path(sqlite_settings: Settings) -> Path:
    """
    SQLite file with the clients table created and no rows.
    """
    conn = connect_sqlite(sqlite_settings.db_path)
    try:
        ensure_schema(conn)
    finally:
        conn.close()
    return Path(sqlite_settings.db_path)


@pytest.fixture
def seeded_db_path(sqlite_settings: Settings) -> Path:
    """
    SQLite file seeded with a small deterministic dataset; ids start at 1.
    """
    conn = connect_sqlite(sqlite_settings.db_path)
    try:
        _load_into_db(conn, _generate_clients(SEEDED_ROWS, seed=SEED), reset=True)
    finally:
        conn.close()
    return Path(sqlite_settings.db_path)


@pytest.fixture
def db(seeded_db_path: Path) -> Generator[sqlite3.Connection, None, None]:
    """
    Open connection to the pre-seeded fixture database, closed after the test.
    """
    conn = connect_sqlite(str(seeded_db_path))
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture(scope="session")
def test_settings() -> Settings:
    """
    PostgreSQL settings for integration tests.

    Can be overridden via environment variables in CI or local testing.
    """
    return Settings(
        db_backend="postgres",
        db_host=os.getenv("DB_HOST", "localhost"),
        db_port=int(os.getenv("DB_PORT", "5432")),
        db_user=os.getenv("DB_USER", "postgres"),
        db_password=os.getenv("DB_PASSWORD", "postgres"),
        db_name=os.getenv("DB_NAME", "clients"),
        log_level="DEBUG",
    )


@pytest.fixture(scope="session")
def test_dsn(test_settings: Settings) -> str:
    """
    Database connection string for tests.
    """
    return build_dsn(test_settings)


@pytest.fixture(scope="session")
def db_connection_available(test_dsn: str) -> bool:
    """
    Check if database is reachable.

    Used to conditionally skip integration tests when DB is not available.
    """
    try:
        with psycopg.connect(test_dsn, connect_timeout=5) as conn:
            with conn.cursor() as cur:
                cur.execute("SELECT 1;")
                cur.fetchone()
        return True
    except psycopg.Error:
        return False


@pytest.fixture
def pg_connection(
    test_dsn: str, db_connection_available: bool
) -> Generator[psycopg.Connection, None, None]:
    """
    Provide a PostgreSQL connection with a freshly created, pre-seeded clients table.

    Skips tests if database is not available.
    """
    if not db_connection_available:
        pytest.skip("Database not available for integration tests")

    conn = psycopg.connect(test_dsn)
    try:
        _load_into_db(conn, _generate_clients(SEEDED_ROWS, seed=SEED), reset=True)
        yield conn
    finally:
        conn.rollback()
        drop_schema(conn)
        conn.close()
