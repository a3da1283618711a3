"""
DDL for the `clients` table.

The column layout is the same for both backends; only the auto-assigned
primary key is spelled differently.
"""

from __future__ import annotations

from contextlib import closing

from clientdb.infrastructure.db_factory import DBConnection, Dialect, dialect_of

TABLE_NAME = "clients"

_CREATE_TABLE = {
    Dialect.SQLITE: f"""
        CREATE TABLE IF NOT EXISTS {TABLE_NAME} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            fio VARCHAR(256) NOT NULL,
            login VARCHAR(256) NOT NULL,
            birthday VARCHAR(8) NOT NULL,
            email VARCHAR(256) NOT NULL
        )
    """,
    Dialect.POSTGRES: f"""
        CREATE TABLE IF NOT EXISTS public.{TABLE_NAME} (
            id SERIAL PRIMARY KEY,
            fio VARCHAR(256) NOT NULL,
            login VARCHAR(256) NOT NULL,
            birthday VARCHAR(8) NOT NULL,
            email VARCHAR(256) NOT NULL
        )
    """,
}


def ensure_schema(conn: DBConnection) -> None:
    """Create the clients table if it is missing."""
    with closing(conn.cursor()) as cur:
        cur.execute(_CREATE_TABLE[dialect_of(conn)])
    conn.commit()


def drop_schema(conn: DBConnection) -> None:
    """Drop the clients table. Id sequences restart from 1 on the next create."""
    with closing(conn.cursor()) as cur:
        cur.execute(f"DROP TABLE IF EXISTS {TABLE_NAME}")
        if dialect_of(conn) is Dialect.SQLITE:
            # AUTOINCREMENT keeps its high-water mark here; table may not exist yet.
            cur.execute(
                "SELECT name FROM sqlite_master WHERE type = 'table' AND name = 'sqlite_sequence'"
            )
            if cur.fetchone() is not None:
                cur.execute("DELETE FROM sqlite_sequence WHERE name = ?", (TABLE_NAME,))
    conn.commit()


__all__ = ["TABLE_NAME", "drop_schema", "ensure_schema"]
