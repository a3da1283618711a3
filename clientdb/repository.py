"""
Client data-access operations.

Each function runs exactly one parameterized statement against an open
connection (sqlite3 or psycopg) and commits writes immediately.

Error contract:
- `select_client` raises `ClientNotFoundError` when no row matches.
- Driver errors propagate unchanged. Writes roll back first, so the
  connection stays usable; a rollback that fails itself is logged and
  the original error is still the one raised.
- On psycopg a lookup that had to open a transaction ends it again, so the
  session does not sit idle in transaction.
"""

from __future__ import annotations

from contextlib import closing
from typing import Union

from psycopg.pq import TransactionStatus

from clientdb.domain.errors import ClientNotFoundError
from clientdb.domain.models import Client, ClientData
from clientdb.infrastructure.db_factory import DBConnection, Dialect, dialect_of
from clientdb.infrastructure.schema import TABLE_NAME
from clientdb.utils.logging import get_logger

log = get_logger(__name__)

_SELECT_SQL = "SELECT id, fio, login, birthday, email FROM {table} WHERE id = {p}"
_INSERT_SQL = "INSERT INTO {table} (fio, login, birthday, email) VALUES ({p}, {p}, {p}, {p})"
_DELETE_SQL = "DELETE FROM {table} WHERE id = {p}"


def _sql(template: str, conn: DBConnection) -> str:
    return template.format(table=TABLE_NAME, p=dialect_of(conn).placeholder)


def _rollback_quietly(conn: DBConnection) -> None:
    try:
        conn.rollback()
    except Exception:
        log.warning("rollback failed", exc_info=True)


def _read_opens_transaction(conn: DBConnection) -> bool:
    """True when a SELECT on this connection starts a transaction nobody else owns."""
    if dialect_of(conn) is not Dialect.POSTGRES or conn.autocommit:
        return False
    return conn.info.transaction_status == TransactionStatus.IDLE


def select_client(conn: DBConnection, client_id: int) -> Client:
    """
    Fetch one client by id.

    Raises
    ------
    ClientNotFoundError
        If no row has this id. The exception carries an empty `Client`.
    """
    owns_transaction = _read_opens_transaction(conn)
    try:
        with closing(conn.cursor()) as cur:
            cur.execute(_sql(_SELECT_SQL, conn), (client_id,))
            row = cur.fetchone()
    finally:
        if owns_transaction:
            _rollback_quietly(conn)

    if row is None:
        log.debug("client not found", extra={"client_id": client_id})
        raise ClientNotFoundError(client_id)
    return Client.from_row(row)


def insert_client(conn: DBConnection, client: Union[ClientData, Client]) -> int:
    """
    Persist a new client and return the id assigned by the database.

    A `Client` may be passed; its `id` is ignored and its fields are validated
    the same way as `ClientData`.
    """
    data = client if isinstance(client, ClientData) else client.to_data()
    params = (data.fio, data.login, data.birthday, data.email)
    dialect = dialect_of(conn)
    sql = _sql(_INSERT_SQL, conn)
    if dialect.supports_returning:
        sql += " RETURNING id"

    try:
        with closing(conn.cursor()) as cur:
            cur.execute(sql, params)
            if dialect.supports_returning:
                (new_id,) = cur.fetchone()
            else:
                new_id = cur.lastrowid
        conn.commit()
    except Exception:
        _rollback_quietly(conn)
        raise

    log.debug("client inserted", extra={"client_id": new_id})
    return int(new_id)


def delete_client(conn: DBConnection, client_id: int) -> None:
    """
    Remove a client by id. Deleting an id that does not exist is a no-op.
    """
    try:
        with closing(conn.cursor()) as cur:
            cur.execute(_sql(_DELETE_SQL, conn), (client_id,))
            rowcount = cur.rowcount
        conn.commit()
    except Exception:
        _rollback_quietly(conn)
        raise

    log.debug("client deleted", extra={"client_id": client_id, "rowcount": rowcount})


__all__ = ["delete_client", "insert_client", "select_client"]
