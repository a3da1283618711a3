"""
Domain errors for clientdb.

Only absence of a record gets its own type. Driver errors (`sqlite3.Error`,
`psycopg.Error`) reach callers unmodified.
"""
from __future__ import annotations

from clientdb.domain.models import Client


class ClientNotFoundError(LookupError):
    """
    Raised when a lookup matches no row in the `clients` table.

    Attributes
    ----------
    client_id : int
        The identifier that was looked up.
    client : Client
        The zero-valued record standing in for the missing one.
    """

    def __init__(self, client_id: int) -> None:
        super().__init__(f"client with id {client_id} not found")
        self.client_id = client_id
        self.client = Client.empty()


__all__ = ["ClientNotFoundError"]
