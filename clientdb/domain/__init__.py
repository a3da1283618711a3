"""
Domain package for clientdb.

Exports the Client models and the not-found error used by the repository
and the CLI. Keep this package focused on data definitions and validation.
"""

from clientdb.domain.errors import ClientNotFoundError
from clientdb.domain.models import Client, ClientData

__all__ = [
    "Client",
    "ClientData",
    "ClientNotFoundError",
]
