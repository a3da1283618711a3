"""
Fixture data generation and loading script for clientdb.

Implements deterministic pseudo-random client generation, optional CSV
emission, and loading through `insert_client` so the seeded rows obey the
same validation as any other insert.
"""

from __future__ import annotations

import csv
import random
import sys
import time
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Optional

import typer

from clientdb.config import get_settings
from clientdb.domain.models import BIRTHDAY_FORMAT, ClientData
from clientdb.infrastructure.db_factory import DBConnection, connection, describe_target
from clientdb.infrastructure.schema import drop_schema, ensure_schema
from clientdb.repository import insert_client
from clientdb.utils.logging import configure_logging, get_logger

log = get_logger(__name__)

app = typer.Typer(help="Generate fixture clients and load them into the configured database.")

_FIRST_NAMES = ["Ivan", "Anna", "Pyotr", "Maria", "Sergey", "Olga", "Dmitry", "Elena"]
_LAST_NAMES = ["Ivanov", "Petrova", "Sidorov", "Smirnova", "Kuznetsov", "Popova"]
_PATRONYMICS = ["Ivanovich", "Petrovna", "Sergeevich", "Andreevna", "Olegovich"]
_DOMAINS = ["mail.com", "example.org", "post.net"]

CSV_HEADER = ["fio", "login", "birthday", "email"]


def _generate_clients(rows: int, seed: int) -> list[ClientData]:
    rng = random.Random(seed)
    earliest = date(1950, 1, 1)
    span_days = (date(2005, 12, 31) - earliest).days

    clients: list[ClientData] = []
    for i in range(rows):
        first = rng.choice(_FIRST_NAMES)
        last = rng.choice(_LAST_NAMES)
        fio = f"{last} {first} {rng.choice(_PATRONYMICS)}"
        login = f"{first.lower()}.{last.lower()}{i + 1}"
        birthday = earliest + timedelta(days=rng.randint(0, span_days))
        clients.append(
            ClientData(
                fio=fio,
                login=login,
                birthday=birthday.strftime(BIRTHDAY_FORMAT),
                email=f"{login}@{rng.choice(_DOMAINS)}",
            )
        )
    return clients


def _write_csv(csv_path: Path, clients: Iterable[ClientData]) -> None:
    with csv_path.open("w", newline="", encoding="utf-8") as f:
        writer = csv.writer(f)
        writer.writerow(CSV_HEADER)
        writer.writerows([c.fio, c.login, c.birthday, c.email] for c in clients)


def _load_into_db(
    conn: DBConnection, clients: Iterable[ClientData], reset: bool = False
) -> list[int]:
    """Create the table (dropping it first on reset) and insert every client."""
    if reset:
        drop_schema(conn)
    ensure_schema(conn)
    ids = [insert_client(conn, client) for client in clients]
    log.info("seeded clients", extra={"rows": len(ids)})
    return ids


@app.command()
def main(
    rows: int = typer.Option(
        10,
        "--rows",
        "-r",
        help="Number of clients to generate.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Optional CSV output path.",
    ),
    no_load: bool = typer.Option(
        False,
        "--no-load",
        help="Only generate (and optionally write CSV); skip loading into the database.",
    ),
    reset: bool = typer.Option(
        False,
        "--reset",
        help="Drop and recreate the clients table first so ids start at 1.",
    ),
) -> None:
    """
    Generate fixture clients and optionally load them into the database.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)

    start = time.perf_counter()
    clients = _generate_clients(rows, seed=seed)
    typer.echo(f"Generated {len(clients)} clients (seed={seed}).")

    if output:
        output.parent.mkdir(parents=True, exist_ok=True)
        _write_csv(output, clients)
        typer.echo(f"Wrote CSV -> {output}")

    if no_load:
        typer.echo("Skipping load (no-load flag set).")
        return

    with connection(settings) as conn:
        ids = _load_into_db(conn, clients, reset=reset)

    duration = time.perf_counter() - start
    id_range = f"{ids[0]}..{ids[-1]}" if ids else "none"
    typer.echo(
        f"Loaded {len(ids)} clients into {describe_target(settings)} "
        f"(ids {id_range}) in {duration:.2f}s."
    )


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)
