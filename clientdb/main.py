from __future__ import annotations

import sys

import typer
from pydantic import ValidationError

from clientdb.config import get_settings
from clientdb.domain.errors import ClientNotFoundError
from clientdb.domain.models import ClientData
from clientdb.infrastructure.db_factory import connection, describe_target
from clientdb.infrastructure.schema import ensure_schema
from clientdb.repository import delete_client, insert_client, select_client
from clientdb.utils.logging import configure_logging

app = typer.Typer(help="clientdb CLI: look up, add and delete client records.")


@app.callback()
def _setup() -> None:
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.log_json)


@app.command()
def info() -> None:
    """
    Show effective configuration values.
    """
    settings = get_settings()
    typer.echo(f"DB={describe_target(settings)} | env={settings.app_env}")


@app.command("init-db")
def init_db() -> None:
    """
    Create the clients table if it does not exist.
    """
    with connection() as conn:
        ensure_schema(conn)
    typer.echo(f"Schema ready at {describe_target()}.")


@app.command()
def get(client_id: int = typer.Argument(..., help="Client id to look up.")) -> None:
    """
    Print one client as JSON.
    """
    with connection() as conn:
        try:
            client = select_client(conn, client_id)
        except ClientNotFoundError as exc:
            typer.echo(f"Error: {exc}", err=True)
            raise typer.Exit(code=1)
    typer.echo(client.model_dump_json(indent=2))


@app.command()
def add(
    fio: str = typer.Option(..., "--fio", help="Full name."),
    login: str = typer.Option(..., "--login", help="Account login."),
    birthday: str = typer.Option(..., "--birthday", help="Date of birth, YYYYMMDD."),
    email: str = typer.Option(..., "--email", help="Contact e-mail."),
) -> None:
    """
    Insert a new client and print its id.
    """
    try:
        data = ClientData(fio=fio, login=login, birthday=birthday, email=email)
    except ValidationError as exc:
        typer.echo(f"Invalid client: {exc}", err=True)
        raise typer.Exit(code=2)

    with connection() as conn:
        new_id = insert_client(conn, data)
    typer.echo(str(new_id))


@app.command()
def delete(client_id: int = typer.Argument(..., help="Client id to delete.")) -> None:
    """
    Delete a client. Missing ids are ignored.
    """
    with connection() as conn:
        delete_client(conn, client_id)
    typer.echo(f"Deleted client {client_id}.")


def main() -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


if __name__ == "__main__":
    main()
