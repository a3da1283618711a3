import sqlite3
from pathlib import Path

import psycopg
import pytest

from clientdb import config
from clientdb.infrastructure import db_factory
from clientdb.infrastructure.db_factory import Dialect

ENV_VARS = ["DB_BACKEND", "DB_PATH", "DB_HOST", "DB_PORT", "DB_USER", "DB_PASSWORD", "DB_NAME"]
RETRY_ATTEMPTS = 3


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # keep a developer's .env out of the defaults
    monkeypatch.chdir(tmp_path)


def test_get_settings_defaults(clean_env):
    settings = config.get_settings()
    assert settings.db_backend == "sqlite"
    assert settings.db_path == "demo.db"
    assert settings.db_host == "localhost"
    assert settings.db_port == 5432
    assert settings.db_user == "postgres"
    assert settings.db_name == "clients"
    assert settings.log_json is False


def test_get_settings_reads_environment(clean_env, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("DB_BACKEND", "postgres")
    monkeypatch.setenv("DB_PORT", "6543")

    settings = config.get_settings()

    assert settings.db_backend == "postgres"
    assert settings.db_port == 6543
    assert config.get_settings() is settings


def test_build_dsn_and_describe_target():
    settings = config.Settings(
        db_backend="postgres", db_user="u", db_password="secret", db_host="h", db_port=1, db_name="n"
    )
    assert db_factory.build_dsn(settings) == "postgresql://u:secret@h:1/n"
    assert db_factory.describe_target(settings) == "postgres:u@h:1/n"
    assert db_factory.describe_target(config.Settings(db_backend="sqlite", db_path="x.db")) == "sqlite:x.db"


def test_dialect_placeholders():
    assert Dialect.SQLITE.placeholder == "?"
    assert Dialect.POSTGRES.placeholder == "%s"
    assert Dialect.POSTGRES.supports_returning
    assert not Dialect.SQLITE.supports_returning


def test_dialect_of_rejects_unknown_connections():
    conn = sqlite3.connect(":memory:")
    try:
        assert db_factory.dialect_of(conn) is Dialect.SQLITE
    finally:
        conn.close()
    with pytest.raises(TypeError, match="unsupported connection type"):
        db_factory.dialect_of(object())  # type: ignore[arg-type]


def test_connection_closes_on_exit(sqlite_settings: config.Settings):
    with db_factory.connection(sqlite_settings) as conn:
        assert conn.execute("SELECT 1").fetchone() == (1,)

    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_connection_closes_on_error(sqlite_settings: config.Settings):
    with pytest.raises(RuntimeError):
        with db_factory.connection(sqlite_settings) as conn:
            raise RuntimeError("boom")

    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")


def test_open_connection_uses_postgres_factory(monkeypatch: pytest.MonkeyPatch):
    calls = []
    sentinel = object()

    def fake_connect(dsn: str, connect_timeout: int = 5):
        calls.append((dsn, connect_timeout))
        return sentinel

    monkeypatch.setattr(db_factory, "connect_postgres", fake_connect)
    settings = config.Settings(db_backend="postgres", db_connect_timeout=2)

    assert db_factory.open_connection(settings) is sentinel
    assert calls == [(db_factory.build_dsn(settings), 2)]


def test_connect_postgres_retries_transient_errors(monkeypatch: pytest.MonkeyPatch):
    attempts = []

    def flaky_connect(dsn: str, **kwargs):
        attempts.append(dsn)
        raise psycopg.OperationalError("server not ready")

    monkeypatch.setattr(db_factory.psycopg, "connect", flaky_connect)
    monkeypatch.setattr(db_factory.connect_postgres.retry, "sleep", lambda _seconds: None)

    with pytest.raises(psycopg.OperationalError, match="server not ready"):
        db_factory.connect_postgres("postgresql://localhost/clients")

    assert len(attempts) == RETRY_ATTEMPTS


def test_connect_postgres_does_not_retry_other_errors(monkeypatch: pytest.MonkeyPatch):
    attempts = []

    def bad_connect(dsn: str, **kwargs):
        attempts.append(dsn)
        raise psycopg.ProgrammingError("bad dsn")

    monkeypatch.setattr(db_factory.psycopg, "connect", bad_connect)

    with pytest.raises(psycopg.ProgrammingError):
        db_factory.connect_postgres("postgresql://localhost/clients")

    assert len(attempts) == 1
