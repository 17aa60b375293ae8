from __future__ import annotations

import smtplib
from datetime import date
from typing import ClassVar

import mysql.connector
import pytest

from vendor_expiry.models import ServiceContext

_ENV_VARS = (
    "VENDOR_DB_CONNECTION_STRING",
    "CSV_FOLDER",
    "SMTP_SERVER",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASSWORD",
    "SMTP_USE_TLS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def context(tmp_path) -> ServiceContext:
    return ServiceContext(log_path=tmp_path / "log.txt")


class FakeCursor:
    def __init__(self, rows: list[tuple], error: Exception | None = None) -> None:
        self.rows = rows
        self.error = error
        self.executed: list[tuple[str, tuple]] = []
        self.closed = False

    def execute(self, query: str, params: tuple) -> None:
        self.executed.append((query, params))
        if self.error is not None:
            raise self.error

    def fetchall(self) -> list[tuple]:
        return list(self.rows)

    def close(self) -> None:
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor) -> None:
        self._cursor = cursor
        self.closed = False

    def cursor(self) -> FakeCursor:
        return self._cursor

    def close(self) -> None:
        self.closed = True


class FakeDatabase:
    """Stands in for mysql.connector.connect and records every connection."""

    def __init__(self) -> None:
        self.rows: list[tuple] = []
        self.error: Exception | None = None
        self.connect_kwargs: list[dict] = []
        self.connections: list[FakeConnection] = []

    def connect(self, **kwargs: object) -> FakeConnection:
        self.connect_kwargs.append(kwargs)
        connection = FakeConnection(FakeCursor(self.rows, self.error))
        self.connections.append(connection)
        return connection

    @property
    def cursor(self) -> FakeCursor:
        return self.connections[-1]._cursor


@pytest.fixture
def fake_db(monkeypatch: pytest.MonkeyPatch) -> FakeDatabase:
    database = FakeDatabase()
    monkeypatch.setattr(mysql.connector, "connect", database.connect)
    return database


class DummySMTP:
    instances: ClassVar[list[DummySMTP]] = []

    def __init__(self, host: str, port: int, *_args: object, **_kwargs: object) -> None:
        self.host = host
        self.port = port
        self.starttls_called = False
        self.login_args: tuple[str, str] | None = None
        self.sent: list[tuple[object, str, list[str]]] = []
        self.exited = False
        DummySMTP.instances.append(self)

    def __enter__(self) -> DummySMTP:
        return self

    def __exit__(self, *_exc: object) -> None:
        self.exited = True

    def starttls(self, *_args: object, **_kwargs: object) -> None:
        self.starttls_called = True

    def login(self, username: str, password: str) -> None:
        self.login_args = (username, password)

    def send_message(self, message: object, from_addr: str, to_addrs: list[str]) -> None:
        self.sent.append((message, from_addr, to_addrs))


@pytest.fixture
def dummy_smtp(monkeypatch: pytest.MonkeyPatch) -> type[DummySMTP]:
    DummySMTP.instances = []
    monkeypatch.setattr(smtplib, "SMTP", DummySMTP)
    monkeypatch.setenv("SMTP_SERVER", "smtp.example.com")
    return DummySMTP


@pytest.fixture
def today() -> date:
    return date(2024, 5, 17)
