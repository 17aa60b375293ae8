from __future__ import annotations

import logging
from datetime import date, datetime

import pytest

from vendor_expiry.models import MISSING_EXPIRY_DATE, VendorRecord
from vendor_expiry.vendor_repository import (
    ALERT_QUERY,
    REPORT_QUERY,
    fetch_alert_records,
    fetch_report_records,
    parse_connection_string,
)

CONNECTION_STRING = "server=db.local;port=3307;database=vendors;uid=reader;pwd=secret"


def test_parse_connection_string_maps_keys() -> None:
    assert parse_connection_string(CONNECTION_STRING) == {
        "host": "db.local",
        "port": 3307,
        "database": "vendors",
        "user": "reader",
        "password": "secret",
    }


def test_parse_connection_string_accepts_ado_aliases() -> None:
    params = parse_connection_string("Data Source=db;Initial Catalog=vendors;User ID=u;Password=p=q;SslMode=none;")
    assert params == {"host": "db", "database": "vendors", "user": "u", "password": "p=q"}


@pytest.mark.parametrize("value", ["server=db;garbage", "server=db;port=abc"])
def test_parse_connection_string_rejects_malformed(value: str) -> None:
    with pytest.raises(ValueError):
        parse_connection_string(value)


def test_missing_connection_string_skips_query(fake_db, caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.ERROR):
        assert fetch_alert_records() is None
        assert fetch_report_records() is None
    assert fake_db.connections == []
    assert "connection string is missing" in caplog.text


def test_alert_query_binds_exact_offsets(fake_db, monkeypatch: pytest.MonkeyPatch, today: date) -> None:
    monkeypatch.setenv("VENDOR_DB_CONNECTION_STRING", CONNECTION_STRING)
    fake_db.rows = [("Acme", "D1", datetime(2024, 6, 1, 0, 0), "a@x.com")]

    records = fetch_alert_records(today)

    assert records == [VendorRecord("Acme", "D1", date(2024, 6, 1), "a@x.com")]
    query, params = fake_db.cursor.executed[0]
    assert query == ALERT_QUERY
    assert "expiry_date IS NOT NULL" in query
    assert params == (today, 15, -15, -60)
    assert fake_db.connect_kwargs[0]["host"] == "db.local"


def test_alert_query_keeps_raw_values(fake_db, monkeypatch: pytest.MonkeyPatch, today: date) -> None:
    monkeypatch.setenv("VENDOR_DB_CONNECTION_STRING", CONNECTION_STRING)
    fake_db.rows = [(" Acme ", None, date(2024, 6, 1), "a@x.com ")]

    records = fetch_alert_records(today)

    assert records == [VendorRecord(" Acme ", "", date(2024, 6, 1), "a@x.com ")]


def test_report_query_maps_missing_expiry_to_sentinel(fake_db, monkeypatch: pytest.MonkeyPatch, today: date) -> None:
    monkeypatch.setenv("VENDOR_DB_CONNECTION_STRING", CONNECTION_STRING)
    fake_db.rows = [
        ("Acme", "D1", datetime(2024, 9, 1), "a@x.com"),
        ("Beta", "D2", None, None),
    ]

    records = fetch_report_records(today)

    assert records == [
        VendorRecord("Acme", "D1", date(2024, 9, 1), "a@x.com"),
        VendorRecord("Beta", "D2", MISSING_EXPIRY_DATE, ""),
    ]
    query, params = fake_db.cursor.executed[0]
    assert query == REPORT_QUERY
    assert "IS NOT NULL" not in query
    assert "WHERE expiry_date IS NULL OR DATEDIFF(expiry_date, %s) > %s" in query
    assert params == (today, 20)


def test_connection_closed_when_query_fails(fake_db, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VENDOR_DB_CONNECTION_STRING", CONNECTION_STRING)
    fake_db.error = RuntimeError("lost connection")

    with pytest.raises(RuntimeError, match="lost connection"):
        fetch_alert_records()

    assert fake_db.cursor.closed is True
    assert fake_db.connections[0].closed is True


def test_each_fetch_opens_its_own_connection(fake_db, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("VENDOR_DB_CONNECTION_STRING", CONNECTION_STRING)

    fetch_alert_records()
    fetch_report_records()

    assert len(fake_db.connections) == 2
    assert all(connection.closed for connection in fake_db.connections)
