"""
Vendor Repository Module (READ-ONLY)

This module reads vendor document expiry rows from the vendor MySQL database.

CRITICAL SAFETY:
- READ-ONLY database access only
- Parameterized queries only
- One connection per call, closed on every exit path
"""

from contextlib import contextmanager
from datetime import date, datetime
from typing import Dict, Iterator, List, Optional

import mysql.connector

from vendor_expiry.config import ALERT_DAY_OFFSETS, REPORT_MIN_DAYS_AHEAD, get_connection_string
from vendor_expiry.logger import get_logger
from vendor_expiry.models import MISSING_EXPIRY_DATE, VendorRecord

logger = get_logger(__name__)

_OFFSET_PLACEHOLDERS = ", ".join(["%s"] * len(ALERT_DAY_OFFSETS))

ALERT_QUERY = (
    "SELECT vendor_name, document_number, expiry_date, email "
    "FROM vendor "
    "WHERE expiry_date IS NOT NULL "
    f"AND DATEDIFF(expiry_date, %s) IN ({_OFFSET_PLACEHOLDERS})"
)

REPORT_QUERY = (
    "SELECT vendor_name, document_number, expiry_date, email "
    "FROM vendor "
    "WHERE expiry_date IS NULL OR DATEDIFF(expiry_date, %s) > %s"
)

# Connection string key (lowercase) -> mysql.connector.connect() argument
_CONNECTION_STRING_KEYS = {
    "server": "host",
    "host": "host",
    "data source": "host",
    "datasource": "host",
    "port": "port",
    "database": "database",
    "initial catalog": "database",
    "uid": "user",
    "user": "user",
    "user id": "user",
    "username": "user",
    "pwd": "password",
    "password": "password",
}


def parse_connection_string(connection_string: str) -> Dict[str, object]:
    """
    Parse a "key=value;key=value" connection string into connect() arguments.

    Example:
        parse_connection_string("server=db;port=3307;database=vendors;uid=reader;pwd=secret")
        Returns: {'host': 'db', 'port': 3307, 'database': 'vendors',
                  'user': 'reader', 'password': 'secret'}

    Raises:
        ValueError: If a segment has no '=' or the port is not a number
    """
    params = {}
    for segment in connection_string.split(";"):
        if not segment.strip():
            continue
        if "=" not in segment:
            raise ValueError(f"Malformed connection string segment: {segment.strip()!r}")

        key, value = segment.split("=", 1)
        key = " ".join(key.lower().split())
        value = value.strip()

        target = _CONNECTION_STRING_KEYS.get(key)
        if target is None:
            logger.debug(f"Ignoring unsupported connection string key: {key}")
            continue

        if target == "port":
            try:
                params[target] = int(value)
            except ValueError:
                raise ValueError(f"Invalid port in connection string: {value!r}") from None
        else:
            params[target] = value

    return params


@contextmanager
def open_connection(connection_string: str) -> Iterator[object]:
    """Open a vendor database connection that is closed when the block exits."""
    connection = mysql.connector.connect(**parse_connection_string(connection_string))
    try:
        yield connection
    finally:
        connection.close()
        logger.debug("Database connection closed")


def _to_text(value: object) -> str:
    return "" if value is None else str(value)


def _to_date(value: object) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return datetime.fromisoformat(str(value)).date()


def _run_query(connection_string: str, query: str, params: tuple) -> List[tuple]:
    with open_connection(connection_string) as connection:
        cursor = connection.cursor()
        try:
            cursor.execute(query, params)
            return cursor.fetchall()
        finally:
            cursor.close()


def fetch_alert_records(today: Optional[date] = None) -> Optional[List[VendorRecord]]:
    """
    Fetch vendors whose expiry date is exactly 15 days ahead, 15 days past or 60 days past.

    Args:
        today: Reference date for the day difference (defaults to today)

    Returns:
        List of VendorRecord, or None if the connection string is not configured.
        Values are returned as stored; blank-field filtering is the caller's job.
    """
    connection_string = get_connection_string()
    if not connection_string:
        logger.error("Error: vendor database connection string is missing or empty.")
        return None

    today = today or date.today()
    rows = _run_query(connection_string, ALERT_QUERY, (today, *ALERT_DAY_OFFSETS))

    records = [
        VendorRecord(
            vendor_name=_to_text(name),
            document_number=_to_text(document),
            expiry_date=_to_date(expiry),
            email=_to_text(email),
        )
        for name, document, expiry, email in rows
    ]
    logger.info(f"Fetched {len(records)} vendor row(s) due for an expiry alert")
    return records


def fetch_report_records(today: Optional[date] = None) -> Optional[List[VendorRecord]]:
    """
    Fetch vendors expiring more than 20 days from today, plus vendors with no expiry date.

    DATEDIFF on a NULL expiry is NULL, so those rows are selected by an explicit
    IS NULL branch and returned with MISSING_EXPIRY_DATE.

    Args:
        today: Reference date for the day difference (defaults to today)

    Returns:
        List of VendorRecord, or None if the connection string is not configured
    """
    connection_string = get_connection_string()
    if not connection_string:
        logger.error("Error: vendor database connection string is missing or empty.")
        return None

    today = today or date.today()
    rows = _run_query(connection_string, REPORT_QUERY, (today, REPORT_MIN_DAYS_AHEAD))

    records = []
    for name, document, expiry, email in rows:
        expiry_date = _to_date(expiry)
        records.append(VendorRecord(
            vendor_name=_to_text(name),
            document_number=_to_text(document),
            expiry_date=expiry_date if expiry_date is not None else MISSING_EXPIRY_DATE,
            email=_to_text(email),
        ))
    logger.info(f"Fetched {len(records)} vendor row(s) for the expiry report")
    return records
